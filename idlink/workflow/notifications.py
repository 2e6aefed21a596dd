"""Email templates for application status notifications."""
from datetime import date
from typing import Optional, Tuple

from idlink.database.models.application import ApplicationStatus

SIGNATURE = "Please check the Track Status page for updates.\n\nRegards,\nIDLink Team"


def status_update_email(
    fullname: str, status: ApplicationStatus, remarks: Optional[str]
) -> Tuple[str, str]:
    subject = "Application Update"
    body = (
        f"Hello {fullname},\n\n"
        f"Your application status is now {status.value}.\n\n"
        f"Remarks: {remarks or ''}\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def pickup_scheduled_email(
    fullname: str, pickup_date: date, batch: Optional[str], remarks: Optional[str]
) -> Tuple[str, str]:
    subject = "ID Pickup Scheduled"
    batch_note = f" (Batch: {batch})" if batch else ""
    body = (
        f"Hello {fullname},\n\n"
        f"Your ID is scheduled for pickup on {pickup_date.isoformat()}{batch_note}.\n\n"
        f"Remarks: {remarks or ''}\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def build_notification(
    fullname: str,
    status: ApplicationStatus,
    remarks: Optional[str],
    pickup_date: Optional[date] = None,
    batch: Optional[str] = None,
) -> Tuple[str, str]:
    """Pick the pickup template when a pickup date is given, else the generic one."""
    if pickup_date:
        return pickup_scheduled_email(fullname, pickup_date, batch, remarks)
    return status_update_email(fullname, status, remarks)
