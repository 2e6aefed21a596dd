"""
Application status workflow.

``ApplicationWorkflow`` owns every read and write on the ``applications``
table. Data changes of one operation are committed together; the optional
notification email runs after the commit and never undoes it.

Status changes are deliberately permissive: any status can be written over
any other. Which role may move an application where is decided by the
dashboards, not here.
"""
import logging
from datetime import date
from typing import List, Mapping, Optional, Tuple

from fastapi import UploadFile
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from idlink.database.models.application import (
    Application,
    ApplicationStatus,
    PENDING_STATUSES,
)
from idlink.database.models.auth import User, APPLICANT_ROLES
from idlink.schema.application import (
    ApplicationArtifacts,
    ApplicationDetail,
    ApplicationStats,
    ApplicationSubmission,
    ApplicationSummary,
    RevalidationSummary,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from idlink.utils.application import generate_application_code
from idlink.utils.errors import InvalidInput, NotFound, NotificationFailure, StoreError
from idlink.utils.smtp import Mailer
from idlink.utils.uploads import ARTIFACT_FIELDS, save_upload
from idlink.workflow.notifications import build_notification

logger = logging.getLogger(__name__)


def to_summary(application: Application, user: User) -> ApplicationSummary:
    return ApplicationSummary(
        id=application.id,
        id_display=application.app_id,
        user_id=user.id,
        idno=user.idno,
        fullname=user.fullname,
        email=user.email,
        course=user.course,
        year=user.year,
        department=application.department,
        status=application.status,
        submitted_on=application.date_submitted,
        created_at=application.created_at,
        remarks=application.remarks,
        photo=application.photo,
        signature=application.signature,
        cor=application.cor,
    )


def to_detail(application: Application, user: User) -> ApplicationDetail:
    return ApplicationDetail(
        id=application.id,
        app_id=application.app_id,
        user_id=application.user_id,
        department=application.department,
        status=application.status,
        remarks=application.remarks,
        photo=application.photo,
        signature=application.signature,
        cor=application.cor,
        date_submitted=application.date_submitted,
        created_at=application.created_at,
        idno=user.idno,
        fullname=user.fullname,
        email=user.email,
        course=user.course,
        year=user.year,
    )


class ApplicationWorkflow:
    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer

    # ==================== HELPERS ====================

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database error while %s: %s", action, exc)
            raise StoreError("Database error") from exc

    def _find_owner(self, email: Optional[str] = None, idno: Optional[str] = None) -> User:
        conditions = []
        if email:
            conditions.append(User.email == email)
        if idno:
            conditions.append(User.idno == idno)
        if not conditions:
            raise InvalidInput("Email or ID number is required")

        user = self.db.query(User).filter(or_(*conditions)).order_by(User.id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def _joined(self):
        return self.db.query(Application, User).join(User, User.id == Application.user_id)

    def _insert(self, application: Application, action: str) -> Application:
        self.db.add(application)
        self._commit(action)
        self.db.refresh(application)
        return application

    # ==================== READS ====================

    def list_applications(
        self,
        owner_idno: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> List[ApplicationSummary]:
        """
        List applications of students and employees, newest first.

        Args:
            owner_idno: Only return rows owned by this ID number
            status: Only return rows currently in this status
        """
        query = self._joined().filter(User.role.in_(APPLICANT_ROLES))
        if owner_idno:
            query = query.filter(User.idno == owner_idno)
        if status:
            query = query.filter(Application.status == status)

        query = query.order_by(Application.created_at.desc(), Application.id.desc())
        return [to_summary(application, user) for application, user in query.all()]

    def get_application(self, application_id: int) -> ApplicationDetail:
        row = self._joined().filter(Application.id == application_id).first()
        if not row:
            raise NotFound("Application not found")
        application, user = row
        return to_detail(application, user)

    def count_users(self) -> int:
        return self.db.query(User).count()

    def dashboard_stats(self, today: Optional[date] = None) -> ApplicationStats:
        """Counters shown on the staff dashboard, over the same rows as the listing."""
        today = today or date.today()
        eligible = self._joined().filter(User.role.in_(APPLICANT_ROLES))

        pending = eligible.filter(Application.status.in_(PENDING_STATUSES)).count()
        returned = eligible.filter(Application.status == ApplicationStatus.RETURNED).count()
        approved = eligible.filter(Application.status == ApplicationStatus.APPROVED).all()
        approved_today = sum(
            1
            for application, _ in approved
            if application.date_submitted == today
            or (application.created_at and application.created_at.date() == today)
        )

        return ApplicationStats(
            pending=pending,
            approved_today=approved_today,
            returned=returned,
            total_users=self.count_users(),
        )

    # ==================== WRITES ====================

    def create_application(
        self,
        submission: ApplicationSubmission,
        uploads: Optional[Mapping[str, Optional[UploadFile]]] = None,
    ) -> Application:
        """
        Create a submitted application for the user matching the form's email or ID number.

        Uploads are written to disk only once the owner is known, and before
        the row is inserted.
        """
        owner = self._find_owner(email=submission.email, idno=submission.student_number)

        uploads = uploads or {}
        artifacts = ApplicationArtifacts(
            **{field: save_upload(uploads.get(field), field) for field in ARTIFACT_FIELDS}
        )

        application = Application(
            app_id=generate_application_code(self.db),
            user_id=owner.id,
            department=submission.department,
            status=ApplicationStatus.SUBMITTED,
            remarks=f"Application submitted by {submission.first_name} {submission.last_name}",
            photo=artifacts.photo,
            signature=artifacts.signature,
            cor=artifacts.cor,
        )
        application = self._insert(application, "creating application")
        logger.info("Application %s submitted for %s", application.app_id, owner.idno)
        return application

    def create_revalidation(self, lookup: str, fullname: Optional[str] = None) -> RevalidationSummary:
        """Open a revalidation request; ``lookup`` may be an ID number or an email."""
        if not lookup:
            raise InvalidInput("idno is required")
        owner = self._find_owner(email=lookup, idno=lookup)

        name = owner.fullname or fullname
        remarks = f"Revalidation requested by {name}" if name else "Revalidation requested"

        application = Application(
            app_id=generate_application_code(self.db),
            user_id=owner.id,
            department=None,
            status=ApplicationStatus.SUBMITTED,
            remarks=remarks,
        )
        application = self._insert(application, "creating revalidation")
        logger.info("Revalidation %s requested for %s", application.app_id, owner.idno)

        return RevalidationSummary(
            id=application.id,
            id_display=application.app_id,
            fullname=owner.fullname,
            status=application.status,
            created_at=application.created_at,
        )

    async def update_status(self, application_id: int, update: StatusUpdateRequest) -> StatusUpdateResponse:
        """
        Overwrite status and remarks, then optionally notify the owner.

        The status write is committed before any email is attempted. A
        failed or skipped notification is reported in the response message
        and never turns into an error.
        """
        application = self.db.query(Application).filter(Application.id == application_id).first()
        if application:
            application.status = update.status
            application.remarks = update.remarks
            self._commit("updating application status")
            logger.info("Application %s set to %s", application.app_id, update.status.value)

        if not update.notify:
            return StatusUpdateResponse(message="Application updated successfully")

        owner = self._notification_target(application_id)
        if not self.mailer.configured:
            return StatusUpdateResponse(
                message="Application updated and user notified (no transporter)"
            )

        subject, body = build_notification(
            owner.fullname,
            update.status,
            update.remarks,
            pickup_date=update.pickup_date,
            batch=update.batch,
        )
        try:
            result = await self.mailer.send(owner.email, subject, body)
        except NotificationFailure as exc:
            logger.warning("Application %s updated but notification failed: %s", application_id, exc.message)
            return StatusUpdateResponse(
                message="Application updated but failed to send email",
                error=exc.message,
            )

        return StatusUpdateResponse(
            message="Application updated and user notified",
            preview=result.preview,
        )

    def _notification_target(self, application_id: int) -> User:
        row: Optional[Tuple[Application, User]] = (
            self._joined().filter(Application.id == application_id).first()
        )
        if not row:
            raise NotFound("User not found for application")
        return row[1]

    def delete_application(self, application_id: int) -> None:
        """Hard delete; deleting a missing row is not an error."""
        deleted = (
            self.db.query(Application)
            .filter(Application.id == application_id)
            .delete(synchronize_session=False)
        )
        self._commit("deleting application")
        if deleted:
            logger.info("Application %s deleted", application_id)
