# Import models in dependency order
from idlink.database.models.auth import User, UserRole, APPLICANT_ROLES
from idlink.database.models.application import (
    Application,
    ApplicationStatus,
    PENDING_STATUSES,
)

__all__ = [
    "User",
    "UserRole",
    "APPLICANT_ROLES",
    "Application",
    "ApplicationStatus",
    "PENDING_STATUSES",
]
