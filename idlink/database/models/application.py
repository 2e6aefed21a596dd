from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum as SQLEnum, Index
)
from sqlalchemy.orm import relationship

from idlink.database.config.db import Base


# ==================== ENUMS ====================

class ApplicationStatus(str, Enum):
    """Status of an ID application. Any status may be written over any other."""
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    READY_FOR_PICKUP = "ready_for_pickup"
    RETURNED = "returned"
    REJECTED = "rejected"
    EXPIRED = "expired"


PENDING_STATUSES = (ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW)


# ==================== MODELS ====================

class Application(Base):
    """One ID application or revalidation request."""
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Human-readable application code (e.g., "APP2026-482913")
    app_id = Column(String(30), unique=True, nullable=False)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Null for revalidation requests
    department = Column(String(150), nullable=True)

    status = Column(
        SQLEnum(
            ApplicationStatus,
            name="application_status",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
        default=ApplicationStatus.SUBMITTED,
        index=True,
    )
    remarks = Column(Text, nullable=True)

    # ==================== UPLOADED ARTIFACTS ====================
    # Generated filenames inside UPLOAD_DIR
    photo = Column(String(255), nullable=True)
    signature = Column(String(255), nullable=True)
    cor = Column(String(255), nullable=True)

    # ==================== DATES ====================
    date_submitted = Column(Date, nullable=False, default=date.today)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # ==================== RELATIONSHIPS ====================
    user = relationship("User", back_populates="applications")

    __table_args__ = (
        Index("ix_application_status_created", "status", "created_at"),
    )
