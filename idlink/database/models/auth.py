import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from idlink.database.config.db import Base


class UserRole(str, enum.Enum):
    """User role enumeration."""

    STUDENT = "student"
    EMPLOYEE = "employee"
    STAFF = "staff"


# Roles whose rows appear as applicants in listings
APPLICANT_ROLES = (UserRole.STUDENT.value, UserRole.EMPLOYEE.value)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    idno = Column(String(50), unique=True, nullable=False, index=True)
    fullname = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash, never serialized
    course = Column(String(100), nullable=True)
    year = Column(String(20), nullable=True)
    role = Column(
        Enum(*[e.value for e in UserRole], name="user_role"),
        nullable=False,
        default=UserRole.STUDENT.value,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    applications = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )
