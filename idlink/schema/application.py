from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import Optional
from datetime import date, datetime

from idlink.database.models.application import ApplicationStatus

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


# ==================== SUBMISSION ====================

class ApplicationSubmission(BaseModel):
    """Fields of the multipart application form (files are handled separately)."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    id_type: Optional[str] = Field(None, max_length=50, description="new or replacement")
    department: str = Field(..., min_length=1, max_length=150)
    student_number: Optional[str] = Field(None, max_length=50, description="Owner ID number")
    email: Optional[str] = Field(None, max_length=150, description="Owner email")
    phone: Optional[str] = Field(None, max_length=30)


class ApplicationArtifacts(BaseModel):
    """Generated filenames of the stored uploads."""
    photo: Optional[str] = None
    signature: Optional[str] = None
    cor: Optional[str] = None


class ApplicationCreatedResponse(BaseModel):
    message: str = "Application submitted successfully"
    app_id: str


class RevalidationRequest(BaseModel):
    idno: str = Field(..., min_length=1, description="ID number or email of the owner")
    fullname: Optional[str] = None
    # Sent by the dashboards; the owner's stored role is what counts
    role: Optional[str] = None


class RevalidationSummary(BaseModel):
    id: int
    id_display: str
    fullname: Optional[str]
    status: ApplicationStatus
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class RevalidationResponse(BaseModel):
    message: str = "Revalidation submitted"
    application: RevalidationSummary


# ==================== STATUS UPDATE ====================

class StatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    remarks: Optional[str] = None
    notify: bool = False
    pickup_date: Optional[date] = None
    batch: Optional[str] = Field(None, max_length=50)


class StatusUpdateResponse(BaseModel):
    message: str
    preview: Optional[str] = None
    error: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# ==================== READ MODELS ====================

class ApplicationSummary(BaseModel):
    """Row of the applications listing, joined with its owner."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    id_display: str
    user_id: int
    idno: str
    fullname: str
    email: str
    course: Optional[str]
    year: Optional[str]
    department: Optional[str]
    status: ApplicationStatus
    submitted_on: date = Field(..., alias="date")
    created_at: datetime
    remarks: Optional[str]
    photo: Optional[str]
    signature: Optional[str]
    cor: Optional[str]

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class ApplicationDetail(BaseModel):
    """Full application record with owner identity fields."""
    id: int
    app_id: str
    user_id: int
    department: Optional[str]
    status: ApplicationStatus
    remarks: Optional[str]
    photo: Optional[str]
    signature: Optional[str]
    cor: Optional[str]
    date_submitted: date
    created_at: datetime
    idno: str
    fullname: str
    email: str
    course: Optional[str]
    year: Optional[str]


class ApplicationStats(BaseModel):
    pending: int
    approved_today: int
    returned: int
    total_users: int
