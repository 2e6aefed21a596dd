from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class SendEmailRequest(BaseModel):
    to: EmailStr
    subject: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)

    @field_validator("subject")
    @classmethod
    def single_line_subject(cls, value: str) -> str:
        if "\r" in value or "\n" in value:
            raise ValueError("subject must be a single line")
        return value


class TestEmailRequest(BaseModel):
    to: EmailStr


class MailResponse(BaseModel):
    message: str = "Email sent"
    preview: Optional[str] = None


class MailerStatusResponse(BaseModel):
    mode: str
    configured: bool
    from_email: Optional[str] = None
