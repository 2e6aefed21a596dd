import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

from idlink.database.models.auth import UserRole

# Format check only: campus intranet domains such as *.local must register
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("value is not a valid email address")
    return value


CampusEmail = Annotated[str, AfterValidator(_check_email)]


class RegisterUser(BaseModel):
    idno: str = Field(..., min_length=1, max_length=50, description="School or employee ID number")
    fullname: str = Field(..., min_length=1, max_length=150)
    email: CampusEmail
    password: str = Field(..., min_length=1)
    role: UserRole
    course: Optional[str] = Field(None, max_length=100)
    year: Optional[str] = Field(None, max_length=20)


class RegisterResponse(BaseModel):
    message: str = "Registration successful"
    fullname: str
    role: UserRole
    idno: str
    email: str


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    role: UserRole
    fullname: str
    idno: str


class UserCountResponse(BaseModel):
    count: int
