import logging

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from idlink.database.config.db import get_db
from idlink.database.models.auth import User
from idlink.schema.auth import (
    RegisterUser,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    UserCountResponse,
)
from idlink.utils.auth import verify_password, get_password_hash
from idlink.utils.errors import Conflict, NotFound, StoreError, Unauthorized
from idlink.workflow import ApplicationWorkflow, get_workflow

logger = logging.getLogger(__name__)

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/register", response_model=RegisterResponse)
def register(
    body: RegisterUser,
    db: Session = Depends(get_db),
):
    """
    Register a new student, employee or staff account.
    """
    # Check if email or ID number is already taken
    existing_user = (
        db.query(User)
        .filter(or_(User.email == body.email, User.idno == body.idno))
        .first()
    )
    if existing_user:
        raise Conflict("Email or ID already exists")

    new_user = User(
        idno=body.idno,
        fullname=body.fullname,
        email=body.email,
        password=get_password_hash(body.password),
        course=body.course or None,
        year=body.year or None,
        role=body.role.value,
    )

    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email or ID already exists")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while registering %s: %s", body.idno, exc)
        raise StoreError("Database error") from exc

    logger.info("Registered %s as %s", new_user.idno, new_user.role)
    return RegisterResponse(
        fullname=new_user.fullname,
        role=new_user.role,
        idno=new_user.idno,
        email=new_user.email,
    )


@auth_router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Check credentials and return the profile the dashboards need.
    No token is issued; the client keeps the returned identity.
    """
    user = db.query(User).filter(User.email == body.email).first()
    if not user:
        raise NotFound("User not found")

    if not verify_password(body.password, user.password):
        raise Unauthorized("Incorrect password")

    return LoginResponse(role=user.role, fullname=user.fullname, idno=user.idno)


@auth_router.get("/users/count", response_model=UserCountResponse)
def count_users(workflow: ApplicationWorkflow = Depends(get_workflow)):
    """
    Number of registered accounts across all roles.
    """
    return UserCountResponse(count=workflow.count_users())
