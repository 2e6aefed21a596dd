from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from idlink.database.models.application import ApplicationStatus
from idlink.schema.application import (
    ApplicationSubmission,
    ApplicationCreatedResponse,
    ApplicationDetail,
    ApplicationStats,
    ApplicationSummary,
    MessageResponse,
    RevalidationRequest,
    RevalidationResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from idlink.workflow import ApplicationWorkflow, get_workflow

application_router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
)


@application_router.get("", response_model=List[ApplicationSummary])
def list_applications(
    user: Optional[str] = None,
    status: Optional[ApplicationStatus] = None,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    List student and employee applications, newest first.
    Pass `user` (an ID number) to restrict to one owner.
    """
    return workflow.list_applications(owner_idno=user, status=status)


@application_router.get("/stats", response_model=ApplicationStats)
def application_stats(workflow: ApplicationWorkflow = Depends(get_workflow)):
    """
    Counters for the staff dashboard.
    """
    return workflow.dashboard_stats()


@application_router.get("/{application_id}", response_model=ApplicationDetail)
def get_application(
    application_id: int,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    Get a single application with its owner's identity.
    """
    return workflow.get_application(application_id)


@application_router.post(
    "", response_model=ApplicationCreatedResponse, status_code=status.HTTP_201_CREATED
)
def create_application(
    first_name: str = Form(..., alias="firstName"),
    last_name: str = Form(..., alias="lastName"),
    middle_name: Optional[str] = Form(None, alias="middleName"),
    id_type: Optional[str] = Form(None, alias="idType"),
    department: str = Form(...),
    student_number: Optional[str] = Form(None, alias="studentNumber"),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    signature: Optional[UploadFile] = File(None),
    cor: Optional[UploadFile] = File(None),
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    Submit a new ID application with its photo, signature and COR uploads.

    The owner is matched by `email` or `studentNumber`.
    """
    submission = ApplicationSubmission(
        first_name=first_name,
        last_name=last_name,
        middle_name=middle_name,
        id_type=id_type,
        department=department,
        student_number=student_number,
        email=email,
        phone=phone,
    )
    application = workflow.create_application(
        submission,
        uploads={"photo": photo, "signature": signature, "cor": cor},
    )
    return ApplicationCreatedResponse(app_id=application.app_id)


@application_router.post(
    "/revalidate", response_model=RevalidationResponse, status_code=status.HTTP_201_CREATED
)
def request_revalidation(
    body: RevalidationRequest,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    Open a revalidation request for the user with this ID number or email.
    """
    summary = workflow.create_revalidation(body.idno, fullname=body.fullname)
    return RevalidationResponse(application=summary)


@application_router.put(
    "/{application_id}",
    response_model=StatusUpdateResponse,
    response_model_exclude_none=True,
)
async def update_application_status(
    application_id: int,
    body: StatusUpdateRequest,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    Set status and remarks, optionally emailing the owner.

    Email problems never fail the request: the status change is kept and
    the message says what happened to the notification.
    """
    return await workflow.update_status(application_id, body)


@application_router.delete("/{application_id}", response_model=MessageResponse)
def delete_application(
    application_id: int,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    """
    Permanently delete an application.
    """
    workflow.delete_application(application_id)
    return MessageResponse(message="Application deleted successfully")
