from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from idlink.schema.mail import (
    MailResponse,
    MailerStatusResponse,
    SendEmailRequest,
    TestEmailRequest,
)
from idlink.utils.errors import NotificationFailure
from idlink.utils.smtp import Mailer
from idlink.workflow import get_mailer

mail_router = APIRouter(tags=["Mail"])


def _delivery_failed(message: str, exc: NotificationFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message, "error": exc.message},
    )


@mail_router.post("/send-email", response_model=MailResponse, response_model_exclude_none=True)
async def send_email(
    body: SendEmailRequest,
    mailer: Mailer = Depends(get_mailer),
):
    """
    Send a custom email. Fails with 500 when no transporter is configured.
    """
    try:
        result = await mailer.send(body.to, body.subject, body.text)
    except NotificationFailure as exc:
        return _delivery_failed("Failed to send email", exc)
    return MailResponse(preview=result.preview)


@mail_router.post("/test-email", response_model=MailResponse, response_model_exclude_none=True)
async def send_test_email(
    body: TestEmailRequest,
    mailer: Mailer = Depends(get_mailer),
):
    try:
        result = await mailer.send(
            body.to,
            "IDLink Test Email",
            "This is a test email from IDLink backend.",
        )
    except NotificationFailure as exc:
        return _delivery_failed("Failed to send test email", exc)
    return MailResponse(preview=result.preview)


@mail_router.get("/mailer-status", response_model=MailerStatusResponse)
def mailer_status(mailer: Mailer = Depends(get_mailer)):
    return mailer.status()
