"""
Outgoing mail for application notifications, sent with fastapi-mail.

A ``Mailer`` is built once at startup from settings and passed to whatever
needs to send mail. It runs in one of three modes:

- ``smtp``: deliver through the configured SMTP server.
- ``sandbox``: render the message with sending suppressed, save it as an
  ``.eml`` file under the preview directory and return its URL.
- ``unconfigured``: no transport; ``send`` raises ``MailerNotConfigured``.
"""
import logging
import os
import uuid
from enum import Enum
from typing import Optional

from aiosmtplib import SMTPException
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors
from pydantic import BaseModel

from idlink import settings
from idlink.utils.errors import MailerNotConfigured, NotificationFailure

logger = logging.getLogger(__name__)


class MailerMode(str, Enum):
    UNCONFIGURED = "unconfigured"
    SMTP = "smtp"
    SANDBOX = "sandbox"


class DeliveryResult(BaseModel):
    recipient: str
    subject: str
    message_id: Optional[str] = None
    preview: Optional[str] = None


def build_mail_config(
    from_email: str,
    server: str = "localhost",
    port: int = 587,
    username: str = "",
    password: str = "",
    use_ssl: bool = False,
    timeout: int = 10,
    suppress_send: bool = False,
) -> ConnectionConfig:
    """Build a fastapi-mail ConnectionConfig. SSL and STARTTLS are mutually exclusive."""
    return ConnectionConfig(
        MAIL_USERNAME=username,
        MAIL_PASSWORD=password,
        MAIL_FROM=from_email,
        MAIL_PORT=port,
        MAIL_SERVER=server,
        MAIL_STARTTLS=not use_ssl,
        MAIL_SSL_TLS=use_ssl,
        USE_CREDENTIALS=bool(username),
        SUPPRESS_SEND=int(suppress_send),
        TIMEOUT=timeout,
    )


def _get_mail_config() -> ConnectionConfig:
    """Build ConnectionConfig from application settings."""
    return build_mail_config(
        from_email=settings.FROM_EMAIL,
        server=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        use_ssl=settings.SMTP_SECURE,
        timeout=settings.SMTP_TIMEOUT,
    )


def resolve_mode(configured_mode: Optional[str], has_smtp: bool, environment: str) -> MailerMode:
    """Pick the mailer mode from an explicit setting or from what is configured."""
    if configured_mode:
        return MailerMode(configured_mode.lower())
    if has_smtp:
        return MailerMode.SMTP
    if environment != "production":
        return MailerMode.SANDBOX
    return MailerMode.UNCONFIGURED


class Mailer:
    def __init__(
        self,
        mode: MailerMode,
        from_email: str,
        config: Optional[ConnectionConfig] = None,
        preview_dir: Optional[str] = None,
        preview_base_url: str = "",
    ):
        if mode == MailerMode.SMTP and config is None:
            raise ValueError("SMTP mode requires a mail connection config")
        if mode == MailerMode.SANDBOX:
            if not preview_dir:
                raise ValueError("Sandbox mode requires a preview directory")
            config = build_mail_config(from_email, suppress_send=True)
        self.mode = mode
        self.from_email = from_email
        self.config = config
        self.preview_dir = preview_dir
        self.preview_url_prefix = f"{preview_base_url.rstrip('/')}/previews"

    @classmethod
    def from_settings(cls) -> "Mailer":
        """Build the mailer from environment settings."""
        has_smtp = bool(settings.SMTP_HOST and settings.SMTP_USER and settings.SMTP_PASS)
        mode = resolve_mode(settings.MAIL_MODE, has_smtp, settings.ENVIRONMENT)

        config = None
        if mode == MailerMode.SMTP:
            if not has_smtp:
                raise ValueError("MAIL_MODE=smtp requires SMTP_HOST, SMTP_USER and SMTP_PASS")
            config = _get_mail_config()

        mailer = cls(
            mode=mode,
            from_email=settings.FROM_EMAIL,
            config=config,
            preview_dir=settings.MAIL_PREVIEW_DIR,
            preview_base_url=settings.PUBLIC_BASE_URL,
        )
        if mode == MailerMode.UNCONFIGURED:
            logger.warning(
                "Mail transporter not configured. Set SMTP_HOST, SMTP_USER and SMTP_PASS "
                "to enable email notifications."
            )
        else:
            logger.info("Mail transporter configured in %s mode", mode.value)
        return mailer

    @property
    def configured(self) -> bool:
        return self.mode != MailerMode.UNCONFIGURED

    def status(self) -> dict:
        return {
            "mode": self.mode.value,
            "configured": self.configured,
            "from_email": self.from_email if self.configured else None,
        }

    async def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        """
        Send a plain-text email.

        Raises:
            MailerNotConfigured: no transport is available.
            NotificationFailure: the message could not be built, or the
                transport rejected or failed the delivery.
        """
        if not self.configured:
            raise MailerNotConfigured("Mail transporter not configured")
        if "\r" in subject or "\n" in subject:
            raise NotificationFailure("Header values may not contain linefeed or carriage return characters")

        fm = FastMail(self.config)
        try:
            message = MessageSchema(
                subject=subject,
                recipients=[to],
                body=body,
                subtype=MessageType.plain,
            )
            # Dispatch fires synchronously after delivery, so ours is the last one recorded
            with fm.record_messages() as outbox:
                await fm.send_message(message)
        except (ConnectionErrors, SMTPException, OSError, ValueError) as exc:
            logger.error("Failed to send email to %s: %s", to, exc)
            raise NotificationFailure(str(exc)) from exc

        sent = outbox[-1] if outbox else None
        preview = None
        if self.mode == MailerMode.SANDBOX and sent is not None:
            preview = self._write_preview(sent)

        logger.info("Email '%s' sent to %s", subject, to)
        if preview:
            logger.info("Preview URL: %s", preview)
        return DeliveryResult(
            recipient=to,
            subject=subject,
            message_id=sent.get("Message-ID") if sent is not None else None,
            preview=preview,
        )

    def _write_preview(self, message) -> str:
        os.makedirs(self.preview_dir, exist_ok=True)
        filename = f"{uuid.uuid4().hex}.eml"
        with open(os.path.join(self.preview_dir, filename), "wb") as out:
            out.write(message.as_bytes())
        return f"{self.preview_url_prefix}/{filename}"
