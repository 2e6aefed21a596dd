import asyncio

import pytest

from idlink.utils.errors import MailerNotConfigured, NotificationFailure
from idlink.utils.smtp import Mailer, MailerMode, resolve_mode


@pytest.mark.parametrize(
    "configured_mode, has_smtp, environment, expected",
    [
        (None, True, "production", MailerMode.SMTP),
        (None, False, "development", MailerMode.SANDBOX),
        (None, False, "production", MailerMode.UNCONFIGURED),
        ("unconfigured", True, "development", MailerMode.UNCONFIGURED),
        ("SANDBOX", True, "production", MailerMode.SANDBOX),
    ],
)
def test_resolve_mode(configured_mode, has_smtp, environment, expected):
    assert resolve_mode(configured_mode, has_smtp, environment) == expected


def test_mode_requirements():
    with pytest.raises(ValueError):
        Mailer(mode=MailerMode.SMTP, from_email="registrar@idlink.edu")
    with pytest.raises(ValueError):
        Mailer(mode=MailerMode.SANDBOX, from_email="registrar@idlink.edu")


def test_unconfigured_send_raises(unconfigured_mailer):
    assert unconfigured_mailer.configured is False
    with pytest.raises(MailerNotConfigured):
        asyncio.run(unconfigured_mailer.send("juan@school.edu", "Hi", "Body"))


def test_connection_errors_become_notification_failure(failing_mailer):
    with pytest.raises(NotificationFailure) as excinfo:
        asyncio.run(failing_mailer.send("juan@school.edu", "Hi", "Body"))

    assert "Connection refused" in excinfo.value.message


def test_multiline_subject_becomes_notification_failure(recording_mailer, outbox):
    with pytest.raises(NotificationFailure):
        asyncio.run(recording_mailer.send("juan@school.edu", "Hi\nBcc: x@example.com", "Body"))

    assert outbox == []


def test_sandbox_writes_preview(sandbox_mailer, tmp_path):
    result = asyncio.run(sandbox_mailer.send("juan@school.edu", "Hi", "Body"))

    assert result.recipient == "juan@school.edu"
    saved = list((tmp_path / "previews").iterdir())
    assert len(saved) == 1
    assert result.preview == f"http://testserver/previews/{saved[0].name}"
    assert b"Subject: Hi" in saved[0].read_bytes()


def test_sent_message_headers(recording_mailer, outbox, plain_text):
    result = asyncio.run(recording_mailer.send("juan@school.edu", "Subject line", "Body text"))

    (message,) = outbox
    assert "registrar@idlink.edu" in message["From"]
    assert "juan@school.edu" in message["To"]
    assert message["Subject"] == "Subject line"
    assert plain_text(message).strip() == "Body text"
    assert result.preview is None


# ==================== ENDPOINTS ====================

def test_mailer_status_unconfigured(client):
    resp = client.get("/api/mailer-status")

    assert resp.json() == {"mode": "unconfigured", "configured": False, "from_email": None}


def test_send_email_unconfigured(client):
    resp = client.post(
        "/api/send-email",
        json={"to": "juan@school.edu", "subject": "Hi", "text": "Body"},
    )

    assert resp.status_code == 500
    assert resp.json()["message"] == "Mail transporter not configured"


def test_send_email_missing_fields(client):
    resp = client.post("/api/send-email", json={"to": "juan@school.edu"})

    assert resp.status_code == 400


@pytest.mark.parametrize("subject", ["Hi\nBcc: x@example.com", "Hi\r\nX-Extra: 1"])
def test_send_email_rejects_header_breaks_in_subject(client, subject):
    resp = client.post(
        "/api/send-email",
        json={"to": "juan@school.edu", "subject": subject, "text": "Body"},
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing required fields"


def test_test_email_missing_recipient(client):
    assert client.post("/api/test-email", json={}).status_code == 400


class TestConfiguredEndpoints:
    @pytest.fixture
    def mailer(self, recording_mailer):
        return recording_mailer

    def test_mailer_status(self, client):
        resp = client.get("/api/mailer-status")

        assert resp.json() == {
            "mode": "smtp",
            "configured": True,
            "from_email": "registrar@idlink.edu",
        }

    def test_send_email(self, client, outbox):
        resp = client.post(
            "/api/send-email",
            json={"to": "juan@school.edu", "subject": "Reminder", "text": "Bring your old ID."},
        )

        assert resp.status_code == 200
        assert resp.json() == {"message": "Email sent"}
        (message,) = outbox
        assert message["Subject"] == "Reminder"

    def test_test_email(self, client, outbox, plain_text):
        resp = client.post("/api/test-email", json={"to": "juan@school.edu"})

        assert resp.status_code == 200
        (message,) = outbox
        assert message["Subject"] == "IDLink Test Email"
        assert "This is a test email from IDLink backend." in plain_text(message)


class TestFailingEndpoints:
    @pytest.fixture
    def mailer(self, failing_mailer):
        return failing_mailer

    def test_send_email_failure(self, client):
        resp = client.post(
            "/api/send-email",
            json={"to": "juan@school.edu", "subject": "Hi", "text": "Body"},
        )

        assert resp.status_code == 500
        body = resp.json()
        assert body["message"] == "Failed to send email"
        assert "Connection refused" in body["error"]


class TestSandboxEndpoints:
    @pytest.fixture
    def mailer(self, sandbox_mailer):
        return sandbox_mailer

    def test_test_email_returns_absolute_preview(self, client):
        resp = client.post("/api/test-email", json={"to": "juan@school.edu"})

        preview = resp.json()["preview"]
        assert preview.startswith("http://testserver/previews/")
