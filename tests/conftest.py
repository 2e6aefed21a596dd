import os
import tempfile

# Settings are read at import time; keep test runs away from the working tree
_scratch = tempfile.mkdtemp(prefix="idlink-tests-")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_scratch, "uploads"))
os.environ.setdefault("MAIL_PREVIEW_DIR", os.path.join(_scratch, "previews"))
os.environ.setdefault("MAIL_MODE", "unconfigured")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import aiosmtplib
import pytest
from fastapi.testclient import TestClient
from fastapi_mail import FastMail
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from idlink import settings
from idlink.database.config.db import Base, get_db
from idlink.database.models.auth import User
from idlink.main import app
from idlink.utils.auth import get_password_hash
from idlink.utils.smtp import Mailer, MailerMode, build_mail_config
from idlink.workflow import get_mailer

SENDER = "registrar@idlink.edu"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def unconfigured_mailer():
    return Mailer(mode=MailerMode.UNCONFIGURED, from_email=SENDER)


@pytest.fixture
def recording_mailer():
    """Configured SMTP mailer with delivery suppressed."""
    return Mailer(
        mode=MailerMode.SMTP,
        from_email=SENDER,
        config=build_mail_config(SENDER, suppress_send=True),
    )


@pytest.fixture
def outbox(recording_mailer):
    with FastMail(recording_mailer.config).record_messages() as outbox:
        yield outbox


@pytest.fixture
def failing_mailer(monkeypatch):
    """SMTP mailer whose server refuses the connection."""
    async def refuse(self, *args, **kwargs):
        raise ConnectionRefusedError("Connection refused")

    monkeypatch.setattr(aiosmtplib.SMTP, "connect", refuse)
    return Mailer(
        mode=MailerMode.SMTP,
        from_email=SENDER,
        config=build_mail_config(SENDER, port=2525, username="registrar", password="not-used"),
    )


@pytest.fixture
def sandbox_mailer(tmp_path):
    return Mailer(
        mode=MailerMode.SANDBOX,
        from_email=SENDER,
        preview_dir=str(tmp_path / "previews"),
        preview_base_url="http://testserver",
    )


@pytest.fixture
def plain_text():
    def _plain_text(message):
        for part in message.walk():
            if part.get_content_type() == "text/plain":
                return part.get_payload(decode=True).decode(part.get_content_charset() or "utf-8")
        return ""

    return _plain_text


@pytest.fixture
def mailer(unconfigured_mailer):
    return unconfigured_mailer


@pytest.fixture
def client(engine, mailer, upload_dir):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(idno="2021-001", fullname="Juan Dela Cruz", email=None, role="student",
                   password="secret123", course="BSIT", year="3"):
        user = User(
            idno=idno,
            fullname=fullname,
            email=email or f"{idno}@school.edu",
            password=get_password_hash(password),
            role=role,
            course=course,
            year=year,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user
