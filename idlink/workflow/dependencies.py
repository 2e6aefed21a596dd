from fastapi import Depends, Request
from sqlalchemy.orm import Session

from idlink.database.config.db import get_db
from idlink.utils.smtp import Mailer
from idlink.workflow.service import ApplicationWorkflow


def get_mailer(request: Request) -> Mailer:
    """The mailer built at startup and stored on the application state."""
    return request.app.state.mailer


def get_workflow(
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> ApplicationWorkflow:
    return ApplicationWorkflow(db, mailer)
