from idlink.workflow.service import ApplicationWorkflow
from idlink.workflow.dependencies import get_mailer, get_workflow

__all__ = ["ApplicationWorkflow", "get_mailer", "get_workflow"]
