"""
Domain errors raised by the workflow and auth layers.

Each error carries the HTTP status it maps to; the handler registered in
``idlink.main`` renders it as ``{"message": ...}``.
"""
from fastapi import status


class IDLinkError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(IDLinkError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(IDLinkError):
    # Duplicate unique keys are reported as 400 to match the existing clients
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(IDLinkError):
    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(IDLinkError):
    status_code = status.HTTP_401_UNAUTHORIZED


class StoreError(IDLinkError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class MailerNotConfigured(IDLinkError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotificationFailure(IDLinkError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
