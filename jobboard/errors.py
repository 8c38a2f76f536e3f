"""
Failure taxonomy shared by the resource services and both API surfaces.

Services raise exactly one of these; the REST layer turns ``status_code`` and
``message`` into a ``{"error": ...}`` response, the GraphQL layer surfaces the
message as a GraphQL error.
"""
from __future__ import annotations


class JobBoardError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(JobBoardError):
    status_code = 400
    default_message = "Invalid request."


class AuthenticationError(JobBoardError):
    status_code = 401
    default_message = "Not authenticated."


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid email or password."


class ForbiddenError(JobBoardError):
    status_code = 403
    default_message = "Access denied."


class NotFoundError(JobBoardError):
    status_code = 404
    default_message = "Not found."


class ConflictError(JobBoardError):
    status_code = 409
    default_message = "Conflict."


class InternalError(JobBoardError):
    pass
