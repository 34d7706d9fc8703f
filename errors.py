"""Error taxonomy shared by the service layer and both HTTP surfaces."""

from http import HTTPStatus
from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors that map onto a fixed HTTP status."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if message is not None:
            self.message = message
        self.context = dict(context or {})
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(AppError):
    """Missing or out-of-range listing field."""

    status = HTTPStatus.BAD_REQUEST
    message = "Missing/invalid fields"


class InvalidIdentifierError(AppError):
    """Identifier string is not a well-formed ObjectId."""

    status = HTTPStatus.BAD_REQUEST
    message = "Invalid ID"


class NotFoundError(AppError):
    status = HTTPStatus.NOT_FOUND
    message = "Not found"


class AuthenticationError(AppError):
    """Bad credentials. The message never says which part was wrong."""

    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class AuthorizationError(AppError):
    """Anonymous access to a protected route."""

    status = HTTPStatus.UNAUTHORIZED
    message = "Unauthorized"


class StoreUnavailableError(AppError):
    status = HTTPStatus.SERVICE_UNAVAILABLE
    message = "Database unavailable"


class TemplateNotFoundError(AppError):
    message = "Template not found"
