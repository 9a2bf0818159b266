"""
Domain error taxonomy.

Services raise these; the handlers registered in main.py turn them into
problem-style JSON responses:

    ValidationError  -> 400 validation_error
    NotFoundError    -> 404 not_found
    ConflictError    -> 409 conflict

Anything else is an unexpected failure and is rendered as a generic 500.
"""

from typing import Any, Optional


class DomainError(Exception):
    status_code: int = 500
    kind: str = "server_error"
    title: str = "Unexpected error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "title": self.title,
            "status": self.status_code,
            "detail": self.message,
            "context": self.context or None,
        }


class ValidationError(DomainError):
    """Malformed input or a violated business rule. Always client-fixable."""

    status_code = 400
    kind = "validation_error"
    title = "Validation failed"


class NotFoundError(DomainError):
    status_code = 404
    kind = "not_found"
    title = "Resource not found"

    def __init__(self, resource: str, resource_id: Optional[Any] = None, message: Optional[str] = None):
        if message is None:
            if resource_id is None:
                message = f"{resource} was not found."
            else:
                message = f"{resource} with id={resource_id} was not found."
        super().__init__(message, resource=resource, id=resource_id)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(DomainError):
    """Double-booking, duplicate email, second contract for a booking."""

    status_code = 409
    kind = "conflict"
    title = "Conflict"
