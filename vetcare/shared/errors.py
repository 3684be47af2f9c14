"""
Domain exceptions

Services and repositories raise these; main.py translates them into the
JSON error envelope with the matching HTTP status code.
"""

from typing import Any, Optional


class DomainError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    code = "domain_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DomainError):
    """Input has the wrong shape or is out of range"""

    status_code = 400
    code = "validation_error"


class NotFoundError(DomainError):
    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(message, {"resource": resource, "id": resource_id})


class ConflictError(DomainError):
    """Operation clashes with the current state of stored records"""

    status_code = 409
    code = "conflict"


class UpstreamError(DomainError):
    """Database or other backing service failed"""

    status_code = 503
    code = "upstream_error"
