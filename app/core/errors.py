"""Domain errors raised by the service layer.

Routers let these propagate; the handlers registered in ``app.main`` turn them
into HTTP responses.
"""

from enum import Enum
from typing import Optional


class LimitedResource(str, Enum):
    """Resources bounded by a business's package tier and add-ons."""
    BUSINESS = "business"
    PROPERTY = "property"
    UNIT = "unit"
    TENANT = "tenant"
    TEAM_MEMBER = "team_member"


class DomainError(Exception):
    """Base class for business-rule failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """A scoped record does not exist (or is not visible to the caller)."""

    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class InvalidStateError(DomainError):
    """The record's current state does not allow the requested transition."""

    status_code = 400


class PermissionDeniedError(DomainError):
    """The caller may not perform this action."""

    status_code = 403


class LimitReached(DomainError):
    """Creation refused because the business is at its package limit.

    ``str(err)`` is ``LIMIT_REACHED:<resource>`` so clients can keep matching
    on the prefix.
    """

    status_code = 402
    PREFIX = "LIMIT_REACHED:"

    def __init__(
        self,
        resource: LimitedResource,
        current: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        super().__init__(f"{self.PREFIX}{resource.value}")
        self.resource = resource
        self.current = current
        self.limit = limit
