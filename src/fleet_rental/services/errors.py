"""Service layer errors."""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """Base error for service-layer failures."""


class ValidationError(ServiceError):
    """A business rule rejected the request."""


class NotFoundError(ServiceError):
    """A command targeted a document that does not exist."""

    def __init__(self, entity: str, entity_id: Optional[str]) -> None:
        super().__init__(f"{entity} {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class PermissionDeniedError(ServiceError):
    """The current user lacks the administrator role."""
