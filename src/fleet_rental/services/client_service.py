"""Client service."""

from __future__ import annotations

from typing import Optional

from fleet_rental.config import UNKNOWN_LABEL
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import (
    MAX_DRIVERS,
    Client,
    ClientPatch,
    ClientType,
    apply_patch,
)
from fleet_rental.repositories.client_repo import ClientRepo
from fleet_rental.services.errors import NotFoundError, ValidationError


def client_display_name(client: Optional[Client]) -> str:
    if client is None:
        return UNKNOWN_LABEL
    if client.client_type == ClientType.COMPANY:
        return client.company_name or UNKNOWN_LABEL
    name = f"{client.last_name} {client.first_name}".strip()
    return name or UNKNOWN_LABEL


def client_tax_reference(client: Client) -> str:
    """National id for individuals, tax registration for companies."""
    if client.client_type == ClientType.COMPANY:
        return client.tax_id or ""
    return client.national_id or ""


class ClientService:
    """Service for client records."""

    def __init__(self, store: DocumentStore) -> None:
        self._repo = ClientRepo(store)

    def list_clients(self) -> list[Client]:
        return self._repo.list_all()

    def get_client(self, client_id: str) -> Optional[Client]:
        return self._repo.get_by_id(client_id)

    def add_client(self, client: Client) -> Client:
        self._validate(client)
        return self._repo.create(client)

    def update_client(self, client_id: str, patch: ClientPatch) -> Client:
        existing = self._repo.get_by_id(client_id)
        if existing is None:
            raise NotFoundError("Client", client_id)
        updated = apply_patch(existing, patch)
        self._validate(updated)
        self._repo.apply(client_id, patch)
        return updated

    def delete_client(self, client_id: str) -> None:
        if not self._repo.delete(client_id):
            raise NotFoundError("Client", client_id)

    def _validate(self, client: Client) -> None:
        if client.client_type == ClientType.COMPANY:
            if not (client.company_name or "").strip():
                raise ValidationError("Company name is required for company clients.")
        elif not client.last_name.strip():
            raise ValidationError("Client last name is required.")
        if len(client.drivers) > MAX_DRIVERS:
            raise ValidationError(f"A client can have at most {MAX_DRIVERS} drivers.")
