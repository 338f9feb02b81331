"""In-memory collaborators for local development and tests."""

from __future__ import annotations

from typing import Any

from bulkfiling.core.exceptions import IntegrationError
from bulkfiling.models.firm import FirmUser


class MemoryCRMClient:
    """Records every call; ``fail_emails`` makes upserts for those emails fail."""

    def __init__(self, fail_emails: set[str] | None = None, location_id: str = "loc-test") -> None:
        self.location_id = location_id
        self.fail_emails = fail_emails or set()
        self.contacts: dict[str, dict[str, Any]] = {}
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.notes: list[tuple[str, str]] = []
        self._by_email: dict[str, str] = {}

    async def upsert_contact(self, payload: dict[str, Any]) -> str:
        email = payload.get("email", "")
        if email in self.fail_emails:
            raise IntegrationError("memory-crm", f"upsert rejected for {email}", status_code=400)
        contact_id = self._by_email.get(email) if email else None
        if contact_id is None:
            contact_id = f"contact-{len(self.contacts) + 1}"
            if email:
                self._by_email[email] = contact_id
        self.contacts[contact_id] = payload
        return contact_id

    async def update_contact(self, contact_id: str, payload: dict[str, Any]) -> None:
        if contact_id not in self.contacts:
            raise IntegrationError("memory-crm", f"unknown contact {contact_id}", status_code=404)
        self.updates.append((contact_id, payload))

    async def add_note(self, contact_id: str, body: str) -> None:
        if contact_id not in self.contacts:
            raise IntegrationError("memory-crm", f"unknown contact {contact_id}", status_code=404)
        self.notes.append((contact_id, body))


class MemoryProfileService:
    def __init__(self, users: dict[str, list[FirmUser]] | None = None, fail: bool = False) -> None:
        self._users = users or {}
        self._fail = fail

    async def get_firm_users(self, firm_id: str) -> list[FirmUser]:
        if self._fail:
            raise IntegrationError("memory-profile", "profile service unavailable")
        return list(self._users.get(firm_id, []))
