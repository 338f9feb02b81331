"""Protocol interfaces for the collaborators of the intake core.

All inter-layer communication uses these Protocols -- structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from bulkfiling.models.firm import FirmUser


# ---------------------------------------------------------------------------
# Persistence: Pricing Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IPricingStore(Protocol):
    """Admin-configured fee schedules, firm-specific with GLOBAL fallback."""

    def get_schedule(self, firm_id: str | None = None) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# Persistence: File Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IFileStore(Protocol):
    """S3-compatible upload storage interface."""

    def read(self, path: str) -> bytes: ...

    def write(self, path: str, data: bytes, content_type: str | None = None) -> str: ...

    def list_files(self, prefix: str) -> list[str]: ...


# ---------------------------------------------------------------------------
# Contact management (CRM)
# ---------------------------------------------------------------------------

@runtime_checkable
class ICRMClient(Protocol):
    """Contact-management integration fed after a successful checkout."""

    async def upsert_contact(self, payload: dict[str, Any]) -> str: ...

    async def update_contact(self, contact_id: str, payload: dict[str, Any]) -> None: ...

    async def add_note(self, contact_id: str, body: str) -> None: ...


# ---------------------------------------------------------------------------
# Profile service
# ---------------------------------------------------------------------------

@runtime_checkable
class IProfileService(Protocol):
    """Read-only lookup of a firm's pre-registered authorized users."""

    async def get_firm_users(self, firm_id: str) -> list[FirmUser]: ...
