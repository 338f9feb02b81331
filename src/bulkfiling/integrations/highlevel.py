"""HighLevel contacts API client (httpx, async)."""

from __future__ import annotations

from typing import Any

import httpx

from bulkfiling.core.config import CRMConfig
from bulkfiling.core.exceptions import IntegrationError
from bulkfiling.core.logging import get_logger

logger = get_logger(__name__)

SERVICE = "highlevel"


class HighLevelClient:
    """Implements ``ICRMClient`` against ``/contacts``.

    ``transport`` is injectable so tests can use ``httpx.MockTransport``.
    """

    def __init__(self, config: CRMConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Version": config.api_version,
                "Accept": "application/json",
            },
        )

    @property
    def location_id(self) -> str:
        return self._config.location_id

    async def __aenter__(self) -> HighLevelClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise IntegrationError(
                SERVICE,
                f"{method} {path} returned {exc.response.status_code}: {exc.response.text[:200]}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise IntegrationError(SERVICE, f"{method} {path}: {exc}") from exc
        return response

    async def upsert_contact(self, payload: dict[str, Any]) -> str:
        """Create or update a contact by email; returns the contact id."""
        response = await self._request("POST", "/contacts/upsert", payload)
        data = response.json()
        contact_id = (data.get("contact") or {}).get("id") or data.get("id")
        if not contact_id:
            raise IntegrationError(SERVICE, "upsert response carried no contact id")
        logger.debug("crm_contact_upserted", contact_id=contact_id)
        return contact_id

    async def update_contact(self, contact_id: str, payload: dict[str, Any]) -> None:
        await self._request("PUT", f"/contacts/{contact_id}", payload)
        logger.debug("crm_contact_updated", contact_id=contact_id)

    async def add_note(self, contact_id: str, body: str) -> None:
        await self._request("POST", f"/contacts/{contact_id}/notes", {"body": body})
        logger.debug("crm_note_added", contact_id=contact_id)
