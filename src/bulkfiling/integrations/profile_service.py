"""Firm profile service client: read-only lookup of registered users."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from bulkfiling.core.config import ProfileServiceConfig
from bulkfiling.core.exceptions import IntegrationError
from bulkfiling.models.firm import FirmUser

SERVICE = "profile-service"


class ProfileServiceClient:
    """Implements ``IProfileService`` over ``GET /firms/{firm_id}/users``."""

    def __init__(
        self, config: ProfileServiceConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=config.base_url, timeout=config.timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_firm_users(self, firm_id: str) -> list[FirmUser]:
        path = f"/firms/{firm_id}/users"
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            body = response.json()
            users = body.get("users", []) if isinstance(body, dict) else body
            return [FirmUser.model_validate(u) for u in users]
        except httpx.HTTPStatusError as exc:
            raise IntegrationError(
                SERVICE, f"GET {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            raise IntegrationError(SERVICE, f"GET {path}: {exc}") from exc
