"""Base agent with common dependency wiring and lifecycle patterns."""

from __future__ import annotations

from typing import Any

from bulkfiling.core.config import AppSettings
from bulkfiling.core.logging import get_logger


class BaseAgent:
    """Common base for all bulk filing agents.

    Settings are injected at construction time; each agent logs under its
    own class name.
    """

    def __init__(self, *, settings: AppSettings) -> None:
        self._settings = settings
        self._log = get_logger(self.__class__.__name__)

    async def health_check(self) -> dict[str, Any]:
        """Return agent health status."""
        return {
            "agent": self.__class__.__name__,
            "status": "healthy",
            "environment": self._settings.environment,
        }
