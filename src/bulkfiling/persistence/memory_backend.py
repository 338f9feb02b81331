"""In-memory backends for local runs and unit tests -- dict-backed fakes."""

from __future__ import annotations

from typing import Any

from bulkfiling.core.exceptions import FileStoreError, PricingScheduleNotFoundError


class MemoryPricingStore:
    """Dict-backed IPricingStore; ``None`` is the GLOBAL schedule."""

    def __init__(self, schedules: dict[str | None, dict[str, Any]] | None = None) -> None:
        self._schedules: dict[str | None, dict[str, Any]] = dict(schedules or {})

    def get_schedule(self, firm_id: str | None = None) -> dict[str, Any]:
        if firm_id in self._schedules:
            return self._schedules[firm_id]
        if None in self._schedules:
            return self._schedules[None]
        raise PricingScheduleNotFoundError(f"No pricing schedule for firm_id={firm_id!r}")

    def put_schedule(self, schedule: dict[str, Any], firm_id: str | None = None) -> None:
        self._schedules[firm_id] = schedule


class MemoryFileStore:
    """Dict-backed IFileStore."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def read(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError as exc:
            raise FileStoreError(f"No such upload: {path!r}") from exc

    def write(self, path: str, data: bytes, content_type: str | None = None) -> str:
        self._files[path] = data
        return path

    def list_files(self, prefix: str) -> list[str]:
        return sorted(k for k in self._files if k.startswith(prefix))
