"""Bulk filing exception hierarchy."""

from __future__ import annotations


class BulkFilingError(Exception):
    """Base exception for all bulk filing errors."""


class InvalidFileError(BulkFilingError):
    """Upload could not be parsed at all (too few rows, unreadable, unsupported)."""

    def __init__(self, filename: str, message: str) -> None:
        self.filename = filename
        self.reason = message
        super().__init__(f"Invalid file {filename!r}: {message}")


class PricingScheduleNotFoundError(BulkFilingError):
    """No pricing schedule stored for the firm or GLOBAL."""


class FileStoreError(BulkFilingError):
    """Upload storage operation failed."""


class IntegrationError(BulkFilingError):
    """An external collaborator (CRM, profile service) call failed."""

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} call failed: {message}")


class ManualEntryError(BulkFilingError):
    """A hand-entered client is missing required fields."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Please complete all required fields: {', '.join(missing)}")
