"""Shared test doubles -- re-export memory backends and collaborators."""

from __future__ import annotations

from bulkfiling.integrations.mock_clients import MemoryCRMClient, MemoryProfileService
from bulkfiling.persistence.memory_backend import MemoryFileStore, MemoryPricingStore

__all__ = ["MemoryCRMClient", "MemoryFileStore", "MemoryPricingStore", "MemoryProfileService"]
