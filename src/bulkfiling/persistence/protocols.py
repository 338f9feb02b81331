"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from bulkfiling.core.protocols import IFileStore, IPricingStore

__all__ = ["IFileStore", "IPricingStore"]
