"""Type aliases used across the bulk filing core."""

from __future__ import annotations

Row = list[str]
Table = list[Row]
