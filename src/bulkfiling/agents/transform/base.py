"""Shared row-to-entity production loop for both schema normalizers."""

from __future__ import annotations

from typing import Iterator

from bulkfiling.core.logging import get_logger
from bulkfiling.core.types import Row, Table
from bulkfiling.models.entity import EntityRecord
from bulkfiling.models.intake import ImportResult, SchemaKind

logger = get_logger(__name__)


class RecordProducer:
    """Builds canonical entities from the data rows of an entity table.

    Subclasses implement :meth:`build`. Callers either :meth:`run` the whole
    table or drive :meth:`step` themselves over :meth:`data_rows` (the intake
    agent does this to yield between chunks).
    """

    schema_kind: SchemaKind

    def __init__(self, table: Table) -> None:
        self._table = table
        self.result = ImportResult(schema_kind=self.schema_kind)

    @property
    def total(self) -> int:
        return max(len(self._table) - 1, 0)

    def data_rows(self) -> Iterator[tuple[int, Row]]:
        """Data rows with their 1-based row numbers (the header is row 0)."""
        for index in range(1, len(self._table)):
            yield index, self._table[index]

    def build(self, index: int, row: Row) -> EntityRecord | None:
        raise NotImplementedError

    def warn(self, message: str, **context: object) -> None:
        self.result.warnings.append(message)
        logger.warning(message, schema=self.schema_kind, **context)

    def step(self, index: int, row: Row) -> EntityRecord | None:
        """Produce one entity; rejected rows are counted, never raised."""
        entity = self.build(index, row)
        if entity is None:
            self.result.skipped_rows += 1
            logger.debug("row_skipped", schema=self.schema_kind, row=index, cells=len(row))
            return None
        if not entity.has_identity:
            self.result.incomplete_count += 1
        self.result.entities.append(entity)
        return entity

    def run(self) -> ImportResult:
        for index, row in self.data_rows():
            self.step(index, row)
        logger.info(
            "entities_produced",
            schema=self.schema_kind,
            entities=len(self.result.entities),
            incomplete=self.result.incomplete_count,
            skipped=self.result.skipped_rows,
        )
        return self.result
