"""Upload intake endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from bulkfiling.agents.transform.manual import ManualEntry, build_manual_entity
from bulkfiling.core.exceptions import FileStoreError
from bulkfiling.models.entity import EntityRecord
from bulkfiling.models.intake import ImportResult

router = APIRouter(tags=["intake"])


def _render(result: ImportResult) -> dict[str, Any]:
    body = result.model_dump(mode="json")
    body["imported_count"] = result.imported_count
    body["matched_applicant_count"] = result.matched_applicant_count
    body["summary"] = result.summary()
    return body


@router.post("/parse")
async def parse_upload(
    request: Request,
    filename: str = Query(..., min_length=1),
    firm_id: str | None = None,
) -> dict[str, Any]:
    """Parse a raw upload body (CSV/TSV text or an .xlsx workbook)."""
    data = await request.body()
    result = await request.app.state.intake.ingest(data, filename, firm_id=firm_id)
    return _render(result)


@router.post("/uploads/{key:path}")
async def parse_stored_upload(request: Request, key: str, firm_id: str | None = None) -> dict[str, Any]:
    """Parse an upload already stored in the file store."""
    try:
        result = await request.app.state.intake.ingest_from_store(key, firm_id=firm_id)
    except FileStoreError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _render(result)


@router.post("/manual")
async def add_manual_client(entry: ManualEntry) -> EntityRecord:
    """Validate one hand-entered client and return its canonical record."""
    return build_manual_entity(entry)
