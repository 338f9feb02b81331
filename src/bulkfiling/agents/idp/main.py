"""IntakeAgent -- parse an upload and produce canonical entities in chunks.

Production runs on the event loop: after every ``chunk_size`` entities the
agent yields (``asyncio.sleep(0)``) and reports progress, so large uploads do
not starve other requests.
"""

from __future__ import annotations

import asyncio

from bulkfiling.agents.base import BaseAgent
from bulkfiling.agents.idp.file_parser import parse_upload
from bulkfiling.core.config import AppSettings
from bulkfiling.core.exceptions import BulkFilingError, InvalidFileError
from bulkfiling.core.protocols import IFileStore, IProfileService
from bulkfiling.models.firm import FirmUser
from bulkfiling.models.intake import ImportResult, ProgressCallback, UploadProgress


class IntakeAgent(BaseAgent):
    def __init__(
        self,
        *,
        settings: AppSettings,
        profile_service: IProfileService | None = None,
        file_store: IFileStore | None = None,
    ) -> None:
        super().__init__(settings=settings)
        self._profiles = profile_service
        self._files = file_store

    async def _firm_users(self, firm_id: str | None) -> list[FirmUser]:
        if not firm_id or self._profiles is None:
            return []
        try:
            return await self._profiles.get_firm_users(firm_id)
        except BulkFilingError as exc:
            self._log.warning("firm_users_unavailable", firm_id=firm_id, error=str(exc))
            return []

    async def ingest(
        self,
        data: bytes,
        filename: str,
        firm_id: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Parse ``data`` and build the entity list.

        Raises:
            InvalidFileError: the upload is too large or cannot be parsed.
        """
        def report(stage: str, processed: int = 0, total: int = 0) -> None:
            if progress is not None:
                progress(UploadProgress(stage=stage, processed=processed, total=total))

        limit = self._settings.parser.max_upload_bytes
        if len(data) > limit:
            raise InvalidFileError(filename, f"upload is {len(data)} bytes, limit is {limit}")

        report("reading", total=len(data))
        schema = parse_upload(data, filename)
        report("parsing", processed=schema.data_row_count, total=schema.data_row_count)

        producer = schema.start(await self._firm_users(firm_id))
        chunk = max(1, self._settings.parser.chunk_size)
        for processed, (index, row) in enumerate(producer.data_rows(), start=1):
            producer.step(index, row)
            if processed % chunk == 0:
                report("normalizing", processed=processed, total=producer.total)
                await asyncio.sleep(0)

        result = producer.result
        report("done", processed=producer.total, total=producer.total)
        self._log.info(
            "upload_ingested",
            filename=filename,
            schema=result.schema_kind,
            imported=result.imported_count,
            incomplete=result.incomplete_count,
            skipped=result.skipped_rows,
            matched_applicants=result.matched_applicant_count,
        )
        return result

    async def ingest_from_store(
        self,
        path: str,
        firm_id: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Ingest an upload previously written to the file store under ``path``."""
        if self._files is None:
            raise InvalidFileError(path, "no upload store configured")
        data = await asyncio.to_thread(self._files.read, path)
        return await self.ingest(data, path.rsplit("/", 1)[-1], firm_id=firm_id, progress=progress)
