from pathlib import PurePosixPath
from urllib.parse import quote

from fastapi import HTTPException, UploadFile
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from filevault.domain.errors import (
    DuplicateContentError,
    FileVaultError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from filevault.features.files.diff import diff_versions
from filevault.features.files.index import FileIndex
from filevault.features.files.schemas import record_to_dict
from filevault.infra.logging_config import get_logger

log = get_logger(__name__)


def parse_version(raw: str) -> int:
    try:
        version = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("invalid_version")
    if version < 1:
        raise ValidationError("invalid_version")
    return version


def _to_http(e: FileVaultError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail="not_found")
    if isinstance(e, DuplicateContentError):
        return HTTPException(status_code=409, detail="duplicate_content")
    if isinstance(e, StorageError):
        log.error("storage failure: %s", e)
        return HTTPException(status_code=500, detail="storage_error")
    log.error("unexpected store failure: %s", e)
    return HTTPException(status_code=500, detail="internal_error")


def _content_disposition(filename: str) -> str:
    name = PurePosixPath(filename.replace("\\", "/")).name or "download"
    if name.isascii():
        safe = name.replace('"', "_")
        return f'attachment; filename="{safe}"'
    return f"attachment; filename*=UTF-8''{quote(name)}"


class FilesService:
    def __init__(self, *, index: FileIndex) -> None:
        self._index = index

    async def upload(self, *, identifier: str, file: UploadFile | None) -> dict[str, object]:
        if not identifier:
            raise HTTPException(status_code=400, detail="identifier_required")
        if file is None:
            raise HTTPException(status_code=400, detail="file_required")

        data = await file.read()
        try:
            record = await run_in_threadpool(
                self._index.ingest_from_bytes, identifier, data, file.filename or ""
            )
        except FileVaultError as e:
            raise _to_http(e)
        return record_to_dict(record)

    async def list_files(self) -> list[dict[str, object]]:
        records = await run_in_threadpool(self._index.list_records)
        return [record_to_dict(r) for r in records]

    async def download(self, *, identifier: str, version: str) -> Response:
        try:
            v = parse_version(version)
            filename, data = await run_in_threadpool(self._index.read_content, identifier, v)
        except FileVaultError as e:
            raise _to_http(e)
        return Response(
            content=data,
            media_type="application/octet-stream",
            headers={"Content-Disposition": _content_disposition(filename)},
        )

    async def diff(self, *, identifier: str, version: str) -> PlainTextResponse:
        try:
            v = parse_version(version)
            text = await run_in_threadpool(diff_versions, self._index, identifier, v)
        except FileVaultError as e:
            raise _to_http(e)
        return PlainTextResponse(text)

    async def by_hash(self, *, digest: str) -> dict[str, object]:
        try:
            record = await run_in_threadpool(self._index.find_by_hash, digest)
        except FileVaultError as e:
            raise _to_http(e)
        return record_to_dict(record)

    async def delete(self, *, identifier: str, version: str) -> dict[str, object]:
        try:
            v = parse_version(version)
            record = await run_in_threadpool(self._index.remove, identifier, v)
        except FileVaultError as e:
            raise _to_http(e)
        return record_to_dict(record)
