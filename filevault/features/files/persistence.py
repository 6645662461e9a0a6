"""Snapshot file handling and index recovery.

The snapshot is a JSON document ``{"files": {identifier: [record, ...]}}``
rewritten in place after every mutation. When it is missing or does not
decode, the index is rebuilt from the blob directory alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from filevault.domain.errors import (
    DuplicateContentError,
    SnapshotDecodeError,
    StorageError,
    ValidationError,
)
from filevault.features.files.index import FileIndex
from filevault.features.files.models import VersionRecord, parse_storage_id, storage_id_for
from filevault.features.files.schemas import SnapshotDoc
from filevault.infra.blob_codec import decode_blob
from filevault.infra.logging_config import get_logger
from filevault.infra.storage import BlobStore

log = get_logger(__name__)


class SnapshotStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def save(self, files: Mapping[str, list[VersionRecord]]) -> None:
        # Plain overwrite: a crash mid-write leaves a snapshot that only a
        # rebuild can recover from.
        payload = SnapshotDoc.from_files(files).model_dump_json(indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"snapshot write failed for {self._path}: {e}") from e

    def read(self) -> dict[str, list[VersionRecord]]:
        """Return the stored record mapping.

        Raises FileNotFoundError when no snapshot exists and
        SnapshotDecodeError when the file does not hold a valid record set.
        """

        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            raise
        except OSError as e:
            raise StorageError(f"snapshot read failed for {self._path}: {e}") from e

        if not raw.strip():
            raise SnapshotDecodeError(f"{self._path} is empty")
        try:
            doc = SnapshotDoc.model_validate_json(raw)
        except PydanticValidationError as e:
            raise SnapshotDecodeError(f"{self._path}: {e.error_count()} invalid field(s)") from e

        files: dict[str, list[VersionRecord]] = {}
        for identifier, items in doc.files.items():
            records = [item.to_record() for item in items]
            for r in records:
                if r.identifier != identifier:
                    raise SnapshotDecodeError(f"record {r.storage_id} filed under {identifier!r}")
                if r.storage_id != storage_id_for(r.identifier, r.version):
                    raise SnapshotDecodeError(f"record {r.storage_id} does not match version {r.version}")
            if records:
                files[identifier] = records
        return files


def load_index(snapshot: SnapshotStore, blobs: BlobStore) -> FileIndex:
    try:
        files = snapshot.read()
    except FileNotFoundError:
        log.info("snapshot %s not found, rebuilding from %s", snapshot.path, blobs.root)
        return rebuild_index(snapshot, blobs)
    except SnapshotDecodeError as e:
        log.warning("snapshot unreadable (%s), rebuilding from %s", e, blobs.root)
        return rebuild_index(snapshot, blobs)

    index = FileIndex(blobs=blobs, snapshot=snapshot, files=files)
    log.info("loaded %d records from %s", len(index), snapshot.path)
    return index


def rebuild_index(snapshot: SnapshotStore | None, blobs: BlobStore) -> FileIndex:
    """Re-ingest every blob in the blob directory.

    Blobs are replayed per identifier in ascending on-disk version order, so a
    directory without gaps keeps its numbering. Where deletions left gaps the
    survivors are renumbered and their files renamed to match. Blobs that
    cannot be parsed, read, or decoded, and blobs whose new name is already
    taken on disk, are skipped with a warning and left in place.
    """

    index = FileIndex(blobs=blobs)

    entries: list[tuple[str, int, str]] = []
    for storage_id in blobs.list_ids():
        parsed = parse_storage_id(storage_id)
        if parsed is None:
            log.warning("skipping %s: name is not <identifier>_v<N>", blobs.path_for(storage_id))
            continue
        entries.append((parsed[0], parsed[1], storage_id))
    entries.sort()

    skipped = 0
    for identifier, _, storage_id in entries:
        try:
            filename, data = decode_blob(blobs.read(storage_id))
            record = index.ingest_from_bytes(identifier, data, filename, persist_blob=False)
        except (StorageError, DuplicateContentError, ValidationError) as e:
            log.warning("skipping blob %s: %s", storage_id, e)
            skipped += 1
            continue

        if record.storage_id != storage_id:
            try:
                blobs.rename(storage_id, record.storage_id)
            except StorageError as e:
                # Leave the blob untouched and keep it out of the index rather
                # than point a record at a file holding other content.
                index.discard(record.identifier, record.version)
                log.warning("skipping blob %s: cannot move it to %s: %s", storage_id, record.storage_id, e)
                skipped += 1
            else:
                log.info("renumbered %s to %s", storage_id, record.storage_id)

    log.info("rebuilt index: %d records, %d blobs skipped", len(index), skipped)

    if snapshot is not None:
        index.attach_snapshot(snapshot)
        try:
            index.save()
        except StorageError as e:
            # The rebuilt index still serves; the next mutation retries the save.
            log.error("could not write rebuilt snapshot: %s", e)
    return index
