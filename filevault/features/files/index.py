from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from filevault.domain.errors import (
    DuplicateContentError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from filevault.features.files.dedup import is_duplicate
from filevault.features.files.hashing import hash_content
from filevault.features.files.models import VersionRecord, check_filename, check_identifier, storage_id_for
from filevault.features.files.versioning import next_version
from filevault.infra.blob_codec import decode_blob, encode_blob
from filevault.infra.logging_config import get_logger
from filevault.infra.storage import BlobStore

if TYPE_CHECKING:
    from filevault.features.files.persistence import SnapshotStore

log = get_logger(__name__)


class FileIndex:
    """In-memory set of version records, keyed by identifier.

    Every public method takes the same lock, so writers are serialized and
    readers never see a half-applied mutation. Each mutation rewrites the
    snapshot before returning.
    """

    def __init__(
        self,
        *,
        blobs: BlobStore,
        snapshot: SnapshotStore | None = None,
        files: Mapping[str, list[VersionRecord]] | None = None,
    ) -> None:
        self._blobs = blobs
        self._snapshot = snapshot
        self._files: dict[str, list[VersionRecord]] = {
            k: sorted(v, key=lambda r: r.version) for k, v in (files or {}).items() if v
        }
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(v) for v in self._files.values())

    def attach_snapshot(self, snapshot: SnapshotStore) -> None:
        with self._lock:
            self._snapshot = snapshot

    # -- writes ----------------------------------------------------------

    def ingest_from_bytes(
        self, identifier: str, data: bytes, filename: str, *, persist_blob: bool = True
    ) -> VersionRecord:
        return self._ingest(identifier, data, filename, persist_blob=persist_blob)

    def ingest_from_path(
        self,
        identifier: str,
        path: Path,
        *,
        filename: str | None = None,
        persist_blob: bool = True,
    ) -> VersionRecord:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise StorageError(f"cannot read {path}: {e}") from e
        return self._ingest(identifier, data, filename or path.name, persist_blob=persist_blob)

    def _ingest(self, identifier: str, data: bytes, filename: str, *, persist_blob: bool) -> VersionRecord:
        problem = check_identifier(identifier) or check_filename(filename)
        if problem:
            raise ValidationError(problem)
        sha1, md5 = hash_content(data)

        with self._lock:
            existing = self._files.get(identifier, [])
            if is_duplicate(identifier, sha1, md5, existing):
                raise DuplicateContentError(identifier, sha1, md5)

            version = next_version(identifier, existing)
            record = VersionRecord.create(
                identifier=identifier,
                version=version,
                sha1=sha1,
                md5=md5,
                filename=filename or storage_id_for(identifier, version),
            )

            blob = encode_blob(data, record.filename)
            if persist_blob:
                self._blobs.write(record.storage_id, blob)

            self._files.setdefault(identifier, []).append(record)
            log.info("stored %s (%s, %d bytes)", record.storage_id, record.filename, len(data))
            # A failed save leaves the record in place; the caller sees StorageError.
            self.save()
            return record

    def remove(self, identifier: str, version: int) -> VersionRecord:
        """Delete one version and its blob. Later versions keep their numbers."""
        with self._lock:
            record = self._lookup(identifier, version)
            if not self._blobs.delete(record.storage_id):
                log.warning("blob for %s was already missing", record.storage_id)

            bucket = self._files[identifier]
            bucket.remove(record)
            if not bucket:
                del self._files[identifier]
            log.info("removed %s", record.storage_id)
            self.save()
            return record

    def discard(self, identifier: str, version: int) -> VersionRecord:
        """Drop a record from memory only; its blob stays where it is."""
        with self._lock:
            record = self._lookup(identifier, version)
            bucket = self._files[identifier]
            bucket.remove(record)
            if not bucket:
                del self._files[identifier]
            self.save()
            return record

    def save(self) -> None:
        with self._lock:
            if self._snapshot is None:
                return
            try:
                self._snapshot.save(self._files)
            except StorageError as e:
                log.error("snapshot save failed: %s", e)
                raise

    # -- reads -----------------------------------------------------------

    def get_by_version(self, identifier: str, version: int) -> VersionRecord:
        with self._lock:
            return self._lookup(identifier, version)

    def list_records(self) -> list[VersionRecord]:
        with self._lock:
            return [r for ident in sorted(self._files) for r in self._files[ident]]

    def find_by_hash(self, digest: str) -> VersionRecord:
        with self._lock:
            for r in self._iter_records():
                if r.matches_hash(digest):
                    return r
        raise NotFoundError(f"hash {digest}")

    def read_content(self, identifier: str, version: int) -> tuple[str, bytes]:
        return self.read_contents(identifier, [version])[0]

    def read_contents(self, identifier: str, versions: list[int]) -> list[tuple[str, bytes]]:
        """Decode the blobs of several versions under one lock.

        All versions are looked up before any blob is read, so a missing
        version fails with NotFoundError without touching the disk.
        """

        with self._lock:
            records = [self._lookup(identifier, v) for v in versions]
            return [decode_blob(self._blobs.read(r.storage_id)) for r in records]

    def snapshot(self) -> dict[str, list[VersionRecord]]:
        with self._lock:
            return {k: list(v) for k, v in self._files.items()}

    def _lookup(self, identifier: str, version: int) -> VersionRecord:
        for r in self._files.get(identifier, []):
            if r.version == version:
                return r
        raise NotFoundError(f"{identifier} version {version}")

    def _iter_records(self) -> Iterator[VersionRecord]:
        for records in self._files.values():
            yield from records
