import os
from pathlib import Path

from filevault.domain.errors import StorageError

BLOB_SUFFIX = ".zip"


class BlobStore:
    """Flat directory of ``<storage_id>.zip`` files."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, storage_id: str) -> Path:
        if not storage_id or any(c in storage_id for c in ("/", "\\", "\0")) or storage_id in (".", ".."):
            raise StorageError(f"storage id {storage_id!r} does not name a file in {self._root}")
        return self._root / f"{storage_id}{BLOB_SUFFIX}"

    def write(self, storage_id: str, blob: bytes) -> Path:
        path = self.path_for(storage_id)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(blob)
        except OSError as e:
            raise StorageError(f"write failed for {path}: {e}") from e
        return path

    def read(self, storage_id: str) -> bytes:
        path = self.path_for(storage_id)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"read failed for {path}: {e}") from e

    def delete(self, storage_id: str) -> bool:
        """Remove the blob; returns False when it was already gone."""
        path = self.path_for(storage_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"delete failed for {path}: {e}") from e
        return True

    def rename(self, old_id: str, new_id: str) -> None:
        """Move a blob to a new storage id. An existing target is never replaced."""
        src, dst = self.path_for(old_id), self.path_for(new_id)
        try:
            os.link(src, dst)
        except FileExistsError as e:
            raise StorageError(f"rename {src} -> {dst} refused: target exists") from e
        except OSError as e:
            raise StorageError(f"rename {src} -> {dst} failed: {e}") from e
        try:
            os.unlink(src)
        except OSError as e:
            # Undo the link so a failed rename leaves only the old name.
            dst.unlink(missing_ok=True)
            raise StorageError(f"rename {src} -> {dst} failed: {e}") from e

    def list_ids(self) -> list[str]:
        """Storage ids of every blob file, in directory listing order."""
        if not self._root.is_dir():
            return []
        try:
            names = os.listdir(self._root)
        except OSError as e:
            raise StorageError(f"cannot list {self._root}: {e}") from e
        return [n[: -len(BLOB_SUFFIX)] for n in names if n.endswith(BLOB_SUFFIX) and (self._root / n).is_file()]
