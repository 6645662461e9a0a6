from __future__ import annotations


class FileVaultError(Exception):
    """Base class for file store failures."""


class ValidationError(FileVaultError):
    """Caller supplied a missing identifier or a malformed version."""


class NotFoundError(FileVaultError):
    def __init__(self, what: str) -> None:
        super().__init__(f"not found: {what}")
        self.what = what


class DuplicateContentError(FileVaultError):
    def __init__(self, identifier: str, sha1: str, md5: str) -> None:
        super().__init__(f"content already stored for {identifier} (sha1={sha1}, md5={md5})")
        self.identifier = identifier
        self.sha1 = sha1
        self.md5 = md5


class StorageError(FileVaultError):
    """Disk I/O failed while reading or writing blobs or the snapshot."""


class FormatError(StorageError):
    """A blob is not a zip archive holding exactly one entry."""


class SnapshotDecodeError(FileVaultError):
    """The snapshot file exists but its content is not a valid record set."""


class ConfigError(FileVaultError):
    """The configuration file is malformed or holds invalid values."""
