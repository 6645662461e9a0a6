from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VersionRecord:
    storage_id: str
    version: int
    identifier: str
    sha1: str
    md5: str
    filename: str

    @classmethod
    def create(
        cls, *, identifier: str, version: int, sha1: str, md5: str, filename: str
    ) -> VersionRecord:
        return cls(
            storage_id=storage_id_for(identifier, version),
            version=version,
            identifier=identifier,
            sha1=sha1,
            md5=md5,
            filename=filename,
        )

    def matches_hash(self, digest: str) -> bool:
        return digest in (self.sha1, self.md5)


def storage_id_for(identifier: str, version: int) -> str:
    return f"{identifier}_v{version}"


def parse_storage_id(storage_id: str) -> tuple[str, int] | None:
    """Split ``<identifier>_v<N>`` back into its parts.

    The split happens on the last ``_v`` so identifiers may themselves contain
    ``_v``. Returns None when the stem does not follow the layout.
    """

    identifier, sep, version = storage_id.rpartition("_v")
    if not sep or not identifier or not (version.isascii() and version.isdigit()):
        return None
    return identifier, int(version)


def check_identifier(identifier: str) -> str | None:
    """Return an error code when ``identifier`` cannot name a blob file."""
    if not identifier:
        return "identifier_required"
    if any(c in identifier for c in ("/", "\\", "\0")) or ".." in identifier:
        return "invalid_identifier"
    return None


def check_filename(filename: str) -> str | None:
    # Zip entries stop at NUL and a trailing slash marks a directory entry.
    if "\0" in filename or filename.endswith(("/", "\\")):
        return "invalid_filename"
    return None
