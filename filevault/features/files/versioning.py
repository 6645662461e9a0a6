from __future__ import annotations

from collections.abc import Iterable

from filevault.features.files.models import VersionRecord


def next_version(identifier: str, records: Iterable[VersionRecord]) -> int:
    # Scan everything rather than keep a counter: rebuild feeds blobs in
    # whatever order the directory yields them.
    versions = [r.version for r in records if r.identifier == identifier]
    return max(versions) + 1 if versions else 1
