from __future__ import annotations

from collections.abc import Iterable

from filevault.features.files.models import VersionRecord


def is_duplicate(identifier: str, sha1: str, md5: str, records: Iterable[VersionRecord]) -> bool:
    """True when a record of ``identifier`` matches either digest.

    A match on one hash alone is enough to block an upload, even if the other
    differs. Records of other identifiers never count.
    """

    for r in records:
        if r.identifier != identifier:
            continue
        if r.sha1 == sha1 or r.md5 == md5:
            return True
    return False
