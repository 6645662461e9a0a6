from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

from filevault.features.files.models import VersionRecord


class RecordOut(BaseModel):
    """Wire and snapshot shape of a version record."""

    id: str = Field(min_length=1)
    version: int = Field(ge=1)
    identifier: str = Field(min_length=1)
    sha1: str
    md5: str
    # Snapshots written before filenames were tracked lack this key.
    filename: str = ""

    @classmethod
    def from_record(cls, r: VersionRecord) -> RecordOut:
        return cls(
            id=r.storage_id,
            version=r.version,
            identifier=r.identifier,
            sha1=r.sha1,
            md5=r.md5,
            filename=r.filename,
        )

    def to_record(self) -> VersionRecord:
        return VersionRecord(
            storage_id=self.id,
            version=self.version,
            identifier=self.identifier,
            sha1=self.sha1,
            md5=self.md5,
            filename=self.filename or self.id,
        )


class SnapshotDoc(BaseModel):
    files: dict[str, list[RecordOut]] = Field(default_factory=dict)

    @classmethod
    def from_files(cls, files: Mapping[str, list[VersionRecord]]) -> SnapshotDoc:
        return cls(files={k: [RecordOut.from_record(r) for r in v] for k, v in files.items()})


def record_to_dict(r: VersionRecord) -> dict[str, object]:
    return RecordOut.from_record(r).model_dump()
