from pathlib import Path

import pytest

from filevault.domain.errors import NotFoundError
from filevault.features.files.diff import NO_DIFFERENCES, diff_versions, render_diff
from filevault.features.files.index import FileIndex
from filevault.infra.storage import BlobStore


def test_insertion_is_marked() -> None:
    assert render_diff("hello", "hello world") == "hello{+ world+}"


def test_deletion_is_marked() -> None:
    assert render_diff("hello world", "hello") == "hello[- world-]"


def test_replacement_marks_both_sides() -> None:
    out = render_diff("port=80\n", "port=81\n")
    assert out == "port=8[-0-]{+1+}\n"


def test_identical_text() -> None:
    assert render_diff("same\n", "same\n") == NO_DIFFERENCES
    assert render_diff("", "") == NO_DIFFERENCES


def test_diff_versions_reads_adjacent_blobs(blobs_dir: Path) -> None:
    index = FileIndex(blobs=BlobStore(blobs_dir))
    index.ingest_from_bytes("doc", b"hello", "a.txt")
    index.ingest_from_bytes("doc", b"hello world", "a.txt")

    assert diff_versions(index, "doc", 1) == "hello{+ world+}"


def test_diff_requires_next_version(blobs_dir: Path) -> None:
    index = FileIndex(blobs=BlobStore(blobs_dir))
    index.ingest_from_bytes("doc", b"hello", "a.txt")

    with pytest.raises(NotFoundError):
        diff_versions(index, "doc", 1)
    with pytest.raises(NotFoundError):
        diff_versions(index, "doc", 0)


def test_diff_across_deletion_gap_is_not_found(blobs_dir: Path) -> None:
    index = FileIndex(blobs=BlobStore(blobs_dir))
    index.ingest_from_bytes("doc", b"1", "a.txt")
    index.ingest_from_bytes("doc", b"2", "a.txt")
    index.ingest_from_bytes("doc", b"3", "a.txt")
    index.remove("doc", 2)

    with pytest.raises(NotFoundError):
        diff_versions(index, "doc", 1)


def test_binary_content_is_diffed_with_replacement_chars(blobs_dir: Path) -> None:
    index = FileIndex(blobs=BlobStore(blobs_dir))
    index.ingest_from_bytes("bin", b"\xff\x00a", "x.bin")
    index.ingest_from_bytes("bin", b"\xff\x00b", "x.bin")

    out = diff_versions(index, "bin", 1)

    assert "[-a-]" in out and "{+b+}" in out
