from filevault.features.files.dedup import is_duplicate
from filevault.features.files.hashing import hash_content
from filevault.features.files.models import VersionRecord, parse_storage_id
from filevault.features.files.versioning import next_version


def _rec(identifier: str, version: int, sha1: str = "s", md5: str = "m") -> VersionRecord:
    return VersionRecord.create(identifier=identifier, version=version, sha1=sha1, md5=md5, filename="f")


def test_hash_content_known_digests() -> None:
    sha1, md5 = hash_content(b"hello")
    assert sha1 == "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"
    assert md5 == "5d41402abc4b2a76b9719d911017c592"


def test_duplicate_on_either_hash() -> None:
    records = [_rec("doc", 1, sha1="aaa", md5="bbb")]

    assert is_duplicate("doc", "aaa", "zzz", records)
    assert is_duplicate("doc", "zzz", "bbb", records)
    assert not is_duplicate("doc", "zzz", "yyy", records)


def test_duplicate_is_scoped_to_identifier() -> None:
    records = [_rec("other", 1, sha1="aaa", md5="bbb")]
    assert not is_duplicate("doc", "aaa", "bbb", records)


def test_next_version_starts_at_one() -> None:
    assert next_version("doc", []) == 1
    assert next_version("doc", [_rec("other", 4)]) == 1


def test_next_version_follows_max_not_count() -> None:
    # Out-of-order and gapped input, as seen after rebuild or deletion.
    records = [_rec("doc", 3), _rec("doc", 1), _rec("other", 9)]
    assert next_version("doc", records) == 4


def test_storage_id_layout() -> None:
    assert _rec("doc", 2).storage_id == "doc_v2"
    assert parse_storage_id("doc_v2") == ("doc", 2)
    assert parse_storage_id("my_vault_v10") == ("my_vault", 10)
    assert parse_storage_id("doc") is None
    assert parse_storage_id("doc_vx") is None
    assert parse_storage_id("_v1") is None


def test_storage_id_version_must_be_ascii_digits() -> None:
    assert parse_storage_id("doc_v²") is None
    assert parse_storage_id("doc_v٣") is None
