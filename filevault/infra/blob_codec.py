import io
import zipfile
import zlib

from filevault.domain.errors import FormatError

# Fixed entry timestamp keeps the archive bytes stable for identical input.
_EPOCH = (1980, 1, 1, 0, 0, 0)


def encode_blob(data: bytes, filename: str) -> bytes:
    """Pack ``data`` into a zip archive with a single entry named ``filename``."""

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        info = zipfile.ZipInfo(filename=filename, date_time=_EPOCH)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        zf.writestr(info, data)
    return buf.getvalue()


def decode_blob(archive: bytes) -> tuple[str, bytes]:
    """Return ``(filename, data)`` from a single-entry archive.

    Raises FormatError when the bytes are not a zip archive, the entry count
    is not exactly one, or the entry cannot be inflated (corrupt stream, bad
    CRC, encryption, unsupported compression).
    """

    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            entries = zf.infolist()
            if len(entries) != 1:
                raise FormatError(f"archive must contain exactly one entry, found {len(entries)}")
            entry = entries[0]
            return entry.filename, zf.read(entry)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        EOFError,
        zlib.error,
        RuntimeError,
        NotImplementedError,
        ValueError,
    ) as e:
        raise FormatError(f"unreadable archive: {e}") from e
