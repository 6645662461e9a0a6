import hashlib


def hash_content(data: bytes) -> tuple[str, str]:
    """Return the (sha1, md5) hex digests of ``data``.

    Both digests are kept on every record; lookups and duplicate detection
    accept either one.
    """

    return hashlib.sha1(data).hexdigest(), hashlib.md5(data).hexdigest()
