from __future__ import annotations

import difflib

from filevault.features.files.index import FileIndex

NO_DIFFERENCES = "no differences\n"


def render_diff(old: str, new: str) -> str:
    """Character-level diff rendered as plain text.

    Unchanged text is copied through, removed spans are wrapped as
    ``[-...-]`` and added spans as ``{+...+}``.
    """

    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    parts: list[str] = []
    changed = False
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(old[i1:i2])
            continue
        changed = True
        if tag in ("delete", "replace"):
            parts.append(f"[-{old[i1:i2]}-]")
        if tag in ("insert", "replace"):
            parts.append(f"{{+{new[j1:j2]}+}}")
    if not changed:
        return NO_DIFFERENCES
    return "".join(parts)


def diff_versions(index: FileIndex, identifier: str, base_version: int) -> str:
    """Diff ``base_version`` of ``identifier`` against the version right after it."""
    (_, old), (_, new) = index.read_contents(identifier, [base_version, base_version + 1])
    return render_diff(_as_text(old), _as_text(new))


def _as_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")
