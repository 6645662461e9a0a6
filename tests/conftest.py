import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import filevault...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def blobs_dir(tmp_path: Path) -> Path:
    d = tmp_path / "storedconfs"
    d.mkdir()
    return d


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "file_status.json"
