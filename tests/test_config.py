import json
from pathlib import Path

import pytest

from filevault.config import AppConfig, load_config
from filevault.domain.errors import ConfigError


def test_missing_config_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "confstore.json"

    cfg = load_config(path)

    assert cfg == AppConfig()
    written = json.loads(path.read_text())
    assert written["json_file"] == "file_status.json"
    assert written["conf_path"] == "storedconfs"
    assert written["port"] == 8080


def test_config_file_values(tmp_path: Path) -> None:
    path = tmp_path / "confstore.json"
    path.write_text(
        json.dumps(
            {
                "json_file": "state/index.json",
                "conf_path": "state/blobs",
                "listen_addr": "0.0.0.0",
                "port": "9443",
                "cert_file": "cert.pem",
                "key_file": "key.pem",
                "unrelated": True,
            }
        )
    )

    cfg = load_config(path)

    assert cfg.snapshot_path == Path("state/index.json")
    assert cfg.blobs_dir == Path("state/blobs")
    assert cfg.listen_addr == "0.0.0.0"
    assert cfg.port == 9443
    assert cfg.tls_enabled


def test_tls_needs_both_paths() -> None:
    assert not AppConfig(cert_file="cert.pem").tls_enabled


def test_env_var_selects_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"port": 9000}))
    monkeypatch.setenv("FILEVAULT_CONFIG", str(path))

    assert load_config().port == 9000


@pytest.mark.parametrize("content", ["{oops", json.dumps({"port": "http"}), json.dumps({"port": 70000})])
def test_invalid_config(tmp_path: Path, content: str) -> None:
    path = tmp_path / "confstore.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(path)
