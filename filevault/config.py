import json
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from filevault.domain.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("confstore.json")
CONFIG_ENV_VAR = "FILEVAULT_CONFIG"


@dataclass(frozen=True)
class AppConfig:
    listen_addr: str = "127.0.0.1"
    port: int = 8080
    cert_file: str | None = None
    key_file: str | None = None
    snapshot_path: Path = Path("file_status.json")
    blobs_dir: Path = Path("storedconfs")
    log_level: str = "INFO"

    @property
    def tls_enabled(self) -> bool:
        return bool(self.cert_file and self.key_file)


class _ConfigFile(BaseModel):
    # Key names follow the confstore.json layout the store has always used.
    model_config = ConfigDict(extra="ignore")

    json_file: str = Field(default="file_status.json", min_length=1)
    conf_path: str = Field(default="storedconfs", min_length=1)
    listen_addr: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)
    cert_file: str = ""
    key_file: str = ""
    log_level: str = "INFO"

    def to_config(self) -> AppConfig:
        return AppConfig(
            listen_addr=self.listen_addr,
            port=self.port,
            cert_file=self.cert_file or None,
            key_file=self.key_file or None,
            snapshot_path=Path(self.json_file),
            blobs_dir=Path(self.conf_path),
            log_level=self.log_level.upper(),
        )

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "_ConfigFile":
        return cls(
            json_file=str(cfg.snapshot_path),
            conf_path=str(cfg.blobs_dir),
            listen_addr=cfg.listen_addr,
            port=cfg.port,
            cert_file=cfg.cert_file or "",
            key_file=cfg.key_file or "",
            log_level=cfg.log_level,
        )


def save_config(cfg: AppConfig, path: Path) -> None:
    payload = _ConfigFile.from_config(cfg).model_dump()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def load_config(path: Path | None = None) -> AppConfig:
    """Read the JSON config once at startup.

    The path comes from FILEVAULT_CONFIG when not given. A missing file is
    created with the defaults, which are then returned.
    """

    if path is None:
        path = Path(os.getenv(CONFIG_ENV_VAR, str(DEFAULT_CONFIG_PATH)))

    if not path.exists():
        cfg = AppConfig()
        try:
            save_config(cfg, path)
        except OSError as e:
            raise ConfigError(f"cannot write default config to {path}: {e}") from e
        return cfg

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    try:
        return _ConfigFile.model_validate_json(raw).to_config()
    except PydanticValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
