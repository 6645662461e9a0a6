from fastapi import FastAPI

from filevault.config import AppConfig, load_config
from filevault.features.files.api import router as files_router
from filevault.features.files.persistence import SnapshotStore, load_index
from filevault.infra.logging_config import configure_logging, get_logger
from filevault.infra.storage import BlobStore
from filevault.web.health import router as health_router

log = get_logger(__name__)


def create_app(cfg: AppConfig | None = None) -> FastAPI:
    cfg = cfg or load_config()
    configure_logging(cfg.log_level)

    cfg.blobs_dir.mkdir(parents=True, exist_ok=True)
    index = load_index(SnapshotStore(cfg.snapshot_path), BlobStore(cfg.blobs_dir))

    app = FastAPI(title="filevault", version="0.1.0")
    app.state.cfg = cfg
    app.state.index = index
    app.include_router(health_router)
    app.include_router(files_router)
    log.info("serving %d records from %s", len(index), cfg.blobs_dir)
    return app
