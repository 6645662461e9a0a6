import uvicorn

from filevault.config import load_config
from filevault.main import create_app


def main() -> None:
    cfg = load_config()
    app = create_app(cfg)

    tls: dict[str, str] = {}
    if cfg.tls_enabled:
        tls = {"ssl_certfile": cfg.cert_file, "ssl_keyfile": cfg.key_file}
    uvicorn.run(app, host=cfg.listen_addr, port=cfg.port, log_level=cfg.log_level.lower(), **tls)


if __name__ == "__main__":
    main()
