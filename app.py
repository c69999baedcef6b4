import logging

import uvicorn

from mediator import create_app
from mediator.settings import MediatorSettings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# --- CONFIGURATION ---
settings = MediatorSettings()
configure_logging(settings.log_level)
app = create_app(settings)


def main() -> None:
    log = logging.getLogger("mediator")
    base = f"http://localhost:{settings.port}"
    log.info("IPTV Mediator running on %s", base)
    log.info("Playlist API: %s/api/playlist", base)
    log.info("Stream Proxy: %s/proxy?url=...", base)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
