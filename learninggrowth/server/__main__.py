"""Run the API with uvicorn: ``python -m learninggrowth.server`` or ``learninggrowth-api``."""

import uvicorn

from learninggrowth.core.config import settings


def run() -> None:
    uvicorn.run(
        "learninggrowth.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
