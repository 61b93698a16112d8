"""Backend entrypoint: serve the reporting API with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from shared import config


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger(__name__).info(
        "server_starting host=%s port=%s database_path=%s",
        config.host(),
        config.port(),
        config.database_path(),
    )
    uvicorn.run("backend.api:app", host=config.host(), port=config.port(), log_level=config.log_level().lower())


if __name__ == "__main__":
    main()
