"""Run the relay with uvicorn: ``python -m relay``."""

import logging

import uvicorn

from relay.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run("relay.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
