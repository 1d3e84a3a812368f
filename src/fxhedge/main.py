"""Entry point for the hedging engine HTTP service.

Loads AppSettings, configures logging and serves the FastAPI app with
uvicorn's programmatic API. With SERVICE_ENABLED=false the process only
validates the configuration and exits.
"""

import asyncio

import uvicorn

from fxhedge.config import AppSettings
from fxhedge.logging import get_logger, setup_logging
from fxhedge.service.app import create_app


async def run() -> None:
    """Run the HTTP service until interrupted."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("fxhedge.main")

    if not settings.service.enabled:
        logger.info("service_disabled", log_level=settings.log_level)
        return

    app = create_app(settings)

    logger.info(
        "starting_service",
        host=settings.service.host,
        port=settings.service.port,
        forward_compounding=settings.pricing.forward_compounding,
    )

    config = uvicorn.Config(
        app,
        host=settings.service.host,
        port=settings.service.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()
    logger.info("service_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
