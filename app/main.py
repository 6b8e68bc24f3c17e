from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import get_logging_settings


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=get_logging_settings().level_number,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Order Product Analyzer API",
        version="1.0.0",
    )

    from app.api.routers import order_analysis_router

    application.include_router(order_analysis_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
