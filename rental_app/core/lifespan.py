import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from .cloudinary_setup import cloudinary_client
from .get_db import async_engine
from .settings import settings
from .render_pool import render_executor

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    for directory in (settings.RECEIPTS_DIR, settings.AGREEMENTS_DIR):
        Path(directory).mkdir(parents=True, exist_ok=True)

    try:
        if await cloudinary_client.connect():
            logger.info("Cloudinary connected.")
    except Exception:
        logger.exception("Cannot connect to Cloudinary")

    logger.info("Application startup complete.")

    yield

    render_executor.shutdown(wait=False)
    await async_engine.dispose()
    logger.info("Application shutdown complete.")
