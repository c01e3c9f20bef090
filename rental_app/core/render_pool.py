import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .settings import settings

logger = logging.getLogger(__name__)

render_executor = ThreadPoolExecutor(
    max_workers=settings.DOCUMENT_WORKERS, thread_name_prefix="documents"
)


async def render_document(generate_pdf, entity, directory: str) -> Path:
    """Runs a blocking PDF generator off the event loop."""
    loop = asyncio.get_running_loop()
    started = time.perf_counter()
    path = await loop.run_in_executor(render_executor, generate_pdf, entity, directory)
    logger.info(
        "Rendered %s in %.0fms", path.name, (time.perf_counter() - started) * 1000
    )
    return path
