"""
Standalone transcoding worker.

Run with ``lexicast-worker`` or ``python -m lexicast.worker``. SIGINT and
SIGTERM let the current job finish before the process exits.
"""

import asyncio
import signal

import structlog

from lexicast.config import configure_logging, get_settings
from lexicast.core import container
from lexicast.database import dispose_engine, initialize_database
from lexicast.infrastructure.podcast.workers import TranscodingWorker, build_job_processor

logger = structlog.get_logger(__name__)


def build_worker() -> TranscodingWorker:
    return TranscodingWorker(
        connection=container.queue_connection(),
        processor=build_job_processor(container.media_storage(), container.audio_encoder()),
    )


async def run_worker() -> None:
    settings = get_settings()
    initialize_database(settings)

    worker = build_worker()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    logger.info("transcoding_worker_process_started", stream=settings.AUDIO_PROCESSING_STREAM)
    try:
        await worker.run()
    finally:
        dispose_engine()
        logger.info("transcoding_worker_process_stopped")


def main() -> None:
    configure_logging(get_settings().ENVIRONMENT)
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
