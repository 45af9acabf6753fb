"""
Standalone notification worker.

Runs the due-date scan and retention sweep without the API process:

    python -m notifier.main
"""
import logging
import signal
import threading

from server.database import Base, SessionLocal, engine
import server.models  # noqa: F401  (registers tables)
from .config import config
from .scheduler import NotificationScheduler

logger = logging.getLogger(__name__)


def start_worker() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    Base.metadata.create_all(bind=engine)

    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    notification_scheduler = NotificationScheduler(SessionLocal)
    notification_scheduler.start()
    logger.info("Notification worker started")

    try:
        stop_event.wait()
    finally:
        notification_scheduler.shutdown(wait=True)


if __name__ == "__main__":
    start_worker()
