import os
import logging
from pathlib import Path
from dotenv import load_dotenv

from .scheduler_config import (
    SCAN_INTERVAL_SECONDS,
    DUE_SOON_WINDOW_HOURS,
    RETENTION_DAYS,
    SWEEP_INTERVAL_HOURS,
    WRITE_TIMEOUT_SECONDS,
    FETCH_TIMEOUT_SECONDS,
    FETCH_FAILURE_ESCALATION,
    SCAN_MAX_INSTANCES,
)

logger = logging.getLogger(__name__)

current_file_path = Path(__file__).resolve()
root_dir = current_file_path.parent.parent
env_path = root_dir / ".env.dev"

if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=True)
else:
    load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return float(default)
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using default {default}")
        return float(default)


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


class NotifierConfig:
    def __init__(self) -> None:
        self.SCAN_INTERVAL_SECONDS = _env_float("NOTIFIER_SCAN_INTERVAL_SECONDS", SCAN_INTERVAL_SECONDS)
        self.SWEEP_INTERVAL_HOURS = _env_float("NOTIFIER_SWEEP_INTERVAL_HOURS", SWEEP_INTERVAL_HOURS)
        self.RETENTION_DAYS = _env_int("NOTIFIER_RETENTION_DAYS", RETENTION_DAYS)
        self.DUE_SOON_WINDOW_HOURS = _env_float("NOTIFIER_DUE_SOON_WINDOW_HOURS", DUE_SOON_WINDOW_HOURS)
        self.WRITE_TIMEOUT_SECONDS = _env_float("NOTIFIER_WRITE_TIMEOUT_SECONDS", WRITE_TIMEOUT_SECONDS)
        self.FETCH_TIMEOUT_SECONDS = _env_float("NOTIFIER_FETCH_TIMEOUT_SECONDS", FETCH_TIMEOUT_SECONDS)
        self.FETCH_FAILURE_ESCALATION = _env_int("NOTIFIER_FETCH_FAILURE_ESCALATION", FETCH_FAILURE_ESCALATION)
        self.SCAN_MAX_INSTANCES = max(1, _env_int("NOTIFIER_SCAN_MAX_INSTANCES", SCAN_MAX_INSTANCES))
        self.SCHEDULER_TIMEZONE = os.getenv("NOTIFIER_SCHEDULER_TIMEZONE", "UTC")
        self.DISPLAY_TIMEZONE = os.getenv("NOTIFIER_DISPLAY_TIMEZONE", "UTC")
        self.LOG_LEVEL = os.getenv("NOTIFIER_LOG_LEVEL", "INFO").upper()

config = NotifierConfig()
