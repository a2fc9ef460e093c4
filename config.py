# config.py
# Environment-driven settings shared by the UI, storage and logging.

from __future__ import annotations
import os

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}

RUNS_DIR = os.getenv("PAN_RUNS_DIR", "runs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
MASK_DEFAULT = _env_bool("PAN_MASK_DEFAULT", True)
PAN_COLUMN = os.getenv("PAN_COLUMN", "pan_number")
