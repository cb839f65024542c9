"""Configuration from environment."""

import os

DATA_DIR = os.environ.get("ER_DATA_DIR", ".")
WAITING_FILE = os.environ.get("ER_WAITING_FILE", "patients_waiting.csv")
TREATED_FILE = os.environ.get("ER_TREATED_FILE", "patients_treated.csv")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Inclusive severity range; higher = more urgent
MIN_PRIORITY = 1
MAX_PRIORITY = 10


def _data_path(env_key: str, default: str) -> str:
    name = (os.environ.get(env_key) or default).strip()
    return os.path.join(os.environ.get("ER_DATA_DIR") or DATA_DIR, name)


def get_waiting_path() -> str:
    return _data_path("ER_WAITING_FILE", WAITING_FILE)


def get_treated_path() -> str:
    return _data_path("ER_TREATED_FILE", TREATED_FILE)


def get_log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or LOG_LEVEL).strip().upper()
