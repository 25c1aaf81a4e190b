import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default=None):
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    BASE_DIR = Path(__file__).resolve().parent.parent
    DATA_DIR = Path(os.getenv("FILEREPO_DATA_DIR") or BASE_DIR / "data")
    JSON_INDENT = int(os.getenv("FILEREPO_JSON_INDENT", "3"))
    # Seconds a mutation waits for its collection; None waits forever.
    LOCK_TIMEOUT = _env_float("FILEREPO_LOCK_TIMEOUT")
    STRICT_DECODE = _env_bool("FILEREPO_STRICT_DECODE")
    REQUEST_TIMEOUT = _env_float("FILEREPO_REQUEST_TIMEOUT", 30.0)
    LOG_LEVEL = os.getenv("FILEREPO_LOG_LEVEL", "INFO").upper()


class DevConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProdConfig(Config):
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    LOCK_TIMEOUT = 5.0
    REQUEST_TIMEOUT = 10.0
