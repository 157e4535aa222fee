"""
Configuration from environment variables (optionally via a .env file).

    TABULA_DATABASE       backend kind, default "sqlite"
    TABULA_URI            database file, default "database.db"
    TABULA_STRICT_SCHEMA  refuse to reuse a table whose columns differ, default true
    TABULA_LOG_LEVEL      level for configure_logging(), default WARNING
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _get_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None or not val.strip():
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class TabulaConfig:
    database: str = "sqlite"
    uri: str = "database.db"
    strict_schema: bool = True
    log_level: str = "WARNING"


def get_config() -> TabulaConfig:
    return TabulaConfig(
        database=os.getenv("TABULA_DATABASE", "sqlite"),
        uri=os.getenv("TABULA_URI", "database.db"),
        strict_schema=_get_bool("TABULA_STRICT_SCHEMA", True),
        log_level=os.getenv("TABULA_LOG_LEVEL", "WARNING").upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Console logging for scripts; the library itself adds no handlers."""
    logging.basicConfig(level=level or get_config().log_level, format=LOG_FORMAT)
