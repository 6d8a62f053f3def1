"""Bridge configuration"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .loader import load_raw_config
from .storage import Storage
from .cache import Cache

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
)


class Config:
    """Settings bundle handed to :func:`wa2dc.state.build_state`."""

    def __init__(self, raw: dict | None = None) -> None:
        self.storage = Storage(raw)
        self.cache = Cache(raw)


def load_config(path: str | Path | None = None) -> Config:
    """Build a fresh :class:`Config` from ``path`` (or the default sources)."""

    return Config(load_raw_config(path))


settings = Config(load_raw_config())
storage = settings.storage
cache = settings.cache


__all__ = ["settings", "storage", "cache", "Config", "load_config", "load_raw_config"]
