import os
from typing import Any


def int_setting(section: dict, key: str, env: str, default: int) -> int:
    """Resolve ``key`` from ``section``, then ``$env``, then ``default``."""

    raw: Any = section.get(key, os.getenv(env, default))
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {env}: {raw!r}") from exc
