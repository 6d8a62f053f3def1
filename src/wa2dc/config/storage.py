import os
from pathlib import Path

_DEFAULT_STORAGE_DIR = Path("storage")


class Storage:
    def __init__(self, config: dict | None = None) -> None:
        storage_cfg = (config or {}).get("wa2dc", {}).get("storage", {})
        self.STORAGE_DIR: str = str(
            storage_cfg.get("storage_dir", os.getenv("STORAGE_DIR", str(_DEFAULT_STORAGE_DIR)))
        )
        # The session library keeps its key material in a sub-folder of the bridge storage.
        self.AUTH_DIR: str = str(
            storage_cfg.get("auth_dir", os.getenv("AUTH_DIR", str(Path(self.STORAGE_DIR) / "baileys")))
        )
