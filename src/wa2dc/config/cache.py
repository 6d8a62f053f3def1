from ._values import int_setting


class Cache:
    def __init__(self, config: dict | None = None) -> None:
        cache_cfg = (config or {}).get("wa2dc", {}).get("cache", {})
        self.GROUP_METADATA_TTL_MS: int = int_setting(
            cache_cfg, "group_metadata_ttl_ms", "GROUP_METADATA_TTL_MS", 5 * 60 * 1000
        )
        self.GROUP_REFRESH_DELAY_MS: int = int_setting(
            cache_cfg, "group_refresh_delay_ms", "GROUP_REFRESH_DELAY_MS", 750
        )
        self.GROUP_CACHE_PRUNE_INTERVAL: int = int_setting(
            cache_cfg, "group_cache_prune_interval", "GROUP_CACHE_PRUNE_INTERVAL", 60 * 60
        )
        self.MESSAGE_STORE_TTL_MS: int = int_setting(
            cache_cfg, "message_store_ttl_ms", "MESSAGE_STORE_TTL_MS", 7 * 24 * 60 * 60 * 1000
        )
        self.MESSAGE_STORE_MAX_ENTRIES: int = int_setting(
            cache_cfg, "message_store_max_entries", "MESSAGE_STORE_MAX_ENTRIES", 2000
        )
