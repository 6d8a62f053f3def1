"""Persistent state and caches for the WhatsApp to Discord bridge."""

__version__ = "0.1.0"
