"""Configuration package."""
from vectorstore_nodes.config.settings import get_settings, reset_settings, Settings

__all__ = ["get_settings", "reset_settings", "Settings"]
