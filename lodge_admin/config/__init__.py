"""Configuration for lodge_admin."""

from lodge_admin.config.client_config import LodgeClientConfig

__all__ = ["LodgeClientConfig"]
