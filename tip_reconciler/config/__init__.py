"""
Configuration management for Tip Reconciler.

Loads settings from environment variables and an optional .env file.
"""

from tip_reconciler.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
