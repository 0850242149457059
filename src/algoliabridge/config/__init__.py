"""Configuration loading."""

from algoliabridge.config.settings import AlgoliaSettings, Settings

__all__ = ["AlgoliaSettings", "Settings"]
