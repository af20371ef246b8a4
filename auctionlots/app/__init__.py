"""Application configuration layer."""

from .config import ScraperSettings, SourceLimits, load_config

__all__ = ["ScraperSettings", "SourceLimits", "load_config"]
