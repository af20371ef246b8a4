"""Domain layer facade for auctionlots.

This package groups the value objects shared by the extractors and the
orchestrator. It has no infrastructure or interface dependencies.
"""

from . import models

__all__ = ["models"]
