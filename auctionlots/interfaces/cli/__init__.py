"""CLI interface for auctionlots.

This package is the home for all Click commands. Run
``python -m auctionlots.interfaces.cli --help`` (or the ``auctionlots``
console script) to list them.
"""

from .__main__ import cli
from .extract import extract
from .page import page
from .scheduled import scheduled

__all__ = ["cli", "extract", "page", "scheduled"]
