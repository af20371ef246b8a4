"""
auctionlots package initializer.

This package scrapes collector-car auction houses into normalized auction lot
records, either on a schedule across several sites or interactively against a
single page open in a browser.

The package exposes a ``__version__`` attribute read from the installed
distribution metadata (pyproject.toml is the single source of truth).
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("auctionlots")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]
