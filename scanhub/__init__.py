"""Dispatch security scans to pluggable engines and normalize their output."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("scanhub")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
