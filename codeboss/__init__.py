"""Vanity git commit hash miner."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("codeboss")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
