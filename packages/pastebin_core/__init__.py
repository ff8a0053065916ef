"""Public API for pastebin process startup."""

from packages.pastebin_core.main import get_version, run

__all__ = ["get_version", "run"]
