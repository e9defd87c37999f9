"""Cache directory management for dronelog.

Holds the persisted report field configuration. Tests point it at a
temporary directory through ``DRONELOG_CACHE_DIR``.
"""

import os
from pathlib import Path

__all__ = ["get_cache_dir"]


def get_cache_dir() -> Path:
    """Return the cache directory, honouring ``DRONELOG_CACHE_DIR``."""
    override = os.environ.get("DRONELOG_CACHE_DIR")
    if override:
        return Path(override)
    return Path.home() / ".cache" / "dronelog"
