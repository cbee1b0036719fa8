"""
Configuration loading for binfetch.
"""

from .settings import (
    InstallConfig,
    load_config,
    load_metadata,
)

__all__ = ["InstallConfig", "load_config", "load_metadata"]
