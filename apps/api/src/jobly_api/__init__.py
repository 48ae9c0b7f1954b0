"""
Jobly API Service Package.

Defines the metadata the rest of the service uses to identify itself in logs
and responses: the canonical `SERVICE_NAME` and the installed package version
(falling back to a placeholder when running from an uninstalled checkout).
"""

from importlib import metadata
from typing import Final

SERVICE_NAME: Final[str] = "api"

try:
    __version__ = metadata.version("jobly")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["SERVICE_NAME", "__version__"]
