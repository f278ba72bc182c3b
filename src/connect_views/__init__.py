"""Connect views package for reading issue views from a Connect server."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version

from .errors import (
    ConfigError,
    ConnectError,
    InitializationError,
    RemoteCallError,
    ResponseParseError,
    URIConstructionError,
)
from .exporter import ViewExporter
from .parser import ViewDescriptor, parse_views
from .session import ViewContents, ViewsService
from .version import MINIMUM_SUPPORTED_VERSION, ConnectVersion, is_supported

try:
    __version__ = package_version("connect-views")
except PackageNotFoundError:
    # Package is not installed, use fallback version
    __version__ = "UNKNOWN"

__all__ = [
    "ConfigError",
    "ConnectError",
    "ConnectVersion",
    "InitializationError",
    "MINIMUM_SUPPORTED_VERSION",
    "RemoteCallError",
    "ResponseParseError",
    "URIConstructionError",
    "ViewContents",
    "ViewDescriptor",
    "ViewExporter",
    "ViewsService",
    "is_supported",
    "parse_views",
]
