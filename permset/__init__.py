"""Permset - Permissions as immutable sets of actions, bounded by managers"""

__version__ = "1.0.0"

from .errors import (
    PermsetError,
    InvalidDocumentError,
    InvalidJsonError,
    InvalidYamlError,
    MalformedTreeError,
    TooDeepError,
    ConflictingPathError,
    IncompatibleScopeError,
    ActionsNotInUniverseError,
    UnsupportedFormatError,
    ConfigError,
)
from .permissions import Permission, PermissionManager

__all__ = [
    "Permission",
    "PermissionManager",
    "PermsetError",
    "InvalidDocumentError",
    "InvalidJsonError",
    "InvalidYamlError",
    "MalformedTreeError",
    "TooDeepError",
    "ConflictingPathError",
    "IncompatibleScopeError",
    "ActionsNotInUniverseError",
    "UnsupportedFormatError",
    "ConfigError",
]
