"""
Permset Errors
===============
Exception hierarchy raised by the codec, permissions and manager.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional


class PermsetError(Exception):
    """Base class for every error raised by permset"""


class InvalidDocumentError(PermsetError, ValueError):
    """Input document is not syntactically valid"""


class InvalidJsonError(InvalidDocumentError):
    """Input string is not valid JSON"""


class InvalidYamlError(InvalidDocumentError):
    """Input string is not valid YAML"""


class MalformedTreeError(PermsetError, ValueError):
    """
    Document parses but does not follow the actions tree format.

    Attributes:
        key: Full path of the offending entry (None for the root)
        value: The offending value
    """

    def __init__(self, message: str, key: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.key = key
        self.value = value


class TooDeepError(PermsetError, ValueError):
    """Actions tree nesting reached the maximum depth"""

    def __init__(self, depth: int, limit: int, prefix: str = ""):
        where = f" at '{prefix}'" if prefix else ""
        super().__init__(f"actions tree too deeply nested{where}: depth {depth} reaches limit {limit}")
        self.depth = depth
        self.limit = limit
        self.prefix = prefix


class ConflictingPathError(PermsetError, ValueError):
    """An action is both a leaf and a group when encoding"""

    def __init__(self, action: str, conflict: str):
        super().__init__(f"action '{action}' conflicts with existing path '{conflict}'")
        self.action = action
        self.conflict = conflict


class IncompatibleScopeError(PermsetError):
    """Operation between permissions that do not share a scope"""

    def __init__(self, operation: str):
        super().__init__(f"permissions in {operation} operation do not have the same scope")
        self.operation = operation


class ActionsNotInUniverseError(PermsetError):
    """
    A manager refused to mint a permission.

    Attributes:
        actions: Actions outside the universe (empty if only the scope differs)
    """

    def __init__(self, actions: Iterable[str] = ()):
        self.actions: FrozenSet[str] = frozenset(actions)
        if self.actions:
            listed = ", ".join(sorted(self.actions))
            message = f"actions not allowed in permission manager universe: {listed}"
        else:
            message = "permission does not belong to this permission manager"
        super().__init__(message)


class UnsupportedFormatError(PermsetError, ValueError):
    """File suffix is not a known permission document format"""


class ConfigError(PermsetError):
    """Settings file could not be loaded"""


__all__ = [
    'PermsetError',
    'InvalidDocumentError',
    'InvalidJsonError',
    'InvalidYamlError',
    'MalformedTreeError',
    'TooDeepError',
    'ConflictingPathError',
    'IncompatibleScopeError',
    'ActionsNotInUniverseError',
    'UnsupportedFormatError',
    'ConfigError',
]
