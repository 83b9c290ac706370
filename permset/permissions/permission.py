"""
Permission Model for Permset
=============================
Immutable sets of actions with scope-checked set algebra.

There are two kinds of permissions, scoped and unscoped:

- Scoped permissions are minted by a PermissionManager and carry its scope.
  They only operate with permissions of the same manager.
- Unscoped permissions are created directly and only operate with other
  unscoped permissions.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Mapping, Optional
from uuid import UUID

import yaml

from ..errors import (
    IncompatibleScopeError,
    InvalidJsonError,
    InvalidYamlError,
    MalformedTreeError,
    TooDeepError,
    UnsupportedFormatError,
)
from .codec import MAX_JSON_DEPTH, decode_actions, encode_actions

# Configure module logger
logger = logging.getLogger(__name__)

# File suffixes accepted by Permission.from_file
DOCUMENT_SUFFIXES = {".json", ".yaml", ".yml"}


class ActionsLoader(yaml.SafeLoader):
    """SafeLoader where only true/false are booleans, so on/off/yes/no stay names"""


ActionsLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ActionsLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF")
)


@dataclass(frozen=True)
class Permission:
    """
    Immutable set of actions allowed for a subject or object (at your choice).

    Attributes:
        actions: Actions granted by this permission
    """
    actions: FrozenSet[str] = frozenset()
    _scope: Optional[UUID] = field(default=None, repr=False)

    def __post_init__(self):
        # Copy whatever iterable was given into a frozenset
        if not isinstance(self.actions, frozenset):
            object.__setattr__(self, 'actions', frozenset(self.actions))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_actions(cls, actions: Iterable[str], scope: Optional[UUID] = None) -> "Permission":
        """
        Create a permission containing the given actions.

        Args:
            actions: Action strings granted by the permission
            scope: Intended for PermissionManager use only. Leave it as None
                for permissions without a manager.
        """
        return cls(frozenset(actions), scope)

    @classmethod
    def from_tree(cls, tree: Any, scope: Optional[UUID] = None) -> "Permission":
        """Create a permission from an already parsed actions tree"""
        if not isinstance(tree, Mapping):
            raise MalformedTreeError(
                f"wrong format in actions tree - root must be an object, got {type(tree).__name__}",
                value=tree
            )
        return cls(decode_actions(tree, 0), scope)

    @classmethod
    def from_json(cls, actions_json: str, scope: Optional[UUID] = None) -> "Permission":
        """
        Create a permission from a JSON actions tree.

        Groups are nested objects and final actions are booleans, true to
        include the action and false to leave it out:

            {"user": {"create": true, "delete": false}, "blog": {"view": true}}

        Raises:
            InvalidJsonError: `actions_json` is not valid JSON
            MalformedTreeError: The document is not an actions tree
            TooDeepError: Groups are nested MAX_JSON_DEPTH levels or more
        """
        try:
            tree = json.loads(actions_json)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(f"wrong format in permission json string: {e}") from e
        except RecursionError as e:
            raise TooDeepError(MAX_JSON_DEPTH, MAX_JSON_DEPTH) from e

        return cls.from_tree(tree, scope)

    @classmethod
    def from_yaml(cls, actions_yaml: str, scope: Optional[UUID] = None) -> "Permission":
        """Create a permission from a YAML actions tree (same format as JSON)"""
        try:
            tree = yaml.load(actions_yaml, Loader=ActionsLoader)
        except yaml.YAMLError as e:
            raise InvalidYamlError(f"wrong format in permission yaml string: {e}") from e
        except RecursionError as e:
            raise TooDeepError(MAX_JSON_DEPTH, MAX_JSON_DEPTH) from e

        return cls.from_tree(tree, scope)

    @classmethod
    def from_file(cls, path: Path, scope: Optional[UUID] = None) -> "Permission":
        """
        Create a permission from a .json, .yaml or .yml actions tree file.

        Raises:
            UnsupportedFormatError: Unknown file suffix
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix not in DOCUMENT_SUFFIXES:
            raise UnsupportedFormatError(
                f"unsupported permission file format '{suffix or path.name}', "
                f"expected one of: {', '.join(sorted(DOCUMENT_SUFFIXES))}"
            )

        logger.debug(f"Loading permission from {path}")
        content = path.read_text(encoding='utf-8')
        if suffix == ".json":
            return cls.from_json(content, scope)
        return cls.from_yaml(content, scope)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_tree(self) -> Dict[str, Any]:
        """Actions as a nested tree of true leaves"""
        return encode_actions(self.actions)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Actions as a JSON actions tree"""
        return json.dumps(self.to_tree(), sort_keys=True, indent=indent)

    def to_yaml(self) -> str:
        """Actions as a YAML actions tree"""
        return yaml.safe_dump(self.to_tree(), default_flow_style=False, sort_keys=True)

    # ------------------------------------------------------------------
    # Scope
    # ------------------------------------------------------------------

    def is_scoped(self) -> bool:
        """True if the permission was minted by a PermissionManager"""
        return self._scope is not None

    def same_scope(self, other: "Permission") -> bool:
        """True if both permissions share a manager, or both have none"""
        return self._scope == other._scope

    def _require_same_scope(self, other: "Permission", operation: str):
        if not self.same_scope(other):
            logger.debug(f"Rejected {operation} between permissions of different scopes")
            raise IncompatibleScopeError(operation)

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def union(self, other: "Permission") -> "Permission":
        """
        Permission with the actions of both permissions.

        Raises:
            IncompatibleScopeError: Permissions do not have the same scope
        """
        self._require_same_scope(other, "union")
        return Permission(self.actions | other.actions, self._scope)

    def difference(self, other: "Permission") -> "Permission":
        """
        Permission with the actions in this permission but not in `other`.

        Raises:
            IncompatibleScopeError: Permissions do not have the same scope
        """
        self._require_same_scope(other, "difference")
        return Permission(self.actions - other.actions, self._scope)

    def contains(self, other: "Permission") -> bool:
        """
        True if this permission has at least every action in `other`.

        Raises:
            IncompatibleScopeError: Permissions do not have the same scope
        """
        self._require_same_scope(other, "contains")
        return self.actions >= other.actions

    def contains_action(self, action: str) -> bool:
        """True if the action is granted, whatever the scope"""
        return action in self.actions

    def __contains__(self, action: object) -> bool:
        return isinstance(action, str) and self.contains_action(action)

    def __or__(self, other: "Permission") -> "Permission":
        if not isinstance(other, Permission):
            return NotImplemented
        return self.union(other)

    def __sub__(self, other: "Permission") -> "Permission":
        if not isinstance(other, Permission):
            return NotImplemented
        return self.difference(other)

    def __ge__(self, other: "Permission") -> bool:
        if not isinstance(other, Permission):
            return NotImplemented
        return self.contains(other)

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.actions))


__all__ = ['Permission']
