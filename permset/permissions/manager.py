"""
Permission Manager for Permset
===============================
Bounds permission creation to a fixed universe of actions.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable
from uuid import uuid4

from ..errors import ActionsNotInUniverseError, IncompatibleScopeError
from .permission import Permission

# Configure module logger
logger = logging.getLogger(__name__)


class PermissionManager:
    """
    Mint and validate permissions within a universe of actions.

    Every manager gets its own scope when created. Permissions minted by the
    manager carry that scope, so they only operate with each other and only
    this manager validates them.
    """

    def __init__(self, universe_actions: Iterable[str]):
        """
        Initialize the permission manager.

        Args:
            universe_actions: Every action this manager may grant
        """
        self._scope = uuid4()
        self._universe = Permission.from_actions(universe_actions, self._scope)

        logger.debug(f"Created permission manager with {len(self._universe)} actions")

    @classmethod
    def from_actions(cls, universe_actions: Iterable[str]) -> "PermissionManager":
        """Create a manager whose universe is the given actions"""
        return cls(universe_actions)

    @classmethod
    def from_json(cls, universe_json: str) -> "PermissionManager":
        """Create a manager whose universe is a JSON actions tree"""
        return cls(Permission.from_json(universe_json).actions)

    @classmethod
    def from_yaml(cls, universe_yaml: str) -> "PermissionManager":
        """Create a manager whose universe is a YAML actions tree"""
        return cls(Permission.from_yaml(universe_yaml).actions)

    @classmethod
    def from_file(cls, path: Path) -> "PermissionManager":
        """Create a manager whose universe is a .json, .yaml or .yml file"""
        return cls(Permission.from_file(path).actions)

    @property
    def universe(self) -> Permission:
        """Copy of the permission holding every action in the universe"""
        return replace(self._universe)

    def validate(self, perm: Permission) -> bool:
        """True if `perm` was minted by this manager and fits in the universe"""
        return self._universe.same_scope(perm) and self._universe.contains(perm)

    def _mint(self, perm: Permission) -> Permission:
        if not self.validate(perm):
            outside = perm.actions - self._universe.actions
            logger.warning(
                f"Refused permission with {len(outside)} actions outside the universe"
            )
            raise ActionsNotInUniverseError(outside)

        return perm

    def perm_from_actions(self, actions: Iterable[str]) -> Permission:
        """
        Mint a permission for the given actions.

        Raises:
            ActionsNotInUniverseError: Some actions are not in the universe
        """
        return self._mint(Permission.from_actions(actions, self._scope))

    def perm_from_json(self, actions_json: str) -> Permission:
        """
        Mint a permission from a JSON actions tree.

        Raises:
            ActionsNotInUniverseError: Some actions are not in the universe
            InvalidJsonError, MalformedTreeError, TooDeepError: Bad document
        """
        return self._mint(Permission.from_json(actions_json, self._scope))

    def perm_from_yaml(self, actions_yaml: str) -> Permission:
        """Mint a permission from a YAML actions tree"""
        return self._mint(Permission.from_yaml(actions_yaml, self._scope))

    def adopt(self, perm: Permission) -> Permission:
        """
        Mint an unscoped permission under this manager.

        Permissions already minted here are returned unchanged once validated.

        Raises:
            IncompatibleScopeError: `perm` belongs to another manager
            ActionsNotInUniverseError: Some actions are not in the universe
        """
        if perm.is_scoped() and not self._universe.same_scope(perm):
            raise IncompatibleScopeError("adopt")

        return self._mint(Permission.from_actions(perm.actions, self._scope))

    def __repr__(self) -> str:
        return f"PermissionManager(universe={sorted(self._universe.actions)!r})"


__all__ = ['PermissionManager']
