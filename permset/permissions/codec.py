"""
Actions Codec for Permset
==========================
Conversion between nested actions trees and flat sets of action strings.

A tree is a mapping whose values are either nested mappings (groups) or
booleans (final actions). Group names and the final action name are joined
with ACTION_DIVIDER:

    {"user": {"create": true, "delete": false}, "blog": {"view": true}}

maps to the actions 'user.create' and 'blog.view'.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from ..errors import ConflictingPathError, MalformedTreeError, TooDeepError

# Configure module logger
logger = logging.getLogger(__name__)

# Character dividing groups in an action string
ACTION_DIVIDER = "."

# Maximum nesting allowed for a tree when decoding
MAX_JSON_DEPTH = 20


def decode_actions(
    tree: Mapping[str, Any],
    depth: int = 0,
    prefix: str = ""
) -> FrozenSet[str]:
    """
    Decode an actions tree into a set of action strings.

    Args:
        tree: Mapping of group names to groups or booleans
        depth: Depth of `tree` itself. Pass a value above 0 to lower the
            nesting allowed below MAX_JSON_DEPTH.
        prefix: Action prefix prepended to every key of `tree`

    Returns:
        Actions whose leaves are set to true

    Raises:
        TooDeepError: A group sits at depth MAX_JSON_DEPTH or deeper
        MalformedTreeError: A value is neither a mapping nor a boolean
    """
    actions: Set[str] = set()
    # (depth, prefix, group) frames, None prefix for top level keys
    stack: List[Tuple[int, Optional[str], Mapping[str, Any]]] = [
        (depth, prefix or None, tree)
    ]

    while stack:
        current_depth, current_prefix, group = stack.pop()

        if current_depth >= MAX_JSON_DEPTH:
            raise TooDeepError(current_depth, MAX_JSON_DEPTH, current_prefix or "")

        for key, value in group.items():
            if not isinstance(key, str):
                raise MalformedTreeError(
                    f"wrong format in actions tree - group name {key!r} is not a string",
                    key=current_prefix,
                    value=key
                )

            action = key if current_prefix is None else f"{current_prefix}{ACTION_DIVIDER}{key}"

            if isinstance(value, Mapping):
                stack.append((current_depth + 1, action, value))
            elif isinstance(value, bool):
                if value:
                    actions.add(action)
            else:
                raise MalformedTreeError(
                    f"wrong format in actions tree - found no object or boolean value, {action}: {value!r}",
                    key=action,
                    value=value
                )

    logger.debug(f"Decoded {len(actions)} actions from tree")
    return frozenset(actions)


def encode_actions(actions: Iterable[str]) -> Dict[str, Any]:
    """
    Encode a set of action strings into an actions tree.

    Every leaf of the returned tree is True. Actions are processed in sorted
    order so the result does not depend on the iteration order of `actions`.

    Raises:
        ConflictingPathError: An action is also a group of another action
            (e.g. 'user' and 'user.create')
    """
    tree: Dict[str, Any] = {}

    # Sorting puts 'a' before 'a.b', so conflicts always show as a leaf in the way
    for action in sorted(set(actions)):
        segments = action.split(ACTION_DIVIDER)
        node = tree

        for index, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConflictingPathError(action, ACTION_DIVIDER.join(segments[:index + 1]))
            node = child

        node[segments[-1]] = True

    return tree


__all__ = ['ACTION_DIVIDER', 'MAX_JSON_DEPTH', 'decode_actions', 'encode_actions']
