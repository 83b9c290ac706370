"""
Permset Permissions Package
============================
Actions codec, permissions and permission managers.
"""

from .codec import ACTION_DIVIDER, MAX_JSON_DEPTH, decode_actions, encode_actions
from .permission import Permission
from .manager import PermissionManager

__all__ = [
    'ACTION_DIVIDER',
    'MAX_JSON_DEPTH',
    'decode_actions',
    'encode_actions',
    'Permission',
    'PermissionManager',
]
