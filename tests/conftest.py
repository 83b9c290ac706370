"""Shared fixtures for permset tests."""
import json

import pytest

from permset import PermissionManager


BUILDING_TREE = {
    "building": {
        "view": True,
        "meter": {
            "create": True
        }
    },
    "user": {
        "delete": True
    }
}

BUILDING_ACTIONS = {"building.view", "building.meter.create", "user.delete"}


def nested_tree(levels: int) -> dict:
    """Tree with `levels` groups nested below the root and one final action."""
    tree = {"leaf": True}
    for _ in range(levels):
        tree = {"obj": tree}
    return tree


@pytest.fixture
def building_json():
    return json.dumps(BUILDING_TREE)


@pytest.fixture
def crud_actions():
    return {
        "building.create",
        "building.view",
        "building.edit",
        "building.delete",
        "user.create",
        "user.view",
        "user.edit",
        "user.delete",
    }


@pytest.fixture
def manager(crud_actions):
    return PermissionManager.from_actions(crud_actions)
