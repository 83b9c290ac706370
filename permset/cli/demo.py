"""
Demo Command for Permset
=========================
Walks through managers, permission algebra and the JSON format.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..permissions import Permission, PermissionManager

# Configure module logger
logger = logging.getLogger(__name__)

# Console for output
console = Console()

DEMO_UNIVERSE = [
    "building.create",
    "building.view",
    "building.edit",
    "building.delete",
    "user.create",
    "user.view",
    "user.edit",
    "user.delete",
]

DEMO_JSON = """
{
    "building": {
        "view": true,
        "meter": {
            "create": true
        },
        "room": {
            "edit": true
        }
    },
    "user": {
        "delete": true
    }
}
"""


def _actions(perm: Permission) -> str:
    return ", ".join(perm) or "-"


def run_demo():
    """Run the permissions walkthrough"""
    manager = PermissionManager.from_actions(DEMO_UNIVERSE)

    p1 = manager.perm_from_actions(["building.create", "building.view", "building.edit"])
    p2 = manager.perm_from_actions(["building.edit", "building.delete"])
    p3 = manager.perm_from_actions(["building.edit"])
    p4 = Permission.from_actions(["building.create", "building.view"])

    console.print(Panel(_actions(manager.universe), title="Universe", border_style="cyan"))

    table = Table(title="Permission Algebra", border_style="cyan")
    table.add_column("Operation", style="bold")
    table.add_column("Result")

    table.add_row("p1", _actions(p1))
    table.add_row("p2", _actions(p2))
    table.add_row("p3", _actions(p3))
    table.add_row("p1 is scoped", str(p1.is_scoped()))
    table.add_row("p4 is scoped", str(p4.is_scoped()))
    table.add_row("p1 union p2", _actions(p1.union(p2)))
    table.add_row("p1 difference p2", _actions(p1.difference(p2)))
    table.add_row("p1 contains p2", str(p1.contains(p2)))
    table.add_row("p1 contains p3", str(p1.contains(p3)))
    table.add_row("p1 has 'building.edit'", str(p1.contains_action("building.edit")))
    table.add_row("p1 has 'building.delete'", str(p1.contains_action("building.delete")))
    table.add_row("p1 and p4 share scope", str(p1.same_scope(p4)))

    console.print(table)

    from_json = Permission.from_json(DEMO_JSON)
    console.print(Panel(_actions(from_json), title="From JSON", border_style="green"))
    console.print_json(from_json.to_json())

    json_manager = PermissionManager.from_json(DEMO_JSON)
    minted = json_manager.perm_from_json('{"user": {"delete": true}}')
    console.print(Panel(_actions(minted), title="Minted From JSON", border_style="green"))

    logger.debug("Demo finished")


__all__ = ['run_demo', 'DEMO_UNIVERSE', 'DEMO_JSON']
