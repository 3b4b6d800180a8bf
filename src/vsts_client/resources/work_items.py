# ABOUTME: Work item operations for the VSTS REST client
# ABOUTME: Reads work items and updates their fields with JSON-patch documents

"""Work item operations.

Field updates use JSON-patch documents sent with PATCH, which the client
marks as ``application/json-patch+json``::

    [{"op": "add", "path": "/fields/System.Title", "value": "Fix login"}]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from vsts_client.utils.client import VstsClient


def build_field_patch(fields: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Turn ``{"System.Title": "x"}`` into JSON-patch "add" operations."""
    return [{"op": "add", "path": f"/fields/{key}", "value": value} for key, value in fields.items()]


def get_work_item(
    client: VstsClient,
    work_item_id: int,
    fields: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Get a work item, optionally limited to some fields."""
    params = {"fields": ",".join(fields)} if fields else None
    return client.invoke(f"wit/workitems/{work_item_id}", params=params)


def list_work_item_types(client: VstsClient, project: str) -> list[dict[str, Any]]:
    """List work item types (Bug, Task, User Story, ...) defined in a project."""
    return client.invoke_collection("wit/workitemtypes", project=project)


def add_work_item(
    client: VstsClient,
    project: str,
    work_item_type: str,
    title: str,
    fields: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a work item of the given type.

    Args:
        client: Open client
        project: Project name or id
        work_item_type: Type name, e.g. "Task" or "Product Backlog Item"
        title: Value for System.Title
        fields: Extra field reference names and values

    Returns:
        The created work item
    """
    patch = build_field_patch({"System.Title": title, **(fields or {})})
    return client.invoke(
        f"wit/workitems/${work_item_type}",
        project=project,
        method="PATCH",
        body=patch,
    )


def update_work_item(
    client: VstsClient,
    work_item_id: int,
    fields: Mapping[str, Any],
) -> dict[str, Any]:
    """Set fields on an existing work item."""
    return client.invoke(
        f"wit/workitems/{work_item_id}",
        method="PATCH",
        body=build_field_patch(fields),
    )


def remove_work_item(client: VstsClient, work_item_id: int) -> dict[str, Any]:
    """Move a work item to the recycle bin."""
    return client.invoke(f"wit/workitems/{work_item_id}", method="DELETE")


def list_queries(client: VstsClient, project: str, depth: int = 1) -> list[dict[str, Any]]:
    """List saved query folders and queries down to ``depth`` levels."""
    return client.invoke_collection("wit/queries", project=project, params={"$depth": depth})
