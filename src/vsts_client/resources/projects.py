# ABOUTME: Team project operations for the VSTS REST client
# ABOUTME: List, create and delete projects, waiting for async completion

"""
Team project operations.

Creating or deleting a project is asynchronous on the server: the POST or
DELETE returns an operation reference right away while the work continues
in the background. ``add_project`` and ``remove_project`` therefore poll
with ``wait_for_existence`` until the project list reflects the change.

    API: GET    _apis/projects
         GET    _apis/projects/{id-or-name}
         POST   _apis/projects
         DELETE _apis/projects/{id}
         GET    _apis/process/processes
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.utils.polling import DEFAULT_INTERVAL, DEFAULT_MAX_ATTEMPTS, wait_for_existence
from vsts_client.utils.resolve import resolve_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from vsts_client.utils.client import VstsClient

logger = structlog.get_logger(__name__)


@dataclass
class Project:
    """Flattened team project."""

    id: str
    name: str
    description: str = ""
    state: str = "unknown"
    url: str = ""

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Project:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            state=data.get("state", "unknown"),
            url=data.get("url", ""),
        )


def list_projects(client: VstsClient) -> list[Project]:
    """List all projects in the collection."""
    return [Project.from_api_response(item) for item in client.invoke_collection("projects")]


def get_project(client: VstsClient, name: str) -> Project:
    """Get a project by name or id.

    Raises:
        VstsError: STATUS 404 if the project does not exist.
    """
    return Project.from_api_response(client.invoke(f"projects/{name}"))


def project_exists(client: VstsClient, name: str) -> bool:
    """Return True if a project with exactly this name is listed."""
    return any(project.name == name for project in list_projects(client))


def list_process_templates(client: VstsClient) -> list[dict[str, Any]]:
    """List process templates (Agile, Scrum, CMMI, ...)."""
    return client.invoke_collection("process/processes")


def wait_for_project(
    client: VstsClient,
    name: str,
    should_exist: bool = True,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Block until the project appears (or disappears)."""
    wait_for_existence(
        name,
        should_exist,
        lambda n: project_exists(client, n),
        max_attempts=max_attempts,
        interval=interval,
        sleep=sleep,
    )


def add_project(
    client: VstsClient,
    name: str,
    description: str = "",
    process_template: str = "Agile",
    source_control: str = "Git",
    wait: bool = True,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """
    Create a project.

    Args:
        client: Open client
        name: New project name
        description: Project description
        process_template: Template name or id
        source_control: "Git" or "Tfvc"
        wait: Block until the project is listed
        max_attempts: Poll budget when waiting
        interval: Seconds between polls
        sleep: Sleep function used while polling

    Returns:
        Operation reference returned by the server

    Raises:
        VstsError: NOT_FOUND for an unknown template, TIMEOUT if the project
            never appears, STATUS on API errors.
    """
    template_id = resolve_id(
        process_template,
        lambda: list_process_templates(client),
        kind="process template",
    )
    body = {
        "name": name,
        "description": description,
        "capabilities": {
            "versioncontrol": {"sourceControlType": source_control},
            "processTemplate": {"templateTypeId": template_id},
        },
    }
    operation = client.invoke("projects", method="POST", body=body)
    logger.info("Project creation queued", project=name, operation=operation.get("id"))

    if wait:
        wait_for_project(
            client,
            name,
            should_exist=True,
            max_attempts=max_attempts,
            interval=interval,
            sleep=sleep,
        )
    return operation


def remove_project(
    client: VstsClient,
    name: str,
    wait: bool = True,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """
    Delete a project. DESTRUCTIVE: all work items, repositories and builds
    in the project are removed with it.

    Returns:
        Operation reference returned by the server
    """
    project_id = resolve_id(name, lambda: client.invoke_collection("projects"), kind="project")
    operation = client.invoke(f"projects/{project_id}", method="DELETE")
    logger.info("Project deletion queued", project=name, operation=operation.get("id"))

    if wait:
        wait_for_project(
            client,
            name,
            should_exist=False,
            max_attempts=max_attempts,
            interval=interval,
            sleep=sleep,
        )
    return operation
