# ABOUTME: Git repository operations for the VSTS REST client
# ABOUTME: Lists, creates and deletes repositories addressed by name or GUID

"""Git repository operations.

Most repository endpoints want the repository GUID, while people think in
repository names. Every function taking a ``reference`` accepts either; a
name is resolved with a list-then-match lookup on each call.

    API: GET    [{project}/]_apis/git/repositories
         GET    {project}/_apis/git/repositories/{id}
         POST   _apis/git/repositories
         DELETE {project}/_apis/git/repositories/{id}
         GET    {project}/_apis/git/repositories/{id}/refs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.resources.projects import get_project
from vsts_client.utils.resolve import resolve_id

if TYPE_CHECKING:
    from vsts_client.utils.client import VstsClient

logger = structlog.get_logger(__name__)


@dataclass
class Repository:
    """Flattened Git repository."""

    id: str
    name: str
    project: str = ""
    default_branch: str | None = None
    remote_url: str = ""

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Repository:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            project=(data.get("project") or {}).get("name", ""),
            default_branch=data.get("defaultBranch"),
            remote_url=data.get("remoteUrl", ""),
        )


def list_repositories(client: VstsClient, project: str | None = None) -> list[Repository]:
    """List repositories in one project, or across the collection."""
    items = client.invoke_collection("git/repositories", project=project)
    return [Repository.from_api_response(item) for item in items]


def resolve_repository_id(client: VstsClient, project: str, reference: str) -> str:
    """Return the repository GUID for a name or GUID."""
    return resolve_id(
        reference,
        lambda: client.invoke_collection("git/repositories", project=project),
        kind="repository",
    )


def get_repository(client: VstsClient, project: str, reference: str) -> Repository:
    """Get a repository by name or GUID."""
    repo_id = resolve_repository_id(client, project, reference)
    return Repository.from_api_response(
        client.invoke(f"git/repositories/{repo_id}", project=project)
    )


def add_repository(client: VstsClient, project: str, name: str) -> Repository:
    """Create an empty Git repository in a project."""
    project_id = get_project(client, project).id
    body = {"name": name, "project": {"id": project_id}}
    repo = Repository.from_api_response(client.invoke("git/repositories", method="POST", body=body))
    logger.info("Repository created", project=project, repository=name, id=repo.id)
    return repo


def remove_repository(client: VstsClient, project: str, reference: str) -> None:
    """Delete a repository. DESTRUCTIVE."""
    repo_id = resolve_repository_id(client, project, reference)
    client.invoke(f"git/repositories/{repo_id}", project=project, method="DELETE")
    logger.info("Repository deleted", project=project, repository=reference)


def list_refs(client: VstsClient, project: str, reference: str) -> list[dict[str, Any]]:
    """List branches and tags of a repository."""
    repo_id = resolve_repository_id(client, project, reference)
    return client.invoke_collection(f"git/repositories/{repo_id}/refs", project=project)
