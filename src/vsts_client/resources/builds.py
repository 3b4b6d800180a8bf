# ABOUTME: Build operations for the VSTS REST client
# ABOUTME: Queues builds, inspects results and downloads build artifacts

"""Build operations.

Build endpoints are versioned separately from the core API and are called
with api-version 2.0. Build definitions have numeric ids, so ``queue_build``
treats an all-digit definition reference as an id and anything else as a
definition name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.utils.resolve import looks_like_number, resolve_id

if TYPE_CHECKING:
    from os import PathLike

    from vsts_client.utils.client import VstsClient

logger = structlog.get_logger(__name__)

BUILD_API_VERSION = "2.0"


@dataclass
class BuildDefinition:
    """Flattened build definition."""

    id: int
    name: str
    path: str = "\\"
    queue_status: str = "enabled"

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> BuildDefinition:
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            path=data.get("path", "\\"),
            queue_status=data.get("queueStatus", "enabled"),
        )


def list_build_definitions(client: VstsClient, project: str) -> list[BuildDefinition]:
    items = client.invoke_collection(
        "build/definitions", project=project, version=BUILD_API_VERSION
    )
    return [BuildDefinition.from_api_response(item) for item in items]


def list_builds(client: VstsClient, project: str, top: int | None = None) -> list[dict[str, Any]]:
    """List builds, newest first, optionally capped at ``top`` entries."""
    params = {"$top": top} if top is not None else None
    return client.invoke_collection(
        "build/builds", project=project, version=BUILD_API_VERSION, params=params
    )


def get_build(client: VstsClient, project: str, build_id: int) -> dict[str, Any]:
    return client.invoke(f"build/builds/{build_id}", project=project, version=BUILD_API_VERSION)


def queue_build(
    client: VstsClient,
    project: str,
    definition: str | int,
    source_branch: str | None = None,
) -> dict[str, Any]:
    """
    Queue a build.

    Args:
        client: Open client
        project: Project name or id
        definition: Definition id or exact definition name
        source_branch: Branch to build, e.g. "refs/heads/main"

    Returns:
        The queued build

    Raises:
        VstsError: NOT_FOUND if no definition has that name
    """
    definition_id = resolve_id(
        str(definition),
        lambda: client.invoke_collection(
            "build/definitions", project=project, version=BUILD_API_VERSION
        ),
        kind="build definition",
        is_id=looks_like_number,
    )
    body: dict[str, Any] = {"definition": {"id": int(definition_id)}}
    if source_branch:
        body["sourceBranch"] = source_branch

    build = client.invoke(
        "build/builds", project=project, version=BUILD_API_VERSION, method="POST", body=body
    )
    logger.info("Build queued", project=project, definition=definition_id, build=build.get("id"))
    return build


def remove_build(client: VstsClient, project: str, build_id: int) -> None:
    client.invoke(
        f"build/builds/{build_id}", project=project, version=BUILD_API_VERSION, method="DELETE"
    )


def list_build_artifacts(client: VstsClient, project: str, build_id: int) -> list[dict[str, Any]]:
    return client.invoke_collection(
        f"build/builds/{build_id}/artifacts", project=project, version=BUILD_API_VERSION
    )


def download_build_artifact(
    client: VstsClient,
    project: str,
    build_id: int,
    artifact_name: str,
    out_file: str | PathLike[str],
) -> None:
    """Download one artifact as a zip archive to ``out_file``."""
    client.invoke(
        f"build/builds/{build_id}/artifacts",
        project=project,
        version=BUILD_API_VERSION,
        params={"artifactName": artifact_name, "$format": "zip"},
        out_file=out_file,
    )
    logger.info("Artifact downloaded", build=build_id, artifact=artifact_name, out_file=str(out_file))
