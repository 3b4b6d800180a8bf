# ABOUTME: Branch policy operations for the VSTS REST client
# ABOUTME: Manages policy configurations and resolves policy types by display name

"""
Branch policy operations.

A policy configuration pairs a policy TYPE (minimum reviewers, build
validation, work item linking, ...) with type-specific settings:

    {
        "isEnabled": true,
        "isBlocking": true,
        "type": {"id": "fa4e907d-c16b-4a4c-9dfa-4906e5d171dd"},
        "settings": {
            "minimumApproverCount": 2,
            "scope": [{"repositoryId": "...", "refName": "refs/heads/main", "matchKind": "exact"}]
        }
    }

Policy types are identified by GUID; ``add_policy`` and ``update_policy``
also accept the type's display name (e.g. "Minimum number of reviewers").

    API: GET    {project}/_apis/policy/types
         GET    {project}/_apis/policy/configurations[/{id}]
         POST   {project}/_apis/policy/configurations
         PUT    {project}/_apis/policy/configurations/{id}
         DELETE {project}/_apis/policy/configurations/{id}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.utils.resolve import resolve_id

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vsts_client.utils.client import VstsClient

logger = structlog.get_logger(__name__)

POLICY_API_VERSION = "2.0-preview.1"


def list_policy_types(client: VstsClient, project: str) -> list[dict[str, Any]]:
    """List the policy types available in a project."""
    return client.invoke_collection("policy/types", project=project, version=POLICY_API_VERSION)


def resolve_policy_type_id(client: VstsClient, project: str, policy_type: str) -> str:
    """Return the policy type GUID for a GUID or display name."""
    return resolve_id(
        policy_type,
        lambda: list_policy_types(client, project),
        kind="policy type",
        name_key="displayName",
    )


def list_policies(client: VstsClient, project: str) -> list[dict[str, Any]]:
    """List policy configurations in a project."""
    return client.invoke_collection(
        "policy/configurations", project=project, version=POLICY_API_VERSION
    )


def get_policy(client: VstsClient, project: str, policy_id: int) -> dict[str, Any]:
    return client.invoke(
        f"policy/configurations/{policy_id}", project=project, version=POLICY_API_VERSION
    )


def _policy_body(
    type_id: str,
    settings: Mapping[str, Any],
    enabled: bool,
    blocking: bool,
) -> dict[str, Any]:
    return {
        "isEnabled": enabled,
        "isBlocking": blocking,
        "type": {"id": type_id},
        "settings": dict(settings),
    }


def add_policy(
    client: VstsClient,
    project: str,
    policy_type: str,
    settings: Mapping[str, Any],
    enabled: bool = True,
    blocking: bool = True,
) -> dict[str, Any]:
    """
    Create a policy configuration.

    Args:
        client: Open client
        project: Project name or id
        policy_type: Policy type GUID or display name
        settings: Type-specific settings, including the "scope" list
        enabled: Whether the policy is enforced at all
        blocking: Whether a failing policy blocks completion

    Returns:
        The created policy configuration
    """
    type_id = resolve_policy_type_id(client, project, policy_type)
    policy = client.invoke(
        "policy/configurations",
        project=project,
        version=POLICY_API_VERSION,
        method="POST",
        body=_policy_body(type_id, settings, enabled, blocking),
    )
    logger.info("Policy created", project=project, type=type_id, id=policy.get("id"))
    return policy


def update_policy(
    client: VstsClient,
    project: str,
    policy_id: int,
    policy_type: str,
    settings: Mapping[str, Any],
    enabled: bool = True,
    blocking: bool = True,
) -> dict[str, Any]:
    """Replace an existing policy configuration."""
    type_id = resolve_policy_type_id(client, project, policy_type)
    return client.invoke(
        f"policy/configurations/{policy_id}",
        project=project,
        version=POLICY_API_VERSION,
        method="PUT",
        body=_policy_body(type_id, settings, enabled, blocking),
    )


def remove_policy(client: VstsClient, project: str, policy_id: int) -> None:
    client.invoke(
        f"policy/configurations/{policy_id}",
        project=project,
        version=POLICY_API_VERSION,
        method="DELETE",
    )
    logger.info("Policy deleted", project=project, id=policy_id)
