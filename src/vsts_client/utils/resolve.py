# ABOUTME: Name-to-identifier resolution for VSTS resources
# ABOUTME: Passes ids through untouched and looks names up by exact match

"""Resolve human-readable resource names to server-issued identifiers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.utils.client import ErrorKind, VstsError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = structlog.get_logger(__name__)

GUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def looks_like_guid(reference: str) -> bool:
    """Return True if reference has the 8-4-4-4-12 hex GUID shape."""
    return bool(GUID_PATTERN.match(reference))


def looks_like_number(reference: str) -> bool:
    """Return True for numeric ids such as build definition ids."""
    return reference.isdigit()


def resolve_id(
    reference: str,
    lookup: Callable[[], Iterable[dict[str, Any]]],
    kind: str,
    name_key: str = "name",
    id_key: str = "id",
    is_id: Callable[[str], bool] = looks_like_guid,
) -> str:
    """Return the identifier for a resource given its id or its name.

    When ``reference`` already looks like an identifier it is returned as-is
    and ``lookup`` is never called. Otherwise ``lookup`` lists the candidate
    resources and the one whose ``name_key`` equals ``reference`` wins.

    Args:
        reference: Identifier or exact resource name
        lookup: Zero-argument callable listing candidate resources
        kind: Resource kind used in error messages (e.g. "repository")
        name_key: Field holding the display name
        id_key: Field holding the identifier
        is_id: Predicate deciding whether reference is already an id

    Returns:
        The identifier as a string

    Raises:
        VstsError: NOT_FOUND when no resource has that name. Errors raised
            by ``lookup`` propagate unchanged.
    """
    if is_id(reference):
        return reference

    for item in lookup():
        if item.get(name_key) == reference:
            resolved = str(item[id_key])
            logger.debug("Resolved resource name", kind=kind, name=reference, id=resolved)
            return resolved

    raise VstsError(ErrorKind.NOT_FOUND, f"Could not find {kind} with name '{reference}'")
