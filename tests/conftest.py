# ABOUTME: Pytest fixtures and configuration for VSTS client tests
# ABOUTME: Provides shared sessions, clients and sample API payloads

import os
from typing import Any, Iterator

import pytest

from vsts_client.config import Session
from vsts_client.utils.client import VstsClient

ACCOUNT_URL = "https://acme.visualstudio.com/DefaultCollection"


@pytest.fixture
def session() -> Session:
    """Create a hosted-account session for respx-based tests."""
    return Session.for_account("acme", user="bob", token="tok123")


@pytest.fixture
def server_session() -> Session:
    """Create an on-premises server session."""
    return Session.for_server("tfs.local:8080", user="alice", token="secret", scheme="http")


@pytest.fixture
def client(session: Session) -> Iterator[VstsClient]:
    """Create an open client. Use together with respx.mock."""
    with VstsClient(session) as c:
        yield c


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    """Sleep function that returns immediately."""
    return RecordingSleep()


@pytest.fixture
def sample_projects() -> dict[str, Any]:
    """Projects list envelope."""
    return {
        "count": 2,
        "value": [
            {
                "id": "eb6e4656-77fc-42a1-9181-4c6d8e9da5d1",
                "name": "Fabrikam-Fiber-TFVC",
                "description": "Team Foundation Version Control projects.",
                "state": "wellFormed",
                "url": f"{ACCOUNT_URL}/_apis/projects/eb6e4656-77fc-42a1-9181-4c6d8e9da5d1",
            },
            {
                "id": "6ce954b1-ce1f-45d1-b94d-e6bf2464ba2c",
                "name": "MyProj",
                "description": "Git projects",
                "state": "wellFormed",
                "url": f"{ACCOUNT_URL}/_apis/projects/6ce954b1-ce1f-45d1-b94d-e6bf2464ba2c",
            },
        ],
    }


@pytest.fixture
def sample_repositories() -> dict[str, Any]:
    """Git repositories list envelope."""
    return {
        "count": 2,
        "value": [
            {
                "id": "5febef5a-833d-4e14-b9c0-14cb638f91e6",
                "name": "web",
                "project": {"id": "6ce954b1-ce1f-45d1-b94d-e6bf2464ba2c", "name": "MyProj"},
                "defaultBranch": "refs/heads/main",
                "remoteUrl": "https://acme.visualstudio.com/DefaultCollection/MyProj/_git/web",
            },
            {
                "id": "278d5cd2-584d-4b63-824a-2ba458937249",
                "name": "api",
                "project": {"id": "6ce954b1-ce1f-45d1-b94d-e6bf2464ba2c", "name": "MyProj"},
                "remoteUrl": "https://acme.visualstudio.com/DefaultCollection/MyProj/_git/api",
            },
        ],
    }


# Integration test fixtures


@pytest.fixture
def live_session() -> Session | None:
    """Build a session from VSTS_* environment variables, if present."""
    user = os.environ.get("VSTS_USER")
    token = os.environ.get("VSTS_TOKEN")
    if not user or not token:
        return None
    if os.environ.get("VSTS_ACCOUNT"):
        return Session.for_account(os.environ["VSTS_ACCOUNT"], user=user, token=token)
    if os.environ.get("VSTS_SERVER"):
        return Session.for_server(os.environ["VSTS_SERVER"], user=user, token=token)
    return None
