# ABOUTME: VSTS REST client package initialization
# ABOUTME: Exposes the session, client and error types plus version information

"""
vsts-client - thin synchronous client for the VSTS / TFS REST API.

=============================================================================
QUICK START
=============================================================================

    from vsts_client import Session, VstsClient
    from vsts_client.resources.projects import list_projects

    session = Session.for_account("acme", user="bob", token="...")
    with VstsClient(session) as client:
        for project in list_projects(client):
            print(project.name)

=============================================================================
PACKAGE STRUCTURE OVERVIEW
=============================================================================

vsts_client/
├── __init__.py          <- Package entry point
├── config.py            <- Session and environment settings
├── utils/
│   ├── client.py        <- Endpoint invoker, auth header, errors
│   ├── resolve.py       <- Name-to-identifier resolution
│   ├── polling.py       <- Existence poller for async operations
│   ├── logging.py       <- structlog setup and correlation IDs
│   └── migration.py     <- git-based repository migration
└── resources/
    ├── projects.py      <- Team projects
    ├── work_items.py    <- Work items and queries
    ├── git.py           <- Git repositories
    ├── builds.py        <- Builds and artifacts
    └── policies.py      <- Branch policies
"""

from vsts_client.config import AccountHost, ServerHost, Session, load_settings
from vsts_client.utils.client import (
    ErrorKind,
    PagedCollection,
    VstsClient,
    VstsError,
    build_uri,
    get_authorization,
)

__version__ = "0.1.0"

__all__ = [
    "AccountHost",
    "ErrorKind",
    "PagedCollection",
    "ServerHost",
    "Session",
    "VstsClient",
    "VstsError",
    "__version__",
    "build_uri",
    "get_authorization",
    "load_settings",
]
