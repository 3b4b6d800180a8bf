# ABOUTME: Generic endpoint invoker for the VSTS REST API
# ABOUTME: Builds URIs, attaches basic auth, dispatches verbs and decodes responses

"""
VSTS REST client core: URI construction, authorization and request dispatch.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

Every operation in this library ends up here. The per-resource helpers in
``vsts_client.resources`` only format a path and shape a body; this module:

1. BUILDS the URI from session + project + resource path + query
2. AUTHENTICATES with an HTTP Basic header derived from user and token
3. DISPATCHES the verb, picking the right Content-Type for the body
4. DECODES JSON responses, or streams binary downloads to a file
5. CONVERTS error statuses into VstsError

=============================================================================
URI SHAPE
=============================================================================

    {scheme}://{host}/{collection}[/{project}]/_apis/{resource}?{query}&api-version={v}

Examples:

    https://acme.visualstudio.com/DefaultCollection/_apis/projects?api-version=1.0
    https://acme.visualstudio.com/DefaultCollection/MyProj/_apis/wit/queries?$depth=1&api-version=1.0

=============================================================================
CONTENT TYPES
=============================================================================

    PUT, POST -> application/json
    PATCH     -> application/json-patch+json   (work item field updates)

=============================================================================
COLLECTION RESPONSES
=============================================================================

List endpoints wrap their results in an envelope:

    {"count": 2, "value": [{...}, {...}]}

``invoke_collection`` decodes that envelope through ``PagedCollection`` and
hands back the items, so callers never poke at ``["value"]`` directly.

=============================================================================
NO RETRIES
=============================================================================

Unlike many API clients, this one never retries. A failed request raises
immediately; transport errors from httpx propagate unchanged.
"""

from __future__ import annotations

import base64
import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from vsts_client.utils.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Mapping
    from os import PathLike

    from vsts_client.config import ClientSettings, Session

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_API_VERSION = "1.0"

JSON_CONTENT_TYPE = "application/json"
JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"

BODY_METHODS = frozenset(["PUT", "POST", "PATCH"])
ALLOWED_METHODS = frozenset(["GET", "PUT", "POST", "DELETE", "PATCH"])


# =============================================================================
# ERRORS
# =============================================================================


class ErrorKind(str, Enum):
    """Failure categories surfaced by this library."""

    STATUS = "status"
    # The server answered with a 4xx/5xx status

    NOT_FOUND = "not_found"
    # A name lookup produced no match

    TIMEOUT = "timeout"
    # The existence poller ran out of attempts

    PRECONDITION = "precondition"
    # A required external tool is missing


class VstsError(Exception):
    """
    Single error type for every failure this library raises itself.

    The ``kind`` field carries the category, so callers can branch without
    a class hierarchy:

        try:
            repo_id = resolve_repository_id(client, "MyProj", "web")
        except VstsError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                ...

    Transport failures (DNS, refused connections) are NOT wrapped; they
    surface as ``httpx.TransportError``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        code: int | None = None,
        details: str | None = None,
    ) -> None:
        """
        Initialize the error.

        Args:
            kind: Failure category
            message: Human-readable description
            code: HTTP status code, for STATUS errors
            details: Additional server-provided detail (optional)
        """
        self.kind = kind
        self.message = message
        self.code = code
        self.details = details
        super().__init__(str(self))

    def __str__(self) -> str:
        """
        Format the error for display.

        Example:
            "VSTS API error (404): TF200016: The project does not exist - ProjectDoesNotExistException"
        """
        if self.kind is ErrorKind.STATUS:
            base = f"VSTS API error ({self.code}): {self.message}"
        else:
            base = self.message
        if self.details:
            base += f" - {self.details}"
        return base


# =============================================================================
# PURE HELPERS
# =============================================================================


def get_authorization(user: str, token: str) -> str:
    """
    Build the HTTP Basic authorization header value.

    The credentials are joined as ``user:token``, ASCII encoded and base64
    encoded, then prefixed with ``Basic ``.

    Example:
        >>> get_authorization("alice", "secret")
        'Basic YWxpY2U6c2VjcmV0'

    Raises:
        UnicodeEncodeError: If user or token contain non-ASCII characters.
    """
    encoded = base64.b64encode(f"{user}:{token}".encode("ascii")).decode("ascii")
    return f"Basic {encoded}"


def build_uri(
    session: Session,
    resource: str,
    project: str | None = None,
    version: str = DEFAULT_API_VERSION,
    params: Mapping[str, Any] | None = None,
) -> httpx.URL:
    """
    Build the full request URI.

    Args:
        session: Connection configuration
        resource: Path relative to ``_apis/`` (e.g. "wit/queries")
        project: Project name or id; adds a project segment when given
        version: api-version query value
        params: Additional query parameters, in order. A caller-supplied
                ``api-version`` key is replaced by ``version``.

    Returns:
        httpx.URL with the query string already encoded.
    """
    if project:
        path = f"{session.collection}/{project}/_apis/{resource}"
    else:
        path = f"{session.collection}/_apis/{resource}"

    query: dict[str, Any] = {}
    for key, value in (params or {}).items():
        query[key] = value
    # Removed first so api-version always lands last in the query string
    query.pop("api-version", None)
    query["api-version"] = version

    return httpx.URL(f"{session.base_url}/{path}", params=query)


# =============================================================================
# COLLECTION ENVELOPE
# =============================================================================


class PagedCollection(BaseModel, Generic[T]):
    """
    Decoded ``{"count": n, "value": [...]}`` response envelope.

    Example:
        page = PagedCollection[dict[str, Any]].model_validate(data)
        for project in page.items:
            ...
    """

    model_config = ConfigDict(populate_by_name=True)

    count: int | None = None
    items: list[T] = Field(default_factory=list, alias="value")


# =============================================================================
# CLIENT
# =============================================================================


class VstsClient:
    """
    Synchronous VSTS REST client.

    ALWAYS use the context manager so the connection pool is released:

        with VstsClient(session) as client:
            projects = client.invoke_collection("projects")

    The session is only read, never modified, so one Session can back any
    number of clients.
    """

    def __init__(
        self,
        session: Session,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        default_version: str = DEFAULT_API_VERSION,
    ) -> None:
        """
        Initialize the client.

        Args:
            session: Connection configuration
            timeout: Request timeout in seconds. None keeps httpx's default.
            transport: Optional httpx transport (used by tests)
            default_version: api-version used when a call passes none
        """
        self._session = session
        self._default_version = default_version
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> VstsClient:
        """
        Build a client from environment settings.

        Also configures logging from ``log_level`` and ``log_json``.

        Raises:
            ValueError: If neither VSTS_ACCOUNT nor VSTS_SERVER is set
        """
        configure_logging(level=settings.log_level, json_output=settings.log_json)
        return cls(
            settings.session,
            timeout=timeout,
            transport=transport,
            default_version=settings.api_version,
        )

    @property
    def session(self) -> Session:
        return self._session

    @property
    def default_version(self) -> str:
        return self._default_version

    def __enter__(self) -> VstsClient:
        options: dict[str, Any] = {
            "headers": {
                "Authorization": get_authorization(
                    self._session.user, self._session.token.get_secret_value()
                ),
                "Accept": JSON_CONTENT_TYPE,
            },
        }
        if self._timeout is not None:
            options["timeout"] = self._timeout
        if self._transport is not None:
            options["transport"] = self._transport
        self._client = httpx.Client(**options)
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def _raise_for_status(self, response: httpx.Response, log: Any) -> None:
        """Convert a 4xx/5xx response into VstsError."""
        if response.status_code < 400:
            return

        error_body = response.text
        log.warning("VSTS API error", status=response.status_code, body=error_body[:200])

        message = f"HTTP {response.status_code}"
        details = None
        try:
            error_json = response.json()
            message = error_json.get("message", message)
            details = error_json.get("typeKey")
        except (ValueError, AttributeError):
            details = error_body[:200] if error_body else None

        raise VstsError(
            ErrorKind.STATUS,
            message,
            code=response.status_code,
            details=details,
        )

    def invoke(
        self,
        resource: str,
        *,
        project: str | None = None,
        version: str | None = None,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        out_file: str | PathLike[str] | None = None,
    ) -> Any:
        """
        Call one REST endpoint.

        Args:
            resource: Path relative to ``_apis/``
            project: Optional project scope
            version: api-version. None uses the client's default_version.
            method: GET, PUT, POST, DELETE or PATCH
            params: Query parameters
            body: Raw JSON text, or a value to serialize with json.dumps.
                  Only valid for PUT, POST and PATCH.
            out_file: Stream the response body to this path (GET only)

        Returns:
            Parsed JSON response, ``{}`` for an empty body, or None when the
            response was written to ``out_file``.

        Raises:
            VstsError: On a 4xx/5xx response
            ValueError: On an invalid method/body/out_file combination
            RuntimeError: If the client is used outside ``with``
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'with' context manager.")

        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        if body is not None and method not in BODY_METHODS:
            raise ValueError(f"A request body cannot be sent with {method}")
        if out_file is not None and method != "GET":
            raise ValueError("out_file is only supported for GET requests")
        if version is None:
            version = self._default_version

        url = build_uri(self._session, resource, project=project, version=version, params=params)
        log = logger.bind(method=method, resource=resource, project=project)
        log.debug("Making VSTS API request")

        if method in BODY_METHODS:
            content_type = JSON_PATCH_CONTENT_TYPE if method == "PATCH" else JSON_CONTENT_TYPE
            content = None
            if body is not None:
                text = body if isinstance(body, str) else json.dumps(body)
                content = text.encode("utf-8")
            response = self._client.request(
                method,
                url,
                content=content,
                headers={"Content-Type": content_type},
            )
        elif out_file is not None:
            with self._client.stream(method, url) as response:
                if response.status_code >= 400:
                    response.read()
                    self._raise_for_status(response, log)
                with open(out_file, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
            log.debug("Response written to file", out_file=str(out_file))
            return None
        else:
            response = self._client.request(method, url)

        self._raise_for_status(response, log)
        return response.json() if response.content else {}

    def invoke_collection(
        self,
        resource: str,
        *,
        project: str | None = None,
        version: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        GET a list endpoint and unwrap its ``value`` envelope.

        Returns:
            The envelope's items (empty list if the server sent none)
        """
        data = self.invoke(resource, project=project, version=version, params=params)
        page = PagedCollection[dict[str, Any]].model_validate(data)
        return page.items
