# ABOUTME: Session and settings management for the VSTS REST client
# ABOUTME: Immutable connection identity plus environment-driven settings loading

"""
Session and configuration management using pydantic and pydantic-settings.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

Every API call needs to know three things:

1. WHERE to send the request (hosted account or on-premises server)
2. WHICH collection to address (usually "DefaultCollection")
3. WHO is calling (user name plus personal access token)

That bundle is the SESSION. It is built once and handed to every call.
Sessions are FROZEN: once created, no field can be reassigned.

=============================================================================
ACCOUNT OR SERVER, NEVER BOTH
=============================================================================

A session targets either:

    AccountHost(account="contoso")      -> https://contoso.visualstudio.com
    ServerHost(server="tfs.local:8080") -> https://tfs.local:8080

The two shapes are a DISCRIMINATED UNION on the ``kind`` field, so a
Session physically cannot carry both identities. Pick one of the class
method constructors:

    Session.for_account("contoso", user="alice", token="...")
    Session.for_server("tfs.local:8080", user="alice", token="...")

=============================================================================
ENVIRONMENT VARIABLE MAPPING
=============================================================================

    VSTS_ACCOUNT      -> Hosted account short name
    VSTS_SERVER       -> Explicit server host name (mutually exclusive)
    VSTS_COLLECTION   -> Collection name (default: DefaultCollection)
    VSTS_USER         -> User identifier
    VSTS_TOKEN        -> Personal access token
    VSTS_SCHEME       -> http or https (default: https)
    VSTS_API_VERSION  -> Default api-version (default: 1.0)
    VSTS_LOG_LEVEL    -> Logging level (default: INFO)
    VSTS_LOG_JSON     -> Emit JSON logs instead of console output
"""

from __future__ import annotations

import os
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HOSTED_DOMAIN = "visualstudio.com"
DEFAULT_COLLECTION = "DefaultCollection"

Scheme = Literal["http", "https"]


# =============================================================================
# HOST IDENTITY
# =============================================================================


class AccountHost(BaseModel):
    """Hosted account, addressed as ``{account}.visualstudio.com``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["account"] = "account"
    account: str = Field(min_length=1, description="Hosted account short name")

    @property
    def hostname(self) -> str:
        return f"{self.account}.{HOSTED_DOMAIN}"


class ServerHost(BaseModel):
    """Explicit server, e.g. an on-premises TFS instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["server"] = "server"
    server: str = Field(min_length=1, description="Server host name, optionally with port")

    @property
    def hostname(self) -> str:
        return self.server


HostIdentity = Annotated[Union[AccountHost, ServerHost], Field(discriminator="kind")]


# =============================================================================
# SESSION
# =============================================================================


class Session(BaseModel):
    """
    Immutable connection configuration shared by every API call.

    WHY FROZEN?
    -----------
    A session may be read by several independent call sequences at once.
    Because nothing can change it after construction, no locking is needed.
    Assigning to any field raises ``pydantic.ValidationError``.

    USAGE EXAMPLE:
    --------------
        session = Session.for_account("acme", user="bob", token="tok123")
        session.base_url  # "https://acme.visualstudio.com"
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: HostIdentity
    user: str = Field(description="User identifier for basic authentication")
    token: SecretStr = Field(description="Personal access token")
    # SecretStr keeps the token out of repr() and logs.
    # Use token.get_secret_value() to read it.

    collection: str = Field(default=DEFAULT_COLLECTION, min_length=1)
    scheme: Scheme = Field(default="https")

    @classmethod
    def for_account(
        cls,
        account: str,
        user: str,
        token: str | SecretStr,
        collection: str = DEFAULT_COLLECTION,
        scheme: Scheme = "https",
    ) -> Session:
        """Build a session for a hosted account."""
        return cls(
            host=AccountHost(account=account),
            user=user,
            token=token,
            collection=collection,
            scheme=scheme,
        )

    @classmethod
    def for_server(
        cls,
        server: str,
        user: str,
        token: str | SecretStr,
        collection: str = DEFAULT_COLLECTION,
        scheme: Scheme = "https",
    ) -> Session:
        """Build a session for an explicit server host."""
        return cls(
            host=ServerHost(server=server),
            user=user,
            token=token,
            collection=collection,
            scheme=scheme,
        )

    @property
    def base_url(self) -> str:
        """Scheme plus host, without a trailing slash."""
        return f"{self.scheme}://{self.host.hostname}"


# =============================================================================
# SETTINGS
# =============================================================================


class ClientSettings(BaseSettings):
    """
    Environment-driven client settings.

    Most applications build a Session directly. This class exists for
    scripts and CI jobs that prefer to configure the client through
    ``VSTS_*`` environment variables or an env file.

    USAGE:
    ------
        settings = load_settings()
        with VstsClient(settings.session) as client:
            ...
    """

    model_config = SettingsConfigDict(
        env_prefix="VSTS_",
        extra="ignore",
    )

    account: str | None = Field(default=None, description="Hosted account short name")
    server: str | None = Field(default=None, description="Explicit server host name")
    collection: str = Field(default=DEFAULT_COLLECTION, description="Collection name")

    user: str = Field(default="", description="User identifier")
    token: SecretStr = Field(default=SecretStr(""), description="Personal access token")
    scheme: Scheme = Field(default="https", description="Transport scheme")

    api_version: str = Field(default="1.0", description="Default api-version query value")

    log_level: Annotated[str, Field(pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    @model_validator(mode="after")
    def check_single_identity(self) -> ClientSettings:
        """Reject configurations naming both an account and a server."""
        if self.account and self.server:
            raise ValueError("Set either VSTS_ACCOUNT or VSTS_SERVER, not both")
        return self

    @property
    def session(self) -> Session:
        """
        Build the Session described by these settings.

        Raises:
            ValueError: If neither an account nor a server is configured.
        """
        if self.account:
            host: AccountHost | ServerHost = AccountHost(account=self.account)
        elif self.server:
            host = ServerHost(server=self.server)
        else:
            raise ValueError("No VSTS_ACCOUNT or VSTS_SERVER configured")
        return Session(
            host=host,
            user=self.user,
            token=self.token,
            collection=self.collection,
            scheme=self.scheme,
        )


def load_settings() -> ClientSettings:
    """
    Load settings from the environment.

    If ``VSTS_ENV_FILE`` is set, variables are also read from that file.

    Raises:
        pydantic.ValidationError: If configuration is invalid.
    """
    return ClientSettings(
        _env_file=os.environ.get("VSTS_ENV_FILE"),
    )
