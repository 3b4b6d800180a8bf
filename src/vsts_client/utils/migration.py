# ABOUTME: Git repository migration into VSTS via the git command-line tool
# ABOUTME: Mirror-clones a source repository and pushes it into a new VSTS repository

"""Repository migration adapter.

This is the only part of the library that runs an external process. It is
kept apart from the REST client: the client never calls it, and it only
needs an open ``VstsClient`` to create the target repository.

Steps:
    1. check that git is on PATH (before any network request)
    2. git clone --mirror <source> <workdir>/<name>.git
    3. create the target repository through the REST API
    4. git push --mirror to the new repository, authenticating with the
       same basic authorization header the REST client uses. The header is
       passed through GIT_CONFIG_* environment variables (git 2.31+) so it
       never appears in the process list.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from vsts_client.resources.git import Repository, add_repository
from vsts_client.utils.client import ErrorKind, VstsError, get_authorization

if TYPE_CHECKING:
    from collections.abc import Callable

    from vsts_client.utils.client import VstsClient

logger = structlog.get_logger(__name__)


class GitMigrator:
    """Copies a Git repository, with full history, into a VSTS project."""

    def __init__(
        self,
        client: VstsClient,
        git: str = "git",
        runner: Callable[..., Any] = subprocess.run,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        """Initialize the migrator.

        Args:
            client: Open client used to create the target repository
            git: git executable name or path
            runner: subprocess.run compatible callable
            which: shutil.which compatible callable
        """
        self._client = client
        self._git = git
        self._runner = runner
        self._which = which

    def check(self) -> None:
        """Raise VstsError(PRECONDITION) if git cannot be found."""
        if self._which(self._git) is None:
            raise VstsError(
                ErrorKind.PRECONDITION,
                f"'{self._git}' was not found on PATH; it is required to migrate repositories",
            )

    def _run(
        self,
        command: str,
        args: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        logger.debug("Running git", command=command, cwd=str(cwd) if cwd else None)
        self._runner(
            [self._git, *args], cwd=cwd, env=env, check=True, capture_output=True, text=True
        )

    def _auth_env(self) -> dict[str, str]:
        """Environment that hands git the authorization header without a command-line flag."""
        session = self._client.session
        header = get_authorization(session.user, session.token.get_secret_value())
        env = dict(os.environ)
        # Appended after any GIT_CONFIG_KEY_n entries already present
        index = int(env.get("GIT_CONFIG_COUNT", "0") or 0)
        env["GIT_CONFIG_COUNT"] = str(index + 1)
        env[f"GIT_CONFIG_KEY_{index}"] = "http.extraheader"
        env[f"GIT_CONFIG_VALUE_{index}"] = f"Authorization: {header}"
        return env

    def migrate(
        self,
        source_url: str,
        project: str,
        name: str,
        workdir: str | Path,
    ) -> Repository:
        """
        Migrate ``source_url`` into a new repository ``name`` in ``project``.

        Returns:
            The created repository

        Raises:
            VstsError: PRECONDITION if git is missing, STATUS on API errors
            subprocess.CalledProcessError: If a git command fails
        """
        self.check()

        mirror = Path(workdir) / f"{name}.git"
        self._run("clone", ["clone", "--mirror", source_url, str(mirror)])

        repo = add_repository(self._client, project, name)

        self._run("push", ["push", "--mirror", repo.remote_url], cwd=mirror, env=self._auth_env())
        logger.info("Repository migrated", source=source_url, project=project, repository=name)
        return repo
