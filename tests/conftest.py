"""Shared test fixtures for sfauth.

Provides reusable fixtures for simulating the Salesforce token endpoint,
creating isolated config environments, resetting output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from sfauth.models import Profile
from sfauth.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Simulated token endpoint
# ---------------------------------------------------------------------------


class TokenEndpoint:
    """Records requests and answers them with a canned response.

    Pass ``endpoint.options()`` as the authenticator options so that every
    client it builds talks to this fake instead of the network.
    """

    def __init__(self, body: Any = None, status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def options(self, **extra: Any) -> dict[str, Any]:
        return {"transport": httpx.MockTransport(self.handler), **extra}

    @property
    def last_form(self) -> dict[str, str]:
        """The form fields of the most recent request."""
        from urllib.parse import parse_qsl

        return dict(parse_qsl(self.requests[-1].content.decode("utf-8")))


@pytest.fixture
def token_endpoint() -> Callable[..., TokenEndpoint]:
    """Factory fixture: ``token_endpoint(body, status_code=200)``."""
    return TokenEndpoint


@pytest.fixture
def password_parameters() -> dict[str, str]:
    return {
        "client_id": "id",
        "client_secret": "sec",
        "username": "u",
        "password": "p",
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, and clears all SFAUTH_*
    environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("sfauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SFAUTH_PROFILE", "SFAUTH_INSTANCE_NAME"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_profile() -> Profile:
    """A password profile whose credentials come from environment variables."""
    return Profile(
        name="prod",
        auth_type="password",
        instance_name="na1.salesforce.com",
        parameters={
            "client_id": "env:SF_CLIENT_ID",
            "client_secret": "env:SF_CLIENT_SECRET",
            "username": "env:SF_USERNAME",
            "password": "env:SF_PASSWORD",
        },
    )


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
