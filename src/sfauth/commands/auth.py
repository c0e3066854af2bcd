"""Auth commands -- log in, refresh a token, and check hashed secrets.

Typical workflow::

    sfauth profile add prod -P client_id=env:SF_CLIENT_ID -P password=prompt ...
    sfauth -p prod login
    sfauth -p prod refresh --refresh-token env:SF_REFRESH_TOKEN
    sfauth verify-secret '$2b$10$...' --source prompt

Credential values are never passed on the command line, only their
sources (``env:VAR``, ``file:/path``, ``prompt``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import httpx
import typer

from sfauth.exit_codes import EXIT_AUTH_FAILURE
from sfauth.output import debug, describe_session, emit, error, success

if TYPE_CHECKING:
    from sfauth.models import Profile

REFRESH_PARAMETERS = ("client_id", "client_secret")
"""Profile parameters forwarded to the refresh-token grant."""


def _parse_params(values: Optional[list[str]]) -> dict[str, str]:
    """Turn ``["client_id=env:ID", ...]`` into ``{"client_id": "env:ID"}``."""
    from sfauth.exceptions import InvalidUsageError

    parsed: dict[str, str] = {}
    for value in values or []:
        key, sep, source = value.partition("=")
        if not sep or not key:
            raise InvalidUsageError(
                f"Invalid parameter '{value}': expected NAME=SOURCE (e.g. password=prompt)"
            )
        parsed[key.strip()] = source.strip()
    return parsed


def _active_profile(
    ctx: typer.Context,
    auth_type: Optional[str],
    instance: Optional[str],
    params: Optional[list[str]],
) -> Profile:
    """Resolve the active profile and apply command-line overrides.

    Without a saved profile an unnamed one is built from the overrides
    alone, so ``login`` also works ad hoc.
    """
    from sfauth.config import resolve_profile
    from sfauth.models import Profile

    cli_profile = ctx.obj.get("profile") if ctx.obj else None
    profile = resolve_profile(cli_profile) or Profile(name="(ad hoc)")
    if auth_type is not None:
        profile.auth_type = auth_type
    if instance is not None:
        profile.instance_name = instance
    profile.parameters.update(_parse_params(params))
    return profile


def login_command(
    ctx: typer.Context,
    auth_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Authenticator type: password, oauth."
    ),
    instance: Optional[str] = typer.Option(
        None, "--instance", "-i", help="Salesforce instance name (e.g. salesforce.com)."
    ),
    param: Optional[list[str]] = typer.Option(
        None,
        "--param",
        "-P",
        help="Credential parameter as NAME=SOURCE (env:VAR, file:/path, prompt). Repeatable.",
    ),
    show_token: bool = typer.Option(
        False, "--show-token", help="Print the full Authorization header."
    ),
) -> None:
    """Authenticate and print the resulting session.

    Resolves the active profile, applies overrides, resolves every
    credential source and runs the selected authenticator.

    Example::

        sfauth -p prod login
        sfauth login -t oauth -P access_token=env:SF_TOKEN -P instance_url=env:SF_URL
    """
    from sfauth.authenticator import create_authenticator
    from sfauth.config import resolve_parameters
    from sfauth.exceptions import ConnectionError_

    profile = _active_profile(ctx, auth_type, instance, param)
    authenticator = create_authenticator(
        profile.auth_type, profile.instance_name, profile.request.to_client_options()
    )
    parameters = resolve_parameters(profile)
    debug(f"Authenticating with {profile.auth_type} against {profile.instance_name}")

    try:
        client = authenticator.authenticate(parameters)
    except httpx.TransportError as exc:
        raise ConnectionError_(f"Cannot reach {authenticator.login_endpoint}: {exc}") from exc

    with client:
        emit(describe_session(profile.name, profile.auth_type, client, show_token))
    success("Authenticated.")


def refresh_command(
    ctx: typer.Context,
    refresh_token: str = typer.Option(
        ..., "--refresh-token", "-r", help="Refresh token source (env:VAR, file:/path, prompt)."
    ),
    instance: Optional[str] = typer.Option(
        None, "--instance", "-i", help="Salesforce instance name (e.g. salesforce.com)."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Client credential as NAME=SOURCE. Repeatable."
    ),
    show_token: bool = typer.Option(
        False, "--show-token", help="Print the full Authorization header."
    ),
) -> None:
    """Exchange a refresh token for a new access token.

    Only ``client_id`` and ``client_secret`` are taken from the profile;
    other parameters are not sent with the refresh grant.

    Example::

        sfauth -p prod refresh -r env:SF_REFRESH_TOKEN
    """
    from sfauth.authenticator import OAuth
    from sfauth.config import resolve_credential
    from sfauth.exceptions import ConnectionError_

    profile = _active_profile(ctx, "oauth", instance, param)
    authenticator = OAuth.create(profile.instance_name, profile.request.to_client_options())
    parameters = {
        name: resolve_credential(source, label=name)
        for name, source in profile.parameters.items()
        if name in REFRESH_PARAMETERS
    }
    token = resolve_credential(refresh_token, label="refresh token")

    try:
        client = authenticator.refresh(token, parameters)
    except httpx.TransportError as exc:
        raise ConnectionError_(
            f"Cannot reach {authenticator.options['base_uri']}: {exc}"
        ) from exc

    with client:
        emit(describe_session(profile.name, profile.auth_type, client, show_token))
    success("Token refreshed.")


def verify_secret_command(
    hashed: str = typer.Argument(help="Hash taken from an error's parameter snapshot."),
    source: str = typer.Option(
        "prompt", "--source", "-s", help="Secret source: env:VAR, file:/path, prompt."
    ),
) -> None:
    """Check whether a secret matches a hash from an error report.

    Exits with code 3 when the secret does not match.

    Example::

        sfauth verify-secret '$2b$10$...' --source env:SF_PASSWORD
    """
    from sfauth.config import resolve_credential
    from sfauth.obfuscate import verify_secret

    secret = resolve_credential(source, label="secret")
    if verify_secret(secret, hashed):
        success("Secret matches.")
        return
    error("Secret does not match.")
    raise typer.Exit(code=EXIT_AUTH_FAILURE)
