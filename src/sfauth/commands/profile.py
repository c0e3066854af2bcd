"""Profile commands -- create, inspect, list, and remove saved profiles.

Profiles record which authenticator to use, the instance name, HTTP
settings, and the *sources* of each credential parameter. They never hold
the secrets themselves.
"""

from __future__ import annotations

from typing import Optional

import typer

from sfauth.output import emit, error, info, success, suggest


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
    auth_type: str = typer.Option(
        "password", "--type", "-t", help="Authenticator type: password, oauth."
    ),
    instance: Optional[str] = typer.Option(
        None, "--instance", "-i", help="Salesforce instance name."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Credential parameter as NAME=SOURCE. Repeatable."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
    verify_ssl: bool = typer.Option(
        True, "--verify-ssl/--no-verify-ssl", help="Verify SSL certificates."
    ),
) -> None:
    """Create or replace a profile.

    Raises:
        typer.Exit: With code 2 if the type is unknown, or if the profile
            exists and ``--force`` was not given.

    Example::

        sfauth profile add prod -t password \\
            -P client_id=env:SF_CLIENT_ID -P client_secret=env:SF_CLIENT_SECRET \\
            -P username=env:SF_USERNAME -P password=prompt
    """
    from sfauth.authenticator import AUTHENTICATORS
    from sfauth.commands.auth import _parse_params
    from sfauth.config import profile_exists, save_profile
    from sfauth.constants import DEFAULT_INSTANCE_NAME
    from sfauth.models import Profile, RequestConfig

    if auth_type not in AUTHENTICATORS:
        error(f"Unknown type '{auth_type}'. Choose from: {', '.join(sorted(AUTHENTICATORS))}")
        raise typer.Exit(code=2)

    force = ctx.obj.get("force", False) if ctx.obj else False
    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists. Use --force to replace it.")
        raise typer.Exit(code=2)

    profile = Profile(
        name=name,
        auth_type=auth_type,
        instance_name=instance or DEFAULT_INSTANCE_NAME,
        request=RequestConfig(timeout=timeout, verify_ssl=verify_ssl),
        parameters=_parse_params(param),
    )
    save_profile(profile)
    success(f'Profile "{name}" saved.')
    suggest(f"Log in: sfauth -p {name} login")


@profile_app.command("show")
def profile_show(
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Show a profile's settings and credential sources."""
    from sfauth.config import load_profile
    from sfauth.exceptions import ConfigError

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None
    emit(profile.model_dump(mode="json"))


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles."""
    from sfauth.config import get_profiles_dir, list_profiles

    profiles = list_profiles()
    if not profiles:
        info(f"No profiles in {get_profiles_dir()}")
        suggest("Create one: sfauth profile add <name>")
        return
    emit(profiles)


@profile_app.command("remove")
def profile_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a saved profile. Asks for confirmation unless ``--force`` is active."""
    from sfauth.config import delete_profile, profile_exists

    if not profile_exists(name):
        error(f"Profile '{name}' not found.")
        raise typer.Exit(code=2)

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm(f"Delete profile '{name}'?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    delete_profile(name)
    success(f'Profile "{name}" removed.')
