"""The ``sfauth`` command line.

:data:`app` is the Typer application; :func:`main` is the console-script
entry point. Commands raise :class:`~sfauth.exceptions.SfauthError`
subclasses and :func:`main` turns them into a one-line message and the
error's exit code. Anything else is a bug: its traceback is saved to a
crash log under :func:`~sfauth.config.get_log_dir`.
"""

from __future__ import annotations

import json
import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Optional

import typer

from sfauth import __version__
from sfauth.commands.auth import login_command, refresh_command, verify_secret_command
from sfauth.commands.profile import profile_app
from sfauth.exceptions import AuthenticationError, SfauthError
from sfauth.exit_codes import EXIT_GENERIC_FAILURE
from sfauth.output import OutputFormat, OutputManager, debug, error, set_output, suggest

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="sfauth",
    help="Authenticate against the Salesforce API.",
    no_args_is_help=True,
    add_completion=False,
)

_log_handler: Optional[logging.Handler] = None


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"sfauth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile to use."),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print results as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output and HTTP logs."),
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Authenticate against the Salesforce API."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    _route_library_logs(output.log_handler() if verbose else None)

    ctx.obj = {"profile": profile, "force": force}


def _route_library_logs(handler: Optional[logging.Handler]) -> None:
    """Send ``sfauth`` log records to *handler*, or stop sending them when ``None``."""
    global _log_handler
    logger = logging.getLogger("sfauth")
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = handler
    if handler is None:
        logger.setLevel(logging.NOTSET)
    else:
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


app.command("login")(login_command)
app.command("refresh")(refresh_command)
app.command("verify-secret")(verify_secret_command)
app.add_typer(profile_app, name="profile", help="Manage saved profiles.")


def _on_sigint(signum: int, frame: object) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    """Save the traceback being handled and return the log file path."""
    from sfauth.config import get_log_dir

    path = get_log_dir() / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(path)


def _report(exc: SfauthError) -> None:
    error(str(exc))
    if isinstance(exc, AuthenticationError) and exc.parameters:
        debug(f"Parameters: {json.dumps(exc.parameters, default=str)}")
        suggest("Check a hashed secret with: sfauth verify-secret '<hash>'")


def main() -> None:
    """Run the CLI and exit with a code from :mod:`sfauth.exit_codes`."""
    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except KeyboardInterrupt:
        _on_sigint(signal.SIGINT, None)
    except SfauthError as exc:
        _report(exc)
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
