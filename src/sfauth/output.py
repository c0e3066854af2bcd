"""Terminal output for the ``sfauth`` CLI.

Command results (a session summary, a profile, the list of profiles) are
written to stdout and nothing else is, so ``sfauth --json login | jq`` stays
parseable. Status lines, errors, hints and debug traces all go to stderr.

Commands do not hold a reference to the :class:`OutputManager`; the root
callback installs one with :func:`set_output` and the module-level helpers
(:func:`emit`, :func:`error`, ...) forward to it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How command results are rendered on stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def _color_disabled_by_env() -> bool:
    # https://no-color.org: any value, even empty, disables color.
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


class OutputManager:
    """Renders results on stdout and diagnostics on stderr.

    Args:
        format: Result format. ``AUTO`` picks ``RICH`` on an interactive,
            colour-capable terminal and ``PLAIN`` otherwise.
        no_color: Disable colour and Rich markup.
        quiet: Drop status lines and hints. Errors are always shown.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.no_color = no_color or _color_disabled_by_env()
        self.quiet = quiet
        self.verbose = verbose
        if format is OutputFormat.AUTO:
            rich_ok = _stdout_is_terminal() and not self.no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self.format = format
        self._out = Console(file=sys.stdout, no_color=self.no_color)
        self._err = Console(file=sys.stderr, no_color=self.no_color, stderr=True)

    # -- stdout --------------------------------------------------------------

    def emit(self, data: Any) -> None:
        """Write a command result to stdout in the configured format."""
        if self.format is OutputFormat.JSON:
            self._write(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self.format is OutputFormat.RICH:
            self._emit_rich(data)
        elif isinstance(data, dict):
            for key, value in data.items():
                self._write(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                self._write(str(item))
        else:
            self._write(str(data))

    def _emit_rich(self, data: Any) -> None:
        if isinstance(data, dict) and all(not isinstance(v, (dict, list)) for v in data.values()):
            table = Table(show_header=False, box=None)
            for key, value in data.items():
                table.add_row(f"[bold]{escape(key)}[/bold]", escape(str(value)))
            self._out.print(table)
        elif isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._out.print(Syntax(text, "json", word_wrap=True))
        else:
            self._out.print(str(data))

    @staticmethod
    def _write(line: str) -> None:
        print(line, file=sys.stdout, flush=True)

    # -- stderr --------------------------------------------------------------

    def _status(self, text: str, style: str = "", prefix: str = "") -> None:
        line = f"{prefix}{text}"
        if self.no_color:
            print(line, file=sys.stderr, flush=True)
        else:
            self._err.print(escape(line), style=style or None)

    def info(self, message: str) -> None:
        if not self.quiet:
            self._status(message)

    def success(self, message: str) -> None:
        if not self.quiet:
            self._status(message, "green")

    def error(self, message: str) -> None:
        self._status(message, "bold red", "Error: ")

    def suggest(self, message: str) -> None:
        if not self.quiet:
            self._status(f"→ {message}", "dim")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._status(message, "dim", "[debug] ")

    def log_handler(self) -> logging.Handler:
        """A handler rendering ``sfauth`` log records on stderr."""
        return RichHandler(console=self._err, show_path=False, markup=False)


# -- session rendering --------------------------------------------------------


def mask_authorization(header: str) -> str:
    """``"OAuth 00D...WXYZ"`` -> ``"OAuth ****WXYZ"``; tokens of 8 chars or less are fully hidden."""
    scheme, _, token = header.partition(" ")
    tail = token[-4:] if len(token) > 8 else ""
    return f"{scheme} ****{tail}"


def describe_session(
    profile: str, auth_type: str, client: httpx.Client, show_token: bool = False
) -> dict[str, str]:
    """Summarise an authenticated client for display."""
    authorization = client.headers.get("Authorization", "")
    return {
        "profile": profile,
        "auth_type": auth_type,
        "instance_url": str(client.base_url).rstrip("/"),
        "authorization": authorization if show_token else mask_authorization(authorization),
    }


# -- global instance ------------------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next call builds a default one."""
    global _output
    _output = None


def emit(data: Any) -> None:
    get_output().emit(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
