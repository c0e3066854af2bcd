"""Tests for sfauth.output: result rendering, diagnostics and session summaries."""

from __future__ import annotations

import json
import logging

import httpx
import pytest
from rich.logging import RichHandler

from sfauth import output as output_module
from sfauth.output import (
    OutputFormat,
    OutputManager,
    _color_disabled_by_env,
    describe_session,
    get_output,
    mask_authorization,
    reset_output,
    set_output,
)


@pytest.fixture()
def terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sfauth.output._stdout_is_terminal", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


@pytest.fixture()
def piped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sfauth.output._stdout_is_terminal", lambda: False)


def _plain(**kwargs) -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True, **kwargs)


class TestFormatSelection:
    def test_terminal_gets_rich(self, terminal) -> None:
        assert OutputManager().format is OutputFormat.RICH

    def test_pipe_gets_plain(self, piped) -> None:
        assert OutputManager().format is OutputFormat.PLAIN

    def test_no_color_on_terminal_gets_plain(self, terminal) -> None:
        assert OutputManager(no_color=True).format is OutputFormat.PLAIN

    def test_explicit_format_kept(self, terminal) -> None:
        assert OutputManager(format=OutputFormat.JSON).format is OutputFormat.JSON

    @pytest.mark.parametrize(
        ("env", "disabled"),
        [
            ({"NO_COLOR": ""}, True),
            ({"NO_COLOR": "1"}, True),
            ({"TERM": "dumb"}, True),
            ({"TERM": "xterm"}, False),
        ],
    )
    def test_color_env(self, monkeypatch: pytest.MonkeyPatch, env, disabled) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        assert _color_disabled_by_env() is disabled


class TestEmit:
    def test_json(self, capfd) -> None:
        OutputManager(format=OutputFormat.JSON).emit({"profile": "prod", "auth_type": "oauth"})
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"profile": "prod", "auth_type": "oauth"}
        assert captured.err == ""

    def test_plain_dict(self, capfd) -> None:
        _plain().emit({"profile": "prod", "auth_type": "password"})
        assert capfd.readouterr().out.splitlines() == ["profile\tprod", "auth_type\tpassword"]

    def test_plain_list(self, capfd) -> None:
        _plain().emit(["dev", "prod"])
        assert capfd.readouterr().out.splitlines() == ["dev", "prod"]

    def test_rich_flat_dict_keeps_brackets(self, capfd) -> None:
        OutputManager(format=OutputFormat.RICH).emit({"authorization": "OAuth [abc]"})
        out = capfd.readouterr().out
        assert "authorization" in out
        assert "OAuth [abc]" in out

    def test_rich_nested_dict_as_json(self, capfd) -> None:
        OutputManager(format=OutputFormat.RICH).emit({"request": {"timeout": 30}})
        out = capfd.readouterr().out
        assert '"timeout"' in out
        assert "30" in out


class TestDiagnostics:
    @pytest.mark.parametrize("method", ["info", "success", "error", "suggest"])
    def test_written_to_stderr_only(self, capfd, method) -> None:
        getattr(_plain(), method)("status line")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "status line" in captured.err

    def test_error_prefix(self, capfd) -> None:
        _plain().error("Authentication failed")
        assert capfd.readouterr().err == "Error: Authentication failed\n"

    def test_suggest_arrow(self, capfd) -> None:
        _plain().suggest("sfauth profile list")
        assert capfd.readouterr().err == "→ sfauth profile list\n"

    @pytest.mark.parametrize("method", ["info", "success", "suggest"])
    def test_quiet_drops_status(self, capfd, method) -> None:
        getattr(_plain(quiet=True), method)("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd) -> None:
        _plain(quiet=True).error("still shown")
        assert "still shown" in capfd.readouterr().err

    def test_debug_needs_verbose(self, capfd) -> None:
        _plain().debug("hidden")
        _plain(verbose=True).debug("shown")
        assert capfd.readouterr().err == "[debug] shown\n"

    def test_colored_debug_keeps_prefix(self, capfd) -> None:
        OutputManager(format=OutputFormat.PLAIN, verbose=True).debug("x")
        assert "[debug] x" in capfd.readouterr().err

    def test_log_handler(self) -> None:
        handler = OutputManager(verbose=True).log_handler()
        assert isinstance(handler, RichHandler)
        assert isinstance(handler, logging.Handler)


class TestSession:
    @pytest.mark.parametrize(
        ("header", "masked"),
        [
            ("OAuth 00Dxx!ABCDEFGH1234", "OAuth ****1234"),
            ("OAuth 12345678", "OAuth ****"),
            ("", " ****"),
        ],
    )
    def test_mask_authorization(self, header: str, masked: str) -> None:
        assert mask_authorization(header) == masked

    def test_describe_session_masks_token(self) -> None:
        with httpx.Client(
            base_url="https://na1.salesforce.com",
            headers={"Authorization": "OAuth 00Dxx!ABCDEFGH1234"},
        ) as client:
            summary = describe_session("prod", "password", client)
        assert summary == {
            "profile": "prod",
            "auth_type": "password",
            "instance_url": "https://na1.salesforce.com",
            "authorization": "OAuth ****1234",
        }

    def test_describe_session_show_token(self) -> None:
        with httpx.Client(
            base_url="https://na1.salesforce.com",
            headers={"Authorization": "OAuth 00Dxx!ABCDEFGH1234"},
        ) as client:
            summary = describe_session("prod", "oauth", client, show_token=True)
        assert summary["authorization"] == "OAuth 00Dxx!ABCDEFGH1234"


class TestGlobalInstance:
    def test_default_created_once(self) -> None:
        reset_output()
        assert get_output() is get_output()

    def test_set_and_reset(self) -> None:
        manager = _plain()
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_helpers_forward(self, capfd) -> None:
        set_output(_plain(verbose=True))
        output_module.emit("result")
        output_module.info("i")
        output_module.debug("d")
        captured = capfd.readouterr()
        assert captured.out == "result\n"
        assert captured.err == "i\n[debug] d\n"
