"""Tests for monopub.output.console and monopub.output.errors."""

from __future__ import annotations

import pytest

from monopub.core.errors import ErrorCode
from monopub.output.console import ConsoleProtocol, MockConsole, RichConsole, Style
from monopub.output.errors import print_release_error, release_error_exit_code
from monopub.release.errors import ReleaseError


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_command_echo(self) -> None:
        console = MockConsole()
        console.command(["npm", "publish"])
        assert console.messages == ["$ npm publish"]
        assert console.outputs[0].style == Style.COMMAND

    def test_version_change(self) -> None:
        console = MockConsole()
        console.version_change("core (@acme/core)", "1.0.0", "1.1.0")
        console.version_change("new (@acme/new)", None, "0.1.0")
        assert console.messages == [
            " - core (@acme/core): 1.0.0 => 1.1.0",
            " - new (@acme/new): - => 0.1.0",
        ]

    def test_flags(self) -> None:
        console = MockConsole()
        assert not console.has_error()
        console.warning("careful")
        console.error("broken")
        assert console.has_warning()
        assert console.has_error()
        assert len(console.find("broken")) == 1


def test_rich_console_matches_protocol(capsys: pytest.CaptureFixture[str]) -> None:
    console: ConsoleProtocol = RichConsole()
    console.version_change("core ([bold]x[/bold])", "1.0.0", "1.1.0")
    console.command(["npm", "publish"])

    out = capsys.readouterr().out
    assert "core ([bold]x[/bold]): 1.0.0 => 1.1.0" in out
    assert "$ npm publish" in out


def test_print_release_error_with_hint() -> None:
    console = MockConsole()
    print_release_error(ReleaseError("previous_missing", "not committed", hint="commit it"), console)
    assert console.messages == ["error: not committed", "hint: commit it"]


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("packages_dir", ErrorCode.CONFIG_ERROR),
        ("manifest_invalid", ErrorCode.MANIFEST_ERROR),
        ("previous_missing", ErrorCode.MANIFEST_ERROR),
        ("git_failed", ErrorCode.MANIFEST_ERROR),
        ("write_failed", ErrorCode.IO_ERROR),
        ("registry_failed", ErrorCode.PUBLISH_ERROR),
        ("publish_transport", ErrorCode.PUBLISH_ERROR),
    ],
)
def test_release_error_exit_code(kind: str, code: ErrorCode) -> None:
    error = ReleaseError(kind, "x")  # type: ignore[arg-type]
    assert release_error_exit_code(error) == int(code)
