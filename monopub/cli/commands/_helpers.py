"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from monopub.output.errors import print_release_error, release_error_exit_code
from monopub.release.errors import ReleaseError
from monopub.release.model import BumpKind

if TYPE_CHECKING:
    from monopub.cli.context import CLIContext


def fail(error: ReleaseError, ctx: CLIContext) -> NoReturn:
    """Print a release error and exit with its mapped code."""
    print_release_error(error, ctx.console)
    raise typer.Exit(code=release_error_exit_code(error))


def bump_kind(*, major: bool, minor: bool) -> BumpKind:
    """Resolve the bump flags; major wins over minor, patch is the default."""
    if major:
        return "major"
    if minor:
        return "minor"
    return "patch"
