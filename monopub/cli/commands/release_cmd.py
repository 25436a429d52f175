from __future__ import annotations

from pathlib import Path

import typer

from monopub import __version__
from monopub.cli.commands._helpers import bump_kind, fail
from monopub.cli.context import build_context
from monopub.core.errors import ErrorCode
from monopub.core.result import Err
from monopub.release.packages import load_package_set
from monopub.release.registry import CommandRegistry
from monopub.release.service import ReleaseService


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def release(
    names: list[str] | None = typer.Argument(
        None, help="Package directory names to bump.", show_default=False
    ),
    all_: bool = typer.Option(False, "-a", "--all", help="Bump every package."),
    major: bool = typer.Option(False, "-1", "--major", help="Major bump."),
    minor: bool = typer.Option(False, "-2", "--minor", help="Minor bump."),
    patch: bool = typer.Option(False, "-3", "--patch", help="Patch bump (default)."),
    publish: bool = typer.Option(
        False, "-p", "--publish", help="Write manifests and publish to the registry."
    ),
    root: Path | None = typer.Option(None, "--root", help="Monorepo root (default: cwd)."),
    base_dir: str | None = typer.Option(
        None, "--base-dir", help="Packages directory, relative to the root."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Bump package versions, propagate them to dependents, optionally publish.

    Without --publish nothing is written: the new versions are only printed.
    """
    del patch, version

    ctx = build_context(root=root, base_dir=base_dir)

    loaded = load_package_set(
        workspace=ctx.workspace,
        config=ctx.config,
        repository=ctx.repository,
    )
    if isinstance(loaded, Err):
        fail(loaded.error, ctx)
    packages = loaded.value

    service = ReleaseService(
        packages=packages,
        registry=CommandRegistry(config=ctx.config.registry, cwd=ctx.workspace.root),
        console=ctx.console,
        range_prefix=ctx.config.registry.range_prefix,
    )

    targets = packages.names if all_ else list(names or [])
    service.bump(targets, bump_kind(major=major, minor=minor))
    service.print_plan()

    if not publish:
        return

    result = service.publish()
    if isinstance(result, Err):
        fail(result.error, ctx)
    if result.value.state == "failed":
        raise typer.Exit(code=int(ErrorCode.PUBLISH_ERROR))
