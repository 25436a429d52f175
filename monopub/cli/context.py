from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from monopub.core.config import Config, load_config_or_default
from monopub.core.errors import ErrorCode
from monopub.core.result import Err
from monopub.core.workspace import Workspace, resolve_workspace
from monopub.git.repository import Repository
from monopub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: Config
    console: ConsoleProtocol
    repository: Repository


def build_context(*, root: Path | None = None, base_dir: str | None = None) -> CLIContext:
    workspace_result = resolve_workspace(root)
    if isinstance(workspace_result, Err):
        typer.echo(f"error: {workspace_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    workspace = workspace_result.value

    config_result = load_config_or_default(workspace.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        workspace=workspace,
        config=config_result.value.with_packages_dir(base_dir),
        console=RichConsole(),
        repository=Repository(workspace.root),
    )
