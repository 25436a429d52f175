"""Repository root and package directory discovery.

The workspace is the monorepo checkout monopub runs against. Packages are the
immediate, non-hidden subdirectories of the configured packages directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME, Config
from .result import Err, Ok, Result

__all__ = [
    "Workspace",
    "WorkspaceError",
    "list_package_dirs",
    "resolve_workspace",
]


@dataclass(frozen=True)
class WorkspaceError:
    """Error when the workspace or its packages directory is unusable."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """A monorepo checkout.

    The root contains:
    - monopub.toml (optional)
    - the packages directory (default `packages/`), one package per subdirectory
    """

    root: Path

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    def packages_dir(self, config: Config) -> Path:
        return self.root / config.packages.dir

    def relative(self, path: Path) -> str:
        """Path relative to the root in POSIX form (what `git show` expects)."""
        return path.relative_to(self.root).as_posix()

    def __str__(self) -> str:
        return str(self.root)


def resolve_workspace(root: Path | None = None) -> Result[Workspace, WorkspaceError]:
    """Resolve the workspace root, defaulting to the current directory."""
    try:
        path = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        return Err(WorkspaceError(f"invalid root: {e}", path=root))

    if not path.is_dir():
        return Err(WorkspaceError(f"root is not a directory: {path}", path=path))
    return Ok(Workspace(root=path))


def list_package_dirs(base_dir: Path) -> Result[list[Path], WorkspaceError]:
    """List package directories in name order.

    Hidden directories (".git", ".cache", ...) and plain files are skipped.
    """
    if not base_dir.is_dir():
        return Err(
            WorkspaceError(
                f"packages directory not found: {base_dir}",
                path=base_dir,
                hint=f"Set [packages] dir in {CONFIG_FILE_NAME} or pass --base-dir",
            )
        )

    try:
        entries = list(base_dir.iterdir())
    except OSError as e:
        return Err(WorkspaceError(f"cannot read packages directory: {e}", path=base_dir))

    dirs = [p for p in entries if p.is_dir() and not p.name.startswith(".")]
    return Ok(sorted(dirs, key=lambda p: p.name))
