"""Git repository abstraction.

Only read access is needed: fetching a file's content as it was at a given
revision, so a package's previously released manifest can be compared with
the working tree.

Usage:
    repo = Repository(Path("/path/to/monorepo"))

    match repo.show("HEAD", "packages/core/package.json"):
        case Ok(text):
            print(text)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from monopub.core.result import Err, Ok, Result
from monopub.platform.process import run as run_process
from monopub.release.timeouts import GIT_TIMEOUT_SECONDS

__all__ = ["GitError", "Repository"]

_MISSING_PATH_MARKERS = (
    "does not exist in",
    "exists on disk, but not in",
)


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
        missing_path: True when the path is absent at the requested revision
    """

    command: str
    message: str
    returncode: int = 1
    missing_path: bool = False


class Repository:
    """Read-only view of a git checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def show(self, revision: str, relpath: str) -> Result[str, GitError]:
        """Return the content of `relpath` at `revision`.

        Runs `git show REV:./PATH`. `relpath` uses forward slashes and is
        resolved against `path`, which need not be the top of the git repo.
        """
        result = run_process(
            ["git", "show", f"{revision}:./{relpath}"],
            cwd=self.path,
            timeout=GIT_TIMEOUT_SECONDS,
        )
        match result:
            case Err(e):
                stderr = e.stderr.strip()
                return Err(
                    GitError(
                        command="show",
                        message=stderr or f"git show {revision}:{relpath} failed",
                        returncode=e.returncode,
                        missing_path=any(m in stderr for m in _MISSING_PATH_MARKERS),
                    )
                )
            case Ok(stdout):
                return Ok(stdout)
