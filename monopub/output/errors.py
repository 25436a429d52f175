"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from monopub.core.errors import ErrorCode
from monopub.output.console import Style
from monopub.release.errors import ReleaseError

if TYPE_CHECKING:
    from monopub.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "packages_dir":
            return int(ErrorCode.CONFIG_ERROR)
        case "manifest_missing" | "manifest_invalid" | "previous_missing" | "git_failed":
            return int(ErrorCode.MANIFEST_ERROR)
        case "write_failed":
            return int(ErrorCode.IO_ERROR)
        case "registry_failed" | "publish_transport":
            return int(ErrorCode.PUBLISH_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
