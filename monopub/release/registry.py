"""Registry access through its command-line client (npm by default)."""

from __future__ import annotations

from pathlib import Path
from time import sleep
from typing import Protocol

from monopub.core.config import RegistryConfig
from monopub.core.result import Err, Ok, Result
from monopub.platform.process import ProcessError
from monopub.platform.process import run as run_process
from monopub.platform.process import run_streaming
from monopub.release.errors import ReleaseError
from monopub.release.timeouts import (
    REGISTRY_READ_RETRY_ATTEMPTS,
    REGISTRY_READ_RETRY_DELAY_SECONDS,
    REGISTRY_TIMEOUT_SECONDS,
)

__all__ = ["CommandRegistry", "Registry"]

_NOT_FOUND_MARKERS = (
    "e404",
    "404 not found",
    "is not in this registry",
    "is not in the npm registry",
)

_TRANSIENT_MARKERS = (
    "timed out",
    "timeout",
    "etimedout",
    "econnreset",
    "econnrefused",
    "eai_again",
    "socket hang up",
    "network is unreachable",
    "http 429",
    "e429",
    "e500",
    "e502",
    "e503",
    "e504",
)


class Registry(Protocol):
    def query_latest_version(self, name: str) -> Result[str | None, ReleaseError]:
        """Latest published version of `name`, None if it was never published."""
        ...

    def publish_command(self) -> list[str]: ...

    def publish(self, package_dir: Path) -> Result[int, ReleaseError]:
        """Publish from `package_dir`, streaming output; Ok(exit code)."""
        ...


def _is_not_found(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def _is_transient(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


class CommandRegistry:
    """Registry driven by the commands of `RegistryConfig`."""

    def __init__(
        self,
        *,
        config: RegistryConfig,
        cwd: Path,
        retry_attempts: int = REGISTRY_READ_RETRY_ATTEMPTS,
    ) -> None:
        self._config = config
        self._cwd = cwd
        self._retry_attempts = max(1, retry_attempts)

    def query_latest_version(self, name: str) -> Result[str | None, ReleaseError]:
        cmd = self._config.view_command(name)
        for attempt in range(self._retry_attempts):
            result = run_process(cmd, cwd=self._cwd, timeout=REGISTRY_TIMEOUT_SECONDS)
            if isinstance(result, Ok):
                lines = [line.strip() for line in result.value.splitlines() if line.strip()]
                return Ok(lines[-1].strip("'\"") if lines else None)

            error = result.error
            if _is_not_found(error):
                return Ok(None)
            if attempt < self._retry_attempts - 1 and _is_transient(error):
                sleep(REGISTRY_READ_RETRY_DELAY_SECONDS * (attempt + 1))
                continue

            return Err(
                ReleaseError(
                    "registry_failed",
                    f"registry query failed for {name}",
                    hint=error.stderr.strip() or str(error),
                )
            )

        return Err(ReleaseError("registry_failed", f"registry query failed for {name}"))

    def publish_command(self) -> list[str]:
        return list(self._config.publish)

    def publish(self, package_dir: Path) -> Result[int, ReleaseError]:
        result = run_streaming(self.publish_command(), cwd=package_dir)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    "publish_transport",
                    f"could not run {' '.join(self.publish_command())} in {package_dir}",
                    hint=result.error.stderr or None,
                    path=package_dir,
                )
            )
        return result
