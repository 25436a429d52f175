"""Publish pass: write changed manifests, then publish what the registry lacks.

Publishing goes through a `PublishQueue` drained by a single worker, one
external process at a time, so registry output stays in order and two
publishes of the same dependency graph never overlap.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypeAlias

from monopub.core.result import Err, Ok, Result
from monopub.output.console import ConsoleProtocol
from monopub.release.errors import ReleaseError
from monopub.release.manifest import Manifest, save_manifest
from monopub.release.packages import PackageSet
from monopub.release.registry import Registry
from monopub.release.semver import SemVer, parse_version

__all__ = [
    "PublishJob",
    "PublishOutcome",
    "PublishQueue",
    "PublishState",
    "PublishSummary",
    "run_publish_pass",
]

PublishState = Literal["nothing", "succeeded", "failed"]

ManifestWriter: TypeAlias = Callable[[Path, Manifest, SemVer], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class PublishJob:
    package: str
    registry_name: str
    directory: Path
    version: SemVer
    published: str | None


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    job: PublishJob
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _outcomes() -> list[PublishOutcome]:
    return []


def _errors() -> list[ReleaseError]:
    return []


def _names() -> list[str]:
    return []


@dataclass(slots=True)
class PublishSummary:
    """What the publish pass did.

    `first_failure_code` is the exit code of the first publish that failed;
    later failures are still listed in `outcomes`.
    """

    written: list[str] = field(default_factory=_names)
    queued: int = 0
    outcomes: list[PublishOutcome] = field(default_factory=_outcomes)
    query_failures: list[ReleaseError] = field(default_factory=_errors)
    aborted: ReleaseError | None = None
    not_run: list[str] = field(default_factory=_names)

    @property
    def first_failure_code(self) -> int | None:
        for outcome in self.outcomes:
            if not outcome.ok:
                return outcome.returncode
        return None

    @property
    def failed(self) -> list[str]:
        return [o.job.package for o in self.outcomes if not o.ok]

    @property
    def state(self) -> PublishState:
        if self.query_failures or self.aborted is not None or self.first_failure_code is not None:
            return "failed"
        if self.queued == 0:
            return "nothing"
        return "succeeded"


class PublishQueue:
    """FIFO of publish jobs drained by one worker."""

    def __init__(self, *, registry: Registry, console: ConsoleProtocol) -> None:
        self._registry = registry
        self._console = console
        self._jobs: deque[PublishJob] = deque()

    def __len__(self) -> int:
        return len(self._jobs)

    def put(self, job: PublishJob) -> None:
        self._jobs.append(job)

    def drain(self, summary: PublishSummary) -> None:
        """Run every queued job in order, recording results in `summary`.

        A failing publish does not stop the queue; a publish that cannot even
        be started does, and the remaining jobs are listed as not run.
        """
        while self._jobs:
            job = self._jobs.popleft()
            self._console.command(["cd", str(job.directory), "&&", *self._registry.publish_command()])
            result = self._registry.publish(job.directory)
            if isinstance(result, Err):
                summary.aborted = result.error
                summary.not_run = [j.package for j in self._jobs]
                self._jobs.clear()
                return
            summary.outcomes.append(PublishOutcome(job=job, returncode=result.value))


def _write(path: Path, manifest: Manifest, version: SemVer) -> Result[None, ReleaseError]:
    return save_manifest(path, manifest, version=version)


def _needs_publish(published: str | None, staged: SemVer) -> bool:
    if published is None:
        return True
    current = parse_version(published)
    # Unparsable registry output (dist-tag names, garbage) never blocks a publish.
    return current is None or current < staged


def run_publish_pass(
    packages: PackageSet,
    *,
    registry: Registry,
    console: ConsoleProtocol,
    write: ManifestWriter | None = None,
) -> Result[PublishSummary, ReleaseError]:
    """Write changed manifests and publish changed public packages.

    Returns Err only when a manifest cannot be written; registry and publish
    failures are reported through the summary.
    """
    write = write or _write
    summary = PublishSummary()
    queue = PublishQueue(registry=registry, console=console)

    for package in packages:
        if not package.changed:
            continue

        written = write(package.manifest_path, package.manifest, package.staged_version)
        if isinstance(written, Err):
            return written
        summary.written.append(package.name)

        if package.private:
            continue

        published = registry.query_latest_version(package.registry_name)
        if isinstance(published, Err):
            summary.query_failures.append(published.error)
            console.error(published.error.pretty())
            continue

        if not _needs_publish(published.value, package.staged_version):
            continue

        console.version_change(
            f"{package.name} ({package.registry_name})",
            published.value,
            str(package.staged_version),
        )
        queue.put(
            PublishJob(
                package=package.name,
                registry_name=package.registry_name,
                directory=package.directory,
                version=package.staged_version,
                published=published.value,
            )
        )

    summary.queued = len(queue)
    queue.drain(summary)
    return Ok(summary)
