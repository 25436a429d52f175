from __future__ import annotations

from collections.abc import Sequence

from monopub.core.result import Ok, Result
from monopub.output.console import ConsoleProtocol, Style
from monopub.release.errors import ReleaseError
from monopub.release.graph import DependencyGraphBumper
from monopub.release.model import BumpKind
from monopub.release.packages import PackageSet
from monopub.release.publish import PublishSummary, run_publish_pass
from monopub.release.registry import Registry


class ReleaseService:
    """One release run over an already loaded package set.

    Everything it touches is passed in; there is no module-level manager.
    """

    def __init__(
        self,
        *,
        packages: PackageSet,
        registry: Registry,
        console: ConsoleProtocol,
        range_prefix: str = "^",
    ) -> None:
        self._packages = packages
        self._registry = registry
        self._console = console
        self._bumper = DependencyGraphBumper(packages, range_prefix=range_prefix)

    @property
    def packages(self) -> PackageSet:
        return self._packages

    def bump(self, names: Sequence[str], kind: BumpKind = "patch") -> list[str]:
        """Bump each of `names` with `kind` and propagate.

        Returns the names that are not packages; they are skipped with a
        warning.
        """
        for group in self._bumper.cycles():
            self._console.warning(f"dependency cycle: {' -> '.join(group)}")

        unknown: list[str] = []
        for name in names:
            if name not in self._packages:
                unknown.append(name)
                self._console.warning(f"unknown package: {name}")
                continue
            self._bumper.bump_package(name, kind)
        return unknown

    def print_plan(self) -> None:
        changed = [p for p in self._packages if p.changed]
        if not changed:
            self._console.print("No version changes.", Style.DIM)
            return

        self._console.header("Versions")
        for package in changed:
            self._console.version_change(
                f"{package.name} ({package.registry_name})",
                str(package.previous_version),
                str(package.staged_version),
            )

    def publish(self) -> Result[PublishSummary, ReleaseError]:
        self._console.header("Publish")
        result = run_publish_pass(self._packages, registry=self._registry, console=self._console)
        if isinstance(result, Ok):
            self._print_summary(result.value)
        return result

    def _print_summary(self, summary: PublishSummary) -> None:
        if summary.aborted is not None:
            self._console.error(summary.aborted.pretty())
            if summary.not_run:
                self._console.print(f"not run: {', '.join(summary.not_run)}", Style.DIM)

        match summary.state:
            case "nothing":
                self._console.print("No packages to publish.")
            case "succeeded":
                self._console.success("Publish succeeded.")
            case "failed":
                if summary.failed:
                    self._console.print(f"failed: {', '.join(summary.failed)}", Style.DIM)
                code = summary.first_failure_code
                suffix = f" (exit {code})" if code is not None else ""
                self._console.error(f"Publish failed{suffix}.")
