"""The package set: every package of the monorepo, loaded once per run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from monopub.core.config import Config
from monopub.core.result import Err, Ok, Result
from monopub.core.workspace import Workspace, list_package_dirs
from monopub.git.repository import Repository
from monopub.release.errors import ReleaseError
from monopub.release.manifest import Manifest, load_manifest, load_previous_manifest
from monopub.release.resolver import VersionResolver
from monopub.release.semver import SemVer

__all__ = ["Package", "PackageSet", "load_package_set"]


@dataclass(eq=False, slots=True)
class Package:
    """One package directory.

    `name` is the directory name (the identity used on the command line),
    `registry_name` the `name` field of its manifest.
    """

    name: str
    directory: Path
    manifest_path: Path
    manifest: Manifest
    resolver: VersionResolver

    @property
    def registry_name(self) -> str:
        return self.manifest.name

    @property
    def private(self) -> bool:
        return self.manifest.private

    @property
    def previous_version(self) -> SemVer:
        return self.resolver.previous

    @property
    def staged_version(self) -> SemVer:
        return self.resolver.staged

    @property
    def changed(self) -> bool:
        return self.staged_version != self.previous_version


class PackageSet:
    """Directory name -> Package, iterated in directory-listing order."""

    def __init__(self, packages: list[Package]) -> None:
        self._packages = {p.name: p for p in packages}

    @property
    def names(self) -> list[str]:
        return list(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __getitem__(self, name: str) -> Package:
        return self._packages[name]

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def get(self, name: str) -> Package | None:
        return self._packages.get(name)


def load_package(
    directory: Path,
    *,
    workspace: Workspace,
    config: Config,
    repository: Repository,
) -> Result[Package, ReleaseError]:
    manifest_path = directory / config.packages.manifest

    current = load_manifest(manifest_path)
    if isinstance(current, Err):
        return current

    previous = load_previous_manifest(
        repository,
        workspace.relative(manifest_path),
        revision=config.git.revision,
    )
    if isinstance(previous, Err):
        return previous

    return Ok(
        Package(
            name=directory.name,
            directory=directory,
            manifest_path=manifest_path,
            manifest=current.value,
            resolver=VersionResolver(previous=previous.value.version, staged=current.value.version),
        )
    )


def load_package_set(
    *,
    workspace: Workspace,
    config: Config,
    repository: Repository,
) -> Result[PackageSet, ReleaseError]:
    """Load every package under the configured packages directory.

    Any package that fails to load fails the whole set: propagation assumes
    every referenced package is fully loaded.
    """
    base_dir = workspace.packages_dir(config).resolve()
    if not base_dir.is_relative_to(workspace.root):
        return Err(
            ReleaseError(
                "packages_dir",
                f"packages directory is outside the root: {base_dir}",
                path=base_dir,
            )
        )

    dirs = list_package_dirs(base_dir)
    if isinstance(dirs, Err):
        error = dirs.error
        return Err(ReleaseError("packages_dir", error.message, hint=error.hint, path=error.path))

    packages: list[Package] = []
    for directory in dirs.value:
        loaded = load_package(directory, workspace=workspace, config=config, repository=repository)
        if isinstance(loaded, Err):
            return loaded
        packages.append(loaded.value)

    return Ok(PackageSet(packages))
