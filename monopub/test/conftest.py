"""Shared fixtures: in-memory packages that never touch git."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from monopub.release.manifest import Manifest
from monopub.release.packages import Package
from monopub.release.resolver import VersionResolver
from monopub.release.semver import SemVer, parse_version

MakePackage = Callable[..., Package]


def _version(text: str) -> SemVer:
    parsed = parse_version(text)
    assert parsed is not None, text
    return parsed


@pytest.fixture
def make_package(tmp_path: Path) -> MakePackage:
    """Build a Package whose directory exists under tmp_path.

    `previous` defaults to `version` (an unchanged package).
    """

    def factory(
        name: str,
        version: str = "1.0.0",
        *,
        registry_name: str | None = None,
        previous: str | None = None,
        dependencies: dict[str, str] | None = None,
        dev_dependencies: dict[str, str] | None = None,
        private: bool = False,
    ) -> Package:
        directory = tmp_path / "packages" / name
        directory.mkdir(parents=True, exist_ok=True)
        manifest = Manifest(
            name=registry_name or name,
            version=_version(version),
            private=private,
            dependencies=dict(dependencies or {}),
            dev_dependencies=dict(dev_dependencies or {}),
            raw={"name": registry_name or name, "version": version},
        )
        return Package(
            name=name,
            directory=directory,
            manifest_path=directory / "package.json",
            manifest=manifest,
            resolver=VersionResolver(
                previous=_version(previous or version),
                staged=_version(version),
            ),
        )

    return factory
