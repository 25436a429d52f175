from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from monopub.core.config import Config
from monopub.core.result import Err, Ok
from monopub.core.workspace import Workspace
from monopub.git.repository import Repository
from monopub.release.packages import load_package_set
from monopub.release.semver import SemVer

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not available")


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)


def _write(root: Path, name: str, manifest: dict[str, object]) -> Path:
    path = root / "packages" / name / "package.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path


def _commit_all(root: Path) -> None:
    _git(root, "add", ".")
    _git(root, "commit", "-m", "release")


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    _git(tmp_path, "init", "-b", "main")
    _git(tmp_path, "config", "user.email", "test@example.com")
    _git(tmp_path, "config", "user.name", "Test")
    _write(tmp_path, "core", {"name": "@acme/core", "version": "1.0.0"})
    _write(
        tmp_path,
        "app",
        {"name": "@acme/app", "version": "2.0.0", "dependencies": {"@acme/core": "^1.0.0"}},
    )
    _commit_all(tmp_path)
    return tmp_path


def _load(root: Path, config: Config | None = None):
    return load_package_set(
        workspace=Workspace(root=root.resolve()),
        config=config or Config(),
        repository=Repository(root.resolve()),
    )


def test_loads_packages_in_name_order(repo: Path) -> None:
    result = _load(repo)

    assert isinstance(result, Ok)
    packages = result.value
    assert packages.names == ["app", "core"]
    assert packages["core"].registry_name == "@acme/core"
    assert packages["app"].manifest.dependencies == {"@acme/core": "^1.0.0"}
    assert not packages["core"].changed


def test_previous_version_comes_from_git(repo: Path) -> None:
    _write(repo, "core", {"name": "@acme/core", "version": "1.4.0"})

    packages = _load(repo).unwrap()
    assert packages is not None

    core = packages["core"]
    assert core.previous_version == SemVer(1, 0, 0)
    assert core.staged_version == SemVer(1, 4, 0)
    assert core.changed


def test_uncommitted_package_is_an_error(repo: Path) -> None:
    _write(repo, "fresh", {"name": "@acme/fresh", "version": "0.1.0"})

    result = _load(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "previous_missing"
    assert result.error.hint is not None


def test_broken_manifest_fails_whole_set(repo: Path) -> None:
    (repo / "packages" / "core" / "package.json").write_text("{", encoding="utf-8")

    result = _load(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_invalid"


def test_directory_without_manifest(repo: Path) -> None:
    (repo / "packages" / "empty").mkdir()

    result = _load(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_missing"


def test_missing_packages_dir(repo: Path) -> None:
    result = _load(repo, Config().with_packages_dir("libs"))

    assert isinstance(result, Err)
    assert result.error.kind == "packages_dir"


def test_packages_dir_outside_root(repo: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
    outside = tmp_path_factory.mktemp("outside")

    result = _load(repo, Config().with_packages_dir(str(outside)))

    assert isinstance(result, Err)
    assert result.error.kind == "packages_dir"
