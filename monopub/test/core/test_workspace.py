"""Tests for monopub.core.workspace module."""

from __future__ import annotations

from pathlib import Path

from monopub.core.config import Config
from monopub.core.result import Err, Ok
from monopub.core.workspace import Workspace, list_package_dirs, resolve_workspace


def test_resolve_workspace_uses_given_root(tmp_path: Path) -> None:
    result = resolve_workspace(tmp_path)
    assert result == Ok(Workspace(root=tmp_path.resolve()))


def test_resolve_workspace_rejects_missing_dir(tmp_path: Path) -> None:
    result = resolve_workspace(tmp_path / "nope")
    assert isinstance(result, Err)
    assert "not a directory" in result.error.message


def test_workspace_paths(tmp_path: Path) -> None:
    ws = Workspace(root=tmp_path)
    assert ws.config_path == tmp_path / "monopub.toml"
    assert ws.packages_dir(Config()) == tmp_path / "packages"
    assert ws.relative(tmp_path / "packages" / "a" / "package.json") == "packages/a/package.json"


def test_list_package_dirs_sorted_and_filtered(tmp_path: Path) -> None:
    base = tmp_path / "packages"
    for name in ("zeta", "alpha", ".cache", "mid"):
        (base / name).mkdir(parents=True)
    (base / "README.md").write_text("", encoding="utf-8")

    result = list_package_dirs(base)

    assert isinstance(result, Ok)
    assert [p.name for p in result.value] == ["alpha", "mid", "zeta"]


def test_list_package_dirs_missing_base(tmp_path: Path) -> None:
    result = list_package_dirs(tmp_path / "packages")
    assert isinstance(result, Err)
    assert result.error.hint is not None
