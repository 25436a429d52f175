from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from monopub.platform.files import atomic_write_text, write_json


def test_atomic_write_text_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new", encoding="utf-8")

    assert path.read_text(encoding="utf-8") == "new"


def test_atomic_write_text_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "package.json"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload", encoding="utf-8")

    assert list(tmp_path.glob(".package.json.*.tmp")) == []
    assert not path.exists()


def test_write_json_formats_like_npm(tmp_path: Path) -> None:
    path = tmp_path / "package.json"

    write_json(path, {"name": "café", "version": "1.0.0", "dependencies": {"a": "^1.0.0"}})

    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert '  "name": "café",' in text
    assert '    "a": "^1.0.0"' in text
    assert json.loads(text)["version"] == "1.0.0"
