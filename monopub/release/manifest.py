"""Package manifest (package.json) loading and saving.

A manifest keeps the raw JSON document next to the typed fields monopub
works with, so keys it does not know about, and the key order, survive a
load/save cycle.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from monopub.core.result import Err, Ok, Result
from monopub.core.structured import StrDict, as_str_dict, as_str_map, get_bool, get_str
from monopub.git.repository import Repository
from monopub.platform.files import write_json
from monopub.release.errors import ReleaseError
from monopub.release.model import DEPENDENCY_FIELDS, DependencyField
from monopub.release.semver import SemVer, parse_version

__all__ = [
    "Manifest",
    "load_manifest",
    "load_previous_manifest",
    "parse_manifest",
    "save_manifest",
]


def _empty_deps() -> dict[str, str]:
    return {}


@dataclass(slots=True)
class Manifest:
    name: str
    version: SemVer
    private: bool = False
    dependencies: dict[str, str] = field(default_factory=_empty_deps)
    dev_dependencies: dict[str, str] = field(default_factory=_empty_deps)
    raw: StrDict = field(default_factory=dict)

    def ranges(self, dep_field: DependencyField) -> dict[str, str]:
        if dep_field == "devDependencies":
            return self.dev_dependencies
        return self.dependencies

    def pin(self, dep_field: DependencyField, name: str, version_range: str) -> bool:
        """Set the range of an existing dependency entry.

        Returns True when the stored range changed.
        """
        ranges = self.ranges(dep_field)
        if ranges.get(name) == version_range:
            return False
        ranges[name] = version_range
        return True

    def to_dict(self, version: SemVer | None = None) -> StrDict:
        """The raw document with version and dependency tables applied."""
        out = dict(self.raw)
        out["version"] = str(version or self.version)
        for dep_field in DEPENDENCY_FIELDS:
            ranges = self.ranges(dep_field)
            if dep_field in out or ranges:
                out[dep_field] = dict(ranges)
        return out


def parse_manifest(text: str, *, source: Path) -> Result[Manifest, ReleaseError]:
    """Parse manifest JSON text. `source` is only used in error messages."""
    try:
        data_obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReleaseError("manifest_invalid", f"{source}: invalid JSON: {e}", path=source))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ReleaseError("manifest_invalid", f"{source}: root must be an object", path=source))

    name = get_str(data, "name")
    if name is None:
        return Err(ReleaseError("manifest_invalid", f"{source}: missing 'name'", path=source))

    raw_version = get_str(data, "version")
    if raw_version is None:
        return Err(ReleaseError("manifest_invalid", f"{source}: missing 'version'", path=source))
    version = parse_version(raw_version)
    if version is None:
        return Err(
            ReleaseError(
                "manifest_invalid",
                f"{source}: invalid version {raw_version!r}",
                hint="Use MAJOR.MINOR.PATCH",
                path=source,
            )
        )

    tables: dict[DependencyField, dict[str, str]] = {}
    for dep_field in DEPENDENCY_FIELDS:
        value = data.get(dep_field)
        if value is None:
            tables[dep_field] = {}
            continue
        ranges = as_str_map(value)
        if ranges is None:
            return Err(
                ReleaseError(
                    "manifest_invalid",
                    f"{source}: '{dep_field}' must map names to version strings",
                    path=source,
                )
            )
        tables[dep_field] = ranges

    return Ok(
        Manifest(
            name=name,
            version=version,
            private=get_bool(data, "private") or False,
            dependencies=tables["dependencies"],
            dev_dependencies=tables["devDependencies"],
            raw=data,
        )
    )


def load_manifest(path: Path) -> Result[Manifest, ReleaseError]:
    """Load the working-tree manifest at `path`."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ReleaseError("manifest_missing", f"manifest not found: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError("manifest_invalid", f"cannot read {path}: {e}", path=path))
    return parse_manifest(text, source=path)


def load_previous_manifest(
    repository: Repository,
    relpath: str,
    *,
    revision: str,
) -> Result[Manifest, ReleaseError]:
    """Load the manifest as committed at `revision`."""
    source = Path(f"{revision}:{relpath}")
    result = repository.show(revision, relpath)
    if isinstance(result, Err):
        error = result.error
        if error.missing_path:
            return Err(
                ReleaseError(
                    "previous_missing",
                    f"{relpath} is not in {revision}",
                    hint="Commit the new package before releasing it",
                    path=source,
                )
            )
        return Err(ReleaseError("git_failed", error.message, path=source))
    return parse_manifest(result.value, source=source)


def save_manifest(path: Path, manifest: Manifest, *, version: SemVer) -> Result[None, ReleaseError]:
    """Write `manifest` to `path` with its version set to `version`."""
    try:
        write_json(path, manifest.to_dict(version))
    except OSError as e:
        return Err(ReleaseError("write_failed", f"cannot write {path}: {e}", path=path))
    return Ok(None)
