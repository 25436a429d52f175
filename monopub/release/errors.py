"""Error type for the release context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

ReleaseErrorKind = Literal[
    "packages_dir",
    "manifest_missing",
    "manifest_invalid",
    "previous_missing",
    "git_failed",
    "write_failed",
    "registry_failed",
    "publish_transport",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload, rendered by `monopub.output.errors`."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    path: Path | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
