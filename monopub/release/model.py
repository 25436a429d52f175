from __future__ import annotations

from typing import Literal

BumpKind = Literal["major", "minor", "patch"]
DependencyField = Literal["devDependencies", "dependencies"]

BUMP_KINDS: tuple[BumpKind, ...] = ("major", "minor", "patch")

# Checked in this order when a bumped package is looked up in a dependent.
DEPENDENCY_FIELDS: tuple[DependencyField, ...] = ("devDependencies", "dependencies")
