"""Bump propagation through internal dependency edges.

Bumping a package pins every internal dependent's range on it to the new
version and patch-bumps the dependent, which in turn propagates to its own
dependents. Propagation runs as a breadth-first worklist over an adjacency
map built once from the manifests. A package propagates the first time it is
reached in a call and again only when its staged version grows, so cycles
settle on a fixed point instead of recursing forever.
"""

from __future__ import annotations

from collections import deque
from typing import TypeAlias

from monopub.release.model import DEPENDENCY_FIELDS, BumpKind, DependencyField
from monopub.release.packages import PackageSet

__all__ = ["DependencyGraphBumper", "Edge"]

Edge: TypeAlias = tuple[str, DependencyField]  # (dependent directory name, field)


class DependencyGraphBumper:
    def __init__(self, packages: PackageSet, *, range_prefix: str = "^") -> None:
        self._packages = packages
        self._range_prefix = range_prefix
        self._dependents = self._build_dependents()

    def _build_dependents(self) -> dict[str, list[Edge]]:
        # Registry name -> dependents in set order. A dependent listing the
        # name in several fields only gets the first field of DEPENDENCY_FIELDS.
        dependents: dict[str, list[Edge]] = {}
        registry_names = {p.name: p.registry_name for p in self._packages}
        for dependent in self._packages:
            seen: set[str] = set()
            for dep_field in DEPENDENCY_FIELDS:
                for dep_name in dependent.manifest.ranges(dep_field):
                    if dep_name in seen or dep_name == registry_names[dependent.name]:
                        continue
                    seen.add(dep_name)
                    dependents.setdefault(dep_name, []).append((dependent.name, dep_field))
        return dependents

    def dependents_of(self, name: str) -> list[Edge]:
        """Internal dependents of the package in directory `name`."""
        package = self._packages.get(name)
        if package is None:
            return []
        return list(self._dependents.get(package.registry_name, ()))

    def bump_package(self, name: str, kind: BumpKind | None = None) -> list[str]:
        """Bump `name` with `kind` (patch if None) and propagate.

        Unknown names are ignored. Returns the directory names whose staged
        version changed, in the order they changed.
        """
        if name not in self._packages:
            return []

        queue: deque[tuple[str, BumpKind]] = deque([(name, kind or "patch")])
        propagated: set[str] = set()
        changed: list[str] = []

        while queue:
            current, current_kind = queue.popleft()
            package = self._packages[current]

            grew = package.resolver.bump(current_kind)
            if grew and current not in changed:
                changed.append(current)
            if current in propagated and not grew:
                continue
            propagated.add(current)

            pinned = f"{self._range_prefix}{package.staged_version}"
            for dependent, dep_field in self._dependents.get(package.registry_name, ()):
                self._packages[dependent].manifest.pin(dep_field, package.registry_name, pinned)
                queue.append((dependent, "patch"))

        return changed

    def cycles(self) -> list[list[str]]:
        """Groups of packages that depend on each other, in set order.

        Bumping stays finite on these, but their ranges end up pinned to each
        other's patch bumps, which is worth telling the user about.
        """
        order = {name: i for i, name in enumerate(self._packages.names)}
        graph = {name: [d for d, _ in self.dependents_of(name)] for name in order}

        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        groups: list[list[str]] = []

        def connect(node: str) -> None:
            index[node] = lowlink[node] = len(index)
            stack.append(node)
            on_stack.add(node)
            for nxt in graph[node]:
                if nxt not in index:
                    connect(nxt)
                    lowlink[node] = min(lowlink[node], lowlink[nxt])
                elif nxt in on_stack:
                    lowlink[node] = min(lowlink[node], index[nxt])
            if lowlink[node] == index[node]:
                group: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    group.append(member)
                    if member == node:
                        break
                if len(group) > 1:
                    groups.append(sorted(group, key=order.__getitem__))

        for node in graph:
            if node not in index:
                connect(node)

        return sorted(groups, key=lambda g: order[g[0]])
