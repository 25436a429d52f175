from __future__ import annotations

from monopub.release.model import BumpKind
from monopub.release.semver import SemVer


class VersionResolver:
    """Per-package bump policy.

    Every bump computes its candidate from the previously committed version,
    never from the staged one, so bumping twice with the same kind does not
    compound. A candidate only replaces the staged version when it is strictly
    greater, which makes the highest requested bump win whatever the call
    order.
    """

    def __init__(self, previous: SemVer, staged: SemVer) -> None:
        self._previous = previous
        self._staged = staged

    @property
    def previous(self) -> SemVer:
        return self._previous

    @property
    def staged(self) -> SemVer:
        return self._staged

    def bump(self, kind: BumpKind = "patch") -> bool:
        """Stage the `kind` bump of the previous version if it is higher.

        Returns True when the staged version changed.
        """
        candidate = self._previous.bump(kind)
        if candidate > self._staged:
            self._staged = candidate
            return True
        return False
