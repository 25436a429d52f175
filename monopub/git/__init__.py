"""Git access.

Usage:
    from monopub.git import Repository

    repo = Repository(Path("/path/to/monorepo"))
    text = repo.show("HEAD", "packages/core/package.json")
"""

from monopub.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
