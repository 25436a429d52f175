"""Exit codes for the monopub command.

Every failure class the release run can hit maps to one stable process exit
code, so CI scripts can tell a bad invocation from a broken manifest or a
failed publish.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success
    - 1: User error (bad arguments)
    - 2: Configuration error (bad config file, missing packages directory)
    - 3: Manifest error (unreadable or invalid package manifest)
    - 4: Publish error (registry query failed, publish exited non-zero)
    - 5: I/O error (manifest could not be written)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    MANIFEST_ERROR = 3
    PUBLISH_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
