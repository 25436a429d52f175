"""Process and filesystem primitives."""

from .files import atomic_write_text, write_json
from .process import ProcessError, run, run_streaming

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "run",
    "run_streaming",
    "write_json",
]
