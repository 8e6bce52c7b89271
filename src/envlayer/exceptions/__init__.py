"""Exceptions raised by envlayer.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Usage:
    from envlayer.exceptions import (
        EnvLayerError,
        SourceReadError,
        InvalidOptionError,
        GitignoreWriteError,
        TargetWriteError,
    )
"""

from envlayer.exceptions.base import (
    EnvLayerError,
    GitignoreWriteError,
    InvalidOptionError,
    SourceReadError,
    TargetWriteError,
)

__all__ = [
    "EnvLayerError",
    "SourceReadError",
    "InvalidOptionError",
    "GitignoreWriteError",
    "TargetWriteError",
]
