"""Base exception classes for envlayer.

All envlayer exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery
"""

from typing import Any, Dict, Optional


class EnvLayerError(Exception):
    """Base exception for all envlayer errors.

    Attributes:
        code: Machine-readable error code (e.g., "SOURCE_READ_FAILED")
        message: Human-readable error message
        details: Optional additional context for debugging/recovery
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class SourceReadError(EnvLayerError):
    """A requested source could not be obtained (missing file, bad path, bad encoding)."""

    def __init__(
        self,
        message: str,
        code: str = "SOURCE_READ_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details)


class InvalidOptionError(EnvLayerError):
    """An option was passed with an unsupported type or value."""

    def __init__(
        self,
        message: str,
        code: str = "INVALID_OPTION",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details)


class GitignoreWriteError(EnvLayerError):
    """The .gitignore file could not be updated."""

    def __init__(
        self,
        message: str,
        code: str = "GITIGNORE_WRITE_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details)


class TargetWriteError(EnvLayerError):
    """The target store rejected a value; earlier writes of the call were rolled back."""

    def __init__(
        self,
        message: str,
        code: str = "TARGET_WRITE_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details)
