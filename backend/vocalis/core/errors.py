"""
Error taxonomy for the command pipeline
"""
from enum import Enum
from typing import Any, Dict, Optional


class AuthErrorKind(str, Enum):
    """Why a session could not be resolved"""
    MISSING = "missing"  # No token supplied
    INVALID = "invalid"  # Bad format, signature, expiry or unknown user


class UpstreamErrorKind(str, Enum):
    """Failure classes of the reasoning endpoint"""
    UNAVAILABLE = "unavailable"  # Connection error, non-2xx, unusable body
    TIMEOUT = "timeout"


class VocalisError(Exception):
    """Base class for pipeline errors"""

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "metadata": self.metadata,
        }


class AuthError(VocalisError):
    """Session token missing or rejected. Surfaces to the caller."""

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None):
        if message is None:
            message = "Not authenticated" if kind == AuthErrorKind.MISSING else "Invalid token"
        super().__init__(message, metadata={"kind": kind.value})
        self.kind = kind


class UpstreamError(VocalisError):
    """Reasoning endpoint failure. Always recovered into a fallback intent."""

    def __init__(self, kind: UpstreamErrorKind, message: str):
        super().__init__(message, metadata={"kind": kind.value})
        self.kind = kind


class ParseError(VocalisError):
    """Model output did not satisfy the intent contract. Always recovered."""


class ThrottleRejected(VocalisError):
    """Command arrived before the minimum interval elapsed"""

    def __init__(self, retry_after_ms: int):
        super().__init__(
            "Command rejected by throttle",
            metadata={"retry_after_ms": retry_after_ms},
        )
        self.retry_after_ms = retry_after_ms
