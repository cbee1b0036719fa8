"""
Centralized exception hierarchy for binfetch.

Per-candidate errors (unsupported format, stream failures) are absorbed by the
installer's candidate loop; only ExhaustedCandidatesError and
ConfigurationError ever reach the command line.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class BinfetchError(Exception):
    """Base exception for all binfetch errors."""

    pass


class ConfigurationError(BinfetchError):
    """Raised when the install configuration is missing or invalid."""

    pass


# ============================================================================
# Per-candidate Exceptions
# ============================================================================


class CandidateError(BinfetchError):
    """Base exception for failures scoped to a single candidate asset."""

    pass


class UnsupportedFormatError(CandidateError):
    """Raised when a candidate's extension has no known decoder."""

    def __init__(self, compression: str):
        self.compression = compression
        super().__init__(f"Unsupported compression format: {compression!r}")


class StreamIOError(CandidateError):
    """Raised when reading the response or writing the temporary file fails."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ArtifactDecodeError(StreamIOError):
    """Raised when a payload cannot be decoded by its selected transform."""

    pass


# ============================================================================
# Terminal Exceptions
# ============================================================================


class ExhaustedCandidatesError(BinfetchError):
    """Raised when no candidate produced an installed artifact."""

    def __init__(self, candidates: Sequence[str], prefix: str):
        self.candidates = list(candidates)
        self.prefix = prefix
        super().__init__(
            f"Could not download any of: {', '.join(self.candidates)} from {prefix}"
        )
