"""
Core functionality for binfetch.

This package contains the foundational modules that the release pipeline
depends on: platform detection, HTTP retrieval, decompression and atomic
installation.
"""

from .platform import (
    HostPlatform,
    platform_token,
    arch_token,
    detect_host,
    clear_host_cache,
)

from .download import (
    ArtifactRetriever,
    RetrievalOutcome,
    OutcomeKind,
    DownloadProgress,
    format_progress,
)

from .decompress import (
    compression_for_name,
    transform_for,
)

from .filesystem import (
    ensure_directory,
    install_stream,
)

from .exceptions import (
    BinfetchError,
    ConfigurationError,
    CandidateError,
    UnsupportedFormatError,
    StreamIOError,
    ArtifactDecodeError,
    ExhaustedCandidatesError,
)

__all__ = [
    "HostPlatform",
    "platform_token",
    "arch_token",
    "detect_host",
    "clear_host_cache",
    "ArtifactRetriever",
    "RetrievalOutcome",
    "OutcomeKind",
    "DownloadProgress",
    "format_progress",
    "compression_for_name",
    "transform_for",
    "ensure_directory",
    "install_stream",
    "BinfetchError",
    "ConfigurationError",
    "CandidateError",
    "UnsupportedFormatError",
    "StreamIOError",
    "ArtifactDecodeError",
    "ExhaustedCandidatesError",
]
