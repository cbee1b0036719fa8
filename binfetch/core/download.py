"""
Single-attempt HTTP retrieval of release assets.

This module provides the network side of the install pipeline:
- One streamed HTTP GET per candidate URL (redirects followed)
- Classification of the response into a RetrievalOutcome
- A bounded per-request timeout so one unreachable asset cannot stall an install
- Chunked body iteration with progress reporting

A missing asset is not an error here. 4xx/5xx responses, connection failures
and timeouts are all reported as "absent" outcomes so the caller can move on
to the next candidate. Nothing is retried.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Mapping, Optional

import requests
from requests.exceptions import RequestException

from binfetch import __version__
from binfetch.core.exceptions import StreamIOError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
CHUNK_SIZE = 8192


class OutcomeKind(Enum):
    """Result classes for a single retrieval attempt."""

    NOT_FOUND = "not-found"
    TRANSPORT_ERROR = "transport-error"
    SUCCESS = "success"


@dataclass
class RetrievalOutcome:
    """
    Result of fetching one candidate URL.

    Attributes:
        kind: Outcome class
        url: URL that was requested
        status_code: HTTP status, if a response was received
        response: Live streamed response (SUCCESS only)
        detail: Human-readable reason for absent outcomes
    """

    kind: OutcomeKind
    url: str
    status_code: Optional[int] = None
    response: Optional[requests.Response] = None
    detail: str = ""

    @property
    def found(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def close(self):
        """Release the underlying connection, if any."""
        if self.response is not None:
            self.response.close()


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class ArtifactRetriever:
    """
    Issues one HTTP GET per candidate URL.

    Attributes:
        timeout: Per-request connect/read timeout in seconds
        session: requests session used for all requests
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize retriever.

        Args:
            timeout: Per-request timeout in seconds
            session: Optional preconfigured session (a new one is created if None)
            progress_callback: Optional callback for body download progress
        """
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = f"binfetch/{__version__}"
        self.session = session
        self.progress_callback = progress_callback

    def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> RetrievalOutcome:
        """
        Request a single URL.

        Args:
            url: Full asset URL
            headers: Extra request headers (e.g. Authorization)

        Returns:
            RetrievalOutcome. Only SUCCESS carries a response, which the caller
            must consume or close.
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(
                url,
                headers=dict(headers or {}),
                stream=True,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except RequestException as e:
            logger.debug(f"Request failed for {url}: {e}")
            return RetrievalOutcome(
                kind=OutcomeKind.TRANSPORT_ERROR, url=url, detail=str(e)
            )

        if not response.ok:
            response.close()
            return RetrievalOutcome(
                kind=OutcomeKind.NOT_FOUND,
                url=url,
                status_code=response.status_code,
                detail=f"HTTP {response.status_code}",
            )

        if response.raw is None:
            response.close()
            return RetrievalOutcome(
                kind=OutcomeKind.NOT_FOUND,
                url=url,
                status_code=response.status_code,
                detail="empty response body",
            )

        return RetrievalOutcome(
            kind=OutcomeKind.SUCCESS,
            url=url,
            status_code=response.status_code,
            response=response,
        )

    def iter_body(self, outcome: RetrievalOutcome) -> Iterator[bytes]:
        """
        Yield the body of a successful outcome in chunks.

        The connection is closed when iteration ends, fails or is abandoned.

        Args:
            outcome: A SUCCESS outcome from fetch()

        Yields:
            Raw (still compressed) body chunks

        Raises:
            ValueError: If outcome carries no response
            StreamIOError: If the connection fails mid-transfer
        """
        response = outcome.response
        if response is None:
            raise ValueError(f"No response body for {outcome.url}")

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                downloaded += len(chunk)
                yield chunk

                # Report progress (max once per 0.5 seconds to avoid spam)
                current_time = time.time()
                if self.progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    self.progress_callback(
                        _make_progress(downloaded, total_size, current_time - start_time)
                    )
                    last_progress_time = current_time
        except RequestException as e:
            raise StreamIOError(
                f"Connection failed while reading {outcome.url}: {e}", cause=e
            ) from e
        finally:
            response.close()

        logger.debug(f"Received {downloaded} bytes from {outcome.url}")


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0
    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
