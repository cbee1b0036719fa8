"""
File system utilities for installing downloaded artifacts.

This module provides:
- Streaming atomic installs (temp file + rename)
- Executable permission handling on Unix hosts
- Directory creation helpers

The destination path is never observed in a partially-written state: data is
streamed into a temporary file beside it and moved into place only after the
whole stream has been written and flushed.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from requests.exceptions import RequestException

from binfetch.core.exceptions import StreamIOError

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = os.name == "nt"

EXECUTABLE_MODE = 0o755


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory (and parents) if it doesn't exist.

    Args:
        path: Directory path

    Returns:
        The directory path
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def install_stream(
    chunks: Iterable[bytes],
    destination: Union[str, Path],
    executable: bool = True,
) -> Path:
    """
    Write a byte stream to destination atomically.

    The stream is written to a hidden temporary file in the destination
    directory (same filesystem), flushed to disk, then renamed over the
    destination. On any failure, including KeyboardInterrupt, the temporary
    file is removed and the destination is left as it was.

    Args:
        chunks: Decoded artifact bytes
        destination: Final install path
        executable: Set mode 0o755 before the rename (ignored on Windows)

    Returns:
        Path to the installed file

    Raises:
        StreamIOError: If reading the stream or writing the file fails.
            Decode failures keep their ArtifactDecodeError subclass.

    Example:
        >>> install_stream([b"#!/bin/sh\\n", b"echo hi\\n"], "bin/tool")
        PosixPath('bin/tool')
    """
    destination = Path(destination)
    temp_path = None

    try:
        ensure_directory(destination.parent)
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
        )
        temp_path = Path(temp_path_str)

        written = 0
        with open(temp_fd, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
                written += len(chunk)
            f.flush()
            os.fsync(f.fileno())

        if executable and not IS_WINDOWS:
            temp_path.chmod(EXECUTABLE_MODE)

        # Atomic rename (replaces destination if it exists)
        temp_path.replace(destination)

    except StreamIOError:
        _discard(temp_path)
        raise
    except (OSError, RequestException) as e:
        _discard(temp_path)
        raise StreamIOError(f"Failed to write {destination}: {e}", cause=e) from e
    except BaseException:
        _discard(temp_path)
        raise

    logger.debug(f"Wrote {written} bytes to {destination}")
    return destination


def _discard(temp_path: Optional[Path]) -> None:
    """Remove a temporary file, ignoring failures."""
    if temp_path is None:
        return
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove temporary file {temp_path}: {e}")


__all__ = [
    "IS_WINDOWS",
    "ensure_directory",
    "install_stream",
]
