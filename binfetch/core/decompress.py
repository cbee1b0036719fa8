"""
Streaming decompression transforms for release assets.

A transform turns an iterator of raw body chunks into an iterator of
decoded chunks. Each compression kind maps to exactly one transform:

- "none": bytes pass through unchanged (bare executables)
- "gzip": incremental gzip decoding, multi-member streams supported
- "zip":  zip archive container; one file entry is extracted

Zip archives keep their central directory at the end of the file, so the zip
transform spools the payload to an anonymous temporary file before reading
the selected entry back in chunks.
"""

import functools
import logging
import posixpath
import tempfile
import zipfile
import zlib
from typing import Callable, Iterable, Iterator, Sequence

from binfetch.core.exceptions import ArtifactDecodeError, UnsupportedFormatError

logger = logging.getLogger(__name__)

StreamTransform = Callable[[Iterable[bytes]], Iterator[bytes]]

NONE = "none"
GZIP = "gzip"
ZIP = "zip"

_EXTENSIONS = {
    "": NONE,
    ".gz": GZIP,
    ".zip": ZIP,
}

CHUNK_SIZE = 64 * 1024


def compression_for_name(name: str) -> str:
    """
    Infer the compression kind from a file name's final extension.

    Args:
        name: Asset file name

    Returns:
        'none', 'gzip' or 'zip' for known extensions; otherwise the raw
        extension (e.g. '.xz'), which transform_for() rejects

    Example:
        >>> compression_for_name("tool-linux-amd64.gz")
        'gzip'
        >>> compression_for_name("tool-windows-amd64.exe.zip")
        'zip'
    """
    extension = posixpath.splitext(name)[1].lower()
    return _EXTENSIONS.get(extension, extension)


def identity(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Pass chunks through unchanged."""
    for chunk in chunks:
        yield chunk


def gunzip(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """
    Decode a gzip stream incrementally.

    Concatenated gzip members are decoded in sequence, as gzip(1) does.

    Raises:
        ArtifactDecodeError: If the stream is corrupt or truncated
    """
    decoder = zlib.decompressobj(zlib.MAX_WBITS | 16)
    seen_input = False
    try:
        for chunk in chunks:
            seen_input = True
            data = chunk
            while data:
                output = decoder.decompress(data)
                if output:
                    yield output
                if decoder.eof:
                    data = decoder.unused_data
                    if data:
                        decoder = zlib.decompressobj(zlib.MAX_WBITS | 16)
                else:
                    data = b""
        tail = decoder.flush()
        if tail:
            yield tail
    except zlib.error as e:
        raise ArtifactDecodeError(f"Invalid gzip data: {e}", cause=e) from e

    if not seen_input or not decoder.eof:
        raise ArtifactDecodeError("Truncated gzip stream")


def unzip(chunks: Iterable[bytes], member_names: Sequence[str] = ()) -> Iterator[bytes]:
    """
    Extract one file entry from a zip archive stream.

    The entry is chosen as follows:
    1. the first entry whose base name equals one of member_names (in order)
    2. otherwise the only file entry, if the archive holds exactly one

    Args:
        chunks: Raw archive bytes
        member_names: Preferred entry base names

    Yields:
        Contents of the selected entry

    Raises:
        ArtifactDecodeError: If the payload is not a zip archive or no entry
            can be selected
    """
    with tempfile.TemporaryFile(prefix="binfetch-") as spool:
        for chunk in chunks:
            spool.write(chunk)
        spool.seek(0)

        try:
            with zipfile.ZipFile(spool) as archive:
                entry = _select_member(archive, member_names)
                logger.debug(f"Extracting zip entry {entry.filename}")
                with archive.open(entry) as source:
                    while True:
                        block = source.read(CHUNK_SIZE)
                        if not block:
                            break
                        yield block
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,
            RuntimeError,
            ValueError,
        ) as e:
            raise ArtifactDecodeError(f"Invalid zip archive: {e}", cause=e) from e


def _select_member(archive: zipfile.ZipFile, member_names: Sequence[str]) -> zipfile.ZipInfo:
    files = [info for info in archive.infolist() if not info.is_dir()]

    by_basename = {}
    for info in files:
        by_basename.setdefault(posixpath.basename(info.filename), info)
    for name in member_names:
        if name in by_basename:
            return by_basename[name]

    if len(files) == 1:
        return files[0]

    listing = ", ".join(info.filename for info in files) or "<empty>"
    raise ArtifactDecodeError(
        f"Cannot choose an entry from zip archive (wanted one of "
        f"{', '.join(member_names) or '<any single file>'}; found {listing})"
    )


_TRANSFORMS = {
    NONE: identity,
    GZIP: gunzip,
    ZIP: unzip,
}


def transform_for(compression: str, member_names: Sequence[str] = ()) -> StreamTransform:
    """
    Select the decoder for a compression kind.

    Args:
        compression: 'none', 'gzip' or 'zip'
        member_names: Preferred entry names, used by the zip transform only

    Returns:
        StreamTransform for the compression kind

    Raises:
        UnsupportedFormatError: If compression is not a known kind
    """
    try:
        transform = _TRANSFORMS[compression]
    except KeyError:
        raise UnsupportedFormatError(compression) from None

    if transform is unzip:
        return functools.partial(unzip, member_names=tuple(member_names))
    return transform


__all__ = [
    "StreamTransform",
    "NONE",
    "GZIP",
    "ZIP",
    "compression_for_name",
    "identity",
    "gunzip",
    "unzip",
    "transform_for",
]
