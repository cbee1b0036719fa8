"""
Candidate asset names for a release.

Publishers name their per-platform assets in slightly different ways, so
instead of a compatibility table the installer tries a fixed, ordered list of
plausible names for '<base>-<platform>-<arch>':

1. the bare executable
2. gzip-compressed ('.gz')
3. Windows only: the executable zipped with its '.exe' suffix ('.exe.zip')
4. zip archive ('.zip')
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from binfetch.core.decompress import GZIP, NONE, ZIP, compression_for_name


@dataclass(frozen=True)
class Candidate:
    """
    One guessed remote file name.

    Attributes:
        name: Asset file name as published in the release
        compression: Decoder kind (inferred from the name's extension if None)
    """

    name: str
    compression: Optional[str] = None

    def __post_init__(self):
        if self.compression is None:
            object.__setattr__(self, "compression", compression_for_name(self.name))

    def __str__(self) -> str:
        return self.name


def artifact_stem(base: str, platform: str, arch: str) -> str:
    """
    Build the extension-less asset name.

    Example:
        >>> artifact_stem("md-social", "linux", "amd64")
        'md-social-linux-amd64'
    """
    return f"{base}-{platform}-{arch}"


def generate_candidates(
    base: str, platform: str, arch: str, is_windows: bool
) -> List[Candidate]:
    """
    Generate the ordered candidate list for a platform.

    Args:
        base: Artifact base name (usually the tool name)
        platform: Canonical platform token
        arch: Canonical architecture token
        is_windows: Whether to include the '.exe.zip' variant

    Returns:
        Candidates in resolution priority order, without duplicates

    Example:
        >>> [c.name for c in generate_candidates("tool", "linux", "arm64", False)]
        ['tool-linux-arm64', 'tool-linux-arm64.gz', 'tool-linux-arm64.zip']
    """
    stem = artifact_stem(base, platform, arch)

    # Each tier fixes its decoder regardless of dots in the base name
    tiers: List[Tuple[Optional[str], str]] = [
        (stem, NONE),
        (f"{stem}.gz", GZIP),
        (f"{stem}.exe.zip" if is_windows else None, ZIP),
        (f"{stem}.zip", ZIP),
    ]

    seen = set()
    candidates = []
    for name, compression in tiers:
        if name is None or name in seen:
            continue
        seen.add(name)
        candidates.append(Candidate(name, compression))
    return candidates


def candidates_for_override(asset: str) -> List[Candidate]:
    """
    Candidate list for an explicitly configured asset name.

    Args:
        asset: Exact asset file name

    Returns:
        Single-element candidate list
    """
    return [Candidate(asset)]


__all__ = [
    "Candidate",
    "artifact_stem",
    "generate_candidates",
    "candidates_for_override",
]
