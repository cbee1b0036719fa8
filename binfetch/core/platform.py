"""
Platform detection for binfetch.

Translates the host's raw OS and CPU-architecture identifiers into the
canonical tokens used in release asset names (Go-style: 'linux', 'darwin',
'windows', 'amd64', 'arm64', ...).

Both mappings are total: an identifier that is not recognized is returned
unchanged so the installer keeps working on unlisted platforms.

Usage:
    from binfetch.core.platform import detect_host

    host = detect_host()
    print(host.platform_string())  # e.g. 'linux-amd64'
"""

import functools
import platform
from dataclasses import dataclass


_PLATFORM_TOKENS = {
    "darwin": "darwin",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
    "cygwin": "windows",
    "msys": "windows",
    "freebsd": "freebsd",
}

# platform.system() reports these with a version suffix, e.g. CYGWIN_NT-10.0
_WINDOWS_PREFIXES = ("cygwin", "msys", "mingw")

_ARCH_TOKENS = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8": "arm64",
    # TODO: distinguish armv6 from armv7 once releases publish both
    "arm": "arm",
    "armv6l": "arm",
    "armv7": "arm",
    "armv7l": "arm",
    "armv8l": "arm",
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
    "ia32": "386",
    "ppc64": "ppc64",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def platform_token(raw_os: str) -> str:
    """
    Map a raw OS identifier to its canonical platform token.

    Args:
        raw_os: Value reported by the host (e.g. 'Linux', 'win32', 'Darwin')

    Returns:
        Canonical token, or raw_os unchanged if it is not recognized

    Example:
        >>> platform_token("Windows")
        'windows'
        >>> platform_token("plan9")
        'plan9'
    """
    key = raw_os.lower()
    if key in _PLATFORM_TOKENS:
        return _PLATFORM_TOKENS[key]
    if key.startswith(_WINDOWS_PREFIXES):
        return "windows"
    return raw_os


def arch_token(raw_arch: str) -> str:
    """
    Map a raw CPU-architecture identifier to its canonical token.

    Args:
        raw_arch: Value reported by the host (e.g. 'x86_64', 'AMD64', 'aarch64')

    Returns:
        Canonical token, or raw_arch unchanged if it is not recognized

    Example:
        >>> arch_token("x86_64")
        'amd64'
    """
    return _ARCH_TOKENS.get(raw_arch.lower(), raw_arch)


@dataclass(frozen=True)
class HostPlatform:
    """
    Canonical description of the running host.

    Attributes:
        os: Canonical platform token ('linux', 'darwin', 'windows', ...)
        arch: Canonical architecture token ('amd64', 'arm64', ...)
    """

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def platform_string(self) -> str:
        """Get '<os>-<arch>' as used in artifact names."""
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_host() -> HostPlatform:
    """
    Detect the canonical platform of the running host.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform for the current process
    """
    return HostPlatform(
        os=platform_token(platform.system()),
        arch=arch_token(platform.machine()),
    )


def clear_host_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host() to re-detect. Used by tests.
    """
    detect_host.cache_clear()


__all__ = [
    "HostPlatform",
    "platform_token",
    "arch_token",
    "detect_host",
    "clear_host_cache",
]
