"""
Release download URLs and request headers.

Assets are fetched from the release download endpoints, which redirect to
the asset storage:

    https://<host>/<owner>/<repo>/releases/latest/download/<asset>
    https://<host>/<owner>/<repo>/releases/download/<version>/<asset>
"""

from typing import Dict, Optional
from urllib.parse import quote

LATEST = "latest"
DEFAULT_HOST = "github.com"

# Characters encodeURIComponent leaves alone, besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def url_prefix(owner: str, repo: str, version: str, host: str = DEFAULT_HOST) -> str:
    """
    Get the URL prefix under which release assets are looked up.

    Args:
        owner: Project owner (user or organization)
        repo: Repository name
        version: Release tag, or 'latest'
        host: Release host

    Returns:
        Prefix ending in '/'. The version is used verbatim.

    Example:
        >>> url_prefix("andrioid", "md-social", "latest")
        'https://github.com/andrioid/md-social/releases/latest/download/'
        >>> url_prefix("andrioid", "md-social", "v1.2.3")
        'https://github.com/andrioid/md-social/releases/download/v1.2.3/'
    """
    if version == LATEST:
        return f"https://{host}/{owner}/{repo}/releases/latest/download/"
    return f"https://{host}/{owner}/{repo}/releases/download/{version}/"


def asset_url(prefix: str, name: str) -> str:
    """
    Append a percent-encoded asset name to a URL prefix.

    Example:
        >>> asset_url("https://example.com/dl/", "tool linux.gz")
        'https://example.com/dl/tool%20linux.gz'
    """
    return prefix + quote(name, safe=_URI_COMPONENT_SAFE)


def auth_headers(credential: Optional[str] = None) -> Dict[str, str]:
    """
    Build authorization headers for release requests.

    Args:
        credential: Bearer token, or None

    Returns:
        Empty dict without a credential, else a single Authorization entry
    """
    if not credential:
        return {}
    return {"Authorization": f"Bearer {credential}"}


__all__ = [
    "LATEST",
    "DEFAULT_HOST",
    "url_prefix",
    "asset_url",
    "auth_headers",
]
