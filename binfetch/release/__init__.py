"""
Release asset resolution for binfetch.

Available Components:
--------------------
- Candidate / generate_candidates: ordered guesses for the asset name
- url_prefix / asset_url / auth_headers: release download URLs
- BinaryInstaller: the full resolve-download-install pipeline
"""

from binfetch.release.candidates import (
    Candidate,
    artifact_stem,
    generate_candidates,
    candidates_for_override,
)
from binfetch.release.locator import (
    LATEST,
    url_prefix,
    asset_url,
    auth_headers,
)
from binfetch.release.installer import BinaryInstaller, InstallResult

__all__ = [
    "Candidate",
    "artifact_stem",
    "generate_candidates",
    "candidates_for_override",
    "LATEST",
    "url_prefix",
    "asset_url",
    "auth_headers",
    "BinaryInstaller",
    "InstallResult",
]
