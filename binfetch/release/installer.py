"""
Release binary installer.

Ties the pipeline together: generate candidate asset names for the host,
request each in order, decode the first one that exists and install it
atomically at the configured destination.

Only running out of candidates is fatal. A missing asset, an unsupported
extension, a broken download or an undecodable payload each just move the
search on to the next candidate.

Usage:
    from binfetch.config import load_config
    from binfetch.release.installer import BinaryInstaller

    config = load_config({"owner": "andrioid", "repo": "md-social"})
    result = BinaryInstaller(config).install()
    print(f"Installed {result.candidate.name} -> {result.path}")
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

from binfetch.core.decompress import transform_for
from binfetch.core.download import ArtifactRetriever, OutcomeKind
from binfetch.core.exceptions import (
    ArtifactDecodeError,
    ExhaustedCandidatesError,
    StreamIOError,
    UnsupportedFormatError,
)
from binfetch.core.filesystem import install_stream
from binfetch.core.platform import HostPlatform, detect_host
from binfetch.release.candidates import (
    Candidate,
    artifact_stem,
    candidates_for_override,
    generate_candidates,
)
from binfetch.release.locator import asset_url, auth_headers, url_prefix

if TYPE_CHECKING:
    from binfetch.config.settings import InstallConfig

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """
    Outcome of a successful install.

    Attributes:
        candidate: Candidate that was installed
        url: URL it was downloaded from
        path: Installed executable
        attempts: Number of candidates requested, including the successful one
    """

    candidate: Candidate
    url: str
    path: Path
    attempts: int


class BinaryInstaller:
    """
    Resolve, download and install a release binary for one host.

    Attributes:
        config: Resolved install configuration
        host: Canonical host platform
        retriever: HTTP retriever used for every candidate
    """

    def __init__(
        self,
        config: "InstallConfig",
        retriever: Optional[ArtifactRetriever] = None,
        host: Optional[HostPlatform] = None,
    ):
        """
        Initialize installer.

        Args:
            config: Install configuration
            retriever: Retriever to use (created from config.timeout if None)
            host: Host platform (auto-detected if None)
        """
        self.config = config
        self.host = host or detect_host()
        self.retriever = retriever or ArtifactRetriever(timeout=config.timeout)

    @property
    def prefix(self) -> str:
        return url_prefix(
            self.config.owner, self.config.repo, self.config.version, self.config.host
        )

    def candidates(self) -> List[Candidate]:
        """Get the candidate list in resolution order."""
        if self.config.asset:
            return candidates_for_override(self.config.asset)
        return generate_candidates(
            self.config.artifact_base,
            self.host.os,
            self.host.arch,
            self.host.is_windows,
        )

    def plan(self) -> List[Tuple[Candidate, str]]:
        """
        List candidates with their URLs without touching the network.

        Returns:
            (candidate, url) pairs in the order they would be tried
        """
        prefix = self.prefix
        return [(c, asset_url(prefix, c.name)) for c in self.candidates()]

    def install(self) -> InstallResult:
        """
        Install the first candidate that can be downloaded and decoded.

        Returns:
            InstallResult describing the installed candidate

        Raises:
            ExhaustedCandidatesError: If no candidate could be installed
        """
        prefix = self.prefix
        headers = auth_headers(self.config.token)
        destination = self.config.destination
        candidates = self.candidates()

        logger.info(
            f"Resolving {self.config.owner}/{self.config.repo}@{self.config.version} "
            f"for {self.host}"
        )

        for attempt, candidate in enumerate(candidates, start=1):
            url = asset_url(prefix, candidate.name)
            if self._try_candidate(candidate, url, headers, destination):
                logger.info(f"Downloaded {candidate.name} -> {destination}")
                return InstallResult(
                    candidate=candidate, url=url, path=destination, attempts=attempt
                )

        raise ExhaustedCandidatesError([c.name for c in candidates], prefix)

    def _try_candidate(
        self, candidate: Candidate, url: str, headers: dict, destination: Path
    ) -> bool:
        outcome = self.retriever.fetch(url, headers)
        if outcome.kind is not OutcomeKind.SUCCESS:
            logger.debug(f"Candidate {candidate.name} absent: {outcome.detail}")
            return False

        try:
            transform = transform_for(candidate.compression, self._member_names(candidate))
        except UnsupportedFormatError as e:
            outcome.close()
            logger.warning(f"Skipping {candidate.name}: {e}")
            return False

        try:
            install_stream(transform(self.retriever.iter_body(outcome)), destination)
        except ArtifactDecodeError as e:
            logger.warning(f"Could not decode {candidate.name}: {e}")
            return False
        except StreamIOError as e:
            logger.warning(f"Download of {candidate.name} failed: {e}")
            return False
        finally:
            outcome.close()

        return True

    def _member_names(self, candidate: Candidate) -> List[str]:
        """Entry names to look for inside a zip archive, most specific first."""
        tool = self.config.tool_name
        stem = artifact_stem(self.config.artifact_base, self.host.os, self.host.arch)
        names = [tool, f"{tool}.exe", stem, f"{stem}.exe"]
        if candidate.name.endswith(".zip"):
            names.append(candidate.name[: -len(".zip")])
        return list(dict.fromkeys(names))


__all__ = ["BinaryInstaller", "InstallResult"]
