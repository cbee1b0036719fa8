"""
Pytest configuration and shared fixtures for binfetch tests.
"""

import pytest

from binfetch.config.settings import InstallConfig
from binfetch.core.platform import HostPlatform, clear_host_cache


@pytest.fixture(autouse=True)
def _reset_host_cache():
    """Host detection is cached per process; start each test fresh."""
    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(os="linux", arch="amd64")


@pytest.fixture
def windows_host() -> HostPlatform:
    return HostPlatform(os="windows", arch="amd64")


@pytest.fixture
def install_config(tmp_path) -> InstallConfig:
    """Configuration installing md-social into a temporary bin directory."""
    return InstallConfig(
        owner="andrioid",
        repo="md-social",
        tool_name="md-social",
        version="v1.2.3",
        install_dir=tmp_path / "bin",
    )


@pytest.fixture
def binary_payload() -> bytes:
    """Bytes standing in for a compiled executable."""
    return b"\x7fELF" + bytes(range(256)) * 64
