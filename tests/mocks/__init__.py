"""
Mock implementations for testing binfetch components.

This package provides mock implementations of the network side of the
install pipeline to enable isolated, deterministic testing.
"""

from .network import MockResponse, MockRetriever

__all__ = [
    "MockResponse",
    "MockRetriever",
]
