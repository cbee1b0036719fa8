"""
Test utilities for binfetch.
"""

from .builders import encrypted_zip_bytes, gzip_bytes, zip_bytes

__all__ = ["encrypted_zip_bytes", "gzip_bytes", "zip_bytes"]
