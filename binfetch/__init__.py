"""
binfetch - install prebuilt release binaries for the running platform.

Resolves the host's OS and architecture to canonical tokens, guesses the
release asset name, downloads the first candidate that exists and installs
it atomically as an executable.
"""

__version__ = "0.1.0"
