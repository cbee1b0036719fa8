"""
binfetch CLI argument parser.

This module implements the command-line interface for binfetch using argparse.
It is the only place where the environment and the metadata file are read,
and the only place where exceptions become exit codes.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from binfetch import __version__
from binfetch.core.download import format_progress
from binfetch.core.exceptions import (
    ConfigurationError,
    ExhaustedCandidatesError,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


class CLI:
    """binfetch command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="binfetch",
            description="binfetch - install prebuilt release binaries for this platform",
            epilog='Use "binfetch COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"binfetch {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_platform_command(subparsers)

        return parser

    def _add_release_options(self, parser):
        """Options shared by commands that resolve release assets."""
        parser.add_argument(
            "--owner", metavar="NAME", help="Release owner (env: OWNER)"
        )
        parser.add_argument(
            "--repo", metavar="NAME", help="Repository name (env: REPO)"
        )
        parser.add_argument(
            "--tool",
            dest="tool_name",
            metavar="NAME",
            help="Installed executable name (default: repository name)",
        )
        parser.add_argument(
            "--base-name",
            metavar="NAME",
            help="Asset base name (default: tool name)",
        )
        parser.add_argument(
            "--metadata",
            type=Path,
            metavar="PATH",
            help="Package metadata file supplying the default version "
            "(default: ./package.json if present)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download and install the release binary",
            description="Download the release asset for this platform and "
            "install it as an executable",
        )
        self._add_release_options(parser)
        parser.add_argument(
            "--tag",
            dest="version",
            metavar="TAG",
            help="Release tag or 'latest' (env: VERSION)",
        )
        parser.add_argument(
            "--asset",
            metavar="NAME",
            help="Exact asset name, skipping name guessing (env: ASSET)",
        )
        parser.add_argument(
            "--install-dir",
            type=Path,
            metavar="DIR",
            help="Directory to install into (default: bin)",
        )
        parser.add_argument(
            "--host",
            metavar="HOST",
            help="Release host (default: github.com)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            metavar="SECONDS",
            help="Per-request timeout (default: 30)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List candidate URLs without downloading",
        )

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        parser = subparsers.add_parser(
            "platform",
            help="Show detected platform tokens",
            description="Show the canonical platform and architecture tokens "
            "and, if a base name is known, the candidate asset names",
        )
        parser.add_argument(
            "--base-name",
            metavar="NAME",
            help="Asset base name to generate candidates for",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return EXIT_FAILED

        try:
            if parsed_args.command == "install":
                return self._run_install(parsed_args)
            return self._run_platform(parsed_args)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG
        except ExhaustedCandidatesError as e:
            logger.error(str(e))
            return EXIT_FAILED
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return EXIT_INTERRUPTED

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _run_install(self, args) -> int:
        from binfetch.config.settings import load_config
        from binfetch.core.download import ArtifactRetriever
        from binfetch.release.installer import BinaryInstaller

        config = load_config(
            overrides={
                "owner": args.owner,
                "repo": args.repo,
                "tool_name": args.tool_name,
                "base_name": args.base_name,
                "version": args.version,
                "asset": args.asset,
                "install_dir": args.install_dir,
                "host": args.host,
                "timeout": args.timeout,
            },
            metadata_path=args.metadata,
        )

        retriever = ArtifactRetriever(
            timeout=config.timeout,
            progress_callback=lambda p: logger.debug(f"  {format_progress(p)}"),
        )
        installer = BinaryInstaller(config, retriever=retriever)

        if args.dry_run:
            for candidate, url in installer.plan():
                print(f"{candidate.name}\t{candidate.compression}\t{url}")
            return EXIT_OK

        result = installer.install()
        logger.debug(f"Installed after {result.attempts} attempt(s) from {result.url}")
        return EXIT_OK

    def _run_platform(self, args) -> int:
        from binfetch.core.platform import detect_host
        from binfetch.release.candidates import generate_candidates

        host = detect_host()
        print(f"platform: {host.os}")
        print(f"arch: {host.arch}")
        if args.base_name:
            for candidate in generate_candidates(
                args.base_name, host.os, host.arch, host.is_windows
            ):
                print(candidate.name)
        return EXIT_OK


def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt


def main():
    """Main entry point for CLI."""
    # SIGTERM unwinds like Ctrl+C
    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)

    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
