"""
Divina CLI argument parser.

This module implements the command-line interface for Divina using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from divina import __version__
from divina.build.layout import DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)


class CLI:
    """Divina command-line interface."""

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
            prog="divina",
            description="Divina - a minimal build tool for assembly projects",
            epilog='Use "divina COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"Divina {__version__}"
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
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to build script (default: ./divina.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--out-dir",
            metavar="DIR",
            default=DEFAULT_OUTPUT_DIR,
            help=f"Output directory, relative to the project root (default: {DEFAULT_OUTPUT_DIR})",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_build_command(subparsers)
        self._add_clean_command(subparsers)
        self._add_config_command(subparsers)

        return parser

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        subparsers.add_parser(
            "build",
            help="Build your project",
            description="Assemble and link every package of the build script",
        )

    def _add_clean_command(self, subparsers):
        """Add 'clean' subcommand."""
        parser = subparsers.add_parser(
            "clean",
            help="Remove build output",
            description="Remove the output directory and everything in it",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be removed without removing",
        )

    def _add_config_command(self, subparsers):
        """Add 'config' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(
            "config",
            help="Inspect your configuration",
            description="Print or validate the resolved build script",
        )

        config_subparsers = parser.add_subparsers(
            dest="config_command", help="Configuration commands", metavar="COMMAND"
        )

        show_parser = config_subparsers.add_parser(
            "show",
            help="Print your configuration",
            description="Print the resolved configuration as YAML",
        )
        show_parser.add_argument(
            "--raw",
            action="store_true",
            help="Print the build script as written, without resolving members",
        )

        config_subparsers.add_parser(
            "validate",
            help="Check if your configuration will build",
            description="Validate versions, sources and tool availability",
        )

        compiler_parser = config_subparsers.add_parser(
            "compiler",
            help="Access the Divina compiler wrapper",
            description="Inspect the build plan handed to the toolchain",
        )
        compiler_subparsers = compiler_parser.add_subparsers(
            dest="compiler_command", help="Compiler commands", metavar="COMMAND"
        )
        compiler_subparsers.add_parser(
            "show",
            help="Print Divina's compiler configuration",
            description="Print every build unit, its sources and object names",
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
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

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

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        if args.command == "config":
            return self._dispatch_config_command(args)

        command_map = {
            "build": "divina.cli.commands.build",
            "clean": "divina.cli.commands.clean",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)

    def _dispatch_config_command(self, args) -> int:
        """
        Dispatch config sub-commands.

        Args:
            args: Parsed arguments with config_command field

        Returns:
            Exit code from command handler
        """
        from divina.cli.commands import config

        if not getattr(args, "config_command", None):
            logger.error("No config sub-command specified")
            self.parser.parse_args(["config", "--help"])
            return 1

        if args.config_command == "compiler":
            if not getattr(args, "compiler_command", None):
                logger.error("No compiler sub-command specified")
                self.parser.parse_args(["config", "compiler", "--help"])
                return 1
            return config.run_compiler_show(args)

        config_command_map = {
            "show": config.run_show,
            "validate": config.run_validate,
        }

        handler = config_command_map.get(args.config_command)
        if not handler:
            logger.error(f"Unknown config command: {args.config_command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
