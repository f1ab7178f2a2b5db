"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from divina.build.layout import DEFAULT_OUTPUT_DIR
from divina.config.parser import CONFIG_FILENAME

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def resolve_paths(args) -> Tuple[Path, Path]:
    """
    Work out the build script and output directory for a command.

    Args:
        args: Parsed arguments with config, project_root and out_dir

    Returns:
        (build script path, output root)
    """
    project_root = resolve_project_root(getattr(args, "project_root", None))

    config = getattr(args, "config", None)
    if config:
        config_file = Path(config).resolve()
    else:
        config_file = project_root / CONFIG_FILENAME

    output_root = Path(getattr(args, "out_dir", None) or DEFAULT_OUTPUT_DIR)
    if not output_root.is_absolute():
        output_root = project_root / output_root

    logger.debug(f"Build script: {config_file}")
    logger.debug(f"Output directory: {output_root}")
    return config_file, output_root


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
