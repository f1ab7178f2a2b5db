"""
Clean command implementation.

Removes the build output directory.
"""

import logging
import shutil

from divina.cli.utils import print_error, resolve_paths

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the clean command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    _, output_root = resolve_paths(args)

    if not output_root.exists():
        logger.info(f":: directory '{output_root}' does not exist")
        return 0

    if getattr(args, "dry_run", False):
        logger.info(f":: would remove directory '{output_root}'")
        return 0

    logger.info(f":: removing directory '{output_root}'")
    try:
        shutil.rmtree(output_root)
    except OSError as e:
        logger.error(f"Failed to remove {output_root}: {e}")
        print_error(
            f"Could not remove directory '{output_root}', check permissions", str(e)
        )
        return 1

    return 0
