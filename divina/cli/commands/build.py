"""
Build command implementation.

Resolves the build script, plans the build units and drives the assembler
and linker for the host platform.
"""

import logging

from divina.build.planner import plan
from divina.cli.utils import print_error, print_warning, resolve_paths
from divina.config.parser import resolve_config
from divina.core.exceptions import ConfigError, DivinaError
from divina.toolchain import get_toolchain_driver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    config_file, output_root = resolve_paths(args)

    try:
        config = resolve_config(config_file)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        print_error("Failed to load configuration", str(e))
        return 1

    build_plan = plan(config)
    logger.debug(build_plan.describe())

    if build_plan.is_empty:
        print_warning(f"Nothing to build, '{config_file}' has no packages")
        return 0

    try:
        driver = get_toolchain_driver(output_root)
        driver.link(driver.compile(build_plan))
    except DivinaError as e:
        logger.error(f"Build failed: {e}")
        print_error("Build failed", str(e))
        return 1

    logger.info(f":: built {len(build_plan)} package(s) into '{output_root}'")
    return 0
