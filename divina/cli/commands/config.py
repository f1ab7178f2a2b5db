"""
Config command implementation.

Sub-commands:
    show             Print the resolved configuration
    validate         Check the configuration for problems
    compiler show    Print the build plan handed to the toolchain
"""

import logging

import yaml

from divina.build.planner import plan
from divina.cli.utils import print_error, resolve_paths
from divina.config.parser import load_build_script, resolve_config
from divina.config.validation import ConfigValidator, format_validation_results
from divina.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _load(args):
    config_file, _ = resolve_paths(args)
    try:
        return resolve_config(config_file)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        print_error("Failed to load configuration", str(e))
        return None


def run_show(args) -> int:
    """Print the resolved configuration (or the raw script with --raw)."""
    if getattr(args, "raw", False):
        config_file, _ = resolve_paths(args)
        try:
            data = load_build_script(config_file)
        except ConfigError as e:
            print_error("Failed to load configuration", str(e))
            return 1
    else:
        config = _load(args)
        if config is None:
            return 1
        data = {config.config_type.value: config.to_dict()}

    print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())
    return 0


def run_validate(args) -> int:
    """Validate the configuration; exit 1 when errors are found."""
    config = _load(args)
    if config is None:
        return 1

    result = ConfigValidator().validate(config)
    print(format_validation_results(result))

    return 0 if result.valid else 1


def run_compiler_show(args) -> int:
    """Print the build plan."""
    config = _load(args)
    if config is None:
        return 1

    print(plan(config).describe())
    return 0
