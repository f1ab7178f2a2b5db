"""Configuration module for Divina.

This module resolves divina.yaml build scripts into typed Package and
Workspace configurations and validates them.
"""

from divina.config.parser import (
    CONFIG_FILENAME,
    DEFAULT_COMPILER,
    ConfigType,
    PackageType,
    Arch,
    PackageConfig,
    WorkspaceConfig,
    Config,
    resolve_config,
    load_build_script,
    get_field,
    decode_enum,
)
from divina.config.validation import (
    ValidationIssue,
    ValidationResult,
    ConfigValidator,
    format_validation_results,
)
from divina.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_COMPILER",
    "ConfigType",
    "PackageType",
    "Arch",
    "PackageConfig",
    "WorkspaceConfig",
    "Config",
    "ConfigError",
    "resolve_config",
    "load_build_script",
    "get_field",
    "decode_enum",
    "ValidationIssue",
    "ValidationResult",
    "ConfigValidator",
    "format_validation_results",
]
