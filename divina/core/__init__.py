"""
Core functionality for Divina.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    is_supported_platform,
    clear_platform_cache,
)

from .exceptions import (
    DivinaError,
    ConfigError,
    ConfigNotFoundError,
    ConfigReadError,
    ConfigSyntaxError,
    AmbiguousRootTableError,
    MissingRequiredFieldError,
    InvalidFieldTypeError,
    InvalidEnumValueError,
    CycleDetectedError,
    PlanError,
    ToolchainError,
    ProcessLaunchError,
    ProcessExitError,
    DirectoryCreateError,
    DeveloperEnvironmentError,
    UnsupportedPlatformError,
)

__all__ = [
    # Platform
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "clear_platform_cache",
    # Exceptions
    "DivinaError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigReadError",
    "ConfigSyntaxError",
    "AmbiguousRootTableError",
    "MissingRequiredFieldError",
    "InvalidFieldTypeError",
    "InvalidEnumValueError",
    "CycleDetectedError",
    "PlanError",
    "ToolchainError",
    "ProcessLaunchError",
    "ProcessExitError",
    "DirectoryCreateError",
    "DeveloperEnvironmentError",
    "UnsupportedPlatformError",
]
