"""
Centralized exception hierarchy for Divina.

Every error raised by the configuration resolver, the build planner and the
toolchain driver derives from DivinaError. All of them are terminal: the CLI
reports the message and exits with a non-zero status.
"""

from pathlib import Path
from typing import Any, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class DivinaError(Exception):
    """Base exception for all Divina errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(DivinaError):
    """Base exception for build script parsing and validation errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when the build script does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Could not locate '{path}', perhaps it doesn't exist?"
        )


class ConfigReadError(ConfigError):
    """Raised when the build script exists but cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read '{path}': {reason}")


class ConfigSyntaxError(ConfigError):
    """Raised when the build script is not a valid YAML mapping."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid build script '{path}': {reason}")


class AmbiguousRootTableError(ConfigError):
    """Raised when a script defines both or neither of Package and Workspace."""

    def __init__(self, path: Path, found: Sequence[str]):
        self.path = path
        self.found = list(found)
        if self.found:
            detail = "defines both `Package` and `Workspace`"
        else:
            detail = "is neither `Workspace` nor `Package`"
        super().__init__(
            f"'{path}' {detail}, exactly one of them must be assigned"
        )


class MissingRequiredFieldError(ConfigError):
    """Raised when a required field is absent from a root table."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Could not access required field `{field}`, "
            "perhaps you've forgotten to define it?"
        )


class InvalidFieldTypeError(ConfigError):
    """Raised when a field holds a value of the wrong type."""

    def __init__(self, field: str, expected: str, value: Any):
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(
            f"Field `{field}` must be {expected}, got {type(value).__name__}: {value!r}"
        )


class InvalidEnumValueError(ConfigError):
    """Raised when an enum-coded field holds an unknown value."""

    def __init__(self, field: str, value: Any, allowed: Sequence[str] = ()):
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        msg = f"Invalid value for `{field}`: {value!r}"
        if self.allowed:
            msg += f" (expected one of {', '.join(self.allowed)})"
        super().__init__(msg)


class CycleDetectedError(ConfigError):
    """Raised when workspace members refer back to an enclosing workspace."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = list(chain)
        super().__init__(
            "Workspace member cycle detected: "
            + " -> ".join(str(p) for p in self.chain)
        )


# ============================================================================
# Planning Exceptions
# ============================================================================


class PlanError(DivinaError):
    """Raised when a configuration cannot be turned into build units."""

    pass


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class ToolchainError(DivinaError):
    """Base exception for assembler and linker invocation errors."""

    pass


class ProcessLaunchError(ToolchainError):
    """Raised when an external tool cannot be started."""

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        self.reason = reason
        super().__init__(
            f"Could not start '{self.command[0]}': {reason}"
        )


class ProcessExitError(ToolchainError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"'{' '.join(self.command)}' failed with exit code {returncode}"
        )


class DirectoryCreateError(ToolchainError):
    """Raised when an output directory cannot be created."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Could not create directory '{path}', check permissions: {reason}"
        )


class DeveloperEnvironmentError(ToolchainError):
    """Raised when the Visual Studio developer environment cannot be activated."""

    pass


class UnsupportedPlatformError(ToolchainError):
    """Raised when no toolchain driver exists for the host platform."""

    pass
