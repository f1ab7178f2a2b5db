"""Configuration validation module for Divina.

This module provides semantic validation for a resolved configuration:
tool version compatibility, source file existence, output name collisions
and assembler availability.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import List, Optional

from packaging import version as pkg_version

from divina import __version__
from divina.config.parser import Config, PackageConfig, WorkspaceConfig


@dataclass
class ValidationIssue:
    """A single validation issue."""

    level: str  # 'error', 'warning', 'info'
    field: str  # Configuration field path
    message: str  # Human-readable message
    suggestion: str  # How to fix it


@dataclass
class ValidationResult:
    """Result of configuration validation."""

    valid: bool
    issues: List[ValidationIssue]


class ConfigValidator:
    """Validates a resolved Divina configuration."""

    def __init__(self, tool_version: Optional[str] = None, check_tools: bool = True):
        """
        Initialize validator.

        Args:
            tool_version: Divina version to check against (defaults to the
                running version)
            check_tools: Whether to look for the assembler on PATH
        """
        self.tool_version = tool_version or __version__
        self.check_tools = check_tools
        self.issues: List[ValidationIssue] = []

    def validate(self, config: Config) -> ValidationResult:
        """
        Perform comprehensive validation.

        Args:
            config: Resolved configuration to validate

        Returns:
            ValidationResult with any issues found
        """
        self.issues = []

        if isinstance(config, WorkspaceConfig):
            packages = list(config.members)
            self._validate_workspace(config)
        else:
            packages = [config]

        for package in packages:
            self._validate_versions(package)
            self._validate_sources(package)
            if self.check_tools:
                self._validate_compiler(package)

        has_errors = any(issue.level == "error" for issue in self.issues)

        return ValidationResult(valid=not has_errors, issues=self.issues)

    def _validate_workspace(self, config: WorkspaceConfig):
        """Check for member names that collide in the output tree."""
        if not config.members:
            self._add_info(
                "Workspace.members",
                "Workspace has no members",
                "Add member directories containing a divina.yaml",
            )
            return

        seen = set()
        for member in config.members:
            if member.name in seen:
                self._add_warning(
                    f"{member.name}.name",
                    f"Duplicate package name '{member.name}'",
                    "Rename one of the packages, their outputs would overwrite each other",
                )
            seen.add(member.name)

    def _validate_versions(self, package: PackageConfig):
        """Validate version fields."""
        try:
            required = pkg_version.parse(package.minimum_divina_version)
        except pkg_version.InvalidVersion:
            self._add_error(
                f"{package.name}.minimum_divina_version",
                f"Invalid version format: {package.minimum_divina_version}",
                "Use a version such as 0.1.0",
            )
        else:
            if pkg_version.parse(self.tool_version) < required:
                self._add_error(
                    f"{package.name}.minimum_divina_version",
                    f"Package requires Divina {package.minimum_divina_version}, "
                    f"running {self.tool_version}",
                    "Upgrade Divina or lower minimum_divina_version",
                )

        if not self._is_valid_version(package.version):
            self._add_warning(
                f"{package.name}.version",
                f"Invalid version format: {package.version}",
                "Use a version such as 0.1.0",
            )

    def _validate_sources(self, package: PackageConfig):
        """Check that sources exist and produce distinct objects."""
        sources = [s.strip() for s in package.sources if s.strip()]

        if not sources:
            self._add_info(
                f"{package.name}.sources",
                "Package declares no sources",
                "Nothing will be assembled or linked for this package",
            )
            return

        seen = set()
        for source in sources:
            path = Path(package.path) / source if package.path else Path(source)
            if not path.is_file():
                self._add_error(
                    f"{package.name}.sources",
                    f"Source file not found: {path}",
                    "Fix the path or remove the entry",
                )

            stem = PurePath(source).stem
            if stem in seen:
                self._add_warning(
                    f"{package.name}.sources",
                    f"Several sources assemble to object '{stem}'",
                    "Rename one of the sources, their objects would overwrite each other",
                )
            seen.add(stem)

    def _validate_compiler(self, package: PackageConfig):
        """Check assembler availability."""
        if not self._is_tool_available(package.compiler):
            self._add_warning(
                f"{package.name}.compiler",
                f"{package.compiler} not found on PATH",
                f"Install {package.compiler} or set `compiler` to an installed assembler",
            )

    def _add_error(self, field: str, message: str, suggestion: str):
        """Add error issue."""
        self.issues.append(
            ValidationIssue(
                level="error", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_warning(self, field: str, message: str, suggestion: str):
        """Add warning issue."""
        self.issues.append(
            ValidationIssue(
                level="warning", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_info(self, field: str, message: str, suggestion: str):
        """Add info issue."""
        self.issues.append(
            ValidationIssue(
                level="info", field=field, message=message, suggestion=suggestion
            )
        )

    @staticmethod
    def _is_valid_version(version: str) -> bool:
        try:
            pkg_version.parse(version)
            return True
        except pkg_version.InvalidVersion:
            return False

    @staticmethod
    def _is_tool_available(tool: str) -> bool:
        """Check if tool is available on PATH."""
        return shutil.which(tool) is not None


def format_validation_results(result: ValidationResult) -> str:
    """
    Format validation results for display.

    Args:
        result: Validation result to format

    Returns:
        Formatted string for display
    """
    if result.valid and not result.issues:
        return ":: no issues found"

    lines = []

    errors = [i for i in result.issues if i.level == "error"]
    warnings = [i for i in result.issues if i.level == "warning"]
    infos = [i for i in result.issues if i.level == "info"]

    if errors:
        lines.append("Errors:")
        for issue in errors:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    -> {issue.suggestion}")
        lines.append("")

    if warnings:
        lines.append("Warnings:")
        for issue in warnings:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    -> {issue.suggestion}")
        lines.append("")

    if infos:
        lines.append("Info:")
        for issue in infos:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    -> {issue.suggestion}")

    return "\n".join(lines).rstrip()
