"""
Toolchain driver interface for Divina.

A toolchain driver turns a BuildPlan into files on disk: it assembles every
source of every unit into an object file, then links each unit's objects
into a binary. Work is strictly sequential and the first failing tool
invocation aborts the whole build. Nothing is cached; every call rebuilds
everything.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from divina.build.layout import DEFAULT_OUTPUT_DIR, OutputLayout
from divina.build.planner import BuildPlan, BuildUnit, Source
from divina.config.parser import Arch
from divina.core.exceptions import (
    DirectoryCreateError,
    ProcessExitError,
    ProcessLaunchError,
)

logger = logging.getLogger(__name__)


class ToolchainDriver(ABC):
    """
    Abstract base class for platform toolchain drivers.

    Subclasses provide the object format table, the file suffixes and the
    link step; compilation and directory handling are shared.
    """

    name = "generic"
    object_suffix = ".o"
    binary_suffix = ""

    def __init__(self, output_root: Union[str, Path] = DEFAULT_OUTPUT_DIR):
        """
        Initialize driver.

        Args:
            output_root: Directory receiving objects and binaries
        """
        self.output_root = Path(output_root)

    @abstractmethod
    def object_format(self, arch: Arch) -> str:
        """
        Get the assembler output format for an architecture.

        Args:
            arch: Target architecture of the unit

        Returns:
            Value passed to the assembler's -f flag
        """
        pass

    @abstractmethod
    def link_unit(self, unit: BuildUnit, objects: List[Path], binary: Path) -> None:
        """
        Link the objects of one unit into a binary.

        Args:
            unit: Build unit being linked
            objects: Object files in source order
            binary: Output binary path

        Raises:
            ToolchainError: If the linker cannot run or fails
        """
        pass

    def layout(self, plan: BuildPlan) -> OutputLayout:
        """Get the output layout for a plan on this platform."""
        return OutputLayout(
            root=self.output_root,
            flat=plan.flat_layout,
            object_suffix=self.object_suffix,
            binary_suffix=self.binary_suffix,
        )

    def compile_command(
        self, unit: BuildUnit, source: Source, output: Path
    ) -> List[str]:
        """Build the assembler argument list for one source."""
        return [
            unit.compiler,
            "-f",
            self.object_format(unit.arch),
            *unit.compile_options,
            str(source.path),
            "-o",
            str(output),
        ]

    def prepare_directories(self, plan: BuildPlan) -> None:
        """
        Create the output root, plus one directory per unit when nested.

        Raises:
            DirectoryCreateError: If a directory cannot be created
        """
        layout = self.layout(plan)

        self._ensure_directory(self.output_root)

        if not layout.flat:
            for unit in plan:
                self._ensure_directory(layout.unit_dir(unit), unit.name)

    def compile(self, plan: BuildPlan) -> BuildPlan:
        """
        Assemble every source of every unit, in order.

        Args:
            plan: Build plan from the planner

        Returns:
            The same plan, for chaining into link()

        Raises:
            ToolchainError: On the first directory or assembler failure
        """
        layout = self.layout(plan)
        self.prepare_directories(plan)

        for unit in plan:
            for source in unit.sources:
                logger.info(
                    f":: {unit.name} @@ {unit.compiler} ?? compiling source '{source.path}'"
                )
                self.run_command(
                    self.compile_command(unit, source, layout.object_path(unit, source))
                )

        return plan

    def link(self, plan: BuildPlan) -> None:
        """
        Link every unit's objects into its binary.

        Units without sources are skipped.

        Raises:
            ToolchainError: On the first linker failure
        """
        layout = self.layout(plan)

        for unit in plan:
            objects = layout.object_paths(unit)
            if not objects:
                logger.info(f":: {unit.name} @@ no sources, nothing to link")
                continue

            logger.info(
                f":: {unit.name} @@ linking source{'s' if len(objects) > 1 else ''}: "
                + ", ".join(f"'{o}'" for o in objects)
            )
            self.link_unit(unit, objects, layout.binary_path(unit))

    def build(self, plan: BuildPlan) -> None:
        """Compile then link a plan."""
        self.link(self.compile(plan))

    def run_command(
        self, command: Sequence[str], env: Optional[Dict[str, str]] = None
    ) -> subprocess.CompletedProcess:
        """
        Run an external tool and wait for it.

        Args:
            command: Program and arguments (never passed through a shell)
            env: Environment for the child process (inherits when None)

        Raises:
            ProcessLaunchError: If the program cannot be started
            ProcessExitError: If the program exits non-zero
        """
        command = [str(part) for part in command]
        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(command, env=env)
        except OSError as e:
            raise ProcessLaunchError(command, str(e)) from e

        if result.returncode != 0:
            raise ProcessExitError(command, result.returncode)

        return result

    def _ensure_directory(self, path: Path, unit_name: Optional[str] = None) -> None:
        if path.is_dir():
            return

        if unit_name:
            logger.info(f":: {unit_name} @@ creating directory '{path}'")
        else:
            logger.info(f":: creating directory '{path}'")

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(path, str(e)) from e


__all__ = ["ToolchainDriver"]
