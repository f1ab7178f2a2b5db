"""
Build planning for Divina.

Flattens a resolved configuration into an ordered list of build units, one
per package. Each unit carries its resolved source paths, the object base
name derived from every source, and the toolchain selection for the package.

Object base names are always the source basename without its final
extension, for root packages and workspace members alike:

    sources: [src/main.asm, util.s]  ->  main, util
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Tuple

from divina.config.parser import Arch, Config, PackageConfig, WorkspaceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Source:
    """
    One assembly source of a build unit.

    Attributes:
        path: Input path handed to the assembler
        filename: Object base name (basename without extension)
    """

    path: Path
    filename: str


@dataclass(frozen=True)
class BuildUnit:
    """Fully resolved compile and link inputs for one package."""

    name: str
    sources: Tuple[Source, ...]
    arch: Arch
    compiler: str
    compile_options: Tuple[str, ...] = ()
    visual_studio: Optional[str] = None  # developer environment override

    def __post_init__(self):
        object.__setattr__(self, "sources", tuple(self.sources))
        object.__setattr__(self, "compile_options", tuple(self.compile_options))


@dataclass(frozen=True)
class BuildPlan:
    """Ordered build units produced from one configuration."""

    units: Tuple[BuildUnit, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "units", tuple(self.units))

    @property
    def flat_layout(self) -> bool:
        """True when a single unit is built directly into the output root."""
        return len(self.units) == 1

    @property
    def is_empty(self) -> bool:
        return not self.units

    def __iter__(self):
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def describe(self) -> str:
        """
        Render the plan for display.

        Returns:
            Multi-line summary of every unit and its sources
        """
        layout = "flat" if self.flat_layout else "nested"
        lines = [f"Build plan ({len(self.units)} unit(s), {layout} layout)"]

        for unit in self.units:
            lines.append("")
            lines.append(f"{unit.name}")
            lines.append(f"  arch:     {unit.arch.name.lower()}")
            lines.append(f"  compiler: {unit.compiler}")
            if unit.compile_options:
                lines.append(f"  options:  {' '.join(unit.compile_options)}")
            if unit.visual_studio:
                lines.append(f"  linker environment: {unit.visual_studio}")
            if unit.sources:
                lines.append("  sources:")
                for source in unit.sources:
                    lines.append(f"    {source.path} -> {source.filename}")
            else:
                lines.append("  sources:  (none)")

        return "\n".join(lines)


class BuildPlanner:
    """Turns a resolved Config into a BuildPlan."""

    def plan(self, config: Config) -> BuildPlan:
        """
        Plan the build units for a configuration.

        Args:
            config: PackageConfig or WorkspaceConfig from resolve_config()

        Returns:
            BuildPlan with one unit per package, in declaration order
        """
        if isinstance(config, WorkspaceConfig):
            packages = list(config.members)
        else:
            packages = [config]

        units = [self._plan_package(package) for package in packages]

        plan = BuildPlan(units=units)
        logger.debug(
            f"Planned {len(plan)} build unit(s), "
            f"{'flat' if plan.flat_layout else 'nested'} layout"
        )
        return plan

    def _plan_package(self, package: PackageConfig) -> BuildUnit:
        sources = []
        for raw in package.sources:
            entry = raw.strip()
            if not entry:
                logger.debug(f"{package.name}: skipping blank source entry")
                continue
            sources.append(self._resolve_source(package.path, entry))

        return BuildUnit(
            name=package.name,
            sources=sources,
            arch=package.arch,
            compiler=package.compiler,
            compile_options=package.compile_options,
            visual_studio=package.visual_studio,
        )

    @staticmethod
    def _resolve_source(origin: Optional[Path], raw: str) -> Source:
        path = Path(origin) / raw if origin is not None else Path(raw)
        return Source(path=path, filename=PurePath(raw).stem)


def plan(config: Config) -> BuildPlan:
    """
    Convenience function to plan a configuration.

    Example:
        >>> build_plan = plan(resolve_config(Path("divina.yaml")))
        >>> build_plan.flat_layout
        True
    """
    return BuildPlanner().plan(config)


__all__ = ["Source", "BuildUnit", "BuildPlan", "BuildPlanner", "plan"]
