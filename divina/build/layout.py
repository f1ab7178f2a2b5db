"""
Output directory layout for Divina builds.

A single build unit is written straight into the output root; a workspace
gets one subdirectory per unit:

    flat:    out/<base>.o        out/<unit>
    nested:  out/<unit>/<base>.o out/<unit>/<unit>

Every path is a pure function of the unit name, the object base name, the
layout flag and the platform suffixes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from divina.build.planner import BuildUnit, Source

DEFAULT_OUTPUT_DIR = "out"


@dataclass(frozen=True)
class OutputLayout:
    """
    Output path rules for one build plan.

    Attributes:
        root: Output root directory
        flat: Whether units are written directly into root
        object_suffix: Object file extension ('.o' or '.obj')
        binary_suffix: Linked binary extension ('' or '.exe')
    """

    root: Path
    flat: bool
    object_suffix: str = ".o"
    binary_suffix: str = ""

    def unit_dir(self, unit: BuildUnit) -> Path:
        return Path(self.root) if self.flat else Path(self.root) / unit.name

    def object_path(self, unit: BuildUnit, source: Source) -> Path:
        return self.unit_dir(unit) / f"{source.filename}{self.object_suffix}"

    def object_paths(self, unit: BuildUnit) -> List[Path]:
        """Object paths of a unit, in source order."""
        return [self.object_path(unit, source) for source in unit.sources]

    def binary_path(self, unit: BuildUnit) -> Path:
        return self.unit_dir(unit) / f"{unit.name}{self.binary_suffix}"


__all__ = ["DEFAULT_OUTPUT_DIR", "OutputLayout"]
