"""Unix toolchain driver: ELF objects linked with the system ld."""

from pathlib import Path
from typing import List

from divina.build.planner import BuildUnit
from divina.config.parser import Arch
from divina.toolchain.base import ToolchainDriver

LINKER = "ld"
DYNAMIC_LINKER = "/lib64/ld-linux-x86-64.so.2"


class UnixToolchainDriver(ToolchainDriver):
    """Driver for Linux and other Unix-like hosts."""

    name = "unix"
    object_suffix = ".o"
    binary_suffix = ""

    FORMATS = {
        Arch.X86: "elf32",
        Arch.X64: "elf64",
    }

    def object_format(self, arch: Arch) -> str:
        return self.FORMATS[arch]

    def link_command(self, objects: List[Path], binary: Path) -> List[str]:
        return [
            LINKER,
            "-dynamic-linker",
            DYNAMIC_LINKER,
            "-lc",
            "-o",
            str(binary),
            *(str(obj) for obj in objects),
        ]

    def link_unit(self, unit: BuildUnit, objects: List[Path], binary: Path) -> None:
        self.run_command(self.link_command(objects, binary))
