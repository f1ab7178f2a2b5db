"""Windows toolchain driver: win32/win64 objects linked with MSVC link.exe."""

import logging
import shutil
from pathlib import Path
from typing import Dict, List

from divina.build.planner import BuildUnit
from divina.config.parser import Arch
from divina.toolchain.base import ToolchainDriver
from divina.toolchain.vsdevenv import (
    DeveloperEnvironment,
    lookup_env,
    select_developer_environment,
)

logger = logging.getLogger(__name__)

LINKER = "link"
RUNTIME_LIBRARIES = [
    "kernel32.lib",
    "msvcrt.lib",
    "legacy_stdio_definitions.lib",
]


class WindowsToolchainDriver(ToolchainDriver):
    """
    Driver for Windows hosts.

    Linking happens inside a Visual Studio developer environment: the unit's
    `visual_studio` override when given, otherwise the vcvars script matching
    the unit's architecture. Each environment is activated once per driver.
    """

    name = "windows"
    object_suffix = ".obj"
    binary_suffix = ".exe"

    FORMATS = {
        Arch.X86: "win32",
        Arch.X64: "win64",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._environments: Dict[str, Dict[str, str]] = {}

    def object_format(self, arch: Arch) -> str:
        return self.FORMATS[arch]

    def link_command(
        self, linker: str, objects: List[Path], binary: Path
    ) -> List[str]:
        return [
            linker,
            "/subsystem:console",
            f"/out:{binary}",
            *(str(obj) for obj in objects),
            *RUNTIME_LIBRARIES,
        ]

    def developer_environment(self, unit: BuildUnit) -> DeveloperEnvironment:
        return select_developer_environment(unit.arch, unit.visual_studio)

    def link_unit(self, unit: BuildUnit, objects: List[Path], binary: Path) -> None:
        environment = self.developer_environment(unit)
        key = repr(environment)

        if key not in self._environments:
            logger.info(
                f":: {unit.name} @@ entering visual studio developer command prompt environment"
            )
            self._environments[key] = environment.activate()
        env = self._environments[key]

        # CreateProcess searches the parent's PATH, not the child's
        linker = shutil.which(LINKER, path=lookup_env(env, "PATH")) or LINKER

        self.run_command(self.link_command(linker, objects, binary), env=env)
