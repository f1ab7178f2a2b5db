"""
Visual Studio developer environment activation.

The MSVC linker only works inside the environment set up by one of the
`vcvars*.bat` scripts. Divina runs the script once through cmd.exe, captures
the resulting environment with `set`, and hands it to the linker process.

Windows only.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from divina.config.parser import Arch
from divina.core.exceptions import (
    DeveloperEnvironmentError,
    ProcessExitError,
    ProcessLaunchError,
)

logger = logging.getLogger(__name__)

VSWHERE_PATH = Path(
    "C:/Program Files (x86)/Microsoft Visual Studio/Installer/vswhere.exe"
)
DEFAULT_VISUAL_STUDIO = Path("C:/Program Files/Microsoft Visual Studio/2022/Community")
VCVARS_DIR = Path("VC") / "Auxiliary" / "Build"


class DeveloperEnvironment(ABC):
    """A batch script that prepares the environment for link.exe."""

    @abstractmethod
    def script(self) -> Path:
        """
        Locate the activation script.

        Raises:
            DeveloperEnvironmentError: If no script can be found
        """
        pass

    def activation_command(self, script: Path) -> List[str]:
        return ["cmd", "/d", "/c", "call", str(script), "&&", "set"]

    def activate(self) -> Dict[str, str]:
        """
        Run the activation script and capture the environment it produces.

        Returns:
            Environment variables for the linker process

        Raises:
            DeveloperEnvironmentError: Script missing or produced nothing
            ProcessLaunchError: cmd.exe could not be started
            ProcessExitError: The script failed
        """
        script = self.script()
        if not script.is_file():
            raise DeveloperEnvironmentError(
                f"Developer environment script not found: {script}"
            )

        command = self.activation_command(script)
        logger.debug(f"Activating developer environment: {script}")

        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            raise ProcessLaunchError(command, str(e)) from e

        if result.returncode != 0:
            raise ProcessExitError(command, result.returncode)

        env = parse_environment(result.stdout)
        if not env:
            raise DeveloperEnvironmentError(
                f"Developer environment script produced no environment: {script}"
            )
        return env


class CustomDeveloperEnvironment(DeveloperEnvironment):
    """An explicit activation script named by the package's `visual_studio` field."""

    def __init__(self, path: str):
        self.path = Path(path)

    def script(self) -> Path:
        return self.path

    def __repr__(self) -> str:
        return f"CustomDeveloperEnvironment({str(self.path)!r})"


class VisualStudioEnvironment(DeveloperEnvironment):
    """The vcvars32/vcvars64 script of the newest Visual Studio installation."""

    def __init__(self, arch: Arch, installations: Optional[List[Path]] = None):
        self.arch = arch
        self._installations = installations

    @property
    def script_name(self) -> str:
        return f"vcvars{self.arch.bits}.bat"

    def script(self) -> Path:
        installations = self._installations
        if installations is None:
            installations = find_visual_studio_installations()

        candidates = [path / VCVARS_DIR / self.script_name for path in installations]
        candidates.append(DEFAULT_VISUAL_STUDIO / VCVARS_DIR / self.script_name)

        for candidate in candidates:
            if candidate.is_file():
                return candidate

        raise DeveloperEnvironmentError(
            f"Could not find {self.script_name}, is Visual Studio with the "
            "C++ build tools installed? Set `visual_studio` in the Package "
            "table to point at a vcvars script."
        )

    def __repr__(self) -> str:
        return f"VisualStudioEnvironment({self.arch.name})"


def find_visual_studio_installations(
    vswhere_path: Path = VSWHERE_PATH,
) -> List[Path]:
    """
    Use vswhere to find Visual Studio installations with the C++ tools.

    Args:
        vswhere_path: Path to vswhere.exe

    Returns:
        Installation roots, newest first; empty if vswhere is unavailable
    """
    if not vswhere_path.exists():
        logger.debug("vswhere not found, using default Visual Studio location")
        return []

    try:
        result = subprocess.run(
            [
                str(vswhere_path),
                "-products",
                "*",
                "-requires",
                "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
                "-sort",
                "-property",
                "installationPath",
            ],
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"vswhere search failed: {e}")
        return []

    if result.returncode != 0:
        logger.debug(f"vswhere returned {result.returncode}")
        return []

    installations = []
    for line in result.stdout.splitlines():
        line = line.strip()
        if line:
            logger.debug(f"Found Visual Studio installation: {line}")
            installations.append(Path(line))
    return installations


def select_developer_environment(
    arch: Arch, override: Optional[str] = None
) -> DeveloperEnvironment:
    """
    Pick the developer environment for a unit.

    Args:
        arch: Target architecture of the unit
        override: Explicit script path from the build script, if any
    """
    if override:
        return CustomDeveloperEnvironment(override)
    return VisualStudioEnvironment(arch)


def parse_environment(output: str) -> Dict[str, str]:
    """
    Parse the output of cmd.exe's `set` command.

    Lines without '=' (such as vcvars banners) are ignored.
    """
    env = {}
    for line in output.splitlines():
        name, sep, value = line.partition("=")
        if sep and name and not name.startswith(" "):
            env[name] = value
    return env


def lookup_env(env: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive environment lookup, as Windows resolves names."""
    for key, value in env.items():
        if key.upper() == name.upper():
            return value
    return None


__all__ = [
    "DeveloperEnvironment",
    "CustomDeveloperEnvironment",
    "VisualStudioEnvironment",
    "find_visual_studio_installations",
    "select_developer_environment",
    "parse_environment",
    "lookup_env",
]
