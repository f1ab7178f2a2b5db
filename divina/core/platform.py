"""
Host platform detection for Divina.

The toolchain driver is selected at runtime from the detected host: Windows
hosts use NASM/YASM win32/win64 objects and the MSVC linker, every other
supported host uses ELF objects and the system `ld`.

Usage:
    from divina.core.platform import detect_platform

    info = detect_platform()
    print(f"Building on {info.platform_string()} ({info.family})")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional


@dataclass
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', 'freebsd', ...)
        arch: CPU architecture ('x64', 'x86', 'arm64', 'arm')
    """

    os: str
    arch: str

    @property
    def family(self) -> str:
        """Toolchain family: 'windows' or 'unix'."""
        return "windows" if self.os == "windows" else "unix"

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'windows-x86').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos', or the lowercased
        value of platform.system() for other Unix-like systems

    Raises:
        RuntimeError: If the OS cannot be determined
    """
    system = platform.system().lower()

    if system == "windows" or system.startswith(("cygwin", "msys")):
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    elif system:
        return system
    else:
        raise RuntimeError("Unable to determine the host operating system")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def is_supported_platform(info: Optional[PlatformInfo] = None) -> bool:
    """
    Check if Divina can drive a toolchain on the given platform.

    Args:
        info: PlatformInfo to check. If None, detects current platform.
    """
    if info is None:
        info = detect_platform()

    return info.os in ("windows", "linux", "macos", "freebsd", "openbsd", "netbsd")


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing when platform functions are patched.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "clear_platform_cache",
]
