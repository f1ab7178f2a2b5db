"""
Toolchain drivers for Divina.

This module provides:
- The ToolchainDriver interface (compile, link)
- The Unix driver (ELF objects, system ld)
- The Windows driver (win32/win64 objects, MSVC link.exe)
- Host-based driver selection
"""

import logging
from pathlib import Path
from typing import Optional, Union

from divina.build.layout import DEFAULT_OUTPUT_DIR
from divina.core.exceptions import UnsupportedPlatformError
from divina.core.platform import PlatformInfo, detect_platform, is_supported_platform
from divina.toolchain.base import ToolchainDriver
from divina.toolchain.unix import UnixToolchainDriver
from divina.toolchain.windows import WindowsToolchainDriver

logger = logging.getLogger(__name__)

_DRIVERS = {
    "unix": UnixToolchainDriver,
    "windows": WindowsToolchainDriver,
}


def get_toolchain_driver(
    output_root: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    platform_info: Optional[PlatformInfo] = None,
) -> ToolchainDriver:
    """
    Select the toolchain driver for the host platform.

    Args:
        output_root: Directory receiving objects and binaries
        platform_info: Platform to select for (detected when None)

    Raises:
        UnsupportedPlatformError: If no driver handles the platform
    """
    if platform_info is None:
        platform_info = detect_platform()

    if not is_supported_platform(platform_info):
        raise UnsupportedPlatformError(
            f"No toolchain driver for platform: {platform_info.platform_string()}"
        )

    driver_cls = _DRIVERS[platform_info.family]
    logger.debug(f"Using {driver_cls.name} toolchain driver for {platform_info}")
    return driver_cls(output_root)


__all__ = [
    "ToolchainDriver",
    "UnixToolchainDriver",
    "WindowsToolchainDriver",
    "get_toolchain_driver",
]
