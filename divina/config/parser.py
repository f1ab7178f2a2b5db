"""YAML build script parser for Divina.

This module resolves a divina.yaml build script into a typed configuration
tree: either a single PackageConfig or a WorkspaceConfig whose members are
resolved recursively from their own build scripts.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from divina.core.exceptions import (
    AmbiguousRootTableError,
    ConfigNotFoundError,
    ConfigReadError,
    ConfigSyntaxError,
    CycleDetectedError,
    InvalidEnumValueError,
    InvalidFieldTypeError,
    MissingRequiredFieldError,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "divina.yaml"
DEFAULT_COMPILER = "yasm"

_MISSING = object()


class BuildScriptLoader(yaml.SafeLoader):
    """
    SafeLoader that never reads plain scalars as floats.

    Versions such as `0.10` or `1.10` stay text instead of collapsing to
    0.1 and 1.1.
    """


BuildScriptLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:float"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class ConfigType(Enum):
    """Root table kind of a build script."""

    PACKAGE = "Package"
    WORKSPACE = "Workspace"


class PackageType(Enum):
    """Kind of artifact a package produces."""

    BIN = 1
    LIB = 2


class Arch(Enum):
    """Target CPU architecture of a package."""

    X86 = 1
    X64 = 2

    @property
    def bits(self) -> str:
        """Pointer width as used in tool names ('32' or '64')."""
        return "32" if self is Arch.X86 else "64"


# Symbolic names a build script may use instead of the integer codes
ENUM_NAMES: Dict[type, Dict[str, Enum]] = {
    PackageType: {"bin": PackageType.BIN, "lib": PackageType.LIB},
    Arch: {"x86": Arch.X86, "x64": Arch.X64},
}


@dataclass(frozen=True)
class PackageConfig:
    """A single buildable set of assembly sources."""

    name: str
    version: str
    minimum_divina_version: str
    package_type: PackageType
    arch: Arch
    description: Optional[str] = None
    license: Optional[str] = None
    compile_options: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()
    compiler: str = DEFAULT_COMPILER
    visual_studio: Optional[str] = None  # developer environment override
    path: Optional[Path] = None  # originating directory

    def __post_init__(self):
        object.__setattr__(self, "compile_options", tuple(self.compile_options))
        object.__setattr__(self, "sources", tuple(self.sources))

    @property
    def config_type(self) -> ConfigType:
        return ConfigType.PACKAGE

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the build script representation."""
        data: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "minimum_divina_version": self.minimum_divina_version,
            "type": self.package_type.name.capitalize(),
            "arch": self.arch.name.lower(),
            "compiler": self.compiler,
            "sources": list(self.sources),
        }
        if self.description is not None:
            data["description"] = self.description
        if self.license is not None:
            data["license"] = self.license
        if self.compile_options:
            data["compile_options"] = list(self.compile_options)
        if self.visual_studio is not None:
            data["visual_studio"] = self.visual_studio
        if self.path is not None:
            data["path"] = str(self.path)
        return data


@dataclass(frozen=True)
class WorkspaceConfig:
    """A set of member packages built into a shared output tree."""

    members: Tuple[PackageConfig, ...] = ()
    path: Optional[Path] = None

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))

    @property
    def config_type(self) -> ConfigType:
        return ConfigType.WORKSPACE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a mapping with every member fully resolved."""
        return {"members": [member.to_dict() for member in self.members]}


Config = Union[PackageConfig, WorkspaceConfig]


def resolve_config(script_path: Path) -> Config:
    """
    Resolve a divina.yaml build script into a configuration tree.

    Args:
        script_path: Path to the build script

    Returns:
        PackageConfig or WorkspaceConfig

    Raises:
        ConfigError: If the script is missing, unreadable, malformed, or a
            workspace member chain loops back onto itself
    """
    return _resolve(Path(script_path), [])


def _resolve(script_path: Path, chain: List[Path]) -> Config:
    key = script_path.resolve()
    if key in chain:
        raise CycleDetectedError(chain[chain.index(key):] + [key])
    chain = chain + [key]

    data = load_build_script(script_path)

    roots = [table for table in ConfigType if data.get(table.value) is not None]
    if len(roots) != 1:
        raise AmbiguousRootTableError(script_path, [t.value for t in roots])

    root = roots[0]
    table = data[root.value]
    if not isinstance(table, dict):
        raise InvalidFieldTypeError(root.value, "a table", table)

    base_dir = script_path.parent

    if root is ConfigType.PACKAGE:
        return _parse_package(table, base_dir)

    return _parse_workspace(table, base_dir, chain)


def load_build_script(script_path: Path) -> Dict[str, Any]:
    """
    Load a build script as a raw mapping.

    An empty document yields an empty mapping.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigReadError: If the file cannot be read or decoded
        ConfigSyntaxError: If the YAML is invalid or not a mapping
    """
    script_path = Path(script_path)
    if not script_path.exists():
        raise ConfigNotFoundError(script_path)

    logger.debug(f"Loading build script from {script_path}")

    try:
        text = script_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(script_path, str(e)) from e

    try:
        data = yaml.load(text, Loader=BuildScriptLoader)
    except yaml.YAMLError as e:
        raise ConfigSyntaxError(script_path, f"Invalid YAML syntax: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigSyntaxError(
            script_path,
            f"top level must be a mapping, got {type(data).__name__}",
        )

    return data


def get_field(
    table: Dict[str, Any],
    table_name: str,
    key: str,
    expected: type,
    required: bool = False,
    default: Any = None,
) -> Any:
    """
    Extract a field from a root table.

    Args:
        table: Root table mapping
        table_name: Name of the table, used in error messages
        key: Field name
        expected: str, list (of strings) or an Enum subclass
        required: Raise if the field is absent
        default: Value returned for an absent optional field

    Returns:
        The converted value, or default when absent and optional

    Raises:
        MissingRequiredFieldError: Required field absent or null
        InvalidFieldTypeError: Value has the wrong type
        InvalidEnumValueError: Enum field holds an unknown code
    """
    label = f"{table_name}.{key}"
    value = table.get(key, _MISSING)

    if value is _MISSING or value is None:
        if required:
            raise MissingRequiredFieldError(label)
        return list(default) if isinstance(default, list) else default

    if isinstance(expected, type) and issubclass(expected, Enum):
        return decode_enum(expected, label, value)

    if expected is str:
        return _as_string(label, value)

    if expected is list:
        if not isinstance(value, list):
            raise InvalidFieldTypeError(label, "a list of strings", value)
        return [_as_string(f"{label}[{i}]", item) for i, item in enumerate(value)]

    raise TypeError(f"Unsupported field type for {label}: {expected!r}")


def _as_string(label: str, value: Any) -> str:
    if isinstance(value, bool):
        raise InvalidFieldTypeError(label, "a string", value)
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        raise InvalidFieldTypeError(label, "a quoted string", value)
    raise InvalidFieldTypeError(label, "a string", value)


def decode_enum(enum_cls: type, label: str, value: Any) -> Enum:
    """
    Decode an enum-coded field.

    Accepts the integer code (e.g. 1, 2) or the symbolic name exposed to
    build scripts (e.g. 'Bin', 'x64', case-insensitive).

    Raises:
        InvalidEnumValueError: Value is not a known code or name
    """
    names = ENUM_NAMES.get(enum_cls, {})
    allowed = [str(member.value) for member in enum_cls] + sorted(names)

    if isinstance(value, bool):
        raise InvalidEnumValueError(label, value, allowed)

    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            raise InvalidEnumValueError(label, value, allowed) from None

    if isinstance(value, str) and value.strip().lower() in names:
        return names[value.strip().lower()]

    raise InvalidEnumValueError(label, value, allowed)


_PACKAGE_FIELDS = {
    "name",
    "version",
    "description",
    "license",
    "compile_options",
    "minimum_divina_version",
    "sources",
    "type",
    "arch",
    "compiler",
    "visual_studio",
}


def _parse_package(table: Dict[str, Any], path: Optional[Path]) -> PackageConfig:
    """Parse the Package root table."""
    name = "Package"

    unknown = set(table) - _PACKAGE_FIELDS
    if unknown:
        logger.debug(f"Ignoring unknown Package fields: {', '.join(sorted(unknown))}")

    return PackageConfig(
        name=get_field(table, name, "name", str, required=True),
        version=get_field(table, name, "version", str, required=True),
        description=get_field(table, name, "description", str),
        license=get_field(table, name, "license", str),
        compile_options=get_field(table, name, "compile_options", list, default=[]),
        minimum_divina_version=get_field(
            table, name, "minimum_divina_version", str, required=True
        ),
        sources=get_field(table, name, "sources", list, default=[]),
        package_type=get_field(table, name, "type", PackageType, required=True),
        arch=get_field(table, name, "arch", Arch, required=True),
        compiler=get_field(table, name, "compiler", str, default=DEFAULT_COMPILER),
        visual_studio=get_field(table, name, "visual_studio", str),
        path=path,
    )


def _parse_workspace(
    table: Dict[str, Any], base_dir: Path, chain: Sequence[Path]
) -> WorkspaceConfig:
    """Parse the Workspace root table, resolving every member in order."""
    member_paths = get_field(table, "Workspace", "members", list, required=True)

    members: List[PackageConfig] = []
    for member in member_paths:
        member_dir = base_dir / member
        logger.debug(f"Resolving workspace member '{member}' at {member_dir}")

        resolved = _resolve(member_dir / CONFIG_FILENAME, list(chain))

        if isinstance(resolved, WorkspaceConfig):
            # Nested workspace members are already stamped with their paths
            members.extend(resolved.members)
        else:
            members.append(replace(resolved, path=member_dir))

    return WorkspaceConfig(members=members, path=base_dir)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_COMPILER",
    "ConfigType",
    "PackageType",
    "Arch",
    "PackageConfig",
    "WorkspaceConfig",
    "Config",
    "resolve_config",
    "BuildScriptLoader",
    "load_build_script",
    "get_field",
    "decode_enum",
]
