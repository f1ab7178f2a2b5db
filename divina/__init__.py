"""
Divina - a minimal build tool for assembly language projects.

A `divina.yaml` build script describes either a single Package or a Workspace
of member packages. Divina resolves it, plans one build unit per package and
drives the assembler and linker for the host platform.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
