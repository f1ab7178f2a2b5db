"""Build planning and output layout for Divina."""

from divina.build.planner import (
    Source,
    BuildUnit,
    BuildPlan,
    BuildPlanner,
    plan,
)
from divina.build.layout import DEFAULT_OUTPUT_DIR, OutputLayout

__all__ = [
    "Source",
    "BuildUnit",
    "BuildPlan",
    "BuildPlanner",
    "plan",
    "DEFAULT_OUTPUT_DIR",
    "OutputLayout",
]
