"""beacon_map.invariants"""

from .rotation_group import RotationGroup, build_compose_table

__all__ = ["RotationGroup", "build_compose_table"]
