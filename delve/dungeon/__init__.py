"""Public dungeon package interface.

Tile constants, generation config and the floor pipeline entry point.
"""

from .config import DungeonConfig, KEY_ECONOMIES  # noqa: F401
from .doors import DoorPlacement, LockPlan, place_locks_and_keys, verify_solvable  # noqa: F401
from .pipeline import Floor, generate_floor  # noqa: F401
from .rng import fixed_seeds, make_rng, mint_seed  # noqa: F401
from .tiles import (  # noqa: F401
    FLOOR,
    KEY,
    LOCKED_DOOR,
    SECRET_DOOR,
    STAIRS_DOWN,
    TRAP_HIDDEN,
    TRAP_TRIGGERED,
    VOID,
    WALL,
)

__all__ = [
    "DungeonConfig",
    "KEY_ECONOMIES",
    "DoorPlacement",
    "LockPlan",
    "place_locks_and_keys",
    "verify_solvable",
    "Floor",
    "generate_floor",
    "fixed_seeds",
    "make_rng",
    "mint_seed",
    "VOID",
    "FLOOR",
    "WALL",
    "LOCKED_DOOR",
    "SECRET_DOOR",
    "TRAP_HIDDEN",
    "TRAP_TRIGGERED",
    "STAIRS_DOWN",
    "KEY",
]
