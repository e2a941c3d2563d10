"""Experience and stat growth curves.

Import these helpers anywhere level-up or monster scaling math is needed so
the rounding rule lives in one place. Halves always round up
(``round_half_up(2.5) == 3``), unlike Python's ``round`` which rounds to even.
"""

import math

HP_GROWTH = 1.12
HP_FLAT_BONUS = 6
XP_GROWTH = 1.25
XP_FLAT_BONUS = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def next_hp_max(hp_max: int) -> int:
    """Return the hit point cap after one level-up."""
    return round_half_up(hp_max * HP_GROWTH + HP_FLAT_BONUS)


def next_xp_max(xp_max: int) -> int:
    """Return the XP threshold for the following level.

    Example: the starting threshold of 15 becomes ``round(15 * 1.25 + 10) == 29``.
    """
    return round_half_up(xp_max * XP_GROWTH + XP_FLAT_BONUS)


__all__ = ["round_half_up", "next_hp_max", "next_xp_max"]
