# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""3x3 pitch-zone mini-game.

Batting: the player predicts the cell the pitch lands in. Pitching: the
player aims at a cell and low-control pitchers may miss by one cell. Each
resolved read yields a ``ZoneModifier`` that the at-bat pipeline adds to its
strikeout, hit, home run and walk axes.

Every cell also has fixed physical tendencies (high pitches strike out more
but fly farther, low pitches keep the ball on the ground). Those apply to the
landing cell on top of the read result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from effects import OutcomeDeltas
from models import Player
from stats import derived_stats


class ZoneType(str, Enum):
    HOT = "hot"
    NEUTRAL = "neutral"
    COLD = "cold"


class ZoneCell(NamedTuple):
    row: int
    col: int

    def is_corner(self) -> bool:
        return self.row in (0, 2) and self.col in (0, 2)


ZoneMap = tuple[tuple[ZoneType, ZoneType, ZoneType], ...]


@dataclass(frozen=True)
class ZoneModifier:
    strikeout_bonus: float = 0
    hit_bonus: float = 0
    homerun_bonus: float = 0
    walk_bonus: float = 0
    is_perfect: bool = False
    landing: Optional[ZoneCell] = None

    def deltas(self) -> OutcomeDeltas:
        return OutcomeDeltas(
            strikeout=self.strikeout_bonus, walk=self.walk_bonus,
            homerun=self.homerun_bonus, hit=self.hit_bonus,
        )


# (strikeout, homerun, walk) per cell, row 0 high, col 0 inside
ZONE_PHYSICS = (
    ((3, 6, 1), (1, 4, 1), (3, 2, 2)),
    ((1, 2, 0), (-1, 0, 0), (1, -2, 1)),
    ((2, -2, 1), (0, -4, 1), (2, -6, 2)),
)

ADJACENT_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))

PERFECT_CONTROL = 70


def _with_physics(strikeout: float, hit: float, homerun: float, walk: float,
                  is_perfect: bool, landing: ZoneCell) -> ZoneModifier:
    k, hr, bb = ZONE_PHYSICS[landing.row][landing.col]
    return ZoneModifier(
        strikeout_bonus=strikeout + k,
        hit_bonus=hit,
        homerun_bonus=homerun + hr,
        walk_bonus=walk + bb,
        is_perfect=is_perfect,
        landing=landing,
    )


# ---------------------------------------------------------------------------
# Zone maps and tendencies
# ---------------------------------------------------------------------------

def derive_zone_map(batter: Player) -> ZoneMap:
    """Hot and cold cells from the batter's power and contact.

    The result is fixed for a given player, so the same cells show every
    at-bat.
    """
    stats = derived_stats(batter)
    power, contact = stats.power, stats.contact
    zones = [[ZoneType.NEUTRAL] * 3 for _ in range(3)]

    # pull power up high
    if power > 65:
        zones[0][0] = zones[0][1] = ZoneType.HOT
    if power < 40:
        zones[0][0] = zones[0][1] = ZoneType.COLD
    if contact > 65:
        zones[1][1] = zones[1][2] = ZoneType.HOT
    if contact < 40:
        zones[0][2] = zones[2][2] = ZoneType.COLD
    if power > 60 and contact > 60:
        zones[1][1] = ZoneType.HOT

    return tuple(tuple(row) for row in zones)


def derive_pitch_tendency(pitcher: Player) -> tuple[ZoneCell, ZoneCell]:
    """The two cells a pitcher tends to work, shown as a hint to batters."""
    stats = derived_stats(pitcher)
    if stats.velocity > 65:
        return ZoneCell(0, 0), ZoneCell(0, 1)
    if stats.break_ > 65:
        return ZoneCell(2, 1), ZoneCell(2, 2)
    if stats.control > 65:
        return ZoneCell(0, 2), ZoneCell(2, 0)
    return ZoneCell(1, 0), ZoneCell(1, 1)


# ---------------------------------------------------------------------------
# Landing
# ---------------------------------------------------------------------------

def miss_probability(control: float) -> float:
    if control >= PERFECT_CONTROL:
        return 0.0
    return (PERFECT_CONTROL - control) / 100


def resolve_pitch_landing(aim: ZoneCell, pitcher: Player, rng) -> ZoneCell:
    """Where the pitch actually lands.

    Control of 70 or more always hits the aim without drawing. Otherwise one
    draw decides the miss and a second picks the direction, clamped to the
    grid.
    """
    control = derived_stats(pitcher).control
    if control >= PERFECT_CONTROL:
        return aim
    if rng.random() > miss_probability(control):
        return aim
    d_row, d_col = ADJACENT_OFFSETS[math.floor(rng.random() * len(ADJACENT_OFFSETS))]
    return ZoneCell(
        max(0, min(2, aim.row + d_row)),
        max(0, min(2, aim.col + d_col)),
    )


def execution_note(pitcher: Player) -> str | None:
    control = derived_stats(pitcher).control
    if control >= PERFECT_CONTROL:
        return None
    accuracy = round(control + (PERFECT_CONTROL - control) / 2)
    return f"{accuracy}% accuracy, may miss a zone"


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------

def calc_batting_zone_modifier(read: ZoneCell, landing: ZoneCell,
                               zone_map: ZoneMap) -> ZoneModifier:
    """Reward a correct read. Reading into your own cold cell is never perfect."""
    correct = read == landing
    landing_type = zone_map[landing.row][landing.col]
    read_type = zone_map[read.row][read.col]

    if correct and read_type != ZoneType.COLD:
        return _with_physics(-6, 10, 8, 0, True, landing)
    if correct:
        hot = 4 if landing_type == ZoneType.HOT else 0
        return _with_physics(-3, 8 + hot, hot, 0, False, landing)
    return _with_physics(4, -5, -3, 0, False, landing)


def calc_pitching_zone_modifier(aim: ZoneCell, landing: ZoneCell,
                                zone_map: ZoneMap) -> ZoneModifier:
    """Reward pitches that land in the batter's cold cells, most of all corners."""
    landing_type = zone_map[landing.row][landing.col]
    if landing_type == ZoneType.COLD and landing.is_corner():
        return _with_physics(8, -8, -6, -2, True, landing)
    if landing_type == ZoneType.COLD:
        return _with_physics(5, -5, -4, 0, False, landing)
    if landing_type == ZoneType.HOT:
        return _with_physics(-4, 5, 6, 0, False, landing)
    return _with_physics(0, 0, 0, 0, False, landing)
