# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Batter approaches and pitch strategies.

Approaches differ in risk profile, not just stat bumps. Power is high
variance, contact is low variance, and patient trades value now for a
tired pitcher later. Strategies mirror this on the mound.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from effects import OutcomeDeltas, StatDeltas


class BatterApproach(str, Enum):
    POWER = "power"
    CONTACT = "contact"
    PATIENT = "patient"


class PitchStrategy(str, Enum):
    CHALLENGE = "challenge"
    FINESSE = "finesse"
    PAINT = "paint"


@dataclass(frozen=True)
class TacticProfile:
    label: str
    description: str
    stats: StatDeltas
    outcomes: OutcomeDeltas
    fatigue_effect: float = 0.0  # extra fatigue applied to the opposing pitcher
    fatigue_cost: float = 0.0  # extra fatigue paid by the own pitcher


APPROACHES: dict[BatterApproach, TacticProfile] = {
    BatterApproach.POWER: TacticProfile(
        "Power", "Swing for the fences. Home run upside, but high strikeout risk.",
        StatDeltas(power=10, contact=-8),
        OutcomeDeltas(homerun=8, strikeout=5, hit=-3),
    ),
    BatterApproach.CONTACT: TacticProfile(
        "Contact", "Put the ball in play. Reliable singles, fewer big moments.",
        StatDeltas(contact=8, power=-6),
        OutcomeDeltas(strikeout=-5, homerun=-4, hit=3),
    ),
    BatterApproach.PATIENT: TacticProfile(
        "Patient", "Work the count. Wears down the pitcher for teammates behind you.",
        StatDeltas(contact=3, power=-6),
        OutcomeDeltas(walk=5, strikeout=-3, homerun=-6),
        fatigue_effect=0.15,
    ),
}

STRATEGIES: dict[PitchStrategy, TacticProfile] = {
    PitchStrategy.CHALLENGE: TacticProfile(
        "Challenge", "Bring the heat. Strikeout potential, but dangerous if they connect.",
        StatDeltas(velocity=8, control=-6),
        OutcomeDeltas(strikeout=4, homerun=4),
    ),
    PitchStrategy.FINESSE: TacticProfile(
        "Finesse", "Change speeds. Weak contact and fewer extra-base hits.",
        StatDeltas(break_=8, velocity=-6),
        OutcomeDeltas(hit=-5, strikeout=-3, homerun=-5),
    ),
    PitchStrategy.PAINT: TacticProfile(
        "Paint", "Nibble the corners. Elite control, but exhausting to sustain.",
        StatDeltas(control=8, velocity=-4),
        OutcomeDeltas(walk=-3, homerun=-4, strikeout=-1),
        fatigue_cost=0.2,
    ),
}


def adaptation_multiplier(consecutive: int, scale: Sequence[float]) -> float:
    """Multiplier for a tactic used ``consecutive`` times in a row.

    The default scale is flat, so repetition carries no penalty.
    """
    index = min(max(consecutive - 1, 0), len(scale) - 1)
    return scale[index]


def next_streak(previous, current, streak: int) -> int:
    """Consecutive-use counter after choosing ``current``."""
    if previous is not None and previous == current:
        return streak + 1
    return 1


def scaled_outcomes(profile: TacticProfile, multiplier: float) -> OutcomeDeltas:
    o = profile.outcomes
    return OutcomeDeltas(
        strikeout=o.strikeout * multiplier, walk=o.walk * multiplier,
        homerun=o.homerun * multiplier, hit=o.hit * multiplier,
    )
