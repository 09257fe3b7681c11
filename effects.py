# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Ability effect variants and the reducer that folds them.

An ability is a bundle of effects drawn from a closed set of four variants.
The at-bat pipeline never calls methods on an effect; it folds an effect
list left-to-right into an ``EffectTotals`` record and reads the totals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from functools import reduce
from typing import Iterable, NamedTuple, Optional, Union

from models import Archetype
from outcomes import OutcomeKind


class Duration(str, Enum):
    AT_BAT = "at_bat"
    INNING = "inning"
    GAME = "game"


# ---------------------------------------------------------------------------
# Additive delta records
# ---------------------------------------------------------------------------

BATTER_STAT_NAMES = ("power", "contact", "glove", "speed")
PITCHER_STAT_NAMES = ("velocity", "control", "break_")


@dataclass(frozen=True)
class StatDeltas:
    power: float = 0
    contact: float = 0
    glove: float = 0
    speed: float = 0
    velocity: float = 0
    control: float = 0
    break_: float = 0

    def __add__(self, other: StatDeltas) -> StatDeltas:
        return StatDeltas(**{f.name: getattr(self, f.name) + getattr(other, f.name)
                             for f in fields(self)})

    def is_zero(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))


@dataclass(frozen=True)
class OutcomeDeltas:
    """Percentage-point shifts to the strikeout, walk, home run and hit axes."""
    strikeout: float = 0
    walk: float = 0
    homerun: float = 0
    hit: float = 0

    def __add__(self, other: OutcomeDeltas) -> OutcomeDeltas:
        return OutcomeDeltas(
            strikeout=self.strikeout + other.strikeout,
            walk=self.walk + other.walk,
            homerun=self.homerun + other.homerun,
            hit=self.hit + other.hit,
        )


NO_STAT_DELTAS = StatDeltas()
NO_OUTCOME_DELTAS = OutcomeDeltas()


# ---------------------------------------------------------------------------
# Effect variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatModifier:
    power: float = 0
    contact: float = 0
    glove: float = 0
    speed: float = 0
    velocity: float = 0
    control: float = 0
    break_: float = 0
    negate_fatigue: bool = False
    duration: Duration = Duration.AT_BAT

    def deltas(self) -> StatDeltas:
        return StatDeltas(
            power=self.power, contact=self.contact, glove=self.glove,
            speed=self.speed, velocity=self.velocity, control=self.control,
            break_=self.break_,
        )


@dataclass(frozen=True)
class OutcomeModifier:
    strikeout_bonus: float = 0
    walk_bonus: float = 0
    homerun_bonus: float = 0
    hit_bonus: float = 0


@dataclass(frozen=True)
class GuaranteedOutcome:
    """Replaces normal resolution with a weighted outcome list.

    ``outcomes`` holds (result, chance) pairs summing to 100. Results are
    outcome kinds plus "out" (groundout) and "bunt_attempt" (single). When
    the list is empty the single ``outcome`` succeeds with ``success_chance``.
    """
    outcome: Optional[str] = None
    success_chance: float = 100
    outcomes: tuple[tuple[str, float], ...] = ()


@dataclass(frozen=True)
class DefensiveBoost:
    glove_bonus: float = 0


AbilityEffect = Union[StatModifier, OutcomeModifier, GuaranteedOutcome, DefensiveBoost]


@dataclass(frozen=True)
class SynergyEnhancement:
    """Bonus effects granted while a team synergy is active at a tier."""
    synergy_id: str
    tier: str
    effects: tuple[AbilityEffect, ...]


@dataclass(frozen=True)
class Ability:
    id: str
    name: str
    description: str
    effects: tuple[AbilityEffect, ...]
    archetype: Optional[Archetype] = None
    spirit_cost: int = 0
    slot_cost: int = 1
    required_level: int = 1
    prerequisite_id: Optional[str] = None
    conflicts_with: tuple[str, ...] = ()
    is_passive: bool = False
    allow_cross_archetype: bool = False
    max_rank: int = 3
    synergy_enhancement: Optional[SynergyEnhancement] = None
    flavor_text: str = ""


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EffectTotals:
    stats: StatDeltas = NO_STAT_DELTAS
    outcomes: OutcomeDeltas = NO_OUTCOME_DELTAS
    glove_bonus: float = 0
    negate_fatigue: bool = False
    guaranteed: Optional[GuaranteedOutcome] = None


NO_EFFECTS = EffectTotals()


def _apply_effect(totals: EffectTotals, effect: AbilityEffect) -> EffectTotals:
    if isinstance(effect, StatModifier):
        return replace(
            totals,
            stats=totals.stats + effect.deltas(),
            negate_fatigue=totals.negate_fatigue or effect.negate_fatigue,
        )
    if isinstance(effect, OutcomeModifier):
        return replace(totals, outcomes=totals.outcomes + OutcomeDeltas(
            strikeout=effect.strikeout_bonus,
            walk=effect.walk_bonus,
            homerun=effect.homerun_bonus,
            hit=effect.hit_bonus,
        ))
    if isinstance(effect, GuaranteedOutcome):
        # first guaranteed outcome wins
        if totals.guaranteed is not None:
            return totals
        return replace(totals, guaranteed=effect)
    if isinstance(effect, DefensiveBoost):
        return replace(totals, glove_bonus=totals.glove_bonus + effect.glove_bonus)
    raise TypeError(f"Unknown ability effect: {effect!r}")


def fold_effects(effects: Iterable[AbilityEffect],
                 initial: EffectTotals = NO_EFFECTS) -> EffectTotals:
    return reduce(_apply_effect, effects, initial)


def rank_multiplier(rank: int) -> float:
    return 1.25 ** (rank - 1)


def scale_effects(effects: Iterable[AbilityEffect], rank: int) -> tuple[AbilityEffect, ...]:
    """Scale numeric effect fields by 1.25 per rank above 1, floored.

    Success chances and outcome weights are left alone.
    """
    if rank <= 1:
        return tuple(effects)
    mult = rank_multiplier(rank)
    scaled = []
    for effect in effects:
        if isinstance(effect, GuaranteedOutcome):
            scaled.append(effect)
            continue
        updates = {}
        for f in fields(effect):
            value = getattr(effect, f.name)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                updates[f.name] = math.floor(value * mult)
        scaled.append(replace(effect, **updates))
    return tuple(scaled)


# ---------------------------------------------------------------------------
# Guaranteed outcomes
# ---------------------------------------------------------------------------

_RESULT_ALIASES = {"out": OutcomeKind.GROUNDOUT, "bunt_attempt": OutcomeKind.SINGLE}


def _to_outcome(result: str) -> OutcomeKind:
    return _RESULT_ALIASES.get(result) or OutcomeKind(result)


def guaranteed_power(guaranteed: GuaranteedOutcome) -> float:
    """The clash strength of a guaranteed outcome: its best single chance."""
    if guaranteed.outcomes:
        return max(chance for _, chance in guaranteed.outcomes)
    return guaranteed.success_chance


def resolve_multi_outcome(guaranteed: GuaranteedOutcome, roll: float,
                          is_batter_ability: bool = True) -> OutcomeKind:
    """Map a 0-100 roll onto the guaranteed outcome's distribution."""
    if guaranteed.outcomes:
        cumulative = 0.0
        for result, chance in guaranteed.outcomes:
            cumulative += chance
            if roll <= cumulative:
                return _to_outcome(result)
        return OutcomeKind.GROUNDOUT

    if guaranteed.outcome and roll <= guaranteed.success_chance:
        return _to_outcome(guaranteed.outcome)
    return OutcomeKind.STRIKEOUT if is_batter_ability else OutcomeKind.WALK


def _total_eclipse(roll: float) -> OutcomeKind:
    if roll <= 80:
        return OutcomeKind.STRIKEOUT
    if roll <= 95:
        return OutcomeKind.WALK
    return OutcomeKind.SINGLE


class GuaranteedResolution(NamedTuple):
    outcome: OutcomeKind
    winner: str  # "batter" or "pitcher"
    rolls: tuple[float, ...]


def resolve_guaranteed(batter: Optional[GuaranteedOutcome],
                       pitcher: Optional[GuaranteedOutcome], rng,
                       pitcher_ability_id: Optional[str] = None) -> GuaranteedResolution | None:
    """Resolve guaranteed outcomes, including a clash when both sides have one.

    In a clash each side draws against its power and the batter wins ties.
    """
    if batter is None and pitcher is None:
        return None

    rolls: list[float] = []
    if batter is not None and pitcher is not None:
        batter_roll = rng.random() * guaranteed_power(batter)
        pitcher_roll = rng.random() * guaranteed_power(pitcher)
        rolls += [batter_roll, pitcher_roll]
        winner = "batter" if batter_roll >= pitcher_roll else "pitcher"
    else:
        winner = "batter" if batter is not None else "pitcher"

    roll = rng.random() * 100
    rolls.append(roll)
    if winner == "batter":
        outcome = resolve_multi_outcome(batter, roll, is_batter_ability=True)
    elif pitcher_ability_id == "total_eclipse":
        outcome = _total_eclipse(roll)
    else:
        outcome = resolve_multi_outcome(pitcher, roll, is_batter_ability=False)
    return GuaranteedResolution(outcome, winner, tuple(rolls))


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

_STAT_LABELS = (
    ("power", "Power"), ("contact", "Contact"), ("glove", "Glove"),
    ("speed", "Speed"), ("velocity", "Velocity"), ("control", "Control"),
    ("break_", "Break"),
)


def _signed(value: float) -> str:
    return f"+{value:g}" if value > 0 else f"{value:g}"


def describe_effects(effects: Iterable[AbilityEffect]) -> list[str]:
    """Human-readable lines for a list of effects."""
    lines: list[str] = []
    for effect in effects:
        if isinstance(effect, StatModifier):
            for attr, label in _STAT_LABELS:
                value = getattr(effect, attr)
                if value:
                    lines.append(f"{_signed(value)} {label}")
            if effect.negate_fatigue:
                lines.append("Removes fatigue")
            if effect.duration != Duration.AT_BAT:
                lines.append(f"Lasts the {effect.duration.value.replace('_', '-')}")
        elif isinstance(effect, OutcomeModifier):
            if effect.homerun_bonus:
                lines.append(f"{_signed(effect.homerun_bonus)}% HR chance")
            if effect.strikeout_bonus:
                lines.append(f"{_signed(effect.strikeout_bonus)}% strikeout chance")
            if effect.walk_bonus:
                lines.append(f"{_signed(effect.walk_bonus)}% walk chance")
            if effect.hit_bonus:
                lines.append(f"{_signed(effect.hit_bonus)}% hit quality")
        elif isinstance(effect, GuaranteedOutcome):
            if effect.outcomes:
                parts = ", ".join(f"{chance:g}% {result}" for result, chance in effect.outcomes)
                lines.append(f"Forces: {parts}")
            else:
                lines.append(f"{effect.success_chance:g}% chance: {effect.outcome}")
        elif isinstance(effect, DefensiveBoost):
            lines.append(f"{_signed(effect.glove_bonus)} team defense")
    return lines
