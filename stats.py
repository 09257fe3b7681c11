# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Overall ratings, derived stats and pitcher fatigue."""

from __future__ import annotations

import math
from enum import Enum

from config import FatigueConfig
from effects import NO_STAT_DELTAS, StatDeltas, StatModifier, fold_effects
from models import BatterStats, Player, PitcherStats, clamp_stat
from techniques import ARCHETYPE_BASE_STATS, get_technique


# ---------------------------------------------------------------------------
# Overall rating
# ---------------------------------------------------------------------------

class Tier(str, Enum):
    POOR = "POOR"
    AVERAGE = "AVERAGE"
    SOLID = "SOLID"
    GOOD = "GOOD"
    GREAT = "GREAT"
    ELITE = "ELITE"


# (minimum overall, tier) from the top down
TIER_THRESHOLDS = (
    (87, Tier.ELITE),
    (75, Tier.GREAT),
    (60, Tier.GOOD),
    (45, Tier.SOLID),
    (30, Tier.AVERAGE),
)


def batter_overall(stats: BatterStats) -> int:
    return math.floor(0.3 * stats.power + 0.3 * stats.contact
                      + 0.2 * stats.glove + 0.2 * stats.speed)


def pitcher_overall(stats: PitcherStats) -> int:
    return math.floor(0.35 * stats.velocity + 0.35 * stats.control + 0.3 * stats.break_)


def overall_rating(stats: BatterStats | PitcherStats) -> int:
    if stats.kind == "batter":
        return batter_overall(stats)
    return pitcher_overall(stats)


def rating_tier(overall: int) -> Tier:
    for minimum, tier in TIER_THRESHOLDS:
        if overall >= minimum:
            return tier
    return Tier.POOR


# ---------------------------------------------------------------------------
# Derived stats
# ---------------------------------------------------------------------------

def equipment_bonus(player: Player) -> StatDeltas:
    """Sum of stat bonuses over every equipped item."""
    total = NO_STAT_DELTAS
    for item in player.equipment.values():
        s = item.stats
        total = total + StatDeltas(
            power=s.power, contact=s.contact, glove=s.glove, speed=s.speed,
            velocity=s.velocity, control=s.control, break_=s.break_,
        )
    return total


def passive_bonus(player: Player) -> StatDeltas:
    """Permanent stat bonus from passive techniques, scaled by rank."""
    total = NO_STAT_DELTAS
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        if ability is None or not ability.is_passive:
            continue
        mult = 1 + (owned.rank - 1) * 0.25
        for effect in ability.effects:
            if isinstance(effect, StatModifier):
                d = effect.deltas()
                total = total + StatDeltas(
                    power=d.power * mult, contact=d.contact * mult,
                    glove=d.glove * mult, speed=d.speed * mult,
                    velocity=d.velocity * mult, control=d.control * mult,
                    break_=d.break_ * mult,
                )
    return total


def passive_negates_fatigue(player: Player) -> bool:
    effects = []
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        if ability is not None and ability.is_passive:
            effects.extend(ability.effects)
    return fold_effects(effects).negate_fatigue


def base_stats(player: Player) -> BatterStats | PitcherStats:
    """Archetype base stats when the player has an archetype of the same
    role, otherwise the player's own stats."""
    if player.archetype is not None:
        base = ARCHETYPE_BASE_STATS[player.archetype]
        if base.kind == player.stats.kind:
            return base
    return player.stats


def derived_stats(player: Player) -> BatterStats | PitcherStats:
    """Base stats plus passive techniques plus equipment, clamped to [0, 100]."""
    base = base_stats(player)
    bonus = passive_bonus(player) + equipment_bonus(player)
    if base.kind == "batter":
        return BatterStats(
            power=clamp_stat(base.power + bonus.power),
            contact=clamp_stat(base.contact + bonus.contact),
            glove=clamp_stat(base.glove + bonus.glove),
            speed=clamp_stat(base.speed + bonus.speed),
        )
    return PitcherStats(
        velocity=clamp_stat(base.velocity + bonus.velocity),
        control=clamp_stat(base.control + bonus.control),
        break_=clamp_stat(base.break_ + bonus.break_),
    )


def player_overall(player: Player) -> int:
    return overall_rating(derived_stats(player))


# ---------------------------------------------------------------------------
# Pitcher fatigue
# ---------------------------------------------------------------------------

class FatigueLevel(str, Enum):
    FRESH = "fresh"
    TIRED = "tired"
    GASSED = "gassed"


def fatigue_multiplier(innings: float, config: FatigueConfig) -> float:
    return max(config.min_effectiveness, 1 - innings * config.effectiveness_loss_per_inning)


def fatigue_level(innings: int, extra: float, config: FatigueConfig) -> FatigueLevel:
    if innings >= config.gassed_innings or extra >= config.gassed_extra:
        return FatigueLevel.GASSED
    if innings < config.tired_innings and extra < config.tired_extra:
        return FatigueLevel.FRESH
    return FatigueLevel.TIRED
