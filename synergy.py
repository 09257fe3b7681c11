# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Lineup trait synergies.

Synergies are team-wide passive bonuses unlocked by trait counts in a
lineup. They are computed once at match start and recomputed whenever a
match is restored, never persisted.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from effects import (
    NO_OUTCOME_DELTAS,
    NO_STAT_DELTAS,
    AbilityEffect,
    Duration,
    OutcomeDeltas,
    OutcomeModifier,
    StatDeltas,
    StatModifier,
    fold_effects,
)
from models import Player, Trait

TIER_ORDER = ("bronze", "silver", "gold")
TIER_THRESHOLDS = {"bronze": 2, "silver": 3, "gold": 4}

_GAME = Duration.GAME


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SingleTraitSynergy:
    id: str
    name: str
    trait: Trait
    tiers: dict[str, tuple[AbilityEffect, ...]]


@dataclass(frozen=True)
class ComboSynergy:
    id: str
    name: str
    requirements: tuple[tuple[Trait, int], ...]
    effects: tuple[AbilityEffect, ...]


SINGLE_TRAIT_SYNERGIES = (
    SingleTraitSynergy("murderers_row", "Murderers' Row", Trait.MUSCLE, {
        "bronze": (StatModifier(power=3, duration=_GAME),),
        "silver": (StatModifier(power=5, duration=_GAME),),
        "gold": (StatModifier(power=8, duration=_GAME),),
    }),
    SingleTraitSynergy("ironclad", "Ironclad", Trait.GRIT, {
        "bronze": (OutcomeModifier(strikeout_bonus=-2),),
        "silver": (OutcomeModifier(strikeout_bonus=-4),),
        "gold": (OutcomeModifier(strikeout_bonus=-6), StatModifier(contact=2, duration=_GAME)),
    }),
    SingleTraitSynergy("greased_lightning", "Greased Lightning", Trait.FLASH, {
        "bronze": (StatModifier(speed=3, duration=_GAME),),
        "silver": (StatModifier(speed=5, duration=_GAME),),
        "gold": (StatModifier(speed=8, duration=_GAME), OutcomeModifier(walk_bonus=3)),
    }),
    SingleTraitSynergy("eagle_eye", "Eagle Eye", Trait.EYE, {
        "bronze": (OutcomeModifier(walk_bonus=2),),
        "silver": (OutcomeModifier(walk_bonus=4), StatModifier(contact=2, duration=_GAME)),
        "gold": (OutcomeModifier(walk_bonus=6), StatModifier(contact=4, duration=_GAME)),
    }),
    SingleTraitSynergy("iron_curtain", "Iron Curtain", Trait.GLUE, {
        "bronze": (StatModifier(glove=3, duration=_GAME),),
        "silver": (StatModifier(glove=5, duration=_GAME),),
        "gold": (StatModifier(glove=8, duration=_GAME), OutcomeModifier(homerun_bonus=-3)),
    }),
    SingleTraitSynergy("furnace", "Furnace", Trait.FIRE, {
        "bronze": (StatModifier(velocity=3, duration=_GAME),),
        "silver": (StatModifier(velocity=5, duration=_GAME),),
        "gold": (StatModifier(velocity=8, duration=_GAME), OutcomeModifier(strikeout_bonus=2)),
    }),
)

COMBO_SYNERGIES = (
    ComboSynergy("mastermind", "Mastermind", ((Trait.BRAIN, 2), (Trait.ICE, 1)), (
        StatModifier(control=3, duration=_GAME),
        StatModifier(contact=3, duration=_GAME),
    )),
    ComboSynergy("wildcard", "Wildcard", ((Trait.WILE, 2), (Trait.FLASH, 1)), (
        OutcomeModifier(walk_bonus=3),
        StatModifier(break_=3, duration=_GAME),
        OutcomeModifier(hit_bonus=2),
    )),
    ComboSynergy("clubhouse_leader", "Clubhouse Leader", ((Trait.HEART, 2), (Trait.GRIT, 1)), (
        StatModifier(power=3, contact=3, glove=3, speed=3, duration=_GAME),
    )),
    ComboSynergy("mind_games", "Mind Games",
                 ((Trait.BRAIN, 1), (Trait.FIRE, 1), (Trait.WILE, 1)), (
        OutcomeModifier(strikeout_bonus=3),
        OutcomeModifier(strikeout_bonus=-2),
    )),
)


# ---------------------------------------------------------------------------
# Active synergies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActiveSynergies:
    """Synergies active for one lineup, with their effects pre-merged."""
    single: dict[str, str] = field(default_factory=dict)  # synergy id -> tier
    combo: tuple[str, ...] = ()
    trait_counts: dict[Trait, int] = field(default_factory=dict)
    stat_bonuses: StatDeltas = NO_STAT_DELTAS
    outcome_deltas: OutcomeDeltas = NO_OUTCOME_DELTAS

    @property
    def batter_stat_bonuses(self) -> StatDeltas:
        s = self.stat_bonuses
        return StatDeltas(power=s.power, contact=s.contact, glove=s.glove, speed=s.speed)

    @property
    def pitcher_stat_bonuses(self) -> StatDeltas:
        s = self.stat_bonuses
        return StatDeltas(velocity=s.velocity, control=s.control, break_=s.break_)

    def names(self) -> list[str]:
        labels = []
        for syn in SINGLE_TRAIT_SYNERGIES:
            if syn.id in self.single:
                labels.append(f"{syn.name} ({self.single[syn.id]})")
        for syn in COMBO_SYNERGIES:
            if syn.id in self.combo:
                labels.append(syn.name)
        return labels


def empty_synergies() -> ActiveSynergies:
    return ActiveSynergies(trait_counts={t: 0 for t in Trait})


def count_traits(players: Iterable[Player]) -> dict[Trait, int]:
    counts = Counter({t: 0 for t in Trait})
    for player in players:
        counts.update(player.traits)
    return dict(counts)


def _single_tier(count: int) -> Optional[str]:
    for tier in reversed(TIER_ORDER):
        if count >= TIER_THRESHOLDS[tier]:
            return tier
    return None


def calculate_synergies(lineup: Iterable[Player]) -> ActiveSynergies:
    """Resolve every synergy a lineup unlocks and merge the effects."""
    counts = count_traits(lineup)
    single: dict[str, str] = {}
    combo: list[str] = []
    effects: list[AbilityEffect] = []

    for syn in SINGLE_TRAIT_SYNERGIES:
        tier = _single_tier(counts[syn.trait])
        if tier is not None:
            single[syn.id] = tier
            effects.extend(syn.tiers[tier])

    for syn in COMBO_SYNERGIES:
        if all(counts[trait] >= needed for trait, needed in syn.requirements):
            combo.append(syn.id)
            effects.extend(syn.effects)

    totals = fold_effects(effects)
    return ActiveSynergies(
        single=single,
        combo=tuple(combo),
        trait_counts=counts,
        stat_bonuses=totals.stats,
        outcome_deltas=totals.outcomes,
    )


def is_synergy_active(synergies: ActiveSynergies, synergy_id: str,
                      min_tier: Optional[str] = None) -> bool:
    if synergy_id in synergies.single:
        if min_tier is None:
            return True
        return TIER_ORDER.index(synergies.single[synergy_id]) >= TIER_ORDER.index(min_tier)
    return synergy_id in synergies.combo
