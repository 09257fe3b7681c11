# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Player-facing ability rules: activation, spirit, slots and upgrades.

Every transition returns a new Player; nothing is mutated in place.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple, Optional

from effects import (
    Ability,
    AbilityEffect,
    OutcomeDeltas,
    OutcomeModifier,
    NO_OUTCOME_DELTAS,
    describe_effects,
    scale_effects,
)
from models import Player, PlayerAbility, SpiritPool
from synergy import ActiveSynergies, is_synergy_active
from techniques import get_technique

logger = logging.getLogger(__name__)

CROSS_ARCHETYPE_LIMIT = 2
REPERTOIRE_BREAK_PENALTY = 10
ECONOMIZER_DISCOUNT = 0.8


class AbilityError(Exception):
    """Raised when an ability transition is not allowed."""

    def __init__(self, message: str, ability_id: str | None = None,
                 player_id: str | None = None):
        self.ability_id = ability_id
        self.player_id = player_id
        super().__init__(message)


class Check(NamedTuple):
    ok: bool
    reason: str = ""


# ---------------------------------------------------------------------------
# Spirit
# ---------------------------------------------------------------------------

def max_spirit(level: int) -> int:
    return 50 + (level - 1) * 5


def effective_spirit_cost(player: Player, ability: Ability) -> int:
    """Rank-scaled cost, discounted when the player holds Economizer."""
    owned = player.get_ability(ability.id)
    rank = owned.rank if owned else 1
    cost = math.floor(ability.spirit_cost * 1.1 ** (rank - 1))
    if player.get_ability("economizer") is not None:
        cost = math.ceil(cost * ECONOMIZER_DISCOUNT)
    return cost


def can_activate(player: Player, ability_id: str) -> Check:
    ability = get_technique(ability_id)
    if ability is None:
        return Check(False, f"unknown ability {ability_id}")
    if player.get_ability(ability_id) is None:
        return Check(False, f"{player.name} does not have {ability.name}")
    if ability.is_passive:
        return Check(False, f"{ability.name} is passive")
    cost = effective_spirit_cost(player, ability)
    if player.spirit.current < cost:
        return Check(False, f"{player.name} needs {cost} spirit, has {player.spirit.current}")
    return Check(True)


def activate(player: Player, ability_id: str) -> Player:
    """Spend spirit for an ability and bump its usage counter."""
    ability = get_technique(ability_id)
    if ability is None:
        raise AbilityError(f"Unknown ability {ability_id}", ability_id, player.id)
    cost = effective_spirit_cost(player, ability)
    abilities = tuple(
        a.model_copy(update={"times_used": a.times_used + 1}) if a.ability_id == ability_id else a
        for a in player.abilities
    )
    return player.model_copy(update={
        "spirit": SpiritPool(current=max(0, player.spirit.current - cost), max=player.spirit.max),
        "abilities": abilities,
    })


def regenerate_spirit(player: Player, amount: int | None = None) -> Player:
    """Restore spirit by ``amount``, or refill it when amount is None."""
    if amount is None:
        return player.with_spirit(player.spirit.max)
    return player.with_spirit(player.spirit.current + amount)


# ---------------------------------------------------------------------------
# Slots, equip and upgrade
# ---------------------------------------------------------------------------

def max_slots(player: Player) -> int:
    if player.max_technique_slots is not None:
        return player.max_technique_slots
    return 5 + player.level // 10


def used_slots(player: Player) -> int:
    total = 0
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        total += ability.slot_cost if ability else 1
    return total


def _cross_archetype_count(player: Player) -> int:
    count = 0
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        if ability and ability.archetype != player.archetype:
            count += 1
    return count


def can_equip(player: Player, ability_id: str) -> Check:
    ability = get_technique(ability_id)
    if ability is None:
        return Check(False, "Ability not found")
    if player.level < ability.required_level:
        return Check(False, f"Requires level {ability.required_level}")
    if ability.archetype is not None and ability.archetype != player.archetype:
        if not ability.allow_cross_archetype:
            return Check(False, f"Requires {ability.archetype.value} archetype")
        if _cross_archetype_count(player) >= CROSS_ARCHETYPE_LIMIT:
            return Check(False, f"Cross-archetype limit reached ({CROSS_ARCHETYPE_LIMIT})")
    if player.get_ability(ability_id) is not None:
        return Check(False, "Already equipped")
    for owned in player.abilities:
        if owned.ability_id in ability.conflicts_with:
            other = get_technique(owned.ability_id)
            return Check(False, f"Conflicts with {other.name if other else owned.ability_id}")
    if ability.prerequisite_id and player.get_ability(ability.prerequisite_id) is None:
        prereq = get_technique(ability.prerequisite_id)
        return Check(False, f"Requires {prereq.name if prereq else ability.prerequisite_id}")
    if used_slots(player) + ability.slot_cost > max_slots(player):
        return Check(False, "Not enough technique slots")
    if player.skill_points < 1:
        return Check(False, "No skill points available")
    return Check(True)


def equip(player: Player, ability_id: str) -> Player:
    check = can_equip(player, ability_id)
    if not check.ok:
        logger.info("Cannot equip %s for %s: %s", ability_id, player.name, check.reason)
        raise AbilityError(check.reason, ability_id, player.id)
    return player.model_copy(update={
        "abilities": player.abilities + (PlayerAbility(ability_id=ability_id),),
        "skill_points": player.skill_points - 1,
    })


def unequip(player: Player, ability_id: str) -> Player:
    """Remove an ability. Skill points are not refunded."""
    if player.get_ability(ability_id) is None:
        raise AbilityError("Not equipped", ability_id, player.id)
    return player.model_copy(update={
        "abilities": tuple(a for a in player.abilities if a.ability_id != ability_id),
    })


def can_upgrade(player: Player, ability_id: str) -> Check:
    owned = player.get_ability(ability_id)
    ability = get_technique(ability_id)
    if owned is None or ability is None:
        return Check(False, "Not equipped")
    if owned.rank >= ability.max_rank:
        return Check(False, "Already at max rank")
    if player.skill_points < 1:
        return Check(False, "No skill points available")
    return Check(True)


def upgrade(player: Player, ability_id: str) -> Player:
    check = can_upgrade(player, ability_id)
    if not check.ok:
        logger.info("Cannot upgrade %s for %s: %s", ability_id, player.name, check.reason)
        raise AbilityError(check.reason, ability_id, player.id)
    return player.model_copy(update={
        "abilities": tuple(
            a.model_copy(update={"rank": a.rank + 1}) if a.ability_id == ability_id else a
            for a in player.abilities
        ),
        "skill_points": player.skill_points - 1,
    })


# ---------------------------------------------------------------------------
# Effects in play
# ---------------------------------------------------------------------------

def active_effects(player: Player, ability_id: str,
                   synergies: Optional[ActiveSynergies] = None) -> tuple[AbilityEffect, ...]:
    """Rank-scaled effects of an owned ability plus any synergy enhancement."""
    ability = get_technique(ability_id)
    owned = player.get_ability(ability_id)
    if ability is None or owned is None:
        return ()
    effects = scale_effects(ability.effects, owned.rank)
    enhancement = ability.synergy_enhancement
    if enhancement and synergies and is_synergy_active(synergies, enhancement.synergy_id,
                                                        enhancement.tier):
        effects = effects + enhancement.effects
    return effects


def passive_outcome_deltas(player: Player) -> OutcomeDeltas:
    """Outcome modifiers carried by passive techniques (Patience's walk bonus)."""
    total = NO_OUTCOME_DELTAS
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        if ability is None or not ability.is_passive:
            continue
        for effect in scale_effects(ability.effects, owned.rank):
            if isinstance(effect, OutcomeModifier):
                total = total + OutcomeDeltas(
                    strikeout=effect.strikeout_bonus, walk=effect.walk_bonus,
                    homerun=effect.homerun_bonus, hit=effect.hit_bonus,
                )
    return total


def repertoire_penalty(pitcher: Player, ability_id: Optional[str],
                       previous_ability_id: Optional[str]) -> int:
    """Break lost for repeating the same technique with Repertoire equipped."""
    if not ability_id or not previous_ability_id:
        return 0
    if pitcher.get_ability("repertoire") is None:
        return 0
    return REPERTOIRE_BREAK_PENALTY if ability_id == previous_ability_id else 0


def describe_ability(ability_id: str, rank: int = 1) -> list[str]:
    ability = get_technique(ability_id)
    if ability is None:
        return []
    return describe_effects(scale_effects(ability.effects, rank))
