# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Deterministic team generation.

Every stat, trait, name and archetype is drawn from the caller's random
source, so a seed fully determines a roster. Player ids are derived from the
team prefix and roster position rather than drawn.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from abilities import max_spirit
from models import (
    BATTER_ARCHETYPES,
    PITCHER_ARCHETYPES,
    Archetype,
    BatterStats,
    Player,
    PitcherStats,
    PlayerAbility,
    Role,
    SpiritPool,
    Team,
    Trait,
)
from techniques import STARTER_TECHNIQUES, techniques_for

logger = logging.getLogger(__name__)


class QualityTier(str, Enum):
    ROOKIE = "rookie"
    AVERAGE = "average"
    SOLID = "solid"
    GOOD = "good"
    STAR = "star"
    ELITE = "elite"


class LeagueTier(str, Enum):
    SANDLOT = "sandlot"
    LOCAL = "local"
    REGIONAL = "regional"
    NATIONAL = "national"
    WORLD = "world"


# (min, max) inclusive per stat
BATTER_TEMPLATES: dict[QualityTier, dict[str, tuple[int, int]]] = {
    QualityTier.ROOKIE: {"power": (15, 35), "contact": (10, 30), "glove": (10, 30), "speed": (15, 40)},
    QualityTier.AVERAGE: {"power": (30, 48), "contact": (28, 46), "glove": (28, 46), "speed": (30, 50)},
    QualityTier.SOLID: {"power": (45, 62), "contact": (43, 60), "glove": (43, 60), "speed": (35, 60)},
    QualityTier.GOOD: {"power": (60, 77), "contact": (58, 75), "glove": (58, 75), "speed": (40, 70)},
    QualityTier.STAR: {"power": (73, 88), "contact": (71, 86), "glove": (68, 83), "speed": (50, 80)},
    QualityTier.ELITE: {"power": (85, 98), "contact": (83, 96), "glove": (80, 93), "speed": (60, 90)},
}

PITCHER_TEMPLATES: dict[QualityTier, dict[str, tuple[int, int]]] = {
    QualityTier.ROOKIE: {"velocity": (15, 35), "control": (10, 30), "break": (10, 30)},
    QualityTier.AVERAGE: {"velocity": (30, 48), "control": (28, 46), "break": (28, 46)},
    QualityTier.SOLID: {"velocity": (45, 62), "control": (43, 60), "break": (43, 60)},
    QualityTier.GOOD: {"velocity": (60, 77), "control": (58, 75), "break": (58, 75)},
    QualityTier.STAR: {"velocity": (73, 88), "control": (71, 86), "break": (71, 86)},
    QualityTier.ELITE: {"velocity": (85, 98), "control": (83, 96), "break": (83, 96)},
}

# batters, starters, relievers
ROSTER_SIZES: dict[LeagueTier, tuple[int, int, int]] = {
    LeagueTier.SANDLOT: (4, 1, 0),
    LeagueTier.LOCAL: (4, 1, 1),
    LeagueTier.REGIONAL: (6, 2, 1),
    LeagueTier.NATIONAL: (8, 2, 2),
    LeagueTier.WORLD: (12, 2, 3),
}

# techniques granted beyond the starter one
TECHNIQUE_COUNT: dict[LeagueTier, int] = {
    LeagueTier.SANDLOT: 0,
    LeagueTier.LOCAL: 1,
    LeagueTier.REGIONAL: 2,
    LeagueTier.NATIONAL: 3,
    LeagueTier.WORLD: 4,
}

SECONDARY_TRAIT_CHANCE = 0.5

ARCHETYPE_TRAIT_WEIGHTS = {
    Archetype.SLUGGER: {Trait.MUSCLE: 4, Trait.GRIT: 2, Trait.FIRE: 2, Trait.HEART: 1, Trait.EYE: 1},
    Archetype.CONTACT_HITTER: {Trait.EYE: 4, Trait.GRIT: 2, Trait.BRAIN: 2, Trait.HEART: 1, Trait.ICE: 1},
    Archetype.SPEED_DEMON: {Trait.FLASH: 4, Trait.GRIT: 2, Trait.HEART: 2, Trait.WILE: 1, Trait.FIRE: 1},
    Archetype.FLAMETHROWER: {Trait.FIRE: 4, Trait.MUSCLE: 2, Trait.GRIT: 2, Trait.HEART: 1, Trait.ICE: 1},
    Archetype.PAINTER: {Trait.ICE: 4, Trait.BRAIN: 2, Trait.EYE: 2, Trait.GLUE: 1, Trait.HEART: 1},
    Archetype.TRICKSTER: {Trait.WILE: 4, Trait.BRAIN: 2, Trait.ICE: 2, Trait.FLASH: 1, Trait.FIRE: 1},
}

ROLE_TRAIT_WEIGHTS = {
    "batter": {Trait.MUSCLE: 2, Trait.GRIT: 2, Trait.FLASH: 2, Trait.EYE: 2, Trait.GLUE: 1,
               Trait.FIRE: 1, Trait.HEART: 1, Trait.BRAIN: 1},
    "pitcher": {Trait.FIRE: 2, Trait.ICE: 2, Trait.WILE: 2, Trait.BRAIN: 2, Trait.GRIT: 1,
                Trait.GLUE: 1, Trait.HEART: 1, Trait.MUSCLE: 1},
}

FIRST_NAMES = (
    "Ace", "Buck", "Casey", "Dusty", "Eddie", "Frankie", "Gus", "Hank", "Izzy", "Jesse",
    "Kit", "Lefty", "Moe", "Nico", "Ollie", "Pip", "Quinn", "Red", "Sal", "Tex",
    "Ulysses", "Vic", "Wade", "Yogi", "Zeke",
)
LAST_NAMES = (
    "Abbott", "Barker", "Coleman", "Dalton", "Everett", "Fisher", "Garrett", "Hollis",
    "Irving", "Jennings", "Keller", "Lawson", "Mercer", "Nolan", "Ortega", "Porter",
    "Quigley", "Rhodes", "Sutton", "Tanner", "Underwood", "Vance", "Whitaker", "Young",
)


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

def pick_weighted_trait(weights: dict[Trait, int], rng,
                        exclude: tuple[Trait, ...] = ()) -> Trait:
    candidates = [t for t in Trait if t not in exclude]
    total = sum(weights.get(t, 0) for t in candidates)
    if total == 0:
        return candidates[rng.random_int(0, len(candidates))]
    roll = rng.random() * total
    weighted = [t for t in candidates if weights.get(t, 0) > 0]
    for trait in weighted:
        roll -= weights[trait]
        if roll <= 0:
            return trait
    return weighted[-1]


def generate_traits(role: Role, archetype: Archetype | None, rng) -> tuple[Trait, ...]:
    """A weighted primary trait and, half the time, a uniform secondary one."""
    if archetype is not None:
        weights = ARCHETYPE_TRAIT_WEIGHTS.get(archetype, {})
    else:
        weights = ROLE_TRAIT_WEIGHTS["batter" if role == Role.BATTER else "pitcher"]
    primary = pick_weighted_trait(weights, rng)
    traits = [primary]
    if rng.random() < SECONDARY_TRAIT_CHANCE:
        rest = [t for t in Trait if t != primary]
        traits.append(rest[rng.random_int(0, len(rest))])
    return tuple(traits)


def _roll(rng, bounds: tuple[int, int]) -> int:
    return rng.random_int_inclusive(*bounds)


def generate_player(role: Role, tier: QualityTier, rng, player_id: str) -> Player:
    """Roll a level-1 player with no archetype."""
    name = f"{rng.pick(FIRST_NAMES)} {rng.pick(LAST_NAMES)}"
    if role == Role.BATTER:
        t = BATTER_TEMPLATES[tier]
        stats = BatterStats(
            power=_roll(rng, t["power"]), contact=_roll(rng, t["contact"]),
            glove=_roll(rng, t["glove"]), speed=_roll(rng, t["speed"]),
        )
    else:
        t = PITCHER_TEMPLATES[tier]
        stats = PitcherStats(
            velocity=_roll(rng, t["velocity"]), control=_roll(rng, t["control"]),
            break_=_roll(rng, t["break"]),
        )
    return Player(
        id=player_id,
        name=name,
        role=role,
        stats=stats,
        skill_points=1,
        max_technique_slots=5,
        traits=generate_traits(role, None, rng),
    )


def assign_archetype(player: Player, technique_count: int, rng) -> Player:
    """Give a generated player a random archetype, its starter technique and
    up to ``technique_count`` more techniques without prerequisites."""
    archetypes = BATTER_ARCHETYPES if player.is_batter else PITCHER_ARCHETYPES
    archetype = archetypes[rng.random_int(0, len(archetypes))]
    starter_id = STARTER_TECHNIQUES[archetype]

    abilities = [PlayerAbility(ability_id=starter_id)]
    extras = [t for t in techniques_for(archetype)
              if t.id != starter_id and not t.prerequisite_id]
    abilities += [PlayerAbility(ability_id=t.id) for t in extras[:technique_count]]

    traits = player.traits or generate_traits(player.role, archetype, rng)
    spirit = max_spirit(player.level)
    return player.model_copy(update={
        "archetype": archetype,
        "abilities": tuple(abilities),
        "spirit": SpiritPool(current=spirit, max=spirit),
        "skill_points": 0,
        "max_technique_slots": 5 + player.level // 10,
        "traits": traits,
    })


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------

def _batter_tier(index: int, total: int) -> QualityTier:
    if total <= 4:
        return QualityTier.GOOD if index == 0 else QualityTier.SOLID
    if total <= 6:
        return QualityTier.GOOD if index < 2 else QualityTier.SOLID
    ratio = index / total
    if ratio < 0.25:
        return QualityTier.GOOD
    if ratio < 0.7:
        return QualityTier.SOLID
    return QualityTier.AVERAGE


def generate_team(name: str, rng, league: LeagueTier = LeagueTier.NATIONAL,
                  quality: QualityTier | None = None, with_archetypes: bool = True,
                  id_prefix: str | None = None) -> Team:
    """Generate a full team.

    Without ``quality`` the roster mixes tiers the way a starter team does:
    stronger batters at the top of the order and a better first starter.
    """
    batters, starters, relievers = ROSTER_SIZES[league]
    prefix = id_prefix or name.lower().replace(" ", "-")
    roster: list[Player] = []

    for i in range(batters):
        tier = quality or _batter_tier(i, batters)
        roster.append(generate_player(Role.BATTER, tier, rng, f"{prefix}-b{i + 1}"))
    for i in range(starters):
        tier = quality or (QualityTier.GOOD if i == 0 else QualityTier.SOLID)
        roster.append(generate_player(Role.STARTER, tier, rng, f"{prefix}-sp{i + 1}"))
    for i in range(relievers):
        tier = quality or QualityTier.SOLID
        roster.append(generate_player(Role.RELIEVER, tier, rng, f"{prefix}-rp{i + 1}"))

    if with_archetypes:
        count = TECHNIQUE_COUNT[league]
        roster = [assign_archetype(p, count, rng) for p in roster]

    logger.info("Generated %s: %d players (%s league)", name, len(roster), league.value)
    return Team(name=name, roster=tuple(roster))


# ---------------------------------------------------------------------------
# Loading saved rosters
# ---------------------------------------------------------------------------

class RosterError(Exception):
    """Raised when a roster file cannot be read or fails validation."""

    def __init__(self, message: str, path: str | None = None,
                 details: list[str] | None = None):
        self.path = path
        self.details = details or []
        super().__init__(message)


def load_team(path: Path | str) -> Team:
    """Load a team from a JSON file shaped like ``Team.model_dump``."""
    p = Path(path)
    try:
        with open(p) as f:
            data = json.load(f)
    except OSError as e:
        raise RosterError(f"Cannot read roster file: {e}", path=str(p)) from e
    except json.JSONDecodeError as e:
        raise RosterError(f"Roster file is not valid JSON: {e}", path=str(p)) from e
    try:
        team = Team.model_validate(data)
    except ValidationError as e:
        raise RosterError(
            f"Roster file failed validation with {e.error_count()} error(s)",
            path=str(p),
            details=[f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()],
        ) from e
    logger.info("Loaded %s from %s", team.name, p)
    return team
