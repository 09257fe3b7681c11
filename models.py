# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the baseball match engine."""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Role(str, Enum):
    BATTER = "Batter"
    STARTER = "Starter"
    RELIEVER = "Reliever"


class Archetype(str, Enum):
    SLUGGER = "Slugger"
    CONTACT_HITTER = "Contact Hitter"
    SPEED_DEMON = "Speed Demon"
    FLAMETHROWER = "Flamethrower"
    PAINTER = "Painter"
    TRICKSTER = "Trickster"


BATTER_ARCHETYPES = (Archetype.SLUGGER, Archetype.CONTACT_HITTER, Archetype.SPEED_DEMON)
PITCHER_ARCHETYPES = (Archetype.FLAMETHROWER, Archetype.PAINTER, Archetype.TRICKSTER)


class Trait(str, Enum):
    MUSCLE = "Muscle"
    GRIT = "Grit"
    FLASH = "Flash"
    EYE = "Eye"
    GLUE = "Glue"
    FIRE = "Fire"
    ICE = "Ice"
    WILE = "Wile"
    HEART = "Heart"
    BRAIN = "Brain"


class EquipmentSlot(str, Enum):
    BAT = "bat"
    GLOVE = "glove"
    CAP = "cap"
    CLEATS = "cleats"
    ACCESSORY = "accessory"


class ItemRarity(str, Enum):
    JUNK = "junk"
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


# ---------------------------------------------------------------------------
# Role stats
# ---------------------------------------------------------------------------

def clamp_stat(value: float) -> int:
    """Floor and clamp a stat value into [0, 100]."""
    return max(0, min(100, math.floor(value)))


class BatterStats(BaseModel):
    """Batting ratings. Out-of-range inputs are clamped, not rejected."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["batter"] = "batter"
    power: int = 50
    contact: int = 50
    glove: int = 50
    speed: int = 50

    @field_validator("power", "contact", "glove", "speed", mode="before")
    @classmethod
    def _clamp(cls, v: float) -> int:
        return clamp_stat(float(v))


class PitcherStats(BaseModel):
    """Pitching ratings. ``break`` is a keyword, so the attribute is ``break_``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["pitcher"] = "pitcher"
    velocity: int = 50
    control: int = 50
    break_: int = Field(default=50, alias="break")

    @field_validator("velocity", "control", "break_", mode="before")
    @classmethod
    def _clamp(cls, v: float) -> int:
        return clamp_stat(float(v))


RoleStats = Annotated[Union[BatterStats, PitcherStats], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------

class ItemStats(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    power: float = 0.0
    contact: float = 0.0
    glove: float = 0.0
    speed: float = 0.0
    velocity: float = 0.0
    control: float = 0.0
    break_: float = Field(default=0.0, alias="break")
    xp_bonus: float = 0.0


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slot: EquipmentSlot
    rarity: ItemRarity
    level: int = Field(default=1, ge=1)
    stats: ItemStats = Field(default_factory=ItemStats)
    sell_value: int = Field(default=0, ge=0)
    flavor_text: Optional[str] = None


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

class SpiritPool(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: int = Field(default=50, ge=0)
    max: int = Field(default=50, ge=0)

    @model_validator(mode="after")
    def _current_within_max(self) -> SpiritPool:
        if self.current > self.max:
            raise ValueError(f"spirit current {self.current} exceeds max {self.max}")
        return self


class PlayerAbility(BaseModel):
    """An ability a player has equipped, with its upgrade rank."""
    model_config = ConfigDict(frozen=True)

    ability_id: str
    rank: int = Field(default=1, ge=1)
    times_used: int = Field(default=0, ge=0)


class Player(BaseModel):
    """Immutable player record. Transitions return a new Player."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: Role
    stats: RoleStats
    archetype: Optional[Archetype] = None
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    spirit: SpiritPool = Field(default_factory=SpiritPool)
    skill_points: int = Field(default=0, ge=0)
    abilities: tuple[PlayerAbility, ...] = ()
    equipment: dict[EquipmentSlot, Item] = Field(default_factory=dict)
    traits: tuple[Trait, ...] = ()
    max_technique_slots: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _stats_match_role(self) -> Player:
        expected = "batter" if self.role == Role.BATTER else "pitcher"
        if self.stats.kind != expected:
            raise ValueError(f"{self.role.value} {self.id} carries {self.stats.kind} stats")
        return self

    @property
    def is_batter(self) -> bool:
        return self.role == Role.BATTER

    @property
    def is_pitcher(self) -> bool:
        return self.role != Role.BATTER

    def get_ability(self, ability_id: str) -> PlayerAbility | None:
        for owned in self.abilities:
            if owned.ability_id == ability_id:
                return owned
        return None

    def with_spirit(self, current: int) -> Player:
        """Return a copy with spirit set to ``current`` clamped to [0, max]."""
        clamped = max(0, min(self.spirit.max, current))
        return self.model_copy(update={
            "spirit": SpiritPool(current=clamped, max=self.spirit.max),
        })

    def reset_for_season(self) -> Player:
        """Refill spirit and clear per-season ability usage counters."""
        return self.model_copy(update={
            "spirit": SpiritPool(current=self.spirit.max, max=self.spirit.max),
            "abilities": tuple(a.model_copy(update={"times_used": 0}) for a in self.abilities),
        })


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    roster: tuple[Player, ...]
    color: Optional[str] = None

    @property
    def batters(self) -> list[Player]:
        return [p for p in self.roster if p.is_batter]

    @property
    def pitchers(self) -> list[Player]:
        return [p for p in self.roster if p.is_pitcher]

    def get_player(self, player_id: str) -> Player | None:
        for p in self.roster:
            if p.id == player_id:
                return p
        return None
