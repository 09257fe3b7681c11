# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Loot drops and procedural item generation.

Item names follow ``[Prefix] Base [Suffix]``, e.g. "Furious Aluminum Bat of
Storms". Every roll, including the item id, comes from the caller's random
source, so the same source state always yields the same item.
"""

from __future__ import annotations

import math
from typing import Optional

from models import EquipmentSlot, Item, ItemRarity, ItemStats, Role

# rarity -> (drop weight, stat multiplier)
RARITY_TABLE: dict[ItemRarity, tuple[int, float]] = {
    ItemRarity.JUNK: (40, 0.5),
    ItemRarity.COMMON: (30, 1.0),
    ItemRarity.UNCOMMON: (15, 1.25),
    ItemRarity.RARE: (10, 1.5),
    ItemRarity.EPIC: (4, 2.0),
    ItemRarity.LEGENDARY: (1, 3.0),
}

DROP_CHANCES = {
    "homerun": 0.30,
    "triple": 0.20,
    "double": 0.10,
    "single": 0.05,
    "win": 1.0,
}

PREFIX_CHANCE = 0.6
FLAVOR_CHANCE = 0.2
XP_BONUS_CHANCE = 0.3

SLOTS = (EquipmentSlot.BAT, EquipmentSlot.GLOVE, EquipmentSlot.CAP,
         EquipmentSlot.CLEATS, EquipmentSlot.ACCESSORY)

PREFIXES = (
    "Furious", "Mighty", "Devastating", "Titanium", "Crushing", "Thunderous", "Brutal",
    "Precise", "Keen", "Sharp", "Focused", "Quick", "Accurate",
    "Sturdy", "Reinforced", "Guardian's", "Protective", "Iron", "Fortified",
    "Swift", "Lightning", "Agile", "Fleet", "Blazing",
)

SUFFIXES = (
    "of the Bull", "of Storms", "of Thunder", "of the Titan", "of Devastation", "of Might",
    "of the Hawk", "of Precision", "of the Sniper", "of Focus", "of Accuracy",
    "of the Wall", "of Protection", "of the Guardian", "of Fortitude", "of the Shield",
)

BATS = ("Wooden Bat", "Aluminum Bat", "Maple Bat", "Ash Bat", "Composite Bat",
        "Louisville Slugger", "Steel Bat", "Carbon Fiber Bat", "Bamboo Bat")
STARTER_GRIPS = ("Fastball Grip", "Curveball Grip", "Slider Grip", "Knuckleball Grip",
                 "Two-Seam Grip", "Four-Seam Grip")
RELIEVER_GRIPS = ("Sinker Grip", "Splitter Grip", "Changeup Grip", "Cutter Grip")

BASE_ITEMS: dict[EquipmentSlot, tuple[str, ...]] = {
    EquipmentSlot.GLOVE: ("Leather Glove", "First Baseman's Mitt", "Catcher's Mitt",
                          "Fielder's Glove", "Outfielder's Glove", "Infielder's Glove",
                          "Pitcher's Glove", "Premium Leather Glove", "Gold Glove"),
    EquipmentSlot.CAP: ("Baseball Cap", "Batting Helmet", "Vintage Cap", "Visor",
                        "Fitted Cap", "Snapback", "Trucker Hat", "Adjustable Cap"),
    EquipmentSlot.CLEATS: ("Metal Cleats", "Turf Shoes", "Molded Cleats", "Low-Top Cleats",
                           "High-Top Cleats", "Running Shoes", "Spikes"),
    EquipmentSlot.ACCESSORY: ("Sunglasses", "Gold Chain", "Wristband", "Batting Gloves",
                              "Pine Tar Rag", "Lucky Charm", "Eye Black", "Bubble Gum",
                              "Compression Sleeve", "Headband"),
}

FLAVOR_TEXTS = (
    "Forged in the fires of competitive spirit.",
    "This item has seen better days.",
    "Legends say this belonged to a Hall of Famer.",
    "You can feel the power radiating from it.",
    "It's sticky. Don't ask why.",
    "Smells like championship dreams.",
    "The previous owner hit .400 with this.",
    "Your teammates will be jealous.",
    "The baseball gods smile upon this item.",
)

XP_BONUS_BY_RARITY = {ItemRarity.LEGENDARY: 20, ItemRarity.EPIC: 10, ItemRarity.RARE: 5}


# ---------------------------------------------------------------------------
# Drops
# ---------------------------------------------------------------------------

def loot_drop_chance(trigger: str) -> float:
    return DROP_CHANCES.get(trigger, 0.0)


def should_drop_loot(trigger: str, rng) -> bool:
    return rng.random() < loot_drop_chance(trigger)


def roll_rarity(rng) -> ItemRarity:
    total = sum(weight for weight, _ in RARITY_TABLE.values())
    roll = rng.random() * total
    cumulative = 0
    for rarity, (weight, _) in RARITY_TABLE.items():
        cumulative += weight
        if roll < cumulative:
            return rarity
    return ItemRarity.JUNK


def rarity_multiplier(rarity: ItemRarity) -> float:
    return RARITY_TABLE[rarity][1]


def item_stat_bonus(base_value: float, rarity: ItemRarity) -> float:
    """Scale by rarity and round half-up to one decimal."""
    return math.floor(base_value * rarity_multiplier(rarity) * 10 + 0.5) / 10


def sell_value(item_level: int, rarity: ItemRarity) -> int:
    return math.floor((10 + item_level * 5) * rarity_multiplier(rarity))


# ---------------------------------------------------------------------------
# Item generation
# ---------------------------------------------------------------------------

def _base_item(slot: EquipmentSlot, role: Role, rng) -> str:
    if slot == EquipmentSlot.BAT:
        if role == Role.BATTER:
            pool = BATS
        elif role == Role.RELIEVER:
            pool = RELIEVER_GRIPS
        else:
            pool = STARTER_GRIPS
    else:
        pool = BASE_ITEMS[slot]
    return pool[rng.random_int_inclusive(0, len(pool) - 1)]


def _item_stats(slot: EquipmentSlot, role: Role, level: int,
                rarity: ItemRarity, rng) -> ItemStats:
    lo = 1 + level // 5
    hi = 3 + math.floor(level / 2.5)

    def roll() -> float:
        return item_stat_bonus(rng.random_int_inclusive(lo, hi), rarity)

    values: dict[str, float] = {}
    if role == Role.BATTER:
        values["power"] = roll()
        values["contact"] = roll()
        values["glove"] = roll()
        if slot == EquipmentSlot.CLEATS:
            values["speed"] = roll()
    else:
        values["velocity"] = roll()
        values["control"] = roll()
        values["break_"] = roll()

    if slot == EquipmentSlot.ACCESSORY and rng.random() < XP_BONUS_CHANCE:
        values["xp_bonus"] = XP_BONUS_BY_RARITY.get(rarity, 2)
    return ItemStats(**values)


def _item_id(rng) -> str:
    return f"item-{rng.random_int(0, 2 ** 32):08x}{rng.random_int(0, 2 ** 32):08x}"


def generate_item(role: Role, level: int, rng,
                  force_rarity: Optional[ItemRarity] = None) -> Item:
    """Roll a complete item for a player of ``role`` and ``level``."""
    rarity = force_rarity or roll_rarity(rng)
    slot = SLOTS[rng.random_int_inclusive(0, len(SLOTS) - 1)]
    base = _base_item(slot, role, rng)

    prefix = None
    if rng.random() < PREFIX_CHANCE:
        prefix = PREFIXES[rng.random_int_inclusive(0, len(PREFIXES) - 1)]
    suffix_chance = 0.4 if rarity in (ItemRarity.JUNK, ItemRarity.COMMON) else 0.7
    suffix = None
    if rng.random() < suffix_chance:
        suffix = SUFFIXES[rng.random_int_inclusive(0, len(SUFFIXES) - 1)]

    stats = _item_stats(slot, role, level, rarity, rng)

    flavor = None
    if rarity not in (ItemRarity.JUNK, ItemRarity.COMMON) and rng.random() < FLAVOR_CHANCE:
        flavor = FLAVOR_TEXTS[rng.random_int_inclusive(0, len(FLAVOR_TEXTS) - 1)]

    return Item(
        id=_item_id(rng),
        name=" ".join(part for part in (prefix, base, suffix) if part),
        slot=slot,
        rarity=rarity,
        level=max(1, level),
        stats=stats,
        sell_value=sell_value(level, rarity),
        flavor_text=flavor,
    )
