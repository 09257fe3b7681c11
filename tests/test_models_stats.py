# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for player models and derived stats.

Verifies:
1. Stat inputs are floored and clamped into [0, 100]
2. Role and stat kind must agree; the discriminated union parses raw dicts
3. Spirit pools reject current above max and transitions clamp
4. Overall ratings and tiers follow the documented weights and thresholds
5. Derived stats layer archetype base, passives and equipment
6. Fatigue multiplier and fatigue levels
"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import FatigueConfig
from models import (
    Archetype,
    BatterStats,
    EquipmentSlot,
    Item,
    ItemRarity,
    ItemStats,
    PitcherStats,
    Player,
    PlayerAbility,
    Role,
    SpiritPool,
    Team,
)
from stats import (
    FatigueLevel,
    Tier,
    batter_overall,
    derived_stats,
    fatigue_level,
    fatigue_multiplier,
    passive_negates_fatigue,
    pitcher_overall,
    rating_tier,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_test_batter(**overrides):
    defaults = dict(id="b1", name="Test Batter", role=Role.BATTER,
                    stats=BatterStats(power=50, contact=50, glove=50, speed=50))
    defaults.update(overrides)
    return Player(**defaults)


def make_test_pitcher(**overrides):
    defaults = dict(id="p1", name="Test Pitcher", role=Role.STARTER,
                    stats=PitcherStats(velocity=50, control=50, break_=50))
    defaults.update(overrides)
    return Player(**defaults)


# ===========================================================================
# Test: stat clamping and validation
# ===========================================================================

def test_batter_stats_clamped_and_floored():
    stats = BatterStats(power=150, contact=-5, glove=55.9, speed=50)
    assert stats.power == 100
    assert stats.contact == 0
    assert stats.glove == 55
    print("  test_batter_stats_clamped_and_floored: PASSED")


def test_pitcher_break_alias():
    stats = PitcherStats.model_validate({"velocity": 60, "control": 40, "break": 70})
    assert stats.break_ == 70
    assert stats.model_dump(by_alias=True)["break"] == 70


def test_role_must_match_stats():
    with pytest.raises(ValidationError):
        Player(id="x", name="X", role=Role.BATTER, stats=PitcherStats())


def test_stats_union_from_dict():
    player = Player.model_validate({
        "id": "p9", "name": "Raw", "role": "Reliever",
        "stats": {"kind": "pitcher", "velocity": 61, "control": 52, "break": 48},
    })
    assert isinstance(player.stats, PitcherStats)
    assert player.is_pitcher
    assert player.stats.break_ == 48


def test_spirit_current_cannot_exceed_max():
    with pytest.raises(ValidationError):
        SpiritPool(current=60, max=50)


def test_with_spirit_clamps():
    player = make_test_batter(spirit=SpiritPool(current=20, max=50))
    assert player.with_spirit(80).spirit.current == 50
    assert player.with_spirit(-10).spirit.current == 0
    assert player.spirit.current == 20


def test_reset_for_season():
    player = make_test_batter(
        spirit=SpiritPool(current=5, max=60),
        abilities=(PlayerAbility(ability_id="moonshot", times_used=4),),
    )
    reset = player.reset_for_season()
    assert reset.spirit.current == 60
    assert reset.abilities[0].times_used == 0


def test_team_partitions_roster():
    team = Team(name="T", roster=(make_test_batter(), make_test_pitcher()))
    assert [p.id for p in team.batters] == ["b1"]
    assert [p.id for p in team.pitchers] == ["p1"]
    assert team.get_player("nope") is None


# ===========================================================================
# Test: overall rating
# ===========================================================================

def test_batter_overall():
    assert batter_overall(BatterStats(power=60, contact=40, glove=30, speed=30)) == 42


def test_pitcher_overall():
    assert pitcher_overall(PitcherStats(velocity=70, control=35, break_=30)) == 45


@pytest.mark.parametrize("overall,tier", [
    (95, Tier.ELITE), (87, Tier.ELITE), (86, Tier.GREAT), (75, Tier.GREAT),
    (60, Tier.GOOD), (45, Tier.SOLID), (30, Tier.AVERAGE), (29, Tier.POOR), (0, Tier.POOR),
])
def test_rating_tier(overall, tier):
    assert rating_tier(overall) == tier


# ===========================================================================
# Test: derived stats
# ===========================================================================

def test_plain_player_uses_own_stats():
    player = make_test_batter(stats=BatterStats(power=71, contact=22, glove=40, speed=90))
    assert derived_stats(player) == player.stats


def test_archetype_base_replaces_own_stats():
    player = make_test_batter(archetype=Archetype.SLUGGER,
                              stats=BatterStats(power=99, contact=99, glove=99, speed=99))
    s = derived_stats(player)
    assert (s.power, s.contact, s.glove, s.speed) == (60, 40, 30, 30)


def test_passive_scaled_by_rank():
    rank1 = make_test_batter(archetype=Archetype.CONTACT_HITTER,
                             abilities=(PlayerAbility(ability_id="patience"),))
    rank2 = make_test_batter(archetype=Archetype.CONTACT_HITTER,
                             abilities=(PlayerAbility(ability_id="patience", rank=2),))
    assert derived_stats(rank1).contact == 80
    assert derived_stats(rank2).contact == 83


def test_equipment_bonus_floored():
    bat = Item(id="i1", name="Maple Bat", slot=EquipmentSlot.BAT, rarity=ItemRarity.RARE,
               stats=ItemStats(power=5.5))
    player = make_test_batter(archetype=Archetype.SLUGGER, equipment={EquipmentSlot.BAT: bat})
    assert derived_stats(player).power == 65


def test_derived_stats_clamped():
    cap = Item(id="i2", name="Cap", slot=EquipmentSlot.CAP, rarity=ItemRarity.EPIC,
               stats=ItemStats(velocity=40))
    pitcher = make_test_pitcher(stats=PitcherStats(velocity=90, control=50, break_=50),
                                equipment={EquipmentSlot.CAP: cap})
    assert derived_stats(pitcher).velocity == 100


# ===========================================================================
# Test: fatigue
# ===========================================================================

def test_fatigue_multiplier():
    cfg = FatigueConfig()
    assert fatigue_multiplier(0, cfg) == 1.0
    assert fatigue_multiplier(2, cfg) == pytest.approx(0.84)
    assert fatigue_multiplier(10, cfg) == 0.55


@pytest.mark.parametrize("innings,extra,level", [
    (3, 0.4, FatigueLevel.FRESH),
    (4, 0.0, FatigueLevel.TIRED),
    (0, 0.5, FatigueLevel.TIRED),
    (6, 0.0, FatigueLevel.GASSED),
    (0, 1.5, FatigueLevel.GASSED),
])
def test_fatigue_level(innings, extra, level):
    assert fatigue_level(innings, extra, FatigueConfig()) == level


def test_iron_arm_negates_fatigue():
    pitcher = make_test_pitcher(archetype=Archetype.FLAMETHROWER,
                                abilities=(PlayerAbility(ability_id="iron_arm"),))
    assert passive_negates_fatigue(pitcher)
    assert not passive_negates_fatigue(make_test_pitcher())
