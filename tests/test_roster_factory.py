# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for team generation and roster loading.

Verifies:
1. Generated stats stay inside the quality tier templates
2. Roster shape follows the league tier
3. Archetypes bring their starter technique and full spirit
4. A seed fully determines a team
5. load_team reports unreadable, malformed and invalid files
"""

import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models import BATTER_ARCHETYPES, PITCHER_ARCHETYPES, Role, Trait
from random_source import ScriptedRandomSource, SeededRandomSource
from roster_factory import (
    BATTER_TEMPLATES,
    PITCHER_TEMPLATES,
    ROSTER_SIZES,
    LeagueTier,
    QualityTier,
    RosterError,
    assign_archetype,
    generate_player,
    generate_team,
    load_team,
    pick_weighted_trait,
)
from techniques import STARTER_TECHNIQUES, get_technique


# ===========================================================================
# Test: players
# ===========================================================================

@pytest.mark.parametrize("tier", list(QualityTier))
def test_batter_stats_within_template(tier):
    rng = SeededRandomSource(17)
    for i in range(10):
        player = generate_player(Role.BATTER, tier, rng, f"b{i}")
        for stat, (lo, hi) in BATTER_TEMPLATES[tier].items():
            assert lo <= getattr(player.stats, stat) <= hi, f"{stat} out of range for {tier}"


def test_pitcher_stats_within_template():
    rng = SeededRandomSource(23)
    bounds = PITCHER_TEMPLATES[QualityTier.STAR]
    for i in range(10):
        stats = generate_player(Role.RELIEVER, QualityTier.STAR, rng, f"p{i}").stats
        assert bounds["velocity"][0] <= stats.velocity <= bounds["velocity"][1]
        assert bounds["control"][0] <= stats.control <= bounds["control"][1]
        assert bounds["break"][0] <= stats.break_ <= bounds["break"][1]


def test_generated_player_defaults():
    player = generate_player(Role.BATTER, QualityTier.SOLID, SeededRandomSource(1), "x-b1")
    assert player.id == "x-b1"
    assert player.level == 1
    assert player.skill_points == 1
    assert player.archetype is None
    assert 1 <= len(player.traits) <= 2
    assert len(set(player.traits)) == len(player.traits)
    assert " " in player.name


def test_pick_weighted_trait():
    weights = {Trait.MUSCLE: 3, Trait.EYE: 1}
    assert pick_weighted_trait(weights, ScriptedRandomSource([0.0])) == Trait.MUSCLE
    assert pick_weighted_trait(weights, ScriptedRandomSource([0.9])) == Trait.EYE
    assert pick_weighted_trait({}, ScriptedRandomSource([0.0])) == list(Trait)[0]
    assert pick_weighted_trait(weights, ScriptedRandomSource([0.0]),
                               exclude=(Trait.MUSCLE,)) == Trait.EYE


def test_assign_archetype():
    rng = SeededRandomSource(5)
    base = generate_player(Role.STARTER, QualityTier.GOOD, rng, "p1")
    player = assign_archetype(base, 2, rng)
    assert player.archetype in PITCHER_ARCHETYPES
    assert player.abilities[0].ability_id == STARTER_TECHNIQUES[player.archetype]
    assert len(player.abilities) == 3
    assert all(get_technique(a.ability_id).prerequisite_id is None for a in player.abilities[1:])
    assert player.spirit.current == player.spirit.max == 50
    assert player.skill_points == 0
    assert player.traits == base.traits
    print("  test_assign_archetype: PASSED")


# ===========================================================================
# Test: teams
# ===========================================================================

@pytest.mark.parametrize("league", list(LeagueTier))
def test_roster_shape(league):
    team = generate_team("Shape Test", SeededRandomSource(3), league=league, id_prefix="st")
    batters, starters, relievers = ROSTER_SIZES[league]
    assert len(team.batters) == batters
    assert len([p for p in team.roster if p.role == Role.STARTER]) == starters
    assert len([p for p in team.roster if p.role == Role.RELIEVER]) == relievers
    assert team.batters[0].id == "st-b1"
    assert team.pitchers[0].id == "st-sp1"


def test_team_archetypes():
    team = generate_team("Archetypes", SeededRandomSource(8))
    assert all(p.archetype in BATTER_ARCHETYPES for p in team.batters)
    assert all(p.archetype in PITCHER_ARCHETYPES for p in team.pitchers)
    plain = generate_team("Plain", SeededRandomSource(8), with_archetypes=False)
    assert all(p.archetype is None and p.abilities == () for p in plain.roster)


def test_default_prefix_from_name():
    team = generate_team("River Cats", SeededRandomSource(2), league=LeagueTier.SANDLOT)
    assert team.roster[0].id == "river-cats-b1"


def test_fixed_quality():
    team = generate_team("Rookies", SeededRandomSource(4), quality=QualityTier.ROOKIE,
                         with_archetypes=False)
    assert all(p.stats.power <= 35 for p in team.batters)


def test_same_seed_same_team():
    a = generate_team("Seeded", SeededRandomSource(99))
    b = generate_team("Seeded", SeededRandomSource(99))
    c = generate_team("Seeded", SeededRandomSource(100))
    assert a == b
    assert a != c


# ===========================================================================
# Test: load_team
# ===========================================================================

def test_load_team_round_trip(tmp_path):
    team = generate_team("Saved", SeededRandomSource(6))
    path = tmp_path / "team.json"
    path.write_text(json.dumps(team.model_dump(mode="json", by_alias=True)))
    assert load_team(path) == team


def test_load_team_missing_file(tmp_path):
    with pytest.raises(RosterError, match="Cannot read roster file") as exc_info:
        load_team(tmp_path / "nope.json")
    assert exc_info.value.path.endswith("nope.json")


def test_load_team_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(RosterError, match="not valid JSON"):
        load_team(path)


def test_load_team_invalid_shape(tmp_path):
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({"name": "No Roster"}))
    with pytest.raises(RosterError) as exc_info:
        load_team(path)
    assert any("roster" in d for d in exc_info.value.details)
