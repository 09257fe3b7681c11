# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for decision snapshots, reference policies and the match driver.

Verifies:
1. Snapshots describe the at-bat from the batting or pitching dugout
2. Only affordable, non-passive abilities are offered
3. FixedPolicy and RandomPolicy produce valid decisions
4. Decisions never advance the match's own random source
5. run_to_completion ends games and enforces its step bound
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest
from pydantic import ValidationError

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from approaches import BatterApproach, PitchStrategy
from decisions import (
    DecisionSnapshot,
    FixedPolicy,
    RandomPolicy,
    build_snapshot,
    decide,
    decision_source,
    run_to_completion,
)
from match_engine import MatchStateError, Side, initialize
from models import (
    Archetype,
    BatterStats,
    PitcherStats,
    Player,
    PlayerAbility,
    Role,
    SpiritPool,
    Team,
)
from outcomes import Bases
from random_source import ScriptedRandomSource, SeededRandomSource
from roster_factory import generate_team
from stats import FatigueLevel


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_test_team(prefix, leadoff=None, starter=None):
    batters = [Player(id=f"{prefix}-b{i}", name=f"Batter {prefix}{i}", role=Role.BATTER,
                      stats=BatterStats()) for i in range(1, 10)]
    if leadoff is not None:
        batters[0] = leadoff
    pitcher = starter or Player(id=f"{prefix}-p1", name=f"Pitcher {prefix}", role=Role.STARTER,
                                stats=PitcherStats())
    return Team(name=f"Team {prefix}", roster=tuple(batters) + (pitcher,))


def make_slugger(pid="a-b1", spirit=50):
    return Player(
        id=pid, name="Big Bat", role=Role.BATTER, stats=BatterStats(),
        archetype=Archetype.SLUGGER,
        abilities=(PlayerAbility(ability_id="moonshot"),
                   PlayerAbility(ability_id="intimidation_factor")),
        spirit=SpiritPool(current=spirit, max=50),
    )


# ===========================================================================
# Test: snapshots
# ===========================================================================

def test_batting_snapshot():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger()), 3)
    state = replace(state, outs=1, bases=Bases(False, True, False),
                    runs={Side.MY: 2, Side.OPPONENT: 5})
    snap = build_snapshot(state, "batting")
    assert snap.perspective == "batting"
    assert snap.batter_id == "a-b1"
    assert snap.pitcher_id == "h-p1"
    assert snap.batting_runs == 5 and snap.fielding_runs == 2
    assert snap.run_differential == 3
    assert snap.runners_in_scoring_position
    assert snap.pitcher_fatigue == FatigueLevel.FRESH
    assert snap.available_abilities == ("moonshot", "intimidation_factor")
    print("  test_batting_snapshot: PASSED")


def test_pitching_snapshot_flips_differential():
    state = initialize(make_test_team("h"), make_test_team("a"), 3)
    state = replace(state, runs={Side.MY: 2, Side.OPPONENT: 5})
    snap = build_snapshot(state, "pitching")
    assert snap.run_differential == -3
    assert not snap.runners_in_scoring_position
    assert snap.available_abilities == ()


def test_snapshot_hides_unaffordable_abilities():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger(spirit=15)), 3)
    assert build_snapshot(state, "batting").available_abilities == ("intimidation_factor",)


def test_snapshot_rejects_three_outs():
    state = initialize(make_test_team("h"), make_test_team("a"), 3)
    data = {**dict(build_snapshot(state, "batting")), "outs": 3}
    with pytest.raises(ValidationError):
        DecisionSnapshot.model_validate(data)


# ===========================================================================
# Test: policies
# ===========================================================================

def test_fixed_policy():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger()), 3)
    policy = FixedPolicy(approach=BatterApproach.POWER, strategy=PitchStrategy.CHALLENGE)
    decision = decide(state, policy, policy)
    assert decision.approach == BatterApproach.POWER
    assert decision.strategy == PitchStrategy.CHALLENGE
    assert decision.batter_ability_id is None
    assert decision.pitcher_ability_id is None


def test_random_policy_uses_ability_when_roll_allows():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger()), 3)
    policy = RandomPolicy(ability_rate=1.0)
    decision = decide(state, policy, policy, rng=ScriptedRandomSource([0.0]))
    assert decision.approach == BatterApproach.POWER
    assert decision.batter_ability_id == "moonshot"
    assert decision.strategy == PitchStrategy.CHALLENGE
    assert decision.pitcher_ability_id is None


def test_random_policy_never_uses_ability_at_zero_rate():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger()), 3)
    decision = decide(state, RandomPolicy(ability_rate=0.0), RandomPolicy(ability_rate=0.0))
    assert decision.batter_ability_id is None


def test_decide_leaves_match_source_alone():
    state = initialize(make_test_team("h"), make_test_team("a"), 9)
    before = state.rng.state
    decide(state, RandomPolicy(), RandomPolicy())
    assert state.rng.state == before
    assert decision_source(state).state == before


def test_decision_stream_is_reproducible():
    state = initialize(make_test_team("h"), make_test_team("a", leadoff=make_slugger()), 9)
    policy = RandomPolicy(ability_rate=0.5)
    assert decide(state, policy, policy) == decide(state, policy, policy)


# ===========================================================================
# Test: driving a match
# ===========================================================================

def test_run_to_completion():
    rng = SeededRandomSource(31)
    state = initialize(generate_team("Home", rng, id_prefix="h"),
                       generate_team("Away", rng, id_prefix="a"), rng)
    final = run_to_completion(state, RandomPolicy(), FixedPolicy())
    assert final.is_complete
    assert not state.is_complete
    assert final.play_by_play[0].batter_id == state.current_batter.id


def test_run_to_completion_step_bound():
    state = initialize(make_test_team("h"), make_test_team("a"), 1)
    with pytest.raises(MatchStateError, match="did not complete within 5"):
        run_to_completion(state, FixedPolicy(), FixedPolicy(), max_steps=5)
