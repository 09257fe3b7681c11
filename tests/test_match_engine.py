# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the at-bat-by-at-bat match engine.

Verifies:
1. initialize sets up lineups, starters and a private random source
2. step is pure: the input state is never changed
3. Base/out/run bookkeeping, including third-out run erasure
4. Extra-base attempts during a live step
5. Half-inning rollover, walk-offs, extra innings and the innings cap
6. Pitcher rotation by innings completed
7. Abilities, spirit momentum, tactic fatigue and scoped effects
8. Zone reads and perfect-zone outcome bumps
9. Loot for the home side's hits only
10. finalize, box scores and save/restore of a match in progress
11. Seeded replay: the same seed and decisions give the same game
12. Synergies count the whole staff as well as the batting lineup
"""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from approaches import BatterApproach, PitchStrategy
from config import DEFAULT_CONFIG, EngineConfig
from decisions import FixedPolicy, RandomPolicy, decide, run_to_completion
from effects import DefensiveBoost, Duration, StatModifier
from match_engine import (
    AtBatDecision,
    MatchAlreadyCompleteError,
    MatchNotCompleteError,
    MatchRewards,
    MatchSetupError,
    MatchStateDecodeError,
    ScopedEffect,
    Side,
    finalize,
    generate_box_score,
    initialize,
    match_state_from_dict,
    match_state_to_dict,
    print_box_score,
    resolve_next_pitcher,
    spirit_deltas,
    step,
)
from models import (
    Archetype,
    BatterStats,
    PitcherStats,
    Player,
    PlayerAbility,
    Role,
    SpiritPool,
    Team,
    Trait,
)
from outcomes import EMPTY_BASES, Bases, OutcomeKind
from random_source import ScriptedRandomSource, SeededRandomSource
from roster_factory import generate_team
from zones import ZoneCell, ZoneModifier


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_test_batter(pid, **overrides):
    stats = dict(power=50, contact=50, glove=50, speed=50)
    stats.update({k: overrides.pop(k) for k in list(overrides) if k in stats})
    return Player(id=pid, name=f"Batter {pid}", role=Role.BATTER,
                  stats=BatterStats(**stats), **overrides)


def make_test_pitcher(pid, **overrides):
    stats = dict(velocity=50, control=50, break_=50)
    stats.update({k: overrides.pop(k) for k in list(overrides) if k in stats})
    return Player(id=pid, name=f"Pitcher {pid}", role=Role.STARTER,
                  stats=PitcherStats(**stats), **overrides)


def make_test_team(name, prefix, batters=9, pitchers=3, batter_stats=None,
                   pitcher_stats=None, replacements=None):
    roster = [make_test_batter(f"{prefix}-b{i}", **(batter_stats or {}))
              for i in range(1, batters + 1)]
    roster += [make_test_pitcher(f"{prefix}-p{i}", **(pitcher_stats or {}))
               for i in range(1, pitchers + 1)]
    replacements = replacements or {}
    roster = [replacements.get(p.id, p) for p in roster]
    return Team(name=name, roster=tuple(roster))


def make_test_match(my_team=None, opponent=None, values=None, **state_overrides):
    """Average-vs-average match with an optional scripted random source."""
    my_team = my_team or make_test_team("Home", "h")
    opponent = opponent or make_test_team("Away", "a")
    state = initialize(my_team, opponent, 42)
    if values is not None:
        state_overrides["rng"] = ScriptedRandomSource(values)
    return replace(state, **state_overrides)


def make_generated_match(seed, **kwargs):
    rng = SeededRandomSource(seed)
    my_team = generate_team("Home Nine", rng, id_prefix="home")
    opponent = generate_team("Visitors", rng, id_prefix="away")
    return initialize(my_team, opponent, rng, **kwargs)


def play_out(state, policy=None):
    policy = policy or FixedPolicy()
    return run_to_completion(state, policy, policy)


# ===========================================================================
# Test: initialize
# ===========================================================================

def test_initialize():
    state = make_test_match()
    assert (state.inning, state.is_top, state.outs) == (1, True, 0)
    assert state.bases == EMPTY_BASES
    assert state.batting_side == Side.OPPONENT
    assert state.current_batter.id == "a-b1"
    assert state.current_pitcher.id == "h-p1"
    assert state.pitcher_ids == {Side.MY: "h-p1", Side.OPPONENT: "a-p1"}
    assert len(state.lineups[Side.MY]) == 9
    assert not state.is_complete
    print("  test_initialize: PASSED")


def test_initialize_clones_source():
    source = SeededRandomSource(5)
    before = source.state
    state = initialize(make_test_team("H", "h"), make_test_team("A", "a"), source)
    assert source.state == before
    assert state.rng.state == before
    assert state.rng is not source


def test_lineup_size_capped():
    big = make_test_team("Big", "h", batters=12)
    state = initialize(big, make_test_team("A", "a"), 1)
    assert len(state.lineups[Side.MY]) == 9
    small_cfg = EngineConfig.model_validate({"rules": {"lineup_size": 4}})
    state = initialize(big, make_test_team("A", "a"), 1, config=small_cfg)
    assert state.lineups[Side.MY] == ("h-b1", "h-b2", "h-b3", "h-b4")


def test_setup_errors():
    with pytest.raises(MatchSetupError, match="no pitchers"):
        initialize(make_test_team("H", "h", pitchers=0), make_test_team("A", "a"), 1)
    with pytest.raises(MatchSetupError, match="no batters"):
        initialize(make_test_team("H", "h"), make_test_team("A", "a", batters=0), 1)


# ===========================================================================
# Test: step purity and basic bookkeeping
# ===========================================================================

def test_step_does_not_mutate_input():
    state = make_test_match()
    rng_before = state.rng.state
    after = step(state)
    assert state.play_by_play == ()
    assert state.rng.state == rng_before
    assert state.batter_index[Side.OPPONENT] == 0
    assert len(after.play_by_play) == 1
    assert after.rng.state != rng_before


def test_strikeout_records_out():
    state = step(make_test_match(values=[0.0]))
    event = state.play_by_play[-1]
    assert event.outcome == OutcomeKind.STRIKEOUT
    assert state.outs == 1
    assert state.batter_index[Side.OPPONENT] == 1
    assert state.current_batter.id == "a-b2"
    assert state.batting_lines["a-b1"].strikeouts == 1
    assert state.pitching_lines["h-p1"].outs_recorded == 1
    assert event.narrative.startswith("Batter a-b1 goes down")


def test_bases_loaded_walk_forces_run():
    state = make_test_match(values=[0.99, 0.0], bases=Bases(True, True, True),
                            runner_ids=("a-b7", "a-b8", "a-b9"))
    state = step(state)
    assert state.play_by_play[-1].outcome == OutcomeKind.WALK
    assert state.opponent_runs == 1
    assert state.runner_ids == ("a-b1", "a-b7", "a-b8")
    assert state.batting_lines["a-b1"].rbis == 1
    assert state.batting_lines["a-b1"].at_bats == 0
    assert state.batting_lines["a-b9"].runs == 1
    assert state.line_score[Side.OPPONENT] == (1,)


def test_third_out_erases_runs():
    state = make_test_match(values=[0.0], outs=2, bases=Bases(True, True, True),
                            runner_ids=("a-b7", "a-b8", "a-b9"))
    state = step(state)
    event = state.play_by_play[-1]
    assert event.outs == 3
    assert event.rbi == 0
    assert state.opponent_runs == 0
    assert state.is_top is False
    assert (state.outs, state.bases) == (0, EMPTY_BASES)
    assert state.runner_ids == (None, None, None)
    assert state.pitcher_innings[Side.MY] == 1
    assert state.inning_complete


def test_runner_scores_from_second_on_single():
    # K miss, BB miss, hit roll -> single, runner goes, runner safe
    state = make_test_match(values=[0.99, 0.99, 0.99, 0.0, 0.0],
                            bases=Bases(False, True, False), runner_ids=(None, "a-b9", None))
    state = step(state)
    assert state.play_by_play[-1].outcome == OutcomeKind.SINGLE
    assert state.opponent_runs == 1
    assert state.bases == Bases(True, False, False)
    assert state.batting_lines["a-b9"].runs == 1
    assert state.batting_lines["a-b1"].rbis == 1
    assert "scores from 2nd" in state.play_by_play[-1].narrative


def test_runner_thrown_out_for_third_out_scores_nothing():
    state = make_test_match(values=[0.99, 0.99, 0.99, 0.0, 0.99], outs=2,
                            bases=Bases(False, True, False), runner_ids=(None, "a-b9", None))
    state = step(state)
    event = state.play_by_play[-1]
    assert event.outcome == OutcomeKind.SINGLE
    assert event.outs == 3
    assert state.opponent_runs == 0
    assert state.is_top is False
    assert state.batting_lines["a-b1"].hits == 1
    assert state.pitching_lines["h-p1"].outs_recorded == 1


# ===========================================================================
# Test: game end
# ===========================================================================

def test_walk_off_home_run():
    my_team = make_test_team("Home", "h", batter_stats=dict(power=100, contact=100))
    opponent = make_test_team("Away", "a", pitcher_stats=dict(velocity=10, control=10, break_=10))
    state = make_test_match(my_team, opponent, values=[0.99], inning=9, is_top=False,
                            runs={Side.MY: 3, Side.OPPONENT: 3})
    state = step(state)
    assert state.play_by_play[-1].outcome == OutcomeKind.HOMERUN
    assert state.is_complete
    assert state.my_runs == 4
    result = finalize(state)
    assert result.is_win
    assert result.cash_earned == 500
    print("  test_walk_off_home_run: PASSED")


def test_home_lead_after_top_of_ninth_ends_game():
    state = make_test_match(values=[0.0], inning=9, outs=2,
                            runs={Side.MY: 2, Side.OPPONENT: 1})
    state = step(state)
    assert state.is_complete
    assert state.is_top
    box = generate_box_score(state)
    assert len(box["home"]["inning_runs"]) == 8
    assert len(box["away"]["inning_runs"]) == 9


def test_tie_after_ninth_goes_to_extras():
    state = make_test_match(values=[0.0], inning=9, is_top=False, outs=2,
                            runs={Side.MY: 2, Side.OPPONENT: 2})
    state = step(state)
    assert not state.is_complete
    assert (state.inning, state.is_top) == (10, True)


def test_visitors_win_after_bottom_of_ninth():
    state = make_test_match(values=[0.0], inning=9, is_top=False, outs=2,
                            runs={Side.MY: 1, Side.OPPONENT: 3})
    state = step(state)
    assert state.is_complete
    result = finalize(state)
    assert not result.is_win
    assert result.cash_earned == 250


def test_innings_cap_stops_tied_game():
    state = make_test_match(values=[0.0], inning=18, is_top=False, outs=2,
                            runs={Side.MY: 4, Side.OPPONENT: 4})
    state = step(state)
    assert state.is_complete
    assert state.inning == 18
    assert not finalize(state).is_win


def test_step_after_complete_raises():
    state = make_test_match(is_complete=True)
    with pytest.raises(MatchAlreadyCompleteError):
        step(state)


def test_finalize_before_complete_raises():
    with pytest.raises(MatchNotCompleteError):
        finalize(make_test_match())


# ===========================================================================
# Test: pitcher rotation
# ===========================================================================

def test_resolve_next_pitcher():
    pitchers = list(make_test_team("T", "t").pitchers)
    assert resolve_next_pitcher(pitchers, "t-p1", 4, DEFAULT_CONFIG) == "t-p1"
    assert resolve_next_pitcher(pitchers, "t-p1", 5, DEFAULT_CONFIG) == "t-p2"
    assert resolve_next_pitcher(pitchers, "t-p2", 7, DEFAULT_CONFIG) == "t-p3"
    assert resolve_next_pitcher(pitchers[:2], "t-p1", 8, DEFAULT_CONFIG) == "t-p2"
    assert resolve_next_pitcher(pitchers[:1], "t-p1", 8, DEFAULT_CONFIG) == "t-p1"


def test_reliever_enters_after_five_innings():
    state = make_test_match(values=[0.0], inning=5, is_top=False, outs=2,
                            runs={Side.MY: 1, Side.OPPONENT: 2},
                            pitcher_innings={Side.MY: 5, Side.OPPONENT: 4},
                            extra_fatigue={Side.MY: 0.6, Side.OPPONENT: 0.3})
    state = step(state)
    assert (state.inning, state.is_top) == (6, True)
    assert state.pitcher_ids[Side.MY] == "h-p2"
    assert state.pitchers_used[Side.MY] == ("h-p1", "h-p2")
    assert state.pitcher_innings[Side.MY] == 0
    assert state.extra_fatigue[Side.MY] == 0.0
    assert state.pitcher_innings[Side.OPPONENT] == 5
    assert state.pitcher_ids[Side.OPPONENT] == "a-p1"


# ===========================================================================
# Test: abilities and spirit
# ===========================================================================

def test_spirit_deltas_table():
    cfg = DEFAULT_CONFIG.spirit
    assert spirit_deltas(OutcomeKind.SINGLE, 0, cfg) == (4, -2, 0)
    assert spirit_deltas(OutcomeKind.HOMERUN, 2, cfg) == (16, -18, 4)
    assert spirit_deltas(OutcomeKind.STRIKEOUT, 0, cfg) == (-3, 5, 0)
    assert spirit_deltas(OutcomeKind.GROUNDOUT, 0, cfg) == (0, 2, 0)
    assert spirit_deltas(OutcomeKind.WALK, 0, cfg) == (2, -3, 0)


def _slugger(spirit=50):
    return make_test_batter("a-b1", archetype=Archetype.SLUGGER,
                            abilities=(PlayerAbility(ability_id="moonshot"),),
                            spirit=SpiritPool(current=spirit, max=50))


def test_moonshot_activation():
    opponent = make_test_team("Away", "a", replacements={"a-b1": _slugger()})
    state = make_test_match(opponent=opponent, values=[0.0])
    state = step(state, AtBatDecision(batter_ability_id="moonshot"))
    event = state.play_by_play[-1]
    assert event.outcome == OutcomeKind.HOMERUN
    assert event.batter_ability_id == "moonshot"
    batter = state.opponent_team.get_player("a-b1")
    # 50 - 20 cost + 13 momentum + 2 team bonus
    assert batter.spirit.current == 45
    assert batter.get_ability("moonshot").times_used == 1
    assert state.my_team.get_player("h-p1").spirit.current == 37
    assert state.last_spirit_delta.batter_delta == 13
    assert state.last_spirit_delta.team_delta == 2
    assert state.loot_drops == ()


def test_unaffordable_ability_is_dropped(caplog):
    opponent = make_test_team("Away", "a", replacements={"a-b1": _slugger(spirit=5)})
    state = make_test_match(opponent=opponent, values=[0.0])
    with caplog.at_level(logging.INFO, logger="match_engine"):
        state = step(state, AtBatDecision(batter_ability_id="moonshot"))
    event = state.play_by_play[-1]
    assert event.batter_ability_id is None
    assert event.outcome == OutcomeKind.STRIKEOUT
    assert "dropped" in caplog.text
    assert state.opponent_team.get_player("a-b1").spirit.current == 2


def test_game_scoped_ability_persists():
    glover = make_test_batter("a-b1", archetype=Archetype.CONTACT_HITTER,
                              abilities=(PlayerAbility(ability_id="gold_glove"),))
    opponent = make_test_team("Away", "a", replacements={"a-b1": glover})
    state = make_test_match(opponent=opponent, values=[0.0])
    state = step(state, AtBatDecision(batter_ability_id="gold_glove"))
    assert len(state.scoped_effects) == 1
    scoped = state.scoped_effects[0]
    assert scoped.side == Side.OPPONENT
    assert scoped.duration == Duration.GAME
    assert DefensiveBoost(glove_bonus=15) in scoped.effects


def test_inning_scoped_effects_expire():
    inning = ScopedEffect(Side.OPPONENT, Duration.INNING, "gorilla_ball",
                          (StatModifier(power=40, duration=Duration.INNING),))
    game = ScopedEffect(Side.MY, Duration.GAME, "gold_glove",
                        (StatModifier(glove=30, duration=Duration.GAME), DefensiveBoost(15)))
    state = make_test_match(values=[0.0], outs=2, scoped_effects=(inning, game))
    state = step(state)
    assert state.is_top is False
    assert state.scoped_effects == (game,)


# ===========================================================================
# Test: tactics
# ===========================================================================

def test_tactic_fatigue_and_streaks():
    decision = AtBatDecision(approach=BatterApproach.PATIENT, strategy=PitchStrategy.PAINT)
    state = step(make_test_match(values=[0.0]), decision)
    assert state.extra_fatigue[Side.MY] == pytest.approx(0.35)
    assert state.extra_fatigue[Side.OPPONENT] == 0.0
    assert state.approach_streak == 1
    state = step(state, decision)
    assert state.approach_streak == 2
    assert state.strategy_streak == 2
    state = step(replace(state, rng=ScriptedRandomSource([0.99, 0.0])),
                 AtBatDecision(approach=BatterApproach.CONTACT))
    assert state.play_by_play[-1].outcome == OutcomeKind.WALK
    assert state.approach_streak == 1
    assert state.strategy_streak == 2
    assert state.last_strategy == PitchStrategy.PAINT
    state = step(replace(state, rng=ScriptedRandomSource([0.0])), decision)
    assert state.is_top is False
    assert state.last_approach is None
    assert state.approach_streak == 0


def test_missing_tactic_keeps_streak():
    def walk(state, decision):
        return step(replace(state, rng=ScriptedRandomSource([0.99, 0.0])), decision)

    decision = AtBatDecision(approach=BatterApproach.POWER, strategy=PitchStrategy.CHALLENGE)
    state = walk(walk(make_test_match(), decision), decision)
    assert state.approach_streak == 2
    state = walk(state, AtBatDecision())
    assert state.play_by_play[-1].outcome == OutcomeKind.WALK
    assert state.last_approach == BatterApproach.POWER
    assert state.approach_streak == 2
    assert state.last_strategy == PitchStrategy.CHALLENGE
    assert state.strategy_streak == 2
    state = walk(state, decision)
    assert state.approach_streak == 3
    assert state.strategy_streak == 3


# ===========================================================================
# Test: synergies
# ===========================================================================

def test_pitcher_traits_count_toward_synergies():
    my_team = make_test_team("Home", "h", pitcher_stats={"traits": (Trait.FIRE,)})
    state = make_test_match(my_team=my_team)
    active = state.synergies[Side.MY]
    assert active.trait_counts[Trait.FIRE] == 3
    assert active.single["furnace"] == "silver"
    assert active.pitcher_stat_bonuses.velocity == 5
    assert "furnace" not in state.synergies[Side.OPPONENT].single

    restored = match_state_from_dict(json.loads(json.dumps(match_state_to_dict(state))))
    assert restored.synergies[Side.MY].single["furnace"] == "silver"
    print("  test_pitcher_traits_count_toward_synergies: PASSED")


# ===========================================================================
# Test: zones
# ===========================================================================

def test_painted_corner_turns_hit_into_groundout():
    state = make_test_match(values=[0.99])
    state = step(state, AtBatDecision(zone_modifier=ZoneModifier(is_perfect=True)))
    event = state.play_by_play[-1]
    assert event.outcome == OutcomeKind.GROUNDOUT
    assert event.painted_corner
    assert state.outs == 1


def test_perfect_contact_turns_strikeout_into_single_and_drops_loot():
    state = make_test_match(values=[0.0], is_top=False)
    state = step(state, AtBatDecision(zone_modifier=ZoneModifier(is_perfect=True)))
    event = state.play_by_play[-1]
    assert event.outcome == OutcomeKind.SINGLE
    assert event.perfect_contact
    assert state.hits[Side.MY] == 1
    assert len(state.loot_drops) == 1
    assert state.loot_drops[0].triggered_by == "single"
    assert state.loot_drops[0].player_name == "Batter h-b1"


def test_swing_read_against_perfect_control():
    opponent = make_test_team("Away", "a", pitcher_stats=dict(control=80))
    state = make_test_match(opponent=opponent, values=[0.0], is_top=False)
    state = step(state, AtBatDecision(swing_read=ZoneCell(1, 1), pitch_aim=ZoneCell(1, 1)))
    event = state.play_by_play[-1]
    assert event.perfect_contact
    assert event.outcome == OutcomeKind.SINGLE


# ===========================================================================
# Test: full games
# ===========================================================================

def test_same_seed_same_game():
    a = play_out(make_generated_match(7))
    b = play_out(make_generated_match(7))
    assert a.play_by_play == b.play_by_play
    assert (a.my_runs, a.opponent_runs) == (b.my_runs, b.opponent_runs)
    assert a.rng.state == b.rng.state
    print("  test_same_seed_same_game: PASSED")


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_full_game_bookkeeping(seed):
    state = play_out(make_generated_match(seed), RandomPolicy())
    assert state.is_complete
    assert state.inning >= 9
    assert state.my_runs != state.opponent_runs or state.inning == DEFAULT_CONFIG.rules.max_innings
    assert all(0 <= e.outs <= 3 for e in state.play_by_play)
    for side in Side:
        assert sum(state.line_score[side]) == state.runs[side]
        roster_ids = {p.id for p in state.teams[side].roster}
        lines = [line for pid, line in state.batting_lines.items() if pid in roster_ids]
        assert sum(line.runs for line in lines) == state.runs[side], f"R mismatch for {side}"
        assert sum(line.rbis for line in lines) == state.runs[side], f"RBI mismatch for {side}"
        assert sum(line.hits for line in lines) == state.hits[side]
    assert all(drop.player_name in {p.name for p in state.my_team.roster}
               for drop in state.loot_drops)


def test_trace_recorded():
    state = make_generated_match(3, trace=True)
    state = step(state)
    assert len(state.trace) == 1
    entry = state.trace[0]
    assert entry["outcome"] == state.play_by_play[0].outcome.value
    assert entry["rolls"], "Expected the at-bat draws in the trace"


def test_situation_display():
    state = make_test_match(outs=1, bases=Bases(True, False, True))
    assert state.situation_display() == "Top 1, 1 out, runners on 1st, 3rd, Away 0 - Home 0"


# ===========================================================================
# Test: finalize and box score
# ===========================================================================

def test_finalize_is_pure_and_regenerates_spirit():
    state = play_out(make_generated_match(11))
    first = finalize(state)
    second = finalize(state)
    assert first == second
    assert first.total_innings == state.inning
    before = {p.id: p for p in state.my_team.roster}
    for player in first.roster_after:
        old = before[player.id]
        if old.archetype is None:
            assert player == old
            continue
        assert player.spirit.current == min(old.spirit.max, old.spirit.current + 20)


def test_finalize_custom_rewards_and_fans():
    state = make_test_match(is_complete=True, runs={Side.MY: 5, Side.OPPONENT: 1})
    assert finalize(state, fans=1.5).cash_earned == 750
    assert finalize(state, MatchRewards(win=100, loss=10)).cash_earned == 100


def test_box_score_matches_state():
    state = play_out(make_generated_match(9))
    box = generate_box_score(state)
    assert box["final_score"] == {"away": state.opponent_runs, "home": state.my_runs}
    assert box["home"]["total_runs"] == sum(box["home"]["inning_runs"])
    assert box["away"]["total_hits"] == state.hits[Side.OPPONENT]
    assert [b["id"] for b in box["home"]["batting"]] == list(state.lineups[Side.MY])
    text = print_box_score(state)
    assert "FINAL BOX SCORE" in text
    assert state.my_team.name in text and state.opponent_team.name in text


# ===========================================================================
# Test: persistence
# ===========================================================================

def _advance(state, steps):
    policy = RandomPolicy(ability_rate=0.5)
    for _ in range(steps):
        if state.is_complete:
            break
        state = step(state, decide(state, policy, policy))
    return state


def test_save_and_resume_continues_identically():
    state = _advance(make_generated_match(21), 25)
    saved = json.loads(json.dumps(match_state_to_dict(state)))
    restored = match_state_from_dict(saved)
    assert restored.rng.state == state.rng.state
    assert restored.synergies == state.synergies
    assert match_state_to_dict(restored) == saved

    continued = _advance(state, 30)
    resumed = _advance(restored, 30)
    assert resumed.play_by_play == continued.play_by_play
    assert resumed.runs == continued.runs
    assert resumed.rng.state == continued.rng.state
    print("  test_save_and_resume_continues_identically: PASSED")


def test_restore_rejects_garbage():
    with pytest.raises(MatchStateDecodeError) as exc_info:
        match_state_from_dict({})
    assert exc_info.value.validation_errors
    assert exc_info.value.details


def test_restore_rejects_unknown_version():
    data = match_state_to_dict(make_test_match())
    data["version"] = 99
    with pytest.raises(MatchStateDecodeError, match="version"):
        match_state_from_dict(data)


def test_restore_rejects_missing_player():
    data = match_state_to_dict(make_test_match())
    data["lineups"]["my"][0] = "ghost"
    with pytest.raises(MatchStateDecodeError, match="missing players"):
        match_state_from_dict(data)
