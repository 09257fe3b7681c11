# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Interactive, at-bat-by-at-bat match engine.

A match is a sequence of immutable ``MatchState`` values:

    state = initialize(my_team, opponent_team, seed)
    while not state.is_complete:
        state = step(state, decision)
    result = finalize(state)

The opponent bats first (top half); my team bats in the bottom half. ``step``
never mutates its input: the random source is cloned, advanced and stored
on the new state, so any earlier state can be replayed or persisted.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from abilities import (
    activate,
    active_effects,
    can_activate,
    regenerate_spirit,
    repertoire_penalty,
)
from approaches import (
    APPROACHES,
    STRATEGIES,
    BatterApproach,
    PitchStrategy,
    adaptation_multiplier,
    next_streak,
)
from at_bat import AtBatContext, AtBatResolution, simulate_at_bat
from config import DEFAULT_CONFIG, EngineConfig, RewardConfig, SpiritConfig
from effects import (
    NO_OUTCOME_DELTAS,
    AbilityEffect,
    DefensiveBoost,
    Duration,
    StatModifier,
    fold_effects,
)
from loot import generate_item, should_drop_loot
from models import Item, Player, Team
from outcomes import (
    BATTED_OUTS,
    EMPTY_BASES,
    NO_RUNNERS,
    Bases,
    BatterLine,
    OutcomeKind,
    PitcherLine,
    RunnerIds,
    advance_bases,
    advance_runner_ids,
    credit_batter,
    credit_pitcher,
    describe,
    outcome_display_text,
    resolve_extra_base_attempts,
)
from random_source import SeededRandomSource
from stats import FatigueLevel, derived_stats, fatigue_level
from synergy import ActiveSynergies, calculate_synergies
from zones import (
    ZoneCell,
    ZoneModifier,
    calc_batting_zone_modifier,
    calc_pitching_zone_modifier,
    derive_pitch_tendency,
    derive_zone_map,
    resolve_pitch_landing,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class MatchStateError(Exception):
    """Base class for match lifecycle errors."""

    def __init__(self, message: str, inning: int | None = None,
                 details: list[str] | None = None):
        self.inning = inning
        self.details = details or []
        super().__init__(message)


class MatchSetupError(MatchStateError):
    """Raised when a team cannot field a lineup and a pitcher."""


class MatchAlreadyCompleteError(MatchStateError):
    """Raised when stepping a match that has already ended."""


class MatchNotCompleteError(MatchStateError):
    """Raised when finalizing a match that is still in progress."""


class MatchStateDecodeError(MatchStateError):
    """Raised when a persisted match state cannot be restored."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None):
        self.validation_errors = validation_errors or []
        super().__init__(message, details=[
            f"{e.get('loc', '?')}: {e.get('msg', '?')}" for e in self.validation_errors
        ])


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

class Side(str, Enum):
    MY = "my"
    OPPONENT = "opponent"

    @property
    def other(self) -> Side:
        return Side.OPPONENT if self == Side.MY else Side.MY


class AtBatDecision(BaseModel):
    """Choices for one at-bat, from both dugouts.

    ``zone_modifier`` short-circuits the zone game with a precomputed
    result. Otherwise ``swing_read`` plays the batting read and
    ``pitch_aim`` the pitching aim.
    """
    model_config = ConfigDict(frozen=True)

    approach: Optional[BatterApproach] = None
    strategy: Optional[PitchStrategy] = None
    batter_ability_id: Optional[str] = None
    pitcher_ability_id: Optional[str] = None
    swing_read: Optional[ZoneCell] = None
    pitch_aim: Optional[ZoneCell] = None
    zone_modifier: Optional[ZoneModifier] = None


NO_DECISION = AtBatDecision()


@dataclass(frozen=True)
class ScopedEffect:
    """Ability effects that outlive the at-bat they were activated in."""
    side: Side
    duration: Duration
    ability_id: str
    effects: tuple[AbilityEffect, ...]

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "duration": self.duration.value,
            "ability_id": self.ability_id,
            "effects": [_effect_to_dict(e) for e in self.effects],
        }

    @classmethod
    def from_dict(cls, d: dict) -> ScopedEffect:
        return cls(
            side=Side(d["side"]),
            duration=Duration(d["duration"]),
            ability_id=d["ability_id"],
            effects=tuple(_effect_from_dict(e) for e in d["effects"]),
        )


def _effect_to_dict(effect: AbilityEffect) -> dict:
    if isinstance(effect, StatModifier):
        data = asdict(effect)
        data["duration"] = effect.duration.value
        return {"type": "stat_modifier", **data}
    if isinstance(effect, DefensiveBoost):
        return {"type": "defensive_boost", "glove_bonus": effect.glove_bonus}
    raise TypeError(f"Effect {effect!r} cannot be scoped")


def _effect_from_dict(d: dict) -> AbilityEffect:
    data = dict(d)
    kind = data.pop("type")
    if kind == "stat_modifier":
        data["duration"] = Duration(data["duration"])
        return StatModifier(**data)
    if kind == "defensive_boost":
        return DefensiveBoost(**data)
    raise ValueError(f"Unknown scoped effect type {kind!r}")


@dataclass(frozen=True)
class PlayByPlayEvent:
    inning: int
    is_top: bool
    batter_id: str
    batter_name: str
    pitcher_id: str
    pitcher_name: str
    outcome: OutcomeKind
    rbi: int
    outs: int
    narrative: str
    my_runs: int
    opponent_runs: int
    approach: Optional[str] = None
    strategy: Optional[str] = None
    batter_ability_id: Optional[str] = None
    pitcher_ability_id: Optional[str] = None
    perfect_contact: bool = False
    painted_corner: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data

    @classmethod
    def from_dict(cls, d: dict) -> PlayByPlayEvent:
        return cls(**{**d, "outcome": OutcomeKind(d["outcome"])})


@dataclass(frozen=True)
class LootDrop:
    item: Item
    triggered_by: str
    player_name: str

    def to_dict(self) -> dict:
        return {
            "item": self.item.model_dump(mode="json", by_alias=True),
            "triggered_by": self.triggered_by,
            "player_name": self.player_name,
        }

    @classmethod
    def from_dict(cls, d: dict) -> LootDrop:
        return cls(Item.model_validate(d["item"]), d["triggered_by"], d["player_name"])


@dataclass(frozen=True)
class SpiritDelta:
    batter_id: str
    pitcher_id: str
    batter_delta: int
    pitcher_delta: int
    team_delta: int


# ---------------------------------------------------------------------------
# Match state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchState:
    """Complete, immutable snapshot of a match in progress."""
    teams: dict[Side, Team]
    lineups: dict[Side, tuple[str, ...]]
    rng: SeededRandomSource
    config: EngineConfig = DEFAULT_CONFIG
    inning: int = 1
    is_top: bool = True
    outs: int = 0
    bases: Bases = EMPTY_BASES
    runner_ids: RunnerIds = NO_RUNNERS
    runs: dict[Side, int] = field(default_factory=lambda: {Side.MY: 0, Side.OPPONENT: 0})
    hits: dict[Side, int] = field(default_factory=lambda: {Side.MY: 0, Side.OPPONENT: 0})
    line_score: dict[Side, tuple[int, ...]] = field(
        default_factory=lambda: {Side.MY: (), Side.OPPONENT: ()})
    batter_index: dict[Side, int] = field(default_factory=lambda: {Side.MY: 0, Side.OPPONENT: 0})
    pitcher_ids: dict[Side, str] = field(default_factory=dict)
    pitchers_used: dict[Side, tuple[str, ...]] = field(default_factory=dict)
    pitcher_innings: dict[Side, int] = field(default_factory=lambda: {Side.MY: 0, Side.OPPONENT: 0})
    extra_fatigue: dict[Side, float] = field(
        default_factory=lambda: {Side.MY: 0.0, Side.OPPONENT: 0.0})
    last_approach: Optional[BatterApproach] = None
    approach_streak: int = 0
    last_strategy: Optional[PitchStrategy] = None
    strategy_streak: int = 0
    last_pitcher_ability: dict[Side, Optional[str]] = field(
        default_factory=lambda: {Side.MY: None, Side.OPPONENT: None})
    scoped_effects: tuple[ScopedEffect, ...] = ()
    batting_lines: dict[str, BatterLine] = field(default_factory=dict)
    pitching_lines: dict[str, PitcherLine] = field(default_factory=dict)
    play_by_play: tuple[PlayByPlayEvent, ...] = ()
    loot_drops: tuple[LootDrop, ...] = ()
    synergies: dict[Side, ActiveSynergies] = field(default_factory=dict)
    last_spirit_delta: Optional[SpiritDelta] = None
    trace: Optional[tuple[dict, ...]] = None
    inning_complete: bool = False
    is_complete: bool = False

    @property
    def batting_side(self) -> Side:
        return Side.OPPONENT if self.is_top else Side.MY

    @property
    def fielding_side(self) -> Side:
        return self.batting_side.other

    @property
    def my_team(self) -> Team:
        return self.teams[Side.MY]

    @property
    def opponent_team(self) -> Team:
        return self.teams[Side.OPPONENT]

    @property
    def my_runs(self) -> int:
        return self.runs[Side.MY]

    @property
    def opponent_runs(self) -> int:
        return self.runs[Side.OPPONENT]

    def lineup(self, side: Side) -> list[Player]:
        team = self.teams[side]
        return [team.get_player(pid) for pid in self.lineups[side]]

    def current_batter_id(self) -> str:
        side = self.batting_side
        order = self.lineups[side]
        return order[self.batter_index[side] % len(order)]

    @property
    def current_batter(self) -> Player:
        return self.teams[self.batting_side].get_player(self.current_batter_id())

    @property
    def current_pitcher(self) -> Player:
        side = self.fielding_side
        return self.teams[side].get_player(self.pitcher_ids[side])

    def pitcher_fatigue(self, side: Side) -> FatigueLevel:
        return fatigue_level(self.pitcher_innings[side], self.extra_fatigue[side],
                             self.config.fatigue)

    def situation_display(self) -> str:
        half = "Top" if self.is_top else "Bot"
        on = [name for name, occupied in zip(("1st", "2nd", "3rd"), self.bases) if occupied]
        runners = "runners on " + ", ".join(on) if on else "bases empty"
        return (f"{half} {self.inning}, {self.outs} out, {runners}, "
                f"{self.opponent_team.name} {self.opponent_runs} - "
                f"{self.my_team.name} {self.my_runs}")


def _select_lineup(team: Team, size: int) -> tuple[str, ...]:
    return tuple(p.id for p in team.batters[:size])


def initialize(my_team: Team, opponent_team: Team, seed: int | SeededRandomSource, *,
               trace: bool = False, config: EngineConfig | None = None) -> MatchState:
    """Set up a fresh match. The opponent bats first."""
    config = config or DEFAULT_CONFIG
    for side, team in ((Side.MY, my_team), (Side.OPPONENT, opponent_team)):
        if not team.batters:
            raise MatchSetupError(f"{side.value} team {team.name!r} has no batters")
        if not team.pitchers:
            raise MatchSetupError(f"{side.value} team {team.name!r} has no pitchers")

    rng = seed if isinstance(seed, SeededRandomSource) else SeededRandomSource(seed)
    teams = {Side.MY: my_team, Side.OPPONENT: opponent_team}
    lineups = {side: _select_lineup(team, config.rules.lineup_size) for side, team in teams.items()}
    starters = {side: team.pitchers[0].id for side, team in teams.items()}

    state = MatchState(
        teams=teams,
        lineups=lineups,
        rng=rng.clone(),
        config=config,
        pitcher_ids=starters,
        pitchers_used={side: (pid,) for side, pid in starters.items()},
        synergies=_compute_synergies(teams, lineups),
        trace=() if trace else None,
    )
    logger.info("Match initialized: %s at %s (rng state %s)",
                opponent_team.name, my_team.name, state.rng.state)
    return state


def _compute_synergies(teams: dict[Side, Team],
                       lineups: dict[Side, tuple[str, ...]]) -> dict[Side, ActiveSynergies]:
    """Synergies over each side's batting lineup plus its whole staff."""
    result = {}
    for side, team in teams.items():
        members = [team.get_player(pid) for pid in lineups[side]] + team.pitchers
        result[side] = calculate_synergies(members)
    return result


# ---------------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------------

def _usable_ability(player: Player, ability_id: Optional[str]) -> Optional[str]:
    if not ability_id:
        return None
    check = can_activate(player, ability_id)
    if not check.ok:
        logger.info("Ability %s dropped for %s: %s", ability_id, player.name, check.reason)
        return None
    return ability_id


def _scoped_totals(state: MatchState, side: Side):
    effects = [e for scoped in state.scoped_effects if scoped.side == side
               for e in scoped.effects]
    return fold_effects(effects)


def _persisting_effects(side: Side, ability_id: str,
                        effects: tuple[AbilityEffect, ...]) -> list[ScopedEffect]:
    """Split out the inning- and game-scoped part of an activated ability.

    A defensive boost lasts as long as the longest stat modifier it ships
    with.
    """
    by_duration: dict[Duration, list[AbilityEffect]] = {}
    longest = Duration.AT_BAT
    for effect in effects:
        if isinstance(effect, StatModifier) and effect.duration != Duration.AT_BAT:
            by_duration.setdefault(effect.duration, []).append(effect)
            if effect.duration == Duration.GAME or longest == Duration.AT_BAT:
                longest = effect.duration
    if longest != Duration.AT_BAT:
        boosts = [e for e in effects if isinstance(e, DefensiveBoost)]
        by_duration.setdefault(longest, []).extend(boosts)
    return [ScopedEffect(side, duration, ability_id, tuple(items))
            for duration, items in by_duration.items()]


def _resolve_zone(state: MatchState, decision: AtBatDecision, batter: Player,
                  pitcher: Player, rng) -> tuple[Optional[ZoneModifier], Optional[str]]:
    """Zone modifier for the at-bat and which side it favours."""
    if decision.zone_modifier is not None:
        return decision.zone_modifier, "batter" if not state.is_top else "pitcher"
    if decision.swing_read is not None:
        aim = decision.pitch_aim or derive_pitch_tendency(pitcher)[0]
        landing = resolve_pitch_landing(aim, pitcher, rng)
        return (calc_batting_zone_modifier(decision.swing_read, landing,
                                           derive_zone_map(batter)), "batter")
    if decision.pitch_aim is not None:
        landing = resolve_pitch_landing(decision.pitch_aim, pitcher, rng)
        return (calc_pitching_zone_modifier(decision.pitch_aim, landing,
                                            derive_zone_map(batter)), "pitcher")
    return None, None


def _perfect_zone_bump(outcome: OutcomeKind, favours: str) -> OutcomeKind:
    """A perfect zone read moves the result one tier toward the reader."""
    if favours == "batter":
        if outcome == OutcomeKind.STRIKEOUT or outcome in BATTED_OUTS:
            return OutcomeKind.SINGLE
        if outcome == OutcomeKind.SINGLE:
            return OutcomeKind.DOUBLE
        return outcome
    if outcome in (OutcomeKind.SINGLE, OutcomeKind.DOUBLE, OutcomeKind.TRIPLE):
        return OutcomeKind.GROUNDOUT
    if outcome in BATTED_OUTS:
        return OutcomeKind.STRIKEOUT
    return outcome


def spirit_deltas(outcome: OutcomeKind, runs: int, cfg: SpiritConfig) -> tuple[int, int, int]:
    """(batter, pitcher, batting team) spirit momentum for one result."""
    batter = {
        OutcomeKind.SINGLE: cfg.single,
        OutcomeKind.DOUBLE: cfg.double,
        OutcomeKind.TRIPLE: cfg.triple,
        OutcomeKind.HOMERUN: cfg.homerun,
        OutcomeKind.WALK: cfg.walk,
        OutcomeKind.STRIKEOUT: cfg.strikeout,
    }.get(outcome, 0)
    if outcome == OutcomeKind.HOMERUN:
        pitcher = cfg.homerun_allowed
    elif describe(outcome).is_hit:
        pitcher = cfg.hit_allowed
    elif outcome == OutcomeKind.WALK:
        pitcher = cfg.walk_allowed
    elif outcome == OutcomeKind.STRIKEOUT:
        pitcher = cfg.pitch_strikeout
    else:
        pitcher = cfg.pitch_out
    team = 0
    if runs > 0:
        batter += cfg.rbi_bonus * runs
        pitcher += cfg.run_allowed * runs
        team = cfg.team_run_scored * runs
    return batter, pitcher, team


def _replace_player(team: Team, player: Player) -> Team:
    return team.model_copy(update={
        "roster": tuple(player if p.id == player.id else p for p in team.roster),
    })


def _nudge_spirit(team: Team, player_id: str, delta: int) -> Team:
    if delta == 0:
        return team
    player = team.get_player(player_id)
    return _replace_player(team, player.with_spirit(player.spirit.current + delta))


def _add_runs(line: tuple[int, ...], inning: int, runs: int) -> tuple[int, ...]:
    padded = list(line) + [0] * (inning - len(line))
    padded[inning - 1] += runs
    return tuple(padded)


def resolve_next_pitcher(pitchers: list[Player], current_id: str,
                         innings_completed: int, config: EngineConfig) -> str:
    """Starter, then first and second relievers by innings completed."""
    rot = config.rotation
    if len(pitchers) <= 1:
        return current_id
    if innings_completed >= rot.second_reliever_inning and len(pitchers) >= 3:
        return pitchers[2].id
    if innings_completed >= rot.first_reliever_inning:
        return pitchers[1].id
    return current_id


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

def step(state: MatchState, decision: AtBatDecision = NO_DECISION) -> MatchState:
    """Play one at-bat and return the resulting state."""
    if state.is_complete:
        raise MatchAlreadyCompleteError("Match is already complete", inning=state.inning)

    config = state.config
    rng = state.rng.clone()
    bat_side, field_side = state.batting_side, state.fielding_side
    batter = state.current_batter
    pitcher = state.current_pitcher

    # Tactics and adaptation; a missing choice leaves the previous one in place
    last_approach, approach_streak = state.last_approach, state.approach_streak
    if decision.approach is not None:
        approach_streak = next_streak(last_approach, decision.approach, approach_streak)
        last_approach = decision.approach
    last_strategy, strategy_streak = state.last_strategy, state.strategy_streak
    if decision.strategy is not None:
        strategy_streak = next_streak(last_strategy, decision.strategy, strategy_streak)
        last_strategy = decision.strategy
    scale = config.rules.adaptation_penalty_scale

    # Abilities
    batter_ability = _usable_ability(batter, decision.batter_ability_id)
    pitcher_ability = _usable_ability(pitcher, decision.pitcher_ability_id)
    batter_effects = (active_effects(batter, batter_ability, state.synergies[bat_side])
                      if batter_ability else ())
    pitcher_effects = (active_effects(pitcher, pitcher_ability, state.synergies[field_side])
                       if pitcher_ability else ())

    batting_scoped = _scoped_totals(state, bat_side)
    fielding_scoped = _scoped_totals(state, field_side)

    zone, favours = _resolve_zone(state, decision, batter, pitcher, rng)

    ctx = AtBatContext(
        pitcher_innings=state.pitcher_innings[field_side],
        pitcher_extra_fatigue=state.extra_fatigue[field_side],
        batter_effects=batter_effects,
        pitcher_effects=pitcher_effects,
        pitcher_ability_id=pitcher_ability,
        batter_scoped=batting_scoped.stats,
        pitcher_scoped=fielding_scoped.stats,
        scoped_negate_fatigue=fielding_scoped.negate_fatigue,
        defense_glove_bonus=fielding_scoped.stats.glove + fielding_scoped.glove_bonus,
        approach=decision.approach,
        strategy=decision.strategy,
        approach_multiplier=adaptation_multiplier(approach_streak, scale),
        strategy_multiplier=adaptation_multiplier(strategy_streak, scale),
        offense_synergies=state.synergies[bat_side],
        defense_synergies=state.synergies[field_side],
        zone=zone.deltas() if zone else NO_OUTCOME_DELTAS,
        repertoire_penalty=repertoire_penalty(pitcher, pitcher_ability,
                                              state.last_pitcher_ability[field_side]),
    )
    resolution = simulate_at_bat(batter, pitcher, state.lineup(field_side), rng, ctx, config)

    outcome = resolution.outcome
    if zone is not None and zone.is_perfect:
        outcome = _perfect_zone_bump(outcome, favours)
    desc = describe(outcome)

    # Bases, outs and runs
    advancement = advance_bases(outcome, state.bases)
    bases = advancement.bases
    runs = advancement.runs_scored
    outs = state.outs + int(desc.is_out)
    runner_ids, scorers = advance_runner_ids(outcome, state.runner_ids, batter.id)
    notes: tuple[str, ...] = ()
    extra_rolls: tuple[float, ...] = ()
    if outs < 3:
        synergy_speed = state.synergies[bat_side].batter_stat_bonuses.speed
        batting_team = state.teams[bat_side]

        def speed_of(player_id: str) -> float:
            runner = batting_team.get_player(player_id)
            if runner is None:
                return config.baserunning.default_runner_speed
            return derived_stats(runner).speed + synergy_speed

        extra = resolve_extra_base_attempts(
            outcome, state.bases, bases, runner_ids, outs, speed_of,
            resolution.defense_glove, rng, config.baserunning,
        )
        bases, runner_ids = extra.bases, extra.runner_ids
        runs += extra.extra_runs
        outs += extra.extra_outs
        scorers = scorers + list(extra.scored_ids)
        notes = extra.narratives
        extra_rolls = extra.rolls
    if outs >= 3:
        outs, runs, scorers = 3, 0, []

    # Box score
    batting_lines = dict(state.batting_lines)
    pitching_lines = dict(state.pitching_lines)
    batting_lines[batter.id] = credit_batter(
        batting_lines.get(batter.id, BatterLine()), outcome, runs)
    pitching_lines[pitcher.id] = credit_pitcher(
        pitching_lines.get(pitcher.id, PitcherLine()), outcome, runs, outs - state.outs)
    for runner_id in scorers:
        line = batting_lines.get(runner_id, BatterLine())
        batting_lines[runner_id] = replace(line, runs=line.runs + 1)

    new_runs = {**state.runs, bat_side: state.runs[bat_side] + runs}
    new_hits = {**state.hits, bat_side: state.hits[bat_side] + int(desc.is_hit)}
    line_score = {**state.line_score,
                  bat_side: _add_runs(state.line_score[bat_side], state.inning, runs)}

    # Narration
    narrative = f"{batter.name} {outcome_display_text(outcome, rng, rbi=runs)}"
    if notes:
        narrative += " - " + "; ".join(notes)

    event = PlayByPlayEvent(
        inning=state.inning, is_top=state.is_top,
        batter_id=batter.id, batter_name=batter.name,
        pitcher_id=pitcher.id, pitcher_name=pitcher.name,
        outcome=outcome, rbi=runs, outs=outs, narrative=narrative,
        my_runs=new_runs[Side.MY], opponent_runs=new_runs[Side.OPPONENT],
        approach=decision.approach.value if decision.approach else None,
        strategy=decision.strategy.value if decision.strategy else None,
        batter_ability_id=batter_ability, pitcher_ability_id=pitcher_ability,
        perfect_contact=bool(zone and zone.is_perfect and favours == "batter"),
        painted_corner=bool(zone and zone.is_perfect and favours == "pitcher"),
    )

    # Loot for my team's hits
    loot_drops = state.loot_drops
    if bat_side == Side.MY and desc.is_hit and should_drop_loot(outcome.value, rng):
        item = generate_item(batter.role, batter.level, rng)
        loot_drops = loot_drops + (LootDrop(item, outcome.value, batter.name),)
        logger.info("Loot drop for %s: %s (%s)", batter.name, item.name, item.rarity.value)

    # Spirit: activation costs, then momentum
    teams = dict(state.teams)
    if batter_ability:
        teams[bat_side] = _replace_player(teams[bat_side], activate(batter, batter_ability))
    if pitcher_ability:
        teams[field_side] = _replace_player(teams[field_side], activate(pitcher, pitcher_ability))
    batter_delta, pitcher_delta, team_delta = spirit_deltas(outcome, runs, config.spirit)
    teams[bat_side] = _nudge_spirit(teams[bat_side], batter.id, batter_delta)
    teams[field_side] = _nudge_spirit(teams[field_side], pitcher.id, pitcher_delta)
    if team_delta:
        for member in teams[bat_side].roster:
            teams[bat_side] = _nudge_spirit(teams[bat_side], member.id, team_delta)

    # Fatigue from tactics
    extra_fatigue = dict(state.extra_fatigue)
    if decision.approach is not None:
        extra_fatigue[field_side] += APPROACHES[decision.approach].fatigue_effect
    if decision.strategy is not None:
        extra_fatigue[field_side] += STRATEGIES[decision.strategy].fatigue_cost

    scoped = state.scoped_effects
    if batter_ability:
        scoped = scoped + tuple(_persisting_effects(bat_side, batter_ability, batter_effects))
    if pitcher_ability:
        scoped = scoped + tuple(_persisting_effects(field_side, pitcher_ability, pitcher_effects))

    trace = state.trace
    if trace is not None:
        trace = trace + (_trace_entry(state, batter, pitcher, resolution, outcome, zone,
                                      extra_rolls),)

    new_state = replace(
        state,
        rng=rng,
        teams=teams,
        outs=outs,
        bases=bases,
        runner_ids=runner_ids,
        runs=new_runs,
        hits=new_hits,
        line_score=line_score,
        batting_lines=batting_lines,
        pitching_lines=pitching_lines,
        play_by_play=state.play_by_play + (event,),
        loot_drops=loot_drops,
        extra_fatigue=extra_fatigue,
        scoped_effects=scoped,
        last_approach=last_approach,
        approach_streak=approach_streak,
        last_strategy=last_strategy,
        strategy_streak=strategy_streak,
        last_pitcher_ability={**state.last_pitcher_ability, field_side: pitcher_ability},
        last_spirit_delta=SpiritDelta(batter.id, pitcher.id, batter_delta, pitcher_delta,
                                      team_delta),
        trace=trace,
        inning_complete=False,
    )
    logger.debug("%s: %s", state.situation_display(), narrative)

    if outs >= 3:
        return _end_half_inning(new_state)
    return _next_batter(new_state)


def _trace_entry(state: MatchState, batter: Player, pitcher: Player,
                 resolution: AtBatResolution, outcome: OutcomeKind,
                 zone: Optional[ZoneModifier], extra_rolls: tuple[float, ...]) -> dict:
    return {
        "inning": state.inning,
        "is_top": state.is_top,
        "batter_id": batter.id,
        "pitcher_id": pitcher.id,
        "resolved": resolution.outcome.value,
        "outcome": outcome.value,
        "strikeout_chance": resolution.strikeout_chance,
        "walk_chance": resolution.walk_chance,
        "net_score": resolution.net_score,
        "hit_roll": resolution.hit_roll,
        "defense_glove": resolution.defense_glove,
        "guaranteed_winner": resolution.guaranteed.winner if resolution.guaranteed else None,
        "zone_perfect": bool(zone and zone.is_perfect),
        "rolls": [r.to_dict() for r in resolution.rolls],
        "extra_base_rolls": list(extra_rolls),
    }


def _next_batter(state: MatchState) -> MatchState:
    side = state.batting_side
    state = replace(state, batter_index={**state.batter_index,
                                         side: state.batter_index[side] + 1})
    rules = state.config.rules
    if not state.is_top and state.inning >= rules.regulation_innings and state.my_runs > state.opponent_runs:
        logger.info("Walk-off! %s wins %d-%d in the %d", state.my_team.name,
                    state.my_runs, state.opponent_runs, state.inning)
        return replace(state, is_complete=True)
    return state


def _rotate_pitcher(state: MatchState, side: Side, innings_completed: int) -> MatchState:
    team = state.teams[side]
    current = state.pitcher_ids[side]
    next_id = resolve_next_pitcher(team.pitchers, current, innings_completed, state.config)
    if next_id == current:
        return state
    logger.info("%s brings in %s", team.name, team.get_player(next_id).name)
    used = state.pitchers_used[side]
    return replace(
        state,
        pitcher_ids={**state.pitcher_ids, side: next_id},
        pitchers_used={**state.pitchers_used,
                       side: used if next_id in used else used + (next_id,)},
        pitcher_innings={**state.pitcher_innings, side: 0},
        extra_fatigue={**state.extra_fatigue, side: 0.0},
        last_pitcher_ability={**state.last_pitcher_ability, side: None},
    )


def _end_half_inning(state: MatchState) -> MatchState:
    rules = state.config.rules
    bat_side, field_side = state.batting_side, state.fielding_side
    state = replace(
        state,
        outs=0,
        bases=EMPTY_BASES,
        runner_ids=NO_RUNNERS,
        batter_index={**state.batter_index, bat_side: state.batter_index[bat_side] + 1},
        pitcher_innings={**state.pitcher_innings,
                         field_side: state.pitcher_innings[field_side] + 1},
        scoped_effects=tuple(s for s in state.scoped_effects if s.duration != Duration.INNING),
        last_approach=None,
        approach_streak=0,
        last_strategy=None,
        strategy_streak=0,
        inning_complete=True,
    )

    if state.is_top:
        if state.inning >= rules.regulation_innings and state.my_runs > state.opponent_runs:
            logger.info("Game over after the top of the %d: %s wins %d-%d", state.inning,
                        state.my_team.name, state.my_runs, state.opponent_runs)
            return replace(state, is_complete=True)
        state = replace(state, is_top=False)
        logger.info("--- Bottom of the %d --- %s", state.inning, state.situation_display())
        return _rotate_pitcher(state, Side.OPPONENT, state.inning - 1)

    if state.inning >= rules.regulation_innings and state.my_runs != state.opponent_runs:
        logger.info("Game over: %s %d - %s %d", state.my_team.name, state.my_runs,
                    state.opponent_team.name, state.opponent_runs)
        return replace(state, is_complete=True)
    if state.inning >= rules.max_innings:
        logger.info("Game stopped tied after %d innings", state.inning)
        return replace(state, is_complete=True)

    state = replace(state, inning=state.inning + 1, is_top=True)
    logger.info("--- Top of the %d --- %s", state.inning, state.situation_display())
    return _rotate_pitcher(state, Side.MY, state.inning - 1)


# ---------------------------------------------------------------------------
# Finalize
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchResult:
    my_runs: int
    opponent_runs: int
    is_win: bool
    cash_earned: int
    total_innings: int
    play_by_play: tuple[PlayByPlayEvent, ...]
    loot_drops: tuple[LootDrop, ...]
    box_score: dict
    roster_after: tuple[Player, ...]
    trace: Optional[tuple[dict, ...]] = None

    def to_dict(self) -> dict:
        return {
            "my_runs": self.my_runs,
            "opponent_runs": self.opponent_runs,
            "is_win": self.is_win,
            "cash_earned": self.cash_earned,
            "total_innings": self.total_innings,
            "play_by_play": [e.to_dict() for e in self.play_by_play],
            "loot_drops": [d.to_dict() for d in self.loot_drops],
            "box_score": self.box_score,
        }


class MatchRewards(NamedTuple):
    win: int
    loss: int

    @classmethod
    def from_config(cls, config: RewardConfig) -> MatchRewards:
        return cls(config.base_win, config.base_loss)


def finalize(state: MatchState, rewards: MatchRewards | None = None,
             fans: float = 1.0) -> MatchResult:
    """Summarize a completed match. Makes no draws and never mutates."""
    if not state.is_complete:
        raise MatchNotCompleteError("Match is not complete", inning=state.inning)

    rewards = rewards or MatchRewards.from_config(state.config.rewards)
    is_win = state.my_runs > state.opponent_runs
    cash = math.floor(rewards.win * fans) if is_win else rewards.loss
    regen = state.config.spirit.regen_per_match
    roster_after = tuple(
        regenerate_spirit(p, regen) if p.archetype is not None else p
        for p in state.my_team.roster
    )
    return MatchResult(
        my_runs=state.my_runs,
        opponent_runs=state.opponent_runs,
        is_win=is_win,
        cash_earned=cash,
        total_innings=state.inning,
        play_by_play=state.play_by_play,
        loot_drops=state.loot_drops,
        box_score=generate_box_score(state),
        roster_after=roster_after,
        trace=state.trace,
    )


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

def generate_box_score(state: MatchState) -> dict:
    """Generate a complete box score for the match."""
    def team_box(side: Side) -> dict:
        team = state.teams[side]
        batting = []
        for player in state.lineup(side):
            line = state.batting_lines.get(player.id, BatterLine())
            batting.append({"id": player.id, "name": player.name, **line.to_dict()})
        pitching = []
        for pid in state.pitchers_used.get(side, ()):
            line = state.pitching_lines.get(pid, PitcherLine())
            pitching.append({"id": pid, "name": team.get_player(pid).name, **line.to_dict()})
        inning_runs = list(state.line_score[side])
        innings_batted = state.inning if side == Side.OPPONENT or not state.is_top else state.inning - 1
        inning_runs += [0] * (innings_batted - len(inning_runs))
        return {
            "team_name": team.name,
            "inning_runs": inning_runs,
            "total_runs": state.runs[side],
            "total_hits": state.hits[side],
            "batting": batting,
            "pitching": pitching,
        }

    return {
        "away": team_box(Side.OPPONENT),
        "home": team_box(Side.MY),
        "final_score": {"away": state.opponent_runs, "home": state.my_runs},
        "innings": state.inning,
        "is_complete": state.is_complete,
    }


def format_box_score(box: dict) -> str:
    """Render a box score dict as a fixed-width table."""
    lines = ["=" * 72, "FINAL BOX SCORE" if box["is_complete"] else "BOX SCORE", "=" * 72]

    header = f"{'Team':<20}"
    for i in range(1, box["innings"] + 1):
        header += f" {i:>3}"
    header += "  |   R   H"
    lines.append(header)
    lines.append("-" * len(header))
    for side in ("away", "home"):
        team = box[side]
        row = f"{team['team_name']:<20}"
        for r in team["inning_runs"]:
            row += f" {r:>3}"
        row += " " * (4 * (box["innings"] - len(team["inning_runs"])))
        row += f"  | {team['total_runs']:>3} {team['total_hits']:>3}"
        lines.append(row)

    for side in ("away", "home"):
        team = box[side]
        lines.append(f"\n{team['team_name']} Batting:")
        lines.append(f"  {'Name':<20} {'AB':>3} {'H':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'K':>3} {'HR':>3}")
        for b in team["batting"]:
            lines.append(
                f"  {b['name']:<20} {b['AB']:>3} {b['H']:>3} {b['R']:>3} "
                f"{b['RBI']:>4} {b['BB']:>3} {b['K']:>3} {b['HR']:>3}"
            )

    for side in ("away", "home"):
        team = box[side]
        lines.append(f"\n{team['team_name']} Pitching:")
        lines.append(f"  {'Name':<20} {'IP':>5} {'H':>3} {'R':>3} {'BB':>3} {'K':>3} {'BF':>4}")
        for p in team["pitching"]:
            lines.append(
                f"  {p['name']:<20} {p['IP']:>5.1f} {p['H']:>3} {p['R']:>3} "
                f"{p['BB']:>3} {p['K']:>3} {p['BF']:>4}"
            )

    return "\n".join(lines)


def print_box_score(state: MatchState) -> str:
    """Generate a formatted box score string."""
    return format_box_score(generate_box_score(state))


# ---------------------------------------------------------------------------
# Serialization support
# ---------------------------------------------------------------------------

class _SavedMatch(BaseModel):
    """Shape check for persisted match state."""
    version: int
    rng_state: int
    config: EngineConfig
    teams: dict[Side, Team]
    lineups: dict[Side, list[str]]
    inning: int
    is_top: bool
    outs: int
    bases: tuple[bool, bool, bool]
    runner_ids: tuple[Optional[str], Optional[str], Optional[str]]
    runs: dict[Side, int]
    hits: dict[Side, int]
    line_score: dict[Side, list[int]]
    batter_index: dict[Side, int]
    pitcher_ids: dict[Side, str]
    pitchers_used: dict[Side, list[str]]
    pitcher_innings: dict[Side, int]
    extra_fatigue: dict[Side, float]
    last_approach: Optional[BatterApproach] = None
    approach_streak: int = 0
    last_strategy: Optional[PitchStrategy] = None
    strategy_streak: int = 0
    last_pitcher_ability: dict[Side, Optional[str]]
    scoped_effects: list[dict]
    batting_lines: dict[str, dict]
    pitching_lines: dict[str, dict]
    play_by_play: list[dict]
    loot_drops: list[dict]
    trace: Optional[list[dict]] = None
    inning_complete: bool = False
    is_complete: bool = False


SAVE_VERSION = 1


def match_state_to_dict(state: MatchState) -> dict:
    """Serialize match state to a JSON-safe dict.

    The random source is stored as its integer state only; synergies are
    derived data and are recomputed on load.
    """
    def by_side(d: dict) -> dict:
        return {side.value: value for side, value in d.items()}

    return {
        "version": SAVE_VERSION,
        "rng_state": state.rng.state,
        "config": state.config.model_dump(mode="json"),
        "teams": {side.value: team.model_dump(mode="json", by_alias=True)
                  for side, team in state.teams.items()},
        "lineups": by_side({s: list(v) for s, v in state.lineups.items()}),
        "inning": state.inning,
        "is_top": state.is_top,
        "outs": state.outs,
        "bases": list(state.bases),
        "runner_ids": list(state.runner_ids),
        "runs": by_side(state.runs),
        "hits": by_side(state.hits),
        "line_score": by_side({s: list(v) for s, v in state.line_score.items()}),
        "batter_index": by_side(state.batter_index),
        "pitcher_ids": by_side(state.pitcher_ids),
        "pitchers_used": by_side({s: list(v) for s, v in state.pitchers_used.items()}),
        "pitcher_innings": by_side(state.pitcher_innings),
        "extra_fatigue": by_side(state.extra_fatigue),
        "last_approach": state.last_approach.value if state.last_approach else None,
        "approach_streak": state.approach_streak,
        "last_strategy": state.last_strategy.value if state.last_strategy else None,
        "strategy_streak": state.strategy_streak,
        "last_pitcher_ability": by_side(state.last_pitcher_ability),
        "scoped_effects": [s.to_dict() for s in state.scoped_effects],
        "batting_lines": {pid: line.to_dict() for pid, line in state.batting_lines.items()},
        "pitching_lines": {pid: line.to_dict() for pid, line in state.pitching_lines.items()},
        "play_by_play": [e.to_dict() for e in state.play_by_play],
        "loot_drops": [d.to_dict() for d in state.loot_drops],
        "trace": list(state.trace) if state.trace is not None else None,
        "inning_complete": state.inning_complete,
        "is_complete": state.is_complete,
    }


def match_state_from_dict(data: dict) -> MatchState:
    """Restore a match saved with ``match_state_to_dict``.

    The random source resumes from the stored state without re-mixing it,
    so the restored match continues the exact same draw sequence.
    """
    try:
        saved = _SavedMatch.model_validate(data)
    except ValidationError as exc:
        raise MatchStateDecodeError(
            f"Saved match failed validation with {exc.error_count()} error(s)",
            validation_errors=exc.errors(),
        ) from exc
    if saved.version != SAVE_VERSION:
        raise MatchStateDecodeError(f"Unsupported save version {saved.version}")

    try:
        lineups = {side: tuple(ids) for side, ids in saved.lineups.items()}
        for side, ids in lineups.items():
            team = saved.teams[side]
            missing = [pid for pid in ids if team.get_player(pid) is None]
            missing += [pid for pid in (saved.pitcher_ids[side],) if team.get_player(pid) is None]
            if missing:
                raise ValueError(f"{side.value} team is missing players {missing}")
        state = MatchState(
            teams=dict(saved.teams),
            lineups=lineups,
            rng=SeededRandomSource.from_state(saved.rng_state),
            config=saved.config,
            inning=saved.inning,
            is_top=saved.is_top,
            outs=saved.outs,
            bases=Bases(*saved.bases),
            runner_ids=saved.runner_ids,
            runs=dict(saved.runs),
            hits=dict(saved.hits),
            line_score={s: tuple(v) for s, v in saved.line_score.items()},
            batter_index=dict(saved.batter_index),
            pitcher_ids=dict(saved.pitcher_ids),
            pitchers_used={s: tuple(v) for s, v in saved.pitchers_used.items()},
            pitcher_innings=dict(saved.pitcher_innings),
            extra_fatigue=dict(saved.extra_fatigue),
            last_approach=saved.last_approach,
            approach_streak=saved.approach_streak,
            last_strategy=saved.last_strategy,
            strategy_streak=saved.strategy_streak,
            last_pitcher_ability=dict(saved.last_pitcher_ability),
            scoped_effects=tuple(ScopedEffect.from_dict(s) for s in saved.scoped_effects),
            batting_lines={pid: BatterLine.from_dict(d) for pid, d in saved.batting_lines.items()},
            pitching_lines={pid: PitcherLine.from_dict(d)
                            for pid, d in saved.pitching_lines.items()},
            play_by_play=tuple(PlayByPlayEvent.from_dict(e) for e in saved.play_by_play),
            loot_drops=tuple(LootDrop.from_dict(d) for d in saved.loot_drops),
            synergies=_compute_synergies(saved.teams, lineups),
            trace=tuple(saved.trace) if saved.trace is not None else None,
            inning_complete=saved.inning_complete,
            is_complete=saved.is_complete,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MatchStateDecodeError(f"Saved match is inconsistent: {exc}") from exc
    return state
