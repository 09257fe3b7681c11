# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Decision interfaces between the match engine and whoever manages a side.

Providers see a ``DecisionSnapshot`` of the at-bat from one perspective
(batting or pitching) plus a random source of their own. They never touch
the match's source, so swapping policies cannot change the engine's draw
sequence for a given decision stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from abilities import can_activate
from approaches import BatterApproach, PitchStrategy
from match_engine import AtBatDecision, MatchState, MatchStateError, step
from models import BatterStats, PitcherStats
from random_source import SeededRandomSource
from stats import FatigueLevel, derived_stats
from techniques import get_technique

logger = logging.getLogger(__name__)

Perspective = Literal["batting", "pitching"]

DEFAULT_MAX_STEPS = 1000


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

class DecisionSnapshot(BaseModel):
    """What a manager knows when making a call for one at-bat."""
    model_config = ConfigDict(frozen=True)

    perspective: Perspective
    inning: int = Field(ge=1)
    is_top: bool
    outs: int = Field(ge=0, le=2)
    bases: tuple[bool, bool, bool]
    my_runs: int = Field(ge=0)
    opponent_runs: int = Field(ge=0)
    batting_runs: int = Field(ge=0)
    fielding_runs: int = Field(ge=0)

    batter_id: str
    batter_name: str
    batter_stats: BatterStats
    batter_spirit: int = Field(ge=0)
    pitcher_id: str
    pitcher_name: str
    pitcher_stats: PitcherStats
    pitcher_spirit: int = Field(ge=0)
    pitcher_fatigue: FatigueLevel

    available_abilities: tuple[str, ...] = ()
    last_approach: Optional[BatterApproach] = None
    approach_streak: int = Field(default=0, ge=0)
    last_strategy: Optional[PitchStrategy] = None
    strategy_streak: int = Field(default=0, ge=0)

    @property
    def run_differential(self) -> int:
        """Runs ahead (positive) or behind from the acting side's view."""
        if self.perspective == "batting":
            return self.batting_runs - self.fielding_runs
        return self.fielding_runs - self.batting_runs

    @property
    def runners_in_scoring_position(self) -> bool:
        return self.bases[1] or self.bases[2]


def _affordable_actives(player) -> tuple[str, ...]:
    ids = []
    for owned in player.abilities:
        ability = get_technique(owned.ability_id)
        if ability is None or ability.is_passive:
            continue
        if can_activate(player, owned.ability_id).ok:
            ids.append(owned.ability_id)
    return tuple(ids)


def build_snapshot(state: MatchState, perspective: Perspective) -> DecisionSnapshot:
    """Build the snapshot for the side currently batting or pitching."""
    batter = state.current_batter
    pitcher = state.current_pitcher
    actor = batter if perspective == "batting" else pitcher
    return DecisionSnapshot(
        perspective=perspective,
        inning=state.inning,
        is_top=state.is_top,
        outs=state.outs,
        bases=tuple(state.bases),
        my_runs=state.my_runs,
        opponent_runs=state.opponent_runs,
        batting_runs=state.runs[state.batting_side],
        fielding_runs=state.runs[state.fielding_side],
        batter_id=batter.id,
        batter_name=batter.name,
        batter_stats=derived_stats(batter),
        batter_spirit=batter.spirit.current,
        pitcher_id=pitcher.id,
        pitcher_name=pitcher.name,
        pitcher_stats=derived_stats(pitcher),
        pitcher_spirit=pitcher.spirit.current,
        pitcher_fatigue=state.pitcher_fatigue(state.fielding_side),
        available_abilities=_affordable_actives(actor),
        last_approach=state.last_approach,
        approach_streak=state.approach_streak,
        last_strategy=state.last_strategy,
        strategy_streak=state.strategy_streak,
    )


# ---------------------------------------------------------------------------
# Provider protocols
# ---------------------------------------------------------------------------

class ApproachProvider(Protocol):
    def choose_approach(self, snapshot: DecisionSnapshot, rng) -> BatterApproach: ...


class StrategyProvider(Protocol):
    def choose_strategy(self, snapshot: DecisionSnapshot, rng) -> PitchStrategy: ...


class AbilityProvider(Protocol):
    def choose_ability(self, snapshot: DecisionSnapshot, rng) -> Optional[str]: ...


class BattingPolicy(ApproachProvider, AbilityProvider, Protocol):
    pass


class PitchingPolicy(StrategyProvider, AbilityProvider, Protocol):
    pass


# ---------------------------------------------------------------------------
# Reference policies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FixedPolicy:
    """Same approach and strategy every time, never an ability."""
    approach: BatterApproach = BatterApproach.CONTACT
    strategy: PitchStrategy = PitchStrategy.FINESSE

    def choose_approach(self, snapshot: DecisionSnapshot, rng) -> BatterApproach:
        return self.approach

    def choose_strategy(self, snapshot: DecisionSnapshot, rng) -> PitchStrategy:
        return self.strategy

    def choose_ability(self, snapshot: DecisionSnapshot, rng) -> Optional[str]:
        return None


@dataclass(frozen=True)
class RandomPolicy:
    """Uniform tactics, with an affordable ability some of the time."""
    ability_rate: float = 0.25

    def choose_approach(self, snapshot: DecisionSnapshot, rng) -> BatterApproach:
        return rng.pick(list(BatterApproach))

    def choose_strategy(self, snapshot: DecisionSnapshot, rng) -> PitchStrategy:
        return rng.pick(list(PitchStrategy))

    def choose_ability(self, snapshot: DecisionSnapshot, rng) -> Optional[str]:
        if not snapshot.available_abilities or not rng.next_bool(self.ability_rate):
            return None
        return rng.pick(snapshot.available_abilities)


# ---------------------------------------------------------------------------
# Driving a match
# ---------------------------------------------------------------------------

def decision_source(state: MatchState) -> SeededRandomSource:
    """Independent source for providers, seeded from the match position."""
    return SeededRandomSource(state.rng.state)


def decide(state: MatchState, batting_policy: BattingPolicy,
           pitching_policy: PitchingPolicy, rng=None) -> AtBatDecision:
    """Ask both dugouts for their calls on the current at-bat."""
    rng = rng or decision_source(state)
    batting = build_snapshot(state, "batting")
    pitching = build_snapshot(state, "pitching")
    return AtBatDecision(
        approach=batting_policy.choose_approach(batting, rng),
        batter_ability_id=batting_policy.choose_ability(batting, rng),
        strategy=pitching_policy.choose_strategy(pitching, rng),
        pitcher_ability_id=pitching_policy.choose_ability(pitching, rng),
    )


def run_to_completion(state: MatchState, batting_policy: BattingPolicy,
                      pitching_policy: PitchingPolicy,
                      max_steps: int = DEFAULT_MAX_STEPS, rng=None) -> MatchState:
    """Step until the match ends.

    Raises MatchStateError if the match is still going after ``max_steps``
    at-bats.
    """
    rng = rng or decision_source(state)
    steps = 0
    while not state.is_complete:
        if steps >= max_steps:
            raise MatchStateError(
                f"Match did not complete within {max_steps} at-bats",
                inning=state.inning,
            )
        state = step(state, decide(state, batting_policy, pitching_policy, rng))
        steps += 1
    logger.info("Match complete after %d at-bats", steps)
    return state
