# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Single at-bat resolution.

An at-bat resolves in a fixed order:

1. Guaranteed-outcome abilities bypass everything else (with a clash roll
   when both sides bring one).
2. Strikeout check.
3. Walk check.
4. Hit roll against the single/double/triple/home run thresholds.
5. Out type for everything below the single threshold.

Each check is one draw from the caller's random source, so a fixed source
and identical inputs always produce the same outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from abilities import passive_outcome_deltas
from approaches import APPROACHES, STRATEGIES, BatterApproach, PitchStrategy, scaled_outcomes
from config import DEFAULT_CONFIG, EngineConfig
from effects import (
    NO_OUTCOME_DELTAS,
    NO_STAT_DELTAS,
    AbilityEffect,
    EffectTotals,
    GuaranteedResolution,
    OutcomeDeltas,
    StatDeltas,
    fold_effects,
    resolve_guaranteed,
)
from models import Player
from outcomes import OutcomeKind
from stats import derived_stats, fatigue_multiplier, passive_negates_fatigue
from synergy import ActiveSynergies

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Inputs and results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AtBatContext:
    """Everything besides the two players that shapes one at-bat."""
    pitcher_innings: float = 0
    pitcher_extra_fatigue: float = 0
    batter_effects: tuple[AbilityEffect, ...] = ()
    pitcher_effects: tuple[AbilityEffect, ...] = ()
    pitcher_ability_id: Optional[str] = None
    batter_scoped: StatDeltas = NO_STAT_DELTAS
    pitcher_scoped: StatDeltas = NO_STAT_DELTAS
    scoped_negate_fatigue: bool = False
    defense_glove_bonus: float = 0
    approach: Optional[BatterApproach] = None
    strategy: Optional[PitchStrategy] = None
    approach_multiplier: float = 1.0
    strategy_multiplier: float = 1.0
    offense_synergies: Optional[ActiveSynergies] = None
    defense_synergies: Optional[ActiveSynergies] = None
    zone: OutcomeDeltas = NO_OUTCOME_DELTAS
    repertoire_penalty: int = 0


@dataclass(frozen=True)
class BatterRatings:
    power: float
    contact: float
    glove: float
    speed: float


@dataclass(frozen=True)
class PitcherRatings:
    velocity: float
    control: float
    break_: float


@dataclass(frozen=True)
class Roll:
    """One draw and the threshold it was compared against, for traces."""
    label: str
    value: float
    threshold: Optional[float] = None

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value, "threshold": self.threshold}


@dataclass(frozen=True)
class AtBatResolution:
    outcome: OutcomeKind
    batter: BatterRatings
    pitcher: PitcherRatings
    defense_glove: float
    deltas: OutcomeDeltas
    strikeout_chance: Optional[float] = None
    walk_chance: Optional[float] = None
    net_score: Optional[float] = None
    hit_roll: Optional[float] = None
    guaranteed: Optional[GuaranteedResolution] = None
    rolls: tuple[Roll, ...] = field(default=())


def _clamp(v: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, v))


# ---------------------------------------------------------------------------
# Effective stats
# ---------------------------------------------------------------------------

def effective_batter(batter: Player, ctx: AtBatContext, ability: EffectTotals) -> BatterRatings:
    """Derived stats, then synergy, approach, abilities; clamped."""
    s = derived_stats(batter)
    power, contact, glove, speed = s.power, s.contact, s.glove, s.speed

    if ctx.offense_synergies is not None:
        syn = ctx.offense_synergies.batter_stat_bonuses
        power += syn.power
        contact += syn.contact
        glove += syn.glove
        speed += syn.speed

    if ctx.approach is not None:
        mods = APPROACHES[ctx.approach].stats
        power = max(1, power + round(mods.power * ctx.approach_multiplier))
        contact = max(1, contact + round(mods.contact * ctx.approach_multiplier))

    boost = ability.stats + ctx.batter_scoped
    return BatterRatings(
        power=_clamp(power + boost.power),
        contact=_clamp(contact + boost.contact),
        glove=_clamp(glove + boost.glove),
        speed=_clamp(speed + boost.speed),
    )


def effective_pitcher(pitcher: Player, ctx: AtBatContext, ability: EffectTotals,
                      config: EngineConfig = DEFAULT_CONFIG) -> PitcherRatings:
    """Derived stats, then synergy, fatigue, strategy, abilities; clamped."""
    s = derived_stats(pitcher)
    velocity, control, brk = s.velocity, s.control, s.break_

    if ctx.defense_synergies is not None:
        syn = ctx.defense_synergies.pitcher_stat_bonuses
        velocity += syn.velocity
        control += syn.control
        brk += syn.break_

    negate = (ability.negate_fatigue or ctx.scoped_negate_fatigue
              or passive_negates_fatigue(pitcher))
    if not negate:
        mult = fatigue_multiplier(ctx.pitcher_innings + ctx.pitcher_extra_fatigue, config.fatigue)
        velocity *= mult
        control *= mult
        brk *= mult

    if ctx.strategy is not None:
        mods = STRATEGIES[ctx.strategy].stats
        velocity = max(1, velocity + round(mods.velocity * ctx.strategy_multiplier))
        control = max(1, control + round(mods.control * ctx.strategy_multiplier))
        brk = max(1, brk + round(mods.break_ * ctx.strategy_multiplier))

    boost = ability.stats + ctx.pitcher_scoped
    velocity += boost.velocity
    control += boost.control
    brk += boost.break_
    if ctx.repertoire_penalty:
        brk = max(0, brk - ctx.repertoire_penalty)

    return PitcherRatings(
        velocity=_clamp(velocity), control=_clamp(control), break_=_clamp(brk),
    )


def defense_glove(defense: Sequence[Player], ctx: AtBatContext,
                  config: EngineConfig = DEFAULT_CONFIG) -> float:
    """Average glove of the fielding batters plus team-wide boosts."""
    gloves = [derived_stats(p).glove for p in defense if p.is_batter]
    glove = sum(gloves) / len(gloves) if gloves else config.at_bat.default_glove
    if ctx.defense_synergies is not None:
        glove += ctx.defense_synergies.batter_stat_bonuses.glove
    return glove + ctx.defense_glove_bonus


def total_outcome_deltas(batter: Player, pitcher: Player, ctx: AtBatContext,
                         batter_totals: EffectTotals,
                         pitcher_totals: EffectTotals) -> OutcomeDeltas:
    total = (batter_totals.outcomes + pitcher_totals.outcomes
             + passive_outcome_deltas(batter) + passive_outcome_deltas(pitcher))
    if ctx.offense_synergies is not None:
        total = total + ctx.offense_synergies.outcome_deltas
    if ctx.defense_synergies is not None:
        total = total + ctx.defense_synergies.outcome_deltas
    if ctx.approach is not None:
        total = total + scaled_outcomes(APPROACHES[ctx.approach], ctx.approach_multiplier)
    if ctx.strategy is not None:
        total = total + scaled_outcomes(STRATEGIES[ctx.strategy], ctx.strategy_multiplier)
    return total + ctx.zone


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def strikeout_chance(b: BatterRatings, p: PitcherRatings, delta: float,
                     config: EngineConfig = DEFAULT_CONFIG) -> float:
    c = config.at_bat
    base = max(0.0, (p.velocity + p.break_ + p.control * c.strikeout_control_weight
                     - b.contact) / c.strikeout_divisor)
    return max(0.0, base + delta)


def walk_chance(b: BatterRatings, p: PitcherRatings, delta: float,
                config: EngineConfig = DEFAULT_CONFIG) -> float:
    c = config.at_bat
    base = ((100 - p.control) / c.walk_wildness_divisor
            + max(0.0, b.contact - c.walk_discipline_threshold) / c.walk_discipline_divisor)
    return max(0.0, base + delta)


def net_score(b: BatterRatings, p: PitcherRatings, glove: float, delta: float,
              config: EngineConfig = DEFAULT_CONFIG) -> float:
    c = config.at_bat
    raw = ((b.power + b.contact) * c.batter_score_multiplier
           - (p.velocity + p.break_ + p.control) * c.pitcher_score_multiplier
           - glove * c.defense_score_multiplier)
    return _clamp(raw, c.min_net_score, c.max_net_score) + delta


def classify_hit(hit_roll: float, config: EngineConfig = DEFAULT_CONFIG) -> Optional[OutcomeKind]:
    c = config.at_bat
    if hit_roll > c.homerun_threshold:
        return OutcomeKind.HOMERUN
    if hit_roll > c.triple_threshold:
        return OutcomeKind.TRIPLE
    if hit_roll > c.double_threshold:
        return OutcomeKind.DOUBLE
    if hit_roll > c.single_threshold:
        return OutcomeKind.SINGLE
    return None


def classify_out(roll: float, config: EngineConfig = DEFAULT_CONFIG) -> OutcomeKind:
    c = config.at_bat
    if roll < c.groundout_share:
        return OutcomeKind.GROUNDOUT
    if roll < c.groundout_share + c.flyout_share:
        return OutcomeKind.FLYOUT
    if roll < c.groundout_share + c.flyout_share + c.lineout_share:
        return OutcomeKind.LINEOUT
    return OutcomeKind.POPOUT


def simulate_at_bat(batter: Player, pitcher: Player, defense: Sequence[Player], rng,
                    ctx: AtBatContext = AtBatContext(),
                    config: EngineConfig = DEFAULT_CONFIG) -> AtBatResolution:
    """Resolve one plate appearance between ``batter`` and ``pitcher``."""
    batter_totals = fold_effects(ctx.batter_effects)
    pitcher_totals = fold_effects(ctx.pitcher_effects)
    b = effective_batter(batter, ctx, batter_totals)
    p = effective_pitcher(pitcher, ctx, pitcher_totals, config)
    glove = defense_glove(defense, ctx, config) + pitcher_totals.glove_bonus
    deltas = total_outcome_deltas(batter, pitcher, ctx, batter_totals, pitcher_totals)

    guaranteed = resolve_guaranteed(batter_totals.guaranteed, pitcher_totals.guaranteed,
                                    rng, ctx.pitcher_ability_id)
    if guaranteed is not None:
        logger.debug("%s vs %s: guaranteed %s (%s wins)", batter.name, pitcher.name,
                     guaranteed.outcome.value, guaranteed.winner)
        return AtBatResolution(
            outcome=guaranteed.outcome, batter=b, pitcher=p, defense_glove=glove,
            deltas=deltas, guaranteed=guaranteed,
            rolls=tuple(Roll("guaranteed", r) for r in guaranteed.rolls),
        )

    rolls: list[Roll] = []

    k = strikeout_chance(b, p, deltas.strikeout, config)
    k_roll = rng.random() * 100
    rolls.append(Roll("strikeout", k_roll, k))
    if k_roll < k:
        return AtBatResolution(OutcomeKind.STRIKEOUT, b, p, glove, deltas,
                               strikeout_chance=k, rolls=tuple(rolls))

    bb = walk_chance(b, p, deltas.walk, config)
    bb_roll = rng.random() * 100
    rolls.append(Roll("walk", bb_roll, bb))
    if bb_roll < bb:
        return AtBatResolution(OutcomeKind.WALK, b, p, glove, deltas,
                               strikeout_chance=k, walk_chance=bb, rolls=tuple(rolls))

    net = net_score(b, p, glove, deltas.hit, config)
    raw = rng.random() * 100
    hit_roll = (raw + net + (b.power - 50) * config.at_bat.power_hit_bonus_weight
                + deltas.homerun)
    rolls.append(Roll("hit", hit_roll, config.at_bat.single_threshold))
    outcome = classify_hit(hit_roll, config)
    if outcome is None:
        out_roll = rng.random()
        rolls.append(Roll("out_type", out_roll))
        outcome = classify_out(out_roll, config)

    logger.debug("%s vs %s: K=%.1f BB=%.1f net=%.1f roll=%.1f -> %s",
                 batter.name, pitcher.name, k, bb, net, hit_roll, outcome.value)
    return AtBatResolution(
        outcome=outcome, batter=b, pitcher=p, defense_glove=glove, deltas=deltas,
        strikeout_chance=k, walk_chance=bb, net_score=net, hit_roll=hit_roll,
        rolls=tuple(rolls),
    )
