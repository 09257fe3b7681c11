# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Plate-appearance outcomes, base advancement and box-score accounting.

Everything here is a pure function of its inputs: a base state and an
outcome go in, a new base state and the runs that scored come out. The only
stochastic piece, extra-base attempts, draws from a source handed in by the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, NamedTuple, Optional

from config import BaserunningConfig


# ---------------------------------------------------------------------------
# Outcome taxonomy
# ---------------------------------------------------------------------------

class OutcomeKind(str, Enum):
    STRIKEOUT = "strikeout"
    WALK = "walk"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOMERUN = "homerun"
    GROUNDOUT = "groundout"
    FLYOUT = "flyout"
    LINEOUT = "lineout"
    POPOUT = "popout"


@dataclass(frozen=True)
class OutcomeDescriptor:
    counts_as_at_bat: bool
    is_hit: bool
    is_out: bool
    is_strikeout: bool
    is_walk: bool
    batter_reaches_base: Optional[int]
    display_text: str
    display_variants: tuple[str, ...]
    color_type: str  # "positive", "negative" or "neutral"
    highlight_word: str


OUTCOME_TABLE: dict[OutcomeKind, OutcomeDescriptor] = {
    OutcomeKind.STRIKEOUT: OutcomeDescriptor(
        True, False, True, True, False, None, "goes down",
        ("goes down swinging", "goes down looking", "goes down on strikes"),
        "negative", "goes down",
    ),
    OutcomeKind.WALK: OutcomeDescriptor(
        False, False, False, False, True, 1, "walks",
        ("draws a walk", "works a walk", "takes ball four"),
        "positive", "walk",
    ),
    OutcomeKind.SINGLE: OutcomeDescriptor(
        True, True, False, False, False, 1, "singles",
        ("hits a single", "slaps a single", "pokes a single"),
        "positive", "single",
    ),
    OutcomeKind.DOUBLE: OutcomeDescriptor(
        True, True, False, False, False, 2, "doubles",
        ("rips a double", "drives a double", "hits a two-bagger"),
        "positive", "double",
    ),
    OutcomeKind.TRIPLE: OutcomeDescriptor(
        True, True, False, False, False, 3, "triples",
        ("smacks a triple", "legs out a triple", "hits a three-bagger"),
        "positive", "triple",
    ),
    OutcomeKind.HOMERUN: OutcomeDescriptor(
        True, True, False, False, False, 4, "homers",
        ("crushes a home run", "goes yard", "launches one", "hits it out"),
        "positive", "home run",
    ),
    OutcomeKind.GROUNDOUT: OutcomeDescriptor(
        True, False, True, False, False, None, "rolls one",
        ("rolls one to the infield", "bounces one", "hits a grounder"),
        "negative", "rolls one",
    ),
    OutcomeKind.FLYOUT: OutcomeDescriptor(
        True, False, True, False, False, None, "flies out",
        ("flies out to the outfield", "lifts a fly ball for an out", "skies one for an out"),
        "negative", "out",
    ),
    OutcomeKind.LINEOUT: OutcomeDescriptor(
        True, False, True, False, False, None, "lines out",
        ("hits a line drive right at someone", "smokes one for an out", "lines into an out"),
        "negative", "out",
    ),
    OutcomeKind.POPOUT: OutcomeDescriptor(
        True, False, True, False, False, None, "pops up",
        ("pops up", "hits a pop fly", "lifts one up"),
        "negative", "pops up",
    ),
}

BATTED_OUTS = (OutcomeKind.GROUNDOUT, OutcomeKind.FLYOUT, OutcomeKind.LINEOUT, OutcomeKind.POPOUT)


def describe(kind: OutcomeKind) -> OutcomeDescriptor:
    return OUTCOME_TABLE[kind]


def outcome_display_text(kind: OutcomeKind, rng, rbi: int = 0) -> str:
    """Pick a display phrase for the outcome, appending RBI info."""
    desc = OUTCOME_TABLE[kind]
    text = rng.pick((desc.display_text, *desc.display_variants))
    if rbi > 0:
        text += f", {rbi} RBI"
    return text


# ---------------------------------------------------------------------------
# Base advancement
# ---------------------------------------------------------------------------

class Bases(NamedTuple):
    first: bool = False
    second: bool = False
    third: bool = False

    def count(self) -> int:
        return int(self.first) + int(self.second) + int(self.third)

    def is_loaded(self) -> bool:
        return self.first and self.second and self.third

    def to_string(self) -> str:
        """Return base state string like '110' for runners on 1st and 2nd."""
        return "".join("1" if b else "0" for b in self)


EMPTY_BASES = Bases()


class Advancement(NamedTuple):
    bases: Bases
    runs_scored: int


def advance_bases(kind: OutcomeKind, bases: Bases) -> Advancement:
    """Move runners for an outcome; every runner advances the same number of
    bases as the batter, except on walks where only forced runners move."""
    first, second, third = bases
    if kind == OutcomeKind.WALK:
        return Advancement(
            Bases(True, first or second, (first and second) or third),
            1 if bases.is_loaded() else 0,
        )
    if kind == OutcomeKind.SINGLE:
        return Advancement(Bases(True, first, second), int(third))
    if kind == OutcomeKind.DOUBLE:
        return Advancement(Bases(False, True, first), int(second) + int(third))
    if kind == OutcomeKind.TRIPLE:
        return Advancement(Bases(False, False, True), bases.count())
    if kind == OutcomeKind.HOMERUN:
        return Advancement(EMPTY_BASES, bases.count() + 1)
    return Advancement(bases, 0)


RunnerIds = tuple[Optional[str], Optional[str], Optional[str]]

NO_RUNNERS: RunnerIds = (None, None, None)


def advance_runner_ids(kind: OutcomeKind, runners: RunnerIds,
                       batter_id: str) -> tuple[RunnerIds, list[str]]:
    """Mirror ``advance_bases`` for runner identities.

    Returns the new runner ids and the ids of runners (not the batter) who
    crossed the plate.
    """
    r1, r2, r3 = runners
    if kind == OutcomeKind.WALK:
        scored = [r3] if (r1 and r2 and r3) else []
        new_third = (r2 if (r1 and r2) else None) or r3
        return (batter_id, r1 or r2, new_third), scored
    if kind == OutcomeKind.SINGLE:
        return (batter_id, r1, r2), [r for r in (r3,) if r]
    if kind == OutcomeKind.DOUBLE:
        return (None, batter_id, r1), [r for r in (r2, r3) if r]
    if kind == OutcomeKind.TRIPLE:
        return (None, None, batter_id), [r for r in (r1, r2, r3) if r]
    if kind == OutcomeKind.HOMERUN:
        return NO_RUNNERS, [r for r in (r1, r2, r3) if r]
    return runners, []


# ---------------------------------------------------------------------------
# Box-score lines
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BatterLine:
    at_bats: int = 0
    hits: int = 0
    runs: int = 0
    rbis: int = 0
    walks: int = 0
    strikeouts: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0

    @property
    def plate_appearances(self) -> int:
        return self.at_bats + self.walks

    def to_dict(self) -> dict:
        return {
            "AB": self.at_bats, "H": self.hits, "R": self.runs,
            "RBI": self.rbis, "BB": self.walks, "K": self.strikeouts,
            "2B": self.doubles, "3B": self.triples, "HR": self.home_runs,
        }

    @classmethod
    def from_dict(cls, d: dict) -> BatterLine:
        return cls(
            at_bats=d["AB"], hits=d["H"], runs=d["R"], rbis=d["RBI"],
            walks=d["BB"], strikeouts=d["K"], doubles=d.get("2B", 0),
            triples=d.get("3B", 0), home_runs=d.get("HR", 0),
        )


@dataclass(frozen=True)
class PitcherLine:
    outs_recorded: int = 0  # 3 = 1.0 IP
    batters_faced: int = 0
    hits_allowed: int = 0
    runs_allowed: int = 0
    walks: int = 0
    strikeouts: int = 0
    home_runs_allowed: int = 0

    @property
    def innings_pitched(self) -> float:
        return self.outs_recorded // 3 + (self.outs_recorded % 3) / 10.0

    def to_dict(self) -> dict:
        return {
            "IP": self.innings_pitched, "H": self.hits_allowed,
            "R": self.runs_allowed, "BB": self.walks, "K": self.strikeouts,
            "HR": self.home_runs_allowed, "BF": self.batters_faced,
            "outs": self.outs_recorded,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PitcherLine:
        return cls(
            outs_recorded=d["outs"], batters_faced=d["BF"], hits_allowed=d["H"],
            runs_allowed=d["R"], walks=d["BB"], strikeouts=d["K"],
            home_runs_allowed=d.get("HR", 0),
        )


def credit_batter(line: BatterLine, kind: OutcomeKind, runs: int) -> BatterLine:
    desc = OUTCOME_TABLE[kind]
    return replace(
        line,
        at_bats=line.at_bats + int(desc.counts_as_at_bat),
        hits=line.hits + int(desc.is_hit),
        strikeouts=line.strikeouts + int(desc.is_strikeout),
        walks=line.walks + int(desc.is_walk),
        runs=line.runs + int(desc.batter_reaches_base == 4 and runs > 0),
        rbis=line.rbis + runs,
        doubles=line.doubles + int(kind == OutcomeKind.DOUBLE),
        triples=line.triples + int(kind == OutcomeKind.TRIPLE),
        home_runs=line.home_runs + int(kind == OutcomeKind.HOMERUN),
    )


def credit_pitcher(line: PitcherLine, kind: OutcomeKind, runs: int,
                   outs_recorded: int) -> PitcherLine:
    desc = OUTCOME_TABLE[kind]
    return replace(
        line,
        outs_recorded=line.outs_recorded + outs_recorded,
        batters_faced=line.batters_faced + 1,
        hits_allowed=line.hits_allowed + int(desc.is_hit),
        runs_allowed=line.runs_allowed + runs,
        walks=line.walks + int(desc.is_walk),
        strikeouts=line.strikeouts + int(desc.is_strikeout),
        home_runs_allowed=line.home_runs_allowed + int(kind == OutcomeKind.HOMERUN),
    )


class OutcomeApplication(NamedTuple):
    bases: Bases
    outs: int
    runs_scored: int
    batter_line: BatterLine
    pitcher_line: PitcherLine


def apply_outcome(kind: OutcomeKind, bases: Bases, batter_line: BatterLine,
                  pitcher_line: PitcherLine, outs: int) -> OutcomeApplication:
    """Apply one outcome to the bases, the out count and both stat lines.

    A play that records the third out scores nothing: outs pin at 3 and the
    runs that would have crossed are discarded before any line is credited.
    """
    advancement = advance_bases(kind, bases)
    is_out = OUTCOME_TABLE[kind].is_out
    new_outs = min(3, outs + int(is_out))
    runs = 0 if new_outs >= 3 else advancement.runs_scored
    return OutcomeApplication(
        bases=advancement.bases,
        outs=new_outs,
        runs_scored=runs,
        batter_line=credit_batter(batter_line, kind, runs),
        pitcher_line=credit_pitcher(pitcher_line, kind, runs, int(is_out)),
    )


# ---------------------------------------------------------------------------
# Extra-base attempts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtraBaseResult:
    bases: Bases
    runner_ids: RunnerIds
    extra_runs: int = 0
    extra_outs: int = 0
    scored_ids: tuple[str, ...] = ()
    narratives: tuple[str, ...] = ()
    rolls: tuple[float, ...] = field(default=(), compare=False)


def attempt_chance(speed: float, outs: int, config: BaserunningConfig) -> float:
    chance = config.base_attempt_chance + (speed - 50) * config.speed_attempt_scale
    if outs == 2:
        chance += config.two_out_attempt_bonus
    return max(config.min_attempt_chance, min(config.max_attempt_chance, chance))


def success_chance(speed: float, defense_glove: float, config: BaserunningConfig) -> float:
    chance = config.base_success_chance + (speed - defense_glove) * config.speed_success_scale
    return max(config.min_success_chance, min(config.max_success_chance, chance))


def resolve_extra_base_attempts(kind: OutcomeKind, prior_bases: Bases, bases: Bases,
                                runner_ids: RunnerIds, outs: int,
                                speed_of: Callable[[str], float],
                                defense_glove: float, rng,
                                config: BaserunningConfig) -> ExtraBaseResult:
    """Let fast runners try for an extra base after a single or double.

    ``bases`` and ``runner_ids`` are the positions after standard advancement.
    Each attempt costs two draws: one for whether the runner goes, one for
    whether the runner is safe. A runner thrown out adds an out.
    """
    result = ExtraBaseResult(bases=bases, runner_ids=runner_ids)
    if kind not in (OutcomeKind.SINGLE, OutcomeKind.DOUBLE) or outs >= 3:
        return result

    first, second, third = bases
    ids = list(runner_ids)
    extra_runs = 0
    extra_outs = 0
    scored: list[str] = []
    notes: list[str] = []
    rolls: list[float] = []

    def attempt(runner_id: str) -> bool | None:
        """None when the runner holds, else whether the runner was safe."""
        speed = speed_of(runner_id) if runner_id else config.default_runner_speed
        go_roll = rng.random()
        rolls.append(go_roll)
        if go_roll * 100 >= attempt_chance(speed, outs + extra_outs, config):
            return None
        safe_roll = rng.random()
        rolls.append(safe_roll)
        return safe_roll * 100 < success_chance(speed, defense_glove, config)

    if kind == OutcomeKind.SINGLE:
        thrown_out = False
        if prior_bases.second and third:
            runner = ids[2]
            outcome = attempt(runner)
            if outcome is True:
                third = False
                ids[2] = None
                extra_runs += 1
                if runner:
                    scored.append(runner)
                notes.append("scores from 2nd on the single")
            elif outcome is False:
                third = False
                ids[2] = None
                extra_outs += 1
                thrown_out = True
                notes.append("thrown out at home trying to score")
        if (prior_bases.first and second and not third and not thrown_out
                and outs + extra_outs < 3):
            runner = ids[1]
            outcome = attempt(runner)
            if outcome is True:
                second, third = False, True
                ids[1], ids[2] = None, runner
                notes.append("advances 1st to 3rd on the single")
            elif outcome is False:
                second = False
                ids[1] = None
                extra_outs += 1
                notes.append("thrown out at 3rd trying to advance")
    else:
        if prior_bases.first and third:
            runner = ids[2]
            outcome = attempt(runner)
            if outcome is True:
                third = False
                ids[2] = None
                extra_runs += 1
                if runner:
                    scored.append(runner)
                notes.append("scores from 1st on the double")
            elif outcome is False:
                third = False
                ids[2] = None
                extra_outs += 1
                notes.append("thrown out at home trying to score from 1st")

    return ExtraBaseResult(
        bases=Bases(first, second, third),
        runner_ids=(ids[0], ids[1], ids[2]),
        extra_runs=extra_runs,
        extra_outs=extra_outs,
        scored_ids=tuple(scored),
        narratives=tuple(notes),
        rolls=tuple(rolls),
    )
