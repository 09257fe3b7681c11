# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Technique catalog and archetype base stats.

Read-only reference data. Each archetype has six techniques: a starter with
a guaranteed outcome, two mutually exclusive mid-level picks, a passive or
utility pick, and slot-2 capstones gated by a prerequisite.
"""

from __future__ import annotations

from effects import (
    Ability,
    DefensiveBoost,
    Duration,
    GuaranteedOutcome,
    OutcomeModifier,
    StatModifier,
    SynergyEnhancement,
)
from models import Archetype, BatterStats, PitcherStats

A = Archetype


# ---------------------------------------------------------------------------
# Archetype base stats
# ---------------------------------------------------------------------------

ARCHETYPE_BASE_STATS: dict[Archetype, BatterStats | PitcherStats] = {
    A.SLUGGER: BatterStats(power=60, contact=40, glove=30, speed=30),
    A.CONTACT_HITTER: BatterStats(power=30, contact=65, glove=40, speed=45),
    A.SPEED_DEMON: BatterStats(power=20, contact=50, glove=50, speed=70),
    A.FLAMETHROWER: PitcherStats(velocity=70, control=35, break_=30),
    A.PAINTER: PitcherStats(velocity=30, control=65, break_=40),
    A.TRICKSTER: PitcherStats(velocity=35, control=35, break_=65),
}

STARTER_TECHNIQUES: dict[Archetype, str] = {
    A.SLUGGER: "moonshot",
    A.CONTACT_HITTER: "two_strike_assassin",
    A.SPEED_DEMON: "crazy_bunt",
    A.FLAMETHROWER: "heat_up",
    A.PAINTER: "pinpoint",
    A.TRICKSTER: "vanishing_act",
}


def _enhance(synergy_id: str, *effects, tier: str = "bronze") -> SynergyEnhancement:
    return SynergyEnhancement(synergy_id=synergy_id, tier=tier, effects=tuple(effects))


# ---------------------------------------------------------------------------
# Batter techniques
# ---------------------------------------------------------------------------

SLUGGER_TECHNIQUES = (
    Ability(
        id="moonshot", name="Moonshot", archetype=A.SLUGGER,
        description="Swing for the fences. 55% home run, 45% strikeout.",
        spirit_cost=20, required_level=5,
        effects=(GuaranteedOutcome("homerun", 55, (("homerun", 55), ("strikeout", 45))),),
        synergy_enhancement=_enhance("murderers_row", OutcomeModifier(homerun_bonus=5)),
    ),
    Ability(
        id="intimidation_factor", name="Intimidation Factor", archetype=A.SLUGGER,
        description="Pitchers nibble around your power. +25% walk chance.",
        spirit_cost=12, required_level=7, conflicts_with=("opposite_field",),
        effects=(OutcomeModifier(walk_bonus=25),),
    ),
    Ability(
        id="opposite_field", name="Opposite Field", archetype=A.SLUGGER,
        description="Trade power for consistency. +15 hit quality, -10% strikeouts, -8% home runs.",
        spirit_cost=15, required_level=7, conflicts_with=("intimidation_factor",),
        effects=(OutcomeModifier(hit_bonus=15, strikeout_bonus=-10, homerun_bonus=-8),),
    ),
    Ability(
        id="home_run_threat", name="Home Run Threat", archetype=A.SLUGGER,
        description="Walk the batter or pay for it. +25% home run chance, +15% walk chance.",
        spirit_cost=30, slot_cost=2, required_level=10, prerequisite_id="moonshot",
        max_rank=2,
        effects=(OutcomeModifier(homerun_bonus=25, walk_bonus=15),),
    ),
    Ability(
        id="uppercut_swing", name="Uppercut Swing", archetype=A.SLUGGER,
        description="Sell out for launch angle. +20% home runs, +10% strikeouts.",
        spirit_cost=20, required_level=12,
        effects=(OutcomeModifier(homerun_bonus=20, strikeout_bonus=10),),
    ),
    Ability(
        id="gorilla_ball", name="Gorilla Ball", archetype=A.SLUGGER,
        description="+40 power and +15 contact for the whole inning, +10% home run chance.",
        spirit_cost=30, slot_cost=2, required_level=15, prerequisite_id="moonshot",
        max_rank=2,
        effects=(
            StatModifier(power=40, contact=15, duration=Duration.INNING),
            OutcomeModifier(homerun_bonus=10),
        ),
        synergy_enhancement=_enhance(
            "murderers_row", StatModifier(power=5, duration=Duration.INNING), tier="silver",
        ),
    ),
)

CONTACT_HITTER_TECHNIQUES = (
    Ability(
        id="two_strike_assassin", name="Two-Strike Assassin", archetype=A.CONTACT_HITTER,
        description="Choke up and poke it. 70% single, 20% double, 10% out.",
        spirit_cost=15, required_level=5,
        effects=(
            GuaranteedOutcome("single", 70, (("single", 70), ("double", 20), ("out", 10))),
            OutcomeModifier(strikeout_bonus=-30),
        ),
        synergy_enhancement=_enhance("ironclad", OutcomeModifier(hit_bonus=10)),
    ),
    Ability(
        id="patience", name="Patience", archetype=A.CONTACT_HITTER,
        description="Passive. +15 contact all game and +15% walk chance.",
        required_level=7, is_passive=True, allow_cross_archetype=True,
        effects=(
            StatModifier(contact=15, duration=Duration.GAME),
            OutcomeModifier(walk_bonus=15),
        ),
        synergy_enhancement=_enhance("eagle_eye", StatModifier(contact=5, duration=Duration.GAME)),
    ),
    Ability(
        id="gold_glove", name="Gold Glove", archetype=A.CONTACT_HITTER,
        description="Elite defense all game. +30 glove and +15 team defense.",
        spirit_cost=20, required_level=8,
        effects=(
            StatModifier(glove=30, duration=Duration.GAME),
            DefensiveBoost(glove_bonus=15),
        ),
    ),
    Ability(
        id="spray_chart", name="Spray Chart", archetype=A.CONTACT_HITTER,
        description="Find the gaps. +20 hit quality, -5% home run chance.",
        spirit_cost=14, required_level=10,
        effects=(OutcomeModifier(hit_bonus=20, homerun_bonus=-5),),
    ),
    Ability(
        id="battle_mode", name="Battle Mode", archetype=A.CONTACT_HITTER,
        description="Refuse to strike out. +30 contact and -20% strikeout chance.",
        spirit_cost=20, required_level=12,
        effects=(StatModifier(contact=30), OutcomeModifier(strikeout_bonus=-20)),
    ),
    Ability(
        id="rally_igniter", name="Rally Igniter", archetype=A.CONTACT_HITTER,
        description="+25 contact for the inning, -20% strikeouts, +10% walks, +10 hit quality.",
        spirit_cost=25, slot_cost=2, required_level=15, prerequisite_id="two_strike_assassin",
        max_rank=2,
        effects=(
            StatModifier(contact=25, duration=Duration.INNING),
            OutcomeModifier(strikeout_bonus=-20, walk_bonus=10, hit_bonus=10),
        ),
    ),
)

SPEED_DEMON_TECHNIQUES = (
    Ability(
        id="crazy_bunt", name="Crazy Bunt", archetype=A.SPEED_DEMON,
        description="Drop a perfect bunt. 80% single, 10% double, 10% out.",
        spirit_cost=10, required_level=5,
        effects=(GuaranteedOutcome(
            "bunt_attempt", 80, (("bunt_attempt", 80), ("double", 10), ("out", 10)),
        ),),
    ),
    Ability(
        id="slap_hitter", name="Slap Hitter", archetype=A.SPEED_DEMON,
        description="+10 power, +15 contact, +12 hit quality.",
        spirit_cost=15, required_level=7, conflicts_with=("pest",),
        effects=(StatModifier(power=10, contact=15), OutcomeModifier(hit_bonus=12)),
    ),
    Ability(
        id="pest", name="Pest", archetype=A.SPEED_DEMON,
        description="Impossible to retire. -20% strikeouts, +12% walks.",
        spirit_cost=10, required_level=7, conflicts_with=("slap_hitter",),
        effects=(OutcomeModifier(strikeout_bonus=-20, walk_bonus=12),),
    ),
    Ability(
        id="havoc", name="Havoc", archetype=A.SPEED_DEMON,
        description="Speed rattles the defense. +20 hit quality, +10% walks.",
        spirit_cost=14, required_level=10,
        effects=(OutcomeModifier(hit_bonus=20, walk_bonus=10),),
    ),
    Ability(
        id="hit_and_run", name="Hit and Run", archetype=A.SPEED_DEMON,
        description="+20 contact and +15 hit quality.",
        spirit_cost=18, required_level=12,
        effects=(StatModifier(contact=20), OutcomeModifier(hit_bonus=15)),
    ),
    Ability(
        id="steal_the_show", name="Steal the Show", archetype=A.SPEED_DEMON,
        description="+20 contact for the inning, +15 hit quality, +10% walks, -15% strikeouts.",
        spirit_cost=25, slot_cost=2, required_level=15, prerequisite_id="crazy_bunt",
        max_rank=2,
        effects=(
            StatModifier(contact=20, duration=Duration.INNING),
            OutcomeModifier(hit_bonus=15, walk_bonus=10, strikeout_bonus=-15),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Pitcher techniques
# ---------------------------------------------------------------------------

FLAMETHROWER_TECHNIQUES = (
    Ability(
        id="heat_up", name="Heat Up", archetype=A.FLAMETHROWER,
        description="Dial it up. 65% strikeout, 25% weak out, 10% single.",
        spirit_cost=15, required_level=5,
        effects=(GuaranteedOutcome(
            "strikeout", 65, (("strikeout", 65), ("out", 25), ("single", 10)),
        ),),
        synergy_enhancement=_enhance("furnace", OutcomeModifier(strikeout_bonus=5)),
    ),
    Ability(
        id="intimidation", name="Intimidation", archetype=A.FLAMETHROWER,
        description="+15% strikeout chance and -5% walk chance.",
        spirit_cost=18, required_level=7, conflicts_with=("setup_pitch",),
        effects=(OutcomeModifier(strikeout_bonus=15, walk_bonus=-5),),
    ),
    Ability(
        id="setup_pitch", name="Setup Pitch", archetype=A.FLAMETHROWER,
        description="+20 break, +10 control, +5% strikeout chance.",
        spirit_cost=14, required_level=7, conflicts_with=("intimidation",),
        effects=(StatModifier(break_=20, control=10), OutcomeModifier(strikeout_bonus=5)),
    ),
    Ability(
        id="untouchable", name="Untouchable", archetype=A.FLAMETHROWER,
        description="Flow state. 65% strikeout, 25% weak out, 10% walk.",
        spirit_cost=28, slot_cost=2, required_level=10, prerequisite_id="heat_up",
        max_rank=2,
        effects=(GuaranteedOutcome(
            "strikeout", 65, (("strikeout", 65), ("out", 25), ("walk", 10)),
        ),),
    ),
    Ability(
        id="iron_arm", name="Iron Arm", archetype=A.FLAMETHROWER,
        description="Passive. +10 velocity all game and no fatigue decay.",
        required_level=12, is_passive=True,
        effects=(StatModifier(velocity=10, negate_fatigue=True, duration=Duration.GAME),),
    ),
    Ability(
        id="inferno", name="Inferno", archetype=A.FLAMETHROWER,
        description="+50 velocity, +25% strikeouts, +8% walks.",
        spirit_cost=35, slot_cost=2, required_level=15, max_rank=2,
        effects=(StatModifier(velocity=50), OutcomeModifier(strikeout_bonus=25, walk_bonus=8)),
    ),
)

PAINTER_TECHNIQUES = (
    Ability(
        id="pinpoint", name="Pinpoint", archetype=A.PAINTER,
        description="Paint the corners. 55% weak out, 35% strikeout, 10% single.",
        spirit_cost=12, required_level=5,
        effects=(GuaranteedOutcome(
            "out", 55, (("out", 55), ("strikeout", 35), ("single", 10)),
        ),),
        synergy_enhancement=_enhance("mastermind", OutcomeModifier(homerun_bonus=-5)),
    ),
    Ability(
        id="pitch_to_contact_painter", name="Pitch to Contact", archetype=A.PAINTER,
        description="Trust your defense. +10 control and +15 team defense.",
        spirit_cost=14, required_level=7, conflicts_with=("nibbler",),
        effects=(StatModifier(control=10), DefensiveBoost(glove_bonus=15)),
    ),
    Ability(
        id="nibbler", name="Nibbler", archetype=A.PAINTER,
        description="Work the edges. +20 control, -8% home runs, +12% walks.",
        spirit_cost=16, required_level=7, conflicts_with=("pitch_to_contact_painter",),
        effects=(StatModifier(control=20), OutcomeModifier(walk_bonus=12, homerun_bonus=-8)),
    ),
    Ability(
        id="surgeons_precision", name="Surgeon's Precision", archetype=A.PAINTER,
        description="+30 control, +20 break, -10% home runs, -8% strikeouts.",
        spirit_cost=25, slot_cost=2, required_level=10, prerequisite_id="pinpoint",
        max_rank=2,
        effects=(
            StatModifier(control=30, break_=20),
            OutcomeModifier(homerun_bonus=-10, strikeout_bonus=-8),
        ),
    ),
    Ability(
        id="economizer", name="Economizer", archetype=A.PAINTER,
        description="Passive. +5 control all game; active techniques cost 20% less spirit.",
        required_level=12, is_passive=True, allow_cross_archetype=True,
        effects=(StatModifier(control=5, duration=Duration.GAME),),
    ),
    Ability(
        id="masterclass", name="Masterclass", archetype=A.PAINTER,
        description="+40 control and +25 break for the inning, -15% home runs.",
        spirit_cost=30, slot_cost=2, required_level=15, max_rank=2,
        effects=(
            StatModifier(control=40, break_=25, duration=Duration.INNING),
            OutcomeModifier(homerun_bonus=-15),
        ),
    ),
)

TRICKSTER_TECHNIQUES = (
    Ability(
        id="vanishing_act", name="Vanishing Act", archetype=A.TRICKSTER,
        description="Drops off the table. 60% strikeout, 20% walk, 20% weak out.",
        spirit_cost=13, required_level=5,
        effects=(GuaranteedOutcome(
            "strikeout", 60, (("strikeout", 60), ("walk", 20), ("out", 20)),
        ),),
        synergy_enhancement=_enhance("mind_games", OutcomeModifier(strikeout_bonus=5)),
    ),
    Ability(
        id="changeup_trickster", name="Changeup", archetype=A.TRICKSTER,
        description="+15 break, +10 control, +10% strikeouts, -5% walks.",
        spirit_cost=15, required_level=7, conflicts_with=("knuckleball",),
        effects=(
            StatModifier(break_=15, control=10),
            OutcomeModifier(strikeout_bonus=10, walk_bonus=-5),
        ),
    ),
    Ability(
        id="knuckleball", name="Knuckleball", archetype=A.TRICKSTER,
        description="Pure chaos. 60% strikeout, otherwise a walk.",
        spirit_cost=16, required_level=7, conflicts_with=("changeup_trickster",),
        effects=(GuaranteedOutcome("strikeout", 60),),
    ),
    Ability(
        id="phantom_pitch", name="Phantom Pitch", archetype=A.TRICKSTER,
        description="+25 break, +15 velocity, +15% strikeouts, +5% walks.",
        spirit_cost=26, slot_cost=2, required_level=10, prerequisite_id="vanishing_act",
        max_rank=2,
        effects=(
            StatModifier(break_=25, velocity=15),
            OutcomeModifier(strikeout_bonus=15, walk_bonus=5),
        ),
    ),
    Ability(
        id="repertoire", name="Repertoire", archetype=A.TRICKSTER,
        description="Passive. +15 break all game; repeating a technique costs 10 break.",
        required_level=12, is_passive=True,
        effects=(StatModifier(break_=15, duration=Duration.GAME),),
    ),
    Ability(
        id="total_eclipse", name="Total Eclipse", archetype=A.TRICKSTER,
        description="The ultimate pitch. 80% strikeout, 15% walk, 5% single.",
        spirit_cost=32, slot_cost=2, required_level=15, prerequisite_id="vanishing_act",
        max_rank=2,
        effects=(GuaranteedOutcome("strikeout", 80),),
    ),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

TECHNIQUES_BY_ARCHETYPE: dict[Archetype, tuple[Ability, ...]] = {
    A.SLUGGER: SLUGGER_TECHNIQUES,
    A.CONTACT_HITTER: CONTACT_HITTER_TECHNIQUES,
    A.SPEED_DEMON: SPEED_DEMON_TECHNIQUES,
    A.FLAMETHROWER: FLAMETHROWER_TECHNIQUES,
    A.PAINTER: PAINTER_TECHNIQUES,
    A.TRICKSTER: TRICKSTER_TECHNIQUES,
}

ALL_TECHNIQUES: dict[str, Ability] = {
    ability.id: ability
    for group in TECHNIQUES_BY_ARCHETYPE.values()
    for ability in group
}


def get_technique(ability_id: str) -> Ability | None:
    return ALL_TECHNIQUES.get(ability_id)


def techniques_for(archetype: Archetype) -> tuple[Ability, ...]:
    return TECHNIQUES_BY_ARCHETYPE.get(archetype, ())
