# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Play a complete seeded match between two generated (or loaded) teams.

Usage:
    uv run play_match.py --seed 42
    uv run play_match.py --seed 7 --approach power --strategy paint --json
    uv run play_match.py --my-team home.json --opponent-team away.json --verbose
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from approaches import BatterApproach, PitchStrategy
from config import ConfigError, load_engine_config
from decisions import FixedPolicy, RandomPolicy, run_to_completion
from match_engine import MatchResult, MatchStateError, finalize, format_box_score, initialize
from random_source import SeededRandomSource
from roster_factory import LeagueTier, RosterError, generate_team, load_team


def build_teams(args: argparse.Namespace, rng: SeededRandomSource):
    """Load teams from files where given, otherwise generate them from ``rng``."""
    league = LeagueTier(args.league)
    if args.my_team:
        my_team = load_team(args.my_team)
    else:
        my_team = generate_team("Home Nine", rng, league, id_prefix="home")
    if args.opponent_team:
        opponent = load_team(args.opponent_team)
    else:
        opponent = generate_team("Visitors", rng, league, id_prefix="away")
    return my_team, opponent


def _policies(approach: str, strategy: str):
    """Batting and pitching policies, each fixed or random on its own flag."""
    batting = (RandomPolicy() if approach == "random"
               else FixedPolicy(approach=BatterApproach(approach)))
    pitching = (RandomPolicy() if strategy == "random"
                else FixedPolicy(strategy=PitchStrategy(strategy)))
    return batting, pitching


def format_result(result: MatchResult) -> str:
    lines = []
    current = None
    for event in result.play_by_play:
        half = (event.inning, event.is_top)
        if half != current:
            current = half
            lines.append(f"\n--- {'Top' if event.is_top else 'Bottom'} {event.inning} ---")
        lines.append(f"  {event.narrative}")
    lines.append("")
    lines.append(format_box_score(result.box_score))
    lines.append("")
    verdict = "WIN" if result.is_win else "LOSS"
    lines.append(f"{verdict} {result.my_runs}-{result.opponent_runs} "
                 f"in {result.total_innings} innings, ${result.cash_earned} earned")
    for drop in result.loot_drops:
        lines.append(f"  Loot: {drop.item.name} ({drop.item.rarity.value}) "
                     f"from {drop.player_name}'s {drop.triggered_by}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Simulate a seeded, deterministic baseball match."
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42).")
    parser.add_argument(
        "--approach", choices=[a.value for a in BatterApproach] + ["random"],
        default=BatterApproach.CONTACT.value,
        help="Batting approach used every at-bat (default: contact).",
    )
    parser.add_argument(
        "--strategy", choices=[s.value for s in PitchStrategy] + ["random"],
        default=PitchStrategy.FINESSE.value,
        help="Pitch strategy used every at-bat (default: finesse).",
    )
    parser.add_argument(
        "--league", choices=[t.value for t in LeagueTier], default=LeagueTier.NATIONAL.value,
        help="League tier for generated rosters (default: national).",
    )
    parser.add_argument("--my-team", metavar="PATH", help="Load the home team from JSON.")
    parser.add_argument("--opponent-team", metavar="PATH", help="Load the visitors from JSON.")
    parser.add_argument("--config", metavar="PATH", help="Engine config JSON file.")
    parser.add_argument("--fans", type=float, default=1.0, help="Win cash multiplier.")
    parser.add_argument("--trace", action="store_true", help="Record a per-at-bat trace.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Log inning-by-inning progress.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_engine_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    rng = SeededRandomSource(args.seed)
    try:
        my_team, opponent = build_teams(args, rng)
    except RosterError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    batting_policy, pitching_policy = _policies(args.approach, args.strategy)
    try:
        state = initialize(my_team, opponent, rng, trace=args.trace, config=config)
        state = run_to_completion(state, batting_policy, pitching_policy)
    except MatchStateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    result = finalize(state, fans=args.fans)

    if args.json:
        output = result.to_dict()
        output["seed"] = args.seed
        if result.trace is not None:
            output["trace"] = list(result.trace)
        print(json.dumps(output, indent=2))
    else:
        print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
