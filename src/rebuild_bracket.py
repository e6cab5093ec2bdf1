# Command line entry point: rebuild the bracket from players.yaml and results.yaml

import argparse
import logging
import sys

from bracket.blueprint import placement_range
from bracket.engine import clear_result, record_result, resolve, results_from_matches
from bracket.errors import BracketError
from bracket.seeding import rank_players, seed_of
from bracket.standings import compute_standings, slot_label
from bracket.storage import load_players, load_results, save_results


def format_score(match):
    if match.score1 is None and match.score2 is None:
        return '-'
    return f"{match.score1 or 0}-{match.score2 or 0}"


def slot_text(match, slot, players, seeds=None):
    label = slot_label(match, slot, players)
    player_id = match.player(slot)
    if seeds and player_id is not None and match.bracket == 'wb' and match.round == 1:
        return f"[{seed_of(seeds, player_id)}] {label}"
    return label


def print_bracket(matches, players, only_bracket=None, seeds=None):
    current_bracket = None
    current_round = None
    for match in matches:
        if only_bracket and match.bracket != only_bracket:
            continue
        if match.bracket != current_bracket:
            if current_bracket is not None:
                print()
            first, last = placement_range(match.bracket)
            print(f"# {match.bracket} (places {first}-{last})")
            current_bracket = match.bracket
            current_round = None
        if match.round != current_round:
            print(f"## Round {match.round}")
            current_round = match.round
        print(f"{match.id}: {slot_text(match, 1, players, seeds)} vs {slot_text(match, 2, players, seeds)}"
              f"  [{format_score(match)}] {match.status}")


def print_standings(matches, players):
    for row in compute_standings(matches, players):
        name = row['full_name'] or row['player_id'] or '-'
        print(f"{row['place']:>2}. {name}")


def cmd_show(args):
    players = load_players(args.players)
    results = load_results(args.results) if args.results else {}
    print_bracket(resolve(players, results), players, args.bracket, rank_players(players))


def cmd_standings(args):
    players = load_players(args.players)
    results = load_results(args.results) if args.results else {}
    print_standings(resolve(players, results), players)


def cmd_record(args):
    players = load_players(args.players)
    matches = resolve(players, load_results(args.results))
    matches = record_result(matches, args.match_id, args.score1, args.score2, players,
                            winner_id=args.winner)
    save_results(args.results, results_from_matches(matches))
    for match in matches:
        if match.id == args.match_id:
            print(f"{match.id}: [{format_score(match)}] {match.status}")


def cmd_clear(args):
    players = load_players(args.players)
    matches = resolve(players, load_results(args.results))
    matches = clear_result(matches, args.match_id, players)
    save_results(args.results, results_from_matches(matches))
    print(f"{args.match_id}: cleared")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Rebuild a 32-player placement bracket from players and recorded results.'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    show = subparsers.add_parser('show', help='Print every match grouped by branch and round')
    show.add_argument('players', help='Path to players.yaml')
    show.add_argument('--results', help='Path to results.yaml')
    show.add_argument('--bracket', help='Only print one branch, e.g. wb or p9')
    show.set_defaults(func=cmd_show)

    standings = subparsers.add_parser('standings', help='Print places 1-32')
    standings.add_argument('players', help='Path to players.yaml')
    standings.add_argument('--results', help='Path to results.yaml')
    standings.set_defaults(func=cmd_standings)

    record = subparsers.add_parser('record', help='Record a score and save the results')
    record.add_argument('players', help='Path to players.yaml')
    record.add_argument('results', help='Path to results.yaml')
    record.add_argument('match_id', help='Match id, e.g. wb-r1-m1')
    record.add_argument('score1', type=int)
    record.add_argument('score2', type=int)
    record.add_argument('--winner', help='Winner id, for retirements and walkovers')
    record.set_defaults(func=cmd_record)

    clear = subparsers.add_parser('clear', help='Remove a recorded result and save the results')
    clear.add_argument('players', help='Path to players.yaml')
    clear.add_argument('results', help='Path to results.yaml')
    clear.add_argument('match_id', help='Match id, e.g. wb-r1-m1')
    clear.set_defaults(func=cmd_clear)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        args.func(args)
    except BracketError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
