"""
Seed ranking and first-round placement.
"""
from typing import Dict, List

from .blueprint import BRACKET_SIZE, get_match_id
from .models import Match, Player

# Standard 32-draw: (seed, seed) for wb-r1-m1 .. wb-r1-m16. Seeds 1 and 2
# sit in opposite halves, 1-4 in different quarters and 1-8 in different
# eighths, so top seeds can only meet late if the favourites keep winning.
SEEDING_PAIRS = [
    (1, 32),
    (16, 17),
    (9, 24),
    (8, 25),
    (5, 28),
    (12, 21),
    (13, 20),
    (4, 29),
    (3, 30),
    (14, 19),
    (11, 22),
    (6, 27),
    (7, 26),
    (10, 23),
    (15, 18),
    (2, 31),
]


BYE_ID_PREFIX = "bye-"


def make_bye(seed: int) -> Player:
    return Player(id=f"{BYE_ID_PREFIX}{seed}", full_name="BYE", is_bye=True)


def rank_players(players: List[Player]) -> List[Player]:
    """
    Order players into seeds 1..32.

    Higher elo seeds first, ties broken by name. The list is padded with
    bye players up to the bracket size.
    """
    if len(players) > BRACKET_SIZE:
        raise ValueError(f"The bracket holds at most {BRACKET_SIZE} players, got {len(players)}")

    seen = set()
    for player in players:
        if player.id in seen:
            raise ValueError(f"Duplicate player id {player.id}")
        if str(player.id).startswith(BYE_ID_PREFIX):
            raise ValueError(f"Player id {player.id} uses the reserved prefix {BYE_ID_PREFIX!r}")
        seen.add(player.id)

    seeds = sorted(players, key=lambda p: (-p.elo, p.full_name))
    while len(seeds) < BRACKET_SIZE:
        seeds.append(make_bye(len(seeds) + 1))
    return seeds


def seed_first_round(matches: Dict[str, Match], seeds: List[Player]):
    """Put the ranked players into the winners bracket first round."""
    for i, (seed1, seed2) in enumerate(SEEDING_PAIRS):
        match = matches[get_match_id('wb', 1, i + 1)]
        match.player1_id = seeds[seed1 - 1].id
        match.player2_id = seeds[seed2 - 1].id


def seed_of(seeds: List[Player], player_id: str) -> int:
    """1-based seed of a player in a ranked list."""
    for i, player in enumerate(seeds):
        if player.id == player_id:
            return i + 1
    raise ValueError(f"Unknown player {player_id}")
