"""
Shared pytest fixtures for bracket tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the complete play-outs
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.engine import can_edit_match, resolve
from bracket.formats import wins_needed
from bracket.models import Player
from bracket.seeding import rank_players

COUNTRIES = ['POL', 'GER', 'CZE', 'SVK', 'UKR', 'LTU', 'FRA', 'ESP']


def make_players(count):
    """Players named by seed: 'Player 01' has the highest elo."""
    return [
        Player(
            id=f"pl-{i:02d}",
            full_name=f"Player {i:02d}",
            country=COUNTRIES[i % len(COUNTRIES)],
            elo=2400 - i * 10,
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def players():
    """32 real players with distinct elo, seed order pl-01 .. pl-32."""
    return make_players(32)


@pytest.fixture
def short_field():
    """30 players: seeds 31 and 32 are byes."""
    return make_players(30)


@pytest.fixture
def make_field():
    """Field of any size up to 32; seeds past the field size are byes."""
    return make_players


@pytest.fixture
def write_players():
    """Write players to a YAML list the way players.yaml is laid out."""
    def write(path, players):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump([p.to_dict() for p in players], f, default_flow_style=False, sort_keys=False)
    return write


@pytest.fixture
def by_id():
    """Index a match list by id."""
    def index(matches):
        return {m.id: m for m in matches}
    return index


@pytest.fixture
def play_out():
    """
    Play every playable match, the better seed winning each time.

    Results carry scores only, so every winner is derived from the best-of
    threshold. Returns (matches, results).
    """
    def play(players, results=None, only=None):
        results = dict(results or {})
        seed_numbers = {p.id: i + 1 for i, p in enumerate(rank_players(players))}

        for _ in range(100):
            matches = resolve(players, results)
            playable = [
                m for m in matches
                if m.status == 'pending' and can_edit_match(m, players)
                and (only is None or only(m))
            ]
            if not playable:
                return matches, results
            for match in playable:
                needed = wins_needed(match.best_of)
                if seed_numbers[match.player1_id] < seed_numbers[match.player2_id]:
                    score1, score2 = needed, needed - 2
                else:
                    score1, score2 = needed - 2, needed
                results[match.id] = {
                    'score1': score1,
                    'score2': score2,
                    'micro_points': [],
                    'winner_id': None,
                    'status': 'finished',
                }
        raise AssertionError("play-out did not finish")

    return play
