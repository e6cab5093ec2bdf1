"""
YAML data files for players and recorded results.

players.yaml is a list of player mappings (id, full_name, country, elo).
results.yaml maps match ids to {score1, score2, micro_points, winner_id, status}.
The resolution engine never reads or writes files itself.
"""
import logging
import os
from typing import Dict, List

import yaml
from filelock import FileLock

from .models import Player

logger = logging.getLogger(__name__)

LOCK_TIMEOUT = 10
RESULT_FIELDS = ('score1', 'score2', 'micro_points', 'winner_id', 'status')


def _read_yaml(path: str):
    if not os.path.exists(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse {path}: {e}") from e


def _convert_to_serializable(obj):
    """Convert tuples to lists recursively for YAML serialization."""
    if isinstance(obj, dict):
        return {k: _convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_convert_to_serializable(item) for item in obj]
    else:
        return obj


def load_players(path: str) -> List[Player]:
    """Load players from a YAML list. A missing or empty file has no players."""
    data = _read_yaml(path)
    if not data:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of players")

    players = []
    for entry in data:
        if not isinstance(entry, dict) or 'id' not in entry:
            raise ValueError(f"Invalid player entry in {path}: {entry!r}")
        players.append(Player.from_dict(entry))
    logger.debug(f"Loaded {len(players)} players from {path}")
    return players


def load_results(path: str) -> Dict[str, Dict]:
    """Load recorded results keyed by match id. A missing or empty file has none."""
    data = _read_yaml(path)
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must map match ids to results")

    results = {}
    for match_id, result in data.items():
        if not isinstance(result, dict):
            raise ValueError(f"Invalid result for {match_id} in {path}: {result!r}")
        results[str(match_id)] = {field: result.get(field) for field in RESULT_FIELDS}
        if results[str(match_id)]['micro_points'] is None:
            results[str(match_id)]['micro_points'] = []
    return results


def save_results(path: str, results: Dict[str, Dict]):
    """Write the results snapshot, holding the file lock so writers don't interleave."""
    data = {match_id: _convert_to_serializable({field: result.get(field) for field in RESULT_FIELDS})
            for match_id, result in sorted(results.items())}
    with FileLock(path + '.lock', timeout=LOCK_TIMEOUT):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.debug(f"Saved {len(data)} results to {path}")
