"""
Bracket resolution: rebuild the full match list from players and results.

The whole bracket is re-derived on every call. The winners bracket first
round is seeded from the ranked player list, then passes over the match
graph fill player slots from finished source matches, auto-resolve byes,
merge recorded results and recompute status until a pass changes nothing.
Nothing is patched incrementally: re-running with the same inputs gives
the same bracket, and dropping a result simply rebuilds without it.
"""
import logging
from typing import Dict, List, Optional

from .blueprint import build_blueprint, match_sort_key
from .errors import ResolutionError
from .formats import is_contradictory, winner_from_scores
from .models import Match, Player
from .seeding import rank_players, seed_first_round

logger = logging.getLogger(__name__)

# The graph is at most 5 matches deep, so a converged bracket never gets close.
MAX_PASSES = 10


def infer_status(match: Match) -> str:
    """Status from the match's current slots, score and winner."""
    if match.winner_id is not None:
        return 'finished'
    if match.player1_id is None or match.player2_id is None:
        return 'scheduled'
    if match.score1 is not None or match.score2 is not None or match.micro_points:
        return 'live'
    return 'pending'


def _as_score(value, match_id: str) -> Optional[int]:
    if value is None:
        return None
    try:
        score = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unreadable score {value!r} for {match_id}")
        return None
    if score < 0:
        logger.warning(f"Ignoring negative score {score} for {match_id}")
        return None
    return score


class Resolver:
    """
    One resolution run over a freshly built bracket.

    Holds the match arena for the run; nothing is shared between runs.
    """

    def __init__(self, players: List[Player], prior_results: Optional[Dict] = None):
        self.prior_results = prior_results or {}
        self.seeds = rank_players(players)
        self.players = {p.id: p for p in self.seeds}
        self.nodes = build_blueprint()
        self.matches = {m.id: m for m in self.nodes}
        self.passes = 0
        self._reported = set()
        seed_first_round(self.matches, self.seeds)

    def run(self) -> List[Match]:
        for _ in range(MAX_PASSES):
            if not self.run_pass():
                logger.debug(f"Bracket reached a fixed point after {self.passes} passes")
                return sorted(self.nodes, key=match_sort_key)
        raise ResolutionError(f"Bracket still changing after {MAX_PASSES} passes")

    def run_pass(self) -> bool:
        """Process every match once, in dependency order. Returns True if anything changed."""
        self.passes += 1
        changed = False
        for match in self.nodes:
            before = match.state()
            self._fill_slots(match)
            self._apply_result(match)
            if match.state() != before:
                changed = True
        return changed

    def _fill_slots(self, match: Match):
        for slot in (1, 2):
            if match.player(slot) is not None:
                continue
            source_id, source_type = match.source(slot)
            if source_id is None:
                continue
            source = self.matches[source_id]
            if source.status != 'finished':
                continue
            player_id = source.winner_id if source_type == 'winner' else source.loser_id
            if slot == 1:
                match.player1_id = player_id
            else:
                match.player2_id = player_id

    def _apply_result(self, match: Match):
        """Re-derive score, winner and status from the slots and recorded result."""
        match.score1 = None
        match.score2 = None
        match.winner_id = None
        match.micro_points = []
        match.is_bye = False

        if match.player1_id is not None and match.player2_id is not None:
            bye1 = self.players[match.player1_id].is_bye
            bye2 = self.players[match.player2_id].is_bye
            if bye1 and bye2:
                # One bye advances; the match it feeds still needs an opponent.
                match.is_bye = True
                match.winner_id = match.player1_id
                match.score1, match.score2 = 1, 0
            elif bye1 or bye2:
                match.is_bye = True
                match.winner_id = match.player1_id if bye2 else match.player2_id
                match.score1, match.score2 = (1, 0) if bye2 else (0, 1)
            elif match.id in self.prior_results:
                self._merge_result(match, self.prior_results[match.id])

        match.status = infer_status(match)

    def _merge_result(self, match: Match, result: Dict):
        match.score1 = _as_score(result.get('score1'), match.id)
        match.score2 = _as_score(result.get('score2'), match.id)
        match.micro_points = list(result.get('micro_points') or [])

        winner_id = result.get('winner_id')
        if winner_id is not None and winner_id not in (match.player1_id, match.player2_id):
            self._report(match.id, 'winner', f"Ignoring winner {winner_id} for {match.id}: "
                         f"players are {match.player1_id} and {match.player2_id}")
            winner_id = None

        if winner_id is None:
            if is_contradictory(match.score1, match.score2, match.best_of):
                self._report(match.id, 'score', f"Score {match.score1}-{match.score2} for {match.id} "
                             f"is impossible in a best of {match.best_of}")
            slot = winner_from_scores(match.score1, match.score2, match.best_of)
            if slot is not None:
                winner_id = match.player(slot)

        match.winner_id = winner_id

    def _report(self, match_id: str, kind: str, message: str):
        # Every pass re-merges the same results; warn once per run.
        if (match_id, kind) not in self._reported:
            self._reported.add((match_id, kind))
            logger.warning(message)


def resolve(players: List[Player], prior_results: Optional[Dict] = None) -> List[Match]:
    """
    Build the complete bracket for players with the given recorded results.

    Args:
        players: Entrants; at most 32. Missing places are filled with byes.
        prior_results: match id -> {score1, score2, micro_points, winner_id, status}

    Returns:
        Every match of the bracket, sorted by branch, round and match number.

    Raises:
        ResolutionError: propagation did not settle within MAX_PASSES.
    """
    return Resolver(players, prior_results).run()


def generate_bracket(players: List[Player]) -> List[Match]:
    """Seeded bracket with no results played."""
    return resolve(players, {})


def can_edit_match(match: Match, players: List[Player]) -> bool:
    """A score can be entered once both slots hold real (non-bye) players."""
    real_ids = {p.id for p in players if not p.is_bye}
    return match.player1_id in real_ids and match.player2_id in real_ids


def results_from_matches(matches: List[Match]) -> Dict[str, Dict]:
    """
    Snapshot the recorded results of a resolved bracket.

    Bye auto-results are synthetic and left out; feeding the snapshot back
    to resolve() reproduces them anyway.
    """
    results = {}
    for match in matches:
        if match.is_bye:
            continue
        if (match.score1 is None and match.score2 is None
                and match.winner_id is None and not match.micro_points):
            continue
        results[match.id] = {
            'score1': match.score1,
            'score2': match.score2,
            'micro_points': list(match.micro_points),
            'winner_id': match.winner_id,
            'status': match.status,
        }
    return results


def _find_match(matches: List[Match], match_id: str) -> Match:
    for match in matches:
        if match.id == match_id:
            return match
    raise ValueError(f"Unknown match {match_id}")


def record_result(matches: List[Match], match_id: str, score1, score2, players: List[Player],
                  micro_points: Optional[List] = None, winner_id: Optional[str] = None) -> List[Match]:
    """Enter a score for one match and rebuild the bracket."""
    match = _find_match(matches, match_id)
    if not can_edit_match(match, players):
        raise ValueError(f"Match {match_id} is not ready for a result")

    results = results_from_matches(matches)
    results[match_id] = {
        'score1': score1,
        'score2': score2,
        'micro_points': list(micro_points or []),
        'winner_id': winner_id,
        'status': 'live',
    }
    logger.info(f"Recording {score1}-{score2} for {match_id}")
    return resolve(players, results)


def clear_result(matches: List[Match], match_id: str, players: List[Player]) -> List[Match]:
    """Remove one match's result and rebuild the bracket."""
    _find_match(matches, match_id)
    results = results_from_matches(matches)
    results.pop(match_id, None)
    logger.info(f"Clearing result of {match_id}")
    return resolve(players, results)
