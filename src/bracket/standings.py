"""
Final places from a resolved bracket.

Places are only ever decided by terminal matches: the winners final gives
1st and 2nd, and each placement branch's pair final pN-f gives places N
and N+1.
"""
from typing import Dict, List, Optional

from .blueprint import BRACKET_SIZE, WINNERS_FINAL_ID, branch_order
from .models import Match, Player
from .seeding import BYE_ID_PREFIX


def _terminal_top_place(match: Match) -> Optional[int]:
    """Better of the two places a terminal match decides."""
    if match.id == WINNERS_FINAL_ID:
        return 1
    if match.bracket != 'wb' and match.is_terminal:
        return branch_order(match.bracket)
    return None


def champion(matches: List[Match]) -> Optional[str]:
    for match in matches:
        if match.id == WINNERS_FINAL_ID:
            return match.winner_id
    return None


def compute_standings(matches: List[Match], players: Optional[List[Player]] = None) -> List[Dict]:
    """
    Rows for places 1..32.

    Each row is {'place', 'player_id', 'full_name'}. Places whose deciding
    match is unfinished, or that fall to a bye, have player_id None.
    """
    names = {p.id: p.full_name for p in players or []}
    real_ids = {p.id for p in players or [] if not p.is_bye}

    placed = {}
    for match in matches:
        top_place = _terminal_top_place(match)
        if top_place is None or match.status != 'finished':
            continue
        placed[top_place] = match.winner_id
        placed[top_place + 1] = match.loser_id

    standings = []
    for place in range(1, BRACKET_SIZE + 1):
        player_id = placed.get(place)
        # Bye ids are synthetic; they never come with the caller's players
        if player_id is not None and players is not None and player_id not in real_ids:
            player_id = None
        standings.append({
            'place': place,
            'player_id': player_id,
            'full_name': names.get(player_id) if player_id else None,
        })
    return standings


def slot_label(match: Match, slot: int, players: Optional[List[Player]] = None) -> str:
    """
    Text for one side of a match: the player's name once known, otherwise
    where the player will come from.
    """
    player_id = match.player(slot)
    if player_id is not None:
        for player in players or []:
            if player.id == player_id:
                return player.full_name or player.id
        if player_id.startswith(BYE_ID_PREFIX):
            return 'BYE'
        return player_id

    source_id, source_type = match.source(slot)
    if source_id is None:
        return 'TBD'
    return f"{source_type.capitalize()} of {source_id}"
