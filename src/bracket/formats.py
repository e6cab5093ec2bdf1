"""
Match formats: how many games a match is played over and when it is decided.
"""
from typing import Optional

# Best-of per kind of match. Winners-bracket matches and every placement
# final ("-f") are best of five, the other placement rounds best of three.
BEST_OF = {
    'wb': 5,
    'placement': 3,
    'final': 5,
}


def best_of_for(bracket: str, is_final: bool = False) -> int:
    """Return the best-of format for a match in the given branch."""
    if bracket == 'wb':
        return BEST_OF['wb']
    if is_final:
        return BEST_OF['final']
    return BEST_OF['placement']


def wins_needed(best_of: int) -> int:
    """Games needed to take a best-of-N match (3 for bo5, 2 for bo3)."""
    return best_of // 2 + 1


def is_contradictory(score1: Optional[int], score2: Optional[int], best_of: int) -> bool:
    """Both sides at or past the winning threshold cannot happen."""
    if score1 is None or score2 is None:
        return False
    needed = wins_needed(best_of)
    return score1 >= needed and score2 >= needed


def winner_from_scores(score1: Optional[int], score2: Optional[int], best_of: int) -> Optional[int]:
    """
    Decide a match from its game score.

    Returns 1 or 2 for the winning slot, or None while the match is
    undecided. A contradictory score decides nothing.
    """
    if score1 is None or score2 is None:
        return None
    if is_contradictory(score1, score2, best_of):
        return None

    needed = wins_needed(best_of)
    if score1 >= needed:
        return 1
    if score2 >= needed:
        return 2
    return None
