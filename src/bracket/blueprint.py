"""
Static topology of the 32-player bracket.

The winners bracket (wb) is a plain single-elimination ladder. A player who
loses in it is not eliminated: the losers of each winners round drop into a
placement group, itself a small single-elimination bracket whose own losers
cascade into a lower placement group, until every group ends in a pair
final deciding two neighbouring places:

- Winners R1 losers -> p17 (places 17-32)
- Winners R2 losers -> p9  (places 9-16)
- Winners R3 losers -> p5  (places 5-8)
- Winners R4 losers -> p3  (bronze match, places 3-4)
- Winners final (wb-r5-m1) decides places 1-2

A placement branch is named after the best place its group can reach.
Round k losers of branch pN with n entrants form branch p(N + n/2^k).
"""
import functools
import math
from typing import Dict, List, Optional, Tuple

from .errors import BlueprintError
from .formats import best_of_for
from .models import Match

BRACKET_SIZE = 32
WINNERS_ROUNDS = int(math.log2(BRACKET_SIZE))
WINNERS_FINAL_ID = f"wb-r{WINNERS_ROUNDS}-m1"

# Top place of the placement group that receives each winners round's losers
LOSER_LANDING = {1: 17, 2: 9, 3: 5, 4: 3}

PLACEMENT_BRANCHES = [f"p{place}" for place in range(3, BRACKET_SIZE, 2)]
BRANCHES = ['wb'] + PLACEMENT_BRANCHES

TOPOLOGY_FIELDS = (
    'id', 'bracket', 'round', 'match_number', 'best_of',
    'source_match_id1', 'source_type1', 'source_match_id2', 'source_type2',
    'next_match_id', 'loser_match_id',
)


def get_match_id(bracket: str, round_num: int, match_number: int) -> str:
    """Id of a regular (non-final) match, e.g. wb-r1-m3 or p9-r2-m1."""
    return f"{bracket}-r{round_num}-m{match_number}"


def get_final_id(bracket: str) -> str:
    """Id of a placement branch's pair final, e.g. p3-f."""
    return f"{bracket}-f"


def branch_order(bracket: str) -> int:
    """Sort key for branches: wb first, then placement branches by place."""
    if bracket == 'wb':
        return 0
    return int(bracket[1:])


def match_sort_key(match: Match) -> Tuple[int, int, int]:
    return branch_order(match.bracket), match.round, match.match_number


def _link(matches: Dict[str, Match], source: Tuple[str, str], target: Match, slot: int):
    """Wire source's winner or loser into a slot of target, in both directions."""
    source_id, source_type = source
    if slot == 1:
        target.source_match_id1, target.source_type1 = source_id, source_type
    else:
        target.source_match_id2, target.source_type2 = source_id, source_type

    if source_type == 'winner':
        matches[source_id].next_match_id = target.id
    else:
        matches[source_id].loser_match_id = target.id


def _add_round(matches: Dict[str, Match], bracket: str, round_num: int,
               feeders: List[Tuple[str, str]], is_final: bool = False) -> List[Match]:
    """Create one round fed pairwise by feeders: feeder i -> match ceil(i/2)."""
    round_matches = []
    for i in range(len(feeders) // 2):
        match_number = i + 1
        match_id = get_final_id(bracket) if is_final else get_match_id(bracket, round_num, match_number)
        match = Match(
            id=match_id,
            bracket=bracket,
            round=round_num,
            match_number=match_number,
            best_of=best_of_for(bracket, is_final=is_final),
        )
        matches[match_id] = match
        _link(matches, feeders[i * 2], match, 1)
        _link(matches, feeders[i * 2 + 1], match, 2)
        round_matches.append(match)
    return round_matches


def _add_placement_group(matches: Dict[str, Match], top_place: int, feeders: List[Tuple[str, str]]):
    """
    Add the placement group for places top_place .. top_place + len(feeders) - 1.

    Winners stay in the branch until two are left for its pair final; the
    losers of every round recurse into the group directly below.
    """
    bracket = f"p{top_place}"
    round_num = 1

    while len(feeders) > 2:
        round_matches = _add_round(matches, bracket, round_num, feeders)
        losers = [(m.id, 'loser') for m in round_matches]
        _add_placement_group(matches, top_place + len(round_matches), losers)
        feeders = [(m.id, 'winner') for m in round_matches]
        round_num += 1

    _add_round(matches, bracket, round_num, feeders, is_final=True)


def _build_nodes() -> List[Match]:
    matches: Dict[str, Match] = {}

    # Winners bracket: round 1 is seeded directly, later rounds pair winners
    for match_number in range(1, BRACKET_SIZE // 2 + 1):
        match_id = get_match_id('wb', 1, match_number)
        matches[match_id] = Match(
            id=match_id, bracket='wb', round=1,
            match_number=match_number, best_of=best_of_for('wb'),
        )

    previous = [m for m in matches.values()]
    for round_num in range(2, WINNERS_ROUNDS + 1):
        feeders = [(m.id, 'winner') for m in previous]
        previous = _add_round(matches, 'wb', round_num, feeders)

    # Each winners round's losers land in their placement group
    for round_num, top_place in sorted(LOSER_LANDING.items()):
        count = BRACKET_SIZE // 2 ** round_num
        losers = [(get_match_id('wb', round_num, i), 'loser') for i in range(1, count + 1)]
        _add_placement_group(matches, top_place, losers)

    return list(matches.values())


def validate_blueprint(matches: List[Match]):
    """
    Check the topology: unique ids, every reference resolvable, forward and
    backward links consistent, only winners round 1 unfed, no cycles.

    Raises BlueprintError on the first problem found.
    """
    by_id: Dict[str, Match] = {}
    for match in matches:
        if match.id in by_id:
            raise BlueprintError(f"Duplicate match id {match.id}")
        by_id[match.id] = match

    for match in matches:
        fed_slots = 0
        for slot in (1, 2):
            source_id, source_type = match.source(slot)
            if source_id is None:
                if source_type is not None:
                    raise BlueprintError(f"{match.id} slot {slot} has a source type but no source")
                continue
            fed_slots += 1
            source = by_id.get(source_id)
            if source is None:
                raise BlueprintError(f"{match.id} slot {slot} references unknown match {source_id}")
            if source_type == 'winner':
                forward = source.next_match_id
            elif source_type == 'loser':
                forward = source.loser_match_id
            else:
                raise BlueprintError(f"{match.id} slot {slot} has invalid source type {source_type!r}")
            if forward != match.id:
                raise BlueprintError(
                    f"{match.id} slot {slot} expects the {source_type} of {source_id}, "
                    f"but it is sent to {forward}"
                )

        is_seeded = match.bracket == 'wb' and match.round == 1
        if is_seeded and fed_slots:
            raise BlueprintError(f"Seeded match {match.id} must not have sources")
        if not is_seeded and fed_slots != 2:
            raise BlueprintError(f"{match.id} has {fed_slots} fed slots, expected 2")

        for target_id, source_type in ((match.next_match_id, 'winner'), (match.loser_match_id, 'loser')):
            if target_id is None:
                continue
            target = by_id.get(target_id)
            if target is None:
                raise BlueprintError(f"{match.id} sends its {source_type} to unknown match {target_id}")
            slots = [slot for slot in (1, 2) if target.source(slot) == (match.id, source_type)]
            if len(slots) != 1:
                raise BlueprintError(
                    f"{target_id} must take the {source_type} of {match.id} in exactly one slot"
                )

    _check_acyclic(by_id)


def _check_acyclic(by_id: Dict[str, Match]):
    visiting, done = set(), set()

    def visit(match_id):
        if match_id in done:
            return
        if match_id in visiting:
            raise BlueprintError(f"Cycle through {match_id}")
        visiting.add(match_id)
        match = by_id[match_id]
        for target_id in (match.next_match_id, match.loser_match_id):
            if target_id is not None:
                visit(target_id)
        visiting.discard(match_id)
        done.add(match_id)

    for match_id in by_id:
        visit(match_id)


@functools.lru_cache(maxsize=None)
def _validated_topology() -> Tuple[Tuple[Tuple[str, object], ...], ...]:
    nodes = _build_nodes()
    validate_blueprint(nodes)
    return tuple(
        tuple((field, getattr(match, field)) for field in TOPOLOGY_FIELDS)
        for match in nodes
    )


def build_blueprint() -> List[Match]:
    """
    Return fresh, unplayed Match nodes for the whole bracket.

    Nodes come in dependency order (every match after the matches feeding
    it). The topology is validated once and reused by later calls.
    """
    return [Match(**dict(node)) for node in _validated_topology()]


def placement_range(bracket: str) -> Optional[Tuple[int, int]]:
    """
    First and last place the entrants of a branch compete for.

    wb covers the whole field; pN covers N .. N + entrants - 1, where the
    entrants are the players feeding its first round.
    """
    if bracket == 'wb':
        return 1, BRACKET_SIZE
    if bracket not in PLACEMENT_BRANCHES:
        return None
    first_round = [node for node in map(dict, _validated_topology())
                   if node['bracket'] == bracket and node['round'] == 1]
    top_place = branch_order(bracket)
    return top_place, top_place + 2 * len(first_round) - 1
