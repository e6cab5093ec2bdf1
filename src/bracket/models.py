class Player:
    def __init__(self, id, full_name="", country=None, elo=0, is_bye=False):
        self.id = id
        self.full_name = full_name or ""
        self.country = country
        self.elo = int(elo or 0)
        self.is_bye = bool(is_bye)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            full_name=data.get('full_name', ''),
            country=data.get('country'),
            elo=data.get('elo', 0),
            is_bye=data.get('is_bye', False),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'country': self.country,
            'elo': self.elo,
            'is_bye': self.is_bye,
        }

    def __repr__(self):
        return f"Player(id={self.id}, full_name={self.full_name}, elo={self.elo}, is_bye={self.is_bye})"


class Match:
    # Fields the resolution engine derives; everything else is topology.
    DERIVED_FIELDS = (
        'player1_id', 'player2_id', 'score1', 'score2',
        'winner_id', 'status', 'micro_points', 'is_bye',
    )

    def __init__(self, id, bracket, round, match_number=1, best_of=3,
                 source_match_id1=None, source_type1=None,
                 source_match_id2=None, source_type2=None,
                 next_match_id=None, loser_match_id=None):
        self.id = id
        self.bracket = bracket
        self.round = round
        self.match_number = match_number
        self.best_of = best_of
        self.source_match_id1 = source_match_id1
        self.source_type1 = source_type1
        self.source_match_id2 = source_match_id2
        self.source_type2 = source_type2
        self.next_match_id = next_match_id
        self.loser_match_id = loser_match_id
        self.reset()

    def reset(self):
        """Clear every derived field back to the unplayed state."""
        self.player1_id = None
        self.player2_id = None
        self.score1 = None
        self.score2 = None
        self.winner_id = None
        self.status = 'scheduled'
        self.micro_points = []
        self.is_bye = False

    @property
    def loser_id(self):
        if self.winner_id is None:
            return None
        if self.winner_id == self.player1_id:
            return self.player2_id
        return self.player1_id

    @property
    def is_terminal(self):
        return self.next_match_id is None

    def source(self, slot):
        """Return (source_match_id, source_type) for slot 1 or 2."""
        if slot == 1:
            return self.source_match_id1, self.source_type1
        return self.source_match_id2, self.source_type2

    def player(self, slot):
        return self.player1_id if slot == 1 else self.player2_id

    def state(self):
        return tuple(
            tuple(value) if isinstance(value, list) else value
            for value in (getattr(self, name) for name in self.DERIVED_FIELDS)
        )

    def to_dict(self):
        return {
            'id': self.id,
            'bracket': self.bracket,
            'round': self.round,
            'match_number': self.match_number,
            'best_of': self.best_of,
            'player1_id': self.player1_id,
            'player2_id': self.player2_id,
            'score1': self.score1,
            'score2': self.score2,
            'winner_id': self.winner_id,
            'status': self.status,
            'micro_points': list(self.micro_points),
            'is_bye': self.is_bye,
            'source_match_id1': self.source_match_id1,
            'source_type1': self.source_type1,
            'source_match_id2': self.source_match_id2,
            'source_type2': self.source_type2,
            'next_match_id': self.next_match_id,
            'loser_match_id': self.loser_match_id,
        }

    def __repr__(self):
        return (f"Match(id={self.id}, players=({self.player1_id}, {self.player2_id}), "
                f"score={self.score1}-{self.score2}, winner={self.winner_id}, status={self.status})")
