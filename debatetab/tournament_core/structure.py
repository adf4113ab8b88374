"""
Tournament structures for pairing and standings calculations.

This module provides a simple, clean way to represent a debate tournament with:
- Teams and their speakers (members)
- Rounds containing matches (debates) with teams at fixed positions
- Speaker scores recorded per member per match
- Results (rank and points) derived per team per match

Rows read from a store are converted into these records before the engine
sees them, so every computation works on validated, immutable data.
"""

import math
from typing import Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from debatetab.tournament_core.formats import Format, BRITISH_PARLIAMENTARY


class PairingMode(Enum):
    """How teams are ordered before being grouped into matches."""

    RANDOM = "random"
    RANK = "rank"


class LeftoverPolicy(Enum):
    """What happens to a trailing group smaller than the format's group size.

    A trailing group of a single team is always dropped.
    """

    PARTIAL = "partial"  # emit an under-full match
    DROP = "drop"  # leave the teams unpaired


class MemberRole(Enum):
    LEADER = "leader"
    MEMBER = "member"
    SUBSTITUTE = "substitute"


@dataclass(frozen=True)
class TeamEntry:
    """A team on the tournament roster."""

    team_id: int
    name: str = ""
    institution: Optional[str] = None


@dataclass(frozen=True)
class MemberEntry:
    """A speaker belonging to a team."""

    member_id: int
    team_id: int
    name: str = ""
    role: MemberRole = MemberRole.MEMBER


@dataclass(frozen=True)
class SpeakerScoreEntry:
    """Points one member scored in one match."""

    member_id: int
    team_id: int
    match_id: int
    round_number: int
    points: float

    def __post_init__(self):
        if isinstance(self.points, bool) or not isinstance(self.points, (int, float)):
            raise TypeError(f"Speaker points must be a number, got {self.points!r}")
        if math.isnan(self.points) or math.isinf(self.points):
            raise ValueError("Speaker points must be a finite number")


@dataclass(frozen=True)
class ResultEntry:
    """Rank and points one team earned in one match."""

    round_number: int
    match_id: int
    team_id: int
    rank: int
    points: int

    def __post_init__(self):
        if self.rank < 1:
            raise ValueError(f"Rank must be 1 or greater, got {self.rank}")


@dataclass(frozen=True)
class TeamTotal:
    """A fully scored team's speaker total for one match."""

    team_id: int
    total: float
    member_count: int


@dataclass(frozen=True)
class TeamRank:
    """A resolved rank for one team in one match."""

    team_id: int
    total: float
    rank: int
    points: int


@dataclass(frozen=True)
class ProposedMatch:
    """One debate of a pairing proposal: (team_id, position) in position order."""

    teams: Tuple[Tuple[int, str], ...]

    @property
    def team_ids(self) -> Tuple[int, ...]:
        return tuple(team_id for team_id, _ in self.teams)

    @property
    def positions(self) -> Tuple[str, ...]:
        return tuple(position for _, position in self.teams)

    def is_partial(self, group_size: int) -> bool:
        return len(self.teams) < group_size


@dataclass(frozen=True)
class PairingProposal:
    """A previewable draw for one round. Nothing is persisted by creating one."""

    round_number: Optional[int]
    format_code: str
    mode: PairingMode
    matches: Tuple[ProposedMatch, ...] = ()
    unpaired: Tuple[int, ...] = ()

    @property
    def team_ids(self) -> List[int]:
        return [team_id for match in self.matches for team_id in match.team_ids]


@dataclass(frozen=True)
class TeamStanding:
    rank: int
    team_id: int
    name: str
    institution: Optional[str]
    total_points: int
    total_speaker_score: float
    average_speaker_score: float
    matches_scored: int


@dataclass(frozen=True)
class SpeakerStanding:
    rank: int
    member_id: int
    name: str
    team_id: int
    team_name: str
    institution: Optional[str]
    total_points: float
    average_points: float
    rounds_participated: int
    standard_deviation: float
    round_scores: Tuple[float, ...] = ()


@dataclass(frozen=True)
class Match:
    """A debate within a round, with the teams at their positions."""

    match_id: int
    teams: Tuple[Tuple[int, str], ...] = ()
    scores: Tuple[SpeakerScoreEntry, ...] = ()
    results: Tuple[ResultEntry, ...] = ()

    @property
    def team_ids(self) -> Tuple[int, ...]:
        return tuple(team_id for team_id, _ in self.teams)

    def with_scores(self, *scores: SpeakerScoreEntry) -> "Match":
        """Return a new Match with the scores added (immutable pattern)."""
        return Match(self.match_id, self.teams, self.scores + scores, self.results)

    def with_results(self, results: Iterable[ResultEntry]) -> "Match":
        """Return a new Match whose results are replaced."""
        return Match(self.match_id, self.teams, self.scores, tuple(results))


@dataclass(frozen=True)
class Round:
    """A round in a tournament containing multiple matches."""

    number: int
    matches: List[Match] = field(default_factory=list)
    motion: str = ""

    def add_match(self, match: Match) -> "Round":
        """Return a new Round with the match added (immutable pattern)."""
        return Round(self.number, self.matches + [match], self.motion)


@dataclass
class Tournament:
    """A complete tournament snapshot organized by rounds."""

    format: Format = BRITISH_PARLIAMENTARY
    teams: List[TeamEntry] = field(default_factory=list)
    members: List[MemberEntry] = field(default_factory=list)
    rounds: List[Round] = field(default_factory=list)

    @property
    def matches(self) -> List[Match]:
        """Get all matches across all rounds."""
        return [match for round_ in self.rounds for match in round_.matches]

    @property
    def results(self) -> List[ResultEntry]:
        return [result for match in self.matches for result in match.results]

    @property
    def scores(self) -> List[SpeakerScoreEntry]:
        return [score for match in self.matches for score in match.scores]

    @property
    def team_ids(self) -> List[int]:
        return [team.team_id for team in self.teams]

    def get_round(self, number: int) -> Optional[Round]:
        for round_ in self.rounds:
            if round_.number == number:
                return round_
        return None

    def match_totals(self) -> Dict[int, Dict[int, float]]:
        """Map match_id -> {team_id: speaker total} for every fully scored team."""
        from debatetab.tournament_core.scoring import aggregate_match_scores

        totals = {}
        for match in self.matches:
            team_totals = aggregate_match_scores(
                match.scores, self.format, team_order=match.team_ids
            )
            totals[match.match_id] = {tt.team_id: tt.total for tt in team_totals}
        return totals

    def resolve_results(self) -> "Tournament":
        """Return a new Tournament with every match's results recomputed.

        Matches whose scores are incomplete keep their existing results.
        """
        from debatetab.tournament_core.scoring import resolve_match

        rounds = []
        for round_ in self.rounds:
            matches = []
            for match in round_.matches:
                ranks = resolve_match(
                    match.scores, self.format, team_order=match.team_ids
                )
                if ranks:
                    match = match.with_results(
                        ResultEntry(
                            round_.number, match.match_id, tr.team_id, tr.rank, tr.points
                        )
                        for tr in ranks
                    )
                matches.append(match)
            rounds.append(Round(round_.number, matches, round_.motion))
        return Tournament(self.format, list(self.teams), list(self.members), rounds)

    def calculate_team_standings(self) -> List[TeamStanding]:
        from debatetab.tournament_core.standings import calculate_team_standings

        return calculate_team_standings(self.teams, self.results, self.match_totals())

    def calculate_speaker_standings(self) -> List[SpeakerStanding]:
        from debatetab.tournament_core.standings import calculate_speaker_standings

        return calculate_speaker_standings(self.members, self.scores, self.teams)

    def generate_pairings(
        self,
        round_number: int,
        mode: PairingMode = PairingMode.RANDOM,
        leftover_policy: LeftoverPolicy = LeftoverPolicy.PARTIAL,
        rng=None,
    ) -> PairingProposal:
        """Propose a draw for a round from this snapshot's roster and results."""
        from debatetab.tournament_core.pairing import PairingEngine

        engine = PairingEngine(
            self.format, mode=mode, leftover_policy=leftover_policy, rng=rng
        )
        return engine.propose(self.team_ids, round_number, self.results)
