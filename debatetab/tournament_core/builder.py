"""
Builder for creating tournament structures with a fluent API.

This module provides a builder class for creating tournament_core structures
by team and speaker name instead of by id. It has no database dependencies;
debatetab.tournament.builder wraps it to persist the result.
"""

import random
from typing import Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field

from debatetab.tournament_core.formats import Format, get_format
from debatetab.tournament_core.pairing import PairingEngine
from debatetab.tournament_core.scoring import resolve_match
from debatetab.tournament_core.structure import (
    LeftoverPolicy,
    Match,
    MemberEntry,
    MemberRole,
    PairingMode,
    PairingProposal,
    ResultEntry,
    Round,
    SpeakerScoreEntry,
    TeamEntry,
    Tournament,
)

DebateEntry = Union[str, Tuple]


@dataclass
class TournamentMetadata:
    """Metadata for the tournament (not part of core structure)."""

    name: str = ""
    slug: str = ""
    teams: Dict[str, int] = field(default_factory=dict)  # name -> team id
    members: Dict[str, int] = field(default_factory=dict)  # name -> member id
    completed_rounds: List[int] = field(default_factory=list)

    # Tournament settings (for database compatibility)
    settings: Dict = field(default_factory=dict)


class TournamentBuilder:
    """Builder for creating tournament structures easily."""

    def __init__(
        self,
        fmt: Union[str, Format] = "BP",
        speakers_per_team: Optional[int] = None,
    ):
        self.format = get_format(fmt)
        if speakers_per_team is not None:
            self.format = self.format.with_speakers(speakers_per_team)
        self.tournament = Tournament(format=self.format)
        self.metadata = TournamentMetadata()
        self.current_round: Optional[Round] = None
        self._team_members: Dict[int, List[int]] = {}
        self._next_team_id = 1
        self._next_member_id = 1
        self._next_match_id = 1

    def named(self, name: str, slug: str = "", **settings) -> "TournamentBuilder":
        """Define tournament metadata."""
        self.metadata.name = name
        self.metadata.slug = slug
        self.metadata.settings = settings
        return self

    def team(
        self, name: str, *speakers: str, institution: Optional[str] = None
    ) -> "TournamentBuilder":
        """Add a team with its speakers, first speaker as leader."""
        if name in self.metadata.teams:
            raise ValueError(f"Team '{name}' already exists")

        team_id = self._next_team_id
        self._next_team_id += 1
        self.metadata.teams[name] = team_id
        self._team_members[team_id] = []
        self.tournament.teams.append(TeamEntry(team_id, name, institution))

        for index, speaker in enumerate(speakers):
            role = MemberRole.LEADER if index == 0 else MemberRole.MEMBER
            self.member(name, speaker, role)
        return self

    def member(
        self, team_name: str, name: str, role: MemberRole = MemberRole.MEMBER
    ) -> "TournamentBuilder":
        """Add a speaker to an existing team."""
        if name in self.metadata.members:
            raise ValueError(f"Speaker '{name}' already exists")
        team_id = self.team_id(team_name)

        member_id = self._next_member_id
        self._next_member_id += 1
        self.metadata.members[name] = member_id
        self._team_members[team_id].append(member_id)
        self.tournament.members.append(MemberEntry(member_id, team_id, name, role))
        return self

    def round(self, number: int, motion: str = "") -> "TournamentBuilder":
        """Start a new round."""
        if self.tournament.get_round(number) is not None:
            raise ValueError(f"Round {number} already exists")
        self.current_round = Round(number, motion=motion)
        self.tournament.rounds.append(self.current_round)
        return self

    def debate(self, *entries: DebateEntry) -> "TournamentBuilder":
        """
        Add a match to the current round.

        Each entry is a team name, or a tuple of (team name, *speaker points)
        scoring the team's speakers in the order they were added. Teams take
        the format's positions in the order given.

        Example:
            builder.debate(("Oxford A", 40, 42), ("Cambridge A", 38, 39),
                           ("LSE A", 45, 44), ("UCL A", 30, 33))
        """
        round_ = self._require_round()
        if len(entries) > self.format.group_size:
            raise ValueError(
                f"A {self.format.code} debate has at most {self.format.group_size} teams"
            )

        match_id = self._next_match_id
        self._next_match_id += 1

        teams = []
        scores = []
        for entry, position in zip(entries, self.format.positions):
            if isinstance(entry, str):
                team_name, points = entry, ()
            else:
                team_name, points = entry[0], entry[1:]
            team_id = self.team_id(team_name)
            teams.append((team_id, position))

            members = self._team_members[team_id]
            if len(points) > len(members):
                raise ValueError(
                    f"Team '{team_name}' has {len(members)} speakers, got {len(points)} scores"
                )
            for member_id, member_points in zip(members, points):
                scores.append(
                    SpeakerScoreEntry(
                        member_id, team_id, match_id, round_.number, member_points
                    )
                )

        self._replace_round(
            round_.add_match(Match(match_id, tuple(teams), tuple(scores)))
        )
        return self

    def pair(
        self,
        mode: PairingMode = PairingMode.RANK,
        leftover_policy: LeftoverPolicy = LeftoverPolicy.PARTIAL,
        rng: Optional[random.Random] = None,
    ) -> PairingProposal:
        """Generate the current round's draw and add its matches, unscored."""
        round_ = self._require_round()
        engine = PairingEngine(
            self.format, mode=mode, leftover_policy=leftover_policy, rng=rng
        )
        proposal = engine.propose(
            self.tournament.team_ids, round_.number, self.tournament.results
        )
        for proposed in proposal.matches:
            match_id = self._next_match_id
            self._next_match_id += 1
            round_ = round_.add_match(Match(match_id, proposed.teams))
        self._replace_round(round_)
        return proposal

    def complete(self) -> "TournamentBuilder":
        """Resolve results for every fully scored match of the current round."""
        round_ = self._require_round()
        matches = []
        for match in round_.matches:
            ranks = resolve_match(match.scores, self.format, team_order=match.team_ids)
            if ranks:
                match = match.with_results(
                    ResultEntry(round_.number, match.match_id, tr.team_id, tr.rank, tr.points)
                    for tr in ranks
                )
            matches.append(match)
        self._replace_round(Round(round_.number, matches, round_.motion))
        self.metadata.completed_rounds.append(round_.number)
        self.current_round = None
        return self

    def build(self) -> Tournament:
        """Return the tournament structure."""
        return self.tournament

    def team_id(self, name: str) -> int:
        if name not in self.metadata.teams:
            raise ValueError(f"Team '{name}' not found")
        return self.metadata.teams[name]

    def member_id(self, name: str) -> int:
        if name not in self.metadata.members:
            raise ValueError(f"Speaker '{name}' not found")
        return self.metadata.members[name]

    def _require_round(self) -> Round:
        if self.current_round is None:
            raise ValueError("No round in progress; call round() first")
        return self.current_round

    def _replace_round(self, new_round: Round):
        rounds = self.tournament.rounds
        for index, existing in enumerate(rounds):
            if existing.number == new_round.number:
                rounds[index] = new_round
        if self.current_round is not None and self.current_round.number == new_round.number:
            self.current_round = new_round
