"""
Tournament builder that extends the core builder with database persistence.

This module provides a TournamentBuilder that wraps tournament_core.builder
and adds database persistence capabilities for testing and seeding.
"""

import random
from typing import Optional, Tuple, Union

from debatetab.tournament_core.builder import TournamentBuilder as CoreTournamentBuilder
from debatetab.tournament.structure_to_db import structure_to_db

ROLE_ORDER = {"leader": 0, "member": 1, "substitute": 2}


def simulate_speaker_score(
    min_score: float = 0,
    max_score: float = 100,
    mean: Optional[float] = None,
    spread: float = 4.0,
    rng: Optional[random.Random] = None,
) -> float:
    """Simulate one judge's speaker score.

    Args:
        min_score: Lowest score the tournament accepts
        max_score: Highest score the tournament accepts
        mean: Centre of the distribution (default: three quarters of the range)
        spread: Standard deviation of the distribution
        rng: Random source, for reproducible simulations

    Returns:
        A score rounded to the nearest half point, clamped to the range
    """
    rng = rng or random
    if mean is None:
        mean = min_score + (max_score - min_score) * 0.75
    score = round(rng.gauss(mean, spread) * 2) / 2
    return float(min(max(score, min_score), max_score))


def speaking_members(team, count: int):
    """The members who speak for a team: leader first, substitutes last."""
    members = sorted(
        team.member_set.all(),
        key=lambda m: (ROLE_ORDER.get(m.role, len(ROLE_ORDER)), m.name, m.pk),
    )
    return members[:count]


def simulate_round_scores(round_obj, rng: Optional[random.Random] = None, overwrite=False):
    """Record simulated scores for every speaker in every match of a round.

    Returns the number of scores written.
    """
    from debatetab.tournament.models import SpeakerScore
    from debatetab.tournament.results import record_speaker_score

    tournament = round_obj.tournament
    written = 0
    for match in round_obj.match_set.order_by("pairing_order", "id"):
        for match_team in match.teams_in_position_order():
            for member in speaking_members(match_team.team, tournament.speakers_per_team):
                if (
                    not overwrite
                    and SpeakerScore.objects.filter(match=match, member=member).exists()
                ):
                    continue
                points = simulate_speaker_score(
                    tournament.min_speaker_score, tournament.max_speaker_score, rng=rng
                )
                record_speaker_score(match, member, points)
                written += 1
    return written


class TournamentBuilder:
    """Fluent interface for building tournaments with database persistence.

    This builder extends the core TournamentBuilder to create database objects
    as needed for testing and seeding. It maintains the same API but adds
    database-specific functionality.
    """

    def __init__(
        self, fmt="BP", speakers_per_team: Optional[int] = None, existing_tournament=None
    ):
        if existing_tournament is not None:
            fmt = existing_tournament.engine_format()
        self.core_builder = CoreTournamentBuilder(fmt, speakers_per_team)
        self._db_objects = None
        self._existing_tournament = existing_tournament

    # Core builder delegation methods

    def named(self, name: str, slug: str = "", **settings) -> "TournamentBuilder":
        self.core_builder.named(name, slug, **settings)
        return self

    def team(
        self, name: str, *speakers: str, institution: Optional[str] = None
    ) -> "TournamentBuilder":
        self.core_builder.team(name, *speakers, institution=institution)
        return self

    def member(self, team_name: str, name: str, role=None) -> "TournamentBuilder":
        if role is None:
            self.core_builder.member(team_name, name)
        else:
            self.core_builder.member(team_name, name, role)
        return self

    def round(self, number: int, motion: str = "") -> "TournamentBuilder":
        self.core_builder.round(number, motion)
        return self

    def debate(self, *entries: Union[str, Tuple]) -> "TournamentBuilder":
        self.core_builder.debate(*entries)
        return self

    def complete(self) -> "TournamentBuilder":
        self.core_builder.complete()
        return self

    def build(self) -> "TournamentBuilder":
        """Build database objects and return self for chaining."""
        if self._db_objects is None:
            self._db_objects = structure_to_db(
                self.core_builder, existing_tournament=self._existing_tournament
            )
        return self

    # Database object access

    @property
    def tournament(self):
        self.build()
        return self._db_objects["tournament"]

    def db_team(self, name: str):
        self.build()
        return self._db_objects["teams"][name]

    def db_member(self, name: str):
        self.build()
        return self._db_objects["members"][name]

    def db_round(self, number: int):
        self.build()
        return self._db_objects["rounds"][number]

    def start_round(self, number: int, motion: str = ""):
        """Create an empty round in the database after the structure is built."""
        from debatetab.tournament.models import Round

        round_obj = Round.objects.create(
            tournament=self.tournament, number=number, motion=motion
        )
        self._db_objects["rounds"][number] = round_obj
        return round_obj
