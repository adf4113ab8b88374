"""
Test utilities for creating tournament structures easily.

These utilities create pure tournament_core structures without database dependencies,
making it easy to test pairing, scoring and standings logic.
"""

from typing import List

from debatetab.tournament_core.builder import TournamentBuilder
from debatetab.tournament_core.structure import ResultEntry, SpeakerScoreEntry


def create_ap_builder() -> TournamentBuilder:
    """Four AP teams over two scored rounds.

    Round 1: Alpha 82 - Bravo 77, Charlie 89 - Delta 63
    Round 2: Alpha 82 - Charlie 90, Bravo 70 - Delta 72
    Final points: Charlie 6, Alpha 5, Delta 5, Bravo 4
    """
    builder = TournamentBuilder("AP")
    builder.named("Test Open", "test-open")
    builder.team("Alpha", "Ann", "Abe", institution="Alpha College")
    builder.team("Bravo", "Ben", "Bea", institution="Bravo College")
    builder.team("Charlie", "Cal", "Cat")
    builder.team("Delta", "Dan", "Dee", institution="Delta College")

    builder.round(1)
    builder.debate(("Alpha", 40, 42), ("Bravo", 38, 39))
    builder.debate(("Charlie", 45, 44), ("Delta", 30, 33))
    builder.complete()

    builder.round(2)
    builder.debate(("Alpha", 41, 41), ("Charlie", 44, 46))
    builder.debate(("Bravo", 35, 35), ("Delta", 36, 36))
    builder.complete()
    return builder


def create_bp_teams(num_teams: int = 8) -> TournamentBuilder:
    """A BP tournament with teams T1..Tn, each with two speakers."""
    builder = TournamentBuilder("BP")
    for i in range(1, num_teams + 1):
        builder.team(f"T{i}", f"T{i} first", f"T{i} second")
    return builder


def match_scores(match_id: int, round_number: int, *teams) -> List[SpeakerScoreEntry]:
    """Build scores for one match from (team_id, *points) tuples.

    Member ids are team_id * 10 + speaker index.
    """
    scores = []
    for team_id, *points in teams:
        for index, value in enumerate(points, start=1):
            scores.append(
                SpeakerScoreEntry(team_id * 10 + index, team_id, match_id, round_number, value)
            )
    return scores


def round_results(round_number: int, match_id: int, *team_points) -> List[ResultEntry]:
    """Build results for one match from team ids in rank order with their points."""
    return [
        ResultEntry(round_number, match_id, team_id, rank, points)
        for rank, (team_id, points) in enumerate(team_points, start=1)
    ]
