"""
Speaker score writes and match result resolution against the database.

Every score write re-resolves the match's results in the same transaction, so
Result rows always reflect the current scores once a match is fully scored.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

import reversion
from django.db import transaction

from debatetab.tournament.db_to_structure import (
    match_scores,
    match_team_order,
    persistence_guard,
    tournament_format,
)
from debatetab.tournament.models import MatchTeam, Result, SpeakerScore
from debatetab.tournament_core.exceptions import IncompleteScores, InvalidScoreException
from debatetab.tournament_core.scoring import aggregate_match_scores, resolve_ranks
from debatetab.tournament_core.structure import TeamRank

logger = logging.getLogger(__name__)

RESOLVED = "resolved"
INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class MatchResolution:
    """Outcome of resolving one match's results."""

    match_id: int
    outcome: str
    ranks: Tuple[TeamRank, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return self.outcome == RESOLVED


def refresh_match_results(match) -> MatchResolution:
    """Recompute and replace the Result rows of a match.

    With fewer than two fully scored teams nothing is written and the
    resolution is reported as incomplete.
    """
    fmt = tournament_format(match.round.tournament)
    scores = match_scores(match)
    totals = aggregate_match_scores(scores, fmt, team_order=match_team_order(match, fmt))
    try:
        ranks = resolve_ranks(totals, fmt)
    except IncompleteScores:
        logger.debug("Match %s is not fully scored yet", match.pk)
        return MatchResolution(match.pk, INCOMPLETE)

    with persistence_guard("Resolving results", "match %s" % match.pk):
        with transaction.atomic():
            with reversion.create_revision():
                reversion.set_comment("Resolved match results.")
                Result.objects.filter(match=match).delete()
                for team_rank in ranks:
                    Result.objects.create(
                        match=match,
                        team_id=team_rank.team_id,
                        rank=team_rank.rank,
                        points=team_rank.points,
                    )

    logger.info("Resolved results for match %s (%d teams)", match.pk, len(ranks))
    return MatchResolution(match.pk, RESOLVED, tuple(ranks))


def refresh_round_results(round_) -> List[MatchResolution]:
    return [
        refresh_match_results(match)
        for match in round_.match_set.order_by("pairing_order", "id")
    ]


def record_speaker_score(match, member, points):
    """Insert or update a member's score for a match, then re-resolve the match.

    Returns:
        (SpeakerScore, MatchResolution)

    Raises:
        InvalidScoreException: if the points are not a finite number within the
            tournament's range, or the member's team is not in the match
    """
    tournament = match.round.tournament
    if isinstance(points, bool) or not isinstance(points, (int, float)):
        raise InvalidScoreException("Speaker points must be a number, got %r" % (points,))
    if not math.isfinite(points) or not tournament.score_in_range(points):
        raise InvalidScoreException(
            "Speaker points must be between %s and %s, got %s"
            % (tournament.min_speaker_score, tournament.max_speaker_score, points)
        )
    if not MatchTeam.objects.filter(match=match, team_id=member.team_id).exists():
        raise InvalidScoreException(
            "%s is not on a team in match %s" % (member.name, match.pk)
        )

    with persistence_guard("Recording speaker score", "match %s" % match.pk):
        with transaction.atomic():
            with reversion.create_revision():
                reversion.set_comment("Recorded speaker score.")
                score, _ = SpeakerScore.objects.update_or_create(
                    member=member,
                    match=match,
                    defaults={"round": match.round, "points": points},
                )
            resolution = refresh_match_results(match)
    return score, resolution
