"""
Transform database models to tournament_core structure representation.

This module provides functions to convert Django ORM models from
debatetab.tournament into the frozen tournament_core records used for pairing,
result resolution and standings. Database errors raised while reading are
re-raised as PersistenceFailure.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from django.db import DatabaseError

from debatetab.tournament_core.exceptions import PersistenceFailure
from debatetab.tournament_core.formats import Format
from debatetab.tournament_core.structure import (
    Match,
    MemberEntry,
    MemberRole,
    ResultEntry,
    Round,
    SpeakerScoreEntry,
    TeamEntry,
    Tournament,
)

logger = logging.getLogger(__name__)


@contextmanager
def persistence_guard(operation: str, context: str = ""):
    """Re-raise database errors in the block as PersistenceFailure."""
    try:
        yield
    except DatabaseError as e:
        logger.error("%s failed (%s): %s", operation, context, e)
        raise PersistenceFailure(operation, context) from e


def tournament_format(tournament) -> Format:
    return tournament.engine_format()


def team_roster(tournament) -> List[TeamEntry]:
    """The tournament's teams in roster order (name, then id)."""
    from debatetab.tournament.models import Team

    with persistence_guard("Reading team roster", "tournament %s" % tournament.pk):
        teams = Team.objects.filter(tournament=tournament).order_by("name", "id")
        return [TeamEntry(team.pk, team.name, team.institution or None) for team in teams]


def member_roster(tournament) -> List[MemberEntry]:
    from debatetab.tournament.models import Member

    with persistence_guard("Reading members", "tournament %s" % tournament.pk):
        members = Member.objects.filter(team__tournament=tournament).order_by(
            "name", "id"
        )
        return [
            MemberEntry(member.pk, member.team_id, member.name, MemberRole(member.role))
            for member in members
        ]


def prior_results(tournament, before_round: Optional[int] = None) -> List[ResultEntry]:
    """Results of the tournament, optionally only from rounds before a round number."""
    from debatetab.tournament.models import Result

    context = "tournament %s" % tournament.pk
    if before_round is not None:
        context += ", before round %d" % before_round

    with persistence_guard("Reading results", context):
        results = Result.objects.filter(match__round__tournament=tournament)
        if before_round is not None:
            results = results.filter(match__round__number__lt=before_round)
        results = results.select_related("match__round").order_by(
            "match__round__number", "match__pairing_order", "match_id", "rank"
        )
        return [
            ResultEntry(
                round_number=result.match.round.number,
                match_id=result.match_id,
                team_id=result.team_id,
                rank=result.rank,
                points=result.points,
            )
            for result in results
        ]


def match_team_order(match, fmt: Optional[Format] = None) -> List[int]:
    """Team ids of a match in position order."""
    with persistence_guard("Reading match teams", "match %s" % match.pk):
        fmt = fmt or match.round.tournament.engine_format()
        match_teams = sorted(
            match.matchteam_set.all(), key=lambda mt: fmt.position_index(mt.position)
        )
        return [mt.team_id for mt in match_teams]


def match_scores(match) -> List[SpeakerScoreEntry]:
    """Every speaker score of a match, tagged with the speaker's team."""
    from debatetab.tournament.models import SpeakerScore

    with persistence_guard("Reading speaker scores", "match %s" % match.pk):
        scores = (
            SpeakerScore.objects.filter(match=match)
            .select_related("member", "match__round")
            .order_by("id")
        )
        return [
            SpeakerScoreEntry(
                member_id=score.member_id,
                team_id=score.member.team_id,
                match_id=score.match_id,
                round_number=score.match.round.number,
                points=score.points,
            )
            for score in scores
        ]


def tournament_to_structure(tournament) -> Tournament:
    """Convert a whole tournament into a tournament_core Tournament snapshot."""
    from debatetab.tournament.models import Match as MatchModel
    from debatetab.tournament.models import Result, SpeakerScore

    fmt = tournament_format(tournament)
    teams = team_roster(tournament)
    members = member_roster(tournament)

    with persistence_guard("Reading tournament", "tournament %s" % tournament.pk):
        db_matches = (
            MatchModel.objects.filter(round__tournament=tournament)
            .select_related("round")
            .prefetch_related("matchteam_set")
            .order_by("round__number", "pairing_order", "id")
        )

        scores_by_match = {}
        for score in (
            SpeakerScore.objects.filter(match__round__tournament=tournament)
            .select_related("member", "match__round")
            .order_by("id")
        ):
            scores_by_match.setdefault(score.match_id, []).append(
                SpeakerScoreEntry(
                    score.member_id,
                    score.member.team_id,
                    score.match_id,
                    score.match.round.number,
                    score.points,
                )
            )

        results_by_match = {}
        for result in (
            Result.objects.filter(match__round__tournament=tournament)
            .select_related("match__round")
            .order_by("rank")
        ):
            results_by_match.setdefault(result.match_id, []).append(
                ResultEntry(
                    result.match.round.number,
                    result.match_id,
                    result.team_id,
                    result.rank,
                    result.points,
                )
            )

        rounds = {}
        for db_round in tournament.round_set.order_by("number"):
            rounds[db_round.number] = Round(db_round.number, [], db_round.motion)

        for db_match in db_matches:
            match_teams = sorted(
                db_match.matchteam_set.all(),
                key=lambda mt: fmt.position_index(mt.position),
            )
            match = Match(
                match_id=db_match.pk,
                teams=tuple((mt.team_id, mt.position) for mt in match_teams),
                scores=tuple(scores_by_match.get(db_match.pk, ())),
                results=tuple(results_by_match.get(db_match.pk, ())),
            )
            number = db_match.round.number
            rounds[number] = rounds[number].add_match(match)

    return Tournament(
        format=fmt,
        teams=teams,
        members=members,
        rounds=[rounds[number] for number in sorted(rounds)],
    )
