"""
Convert tournament_core structures to database objects.

This module provides functions to convert pure tournament structures created by
the TournamentBuilder into Django database models for persistence.
"""

import reversion
from django.db import transaction
from django.utils.text import slugify

from debatetab.tournament_core.builder import TournamentBuilder


def structure_to_db(builder: TournamentBuilder, existing_tournament=None):
    """Convert a TournamentBuilder's structure to database objects.

    This function creates all necessary database objects including:
    - The Tournament (unless an existing one is given)
    - Teams and their members
    - Rounds, matches with team positions, speaker scores and results

    Args:
        builder: A TournamentBuilder instance with tournament structure and metadata
        existing_tournament: Optional existing Tournament instance to add to

    Returns:
        dict: A dictionary containing the created database objects:
            - 'tournament': The Tournament instance
            - 'teams': Dict mapping team names to Team instances
            - 'members': Dict mapping speaker names to Member instances
            - 'rounds': Dict mapping round numbers to Round instances
            - 'matches': Dict mapping structure match ids to Match instances
    """
    from debatetab.tournament.models import (
        Match,
        MatchTeam,
        Member,
        Result,
        Round,
        SpeakerScore,
        Team,
        Tournament,
    )

    structure = builder.tournament
    metadata = builder.metadata

    with transaction.atomic(), reversion.create_revision():
        reversion.set_comment("Created tournament from structure.")

        if existing_tournament is not None:
            tournament = existing_tournament
        else:
            name = metadata.name or "Test Tournament"
            tournament = Tournament.objects.create(
                name=name,
                slug=metadata.slug or slugify(name) or "tournament",
                format=builder.format.code,
                speakers_per_team=builder.format.speakers_per_team,
                **metadata.settings,
            )

        teams_by_id = {}
        for entry in structure.teams:
            teams_by_id[entry.team_id] = Team.objects.create(
                tournament=tournament,
                name=entry.name,
                institution=entry.institution or "",
            )

        members_by_id = {}
        for entry in structure.members:
            members_by_id[entry.member_id] = Member.objects.create(
                team=teams_by_id[entry.team_id],
                name=entry.name,
                role=entry.role.value,
            )

        rounds = {}
        matches = {}
        for round_ in sorted(structure.rounds, key=lambda r: r.number):
            db_round = Round.objects.create(
                tournament=tournament,
                number=round_.number,
                motion=round_.motion,
                is_completed=round_.number in metadata.completed_rounds,
            )
            rounds[round_.number] = db_round

            for pairing_order, match in enumerate(round_.matches, start=1):
                db_match = Match.objects.create(round=db_round, pairing_order=pairing_order)
                matches[match.match_id] = db_match
                for team_id, position in match.teams:
                    MatchTeam.objects.create(
                        match=db_match, team=teams_by_id[team_id], position=position
                    )
                for score in match.scores:
                    SpeakerScore.objects.create(
                        member=members_by_id[score.member_id],
                        match=db_match,
                        round=db_round,
                        points=score.points,
                    )
                for result in match.results:
                    Result.objects.create(
                        match=db_match,
                        team=teams_by_id[result.team_id],
                        rank=result.rank,
                        points=result.points,
                    )

    names_by_team_id = {team_id: name for name, team_id in metadata.teams.items()}
    names_by_member_id = {member_id: name for name, member_id in metadata.members.items()}
    return {
        "tournament": tournament,
        "teams": {names_by_team_id[tid]: team for tid, team in teams_by_id.items()},
        "members": {
            names_by_member_id[mid]: member for mid, member in members_by_id.items()
        },
        "rounds": rounds,
        "matches": matches,
    }
