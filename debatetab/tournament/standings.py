"""Standings read from the database. Nothing here is ever stored."""

from typing import List

from debatetab.tournament.db_to_structure import tournament_to_structure
from debatetab.tournament_core.structure import SpeakerStanding, TeamStanding


def team_standings(tournament) -> List[TeamStanding]:
    return tournament_to_structure(tournament).calculate_team_standings()


def speaker_standings(tournament) -> List[SpeakerStanding]:
    return tournament_to_structure(tournament).calculate_speaker_standings()
