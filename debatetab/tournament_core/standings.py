"""
Team and speaker standings across a whole tournament.

Both calculations are pure: they read the records they are given and return
new standings lists, so they can be recomputed whenever the underlying data
changes.
"""

import statistics
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from debatetab.tournament_core.structure import (
    MemberEntry,
    ResultEntry,
    SpeakerScoreEntry,
    SpeakerStanding,
    TeamEntry,
    TeamStanding,
)


def calculate_team_standings(
    teams: Sequence[TeamEntry],
    results: Iterable[ResultEntry],
    match_totals: Mapping[int, Mapping[int, float]],
) -> List[TeamStanding]:
    """
    Calculate team standings.

    Teams are sorted by total points, then by average speaker score, then by
    name and id so that equal teams always come out in the same order.

    Args:
        teams: The roster. Teams that only appear in results are added.
        results: Every result of the tournament
        match_totals: match_id -> {team_id: speaker total} for fully scored
            teams, as produced by aggregate_match_scores

    Returns:
        TeamStanding entries in rank order, rank being the 1-based position.
    """
    entries: Dict[int, TeamEntry] = {team.team_id: team for team in teams}
    total_points: Dict[int, int] = {team_id: 0 for team_id in entries}
    speaker_totals: Dict[int, List[float]] = {team_id: [] for team_id in entries}

    for result in results:
        if result.team_id not in entries:
            entries[result.team_id] = TeamEntry(result.team_id)
            total_points[result.team_id] = 0
            speaker_totals[result.team_id] = []
        total_points[result.team_id] += result.points

        team_total = match_totals.get(result.match_id, {}).get(result.team_id)
        if team_total is not None:
            speaker_totals[result.team_id].append(team_total)

    rows = []
    for team_id, team in entries.items():
        totals = speaker_totals[team_id]
        total_speaker_score = sum(totals)
        average = total_speaker_score / len(totals) if totals else 0.0
        rows.append(
            (team, total_points[team_id], total_speaker_score, average, len(totals))
        )

    rows.sort(key=lambda row: (-row[1], -row[3], row[0].name, row[0].team_id))

    return [
        TeamStanding(
            rank=rank,
            team_id=team.team_id,
            name=team.name,
            institution=team.institution,
            total_points=points,
            total_speaker_score=total_speaker_score,
            average_speaker_score=average,
            matches_scored=matches_scored,
        )
        for rank, (team, points, total_speaker_score, average, matches_scored) in enumerate(
            rows, start=1
        )
    ]


def speaker_deviation(round_scores: Sequence[float]) -> float:
    """Population standard deviation of per-round scores; 0 for one round or none."""
    if len(round_scores) <= 1:
        return 0.0
    return statistics.pstdev(round_scores)


def calculate_speaker_standings(
    members: Sequence[MemberEntry],
    scores: Iterable[SpeakerScoreEntry],
    teams: Sequence[TeamEntry] = (),
) -> List[SpeakerStanding]:
    """
    Calculate speaker standings.

    A member's points are summed per round first; the average and standard
    deviation are taken over those per-round values. Members without scores
    are listed with zeros.

    Speakers are sorted by total points, then average, then name and id.
    """
    team_lookup: Dict[int, TeamEntry] = {team.team_id: team for team in teams}
    entries: Dict[int, MemberEntry] = {member.member_id: member for member in members}
    per_round: Dict[int, Dict[int, float]] = {member_id: {} for member_id in entries}

    for score in scores:
        if score.member_id not in entries:
            entries[score.member_id] = MemberEntry(score.member_id, score.team_id)
            per_round[score.member_id] = {}
        rounds = per_round[score.member_id]
        rounds[score.round_number] = rounds.get(score.round_number, 0) + score.points

    rows = []
    for member_id, member in entries.items():
        round_scores = tuple(
            points for _, points in sorted(per_round[member_id].items())
        )
        total = sum(round_scores)
        rounds_participated = len(round_scores)
        average = total / rounds_participated if rounds_participated else 0.0
        rows.append(
            (member, total, average, rounds_participated, speaker_deviation(round_scores), round_scores)
        )

    rows.sort(key=lambda row: (-row[1], -row[2], row[0].name, row[0].member_id))

    standings = []
    for rank, (member, total, average, rounds_participated, deviation, round_scores) in enumerate(
        rows, start=1
    ):
        team: Optional[TeamEntry] = team_lookup.get(member.team_id)
        standings.append(
            SpeakerStanding(
                rank=rank,
                member_id=member.member_id,
                name=member.name,
                team_id=member.team_id,
                team_name=team.name if team else "",
                institution=team.institution if team else None,
                total_points=total,
                average_points=average,
                rounds_participated=rounds_participated,
                standard_deviation=deviation,
                round_scores=round_scores,
            )
        )
    return standings
