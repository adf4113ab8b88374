"""
Score aggregation and rank resolution for a single match.

Speaker scores are reduced to one total per fully scored team, the totals are
ranked, and each rank is converted to tournament points with the format's
point table.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from debatetab.tournament_core.exceptions import IncompleteScores
from debatetab.tournament_core.formats import Format, get_format
from debatetab.tournament_core.structure import (
    SpeakerScoreEntry,
    TeamRank,
    TeamTotal,
)


def aggregate_match_scores(
    scores: Iterable[SpeakerScoreEntry],
    fmt: Union[str, Format],
    team_order: Optional[Sequence[int]] = None,
) -> List[TeamTotal]:
    """
    Sum speaker scores per team for one match.

    A team counts only once every one of its expected speakers has a score;
    partially scored teams never produce a total.

    Args:
        scores: All speaker scores recorded for the match
        fmt: The tournament format (or its code)
        team_order: Order in which to report teams, normally match position
            order. Teams not listed follow in order of first appearance.

    Returns:
        One TeamTotal per complete team, or an empty list when fewer than two
        teams are complete.
    """
    fmt = get_format(fmt)

    # team_id -> member_id -> points; a repeated member keeps its last score
    by_team: Dict[int, Dict[int, float]] = {}
    for team_id in team_order or ():
        by_team.setdefault(team_id, {})
    for score in scores:
        by_team.setdefault(score.team_id, {})[score.member_id] = score.points

    totals = [
        TeamTotal(team_id, sum(members.values()), len(members))
        for team_id, members in by_team.items()
        if len(members) == fmt.speakers_per_team
    ]
    if len(totals) < 2:
        return []
    return totals


def resolve_ranks(totals: Sequence[TeamTotal], fmt: Union[str, Format]) -> List[TeamRank]:
    """
    Rank teams by total and award points.

    Equal totals keep their input order, so ranks always run 1..N without gaps
    or shared places.

    Returns:
        TeamRank entries in rank order.

    Raises:
        IncompleteScores: if fewer than two teams are given
    """
    fmt = get_format(fmt)
    if len(totals) < 2:
        raise IncompleteScores(len(totals))

    # sorted() is stable, including with reverse=True
    ordered = sorted(totals, key=lambda tt: tt.total, reverse=True)
    return [
        TeamRank(
            team_id=tt.team_id,
            total=tt.total,
            rank=rank,
            points=fmt.point_table.points_for_rank(rank),
        )
        for rank, tt in enumerate(ordered, start=1)
    ]


def resolve_match(
    scores: Iterable[SpeakerScoreEntry],
    fmt: Union[str, Format],
    team_order: Optional[Sequence[int]] = None,
) -> List[TeamRank]:
    """Aggregate and rank one match. Returns [] while scores are incomplete."""
    totals = aggregate_match_scores(scores, fmt, team_order=team_order)
    if not totals:
        return []
    return resolve_ranks(totals, fmt)
