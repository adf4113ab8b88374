"""
Pairing generation for a single round.

Teams are put in order by a pairing system (random shuffle or prior-points
ranking), cut into consecutive groups of the format's size, and given
positions in group order. The result is a PairingProposal that can be shown
to an administrator before anything is stored.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from debatetab.tournament_core.exceptions import InsufficientTeams
from debatetab.tournament_core.formats import Format, get_format
from debatetab.tournament_core.structure import (
    LeftoverPolicy,
    PairingMode,
    PairingProposal,
    ProposedMatch,
    ResultEntry,
)

logger = logging.getLogger(__name__)


def prior_points(
    results: Iterable[ResultEntry], before_round: Optional[int] = None
) -> Dict[int, int]:
    """Sum result points per team over rounds numbered below before_round.

    With before_round=None every result counts.
    """
    points: Dict[int, int] = {}
    for result in results:
        if before_round is not None and result.round_number >= before_round:
            continue
        points[result.team_id] = points.get(result.team_id, 0) + result.points
    return points


class RandomPairingSystem:
    """Orders teams by an unbiased Fisher-Yates shuffle."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def order_teams(self, team_ids, results=(), round_number=None) -> List[int]:
        order = list(team_ids)
        for i in range(len(order) - 1, 0, -1):
            j = self.rng.randint(0, i)
            order[i], order[j] = order[j], order[i]
        return order


class RankPairingSystem:
    """Orders teams by points earned in earlier rounds, best first.

    Teams on equal points, including teams without results, keep their roster
    order, so the same inputs always give the same draw.
    """

    def order_teams(self, team_ids, results=(), round_number=None) -> List[int]:
        points = prior_points(results, before_round=round_number)
        return sorted(team_ids, key=lambda team_id: points.get(team_id, 0), reverse=True)


def get_pairing_system(mode: Union[str, PairingMode], rng: Optional[random.Random] = None):
    mode = PairingMode(mode)
    if mode == PairingMode.RANK:
        return RankPairingSystem()
    return RandomPairingSystem(rng)


def partition(
    team_ids: Sequence[int],
    fmt: Union[str, Format],
    leftover_policy: LeftoverPolicy = LeftoverPolicy.PARTIAL,
) -> Tuple[List[ProposedMatch], List[int]]:
    """
    Cut an ordered team list into matches and assign positions in order.

    Returns:
        (matches, unpaired) where unpaired holds the teams of a dropped
        trailing group.
    """
    fmt = get_format(fmt)
    group_size = fmt.group_size
    matches = []
    unpaired = []
    for start in range(0, len(team_ids), group_size):
        chunk = list(team_ids[start : start + group_size])
        if len(chunk) < 2 or (
            len(chunk) < group_size and leftover_policy == LeftoverPolicy.DROP
        ):
            unpaired.extend(chunk)
            continue
        matches.append(ProposedMatch(tuple(zip(chunk, fmt.positions))))
    return matches, unpaired


class PairingEngine:
    """Produces pairing proposals for one format and pairing mode."""

    def __init__(
        self,
        fmt: Union[str, Format],
        mode: Union[str, PairingMode] = PairingMode.RANDOM,
        leftover_policy: Union[str, LeftoverPolicy] = LeftoverPolicy.PARTIAL,
        rng: Optional[random.Random] = None,
    ):
        self.format = get_format(fmt)
        self.mode = PairingMode(mode)
        self.leftover_policy = LeftoverPolicy(leftover_policy)
        self.system = get_pairing_system(self.mode, rng)

    def propose(
        self,
        team_ids: Sequence[int],
        round_number: Optional[int] = None,
        results: Iterable[ResultEntry] = (),
    ) -> PairingProposal:
        """
        Propose a draw for a round.

        Args:
            team_ids: The roster, in roster order
            round_number: The round being paired; only results from earlier
                rounds are used in rank mode
            results: Results of previous rounds (ignored in random mode)

        Raises:
            InsufficientTeams: if fewer than two teams are given
        """
        team_ids = list(team_ids)
        if len(set(team_ids)) != len(team_ids):
            raise ValueError("Team roster contains duplicate team ids")
        if len(team_ids) < 2:
            raise InsufficientTeams(len(team_ids))

        ordered = self.system.order_teams(team_ids, list(results), round_number)
        matches, unpaired = partition(ordered, self.format, self.leftover_policy)

        if unpaired:
            logger.info(
                "Round %s: %d team(s) left unpaired", round_number, len(unpaired)
            )
        partial = [m for m in matches if m.is_partial(self.format.group_size)]
        if partial:
            logger.warning(
                "Round %s: final match has only %d of %d teams",
                round_number,
                len(partial[-1].teams),
                self.format.group_size,
            )

        return PairingProposal(
            round_number=round_number,
            format_code=self.format.code,
            mode=self.mode,
            matches=tuple(matches),
            unpaired=tuple(unpaired),
        )


def generate_pairings(
    team_ids: Sequence[int],
    fmt: Union[str, Format],
    mode: Union[str, PairingMode] = PairingMode.RANDOM,
    round_number: Optional[int] = None,
    results: Iterable[ResultEntry] = (),
    leftover_policy: Union[str, LeftoverPolicy] = LeftoverPolicy.PARTIAL,
    rng: Optional[random.Random] = None,
) -> PairingProposal:
    """Convenience wrapper around PairingEngine.propose."""
    engine = PairingEngine(fmt, mode=mode, leftover_policy=leftover_policy, rng=rng)
    return engine.propose(team_ids, round_number, results)
