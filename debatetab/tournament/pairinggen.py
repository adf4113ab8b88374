import logging
import random
from typing import Optional, Union

import reversion
from django.db import transaction

from debatetab.tournament.db_to_structure import (
    persistence_guard,
    prior_results,
    team_roster,
    tournament_format,
)
from debatetab.tournament.models import Match, MatchTeam, SpeakerScore, Team
from debatetab.tournament_core.exceptions import (
    InvalidPairingException,
    PairingHasResultException,
    PairingsExistException,
)
from debatetab.tournament_core.pairing import PairingEngine
from debatetab.tournament_core.structure import (
    LeftoverPolicy,
    PairingMode,
    PairingProposal,
)

logger = logging.getLogger(__name__)


def preview_pairings(
    round_,
    mode: Union[str, PairingMode] = PairingMode.RANDOM,
    leftover_policy: Optional[Union[str, LeftoverPolicy]] = None,
    rng: Optional[random.Random] = None,
) -> PairingProposal:
    """Propose a draw for a round without writing anything."""
    tournament = round_.tournament
    if leftover_policy is None:
        leftover_policy = tournament.get_leftover_policy()

    engine = PairingEngine(
        tournament_format(tournament),
        mode=mode,
        leftover_policy=leftover_policy,
        rng=rng,
    )
    results = []
    if engine.mode == PairingMode.RANK:
        results = prior_results(tournament, before_round=round_.number)
    team_ids = [team.team_id for team in team_roster(tournament)]
    return engine.propose(team_ids, round_.number, results)


def validate_proposal(round_, proposal: PairingProposal):
    """Check that a proposal was drawn for this round of this tournament."""
    tournament = round_.tournament
    fmt = tournament_format(tournament)
    if proposal.format_code != fmt.code:
        raise InvalidPairingException(
            "Proposal is for format %s, %s uses %s"
            % (proposal.format_code, tournament, fmt.code)
        )
    if proposal.round_number is not None and proposal.round_number != round_.number:
        raise InvalidPairingException(
            "Proposal is for round %d, not round %d"
            % (proposal.round_number, round_.number)
        )

    team_ids = set(proposal.team_ids)
    known = set(
        Team.objects.filter(tournament=tournament, pk__in=team_ids).values_list(
            "pk", flat=True
        )
    )
    if team_ids - known:
        raise InvalidPairingException(
            "Teams %s are not entered in %s"
            % (sorted(team_ids - known), tournament)
        )
    for proposed in proposal.matches:
        for position in proposed.positions:
            if position not in fmt.positions:
                raise InvalidPairingException(
                    "Position %r is not used in format %s" % (position, fmt.code)
                )
        if len(set(proposed.team_ids)) != len(proposed.team_ids):
            raise InvalidPairingException("A team appears twice in one match")
        if len(set(proposed.positions)) != len(proposed.positions):
            raise InvalidPairingException("A position is taken twice in one match")


def commit_pairings(round_, proposal: PairingProposal, overwrite=False):
    """Replace the round's matches with the proposal, in one transaction.

    Returns the created Match objects in pairing order.
    """
    validate_proposal(round_, proposal)
    context = "round %d of %s" % (round_.number, round_.tournament)
    with persistence_guard("Committing pairings", context):
        with transaction.atomic():
            if Match.objects.filter(round=round_).exists():
                if overwrite:
                    delete_pairings(round_)
                else:
                    raise PairingsExistException()

            matches = []
            with reversion.create_revision():
                reversion.set_comment("Generated pairings.")
                for pairing_order, proposed in enumerate(proposal.matches, start=1):
                    match = Match.objects.create(round=round_, pairing_order=pairing_order)
                    for team_id, position in proposed.teams:
                        MatchTeam.objects.create(
                            match=match, team_id=team_id, position=position
                        )
                    matches.append(match)

    logger.info(
        "Committed %d match(es) for %s (%s mode, %d unpaired)",
        len(matches),
        context,
        proposal.mode.value,
        len(proposal.unpaired),
    )
    return matches


def generate_pairings(
    round_,
    mode: Union[str, PairingMode] = PairingMode.RANDOM,
    overwrite=False,
    leftover_policy: Optional[Union[str, LeftoverPolicy]] = None,
    rng: Optional[random.Random] = None,
) -> PairingProposal:
    """Preview and immediately commit a draw for a round."""
    proposal = preview_pairings(round_, mode, leftover_policy=leftover_policy, rng=rng)
    commit_pairings(round_, proposal, overwrite=overwrite)
    return proposal


def delete_pairings(round_):
    """Delete every match of a round, refusing once any has speaker scores."""
    if SpeakerScore.objects.filter(match__round=round_).exists():
        raise PairingHasResultException()
    Match.objects.filter(round=round_).delete()
