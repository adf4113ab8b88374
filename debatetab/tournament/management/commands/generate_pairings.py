"""
Management command to preview or commit the draw for a round.

By default the proposed draw is only printed; pass --commit to store it.
"""

import random

from django.core.management.base import BaseCommand, CommandError

from debatetab.tournament.models import Round, Team, Tournament
from debatetab.tournament.pairinggen import commit_pairings, preview_pairings
from debatetab.tournament_core.exceptions import (
    InsufficientTeams,
    PairingHasResultException,
    PairingsExistException,
)
from debatetab.tournament_core.structure import LeftoverPolicy, PairingMode


class Command(BaseCommand):
    help = "Preview or commit pairings for a round of a tournament"

    def add_arguments(self, parser):
        parser.add_argument("tournament", type=str, help="Tournament slug")
        parser.add_argument("round_number", type=int, help="Round to pair")
        parser.add_argument(
            "--mode",
            choices=[mode.value for mode in PairingMode],
            default=PairingMode.RANDOM.value,
            help="Pairing mode (default: random)",
        )
        parser.add_argument(
            "--leftover-policy",
            choices=[policy.value for policy in LeftoverPolicy],
            help="Override the tournament's leftover policy",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Random seed for a reproducible random draw",
        )
        parser.add_argument(
            "--commit",
            action="store_true",
            help="Store the draw instead of only showing it",
        )
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Replace existing pairings for the round",
        )

    def handle(self, *args, **options):
        try:
            tournament = Tournament.objects.get(slug=options["tournament"])
        except Tournament.DoesNotExist:
            raise CommandError(f"Tournament '{options['tournament']}' does not exist")
        try:
            round_ = Round.objects.get(
                tournament=tournament, number=options["round_number"]
            )
        except Round.DoesNotExist:
            raise CommandError(
                f"Round {options['round_number']} does not exist for {tournament.slug}"
            )

        rng = random.Random(options["seed"]) if options["seed"] is not None else None
        try:
            proposal = preview_pairings(
                round_,
                options["mode"],
                leftover_policy=options["leftover_policy"],
                rng=rng,
            )
        except InsufficientTeams as e:
            raise CommandError(str(e))

        names = dict(Team.objects.filter(tournament=tournament).values_list("id", "name"))
        self.stdout.write(
            f"Round {round_.number} of {tournament.name} ({proposal.mode.value} mode):"
        )
        for number, match in enumerate(proposal.matches, start=1):
            teams = ", ".join(f"{position}: {names[team_id]}" for team_id, position in match.teams)
            self.stdout.write(f"  Match {number}: {teams}")
        for team_id in proposal.unpaired:
            self.stdout.write(self.style.WARNING(f"  Unpaired: {names[team_id]}"))

        if not options["commit"]:
            self.stdout.write("Preview only; pass --commit to store these pairings")
            return

        try:
            commit_pairings(round_, proposal, overwrite=options["overwrite"])
        except PairingsExistException:
            raise CommandError(
                f"Round {round_.number} already has pairings (use --overwrite)"
            )
        except PairingHasResultException:
            raise CommandError(
                f"Round {round_.number} already has speaker scores; pairings not replaced"
            )
        self.stdout.write(
            self.style.SUCCESS(f"✓ Stored {len(proposal.matches)} match(es)")
        )
