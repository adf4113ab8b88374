"""
Management command to generate random speaker scores for a round.

Every speaking member of every match in the round gets a simulated score;
results are resolved as the matches become fully scored.
"""

import random

from django.core.management.base import BaseCommand, CommandError

from debatetab.tournament.builder import simulate_round_scores
from debatetab.tournament.models import Result, Round, Tournament


class Command(BaseCommand):
    help = "Generate random speaker scores for a round of a tournament"

    def add_arguments(self, parser):
        parser.add_argument("tournament", type=str, help="Tournament slug")
        parser.add_argument(
            "--round-number",
            type=int,
            help="Specific round number (default: latest round with matches)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Random seed for reproducible scores",
        )
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Overwrite existing scores (default: skip speakers with scores)",
        )
        parser.add_argument(
            "--complete",
            action="store_true",
            help="Mark the round as completed afterwards",
        )

    def handle(self, *args, **options):
        try:
            tournament = Tournament.objects.get(slug=options["tournament"])
        except Tournament.DoesNotExist:
            raise CommandError(f"Tournament '{options['tournament']}' does not exist")

        round_number = options.get("round_number")
        if round_number:
            try:
                target_round = Round.objects.get(tournament=tournament, number=round_number)
            except Round.DoesNotExist:
                raise CommandError(
                    f"Round {round_number} does not exist for {tournament.slug}"
                )
        else:
            target_round = (
                Round.objects.filter(tournament=tournament, match__isnull=False)
                .order_by("-number")
                .first()
            )
            if not target_round:
                raise CommandError(f"No paired rounds found for {tournament.slug}")

        self.stdout.write(f"Target round: {target_round.number}")

        rng = random.Random(options["seed"]) if options["seed"] is not None else None
        written = simulate_round_scores(target_round, rng=rng, overwrite=options["overwrite"])
        # Matches were resolved as their last score was recorded
        match_count = target_round.match_set.count()
        resolved = (
            Result.objects.filter(match__round=target_round)
            .order_by()
            .values("match")
            .distinct()
            .count()
        )

        if written:
            self.stdout.write(self.style.SUCCESS(f"✓ Generated {written} speaker scores"))
        else:
            self.stdout.write("No scores generated (all speakers already have scores)")
        self.stdout.write(f"Resolved {resolved} of {match_count} match(es)")

        if options["complete"]:
            target_round.is_completed = True
            target_round.save()
            self.stdout.write(f"Round {target_round.number} marked as completed")
