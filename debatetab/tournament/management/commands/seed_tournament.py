"""
Management command to seed a demo debate tournament:
- Teams named after Faker institutions, each with a full set of speakers
- A configurable number of empty rounds, ready for pairing
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify
from faker import Faker

from debatetab.tournament.builder import TournamentBuilder
from debatetab.tournament.models import Tournament
from debatetab.tournament_core.exceptions import UnknownFormat
from debatetab.tournament_core.formats import FORMATS, get_format


class Command(BaseCommand):
    help = "Seed a demo debate tournament with Faker-generated teams and speakers"

    def add_arguments(self, parser):
        parser.add_argument(
            "--name",
            type=str,
            default="Demo Open",
            help="Name of the tournament (default: Demo Open)",
        )
        parser.add_argument(
            "--format",
            type=str,
            default="BP",
            choices=sorted(FORMATS),
            help="Debate format (default: BP)",
        )
        parser.add_argument(
            "--teams",
            type=int,
            default=16,
            help="Number of teams (default: 16)",
        )
        parser.add_argument(
            "--rounds",
            type=int,
            default=5,
            help="Number of empty rounds to create (default: 5)",
        )
        parser.add_argument(
            "--speakers-per-team",
            type=int,
            default=2,
            help="Speakers per team (default: 2)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Faker seed for reproducible names",
        )
        parser.add_argument(
            "--clear-existing",
            action="store_true",
            help="Delete an existing tournament with the same slug first",
        )

    def handle(self, *args, **options):
        name = options["name"]
        slug = slugify(name)
        team_count = options["teams"]
        if team_count < 2:
            raise CommandError("A tournament needs at least 2 teams")
        if options["speakers_per_team"] < 1:
            raise CommandError("Teams need at least one speaker")
        try:
            fmt = get_format(options["format"])
        except UnknownFormat as e:
            raise CommandError(str(e))

        if options["seed"] is not None:
            Faker.seed(options["seed"])
        fake = Faker()

        if options["clear_existing"]:
            deleted, _ = Tournament.objects.filter(slug=slug).delete()
            if deleted:
                self.stdout.write(f"Cleared existing '{slug}' data")
        elif Tournament.objects.filter(slug=slug).exists():
            raise CommandError(
                f"Tournament '{slug}' already exists (use --clear-existing)"
            )

        self.stdout.write(self.style.WARNING(f"Creating {name} ({fmt.name})..."))

        with transaction.atomic():
            builder = TournamentBuilder(fmt, options["speakers_per_team"])
            builder.named(name, slug)

            used_team_names = set()
            used_speaker_names = set()
            for _ in range(team_count):
                institution = fake.unique.company()
                team_name = f"{institution} A"
                while team_name in used_team_names:
                    team_name = f"{institution} {fake.random_uppercase_letter()}"
                used_team_names.add(team_name)

                speakers = []
                while len(speakers) < options["speakers_per_team"]:
                    speaker = fake.name()
                    if speaker not in used_speaker_names:
                        used_speaker_names.add(speaker)
                        speakers.append(speaker)
                builder.team(team_name, *speakers, institution=institution)

            builder.build()
            for number in range(1, options["rounds"] + 1):
                builder.start_round(number, motion=f"This House would {fake.bs()}")

        tournament = builder.tournament
        self.stdout.write(self.style.SUCCESS(f"✓ Created {tournament.name}"))
        self.stdout.write(f"  - {team_count} teams")
        self.stdout.write(f"  - {options['rounds']} rounds planned")
        self.stdout.write(f"\nTournament slug: {tournament.slug}")
        self.stdout.write(
            f"Use 'generate_pairings {tournament.slug} 1' to pair the first round"
        )
