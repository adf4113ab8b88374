from django.core.management.base import BaseCommand, CommandError

from debatetab.tournament.models import Tournament
from debatetab.tournament.standings import speaker_standings, team_standings


class Command(BaseCommand):
    help = "Print team or speaker standings for a tournament"

    def add_arguments(self, parser):
        parser.add_argument("tournament", type=str, help="Tournament slug")
        parser.add_argument(
            "--speakers",
            action="store_true",
            help="Show speaker standings instead of team standings",
        )
        parser.add_argument(
            "--limit",
            type=int,
            help="Only show the top N entries",
        )

    def handle(self, *args, **options):
        try:
            tournament = Tournament.objects.get(slug=options["tournament"])
        except Tournament.DoesNotExist:
            raise CommandError(f"Tournament '{options['tournament']}' does not exist")

        limit = options["limit"]
        if options["speakers"]:
            self.stdout.write(f"Speaker standings for {tournament.name}")
            self.stdout.write(
                f"{'#':>3}  {'Speaker':<30} {'Team':<30} {'Total':>8} {'Avg':>7} {'Rnds':>4} {'SD':>6}"
            )
            for standing in speaker_standings(tournament)[:limit]:
                self.stdout.write(
                    f"{standing.rank:>3}  {standing.name:<30} {standing.team_name:<30} "
                    f"{standing.total_points:>8.1f} {standing.average_points:>7.2f} "
                    f"{standing.rounds_participated:>4} {standing.standard_deviation:>6.2f}"
                )
        else:
            self.stdout.write(f"Team standings for {tournament.name}")
            self.stdout.write(
                f"{'#':>3}  {'Team':<30} {'Institution':<30} {'Pts':>4} {'Spk':>8} {'Avg':>7}"
            )
            for standing in team_standings(tournament)[:limit]:
                self.stdout.write(
                    f"{standing.rank:>3}  {standing.name:<30} {standing.institution or '':<30} "
                    f"{standing.total_points:>4} {standing.total_speaker_score:>8.1f} "
                    f"{standing.average_speaker_score:>7.2f}"
                )
