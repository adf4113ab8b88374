from django.apps import AppConfig


class TournamentCoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'debatetab.tournament_core'
    verbose_name = 'Pairing and Standings Engine'
