from django.apps import AppConfig


class TournamentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'debatetab.tournament'
    verbose_name = 'Debate Tournaments'
