from django.apps import AppConfig


class PondsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'ponds'
    verbose_name = 'Seasons & Ponds'

    def ready(self):
        import ponds.signals  # noqa: F401
