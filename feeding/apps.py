from django.apps import AppConfig


class FeedingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'feeding'
    verbose_name = 'Feed Inputs'

    def ready(self):
        import feeding.signals  # noqa: F401
