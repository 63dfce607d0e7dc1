"""
Expense Tracking App Configuration
"""

from django.apps import AppConfig


class ExpensesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'expenses'
    verbose_name = 'Expense Tracking'

    def ready(self):
        # Import signals to register them
        import expenses.signals  # noqa: F401
