from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    """
    Change feed for connected clients.

    Model signals append a ChangeEvent after each committed write to the
    tracked tables; clients poll the feed and refresh the affected views.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.realtime'
    verbose_name = 'Realtime Change Feed'

    def ready(self):
        """Connect the change feed signal receivers."""
        from . import signals  # noqa: F401
