from django.db import models
from django.utils import timezone


class ChangeChannel(models.TextChoices):
    DB_CHANGES = 'db_changes', 'Table changes'
    APP_UPDATES = 'app_updates', 'App updates'


class ChangeAction(models.TextChoices):
    INSERT = 'INSERT', 'Insert'
    UPDATE = 'UPDATE', 'Update'
    DELETE = 'DELETE', 'Delete'
    BROADCAST = 'BROADCAST', 'Broadcast'


class ChangeEvent(models.Model):
    """
    One entry of the change feed.

    Table changes carry the table name and the changed row's key;
    broadcasts carry an event name and a free-form payload.
    """

    channel = models.CharField(max_length=20, choices=ChangeChannel.choices, default=ChangeChannel.DB_CHANGES)
    table = models.CharField(max_length=50, blank=True)
    action = models.CharField(max_length=20, choices=ChangeAction.choices)
    object_id = models.CharField(max_length=64, blank=True)
    event = models.CharField(max_length=50, blank=True)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'change_events'
        ordering = ['id']

    def __str__(self):
        topic = self.table or self.event
        return f"#{self.id} {self.channel} {topic} {self.action}"

    @property
    def topic(self):
        """Key clients refresh on: the table, or the broadcast event name."""
        return self.table if self.channel == ChangeChannel.DB_CHANGES else self.event
