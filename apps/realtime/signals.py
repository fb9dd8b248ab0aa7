"""
Change feed signal receivers.

Every committed save or delete on a tracked model appends a ChangeEvent
keyed by the model's table. Queryset update() and bulk_create() do not
send signals; callers that use them broadcast instead.
"""

from functools import partial

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import ChangeAction
from .services import record_change


def _schedule(instance, action):
    transaction.on_commit(
        partial(record_change, instance._meta.db_table, action, instance.pk)
    )


@receiver(post_save, sender='catalog.Product')
@receiver(post_save, sender='registry.Student')
@receiver(post_save, sender='registry.Supplier')
@receiver(post_save, sender='transactions.Transaction')
@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def record_save(sender, instance, created, raw=False, **kwargs):
    if raw:
        return
    _schedule(instance, ChangeAction.INSERT if created else ChangeAction.UPDATE)


@receiver(post_delete, sender='catalog.Product')
@receiver(post_delete, sender='registry.Student')
@receiver(post_delete, sender='registry.Supplier')
@receiver(post_delete, sender='transactions.Transaction')
@receiver(post_delete, sender=settings.AUTH_USER_MODEL)
def record_delete(sender, instance, **kwargs):
    _schedule(instance, ChangeAction.DELETE)
