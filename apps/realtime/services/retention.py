"""Change feed retention."""

import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

from ..models import ChangeEvent

logger = logging.getLogger(__name__)


def prune_change_events(*, older_than_days: Optional[int] = None, now=None) -> int:
    """
    Delete feed events older than the retention window.

    Clients poll with the last id they saw and ids only grow, so pruning
    old rows never hides a newer event from them.

    Args:
        older_than_days: Window in days; defaults to CHANGE_FEED_RETENTION_DAYS
        now: Reference time, defaults to timezone.now()

    Returns:
        Number of events deleted
    """
    if older_than_days is None:
        older_than_days = settings.CHANGE_FEED_RETENTION_DAYS
    cutoff = (now or timezone.now()) - timedelta(days=older_than_days)

    deleted, _ = ChangeEvent.objects.filter(created_at__lt=cutoff).delete()
    logger.info("Pruned %s change event(s) older than %s", deleted, cutoff.isoformat())
    return deleted
