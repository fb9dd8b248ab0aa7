"""Change feed writes and reads."""

import logging
from typing import Optional

from django.db import DatabaseError, transaction

from ..models import ChangeEvent, ChangeChannel, ChangeAction
from .coalescing import coalesce_changes

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST_EVENT = 'inventory_update'
DEFAULT_FEED_LIMIT = 100


def record_change(table: str, action: str, object_id='') -> None:
    """
    Append a table change to the feed.

    Runs after the writing transaction has committed, so a failure here
    is logged and never reaches the request that made the change.
    """
    try:
        ChangeEvent.objects.create(
            channel=ChangeChannel.DB_CHANGES,
            table=table,
            action=action,
            object_id=str(object_id or ''),
        )
    except DatabaseError:
        logger.warning("Could not record %s on %s (%s)", action, table, object_id, exc_info=True)


def broadcast(event: str = DEFAULT_BROADCAST_EVENT, payload: dict = None) -> Optional[ChangeEvent]:
    """
    Append an ad hoc app_updates event (inventory_update by default).

    Callers broadcast after their own write has committed, so a failed
    feed write is logged and None is returned.
    """
    try:
        with transaction.atomic():
            change = ChangeEvent.objects.create(
                channel=ChangeChannel.APP_UPDATES,
                action=ChangeAction.BROADCAST,
                event=event,
                payload=payload or {},
            )
    except DatabaseError:
        logger.warning("Could not broadcast %s", event, exc_info=True)
        return None
    logger.debug("Broadcast %s #%s", event, change.id)
    return change


def event_to_row(change: ChangeEvent) -> dict:
    return {
        'id': change.id,
        'channel': change.channel,
        'table': change.table,
        'action': change.action,
        'object_id': change.object_id,
        'event': change.event,
        'payload': change.payload,
        'created_at': change.created_at,
        'topic': change.topic,
    }


def changes_since(*, after_id: int = 0, limit: int = DEFAULT_FEED_LIMIT) -> dict:
    """
    Events newer than after_id, oldest first, with coalesced refresh hints.

    Returns:
        {'events': [...], 'hints': [...], 'last_id': int, 'has_more': bool}
    """
    queryset = ChangeEvent.objects.filter(id__gt=after_id).order_by('id')
    page = list(queryset[:limit + 1])
    has_more = len(page) > limit
    rows = [event_to_row(change) for change in page[:limit]]

    return {
        'events': rows,
        'hints': coalesce_changes(rows),
        'last_id': rows[-1]['id'] if rows else after_id,
        'has_more': has_more,
    }
