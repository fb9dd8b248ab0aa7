"""Services for the realtime change feed."""

from .coalescing import coalesce_changes, BURST_WINDOW, BURST_THRESHOLD
from .change_feed import (
    DEFAULT_BROADCAST_EVENT,
    record_change,
    broadcast,
    event_to_row,
    changes_since,
)
from .retention import prune_change_events

__all__ = [
    # Coalescing
    'coalesce_changes',
    'BURST_WINDOW',
    'BURST_THRESHOLD',
    # Feed
    'DEFAULT_BROADCAST_EVENT',
    'record_change',
    'broadcast',
    'event_to_row',
    'changes_since',
    # Retention
    'prune_change_events',
]
