"""
Refresh hint coalescing.

A bulk import or a large receipt writes many rows within milliseconds.
Clients should refresh once per affected table rather than once per row,
and should wait for the end of a burst before refreshing.

coalesce_changes() collapses a list of change events into one hint per
topic (table name, or broadcast event name). A topic whose events arrived
more than BURST_THRESHOLD times in a row with less than BURST_WINDOW
between consecutive events is flagged as a burst.
"""

from datetime import timedelta

BURST_WINDOW = timedelta(milliseconds=300)
BURST_THRESHOLD = 2


def coalesce_changes(events, window=BURST_WINDOW, threshold=BURST_THRESHOLD) -> list[dict]:
    """
    Collapse change events into refresh hints.

    Args:
        events: Mappings with 'id', 'topic', 'channel' and 'created_at',
            in feed order
        window: Largest gap between two events of one burst
        threshold: A run longer than this is a burst

    Returns:
        One hint per topic in order of first appearance:
        {'topic', 'channel', 'count', 'burst', 'first_id', 'last_id', 'last_at'}
    """
    hints = {}
    runs = {}

    for event in events:
        topic = event['topic']
        created_at = event['created_at']
        hint = hints.get(topic)

        if hint is None:
            hints[topic] = {
                'topic': topic,
                'channel': event['channel'],
                'count': 1,
                'burst': False,
                'first_id': event['id'],
                'last_id': event['id'],
                'last_at': created_at,
            }
            runs[topic] = 1
            continue

        if created_at - hint['last_at'] < window:
            runs[topic] += 1
        else:
            runs[topic] = 1

        hint['count'] += 1
        hint['last_id'] = event['id']
        hint['last_at'] = created_at
        if runs[topic] > threshold:
            hint['burst'] = True

    return list(hints.values())
