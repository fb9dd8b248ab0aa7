from datetime import datetime, timedelta, timezone

from apps.realtime.services import coalesce_changes

T0 = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


def change(event_id, topic, ms, channel='db_changes'):
    return {
        'id': event_id,
        'topic': topic,
        'channel': channel,
        'created_at': T0 + timedelta(milliseconds=ms),
    }


class TestCoalesceChanges:

    def test_one_hint_per_table(self):
        hints = coalesce_changes([
            change(1, 'products', 0),
            change(2, 'students', 1000),
            change(3, 'products', 5000),
        ])

        assert [(h['topic'], h['count']) for h in hints] == [('products', 2), ('students', 1)]
        assert hints[0]['first_id'] == 1
        assert hints[0]['last_id'] == 3

    def test_two_quick_changes_are_not_a_burst(self):
        hints = coalesce_changes([change(1, 'products', 0), change(2, 'products', 100)])

        assert hints[0]['burst'] is False

    def test_three_quick_changes_are_a_burst(self):
        hints = coalesce_changes([
            change(1, 'products', 0),
            change(2, 'products', 100),
            change(3, 'products', 250),
        ])

        assert hints[0]['burst'] is True
        assert hints[0]['count'] == 3

    def test_slow_changes_reset_the_run(self):
        hints = coalesce_changes([
            change(1, 'products', 0),
            change(2, 'products', 200),
            change(3, 'products', 600),
            change(4, 'products', 1000),
        ])

        assert hints[0]['burst'] is False
        assert hints[0]['count'] == 4

    def test_other_tables_do_not_break_a_run(self):
        hints = coalesce_changes([
            change(1, 'products', 0),
            change(2, 'transactions', 50),
            change(3, 'products', 100),
            change(4, 'products', 200),
        ])

        products = next(h for h in hints if h['topic'] == 'products')
        assert products['burst'] is True

    def test_broadcasts_keyed_by_event(self):
        hints = coalesce_changes([change(1, 'inventory_update', 0, channel='app_updates')])

        assert hints == [{
            'topic': 'inventory_update',
            'channel': 'app_updates',
            'count': 1,
            'burst': False,
            'first_id': 1,
            'last_id': 1,
            'last_at': T0,
        }]

    def test_empty(self):
        assert coalesce_changes([]) == []
