"""
Management command to trim the change feed.

Usage:
    python manage.py prune_change_events
    python manage.py prune_change_events --days 30
"""

from django.core.management.base import BaseCommand, CommandError

from apps.realtime.services import prune_change_events


class Command(BaseCommand):
    help = 'Delete change feed events older than the retention window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Keep this many days of events (defaults to CHANGE_FEED_RETENTION_DAYS)',
        )

    def handle(self, *args, **options):
        days = options['days']
        if days is not None and days < 1:
            raise CommandError('--days must be at least 1')

        deleted = prune_change_events(older_than_days=days)
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} change event(s)"))
