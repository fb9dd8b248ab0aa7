import pytest
from decimal import Decimal
from unittest.mock import patch
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from apps.catalog.models import Product
from apps.realtime.models import ChangeEvent, ChangeAction, ChangeChannel
from apps.realtime.services import record_change, broadcast, changes_since


@pytest.mark.django_db
class TestSignals:

    def test_product_save_recorded_after_commit(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            product = Product.objects.create(barcode='PEN-1', name='Pen', price=Decimal('5.00'))

        change = ChangeEvent.objects.get(table='products')
        assert change.action == ChangeAction.INSERT
        assert change.object_id == str(product.pk)

    def test_update_and_delete_recorded(self, django_capture_on_commit_callbacks):
        product = Product.objects.create(barcode='PEN-1', name='Pen')

        with django_capture_on_commit_callbacks(execute=True):
            product.name = 'Pen Black'
            product.save()
            product.delete()

        actions = list(ChangeEvent.objects.filter(table='products').values_list('action', flat=True))
        assert actions == [ChangeAction.UPDATE, ChangeAction.DELETE]

    def test_nothing_recorded_before_commit(self):
        Product.objects.create(barcode='PEN-1', name='Pen')

        assert not ChangeEvent.objects.exists()

    def test_staff_changes_recorded(self, django_capture_on_commit_callbacks, employee):
        with django_capture_on_commit_callbacks(execute=True):
            employee.full_name = 'Carl C. Clerk'
            employee.save()

        assert ChangeEvent.objects.filter(table='authorized_users', object_id=str(employee.pk)).exists()


@pytest.mark.django_db
class TestFeedServices:

    def test_record_change_failure_is_logged(self):
        with patch.object(ChangeEvent.objects, 'create', side_effect=DatabaseError('locked')), \
                patch('apps.realtime.services.change_feed.logger') as mock_logger:
            record_change('products', ChangeAction.INSERT, 'x')

        mock_logger.warning.assert_called_once()

    def test_broadcast_defaults(self):
        change = broadcast()

        assert change.channel == ChangeChannel.APP_UPDATES
        assert change.event == 'inventory_update'
        assert change.payload == {}

    def test_broadcast_failure_is_logged(self):
        with patch.object(ChangeEvent.objects, 'create', side_effect=DatabaseError('locked')), \
                patch('apps.realtime.services.change_feed.logger') as mock_logger:
            change = broadcast(payload={'source': 'void'})

        assert change is None
        mock_logger.warning.assert_called_once()

    def test_changes_since(self):
        record_change('products', ChangeAction.INSERT, 'a')
        record_change('products', ChangeAction.UPDATE, 'a')
        record_change('products', ChangeAction.UPDATE, 'a')
        marker = broadcast(payload={'source': 'void'})

        feed = changes_since(after_id=0, limit=10)

        assert len(feed['events']) == 4
        assert feed['last_id'] == marker.id
        assert feed['has_more'] is False
        products = next(h for h in feed['hints'] if h['topic'] == 'products')
        assert products['count'] == 3
        assert products['burst'] is True

    def test_changes_since_pages(self):
        first = broadcast()
        second = broadcast()
        broadcast()

        feed = changes_since(after_id=first.id, limit=1)

        assert [event['id'] for event in feed['events']] == [second.id]
        assert feed['has_more'] is True

    def test_nothing_new_keeps_cursor(self):
        feed = changes_since(after_id=42)

        assert feed == {'events': [], 'hints': [], 'last_id': 42, 'has_more': False}


@pytest.mark.django_db
class TestFeedEndpoints:

    def test_poll(self, employee_client):
        change = broadcast()

        response = employee_client.get(reverse('realtime:changes'), {'after_id': 0})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['last_id'] == change.id
        assert response.data['hints'][0]['topic'] == 'inventory_update'

    def test_broadcast(self, employee_client):
        response = employee_client.post(
            reverse('realtime:broadcast'), {'payload': {'source': 'manual'}}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['event'] == 'inventory_update'
        assert ChangeEvent.objects.filter(channel=ChangeChannel.APP_UPDATES).count() == 1

    def test_broadcast_feed_unavailable(self, employee_client):
        with patch.object(ChangeEvent.objects, 'create', side_effect=DatabaseError('locked')):
            response = employee_client.post(reverse('realtime:broadcast'), {}, format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert 'error' in response.data

    def test_broadcast_payload_must_be_object(self, employee_client):
        response = employee_client.post(reverse('realtime:broadcast'), {'payload': [1, 2]}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('realtime:changes'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
