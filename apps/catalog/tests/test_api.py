import pytest
from unittest.mock import patch
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from apps.catalog.models import Product
from apps.realtime.models import ChangeEvent
from apps.transactions.services import process_inventory_batch


@pytest.mark.django_db
class TestProductList:
    """Tests for GET /api/catalog/products/"""

    def test_list_paginated(self, employee_client, product, low_stock_product):
        url = reverse('catalog:product-list')

        response = employee_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert response.data['results'][0]['name'] == 'INTRO TO PROGRAMMING'

    def test_search_and_low_stock(self, employee_client, product, low_stock_product):
        url = reverse('catalog:product-list')

        response = employee_client.get(url, {'low_stock': 'true'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['is_low_stock'] is True

    def test_unauthenticated(self, api_client, product):
        response = api_client.get(reverse('catalog:product-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestProductCreate:
    """Tests for POST /api/catalog/products/"""

    def test_create(self, employee_client):
        url = reverse('catalog:product-list')
        data = {
            'barcode': 'isbn-100',
            'name': 'Physics',
            'price': '520.00',
            'unit_cost': '400.00',
            'initial_stock': 8,
        }

        response = employee_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['barcode'] == 'ISBN-100'
        assert response.data['current_stock'] == 8

    def test_duplicate_barcode_conflict(self, employee_client, product):
        url = reverse('catalog:product-list')

        response = employee_client.post(url, {'barcode': product.barcode, 'name': 'Dup'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Barcode already exists.'

    def test_missing_name(self, employee_client):
        url = reverse('catalog:product-list')

        response = employee_client.post(url, {'barcode': 'X1'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestProductDetail:
    """Tests for /api/catalog/products/{internal_id}/"""

    def test_patch_ignores_stock(self, employee_client, product):
        url = reverse('catalog:product-detail', kwargs={'internal_id': product.internal_id})

        response = employee_client.patch(url, {'price': '460.00', 'current_stock': 0}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['price'] == '460.00'
        assert response.data['current_stock'] == 12

    def test_employee_cannot_delete(self, employee_client, product):
        url = reverse('catalog:product-detail', kwargs={'internal_id': product.internal_id})

        response = employee_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_deletes_unused(self, admin_client, empty_product):
        url = reverse('catalog:product-detail', kwargs={'internal_id': empty_product.internal_id})

        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Product.objects.filter(pk=empty_product.pk).exists()

    def test_admin_delete_with_stock_conflict(self, admin_client, product):
        url = reverse('catalog:product-detail', kwargs={'internal_id': product.internal_id})

        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Stock must be 0 to delete item.'
        assert Product.objects.filter(pk=product.pk).exists()

    def test_admin_delete_in_use_conflict(self, admin_client, employee, empty_product):
        for tx_type, context in [('RECEIVING', {'supplier': 'Rex'}), ('PULL_OUT', {})]:
            process_inventory_batch(
                header={'type': tx_type, **context},
                items=[{'barcode': empty_product.barcode, 'qty': 1}],
                user=employee,
            )
        url = reverse('catalog:product-detail', kwargs={'internal_id': empty_product.internal_id})

        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Item has existing transaction history.'


@pytest.mark.django_db
class TestProductActions:

    def test_barcode_lookup(self, employee_client, product):
        url = reverse('catalog:product-by-barcode', kwargs={'barcode': product.barcode})

        response = employee_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['internal_id'] == str(product.internal_id)

    def test_barcode_lookup_not_found(self, employee_client, db):
        url = reverse('catalog:product-by-barcode', kwargs={'barcode': 'NOPE'})

        response = employee_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_history(self, employee_client, employee, product):
        process_inventory_batch(
            header={'type': 'RECEIVING', 'supplier': 'Rex'},
            items=[{'barcode': product.barcode, 'qty': 2}],
            user=employee,
        )
        url = reverse('catalog:product-history', kwargs={'internal_id': product.internal_id})

        response = employee_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['new_stock'] == 14
        assert response.data[0]['void_details'] is None

    def test_admin_imports_csv(self, admin_client, accpac_csv):
        url = reverse('catalog:product-import-csv')
        upload = SimpleUploadedFile('items.csv', accpac_csv, content_type='text/csv')

        response = admin_client.post(url, {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['inserted'] == 3

    def test_import_succeeds_when_change_feed_is_down(self, admin_client, accpac_csv):
        url = reverse('catalog:product-import-csv')
        upload = SimpleUploadedFile('items.csv', accpac_csv, content_type='text/csv')

        with patch.object(ChangeEvent.objects, 'create', side_effect=DatabaseError('locked')):
            response = admin_client.post(url, {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['inserted'] == 3

    def test_employee_cannot_import(self, employee_client, accpac_csv):
        url = reverse('catalog:product-import-csv')
        upload = SimpleUploadedFile('items.csv', accpac_csv, content_type='text/csv')

        response = employee_client.post(url, {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_import_unparseable(self, admin_client):
        url = reverse('catalog:product-import-csv')
        upload = SimpleUploadedFile('items.csv', b'SKU,TITLE\nA,B\n', content_type='text/csv')

        response = admin_client.post(url, {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
