import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status

from apps.registry.models import Supplier


@pytest.mark.django_db
class TestStudentEndpoints:
    """Tests for /api/registry/students/"""

    def test_search(self, employee_client, student, other_student):
        response = employee_client.get(reverse('registry:student-list'), {'search': 'dela'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['student_id'] == student.student_id

    def test_retrieve(self, employee_client, student):
        url = reverse('registry:student-detail', kwargs={'student_id': student.student_id})

        response = employee_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'JUAN DELA CRUZ'

    def test_create(self, employee_client, db):
        data = {'student_id': '2025-0300', 'name': 'Ana Reyes', 'course': 'BSN', 'year_level': '1'}

        response = employee_client.post(reverse('registry:student-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'ANA REYES'

    def test_create_duplicate_conflict(self, employee_client, student):
        data = {'student_id': student.student_id, 'name': 'Someone'}

        response = employee_client.post(reverse('registry:student-list'), data, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_patch(self, employee_client, student):
        url = reverse('registry:student-detail', kwargs={'student_id': student.student_id})

        response = employee_client.patch(url, {'year_level': '3'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['year_level'] == '3'

    def test_delete_not_allowed(self, employee_client, student):
        url = reverse('registry:student-detail', kwargs={'student_id': student.student_id})

        response = employee_client.delete(url)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_import(self, employee_client, db):
        upload = SimpleUploadedFile(
            'students.csv',
            b'student_id,name,course,year_level\n2025-0400,Lea Cruz,BSBA,2\n',
            content_type='text/csv',
        )

        response = employee_client.post(
            reverse('registry:student-import-csv'), {'file': upload}, format='multipart'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'created': 1, 'updated': 0}


@pytest.mark.django_db
class TestSupplierEndpoints:
    """Tests for /api/registry/suppliers/"""

    def test_list(self, employee_client, supplier):
        response = employee_client.get(reverse('registry:supplier-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'][0]['name'] == 'REX BOOK STORE'

    def test_create_duplicate_conflict(self, employee_client, supplier):
        response = employee_client.post(
            reverse('registry:supplier-list'), {'name': 'rex book store'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Supplier already exists.'

    def test_update(self, employee_client, supplier):
        url = reverse('registry:supplier-detail', kwargs={'pk': supplier.pk})

        response = employee_client.patch(url, {'contact_info': 'orders@rex.ph'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['contact_info'] == 'orders@rex.ph'

    def test_delete(self, employee_client, supplier):
        url = reverse('registry:supplier-detail', kwargs={'pk': supplier.pk})

        response = employee_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Supplier.objects.exists()

    def test_import_bad_file(self, employee_client, db):
        upload = SimpleUploadedFile('suppliers.csv', b'company\nX\n', content_type='text/csv')

        response = employee_client.post(
            reverse('registry:supplier-import-csv'), {'file': upload}, format='multipart'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
