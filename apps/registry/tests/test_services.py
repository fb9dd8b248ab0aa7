import pytest

from apps.registry.models import Student, Supplier
from apps.registry.services import (
    search_students,
    get_student,
    create_student,
    update_student,
    upsert_student,
    import_students_csv,
    search_suppliers,
    create_supplier,
    update_supplier,
    delete_supplier,
    import_suppliers_csv,
    StudentNotFoundError,
    DuplicateStudentError,
    SupplierNotFoundError,
    DuplicateSupplierError,
    RegistryImportError,
)


@pytest.mark.django_db
class TestStudents:

    def test_search_by_name_or_id(self, student, other_student):
        assert list(search_students(search='santos')) == [other_student]
        assert list(search_students(search='2024')) == [student]
        assert list(search_students()) == [student, other_student]

    def test_create_normalizes(self, db):
        created = create_student(student_id=' 2025-0100 ', name='ana reyes', course='bsn', year_level=1)

        assert created.student_id == '2025-0100'
        assert created.name == 'ANA REYES'
        assert created.course == 'BSN'
        assert created.year_level == '1'

    def test_create_duplicate(self, student):
        with pytest.raises(DuplicateStudentError):
            create_student(student_id=student.student_id, name='Someone')

    def test_update_refreshes_last_updated(self, student):
        before = student.last_updated

        updated = update_student(student_id=student.student_id, data={'course': 'bscs', 'year_level': '3'})

        assert updated.course == 'BSCS'
        assert updated.year_level == '3'
        assert updated.last_updated >= before

    def test_update_missing(self, db):
        with pytest.raises(StudentNotFoundError):
            update_student(student_id='NOPE', data={'name': 'x'})

    def test_get_missing(self, db):
        with pytest.raises(StudentNotFoundError):
            get_student(student_id='NOPE')

    def test_upsert_creates_then_refreshes(self, db):
        upsert_student(student_id='2025-0001', name='ana', course='bsn', year_level='1')
        upsert_student(student_id='2025-0001', name='ana reyes', course='bsn', year_level='2')

        student = Student.objects.get(student_id='2025-0001')
        assert student.name == 'ANA REYES'
        assert student.year_level == '2'
        assert Student.objects.count() == 1

    def test_import_csv(self, student):
        text = (
            "Student_ID,Name,Course,Year_Level\n"
            "2024-0001,Juan Dela Cruz,BSCS,3\n"
            "2025-0200,Pedro Penduko,BSA,1\n"
            ",Nobody,BSA,1\n"
        )

        result = import_students_csv(file=text.encode('utf-8'))

        assert result == {'created': 1, 'updated': 1}
        student.refresh_from_db()
        assert student.course == 'BSCS'

    def test_import_without_id_column(self, db):
        with pytest.raises(RegistryImportError, match='student_id'):
            import_students_csv(file='name,course\nA,B\n')


@pytest.mark.django_db
class TestSuppliers:

    def test_create_uppercases_and_trims(self, db):
        supplier = create_supplier(name='  anvil publishing ', contact_info=' sales@anvil.ph ')

        assert supplier.name == 'ANVIL PUBLISHING'
        assert supplier.contact_info == 'sales@anvil.ph'

    def test_duplicate_name_any_case(self, supplier):
        with pytest.raises(DuplicateSupplierError, match='Supplier already exists.'):
            create_supplier(name='rex book store')

    def test_search(self, supplier):
        assert list(search_suppliers(search='rex')) == [supplier]
        assert list(search_suppliers(search='4567')) == [supplier]
        assert list(search_suppliers(search='anvil')) == []

    def test_update_name_collision(self, supplier):
        other = create_supplier(name='Anvil')

        with pytest.raises(DuplicateSupplierError):
            update_supplier(supplier_id=other.id, data={'name': 'Rex Book Store'})

    def test_update_contact(self, supplier):
        updated = update_supplier(supplier_id=supplier.id, data={'contact_info': 'rex@rex.ph'})

        assert updated.contact_info == 'rex@rex.ph'
        assert updated.name == 'REX BOOK STORE'

    def test_delete(self, supplier):
        delete_supplier(supplier_id=supplier.id)

        assert not Supplier.objects.exists()

    def test_delete_missing(self, db):
        with pytest.raises(SupplierNotFoundError):
            delete_supplier(supplier_id=999)

    def test_import_skips_known(self, supplier):
        text = "name,contact_info\nrex book store,x\nC&E Publishing,ce@ce.ph\n"

        result = import_suppliers_csv(file=text)

        assert result == {'created': 1, 'skipped': 1}
        assert Supplier.objects.filter(name='C&E PUBLISHING').exists()
