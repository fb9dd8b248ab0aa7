"""Services for student and supplier registries."""

from .exceptions import (
    RegistryServiceError,
    StudentNotFoundError,
    DuplicateStudentError,
    SupplierNotFoundError,
    DuplicateSupplierError,
    RegistryImportError,
)
from .student_management import (
    search_students,
    get_student,
    create_student,
    update_student,
    upsert_student,
    import_students_csv,
)
from .supplier_management import (
    search_suppliers,
    create_supplier,
    update_supplier,
    delete_supplier,
    import_suppliers_csv,
)

__all__ = [
    # Exceptions
    'RegistryServiceError',
    'StudentNotFoundError',
    'DuplicateStudentError',
    'SupplierNotFoundError',
    'DuplicateSupplierError',
    'RegistryImportError',
    # Students
    'search_students',
    'get_student',
    'create_student',
    'update_student',
    'upsert_student',
    'import_students_csv',
    # Suppliers
    'search_suppliers',
    'create_supplier',
    'update_supplier',
    'delete_supplier',
    'import_suppliers_csv',
]
