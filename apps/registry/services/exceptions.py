"""Domain-specific exceptions for registry services."""


class RegistryServiceError(Exception):
    """Base exception for registry services."""
    pass


class StudentNotFoundError(RegistryServiceError):
    pass


class DuplicateStudentError(RegistryServiceError):
    pass


class SupplierNotFoundError(RegistryServiceError):
    pass


class DuplicateSupplierError(RegistryServiceError):
    pass


class RegistryImportError(RegistryServiceError):
    """Raised when an import file has no usable rows."""
    pass
