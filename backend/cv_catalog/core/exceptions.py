class CatalogError(Exception):
    """Base class for errors raised by the catalog services."""


class FileValidationError(CatalogError):
    """The uploaded file is too large or not an allowed type."""


class DuplicateUserError(CatalogError):
    """A user with the same username already exists."""
