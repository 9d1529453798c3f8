class BulkImportError(Exception):
    """Base class for everything the CSV import pipeline raises."""


class CSVFormatError(BulkImportError):
    """The uploaded file cannot be read as the expected CSV layout (missing header columns, bad encoding)."""


class StructuralValidationError(BulkImportError):
    """One or more rows failed the shape rules. Blocks the whole import."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} row(s) failed validation")


class NoQualifyingRowsError(BulkImportError):
    """The file validated but nothing in it passed the status/role filter."""


class PersistenceError(BulkImportError):
    """The store (or identity provider) rejected an insert. Isolated to the offending row."""


class DuplicateIdentityError(PersistenceError):
    """An account with the same email already exists."""
