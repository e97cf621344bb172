"""
Error taxonomy for the row stores and the catalog service.

Absence of a record is never an error: lookups return None, deletes
return False. Only the conditions below are raised.
"""


class CatalogError(Exception):
    """Base class for every error raised by the catalog core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SchemaError(CatalogError):
    """Backing sheet missing, header row blank, or a required column absent"""


class ValidationError(CatalogError):
    """Input record violates the table contract (e.g. a required field is empty)"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class ConflictError(CatalogError):
    """A record with the same primary key already exists"""

    def __init__(self, message: str, key: str = None):
        super().__init__(message)
        self.key = key
