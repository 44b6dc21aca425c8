"""
Persistence error taxonomy

Every failure surfaced by the repositories derives from PersistenceError.
"""

from typing import Any, List, Dict


class PersistenceError(Exception):
    """Base class for repository failures"""
    pass


class NotFoundError(PersistenceError):
    """Query by id matched no row"""
    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class MultipleResultsError(PersistenceError):
    """Query by id matched more than one row"""
    def __init__(self, entity_type: str, entity_id: Any, count: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.count = count
        super().__init__(f"{entity_type} with id '{entity_id}' matched {count} rows, expected one")


class ValidationFailure(PersistenceError):
    """
    Attributes or row data do not satisfy a struct

    `errors` is pydantic's error list (dicts with loc/msg/type).
    """
    def __init__(self, entity_type: str, errors: List[Dict[str, Any]]):
        self.entity_type = entity_type
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg')}"
            for err in errors
        )
        super().__init__(f"Invalid {entity_type}: {details}")


class StoreFailure(PersistenceError):
    """The database rejected a statement or could not be reached"""
    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
