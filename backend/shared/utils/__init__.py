"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,
)
from shared.utils.validators import (
    canonical_table_id,
    sort_table_ids,
)
from shared.utils.schemas import ErrorResponse

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",
    # validators
    "canonical_table_id",
    "sort_table_ids",
    # schemas
    "ErrorResponse",
]
