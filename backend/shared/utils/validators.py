"""
Shared validators for input normalization.

Table identifiers arrive as JSON numbers from dashboards, as strings from QR
links ("/menu/3") and as stored strings from the order table. Every comparison
between those sources goes through canonical_table_id().
"""

from typing import Any

from shared.config.constants import Limits

TableId = int | str


def canonical_table_id(value: Any) -> TableId:
    """
    Normalize a table identifier to its canonical form.

    - ints stay ints (bools are rejected)
    - digit-only strings (after stripping) become ints: "3", " 03 " -> 3
    - any other non-empty string is kept stripped: "Patio-2" -> "Patio-2"

    Raises:
        ValueError: If the value is empty, negative, too long or of an unsupported type.
    """
    if isinstance(value, bool):
        raise ValueError("Table identifier must be a number or string")

    if isinstance(value, int):
        if value < 0:
            raise ValueError("Table identifier must not be negative")
        return value

    if isinstance(value, float):
        if not value.is_integer() or value < 0:
            raise ValueError("Table identifier must be a non-negative whole number")
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Table identifier must not be empty")
        if len(text) > Limits.MAX_TABLE_ID_LENGTH:
            raise ValueError(
                f"Table identifier must be at most {Limits.MAX_TABLE_ID_LENGTH} characters"
            )
        if text.isascii() and text.isdigit():
            return int(text)
        digits = text[1:].strip()
        if text.startswith("-") and digits.isascii() and digits.isdigit():
            raise ValueError("Table identifier must not be negative")
        return text

    raise ValueError("Table identifier must be a number or string")


def table_id_to_storage(table_id: TableId) -> str:
    """String form persisted in order.table_no."""
    return str(table_id)


def sort_table_ids(table_ids: set[TableId]) -> list[TableId]:
    """Numeric tables first in numeric order, then named tables alphabetically."""
    return sorted(table_ids, key=lambda t: (isinstance(t, str), t))

