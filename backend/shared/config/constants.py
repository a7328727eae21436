"""
Centralized constants for the backend application.
Avoids magic strings for order statuses, event types and limits.

Usage:
    from shared.config.constants import OrderStatus, get_next_order_status

    if status == OrderStatus.PENDING:
        ...
"""

from enum import IntEnum
from typing import Final


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus:
    """Order status constants (stored verbatim in the order.status column)."""

    PENDING: Final[str] = "Pending"
    COOKING: Final[str] = "Cooking"
    COMING_TO_TABLE: Final[str] = "Coming to Table"
    COMPLETED: Final[str] = "Completed"
    # Filtered against by occupancy; no transition enters it
    CANCELLED: Final[str] = "Cancelled"

    # Status groups
    FLOW: Final[tuple[str, ...]] = (PENDING, COOKING, COMING_TO_TABLE, COMPLETED)
    ALL: Final[tuple[str, ...]] = (PENDING, COOKING, COMING_TO_TABLE, COMPLETED, CANCELLED)
    TERMINAL: Final[frozenset[str]] = frozenset({COMPLETED, CANCELLED})


# =============================================================================
# Status Transitions
# =============================================================================

# Valid order status transitions (from -> [allowed to states])
# Flow: Pending → Cooking → Coming to Table → Completed
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING: [OrderStatus.COOKING],
    OrderStatus.COOKING: [OrderStatus.COMING_TO_TABLE],
    OrderStatus.COMING_TO_TABLE: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],  # Terminal state
    OrderStatus.CANCELLED: [],  # Terminal state
}


def validate_order_status(status: str) -> bool:
    """Validate that an order status is a known value."""
    return status in OrderStatus.ALL


def validate_order_transition(current_status: str, new_status: str) -> bool:
    """
    Validate that an order status transition is allowed.

    Returns True if transition is valid, False otherwise.
    """
    allowed = ORDER_TRANSITIONS.get(current_status, [])
    return new_status in allowed


def get_next_order_status(current_status: str) -> str | None:
    """Next status in the fixed flow, or None when the status is terminal or unknown."""
    allowed = ORDER_TRANSITIONS.get(current_status, [])
    return allowed[0] if allowed else None


def advance_order_status(current_status: str) -> str:
    """
    Advance one step along the flow.

    Terminal statuses are returned unchanged.
    """
    return get_next_order_status(current_status) or current_status


def is_active_order_status(status: str) -> bool:
    """True when an order with this status keeps its table occupied."""
    return status not in OrderStatus.TERMINAL


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Price limits (in cents)
    MIN_PRICE_CENTS: Final[int] = 0
    MAX_PRICE_CENTS: Final[int] = 100_000_00  # $100,000

    # Items per order
    MAX_ORDER_ITEMS: Final[int] = 100

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_BANNER_LENGTH: Final[int] = 500
    MAX_TABLE_ID_LENGTH: Final[int] = 32

    # Store
    MAX_TOTAL_TABLES: Final[int] = 500


# =============================================================================
# Event Types (server -> client over WebSocket)
# =============================================================================


class EventType:
    """WebSocket event type constants."""

    ORDER_CREATED: Final[str] = "ORDER_CREATED"
    ORDER_UPDATED: Final[str] = "ORDER_UPDATED"
    ORDER_DELETED: Final[str] = "ORDER_DELETED"

    TABLE_STATUS_UPDATED: Final[str] = "TABLE_STATUS_UPDATED"

    PONG: Final[str] = "PONG"
    ERROR: Final[str] = "ERROR"


class ClientMessageType:
    """Message types a WebSocket client may send."""

    JOIN_TABLE: Final[str] = "JOIN_TABLE"
    LEAVE_TABLE: Final[str] = "LEAVE_TABLE"
    PING: Final[str] = "PING"


# =============================================================================
# WebSocket Close Codes
# =============================================================================


class WSCloseCode(IntEnum):
    """WebSocket close codes used by the gateway."""

    GOING_AWAY = 1001
    MESSAGE_TOO_BIG = 1009
    SERVER_OVERLOADED = 1013


# =============================================================================
# Error Messages
# =============================================================================


class ErrorMessages:
    """Standardized error messages."""

    RATE_LIMIT_EXCEEDED: Final[str] = "Rate limit exceeded. Please try again later."
