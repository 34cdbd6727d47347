from typing import Set

ALLOWED_ORDER_TRANSITIONS: dict[str, Set[str]] = {
    "PENDING": {"PROCESSING", "CANCELLED"},
    "PROCESSING": {"COMPLETED", "CANCELLED"},
    "COMPLETED": {"REFUNDED"},
    "CANCELLED": set(),
    "REFUNDED": set(),
}


def assert_order_transition(*, from_status: str, to_status: str) -> None:
    allowed = ALLOWED_ORDER_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise ValueError(
            f"Illegal order transition: {from_status} -> {to_status}"
        )
