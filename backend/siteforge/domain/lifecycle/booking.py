from typing import Set

ALLOWED_BOOKING_TRANSITIONS: dict[str, Set[str]] = {
    "PENDING": {"CONFIRMED", "CANCELLED"},
    "CONFIRMED": {"COMPLETED", "CANCELLED", "NO_SHOW"},
    "CANCELLED": set(),
    "COMPLETED": set(),
    "NO_SHOW": set(),
}


def assert_booking_transition(*, from_status: str, to_status: str) -> None:
    allowed = ALLOWED_BOOKING_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise ValueError(
            f"Illegal booking transition: {from_status} -> {to_status}"
        )
