class InvariantViolation(Exception):
    """Raised when a write would leave an aggregate in an invalid state."""
