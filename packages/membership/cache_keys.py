"""Cache key generators for membership package repositories."""

MEMBERSHIP_LEVELS_PATTERN = "membership_levels:*"


def active_levels_key() -> str:
    return "membership_levels:active"
