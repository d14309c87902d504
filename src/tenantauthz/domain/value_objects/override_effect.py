"""Override effects and authorization decisions."""

from enum import StrEnum


class OverrideEffect(StrEnum):
    """Effect of a per-membership permission override."""

    ALLOW = "ALLOW"
    DENY = "DENY"


class Decision(StrEnum):
    """Effective permission decision."""

    ALLOW = "ALLOW"
    DENY = "DENY"
