"""Anniversary calculation.

Provides:
- Calendar duration between account creation and now (calculator.py)
- FID tier messages (tiers.py)
"""

from .calculator import (
    NOT_JOINED_LABEL,
    TODAY_LABEL,
    AnniversaryDuration,
    NotYetJoined,
    add_duration,
    compute_duration,
    days_in_month,
    format_join_date,
    format_label,
    from_unix_timestamp,
)
from .tiers import DEFAULT_TIER_MESSAGE, FID_TIERS, classify_tier

__all__ = [
    "NOT_JOINED_LABEL",
    "TODAY_LABEL",
    "AnniversaryDuration",
    "NotYetJoined",
    "add_duration",
    "compute_duration",
    "days_in_month",
    "format_join_date",
    "format_label",
    "from_unix_timestamp",
    # Tiers
    "DEFAULT_TIER_MESSAGE",
    "FID_TIERS",
    "classify_tier",
]
