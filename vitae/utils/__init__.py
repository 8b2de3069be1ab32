"""
Shared utilities for vitae.

Common functionality used across contexts:
- Date normalization and duration inspection
- Exception taxonomy
- Logger configuration
"""

from vitae.utils.dates import get_now, is_current, parse_date
from vitae.utils.duration import run as compute_duration

__all__ = ["compute_duration", "get_now", "is_current", "parse_date"]
