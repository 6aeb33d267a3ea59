"""Mini README: Utility helper functions for Team Budget.

Groups timestamp parsing, display formatting and the list filters used by
the roster, expense and payment views.
"""

from .filtering import filter_by_period, filter_players, group_by, sort_by_property
from .formatting import format_currency, format_date, format_datetime, get_initials
from .timestamps import now_millis, parse_timestamp

__all__ = [
    "filter_by_period",
    "filter_players",
    "format_currency",
    "format_date",
    "format_datetime",
    "get_initials",
    "group_by",
    "now_millis",
    "parse_timestamp",
    "sort_by_property",
]
