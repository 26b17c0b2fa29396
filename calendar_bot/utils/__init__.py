"""Utility functions for the calendar bot.

Re-exports the text-cleaning helpers and datetime utilities so that imports like
`from ..utils import clean_url` or `from ..utils import get_current_timestamp`
work as expected.
"""

from .text_cleaning import clean_url, strip_list_marker, strip_wrapping  # noqa: F401
from .datetime_utils import (  # noqa: F401
    file_timestamp,
    get_current_timestamp,
    parse_calendar_date,
    same_calendar_day,
)
from .json_parsing import decode_string_list  # noqa: F401

__all__ = [
    "clean_url",
    "strip_list_marker",
    "strip_wrapping",
    "get_current_timestamp",
    "parse_calendar_date",
    "same_calendar_day",
    "file_timestamp",
    "decode_string_list",
]
