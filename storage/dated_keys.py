"""
Date extraction for keys following the ``<name>_<YYYY-MM-DD>.<ext>`` convention.

Reports and exports are written with the date embedded just before a
4-character suffix, e.g. ``reports/daily_2024-06-15.pdf``. The date token is
located by position (the 10 characters ending 4 characters before the end of
the key), so only keys that contain the ``_`` separator are considered.

Keys that are too short for the token, or whose token is not a valid date,
are skipped when picking the most recent key.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from storage.exceptions import DateKeyError

logger = logging.getLogger(__name__)

SEPARATOR = "_"
DATE_TOKEN_LENGTH = 10
SUFFIX_LENGTH = 4
DATE_FORMAT = "%Y-%m-%d"

MIN_KEY_LENGTH = DATE_TOKEN_LENGTH + SUFFIX_LENGTH


def date_token(key: str) -> str:
    """
    Return the raw date token of a dated key.

    Args:
        key: Object key, e.g. "report_2024-06-15.pdf"

    Returns:
        The 10-character token, e.g. "2024-06-15"

    Raises:
        DateKeyError: If the key is shorter than 14 characters
    """
    if len(key) < MIN_KEY_LENGTH:
        raise DateKeyError(key, f"key shorter than {MIN_KEY_LENGTH} characters")
    return key[-MIN_KEY_LENGTH:-SUFFIX_LENGTH]


def extract_key_date(key: str) -> date:
    """
    Parse the date embedded in a dated key.

    Args:
        key: Object key, e.g. "report_2024-06-15.pdf"

    Returns:
        The embedded date

    Raises:
        DateKeyError: If the key is too short or the token is not YYYY-MM-DD
    """
    token = date_token(key)
    try:
        return datetime.strptime(token, DATE_FORMAT).date()
    except ValueError as exc:
        raise DateKeyError(key, f"'{token}' is not a {DATE_FORMAT} date") from exc


def select_most_recent(keys: Iterable[str]) -> Optional[str]:
    """
    Pick the key with the latest embedded date.

    Keys without the separator or without a parseable date are ignored.
    On equal dates the key seen first wins.

    Args:
        keys: Candidate keys in listing order

    Returns:
        The most recent key, or None if no key qualifies
    """
    dated: List[Tuple[date, str]] = []
    for key in keys:
        if SEPARATOR not in key:
            continue
        try:
            dated.append((extract_key_date(key), key))
        except DateKeyError as exc:
            logger.debug("Skipping key: %s", exc)

    if not dated:
        return None

    # sorted() is stable with reverse=True, so ties keep listing order
    ordered = sorted(dated, key=lambda item: item[0], reverse=True)
    return ordered[0][1]
