"""
Relative duration parsing for mute commands.

Tokens are ``<int>d``, ``<int>h`` and ``<int>m`` components concatenated in
that order, e.g. ``1d12h``, ``30m`` or ``2d``.
"""

from __future__ import annotations

import datetime
import re
from typing import Optional

DURATION_FORMAT = "XdXhXm"

DURATION_PATTERN = re.compile(r"^(?:(?P<days>\d+)d)?(?:(?P<hours>\d+)h)?(?:(?P<minutes>\d+)m)?$")


def parse_timedelta(token: str) -> Optional[datetime.timedelta]:
    """Convert a duration token into a timedelta.

    Args:
        token: Duration text such as ``"1d2h30m"``.

    Returns:
        Optional[datetime.timedelta]: The parsed duration, or None when the
        token is empty, malformed, or adds up to zero.
    """
    if not token:
        return None

    match = DURATION_PATTERN.fullmatch(token)
    if match is None:
        return None

    try:
        delta = datetime.timedelta(
            days=int(match.group("days") or 0),
            hours=int(match.group("hours") or 0),
            minutes=int(match.group("minutes") or 0),
        )
    except (OverflowError, ValueError):
        # magnitude beyond what timedelta (or int parsing) can hold
        return None
    if delta <= datetime.timedelta(0):
        return None
    return delta


def parse_duration(token: str, now: datetime.datetime) -> Optional[datetime.datetime]:
    """Return the instant ``token`` after ``now``, or None if the token is invalid.

    Durations that push the expiry past ``datetime.max`` are invalid too.
    """
    delta = parse_timedelta(token)
    if delta is None:
        return None
    try:
        return now + delta
    except OverflowError:
        return None
