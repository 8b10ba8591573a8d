"""Best-effort date recognition for document headers."""

from __future__ import annotations

import re
from datetime import datetime

from dateutil import parser as date_parser

from rfz.models import DocumentDate

_MONTH = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_YEAR = r"(?:19|20)\d{2}"

# Most specific forms first: alternation order breaks ties at equal offsets.
DATE_RE = re.compile(
    r"\b(?:"
    rf"{_YEAR}-\d{{2}}(?:-\d{{2}})?"
    rf"|\d{{1,2}}\s+{_MONTH}\.?,?\s+{_YEAR}"
    rf"|{_MONTH}\.?\s+\d{{1,2}},?\s+{_YEAR}"
    rf"|{_MONTH}\.?,?\s+{_YEAR}"
    r")\b",
    re.IGNORECASE,
)

# Two distinct defaults reveal which components the text actually carried.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2000, 2, 2)


def parse_date(text: str) -> DocumentDate | None:
    """Parse a complete date string, returning ``None`` when it is not one."""
    candidate = text.strip().rstrip(".")
    if not candidate or not DATE_RE.fullmatch(candidate):
        return None
    try:
        first = date_parser.parse(candidate, default=_DEFAULT_A)
        second = date_parser.parse(candidate, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    month = first.month if first.month == second.month else None
    day = first.day if first.day == second.day and month is not None else None
    return DocumentDate(year=first.year, month=month, day=day)


def find_date(text: str) -> DocumentDate | None:
    """Return the first recognisable date anywhere in ``text``."""
    for match in DATE_RE.finditer(text):
        found = parse_date(match.group(0))
        if found is not None:
            return found
    return None
