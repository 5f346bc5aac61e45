import json
import logging
import math
import re

import isodate

logger = logging.getLogger(__name__)

_DISALLOWED_CHARS = re.compile(r'[^\w\s,.-]', re.ASCII)
_WHITESPACE = re.compile(r'\s+')


def sanitize_text(text):
    """Trim, replace characters outside [word, whitespace , . -] and collapse spaces"""
    if not isinstance(text, str):
        return ""

    text = text.strip()
    text = _DISALLOWED_CHARS.sub(' ', text)
    return _WHITESPACE.sub(' ', text)


def parse_delimited_field(value):
    """
    Best-effort conversion of a stored list field into a list of strings.

    Lists pass through untouched. Strings that look like a JSON array are
    decoded, otherwise they are split on ';' and then on ','. Anything else
    becomes a single-item list. A single value that legitimately contains a
    comma is split as well.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        return []

    try:
        if value.startswith('[') and ']' in value:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return parsed
            return [value]
    except ValueError as e:
        logger.warning("Error parsing array %r: %s", value, e)
        return [value]

    if ';' in value:
        return [item.strip() for item in value.split(';')]
    if ',' in value:
        return [item.strip() for item in value.split(',')]
    return [value]


def to_number(value, default=0, cast=float):
    """Coerce `value` with `cast`, returning `default` for anything unparseable or NaN"""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return cast(number)


def parse_duration(duration_str):
    """Parse ISO duration strings to seconds"""
    if not isinstance(duration_str, str) or not duration_str.strip():
        return None

    try:
        return int(isodate.parse_duration(duration_str.strip()).total_seconds())
    except (isodate.ISO8601Error, ValueError, TypeError):
        return None


def duration_minutes(duration_str):
    """Whole minutes in an ISO duration, 0 when missing or malformed"""
    seconds = parse_duration(duration_str)
    return seconds // 60 if seconds else 0


def minutes_to_duration(minutes):
    """Encode a minute count the way created recipes store it, e.g. PT90M"""
    return f"PT{int(minutes)}M"


def split_lines(text):
    if not isinstance(text, str):
        return []
    return [line.strip() for line in text.split('\n') if line.strip()]


def split_keywords(text):
    if not isinstance(text, str):
        return []
    return [keyword.strip() for keyword in text.split(',') if keyword.strip()]
