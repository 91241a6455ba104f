"""
Lenient parsing of user-entered values.

Set fields and targets are typed by hand, so arithmetic never trusts them:
unparseable input falls back to a safe default instead of raising.
"""

import logging
import math
import re
from typing import Any

from .config import DEFAULT_TARGET_SETS

logger = logging.getLogger(__name__)

# Leading integer, like "3", " 4 sets", "+5"
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a user-entered numeric value.

    Accepts ints, floats and strings ("82.5", "82,5", " 80 "). Anything
    else, including blanks, NaN and infinities, yields *default*.

    Args:
        value: Raw value
        default: Fallback for unparseable input

    Returns:
        Parsed number or default
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    else:
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_optional_number(value: Any) -> float | None:
    """Parse an optional numeric field; blank or unparseable input gives None."""
    if value is None:
        return None
    parsed = parse_number(value, default=math.nan)
    if math.isnan(parsed):
        if not (isinstance(value, str) and not value.strip()):
            logger.warning("Ignoring non-numeric value %r", value)
        return None
    return parsed


def normalize_number(value: float) -> int | float:
    """Return an int for integral values so 80.0 is stored and shown as 80."""
    if float(value).is_integer():
        return int(value)
    return value


def parse_target_sets(value: Any) -> int:
    """
    Parse an exercise's target set count.

    Takes the leading integer of the value ("3", "4 sets"); falls back to
    DEFAULT_TARGET_SETS when there is none or it is not positive.

    Args:
        value: Raw target_sets value

    Returns:
        Positive set count
    """
    if isinstance(value, bool):
        count = 0
    elif isinstance(value, (int, float)):
        count = int(value) if math.isfinite(value) else 0
    else:
        match = _LEADING_INT_RE.match(str(value))
        count = int(match.group(1)) if match else 0

    if count <= 0:
        logger.debug("Unusable target_sets %r, falling back to %d", value, DEFAULT_TARGET_SETS)
        return DEFAULT_TARGET_SETS
    return count
