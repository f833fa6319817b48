import math
import numbers
import re
from typing import Any, Optional

# Plain ASCII decimal with optional exponent; rejects "1_000", "inf", "nan"
# and non-ASCII digits, all of which float() would accept.
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_number(value: Any) -> float:
    """Parse a numeric field that may use a decimal comma.

    Numbers pass through unchanged. Strings are trimmed and the first comma is
    read as the decimal separator. Anything empty or unparsable yields NaN;
    callers treat NaN as missing, never as zero.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, numbers.Real):
        return float(value)
    if value is None:
        return math.nan

    text = str(value).strip()
    if not text:
        return math.nan
    text = text.replace(",", ".", 1)
    if not _DECIMAL.fullmatch(text):
        return math.nan
    return float(text)


def parse_optional(value: Any) -> Optional[float]:
    """Like parse_number, but a missing value is returned as None."""
    number = parse_number(value)
    if math.isnan(number):
        return None
    return number
