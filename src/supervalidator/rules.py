"""Built-in rule predicates.

Every rule receives ``(value, field, *args)`` and returns a bool. Arguments
arrive as strings straight from the rule string (``max:10`` -> ``"10"``).

- string: value is a str
- required: value is present and non-empty (0 and False count as present)
- number: value is numeric (bool excluded)
- email: value looks like an email address
- url: value is an ftp/http/https URL
- max/min: length bounds for strings and collections, value bounds for numbers
"""

import re
from collections.abc import Sized
from decimal import Decimal
from typing import Any

from supervalidator.types import RuleFn


# =============================================================================
# Format Patterns
# =============================================================================

# Email: RFC 5322 lite, local part allows the usual special characters
EMAIL_PATTERN = re.compile(
    r"^[a-z0-9!#$%&'*+/=?^_`{|}~.-]+@[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*$",
    re.IGNORECASE,
)

# URL: scheme://[user[:pass]@]host[:port][/path]
URL_PATTERN = re.compile(
    r"^(ftp|http|https)://(\w+:?\w*@)?(\S+)(:[0-9]+)?(/|/([\w#!:.?+=&%@\-/]))?$"
)

NUMBER_TYPES = (int, float, Decimal)


def is_number(value: Any) -> bool:
    return isinstance(value, NUMBER_TYPES) and not isinstance(value, bool)


def _size(value: Any) -> float:
    """Length of strings and collections, the value itself for numbers."""
    if is_number(value):
        return value
    if isinstance(value, Sized):
        return len(value)
    raise TypeError(f"Cannot measure size of {type(value).__name__}")


# =============================================================================
# Rules
# =============================================================================


def string(value: Any, field: str) -> bool:
    return isinstance(value, str)


def required(value: Any, field: str) -> bool:
    """Present and non-empty. Numbers and booleans always count as present."""
    if value is None:
        return False
    if is_number(value) or isinstance(value, bool):
        return True
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def number(value: Any, field: str) -> bool:
    return is_number(value)


def email(value: Any, field: str) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def url(value: Any, field: str) -> bool:
    return isinstance(value, str) and URL_PATTERN.match(value) is not None


def max_(value: Any, field: str, limit: str) -> bool:
    return _size(value) <= float(limit)


def min_(value: Any, field: str, limit: str) -> bool:
    return _size(value) >= float(limit)


BUILTIN_RULES: dict[str, RuleFn] = {
    "string": string,
    "required": required,
    "number": number,
    "email": email,
    "url": url,
    "max": max_,
    "min": min_,
}
