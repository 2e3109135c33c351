"""Input validation helpers shared by the calculators."""

import math
from typing import Any

from ma_retirement.schemas.common import FilingStatus


class InputValidationError(ValueError):
    """Raised when a calculator receives a malformed or out-of-range input."""


def validate_amount(value: Any, name: str, allow_negative: bool = False) -> float:
    """Return value as a finite float, rejecting NaN, infinity and (optionally) negatives."""
    if isinstance(value, bool):
        raise InputValidationError(f"{name} must be a number, got bool")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InputValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(amount):
        raise InputValidationError(f"{name} must be finite, got {value!r}")
    if amount < 0 and not allow_negative:
        raise InputValidationError(f"{name} must not be negative, got {amount}")
    return amount


def validate_rate(value: Any, name: str, minimum: float = 0.0, maximum: float = 0.10) -> float:
    rate = validate_amount(value, name, allow_negative=True)
    if rate < minimum or rate > maximum:
        raise InputValidationError(
            f"{name} must be between {minimum:.0%} and {maximum:.0%}, got {rate:.2%}"
        )
    return rate


def validate_age(value: Any, name: str = "age", maximum: float = 120) -> float:
    age = validate_amount(value, name)
    if age > maximum:
        raise InputValidationError(f"{name} must be at most {maximum}, got {age}")
    return age


def validate_filing_status(value: Any) -> FilingStatus:
    """Coerce a filing status enum or string, accepting camelCase spellings."""
    if isinstance(value, FilingStatus):
        return value
    if isinstance(value, str):
        normalized = _FILING_STATUS_ALIASES.get(value.strip().lower().replace(" ", "_"))
        if normalized is not None:
            return normalized
    valid = ", ".join(s.value for s in FilingStatus)
    raise InputValidationError(f"Invalid filing status {value!r}; expected one of: {valid}")


_FILING_STATUS_ALIASES = {
    "single": FilingStatus.SINGLE,
    "married_filing_jointly": FilingStatus.MARRIED_FILING_JOINTLY,
    "marriedfilingjointly": FilingStatus.MARRIED_FILING_JOINTLY,
    "married": FilingStatus.MARRIED_FILING_JOINTLY,
    "head_of_household": FilingStatus.HEAD_OF_HOUSEHOLD,
    "headofhousehold": FilingStatus.HEAD_OF_HOUSEHOLD,
    "married_filing_separately": FilingStatus.MARRIED_FILING_SEPARATELY,
    "marriedfilingseparately": FilingStatus.MARRIED_FILING_SEPARATELY,
}
