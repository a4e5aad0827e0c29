"""ABOUTME: Shared validation utility module for the business search tools.

Provides reusable validation logic for numeric ranges, string patterns and
dates, plus a small rule-table runner. Individual validators return
(is_valid, error_message) tuples; a ValidationRule binds one of them to a
field so a search mode can be described as an ordered list of rules.

Design:
- Constants for the patterns used by the upstream API
- Standalone validator functions (return tuple[bool, Optional[str]])
- ValidationRule / apply_rules: first failing rule wins, no aggregation
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Pattern, Tuple, Union


# =============================================================================
# Validation Constants
# =============================================================================

# ISO calendar date, YYYY-MM-DD
DATE_PATTERN: Pattern[str] = re.compile(r"\d{4}-\d{2}-\d{2}")

# French department code: metropolitan (01-95, 2A/2B) and overseas (971-976)
DEPARTEMENT_PATTERN: Pattern[str] = re.compile(
    r"[013-8]\d?|2[aAbB1-9]?|9[0-59]?|97[12346]"
)

Number = Union[int, float]
ValidationResult = Tuple[bool, Optional[str]]


# =============================================================================
# Standalone Validator Functions
# =============================================================================

def validate_number_range(
    value: Optional[Number],
    min_val: Optional[Number] = None,
    max_val: Optional[Number] = None,
    field_name: str = "value",
    min_exclusive: bool = False
) -> ValidationResult:
    """Validate that an optional number lies within a range.

    A missing value (None) is always valid; presence is checked separately.

    Args:
        value: Number to validate, or None
        min_val: Lower bound (inclusive unless min_exclusive), or None for no bound
        max_val: Upper bound (inclusive), or None for no bound
        field_name: Name of field for error messages (default: "value")
        min_exclusive: Treat min_val as an exclusive bound

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        is_valid, error = validate_number_range(radius, 0, 50, "radius", min_exclusive=True)
    """
    if value is None:
        return True, None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, f"{field_name} must be a number, got {type(value).__name__}"

    if min_val is not None:
        too_low = value <= min_val if min_exclusive else value < min_val
        if too_low:
            if max_val is not None:
                return False, f"{field_name} must be between {min_val} and {max_val}, got {value}"
            return False, f"{field_name} must be at least {min_val}, got {value}"

    if max_val is not None and value > max_val:
        if min_val is not None:
            return False, f"{field_name} must be between {min_val} and {max_val}, got {value}"
        return False, f"{field_name} must not exceed {max_val}, got {value}"

    return True, None


def validate_pattern(
    value: Optional[str],
    pattern: Pattern[str],
    field_name: str = "value",
    error_message: Optional[str] = None
) -> ValidationResult:
    """Validate that an optional string fully matches a compiled pattern.

    Empty strings are treated like missing values.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not value:
        return True, None

    if not isinstance(value, str):
        return False, f"{field_name} must be a string, got {type(value).__name__}"

    if not pattern.fullmatch(value):
        return False, error_message or f"{field_name} has an invalid format: {value!r}"

    return True, None


def validate_date_format(value: Optional[str], field_name: str = "date") -> ValidationResult:
    """Validate an optional YYYY-MM-DD date string."""
    return validate_pattern(
        value,
        DATE_PATTERN,
        field_name,
        error_message=f"{field_name} must be in YYYY-MM-DD format"
    )


def validate_departement(value: Optional[str], field_name: str = "departement") -> ValidationResult:
    """Validate a department code or a comma-separated list of them.

    Example:
        validate_departement("75,2A,971")  # (True, None)
        validate_departement("999")        # (False, "...")
    """
    if not value:
        return True, None

    if not isinstance(value, str):
        return False, f"{field_name} must be a string, got {type(value).__name__}"

    for code in value.split(","):
        if not DEPARTEMENT_PATTERN.fullmatch(code.strip()):
            return False, f"{field_name} must be a valid French department code (2-3 digits)"

    return True, None


# =============================================================================
# Rule Tables
# =============================================================================

@dataclass(frozen=True)
class ValidationRule:
    """One named check of a rule table.

    Attributes:
        field_name: Field reported when the check fails
        check: Callable taking the parameter object, returning (is_valid, error_message)
    """
    field_name: str
    check: Callable[[Any], ValidationResult]


def apply_rules(rules: Iterable[ValidationRule], params: Any) -> Optional[Tuple[str, str]]:
    """Evaluate rules in order and return the first failure.

    Args:
        rules: Ordered rules to evaluate
        params: Object handed to every rule's check

    Returns:
        (field_name, error_message) of the first failing rule, or None when all pass
    """
    for rule in rules:
        is_valid, error_msg = rule.check(params)
        if not is_valid:
            return rule.field_name, error_msg or f"Invalid value for {rule.field_name}"
    return None
