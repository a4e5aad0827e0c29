"""ABOUTME: Request validation and query-string construction for both search modes.

Each search mode is described by an ordered rule table. Validation walks the
table and stops at the first failing rule, raising ValidationError with that
rule's message; accepted parameters are then serialized into query pairs.
"""

import logging
from typing import Any, List, Mapping, Tuple, Type, TypeVar, Union
from urllib.parse import urlencode

import pydantic

from ..common.validation import (
    ValidationResult,
    ValidationRule,
    apply_rules,
    validate_date_format,
    validate_departement,
    validate_number_range,
)
from .exceptions import ValidationError
from .models import (
    INCLUDE_FIELDS,
    MAX_MATCHING_ETABLISSEMENTS,
    MAX_PER_PAGE,
    MAX_RADIUS_KM,
    MIN_MATCHING_ETABLISSEMENTS,
    MIN_PAGE,
    MIN_PER_PAGE,
    NearbySearchParams,
    SearchParamsBase,
    TextSearchParams,
)

logger = logging.getLogger(__name__)

QueryString = List[Tuple[str, str]]
ParamsT = TypeVar("ParamsT", bound=SearchParamsBase)

# Text criteria that make a /search request meaningful on their own
TEXT_CRITERIA_FIELDS = (
    "q",
    "activite_principale",
    "code_postal",
    "departement",
    "region",
    "nom_personne",
)

# Boolean filters that count as a criterion when set to true
CRITERIA_FLAG_FIELDS = tuple(
    name for name in TextSearchParams.model_fields
    if name.startswith("est_")
) + ("convention_collective_renseignee", "egapro_renseignee")


# ============================================================================
# PARAMETER PARSING
# ============================================================================

def parse_params(model: Type[ParamsT], params: Union[ParamsT, Mapping[str, Any], None]) -> ParamsT:
    """Coerce a raw argument mapping into a parameter model.

    Unknown fields, wrong JSON types and unknown enum values are reported as
    ValidationError naming the first offending field.
    """
    if isinstance(params, model):
        return params

    try:
        return model.model_validate(dict(params or {}))
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field_name = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
        if first.get("type") == "extra_forbidden":
            message = f"Unknown parameter: {field_name}"
        else:
            message = f"{field_name}: {first.get('msg', 'invalid value')}"
        raise ValidationError(field_name, message, first.get("input")) from e


# ============================================================================
# RULE CHECKS
# ============================================================================

def check_has_criterion(params: TextSearchParams) -> ValidationResult:
    if any(getattr(params, name) for name in TEXT_CRITERIA_FIELDS):
        return True, None
    if any(getattr(params, name) is True for name in CRITERIA_FLAG_FIELDS):
        return True, None
    return False, (
        "At least one search parameter must be provided (q, activite_principale, "
        "location filters, person filters, or boolean filters)"
    )


def check_per_page(params: SearchParamsBase) -> ValidationResult:
    if params.per_page is None:
        return True, None
    if params.per_page > MAX_PER_PAGE:
        return False, f"per_page parameter cannot exceed {MAX_PER_PAGE}"
    if params.per_page < MIN_PER_PAGE:
        return False, f"per_page parameter must be at least {MIN_PER_PAGE}"
    return True, None


def check_page(params: SearchParamsBase) -> ValidationResult:
    if params.page is not None and params.page < MIN_PAGE:
        return False, f"page parameter must be at least {MIN_PAGE}"
    return True, None


def check_matching_etablissements(params: SearchParamsBase) -> ValidationResult:
    is_valid, _ = validate_number_range(
        params.limite_matching_etablissements,
        MIN_MATCHING_ETABLISSEMENTS,
        MAX_MATCHING_ETABLISSEMENTS,
        "limite_matching_etablissements"
    )
    if not is_valid:
        return False, (
            f"limite_matching_etablissements must be between "
            f"{MIN_MATCHING_ETABLISSEMENTS} and {MAX_MATCHING_ETABLISSEMENTS}"
        )
    return True, None


def check_include_requires_minimal(params: SearchParamsBase) -> ValidationResult:
    if params.include and not params.minimal:
        return False, "include parameter can only be used when minimal=true"
    return True, None


def check_include_values(params: SearchParamsBase) -> ValidationResult:
    if not params.include:
        return True, None
    for item in params.include.split(","):
        if item.strip() not in INCLUDE_FIELDS:
            return False, (
                f"Unknown include value: {item.strip()!r}. "
                f"Allowed values: {', '.join(INCLUDE_FIELDS)}"
            )
    return True, None


def check_coordinates_present(params: NearbySearchParams) -> ValidationResult:
    if params.lat is None or params.long is None:
        return False, "Both lat and long parameters are required"
    return True, None


def check_latitude(params: NearbySearchParams) -> ValidationResult:
    is_valid, _ = validate_number_range(params.lat, -90, 90, "lat")
    return is_valid, None if is_valid else "Latitude must be between -90 and 90 degrees"


def check_longitude(params: NearbySearchParams) -> ValidationResult:
    is_valid, _ = validate_number_range(params.long, -180, 180, "long")
    return is_valid, None if is_valid else "Longitude must be between -180 and 180 degrees"


def check_radius(params: NearbySearchParams) -> ValidationResult:
    is_valid, _ = validate_number_range(params.radius, 0, MAX_RADIUS_KM, "radius", min_exclusive=True)
    return is_valid, None if is_valid else f"Radius must be between 0 and {MAX_RADIUS_KM} kilometers"


# Shared tail of both tables
PAGINATION_RULES = (
    ValidationRule("per_page", check_per_page),
    ValidationRule("page", check_page),
)
RESPONSE_SHAPE_RULES = (
    ValidationRule("limite_matching_etablissements", check_matching_etablissements),
    ValidationRule("include", check_include_requires_minimal),
    ValidationRule("include", check_include_values),
)

TEXT_SEARCH_RULES: Tuple[ValidationRule, ...] = (
    ValidationRule("search_criteria", check_has_criterion),
    *PAGINATION_RULES,
    ValidationRule(
        "date_naissance_personne_min",
        lambda p: validate_date_format(p.date_naissance_personne_min, "date_naissance_personne_min")
    ),
    ValidationRule(
        "date_naissance_personne_max",
        lambda p: validate_date_format(p.date_naissance_personne_max, "date_naissance_personne_max")
    ),
    ValidationRule("departement", lambda p: validate_departement(p.departement)),
    *RESPONSE_SHAPE_RULES,
)

NEARBY_SEARCH_RULES: Tuple[ValidationRule, ...] = (
    ValidationRule("lat", check_coordinates_present),
    ValidationRule("lat", check_latitude),
    ValidationRule("long", check_longitude),
    ValidationRule("radius", check_radius),
    *PAGINATION_RULES,
    *RESPONSE_SHAPE_RULES,
)


# ============================================================================
# QUERY SERIALIZATION
# ============================================================================

def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query_string(params: SearchParamsBase) -> QueryString:
    """Serialize set parameters into ordered (key, value) pairs.

    None and empty-string values are dropped; booleans become "true"/"false".
    """
    pairs: QueryString = []
    for key, value in params.model_dump(exclude_none=True).items():
        if value == "":
            continue
        pairs.append((key, _format_value(value)))
    return pairs


def encode_query_string(pairs: QueryString) -> str:
    """Form-encode query pairs (spaces become '+')."""
    return urlencode(pairs)


# ============================================================================
# ENTRY POINTS
# ============================================================================

def _validate(rules: Tuple[ValidationRule, ...], params: SearchParamsBase) -> None:
    failure = apply_rules(rules, params)
    if failure is not None:
        field_name, error_msg = failure
        logger.warning(f"Parameter validation failed on {field_name}: {error_msg}")
        raise ValidationError(field_name, error_msg, getattr(params, field_name, None))


def validate_and_build_text_search(
    params: Union[TextSearchParams, Mapping[str, Any], None]
) -> QueryString:
    """Validate /search parameters and build their query string.

    Raises:
        ValidationError: On the first rule the parameters break
    """
    parsed = parse_params(TextSearchParams, params)
    _validate(TEXT_SEARCH_RULES, parsed)
    return build_query_string(parsed)


def validate_and_build_nearby_search(
    params: Union[NearbySearchParams, Mapping[str, Any], None]
) -> QueryString:
    """Validate /near_point parameters and build their query string.

    Raises:
        ValidationError: On the first rule the parameters break
    """
    parsed = parse_params(NearbySearchParams, params)
    _validate(NEARBY_SEARCH_RULES, parsed)
    return build_query_string(parsed)
