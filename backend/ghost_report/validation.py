from __future__ import annotations

import math
from typing import Any


VISIBILITY_MIN = 0
VISIBILITY_MAX = 10
DEFAULT_SIGHTING_VISIBILITY = 5
VISIBILITY_LABEL_VALUES = {"Faint": 3, "Clear": 6, "Very Clear": 9}


class ApiError(ValueError):
    """
    Base for errors that map onto a JSON error body.

    `code` is the machine readable identifier sent to the client as
    {"error": code}; keyword details are merged into the same body.
    """
    status_code = 500

    def __init__(self, code: str, **details: Any):
        super().__init__(code)
        self.code = code
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.code, **self.details}


class ValidationError(ApiError):
    """400-level input problem."""
    status_code = 400


class AuthenticationError(ApiError):
    """401-level credential problem."""
    status_code = 401


class NotFoundError(ApiError):
    """404-level missing entity."""
    status_code = 404


class ConflictError(ApiError):
    """409-level uniqueness conflict (e.g., duplicate username)."""
    status_code = 409


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require_fields(payload: dict, *fields: str) -> None:
    """Raise missing_fields listing every required key that is absent or blank."""
    missing = [f for f in fields if _is_blank(payload.get(f))]
    if missing:
        raise ValidationError("missing_fields", fields=missing)


def coerce_int(value: Any, field: str) -> int:
    """
    Strict integer coercion for ids arriving as JSON numbers or strings.

    Rejects booleans, floats with a fractional part, decimals in strings
    and scientific notation.
    """
    if isinstance(value, bool):
        raise ValidationError("invalid_field", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError("invalid_field", field=field)
    if isinstance(value, str):
        stripped = value.strip()
        digits = stripped.removeprefix("-")
        # isdigit() alone admits superscripts and other non-ASCII digits
        if digits.isascii() and digits.isdigit():
            return int(stripped)
    raise ValidationError("invalid_field", field=field)


def optional_int(value: Any, field: str) -> int | None:
    if _is_blank(value):
        return None
    return coerce_int(value, field)


def optional_float(value: Any, field: str) -> float | None:
    """Coordinates: blank -> None, anything numeric -> float."""
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError("invalid_field", field=field)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("invalid_field", field=field)


def check_visibility(value: int, field: str = "visibility") -> int:
    if not VISIBILITY_MIN <= value <= VISIBILITY_MAX:
        raise ValidationError("invalid_field", field=field)
    return value


def sighting_visibility(value: Any) -> int:
    """
    Visibility for new sightings: absent or non-numeric input falls back to
    the default, numeric input must sit on the 0..10 scale.

    The report form's labels are accepted too and map onto a representative
    value of their bucket.
    """
    if isinstance(value, str) and value.strip() in VISIBILITY_LABEL_VALUES:
        return VISIBILITY_LABEL_VALUES[value.strip()]
    if isinstance(value, bool):
        return DEFAULT_SIGHTING_VISIBILITY
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SIGHTING_VISIBILITY
    if not math.isfinite(number):
        return DEFAULT_SIGHTING_VISIBILITY
    # Checked before truncation: 10.9 and -0.5 are out of range
    if not VISIBILITY_MIN <= number <= VISIBILITY_MAX:
        raise ValidationError("invalid_field", field="visibility")
    return int(number)


def visibility_label(value: int | None) -> str:
    """Derived display bucket for a 0..10 visibility. Never stored."""
    if value is None:
        return "Faint"
    if value >= 8:
        return "Very Clear"
    if value >= 5:
        return "Clear"
    return "Faint"


def id_list(values: Any, field: str) -> list[int]:
    """Coerce a JSON array of ids, dropping duplicates but keeping order."""
    if not isinstance(values, (list, tuple)):
        raise ValidationError("invalid_field", field=field)
    seen: dict[int, None] = {}
    for raw in values:
        seen.setdefault(coerce_int(raw, field), None)
    return list(seen)


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip()


def check_length(value: str, column, field: str) -> str:
    """Enforce the String(n) limit declared on a model column."""
    length = getattr(column.type, "length", None)
    if length and len(value) > length:
        raise ValidationError("field_too_long", field=field, max_length=length)
    return value


def json_object(payload: Any) -> dict:
    """Request bodies must be JSON objects; an absent body reads as {}."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("invalid_json")
    return payload


def coerce_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ValidationError("invalid_field", field=field)
