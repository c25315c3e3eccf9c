"""Normalization helpers for loosely typed operation options."""

from typing import Any, Dict, Iterable, Mapping, Optional, Union

import pydantic

from ..core.exceptions import ValidationError
from ..core.models import DimensionFilter

OptionsLike = Union[str, int, Mapping[str, Any], None]


def is_absent(value: Any) -> bool:
    """True for None and the empty string; False, 0 and [] count as present."""
    return value is None or value == ""


def as_options(value: OptionsLike, key: str = "id") -> Dict[str, Any]:
    """
    Normalize a bare identifier or an options mapping to a fresh dict.

    Args:
        value: A str/int identifier, a mapping, or None
        key: Field the bare identifier is stored under

    Returns:
        A new dict; the caller's mapping is never mutated
    """
    if value is None:
        return {}
    if isinstance(value, bool):
        raise ValidationError(f"Expected an identifier or options, got {value!r}", [key])
    if isinstance(value, (str, int)):
        return {key: value}
    if isinstance(value, Mapping):
        return dict(value)
    raise ValidationError(
        f"Expected an identifier or options mapping, got {type(value).__name__}", [key]
    )


def require(options: Mapping[str, Any], key: str) -> str:
    """Return options[key] as a string, or raise ValidationError if absent/empty."""
    value = options.get(key)
    if is_absent(value):
        raise ValidationError(f"Required: {key}", [key])
    return str(value)


def require_all(options: Mapping[str, Any], keys: Iterable[str]) -> None:
    """Check every key at once so the error names all missing fields."""
    missing = [key for key in keys if is_absent(options.get(key))]
    if missing:
        raise ValidationError(f"Required: {', '.join(missing)}", missing)


def with_defaults(options: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill keys that are missing or None; explicit False/0/"" are kept."""
    merged = dict(options)
    for key, default in defaults.items():
        if merged.get(key) is None:
            merged[key] = list(default) if isinstance(default, list) else default
    return merged


def without(options: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Copy of options minus the given keys."""
    return {k: v for k, v in options.items() if k not in keys}


def pick(options: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Copy of options restricted to the keys that are present and not None."""
    return {k: options[k] for k in keys if options.get(k) is not None}


def dimension_filter(value: Optional[Mapping[str, Any]]) -> Optional[DimensionFilter]:
    """
    Validate an optional {"id": ..., "value": ...} dimension filter.

    Both fields are equally mandatory; every missing one is reported.
    """
    if value is None:
        return None
    if isinstance(value, DimensionFilter):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError("dimension must be a mapping with id and value", ["dimension"])

    try:
        return DimensionFilter.model_validate(dict(value))
    except pydantic.ValidationError as e:
        missing = sorted({f"dimension.{err['loc'][0]}" for err in e.errors() if err["loc"]})
        raise ValidationError(f"Required: {', '.join(missing)}", missing) from e
