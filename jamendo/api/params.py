"""Request parameter normalization for the Jamendo API.

The API takes every parameter as a flat string. Multi-value parameters
(``id``, ``tags``, ``include``, ...) are separated by ``+`` on the wire,
which is what a space becomes under form/query encoding. Range parameters
(``datebetween``, ``durationbetween``) are two bounds joined by ``_``.
"""

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

RANGE_KEYS = frozenset({"datebetween", "durationbetween"})
MULTI_VALUE_SEPARATOR = " "
RANGE_SEPARATOR = "_"
DATE_FORMAT = "%Y-%m-%d"

DEFAULT_PARAMETERS: Dict[str, str] = {"format": "json"}


def format_scalar(value: Any) -> str:
    """
    Format a single parameter value as the API expects it.

    Args:
        value: bool, date/datetime, number or string

    Returns:
        String form of the value
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    # datetime is a subclass of date
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return str(value)


def encode_date_range(start: Any, end: Any) -> str:
    """
    Encode a range as ``start_end``.

    Example:
        >>> encode_date_range(date(2012, 1, 1), "2012-12-31")
        '2012-01-01_2012-12-31'
    """
    return f"{format_scalar(start)}{RANGE_SEPARATOR}{format_scalar(end)}"


def _format_range(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if not isinstance(value, (list, tuple)):
        raise ValueError(
            f"Parameter '{key}' needs a (start, end) list or tuple, got {type(value).__name__}"
        )
    if len(value) != 2:
        raise ValueError(f"Parameter '{key}' needs exactly two bounds, got {len(value)}")
    return encode_date_range(value[0], value[1])


def _format_value(key: str, value: Any) -> str:
    if key in RANGE_KEYS:
        return _format_range(key, value)

    if isinstance(value, (set, frozenset)):
        return MULTI_VALUE_SEPARATOR.join(sorted(format_scalar(v) for v in value))

    if isinstance(value, (list, tuple)):
        return MULTI_VALUE_SEPARATOR.join(format_scalar(v) for v in value)

    return format_scalar(value)


def normalize_parameters(
    parameters: Optional[Mapping[str, Any]],
    client_id: str,
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """
    Normalize request parameters and inject defaults.

    The caller's mapping is left untouched. ``None`` values are dropped,
    sequences are joined, dates are formatted, ``format=json`` (and any
    extra ``defaults``) fill in missing keys, and ``client_id`` is always
    set, overriding any value the caller passed.

    Args:
        parameters: Caller supplied parameters (may be None)
        client_id: Application client id
        defaults: Extra defaults applied when the key is absent

    Returns:
        Dictionary of string parameters ready for query or form encoding

    Raises:
        ValueError: If a range parameter is not a string or a two-item list/tuple

    Example:
        >>> normalize_parameters({"id": [245, 246], "fullcount": True}, "abc")
        {'format': 'json', 'id': '245 246', 'fullcount': 'true', 'client_id': 'abc'}
    """
    merged: Dict[str, Any] = dict(DEFAULT_PARAMETERS)
    if defaults:
        merged.update(defaults)
    if parameters:
        merged.update(parameters)

    normalized = {
        key: _format_value(key, value)
        for key, value in merged.items()
        if value is not None
    }
    normalized["client_id"] = client_id
    return normalized
