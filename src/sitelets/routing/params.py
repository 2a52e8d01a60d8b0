"""Field value conversion.

Built-in converters between captured URL text (path segments and query
values) and the primitive field types a structured request object can
declare: ``str``, ``int``, ``float`` and ``bool``.
"""

import math
import re
from collections.abc import Callable
from typing import Any

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"invalid boolean: {value!r}"
    raise ValueError(msg)


# (regex, parser) for each supported field type
CONVERTERS: dict[type, tuple[re.Pattern[str], Callable[[str], Any]]] = {
    str: (re.compile(r".*", re.DOTALL), str),
    int: (re.compile(r"[-+]?\d+"), int),
    float: (
        re.compile(r"[-+]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?|(?i:inf(?:inity)?))"),
        float,
    ),
    bool: (re.compile(r"(?i:true|false|yes|no|on|off|1|0)"), _parse_bool),
}


def is_supported(target_type: Any) -> bool:
    """Return True if *target_type* has a registered converter."""
    return isinstance(target_type, type) and target_type in CONVERTERS


def convert_param(value: str, target_type: type) -> Any:
    """Convert captured text to *target_type*.

    Raises ``ValueError`` if the text is not a valid literal of the type.
    Raises ``KeyError`` if *target_type* has no registered converter.
    """
    regex, parser = CONVERTERS[target_type]
    if regex.fullmatch(value) is None:
        msg = f"{value!r} is not a valid {target_type.__name__}"
        raise ValueError(msg)
    return parser(value)


def format_param(value: Any, target_type: type) -> str:
    """Format a field value back into URL text.

    Inverse of :func:`convert_param`: ``convert_param(format_param(v, t), t) == v``.

    Raises ``ValueError`` for NaN, which no URL can reproduce.
    """
    if target_type is bool:
        return "true" if value else "false"
    if target_type is float:
        number = float(value)
        if math.isnan(number):
            msg = "NaN has no URL form"
            raise ValueError(msg)
        return repr(number)
    if target_type is int:
        return str(int(value))
    return str(value)
