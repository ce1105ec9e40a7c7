# querybar/utils/helpers.py - Helper functions
"""
Formatting helpers shared by the collectors and the exporters.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Mapping, Optional, Sequence, Union


REDACTED = '***'

# Quoted literals are matched first so placeholders inside them are left alone
_PLACEHOLDER_RE = re.compile(
    r"'(?:[^']|'')*'"
    r'|"(?:[^"]|"")*"'
    r'|%\((?P<pyformat>\w+)\)s'
    r'|(?P<format>%s)'
    r'|(?P<qmark>\?)'
    r'|(?<!:):(?P<named>[A-Za-z_]\w*)'
)


def format_duration_ms(duration: float, precision: int = 5) -> str:
    """
    Format a duration in seconds as milliseconds for display.

    The seconds value is rounded to `precision` fractional digits (half away
    from zero) before it is scaled, so 0.0023456 at precision 5 becomes
    0.00235s and is shown as "2.35 ms". Trailing zeros are dropped.

    Args:
        duration: Duration in seconds
        precision: Fractional digits kept on the seconds value

    Returns:
        Formatted string such as "2.35 ms"
    """
    if not math.isfinite(duration):
        return f"{duration} ms"

    precision = max(int(precision), 0)
    raw = Decimal(repr(float(duration)))

    # Enough significant digits for the integer part, the kept fraction and the x1000
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, raw.adjusted() + precision + 6)
        seconds = raw.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
        millis = (seconds * 1000).normalize()

    return f"{millis:f} ms"


def pluralize(count: int, singular: str, plural: str) -> str:
    """
    Pick the noun form for a count: singular exactly when count is 1.
    """
    return singular if count == 1 else plural


def render_literal(value: Any) -> str:
    """
    Render a bound value as an SQL literal for display only.

    Args:
        value: Bound parameter value

    Returns:
        SQL-looking literal
    """
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(bytes(value))} bytes>"

    text = str(value).replace("'", "''")
    return f"'{text}'"


def substitute_bindings(sql: str,
                        params: Optional[Union[Sequence[Any], Mapping[str, Any]]] = None,
                        redact: bool = False) -> str:
    """
    Substitute bound parameters into a statement to get its display form.

    Supports qmark (?), format (%s), named (:name) and pyformat (%(name)s)
    placeholders. Placeholders inside quoted literals are ignored, and
    placeholders without a matching parameter are left as they are.

    Args:
        sql: Statement text with placeholders
        params: Positional sequence or mapping of parameters
        redact: Show REDACTED instead of the actual values

    Returns:
        Display-ready SQL text
    """
    if not params:
        return sql

    named = isinstance(params, Mapping)
    positional = iter(()) if named else iter(params)

    def replace(match):
        if named:
            key = match.group('named') or match.group('pyformat')
            if key is None or key not in params:
                return match.group(0)
            value = params[key]
        else:
            if not (match.group('qmark') or match.group('format')):
                return match.group(0)
            try:
                value = next(positional)
            except StopIteration:
                return match.group(0)

        return REDACTED if redact else render_literal(value)

    return _PLACEHOLDER_RE.sub(replace, sql)
