"""Canonical form of query-API parameters.

The canonical body is both the input to the signature and the literal
``application/x-www-form-urlencoded`` payload that goes on the wire, so its
ordering and escaping must be fully deterministic.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Union
from urllib.parse import quote_plus

ParamValue = Union[str, int, bool, None]


def encode(value: str) -> str:
    """Percent-encode *value* for the canonical body.

    Everything except ASCII letters, digits and ``_.-~`` is escaped.  The
    provider expects spaces as ``%20``, so the ``+`` produced by form
    encoding is rewritten; a literal ``+`` is already ``%2B`` at that point.
    """
    return quote_plus(value, safe="").replace("+", "%20")


def render(value: str | int | bool) -> str:
    """Render a scalar parameter value as it is sent on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonicalize(params: Mapping[str, ParamValue]) -> str:
    """Serialize *params* into the canonical ``key=value&...`` body.

    Keys are sorted by code point (which matches UTF-8 byte order) and
    ``None`` values are dropped.  There is no trailing separator.
    """
    return "&".join(
        f"{encode(key)}={encode(render(value))}"
        for key, value in sorted(params.items())
        if value is not None
    )


def indexed_params(name: str, values: Iterable[ParamValue] | ParamValue) -> dict[str, ParamValue]:
    """Expand a sequence parameter into ``Name.1``, ``Name.2``, ... entries.

    >>> indexed_params("PublicIp", ["1.2.3.4", "5.6.7.8"])
    {'PublicIp.1': '1.2.3.4', 'PublicIp.2': '5.6.7.8'}
    """
    if values is None:
        return {}
    if isinstance(values, (str, int, bool)):
        values = [values]
    return {f"{name}.{index}": value for index, value in enumerate(values, start=1)}
