"""
Typed access to XML attributes.

Missing optional attributes fall back to a default; missing required
attributes and unparsable numbers raise TiledDecodeError naming the
element and attribute.
"""

import xml.etree.ElementTree as ET
from typing import Optional

from .errors import TiledDecodeError


def required(elem: ET.Element, name: str) -> str:
    """Return attribute ``name`` or fail if it is absent."""
    value = elem.get(name)
    if value is None:
        raise TiledDecodeError(f"<{elem.tag}> is missing required attribute '{name}'")
    return value


def _to_int(elem: ET.Element, name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise TiledDecodeError(
            f"<{elem.tag}> attribute '{name}' is not an integer: {value!r}") from exc


def _to_float(elem: ET.Element, name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise TiledDecodeError(
            f"<{elem.tag}> attribute '{name}' is not a number: {value!r}") from exc


def required_int(elem: ET.Element, name: str) -> int:
    return _to_int(elem, name, required(elem, name))


def required_float(elem: ET.Element, name: str) -> float:
    return _to_float(elem, name, required(elem, name))


def optional_int(elem: ET.Element, name: str, default: int = 0) -> int:
    value = elem.get(name)
    if value is None:
        return default
    return _to_int(elem, name, value)


def optional_float(elem: ET.Element, name: str, default: float = 0.0) -> float:
    value = elem.get(name)
    if value is None:
        return default
    return _to_float(elem, name, value)


def flag(elem: ET.Element, name: str, default: bool) -> bool:
    """Boolean attribute: "1" is true, any other present value is false."""
    value: Optional[str] = elem.get(name)
    if value is None:
        return default
    return value == '1'
