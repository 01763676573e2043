"""
Custom property decoding.

XML format:
    <properties>
        <property name="solid" type="bool" value="true"/>
        <property name="health" type="int" value="100"/>
        <property name="description" value="A wooden door"/>
        <property name="notes">Long text
        spanning lines</property>
    </properties>

No conversion happens here: the value is kept as text and only the type
tag is decoded. Unknown or missing types (including Tiled's "class"
properties) are treated as strings.
"""

import xml.etree.ElementTree as ET
from typing import Iterable, Optional, Tuple

from .attributes import required
from .models import Property, PropertyType

_TYPES = {
    'bool': PropertyType.BOOL,
    'color': PropertyType.COLOR,
    'file': PropertyType.FILE,
    'float': PropertyType.FLOAT,
    'int': PropertyType.INT,
    'object': PropertyType.OBJECT,
}


def parse_property(elem: ET.Element) -> Property:
    """Decode one <property> element."""
    value = elem.get('value')
    if value is None:
        # Multi-line strings are stored as text content
        value = ''.join(elem.itertext())

    return Property(
        name=required(elem, 'name'),
        type=_TYPES.get(elem.get('type'), PropertyType.STRING),
        value=value,
    )


def parse_properties(elem: ET.Element) -> Tuple[Property, ...]:
    """Decode the <properties> block directly under ``elem`` (empty if absent)."""
    return tuple(parse_property(prop_elem)
                 for prop_elem in elem.findall('properties/property'))


def find_property(properties: Iterable[Property], name: str) -> Optional[Property]:
    """Return the first property called ``name``, or None."""
    for prop in properties:
        if prop.name == name:
            return prop
    return None
