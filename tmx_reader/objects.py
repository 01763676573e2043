"""
Object decoding.

    <object id="3" name="door" class="trigger" x="64" y="96" width="32" height="32">
        <properties>...</properties>
    </object>
    <object id="4" gid="2147483653" x="10" y="20" width="16" height="16"/>
    <object id="5" x="0" y="0"><polygon points="0,0 16,0 16,16"/></object>
    <object id="6" x="8" y="8"><point/></object>

Tile objects (with gid) have the flip bits split off the gid the same way
tile layer cells do.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional, Tuple

from . import attributes
from .errors import TiledDecodeError
from .gid import decode_gid
from .models import Ellipse, Point, Polygon, Polyline, Shape, TiledObject
from .properties import parse_properties

logger = logging.getLogger(__name__)

SHAPE_TAGS = ('polygon', 'polyline', 'point', 'ellipse')


def parse_points(text: str) -> Tuple[float, ...]:
    """
    Parse a points attribute into a flat coordinate tuple.

    >>> parse_points("0,0 16,0 16,16")
    (0.0, 0.0, 16.0, 0.0, 16.0, 16.0)
    """
    points = []
    for vertex in text.split():
        coords = vertex.split(',')
        if len(coords) != 2:
            raise TiledDecodeError(f"Invalid point {vertex!r}, expected 'x,y'")
        try:
            points.extend(float(c) for c in coords)
        except ValueError as exc:
            raise TiledDecodeError(f"Invalid point {vertex!r}") from exc
    return tuple(points)


def _parse_shape(elem: ET.Element) -> Optional[Shape]:
    shape_elems = [child for child in elem if child.tag in SHAPE_TAGS]
    if not shape_elems:
        return None
    if len(shape_elems) > 1:
        tags = ', '.join(child.tag for child in shape_elems)
        raise TiledDecodeError(
            f"Object {elem.get('id')} has more than one shape ({tags})")

    shape_elem = shape_elems[0]
    if shape_elem.tag == 'polygon':
        return Polygon(parse_points(attributes.required(shape_elem, 'points')))
    if shape_elem.tag == 'polyline':
        return Polyline(parse_points(attributes.required(shape_elem, 'points')))
    if shape_elem.tag == 'point':
        return Point()
    return Ellipse()


def parse_object(elem: ET.Element) -> TiledObject:
    """Decode one <object> element."""
    gid = flags = 0
    if elem.get('gid') is not None:
        gid, flags = decode_gid(attributes.required_int(elem, 'gid'))

    return TiledObject(
        id=attributes.required_int(elem, 'id'),
        x=attributes.required_float(elem, 'x'),
        y=attributes.required_float(elem, 'y'),
        name=elem.get('name', ''),
        type=elem.get('type', ''),
        class_name=elem.get('class', ''),
        width=attributes.optional_float(elem, 'width'),
        height=attributes.optional_float(elem, 'height'),
        rotation=attributes.optional_float(elem, 'rotation'),
        gid=gid,
        flags=flags,
        properties=parse_properties(elem),
        shape=_parse_shape(elem),
    )


def parse_objects(elem: ET.Element) -> Tuple[TiledObject, ...]:
    """Decode every <object> directly under ``elem``, in document order."""
    objects = tuple(parse_object(obj_elem) for obj_elem in elem.findall('object'))
    logger.debug("Decoded %d object(s) under <%s>", len(objects), elem.tag)
    return objects
