"""
Layer and group decoding.

=============================================================================
LAYER KINDS
=============================================================================

    <layer>        -> TileLayer    (grid data, see encoding.py)
    <objectgroup>  -> ObjectLayer  (objects, see objects.py)
    <imagelayer>   -> ImageLayer   (one optional <image>)
    <group>        -> Group        (layers and sub-groups, recursively)

All three layer kinds share the same attribute set (id, name, visible,
locked, opacity, offsets, parallax, tint, class, properties).

=============================================================================
ORDERING
=============================================================================

Layers of a map or group are collected per kind: all <layer> elements,
then all <objectgroup>, then all <imagelayer>. Document interleaving
between kinds is not kept.

=============================================================================
INFINITE MAPS
=============================================================================

On infinite maps tile data is split into chunks:

    <data encoding="csv">
        <chunk x="-16" y="0" width="16" height="16">1,2,3,...</chunk>
        <chunk x="0" y="0" width="16" height="16">...</chunk>
    </data>

Each chunk is decoded with the encoding/compression of its <data>.

=============================================================================
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional, Tuple

from . import attributes
from .encoding import Compression, decode_tile_data
from .errors import TiledDecodeError
from .models import (AnyLayer, Chunk, Group, Image, ImageLayer, ObjectLayer,
                     TileLayer)
from .objects import parse_objects
from .properties import parse_properties

logger = logging.getLogger(__name__)

LAYER_TAGS = ('layer', 'objectgroup', 'imagelayer')


def parse_image(elem: ET.Element) -> Image:
    """Decode an <image> element (source, width and height are required)."""
    return Image(
        source=attributes.required(elem, 'source'),
        width=attributes.required_int(elem, 'width'),
        height=attributes.required_int(elem, 'height'),
    )


def _layer_attributes(elem: ET.Element) -> Dict[str, Any]:
    """Attributes common to every layer kind."""
    return dict(
        id=attributes.required_int(elem, 'id'),
        name=attributes.required(elem, 'name'),
        width=attributes.optional_int(elem, 'width'),
        height=attributes.optional_int(elem, 'height'),
        visible=attributes.flag(elem, 'visible', True),
        locked=attributes.flag(elem, 'locked', False),
        opacity=attributes.optional_float(elem, 'opacity', 1.0),
        offset_x=attributes.optional_float(elem, 'offsetx'),
        offset_y=attributes.optional_float(elem, 'offsety'),
        parallax_x=attributes.optional_float(elem, 'parallaxx', 1.0),
        parallax_y=attributes.optional_float(elem, 'parallaxy', 1.0),
        tint_color=elem.get('tintcolor'),
        class_name=elem.get('class', ''),
        properties=parse_properties(elem),
    )


def _parse_chunk(elem: ET.Element, encoding: str, compression: Optional[str]) -> Chunk:
    data, flags = decode_tile_data(elem.text, encoding, compression)
    return Chunk(
        x=attributes.required_int(elem, 'x'),
        y=attributes.required_int(elem, 'y'),
        width=attributes.required_int(elem, 'width'),
        height=attributes.required_int(elem, 'height'),
        data=data,
        flags=flags,
    )


def parse_tile_layer(elem: ET.Element, infinite: bool) -> TileLayer:
    """Decode a <layer> element and its tile data."""
    fields = _layer_attributes(elem)

    data_elem = elem.find('data')
    if data_elem is None:
        raise TiledDecodeError(f"Tile layer '{fields['name']}' has no <data> element")

    encoding = attributes.required(data_elem, 'encoding')
    compression = data_elem.get('compression')
    # Reject unknown compressions even where they would go unused
    Compression.from_attribute(compression)

    if infinite:
        chunks = tuple(_parse_chunk(chunk_elem, encoding, compression)
                       for chunk_elem in data_elem.findall('chunk'))
        logger.debug("Tile layer '%s': %d chunk(s)", fields['name'], len(chunks))
        return TileLayer(chunks=chunks, **fields)

    data, flags = decode_tile_data(data_elem.text, encoding, compression)
    expected = fields['width'] * fields['height']
    if len(data) != expected:
        logger.warning("Tile layer '%s' has %d cells, expected %d (%dx%d)",
                       fields['name'], len(data), expected,
                       fields['width'], fields['height'])
    return TileLayer(data=data, flags=flags, **fields)


def parse_object_layer(elem: ET.Element) -> ObjectLayer:
    """Decode an <objectgroup> element."""
    return ObjectLayer(
        color=elem.get('color'),
        draw_order=elem.get('draworder', 'topdown'),
        objects=parse_objects(elem),
        **_layer_attributes(elem)
    )


def parse_image_layer(elem: ET.Element) -> ImageLayer:
    """Decode an <imagelayer> element."""
    image_elem = elem.find('image')
    return ImageLayer(
        image=parse_image(image_elem) if image_elem is not None else None,
        repeat_x=attributes.flag(elem, 'repeatx', False),
        repeat_y=attributes.flag(elem, 'repeaty', False),
        **_layer_attributes(elem)
    )


def parse_layer(elem: ET.Element, infinite: bool = False) -> AnyLayer:
    """Decode any layer element, dispatching on its tag."""
    if elem.tag == 'layer':
        return parse_tile_layer(elem, infinite)
    if elem.tag == 'objectgroup':
        return parse_object_layer(elem)
    if elem.tag == 'imagelayer':
        return parse_image_layer(elem)
    raise TiledDecodeError(f"<{elem.tag}> is not a layer element")


def parse_layers(elem: ET.Element, infinite: bool) -> Tuple[AnyLayer, ...]:
    """
    Decode the layers directly under a <map> or <group>.

    Grouped by kind: tile layers, then object layers, then image layers.
    """
    return tuple(parse_layer(layer_elem, infinite)
                 for tag in LAYER_TAGS
                 for layer_elem in elem.findall(tag))


def parse_group(elem: ET.Element, infinite: bool) -> Group:
    """Decode a <group> element together with everything nested inside it."""
    return Group(
        id=attributes.required_int(elem, 'id'),
        name=attributes.required(elem, 'name'),
        visible=attributes.flag(elem, 'visible', True),
        locked=attributes.flag(elem, 'locked', False),
        properties=parse_properties(elem),
        # Recursive: groups within groups
        groups=parse_groups(elem, infinite),
        layers=parse_layers(elem, infinite),
    )


def parse_groups(elem: ET.Element, infinite: bool) -> Tuple[Group, ...]:
    """Decode every <group> directly under ``elem``."""
    return tuple(parse_group(group_elem, infinite)
                 for group_elem in elem.findall('group'))
