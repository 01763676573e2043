"""
Tileset decoding (TSX files and tilesets embedded in maps).

    <tileset version="1.10" tiledversion="1.10.2" name="terrain"
             tilewidth="16" tileheight="16" tilecount="20" columns="5">
        <tileoffset x="0" y="4"/>
        <image source="terrain.png" width="80" height="64"/>
        <tile id="3" terrain="0,0,,1">
            <properties>...</properties>
            <animation>
                <frame tileid="3" duration="100"/>
                <frame tileid="4" duration="100"/>
            </animation>
            <objectgroup>
                <object id="1" x="0" y="0" width="16" height="8"/>
            </objectgroup>
        </tile>
    </tileset>

Only tiles that carry metadata have a <tile> element; Tileset.tiles stays
sparse in the same way.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Optional, Tuple, Union

from . import attributes
from .errors import TiledDecodeError, decode_errors
from .layers import parse_image
from .models import Frame, Offset, Tile, Tileset
from .objects import parse_objects
from .properties import parse_properties

logger = logging.getLogger(__name__)

PARSE_ERROR = "An error occurred while trying to parse the Tiled tileset file"


def _parse_terrain(value: Optional[str]) -> Optional[Tuple[int, ...]]:
    if value is None:
        return None
    try:
        return tuple(int(index) if index else -1 for index in value.split(','))
    except ValueError as exc:
        raise TiledDecodeError(f"Invalid terrain {value!r}") from exc


def _parse_frame(elem: ET.Element) -> Frame:
    return Frame(
        tile_id=attributes.required_int(elem, 'tileid'),
        duration=attributes.required_int(elem, 'duration'),
    )


def parse_tile(elem: ET.Element) -> Tile:
    """Decode a <tile> definition."""
    image_elem = elem.find('image')
    collision_objects = ()
    objectgroup_elem = elem.find('objectgroup')
    if objectgroup_elem is not None:
        collision_objects = parse_objects(objectgroup_elem)

    return Tile(
        id=attributes.required_int(elem, 'id'),
        type=elem.get('type', ''),
        class_name=elem.get('class', ''),
        terrain=_parse_terrain(elem.get('terrain')),
        properties=parse_properties(elem),
        animation=tuple(_parse_frame(frame_elem)
                        for frame_elem in elem.findall('animation/frame')),
        objects=collision_objects,
        image=parse_image(image_elem) if image_elem is not None else None,
    )


def parse_tileset_element(elem: ET.Element) -> Tileset:
    """
    Decode a <tileset> element that holds a full tileset definition.

    Used both for the root of a TSX document and for tilesets embedded in
    a map.
    """
    image_elem = elem.find('image')
    offset_elem = elem.find('tileoffset')

    offset = None
    if offset_elem is not None:
        offset = Offset(x=attributes.required_int(offset_elem, 'x'),
                        y=attributes.required_int(offset_elem, 'y'))

    tileset = Tileset(
        tilewidth=attributes.required_int(elem, 'tilewidth'),
        tileheight=attributes.required_int(elem, 'tileheight'),
        tilecount=attributes.required_int(elem, 'tilecount'),
        columns=attributes.required_int(elem, 'columns'),
        name=elem.get('name', ''),
        class_name=elem.get('class', ''),
        tiled_version=elem.get('tiledversion', ''),
        version=elem.get('version', ''),
        spacing=attributes.optional_int(elem, 'spacing'),
        margin=attributes.optional_int(elem, 'margin'),
        image=parse_image(image_elem) if image_elem is not None else None,
        offset=offset,
        tiles=tuple(parse_tile(tile_elem) for tile_elem in elem.findall('tile')),
        properties=parse_properties(elem),
    )
    logger.debug("Decoded tileset '%s': %d tiles, %d with metadata",
                 tileset.name, tileset.tilecount, len(tileset.tiles))
    return tileset


def parse_tileset_xml(xml: Union[str, bytes]) -> Tileset:
    """Decode a TSX document held in memory."""
    with decode_errors(PARSE_ERROR):
        root = ET.fromstring(xml)
        if root.tag != 'tileset':
            raise TiledDecodeError(f"Expected a <tileset> document, got <{root.tag}>")
        return parse_tileset_element(root)


def parse_tileset(stream: IO) -> Tileset:
    """Decode a TSX document from an open stream."""
    with decode_errors(PARSE_ERROR):
        content = stream.read()
    return parse_tileset_xml(content)


def load_tileset(path: Union[str, Path]) -> Tileset:
    """
    Load a TSX file from disk.

    Raises:
    -------
    TiledDecodeError : file missing, not a .tsx file, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise TiledDecodeError(f"{path} not found")
    if path.suffix.lower() != '.tsx':
        raise TiledDecodeError(f"Unsupported file format: {path}")

    logger.debug("Loading tileset %s", path)
    with open(path, 'rb') as fh:
        return parse_tileset(fh)
