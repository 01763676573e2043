"""
Map decoding - the main entry point for TMX files.

Usage:
    tiled_map = load_map("level1.tmx")
    print(f"Map size: {tiled_map.width}x{tiled_map.height}")

    ground = tiled_map.get_layer_by_name("Ground")
    gid = ground.get_tile_gid(5, 10)

Maps can also be decoded from an open stream (parse_map) or from a string
or bytes (parse_map_xml). External tilesets are NOT read here; the map only
records their firstgid and source. See resolver.load_tilesets().
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Tuple, Union

from . import attributes
from .errors import TiledDecodeError, decode_errors
from .layers import parse_groups, parse_layers
from .models import TiledMap, TilesetReference
from .properties import parse_properties
from .tileset import parse_tileset_element

logger = logging.getLogger(__name__)

PARSE_ERROR = "An error occurred while trying to parse the Tiled map file"


def parse_tileset_reference(elem: ET.Element) -> TilesetReference:
    """Decode a <tileset> child of <map>, decoding it fully when embedded."""
    first_gid = attributes.required_int(elem, 'firstgid')
    source = elem.get('source')
    if source is not None:
        return TilesetReference(first_gid=first_gid, source=source)
    return TilesetReference(first_gid=first_gid,
                            tileset=parse_tileset_element(elem))


def parse_tileset_references(elem: ET.Element) -> Tuple[TilesetReference, ...]:
    return tuple(parse_tileset_reference(tileset_elem)
                 for tileset_elem in elem.findall('tileset'))


def parse_map_element(root: ET.Element) -> TiledMap:
    """Decode a <map> element into a TiledMap."""
    if root.tag != 'map':
        raise TiledDecodeError(f"Expected a <map> document, got <{root.tag}>")

    # Tile layers need to know whether to read chunks
    infinite = attributes.required(root, 'infinite') == '1'

    tiled_map = TiledMap(
        tiled_version=attributes.required(root, 'tiledversion'),
        orientation=attributes.required(root, 'orientation'),
        render_order=attributes.required(root, 'renderorder'),
        width=attributes.required_int(root, 'width'),
        height=attributes.required_int(root, 'height'),
        tilewidth=attributes.required_int(root, 'tilewidth'),
        tileheight=attributes.required_int(root, 'tileheight'),
        infinite=infinite,
        version=root.get('version', ''),
        background_color=root.get('backgroundcolor'),
        parallax_origin_x=attributes.optional_float(root, 'parallaxoriginx'),
        parallax_origin_y=attributes.optional_float(root, 'parallaxoriginy'),
        properties=parse_properties(root),
        tilesets=parse_tileset_references(root),
        layers=parse_layers(root, infinite),
        groups=parse_groups(root, infinite),
    )
    logger.debug("Decoded %dx%d map: %d tileset(s), %d layer(s), %d group(s)",
                 tiled_map.width, tiled_map.height, len(tiled_map.tilesets),
                 len(tiled_map.layers), len(tiled_map.groups))
    return tiled_map


def parse_map_xml(xml: Union[str, bytes]) -> TiledMap:
    """Decode a TMX document held in memory."""
    with decode_errors(PARSE_ERROR):
        return parse_map_element(ET.fromstring(xml))


def parse_map(stream: IO) -> TiledMap:
    """Decode a TMX document from an open stream (binary or text)."""
    with decode_errors(PARSE_ERROR):
        content = stream.read()
    return parse_map_xml(content)


def load_map(path: Union[str, Path]) -> TiledMap:
    """
    Load a TMX file from disk.

    Parameters:
    -----------
    path : str or Path
        Path to the .tmx file

    Returns:
    --------
    TiledMap : Parsed map object

    Raises:
    -------
    TiledDecodeError : file missing, not a .tmx file, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise TiledDecodeError(f"{path} not found")
    if path.suffix.lower() != '.tmx':
        raise TiledDecodeError(f"Unsupported file format: {path}")

    logger.debug("Loading map %s", path)
    with open(path, 'rb') as fh:
        return parse_map(fh)
