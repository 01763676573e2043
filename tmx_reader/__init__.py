"""
TMX Reader - decoder for Tiled maps (.tmx) and tilesets (.tsx)

Reads the XML map format of the Tiled Map Editor into read-only Python
objects: map metadata, tilesets, tile/object/image layers, groups and
custom properties. Tile data can be CSV or Base64 (uncompressed, zlib or
gzip); tile grids come back as numpy arrays with the flip bits split off.

Requirements:
    pip install numpy

Usage:
    from tmx_reader import load_map, load_tilesets, get_tileset_reference

    tiled_map = load_map("level1.tmx")
    tilesets = load_tilesets(tiled_map, "level1.tmx")
"""

import logging

from .encoding import (Compression, decode_base64, decode_csv, decode_raw,
                       decode_tile_data, decompress)
from .errors import (TiledDecodeError, TiledError, TilesetNotFoundError,
                     UnsupportedEncodingError)
from .gid import (FLIP_DIAGONAL, FLIP_FLAG_SHIFT, FLIP_FLAGS_MASK,
                  FLIP_HORIZONTAL, FLIP_VERTICAL, FLIPPED_DIAGONALLY_FLAG,
                  FLIPPED_HORIZONTALLY_FLAG, FLIPPED_VERTICALLY_FLAG,
                  TILE_ID_MASK, decode_gid, split_gids)
from .models import (Chunk, Ellipse, Frame, Group, Image, ImageLayer, Layer,
                     ObjectLayer, Offset, Point, Polygon, Polyline, Property,
                     PropertyType, Shape, SourceRect, Tile, TiledMap,
                     TiledObject, TileLayer, Tileset, TilesetReference)
from .properties import find_property
from .resolver import (get_source_rect, get_tile, get_tileset_reference,
                       is_flipped_diagonally, is_flipped_horizontally,
                       is_flipped_vertically, load_tilesets)
from .tileset import load_tileset, parse_tileset, parse_tileset_xml
from .tmx import load_map, parse_map, parse_map_xml

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    # decoding entry points
    "load_map", "parse_map", "parse_map_xml",
    "load_tileset", "parse_tileset", "parse_tileset_xml",
    # gid resolution
    "get_tileset_reference", "load_tilesets", "get_tile", "get_source_rect",
    "is_flipped_horizontally", "is_flipped_vertically", "is_flipped_diagonally",
    # tile data
    "Compression", "decode_csv", "decode_raw", "decompress", "decode_base64",
    "decode_tile_data", "decode_gid", "split_gids",
    "FLIPPED_HORIZONTALLY_FLAG", "FLIPPED_VERTICALLY_FLAG", "FLIPPED_DIAGONALLY_FLAG",
    "FLIP_FLAGS_MASK", "TILE_ID_MASK", "FLIP_FLAG_SHIFT",
    "FLIP_HORIZONTAL", "FLIP_VERTICAL", "FLIP_DIAGONAL",
    # model
    "TiledMap", "TilesetReference", "Tileset", "Tile", "Frame",
    "Layer", "TileLayer", "ObjectLayer", "ImageLayer", "Chunk", "Group",
    "TiledObject", "Shape", "Polygon", "Polyline", "Point", "Ellipse",
    "Property", "PropertyType", "Image", "Offset", "SourceRect",
    "find_property",
    # errors
    "TiledError", "TiledDecodeError", "UnsupportedEncodingError",
    "TilesetNotFoundError",
]
