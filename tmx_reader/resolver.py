"""
GID resolution helpers for decoded maps.

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Tiles are referenced by Global IDs across all tilesets of a map:

    Tileset A (firstgid=1):   tiles 1-49
    Tileset B (firstgid=50):  tiles 50-119
    Tileset C (firstgid=120): tiles 120+

    GID 0  = empty tile (no graphic)
    GID 60 = tile 10 of tileset B (60 - 50)

Typical rendering flow:

    tilesets = load_tilesets(tiled_map, "maps/level1.tmx")
    ref = get_tileset_reference(tiled_map, gid)
    tileset = tilesets[ref.first_gid]
    rect = get_source_rect(ref, tileset, gid)
    tile = get_tile(ref, tileset, gid)       # None = plain tile

Everything here is a pure function of its arguments except
load_tilesets(), which reads the tileset files.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .errors import TiledDecodeError, TiledError, TilesetNotFoundError
from .gid import FLIP_DIAGONAL, FLIP_HORIZONTAL, FLIP_VERTICAL
from .models import (Layer, SourceRect, Tile, TiledMap, TiledObject, TileLayer,
                     Tileset, TilesetReference)
from .tileset import parse_tileset_xml

logger = logging.getLogger(__name__)

TilesetLoader = Callable[[Path], bytes]


def get_tileset_reference(tiled_map: TiledMap, gid: int) -> Optional[TilesetReference]:
    """
    Find the tileset reference that owns ``gid``.

    Each reference owns [first_gid, next first_gid); the last one owns
    every gid from its first_gid up.

    Returns:
    --------
    None when the map has no tilesets. For a gid below the first
    tileset's first_gid an empty TilesetReference placeholder is returned
    instead of None, to stay compatible with existing callers.
    """
    tilesets = tiled_map.tilesets
    if not tilesets:
        return None

    for current, following in zip(tilesets, tilesets[1:]):
        if current.first_gid <= gid < following.first_gid:
            return current

    if gid >= tilesets[-1].first_gid:
        return tilesets[-1]

    # TODO: decide whether callers can take None here and drop the placeholder
    if gid:
        logger.debug("GID %d is below the first tileset's firstgid %d",
                     gid, tilesets[0].first_gid)
    return TilesetReference()


def load_tilesets(tiled_map: TiledMap, map_path: Union[str, Path],
                  loader: Optional[TilesetLoader] = None) -> Dict[int, Tileset]:
    """
    Load the tilesets of a map, keyed by first gid.

    Parameters:
    -----------
    tiled_map : TiledMap
        The decoded map
    map_path : str or Path
        Path of the map file; external sources are relative to its folder
    loader : callable, optional
        Returns the bytes of a tileset file given its resolved path, or
        raises FileNotFoundError. Defaults to reading from disk.

    Raises:
    -------
    TilesetNotFoundError : a referenced tileset file does not exist

    Embedded tilesets are returned as decoded with the map.
    """
    loader = loader or Path.read_bytes
    folder = Path(map_path).parent
    tilesets = {}

    for reference in tiled_map.tilesets:
        if reference.source is None:
            if reference.tileset is not None:
                tilesets[reference.first_gid] = reference.tileset
            continue

        path = folder / reference.source
        logger.debug("Loading tileset %s (firstgid %d)", path, reference.first_gid)
        try:
            content = loader(path)
        except FileNotFoundError as exc:
            raise TilesetNotFoundError(path) from exc
        except OSError as exc:
            raise TiledDecodeError(f"Cannot read tileset '{path}'") from exc
        tilesets[reference.first_gid] = parse_tileset_xml(content)

    return tilesets


def get_tile(reference: TilesetReference, tileset: Tileset, gid: int) -> Optional[Tile]:
    """
    Return the tile definition for ``gid``.

    None means the tile has no <tile> metadata, not that the gid is invalid.
    """
    local_id = gid - reference.first_gid
    for tile in tileset.tiles:
        if tile.id == local_id:
            return tile
    return None


def get_source_rect(reference: TilesetReference, tileset: Tileset,
                    gid: int) -> Optional[SourceRect]:
    """
    Pixel rectangle of ``gid`` inside the tileset image.

    The image is read as a grid with image.width // tilewidth columns,
    filled left to right, top to bottom:

        index 0 -> (0, 0)    index 4 -> (64, 0)    index 5 -> (0, 16)
        (80px wide image, 16px tiles -> 5 columns)

    Returns None for gids outside the tileset, or when it has no image or
    a zero tile width.
    """
    index = gid - reference.first_gid
    if not 0 <= index < tileset.tilecount or tileset.image is None:
        return None
    if tileset.tilewidth <= 0:
        return None

    columns = tileset.image.width // tileset.tilewidth
    if columns > 0:
        column, row = index % columns, index // columns
    else:
        # Image narrower than one tile: every tile sits on the first row
        column, row = index, 0

    return SourceRect(
        x=column * tileset.tilewidth,
        y=row * tileset.tileheight,
        width=tileset.tilewidth,
        height=tileset.tileheight,
    )


# =============================================================================
# FLIP FLAG QUERIES
# =============================================================================

def _flip_byte(target: Union[Layer, TiledObject], x: Optional[int],
               y: Optional[int]) -> int:
    if isinstance(target, TiledObject):
        if target.gid == 0:
            raise TiledError("Tiled object not linked to a tile")
        return target.flags

    if not isinstance(target, TileLayer):
        raise TiledError(
            "Retrieving tile flipped state for a tile does not work for non-tile layers")
    if target.flags is None:
        raise TiledError(
            f"Layer '{target.name}' is chunked; query the flags of its chunks instead")
    if x is None:
        raise TypeError("A cell index or x, y coordinates are required for tile layers")

    if y is None:
        index = x
    else:
        if not 0 <= x < target.width:
            raise IndexError(
                f"Column {x} is outside layer '{target.name}' (width {target.width})")
        index = x + y * target.width
    if not 0 <= index < len(target.flags):
        raise IndexError(f"Cell {index} is outside layer '{target.name}'")
    return int(target.flags[index])


def is_flipped_horizontally(target: Union[Layer, TiledObject],
                            x: Optional[int] = None, y: Optional[int] = None) -> bool:
    """
    Is a tile flipped horizontally?

    ``target`` is either a tile layer with a flat cell index (``x`` alone)
    or a column/row pair (``x``, ``y``), or a tile object.
    """
    return bool(_flip_byte(target, x, y) & FLIP_HORIZONTAL)


def is_flipped_vertically(target: Union[Layer, TiledObject],
                          x: Optional[int] = None, y: Optional[int] = None) -> bool:
    """Is a tile flipped vertically? Arguments as for is_flipped_horizontally()."""
    return bool(_flip_byte(target, x, y) & FLIP_VERTICAL)


def is_flipped_diagonally(target: Union[Layer, TiledObject],
                          x: Optional[int] = None, y: Optional[int] = None) -> bool:
    """Is a tile flipped diagonally? Arguments as for is_flipped_horizontally()."""
    return bool(_flip_byte(target, x, y) & FLIP_DIAGONAL)
