"""
Document model for decoded TMX maps and TSX tilesets.

=============================================================================
OVERVIEW
=============================================================================

A decoded map is a tree of read-only records:

    TiledMap
    ├── properties        (Property, ...)
    ├── tilesets          (TilesetReference, ...)  firstgid + source
    ├── layers            (TileLayer | ObjectLayer | ImageLayer, ...)
    │     TileLayer   -> data/flags arrays, or chunks on infinite maps
    │     ObjectLayer -> TiledObject, ...
    │     ImageLayer  -> Image
    └── groups            (Group, ...)  each with its own layers and groups

    Tileset  (loaded separately from a .tsx file, or embedded in the map)
    ├── image, offset, properties
    └── tiles             (Tile, ...)  only tiles that carry metadata

Nothing here decodes XML; see properties.py, objects.py, layers.py,
tileset.py and tmx.py for that. Every record is a frozen dataclass and
every sequence a tuple, so a decoded tree can be shared freely.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

import numpy as np


# =============================================================================
# PROPERTIES
# =============================================================================

class PropertyType(Enum):
    """Declared type of a custom property."""
    STRING = 'string'
    BOOL = 'bool'
    COLOR = 'color'
    FILE = 'file'
    FLOAT = 'float'
    INT = 'int'
    OBJECT = 'object'


@dataclass(frozen=True)
class Property:
    """
    Custom property attached to a map, layer, tile, object, etc.

    The value is always kept as the literal text from the file. The type
    tag tells consumers how to read it:

        <property name="solid" type="bool" value="true"/>
        <property name="health" type="int" value="100"/>
        <property name="label" value="42"/>       (string, NOT an int)
        <property name="dialogue">Multi-line
        text</property>                           (value from text content)
    """
    name: str
    type: PropertyType = PropertyType.STRING
    value: str = ""

    def parsed_value(self) -> Union[str, int, float, bool]:
        """Convert the literal value to a Python value according to the type tag."""
        if self.type in (PropertyType.INT, PropertyType.OBJECT):
            return int(self.value)
        if self.type is PropertyType.FLOAT:
            return float(self.value)
        if self.type is PropertyType.BOOL:
            return self.value.strip().lower() in ('true', '1')
        # string, color and file stay as text
        return self.value


# =============================================================================
# SMALL VALUE TYPES
# =============================================================================

@dataclass(frozen=True)
class Image:
    """Image reference (tileset spritesheet, per-tile image or image layer)."""
    source: str
    width: int
    height: int


@dataclass(frozen=True)
class Offset:
    """Pixel offset applied when drawing tiles of a tileset."""
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class SourceRect:
    """Pixel rectangle of one tile inside a tileset image."""
    x: int
    y: int
    width: int
    height: int


# =============================================================================
# OBJECT SHAPES
# =============================================================================

@dataclass(frozen=True)
class Polygon:
    """Closed polygon. ``points`` is flat: (x0, y0, x1, y1, ...)."""
    points: Tuple[float, ...] = ()

    @property
    def vertex_count(self) -> int:
        return len(self.points) // 2


@dataclass(frozen=True)
class Polyline:
    """Open polyline, same point layout as Polygon."""
    points: Tuple[float, ...] = ()

    @property
    def vertex_count(self) -> int:
        return len(self.points) // 2


@dataclass(frozen=True)
class Point:
    """Point marker; the object's x/y is the position."""


@dataclass(frozen=True)
class Ellipse:
    """Ellipse marker; the object's bounds define the ellipse."""


Shape = Union[Polygon, Polyline, Point, Ellipse]


# =============================================================================
# OBJECTS
# =============================================================================

@dataclass(frozen=True)
class TiledObject:
    """
    Object in an object layer (or a collision shape of a tile).

    ==========================================================================
    OBJECT TYPES
    ==========================================================================

    Rectangle:   x, y, width, height, shape is None
    Shape:       shape is Polygon, Polyline, Point or Ellipse
    Tile object: gid != 0 - displays that tile at this position.
                 ``flags`` holds its flip byte (see gid.py).

    ==========================================================================
    """
    id: int
    x: float
    y: float
    name: str = ""
    type: str = ""
    class_name: str = ""
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    gid: int = 0                                     # 0 = not a tile object
    flags: int = 0                                   # flip byte of gid
    properties: Tuple[Property, ...] = ()
    shape: Optional[Shape] = None

    @property
    def is_tile(self) -> bool:
        return self.gid != 0


# =============================================================================
# TILESETS
# =============================================================================

@dataclass(frozen=True)
class Frame:
    """One animation frame: show tile ``tile_id`` for ``duration`` ms."""
    tile_id: int
    duration: int


@dataclass(frozen=True)
class Tile:
    """
    Metadata for one tile of a tileset.

    Only tiles with properties, terrain, animation, collision shapes or
    their own image appear in Tileset.tiles. Any other tile id below
    tilecount is a valid tile with default behaviour.

    ``terrain`` holds the four corner terrain indexes, -1 where a corner
    has no terrain.
    """
    id: int
    type: str = ""
    class_name: str = ""
    terrain: Optional[Tuple[int, ...]] = None
    properties: Tuple[Property, ...] = ()
    animation: Tuple[Frame, ...] = ()
    objects: Tuple[TiledObject, ...] = ()
    image: Optional[Image] = None


@dataclass(frozen=True)
class Tileset:
    """
    Tileset collection - a set of tile graphics.

    ==========================================================================
    SPRITESHEET LAYOUT
    ==========================================================================

    One image divided into a grid of tilewidth x tileheight cells:

       +---+---+---+---+
       | 0 | 1 | 2 | 3 |
       +---+---+---+---+
       | 4 | 5 | 6 | 7 |
       +---+---+---+---+

    Tile ids are LOCAL to the tileset. The map decides which GIDs a
    tileset owns through TilesetReference.first_gid:

       gid = reference.first_gid + tile.id

    ==========================================================================
    """
    tilewidth: int
    tileheight: int
    tilecount: int
    columns: int
    name: str = ""
    class_name: str = ""
    tiled_version: str = ""
    version: str = ""
    spacing: int = 0
    margin: int = 0
    image: Optional[Image] = None
    offset: Optional[Offset] = None
    tiles: Tuple[Tile, ...] = ()
    properties: Tuple[Property, ...] = ()


@dataclass(frozen=True)
class TilesetReference:
    """
    A <tileset> entry of a map.

    External tilesets only carry ``source`` (a path relative to the map
    file); load them with resolver.load_tilesets(). Embedded tilesets are
    decoded in place into ``tileset``.
    """
    first_gid: int = 0
    source: Optional[str] = None
    tileset: Optional[Tileset] = None

    @property
    def is_external(self) -> bool:
        return self.source is not None


# =============================================================================
# LAYERS
# =============================================================================

@dataclass(frozen=True, eq=False)
class Chunk:
    """
    Rectangular piece of an infinite map's tile layer.

    x/y are in tiles and may be negative. ``data`` and ``flags`` are laid
    out like a finite layer's, width * height cells row-major.
    """
    x: int
    y: int
    width: int
    height: int
    data: np.ndarray
    flags: np.ndarray


@dataclass(frozen=True, eq=False)
class Layer:
    """
    Attributes shared by tile, object and image layers.

    Defaults follow Tiled: visible, unlocked, fully opaque, parallax 1.0.
    """
    id: int = 0
    name: str = ""
    width: int = 0                                   # in tiles, 0 for non-tile layers
    height: int = 0
    visible: bool = True
    locked: bool = False
    opacity: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    parallax_x: float = 1.0
    parallax_y: float = 1.0
    tint_color: Optional[str] = None
    class_name: str = ""
    properties: Tuple[Property, ...] = ()


@dataclass(frozen=True, eq=False)
class TileLayer(Layer):
    """
    Grid of tile references.

    Finite maps fill ``data``/``flags`` (width * height cells, row-major,
    index = x + y * width). Infinite maps leave them None and fill
    ``chunks`` instead.
    """
    data: Optional[np.ndarray] = None
    flags: Optional[np.ndarray] = None
    chunks: Tuple[Chunk, ...] = ()

    @property
    def is_infinite(self) -> bool:
        return self.data is None

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get the GID of the tile at column x, row y.

        Returns 0 (empty) for coordinates outside the layer.
        """
        if self.data is None:
            raise ValueError(f"Layer '{self.name}' is chunked; read its chunks instead")
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.data[y * self.width + x])
        return 0


@dataclass(frozen=True)
class ObjectLayer(Layer):
    """Object group: vector objects in declaration order."""
    color: Optional[str] = None
    draw_order: str = "topdown"
    objects: Tuple[TiledObject, ...] = ()


@dataclass(frozen=True)
class ImageLayer(Layer):
    """Single image drawn as a layer."""
    image: Optional[Image] = None
    repeat_x: bool = False
    repeat_y: bool = False


AnyLayer = Union[TileLayer, ObjectLayer, ImageLayer]


@dataclass(frozen=True)
class Group:
    """
    Group of layers - a folder containing other layers and groups.

    Layers:
    ├── Background (group)
    │   ├── Sky
    │   └── Mountains
    └── Gameplay (group)
        ├── Ground
        └── Props (group)
            └── Objects

    Groups nest to any depth. Each group owns its children; there are no
    back references.
    """
    id: int = 0
    name: str = ""
    visible: bool = True
    locked: bool = False
    properties: Tuple[Property, ...] = ()
    layers: Tuple[AnyLayer, ...] = ()
    groups: Tuple['Group', ...] = ()

    @property
    def objects(self) -> Tuple[TiledObject, ...]:
        """Objects of this group's own object layers, in layer order."""
        return tuple(obj
                     for layer in self.layers if isinstance(layer, ObjectLayer)
                     for obj in layer.objects)


# =============================================================================
# MAP
# =============================================================================

@dataclass(frozen=True)
class TiledMap:
    """
    Complete Tiled map - the root of a decoded TMX document.

    ==========================================================================
    LAYER ORDER
    ==========================================================================

    ``layers`` holds the map's direct tile, object and image layers as
    siblings, grouped by kind: every <layer> first, then every
    <objectgroup>, then every <imagelayer>, each in document order.
    Interleaving from the document is NOT preserved.

    <group> elements go to ``groups``.

    ==========================================================================
    TILESETS
    ==========================================================================

    ``tilesets`` is in declaration order, which Tiled writes by ascending
    firstgid. GID lookups rely on that ordering.

    ==========================================================================
    """
    tiled_version: str
    orientation: str
    render_order: str
    width: int                                       # in tiles
    height: int
    tilewidth: int                                   # in pixels
    tileheight: int
    infinite: bool = False
    version: str = ""
    background_color: Optional[str] = None
    parallax_origin_x: float = 0.0
    parallax_origin_y: float = 0.0
    properties: Tuple[Property, ...] = ()
    tilesets: Tuple[TilesetReference, ...] = ()
    layers: Tuple[AnyLayer, ...] = ()
    groups: Tuple[Group, ...] = ()

    def all_layers(self) -> Iterator[AnyLayer]:
        """
        Iterate every layer in the map, including layers inside groups.

        Top-level layers come first, then each group depth-first (a
        group's own layers before its sub-groups).
        """
        yield from self.layers

        def walk(groups):
            for group in groups:
                yield from group.layers
                yield from walk(group.groups)

        yield from walk(self.groups)

    def get_layer_by_name(self, name: str) -> Optional[AnyLayer]:
        """Find a layer by name (searches groups too). None if not found."""
        for layer in self.all_layers():
            if layer.name == name:
                return layer
        return None

    def objects(self) -> Iterator[TiledObject]:
        """Iterate the objects of every object layer in the map."""
        for layer in self.all_layers():
            if isinstance(layer, ObjectLayer):
                yield from layer.objects
