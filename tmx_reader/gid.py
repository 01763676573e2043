"""
Global tile ID (GID) bit layout.

=============================================================================
FLIP FLAGS
=============================================================================

Every cell of a tile layer stores an unsigned 32-bit value. The low 29 bits
are the GID, the three high bits say how the tile is transformed when drawn:

    bit 31  horizontal flip
    bit 30  vertical flip
    bit 29  diagonal flip (swap x/y axes, used for 90 degree rotations)

    0xA0000005 = 1010 0000 ... 0101
                 ^ ^            ^^^
                 H D            gid 5

Shifting the flag bits right by 29 packs them into one byte (0-7):

    FLIP_HORIZONTAL = 0b100
    FLIP_VERTICAL   = 0b010
    FLIP_DIAGONAL   = 0b001

=============================================================================
"""

from typing import Tuple

import numpy as np

from .errors import TiledDecodeError


FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000

FLIP_FLAGS_MASK = (FLIPPED_HORIZONTALLY_FLAG
                   | FLIPPED_VERTICALLY_FLAG
                   | FLIPPED_DIAGONALLY_FLAG)
TILE_ID_MASK = 0xFFFFFFFF & ~FLIP_FLAGS_MASK

# How far the flag bits move to fit in a byte
FLIP_FLAG_SHIFT = 29

FLIP_HORIZONTAL = FLIPPED_HORIZONTALLY_FLAG >> FLIP_FLAG_SHIFT
FLIP_VERTICAL = FLIPPED_VERTICALLY_FLAG >> FLIP_FLAG_SHIFT
FLIP_DIAGONAL = FLIPPED_DIAGONALLY_FLAG >> FLIP_FLAG_SHIFT

UINT32_MAX = 0xFFFFFFFF


def decode_gid(raw_gid: int) -> Tuple[int, int]:
    """
    Split a raw 32-bit cell value into (gid, flags).

    >>> decode_gid(0xA0000005)
    (5, 5)
    """
    if not 0 <= raw_gid <= UINT32_MAX:
        raise TiledDecodeError(f"GID {raw_gid} is not an unsigned 32-bit value")
    flags = (raw_gid & FLIP_FLAGS_MASK) >> FLIP_FLAG_SHIFT
    return raw_gid & TILE_ID_MASK, flags


def split_gids(raw: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorised decode_gid over a whole grid.

    Parameters:
    -----------
    raw : np.ndarray
        Unsigned 32-bit cell values in row-major order

    Returns:
    --------
    (data, flags) : int32 GIDs with the flip bits cleared, and the uint8
    flip byte for every cell. Both arrays are read-only and have the same
    length as ``raw``.
    """
    raw = np.asarray(raw, dtype=np.uint32)

    flags = ((raw & np.uint32(FLIP_FLAGS_MASK)) >> FLIP_FLAG_SHIFT).astype(np.uint8)
    # Cleared ids fit in 29 bits, so the signed cast never wraps
    data = (raw & np.uint32(TILE_ID_MASK)).astype(np.int32)

    data.flags.writeable = False
    flags.flags.writeable = False
    return data, flags
