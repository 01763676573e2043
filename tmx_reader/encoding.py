"""
Tile layer data decoding.

=============================================================================
DATA ENCODINGS
=============================================================================

The <data> element of a tile layer (or each <chunk> of an infinite map)
holds one unsigned 32-bit value per cell, row-major. TMX offers:

1. CSV:
   <data encoding="csv">
       1,2,3,4,5,
       6,7,8,9,10
   </data>

2. Base64 of little-endian uint32 values, optionally compressed:
   <data encoding="base64" compression="zlib">
       eJxjZGBgYAJiZiBmAWIAAEAACg==
   </data>

   compression: absent, zlib or gzip. zstd is NOT supported.

The deprecated one-<tile>-element-per-cell XML form is not supported either.

=============================================================================
OUTPUT
=============================================================================

Every decoder here returns the pair (data, flags) produced by
gid.split_gids(): int32 tile ids with the flip bits cleared, and one uint8
flip byte per cell.

=============================================================================
"""

import base64
import binascii
import gzip
import logging
import zlib
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .errors import TiledDecodeError, UnsupportedEncodingError
from .gid import UINT32_MAX, split_gids

logger = logging.getLogger(__name__)

SUPPORTED_ENCODINGS = ('csv', 'base64')

# Size of one encoded cell
CELL_SIZE = 4

GridData = Tuple[np.ndarray, np.ndarray]


class Compression(Enum):
    """Compression applied to base64 tile data."""
    NONE = None
    ZLIB = 'zlib'
    GZIP = 'gzip'

    @classmethod
    def from_attribute(cls, value: Optional[str]) -> 'Compression':
        """Map the ``compression`` attribute to a member, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedEncodingError(
                f"Compression '{value}' is not supported; "
                f"only zlib and gzip can be read"
            ) from None


def decode_csv(text: str) -> GridData:
    """
    Decode comma separated cell values.

    Whitespace and newlines around tokens are ignored. A blank string
    decodes to empty arrays; any other token that is not an unsigned
    32-bit decimal integer is a decode error.
    """
    text = text.strip()
    if not text:
        return split_gids(np.empty(0, dtype=np.uint32))

    values = []
    for position, token in enumerate(text.split(',')):
        token = token.strip()
        # int() alone would accept "+5", "1_000" and unicode digits
        if not (token.isascii() and token.isdigit()):
            raise TiledDecodeError(
                f"Invalid CSV tile value {token!r} at position {position}")
        value = int(token)
        if value > UINT32_MAX:
            raise TiledDecodeError(
                f"CSV tile value {value} at position {position} does not fit in 32 bits")
        values.append(value)

    return split_gids(np.array(values, dtype=np.uint32))


def decode_raw(buffer: bytes) -> GridData:
    """
    Decode a buffer of little-endian uint32 cell values.

    Decoding stops at the last complete 4-byte group: a short trailing
    remainder is dropped, not treated as an error.
    """
    count = len(buffer) // CELL_SIZE
    remainder = len(buffer) % CELL_SIZE
    if remainder:
        logger.warning("Ignoring %d trailing byte(s) after %d tile values",
                       remainder, count)

    if count:
        raw = np.frombuffer(buffer, dtype='<u4', count=count)
    else:
        raw = np.empty(0, dtype=np.uint32)
    return split_gids(raw)


def decompress(buffer: bytes, compression: Compression) -> bytes:
    """
    Undo the compression stage of base64 tile data.

    zlib streams are read as raw deflate after skipping the 2-byte zlib
    header, so the trailing adler32 checksum is never verified.
    """
    if compression is Compression.NONE:
        return buffer

    if compression is Compression.GZIP:
        try:
            return gzip.decompress(buffer)
        except (OSError, EOFError, zlib.error) as exc:
            raise TiledDecodeError("Corrupt gzip tile data") from exc

    # Compression.ZLIB
    decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        result = decompressor.decompress(buffer[2:])
    except zlib.error as exc:
        raise TiledDecodeError("Corrupt zlib tile data") from exc
    if not decompressor.eof:
        raise TiledDecodeError("Truncated zlib tile data")
    return result


def decode_base64(text: str, compression: Optional[str] = None) -> GridData:
    """Decode base64 tile data, decompressing it first when needed."""
    compression = Compression.from_attribute(compression)

    try:
        buffer = base64.b64decode(text.strip())
    except (binascii.Error, ValueError) as exc:
        raise TiledDecodeError("Invalid base64 tile data") from exc

    return decode_raw(decompress(buffer, compression))


def decode_tile_data(text: Optional[str], encoding: Optional[str],
                     compression: Optional[str] = None) -> GridData:
    """
    Decode the text of a <data> or <chunk> element.

    Parameters:
    -----------
    text : str
        Element text content
    encoding : str
        'csv' or 'base64', anything else raises UnsupportedEncodingError
    compression : str, optional
        None, 'zlib' or 'gzip' (only meaningful for base64)
    """
    if encoding not in SUPPORTED_ENCODINGS:
        raise UnsupportedEncodingError(
            f"Tile data encoding '{encoding}' is not supported; "
            f"only CSV and Base64 encodings are currently supported")

    text = text or ''
    if encoding == 'csv':
        return decode_csv(text)
    return decode_base64(text, compression)
