"""
Exceptions raised by tmx_reader.

Every decode failure surfaces as a TiledDecodeError. The original cause
(XML syntax error, bad number, corrupt compressed stream...) is chained
through __cause__, so callers can catch one type and still inspect what
went wrong underneath.
"""

from contextlib import contextmanager


class TiledError(Exception):
    """Base class for all tmx_reader errors."""


class TiledDecodeError(TiledError):
    """A map or tileset document could not be decoded.

    Decoding is all-or-nothing: when this is raised no partial map,
    layer or tileset is returned.
    """


class UnsupportedEncodingError(TiledDecodeError):
    """Tile data uses an encoding or compression we cannot read (e.g. zstd)."""


class TilesetNotFoundError(TiledDecodeError):
    """An external tileset referenced by a map could not be located."""

    def __init__(self, path):
        super().__init__(
            f"Cannot locate tileset '{path}'. Please make sure the source "
            f"folder is correct."
        )
        self.path = path


@contextmanager
def decode_errors(message):
    """
    Turn any failure inside the block into a TiledDecodeError.

    TiledError subclasses pass through untouched so callers can still tell
    an UnsupportedEncodingError from a malformed document.
    """
    try:
        yield
    except TiledError:
        raise
    except Exception as exc:
        raise TiledDecodeError(message) from exc
