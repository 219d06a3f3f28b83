"""Tile addressing and channel resampling shared by all PICA codecs"""
from typing import Tuple
import numpy as np

TILE_SIZE = 8
TEXELS_PER_TILE = TILE_SIZE * TILE_SIZE

# Texel visiting order inside an 8x8 tile: four 4x4 quadrants,
# each laid out as a 2x2-recursive Z curve.
TILE_ORDER = np.array([
    0, 1, 8, 9,
    2, 3, 10, 11,
    16, 17, 24, 25,
    18, 19, 26, 27,

    4, 5, 12, 13,
    6, 7, 14, 15,
    20, 21, 28, 29,
    22, 23, 30, 31,

    32, 33, 40, 41,
    34, 35, 42, 43,
    48, 49, 56, 57,
    50, 51, 58, 59,

    36, 37, 44, 45,
    38, 39, 46, 47,
    52, 53, 60, 61,
    54, 55, 62, 63,
], dtype=np.int64)


def resample_channel(value, source_bits: int, target_bits: int):
    """
    Rescale a channel value from one bit depth to another with rounding

    Works on Python ints and on unsigned integer numpy arrays; arrays must
    be wide enough to hold ``value * 255`` (uint16 or wider).

    Args:
        value: Channel value occupying the low ``source_bits`` bits
        source_bits: Bit width of the input value (1-8)
        target_bits: Bit width of the result (1-8)

    Returns:
        The rescaled value
    """
    source_mask = (1 << source_bits) - 1
    target_mask = (1 << target_bits) - 1
    return ((value & source_mask) * target_mask + (source_mask >> 1)) // source_mask


def tile_counts(width: int, height: int) -> Tuple[int, int]:
    """Number of 8x8 tiles covering an image horizontally and vertically"""
    return (width + TILE_SIZE - 1) // TILE_SIZE, (height + TILE_SIZE - 1) // TILE_SIZE


def tile_pixel_index(t, x, y, width):
    """
    Absolute texel index of tile-local position ``t`` for a tile at (x, y)

    Args:
        t: Tile-local linear index (0-63), int or integer array
        x: Tile origin column
        y: Tile origin row
        width: Row length of the target buffer in texels
    """
    order = TILE_ORDER[t]
    return (order // TILE_SIZE + y) * width + (order % TILE_SIZE + x)


def tile_pixel_offset(t, x, y, width, bytes_per_texel: int = 4):
    """Byte offset of tile-local position ``t`` in a row-major texel buffer"""
    return tile_pixel_index(t, x, y, width) * bytes_per_texel


def tile_coordinates(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Image coordinates of every texel of a tiled stream, in stream order

    Tiles are visited row-major, texels inside each tile in TILE_ORDER.
    Coordinates refer to the tile-aligned (padded) image and may lie
    beyond ``width``/``height``.

    Returns:
        (ys, xs) integer arrays of length tiles_x * tiles_y * 64
    """
    tiles_x, tiles_y = tile_counts(width, height)
    padded_width = tiles_x * TILE_SIZE

    tile_index = np.arange(tiles_x * tiles_y, dtype=np.int64)
    origin_x = (tile_index % tiles_x) * TILE_SIZE
    origin_y = (tile_index // tiles_x) * TILE_SIZE
    t = np.arange(TEXELS_PER_TILE, dtype=np.int64)

    index = tile_pixel_index(t[None, :], origin_x[:, None], origin_y[:, None], padded_width).reshape(-1)
    return index // padded_width, index % padded_width


def stream_pixel_indices(width: int, height: int) -> np.ndarray:
    """
    Row-major texel index of every texel of a tiled stream, in stream order

    Indices use the real image width, so columns of a partial tile at or
    past ``width`` land at the start of the following row.
    """
    tiles_x, tiles_y = tile_counts(width, height)

    tile_index = np.arange(tiles_x * tiles_y, dtype=np.int64)
    origin_x = (tile_index % tiles_x) * TILE_SIZE
    origin_y = (tile_index // tiles_x) * TILE_SIZE
    t = np.arange(TEXELS_PER_TILE, dtype=np.int64)

    return tile_pixel_index(t[None, :], origin_x[:, None], origin_y[:, None], width).reshape(-1)


def untile(values: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Scatter stream-order texels into a row-major image

    Each texel goes to ``stream_pixel_indices`` of the real width. Texels
    whose index lies past the last pixel are skipped; where two texels
    share an index the later one in the stream wins.

    Args:
        values: Array of shape (tiles * 64, channels) in stream order

    Returns:
        C-contiguous array of shape (height, width, channels)
    """
    index = stream_pixel_indices(width, height)
    inside = index < width * height
    index = index[inside]
    values = values[inside]

    # Last write per index: first occurrence in the reversed stream
    _, first_reversed = np.unique(index[::-1], return_index=True)
    last = len(index) - 1 - first_reversed

    output = np.zeros((width * height,) + values.shape[1:], dtype=values.dtype)
    output[index[last]] = values[last]
    return output.reshape((height, width) + values.shape[1:])


def tile(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Gather a row-major image into stream order

    Positions of the padded tile grid outside the image read as zero.

    Args:
        pixels: Array of shape (height, width, channels)

    Returns:
        Array of shape (tiles * 64, channels)
    """
    tiles_x, tiles_y = tile_counts(width, height)
    ys, xs = tile_coordinates(width, height)

    padded = np.zeros((tiles_y * TILE_SIZE, tiles_x * TILE_SIZE) + pixels.shape[2:], dtype=pixels.dtype)
    padded[:height, :width] = pixels
    return padded[ys, xs]
