"""Base classes for tiled texture codecs"""
from abc import ABC, abstractmethod
import numpy as np

from ..errors import TruncatedData
from .tiling import TEXELS_PER_TILE, tile_counts


class TextureDecoder(ABC):
    """Base class for texture decoding"""
    bits_per_texel: int = 0

    def data_size(self, width: int, height: int) -> int:
        """Number of raw bytes a width x height texture occupies (whole tiles)"""
        tiles_x, tiles_y = tile_counts(width, height)
        return tiles_x * tiles_y * TEXELS_PER_TILE * self.bits_per_texel // 8

    def _require(self, data: bytes, width: int, height: int) -> bytes:
        size = self.data_size(width, height)
        if len(data) < size:
            raise TruncatedData(
                f"Expected {size} bytes of texture data for {width}x{height}, got {len(data)}"
            )
        return bytes(data[:size])

    @abstractmethod
    def decode(self, data: bytes, width: int, height: int) -> np.ndarray:
        """
        Decode texture data to the canonical pixel buffer

        Args:
            data: Raw tiled texture data
            width: Texture width in pixels
            height: Texture height in pixels

        Returns:
            numpy array of shape (height, width, 4) with dtype uint8 (BGRA)
        """
        pass


class TextureEncoder(ABC):
    """Base class for texture encoding"""
    @abstractmethod
    def encode(self, pixels: np.ndarray, width: int, height: int) -> bytes:
        """
        Encode a canonical pixel buffer to raw tiled texture data

        Args:
            pixels: numpy array of shape (height, width, 4) with dtype uint8 (BGRA)
            width: Texture width in pixels
            height: Texture height in pixels

        Returns:
            Raw texture bytes covering every tile of the image
        """
        pass


def as_pixel_buffer(pixels, width: int, height: int) -> np.ndarray:
    """
    Validate a BGRA pixel buffer, accepting arrays or flat bytes

    Args:
        pixels: numpy array of shape (height, width, 4), or a bytes-like
            object of length width * height * 4
        width: Texture width in pixels
        height: Texture height in pixels

    Returns:
        uint8 numpy array of shape (height, width, 4)
    """
    if isinstance(pixels, np.ndarray):
        if pixels.dtype != np.uint8:
            raise ValueError(f"Unsupported pixel buffer dtype: {pixels.dtype}")
        array = pixels
    else:
        array = np.frombuffer(bytes(pixels), dtype=np.uint8)

    if array.ndim == 1 and array.size == width * height * 4:
        array = array.reshape(height, width, 4)
    if array.shape != (height, width, 4):
        raise ValueError(f"Expected pixel buffer of shape {(height, width, 4)}, got {array.shape}")

    return array
