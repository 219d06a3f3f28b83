"""Bit-packed PICA texel formats (RGBA, RGB, alpha, luminance)"""
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .base import TextureDecoder, TextureEncoder, as_pixel_buffer
from .tiling import resample_channel, tile, untile

# Pixel buffer channel positions; 'L' (luminance) fans out to B, G and R.
CHANNEL_INDEX = {'B': 0, 'G': 1, 'R': 2, 'A': 3}


@dataclass(frozen=True)
class PackedLayout:
    """Bit layout of one texel in the raw stream"""
    bits_per_texel: int  # 4, 8, 16, 24 or 32
    fields: Tuple[Tuple[str, int, int], ...]  # (channel, shift, bits), little-endian word


RGBA4444 = PackedLayout(16, (('A', 0, 4), ('B', 4, 4), ('G', 8, 4), ('R', 12, 4)))
RGBA5551 = PackedLayout(16, (('A', 0, 1), ('B', 1, 5), ('G', 6, 5), ('R', 11, 5)))
RGBA8888 = PackedLayout(32, (('A', 0, 8), ('B', 8, 8), ('G', 16, 8), ('R', 24, 8)))
RGB565 = PackedLayout(16, (('B', 0, 5), ('G', 5, 6), ('R', 11, 5)))
RGB888 = PackedLayout(24, (('B', 0, 8), ('G', 8, 8), ('R', 16, 8)))
A8 = PackedLayout(8, (('A', 0, 8),))
A4 = PackedLayout(4, (('A', 0, 4),))
L8 = PackedLayout(8, (('L', 0, 8),))
L4 = PackedLayout(4, (('L', 0, 4),))
LA88 = PackedLayout(16, (('A', 0, 8), ('L', 8, 8)))
LA44 = PackedLayout(8, (('A', 0, 4), ('L', 4, 4)))


class PackedDecoder(TextureDecoder):
    """
    Decoder for formats storing one bit-packed word per texel

    Channels missing from the layout decode as 0xFF, so alpha-only
    formats come out white and formats without alpha come out opaque.
    4-bit layouts hold two texels per byte, low nibble first.
    """

    def __init__(self, layout: PackedLayout):
        self.layout = layout
        self.bits_per_texel = layout.bits_per_texel

    def decode(self, data: bytes, width: int, height: int) -> np.ndarray:
        raw = self._require(data, width, height)
        words = self._unpack_words(raw)

        values = np.full((len(words), 4), 0xFF, dtype=np.uint8)
        for channel, shift, bits in self.layout.fields:
            value = resample_channel(words >> shift, bits, 8).astype(np.uint8)
            if channel == 'L':
                values[:, 0:3] = value[:, None]
            else:
                values[:, CHANNEL_INDEX[channel]] = value

        return untile(values, width, height)

    def _unpack_words(self, raw: bytes) -> np.ndarray:
        """Split the raw stream into one uint32 word per texel"""
        stream = np.frombuffer(raw, dtype=np.uint8)

        if self.bits_per_texel == 4:
            return np.stack([stream & 0x0F, stream >> 4], axis=1).reshape(-1).astype(np.uint32)

        texel_bytes = stream.reshape(-1, self.bits_per_texel // 8).astype(np.uint32)
        words = np.zeros(len(texel_bytes), dtype=np.uint32)
        for i in range(texel_bytes.shape[1]):
            words |= texel_bytes[:, i] << (8 * i)
        return words


class PackedCodec(PackedDecoder, TextureEncoder):
    """Decoder and encoder for byte-aligned bit-packed formats"""

    def __init__(self, layout: PackedLayout):
        if layout.bits_per_texel % 8:
            raise ValueError(f"Cannot encode {layout.bits_per_texel}-bit texels")
        super().__init__(layout)

    def encode(self, pixels: np.ndarray, width: int, height: int) -> bytes:
        texels = tile(as_pixel_buffer(pixels, width, height), width, height).astype(np.uint32)

        words = np.zeros(len(texels), dtype=np.uint32)
        for channel, shift, bits in self.layout.fields:
            if channel == 'L':
                source = (texels[:, 0] + texels[:, 1] + texels[:, 2]) // 3
            else:
                source = texels[:, CHANNEL_INDEX[channel]]
            words |= resample_channel(source, 8, bits) << shift

        texel_bytes = np.empty((len(words), self.bits_per_texel // 8), dtype=np.uint8)
        for i in range(texel_bytes.shape[1]):
            texel_bytes[:, i] = (words >> (8 * i)) & 0xFF
        return texel_bytes.tobytes()
