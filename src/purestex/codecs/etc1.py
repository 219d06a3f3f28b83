"""ETC1 / ETC1A4 texture decoder"""
from typing import Optional
import numpy as np
from numba import jit

from .base import TextureDecoder
from .tiling import TILE_SIZE, tile_counts

# Rows are selected by the 3-bit table index, columns by the 2-bit texel index.
ETC1_MODIFIER_TABLES = np.array([
    [2, 8, -2, -8],
    [5, 17, -5, -17],
    [9, 29, -9, -29],
    [13, 42, -13, -42],
    [18, 60, -18, -60],
    [24, 80, -24, -80],
    [33, 106, -33, -106],
    [47, 183, -47, -183],
], dtype=np.int64)

BLOCK_SIZE = 4
BLOCKS_PER_TILE = (TILE_SIZE // BLOCK_SIZE) ** 2


@jit(nopython=True, cache=True)
def _clamp_byte(value):
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


@jit(nopython=True, cache=True)
def _decode_blocks_jit(high, low, alphas, modifier_tables, output):
    """
    JIT-compiled ETC1 block decoding

    high/low hold bits 32-63 and 0-31 of each block as int64. alphas holds
    16 expanded alpha values per block, indexed px * 4 + py. output has
    shape (blocks, 4, 4, 4) indexed [block, py, px, BGRA].
    """
    for block_idx in range(high.shape[0]):
        h = high[block_idx]
        l = low[block_idx]

        table1 = (h >> 5) & 0x7
        table2 = (h >> 2) & 0x7
        diff = (h >> 1) & 0x1
        flip = h & 0x1

        if diff == 0:
            # Individual mode: 4-bit colors, expanded by nibble duplication
            r1 = ((h >> 28) & 0xF) * 0x11
            g1 = ((h >> 20) & 0xF) * 0x11
            b1 = ((h >> 12) & 0xF) * 0x11
            r2 = ((h >> 24) & 0xF) * 0x11
            g2 = ((h >> 16) & 0xF) * 0x11
            b2 = ((h >> 8) & 0xF) * 0x11
        else:
            # Differential mode: 5-bit base plus signed 3-bit delta
            r1a = (h >> 27) & 0x1F
            g1a = (h >> 19) & 0x1F
            b1a = (h >> 11) & 0x1F
            dr = (h >> 24) & 0x7
            dg = (h >> 16) & 0x7
            db = (h >> 8) & 0x7
            if dr >= 4:
                dr -= 8
            if dg >= 4:
                dg -= 8
            if db >= 4:
                db -= 8

            r1 = (r1a << 3) | (r1a >> 2)
            g1 = (g1a << 3) | (g1a >> 2)
            b1 = (b1a << 3) | (b1a >> 2)

            # Sums outside 0-31 are not clamped; the expansion wraps to 8 bits
            r2a = r1a + dr
            g2a = g1a + dg
            b2a = b1a + db
            r2 = ((r2a << 3) | (r2a >> 2)) & 0xFF
            g2 = ((g2a << 3) | (g2a >> 2)) & 0xFF
            b2 = ((b2a << 3) | (b2a >> 2)) & 0xFF

        for py in range(4):
            for px in range(4):
                bit = px * 4 + py
                index = ((l >> bit) & 0x1) | (((l >> (bit + 16)) & 0x1) << 1)

                if (flip == 1 and py < 2) or (flip == 0 and px < 2):
                    modifier = modifier_tables[table1, index]
                    output[block_idx, py, px, 0] = _clamp_byte(b1 + modifier)
                    output[block_idx, py, px, 1] = _clamp_byte(g1 + modifier)
                    output[block_idx, py, px, 2] = _clamp_byte(r1 + modifier)
                else:
                    modifier = modifier_tables[table2, index]
                    output[block_idx, py, px, 0] = _clamp_byte(b2 + modifier)
                    output[block_idx, py, px, 1] = _clamp_byte(g2 + modifier)
                    output[block_idx, py, px, 2] = _clamp_byte(r2 + modifier)

                output[block_idx, py, px, 3] = alphas[block_idx, bit]


def _expand_alpha(alpha_words: np.ndarray) -> np.ndarray:
    """Expand 64-bit ETC1A4 alpha words to 16 8-bit alpha values each"""
    alphas = np.zeros((len(alpha_words), 16), dtype=np.uint8)
    for i in range(16):
        alpha4 = (alpha_words >> np.uint64(i * 4)) & np.uint64(0xF)
        alphas[:, i] = (alpha4 << np.uint64(4)) | alpha4
    return alphas


def decode_blocks(blocks: np.ndarray, alpha_words: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Decode an array of ETC1 blocks

    Args:
        blocks: uint64 array of 64-bit color blocks
        alpha_words: Optional uint64 array of matching 4-bit alpha masks;
            without it every texel is opaque

    Returns:
        numpy array of shape (blocks, 4, 4, 4), indexed [block, py, px], BGRA
    """
    blocks = np.asarray(blocks, dtype=np.uint64)
    high = (blocks >> np.uint64(32)).astype(np.int64)
    low = (blocks & np.uint64(0xFFFFFFFF)).astype(np.int64)

    if alpha_words is None:
        alphas = np.full((len(blocks), 16), 0xFF, dtype=np.uint8)
    else:
        alphas = _expand_alpha(np.asarray(alpha_words, dtype=np.uint64))

    output = np.zeros((len(blocks), BLOCK_SIZE, BLOCK_SIZE, 4), dtype=np.uint8)
    _decode_blocks_jit(high, low, alphas, ETC1_MODIFIER_TABLES, output)
    return output


def decode_etc1_block(block: int, alpha: Optional[int] = None) -> np.ndarray:
    """
    Decode a single 4x4 ETC1 block

    Args:
        block: 64-bit color block value
        alpha: Optional 64-bit ETC1A4 alpha mask

    Returns:
        numpy array of shape (4, 4, 4), indexed [py, px], BGRA
    """
    alpha_words = None if alpha is None else np.array([alpha], dtype=np.uint64)
    return decode_blocks(np.array([block], dtype=np.uint64), alpha_words)[0]


class ETC1Decoder(TextureDecoder):
    """
    ETC1 / ETC1A4 texture decoder - NumPy preprocessing + Numba JIT

    Each 8x8 tile holds four 4x4 blocks ordered top-left, top-right,
    bottom-left, bottom-right. A block is one little-endian 64-bit word;
    ETC1A4 precedes every block with a 64-bit word of 4-bit alpha values.
    """

    def __init__(self, with_alpha: bool = False):
        self.with_alpha = with_alpha
        self.bits_per_texel = 8 if with_alpha else 4

    def decode(self, data: bytes, width: int, height: int) -> np.ndarray:
        raw = self._require(data, width, height)
        tiles_x, tiles_y = tile_counts(width, height)

        words = np.frombuffer(raw, dtype='<u8').astype(np.uint64)
        if self.with_alpha:
            words = words.reshape(-1, 2)
            decoded = decode_blocks(words[:, 1], words[:, 0])
        else:
            decoded = decode_blocks(words)

        # (tile_y, tile_x, block_y, block_x, py, px, channel) -> rows, columns
        image = decoded.reshape(tiles_y, tiles_x, 2, 2, BLOCK_SIZE, BLOCK_SIZE, 4)
        image = image.transpose(0, 2, 4, 1, 3, 5, 6).reshape(tiles_y * TILE_SIZE, tiles_x * TILE_SIZE, 4)
        return np.ascontiguousarray(image[:height, :width])
