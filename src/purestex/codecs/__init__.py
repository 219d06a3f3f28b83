"""Tiled PICA texture codec implementations"""
from .base import TextureDecoder, TextureEncoder
from .etc1 import ETC1Decoder, decode_etc1_block
from .packed import PackedCodec, PackedDecoder, PackedLayout
from .tiling import TILE_ORDER, resample_channel, tile_pixel_index, tile_pixel_offset

__all__ = [
    'TextureDecoder',
    'TextureEncoder',
    'ETC1Decoder',
    'decode_etc1_block',
    'PackedCodec',
    'PackedDecoder',
    'PackedLayout',
    'TILE_ORDER',
    'resample_channel',
    'tile_pixel_index',
    'tile_pixel_offset',
]
