"""PICA200 texture enumerations"""
from enum import IntEnum


class PicaDataType(IntEnum):
    """Raw scalar encoding of texel data (GL / DMP type codes)"""
    BYTE = 0x1400
    UNSIGNED_BYTE = 0x1401
    SHORT = 0x1402
    UNSIGNED_SHORT = 0x1403
    INT = 0x1404
    UNSIGNED_INT = 0x1405
    FLOAT = 0x1406
    UNSIGNED_BYTE_44_DMP = 0x6760
    UNSIGNED_4BITS_DMP = 0x6761
    UNSIGNED_SHORT_4444 = 0x8033
    UNSIGNED_SHORT_5551 = 0x8034
    UNSIGNED_SHORT_565 = 0x8363


class PicaPixelFormat(IntEnum):
    """Channel semantics of texel data (DMP native format codes)"""
    RGBA_NATIVE_DMP = 0x6752
    RGB_NATIVE_DMP = 0x6754
    ALPHA_NATIVE_DMP = 0x6756
    LUMINANCE_NATIVE_DMP = 0x6757
    LUMINANCE_ALPHA_NATIVE_DMP = 0x6758
    ETC1_RGB8_NATIVE_DMP = 0x675A
    ETC1_ALPHA_RGB8_A4_NATIVE_DMP = 0x675B
