import numpy as np
import pytest

import purestex
from purestex import CODECS, CodecNotFound, UnsupportedOperation, encodable_format, lookup
from purestex.enums import PicaDataType as DT, PicaPixelFormat as PF


def test_table_has_every_native_format():
    assert [codec.name for codec in CODECS] == [
        'RGBA4444', 'RGBA5551', 'RGBA8888', 'RGB565', 'RGB888', 'ETC1', 'ETC1A4',
        'A8', 'A4', 'L8', 'L4', 'LA88', 'LA44',
    ]
    descriptors = {(codec.data_type, codec.pixel_format) for codec in CODECS}
    assert len(descriptors) == len(CODECS)


def test_decode_only_formats():
    decode_only = sorted(codec.name for codec in CODECS if not codec.can_encode)
    assert decode_only == ['A4', 'ETC1', 'ETC1A4', 'L4']


def test_lookup_accepts_integer_codes():
    assert lookup(0x1401, 0x6754).name == 'RGB888'
    assert lookup(DT.UNSIGNED_SHORT_565, PF.RGB_NATIVE_DMP).name == 'RGB565'


@pytest.mark.parametrize('data_type, pixel_format', [
    (DT.FLOAT, PF.RGBA_NATIVE_DMP),
    (DT.UNSIGNED_SHORT_565, PF.RGBA_NATIVE_DMP),
    (0x9999, 0x6752),
    (0x1401, 0x1234),
])
def test_lookup_unknown_descriptor(data_type, pixel_format):
    with pytest.raises(CodecNotFound):
        lookup(data_type, pixel_format)


@pytest.mark.parametrize('pixel_format', [PF.ETC1_RGB8_NATIVE_DMP, PF.ETC1_ALPHA_RGB8_A4_NATIVE_DMP])
def test_encoding_compressed_format_is_unsupported(pixel_format):
    pixels = np.zeros((8, 8, 4), dtype=np.uint8)
    with pytest.raises(UnsupportedOperation):
        purestex.encode(pixels, 8, 8, DT.UNSIGNED_BYTE, pixel_format)


def test_unsupported_operation_is_not_implemented_error():
    with pytest.raises(NotImplementedError):
        lookup(DT.UNSIGNED_4BITS_DMP, PF.LUMINANCE_NATIVE_DMP).encode(np.zeros((8, 8, 4), np.uint8), 8, 8)


def test_encodable_format_substitutes_decode_only_formats():
    rgba8 = (DT.UNSIGNED_BYTE, PF.RGBA_NATIVE_DMP)
    assert encodable_format(DT.UNSIGNED_BYTE, PF.ETC1_RGB8_NATIVE_DMP) == rgba8
    assert encodable_format(DT.UNSIGNED_BYTE, PF.ETC1_ALPHA_RGB8_A4_NATIVE_DMP) == rgba8
    assert encodable_format(DT.UNSIGNED_4BITS_DMP, PF.ALPHA_NATIVE_DMP) == (DT.UNSIGNED_BYTE, PF.ALPHA_NATIVE_DMP)
    assert encodable_format(DT.UNSIGNED_4BITS_DMP, PF.LUMINANCE_NATIVE_DMP) == (DT.UNSIGNED_BYTE, PF.LUMINANCE_NATIVE_DMP)
    assert encodable_format(0x8033, 0x6752) == (DT.UNSIGNED_SHORT_4444, PF.RGBA_NATIVE_DMP)


def test_every_substitute_can_encode():
    for codec in CODECS:
        assert lookup(*encodable_format(codec.data_type, codec.pixel_format)).can_encode


def test_module_level_decode_encode():
    raw = bytes(range(192))
    pixels = purestex.decode(raw, 8, 8, 0x1401, 0x6754)
    assert pixels.shape == (8, 8, 4)
    assert purestex.encode(pixels, 8, 8, 0x1401, 0x6754) == raw


@pytest.mark.parametrize('name, size', [
    ('RGBA4444', 128), ('RGBA8888', 256), ('RGB888', 192), ('ETC1', 32),
    ('ETC1A4', 64), ('A4', 32), ('L8', 64), ('LA88', 128),
])
def test_data_size_per_tile(name, size):
    codec = next(codec for codec in CODECS if codec.name == name)
    assert codec.data_size(8, 8) == size
    assert codec.data_size(16, 16) == size * 4
