import struct

import numpy as np
import pytest

from purestex.codecs.etc1 import ETC1Decoder, decode_etc1_block


def _solid_block(nibble):
    """Individual-mode block whose sub-blocks share one 4-bit grey level"""
    high = 0
    for shift in (28, 24, 20, 16, 12, 8):
        high |= nibble << shift
    return high << 32


def test_all_zero_block():
    texels = decode_etc1_block(0)
    assert texels.shape == (4, 4, 4)
    # Table 0, column 0 modifier is +2 on a black base color
    assert (texels[:, :, 0:3] == 2).all()
    assert (texels[:, :, 3] == 255).all()


def test_individual_mode_flipped_block():
    # r1=F g1=8 b1=1 | r2=0 g2=4 b2=2, table1=0, table2=7, flip set
    texels = decode_etc1_block(0xF084121D00000000)

    top = texels[0:2]
    bottom = texels[2:4]
    assert (top == [19, 138, 255, 255]).all()
    assert (bottom == [81, 115, 47, 255]).all()


def test_differential_mode_block():
    # base (16, 0, 31), delta (-1, +3, 0), table1=1, table2=2, no flip,
    # texel (0, 0) uses column 2 and texel (3, 3) uses column 1
    texels = decode_etc1_block(0x8703F82A00018000)

    assert texels[0, 0].tolist() == [250, 0, 127, 255]
    assert texels[3, 3].tolist() == [255, 53, 152, 255]
    for py in range(4):
        for px in range(4):
            if (px, py) in ((0, 0), (3, 3)):
                continue
            expected = [255, 5, 137, 255] if px < 2 else [255, 33, 132, 255]
            assert texels[py, px].tolist() == expected


def test_differential_delta_is_not_clamped():
    # r1a=0 with delta -4: the second sub-block base wraps to 255 instead of 0
    texels = decode_etc1_block(0x04000002FFFF0000)

    assert (texels[:, 0:2] == [0, 0, 0, 255]).all()
    assert (texels[:, 2:4] == [0, 0, 253, 255]).all()


def test_block_decode_is_deterministic():
    first = decode_etc1_block(0x8703F82A00018000)
    second = decode_etc1_block(0x8703F82A00018000)
    assert np.array_equal(first, second)


def test_alpha_mask_nibble_order():
    # Nibble index is px * 4 + py
    texels = decode_etc1_block(0, alpha=0x7 << 24)
    assert texels[2, 1, 3] == 0x77
    alpha = texels[:, :, 3].copy()
    alpha[2, 1] = 0
    assert (alpha == 0).all()


def test_decoder_block_placement_in_tile():
    data = b''.join(struct.pack('<Q', _solid_block(k)) for k in (1, 2, 3, 4))
    pixels = ETC1Decoder().decode(data, 8, 8)

    assert pixels.shape == (8, 8, 4)
    assert (pixels[0:4, 0:4, 0:3] == 0x11 + 2).all()
    assert (pixels[0:4, 4:8, 0:3] == 0x22 + 2).all()
    assert (pixels[4:8, 0:4, 0:3] == 0x33 + 2).all()
    assert (pixels[4:8, 4:8, 0:3] == 0x44 + 2).all()
    assert (pixels[:, :, 3] == 255).all()


def test_decoder_with_alpha_reads_alpha_before_color():
    data = b''.join(
        struct.pack('<QQ', 0x1111111111111111 * k, _solid_block(k)) for k in (1, 2, 3, 4)
    )
    pixels = ETC1Decoder(with_alpha=True).decode(data, 8, 8)

    assert (pixels[0:4, 0:4, 3] == 0x11).all()
    assert (pixels[0:4, 4:8, 3] == 0x22).all()
    assert (pixels[4:8, 0:4, 3] == 0x33).all()
    assert (pixels[4:8, 4:8, 3] == 0x44).all()
    assert (pixels[4:8, 4:8, 0:3] == 0x44 + 2).all()


def test_decoder_tile_order_across_tiles():
    first = b''.join(struct.pack('<Q', _solid_block(1)) for _ in range(4))
    second = b''.join(struct.pack('<Q', _solid_block(5)) for _ in range(4))
    pixels = ETC1Decoder().decode(first + second, 16, 8)

    assert (pixels[:, 0:8, 0] == 0x11 + 2).all()
    assert (pixels[:, 8:16, 0] == 0x55 + 2).all()


def test_decoder_clips_partial_tiles():
    decoder = ETC1Decoder()
    assert decoder.data_size(10, 10) == 4 * 32
    pixels = decoder.decode(bytes(decoder.data_size(10, 10)), 10, 10)
    assert pixels.shape == (10, 10, 4)


@pytest.mark.parametrize('with_alpha, size', [(False, 32), (True, 64)])
def test_decoder_data_size_per_tile(with_alpha, size):
    assert ETC1Decoder(with_alpha=with_alpha).data_size(8, 8) == size
