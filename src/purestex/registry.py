"""Format codec registry: (data type, pixel format) -> codec"""
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from .enums import PicaDataType, PicaPixelFormat
from .errors import CodecNotFound, UnsupportedOperation
from .codecs import TextureDecoder, TextureEncoder, ETC1Decoder, PackedCodec, PackedDecoder
from .codecs import packed


@dataclass(frozen=True)
class Codec:
    """A registered texture format and its decode/encode routines"""
    name: str
    data_type: PicaDataType
    pixel_format: PicaPixelFormat
    decoder: Optional[TextureDecoder]
    encoder: Optional[TextureEncoder] = None  # None: format is decode-only

    @property
    def can_encode(self) -> bool:
        return self.encoder is not None

    def data_size(self, width: int, height: int) -> int:
        """Raw byte size of a width x height texture in this format"""
        return self.decoder.data_size(width, height)

    def decode(self, data: bytes, width: int, height: int) -> np.ndarray:
        """Decode raw tiled data to a (height, width, 4) BGRA uint8 array"""
        if self.decoder is None:
            raise UnsupportedOperation(f"Decoder not found for {self.data_type.name} {self.pixel_format.name}")
        return self.decoder.decode(data, width, height)

    def encode(self, pixels, width: int, height: int) -> bytes:
        """Encode a BGRA pixel buffer to raw tiled data"""
        if self.encoder is None:
            raise UnsupportedOperation(f"Encoder not found for {self.data_type.name} {self.pixel_format.name}")
        return self.encoder.encode(pixels, width, height)


def _packed(name: str, data_type: PicaDataType, pixel_format: PicaPixelFormat, layout: packed.PackedLayout) -> Codec:
    codec = PackedCodec(layout)
    return Codec(name, data_type, pixel_format, codec, codec)


CODECS: Tuple[Codec, ...] = (
    _packed('RGBA4444', PicaDataType.UNSIGNED_SHORT_4444, PicaPixelFormat.RGBA_NATIVE_DMP, packed.RGBA4444),
    _packed('RGBA5551', PicaDataType.UNSIGNED_SHORT_5551, PicaPixelFormat.RGBA_NATIVE_DMP, packed.RGBA5551),
    _packed('RGBA8888', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.RGBA_NATIVE_DMP, packed.RGBA8888),
    _packed('RGB565', PicaDataType.UNSIGNED_SHORT_565, PicaPixelFormat.RGB_NATIVE_DMP, packed.RGB565),
    _packed('RGB888', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.RGB_NATIVE_DMP, packed.RGB888),
    Codec('ETC1', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ETC1_RGB8_NATIVE_DMP, ETC1Decoder(with_alpha=False)),
    Codec('ETC1A4', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ETC1_ALPHA_RGB8_A4_NATIVE_DMP, ETC1Decoder(with_alpha=True)),
    _packed('A8', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ALPHA_NATIVE_DMP, packed.A8),
    Codec('A4', PicaDataType.UNSIGNED_4BITS_DMP, PicaPixelFormat.ALPHA_NATIVE_DMP, PackedDecoder(packed.A4)),
    _packed('L8', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.LUMINANCE_NATIVE_DMP, packed.L8),
    Codec('L4', PicaDataType.UNSIGNED_4BITS_DMP, PicaPixelFormat.LUMINANCE_NATIVE_DMP, PackedDecoder(packed.L4)),
    _packed('LA88', PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.LUMINANCE_ALPHA_NATIVE_DMP, packed.LA88),
    _packed('LA44', PicaDataType.UNSIGNED_BYTE_44_DMP, PicaPixelFormat.LUMINANCE_ALPHA_NATIVE_DMP, packed.LA44),
)

_CODECS_BY_DESCRIPTOR = {(codec.data_type, codec.pixel_format): codec for codec in CODECS}

# Decode-only formats and the uncompressed descriptor to write them back as
_ENCODABLE_SUBSTITUTES = {
    (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ETC1_RGB8_NATIVE_DMP):
        (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.RGBA_NATIVE_DMP),
    (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ETC1_ALPHA_RGB8_A4_NATIVE_DMP):
        (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.RGBA_NATIVE_DMP),
    (PicaDataType.UNSIGNED_4BITS_DMP, PicaPixelFormat.ALPHA_NATIVE_DMP):
        (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.ALPHA_NATIVE_DMP),
    (PicaDataType.UNSIGNED_4BITS_DMP, PicaPixelFormat.LUMINANCE_NATIVE_DMP):
        (PicaDataType.UNSIGNED_BYTE, PicaPixelFormat.LUMINANCE_NATIVE_DMP),
}


def _format_descriptor(data_type, pixel_format) -> str:
    names = []
    for value, enum in ((data_type, PicaDataType), (pixel_format, PicaPixelFormat)):
        try:
            names.append(enum(value).name)
        except ValueError:
            names.append(f'0x{int(value):X}')
    return ' '.join(names)


def lookup(data_type, pixel_format) -> Codec:
    """
    Find the codec for a (data type, pixel format) pair

    Args:
        data_type: PicaDataType member or integer code
        pixel_format: PicaPixelFormat member or integer code

    Raises:
        CodecNotFound: if no codec is registered for the pair
    """
    try:
        key = (PicaDataType(data_type), PicaPixelFormat(pixel_format))
    except ValueError:
        key = None

    codec = _CODECS_BY_DESCRIPTOR.get(key)
    if codec is None:
        raise CodecNotFound(f"Codec not found for {_format_descriptor(data_type, pixel_format)}")
    return codec


def encodable_format(data_type, pixel_format) -> Tuple[PicaDataType, PicaPixelFormat]:
    """
    Return a descriptor that can be encoded in place of the given one

    Decode-only formats (ETC1, ETC1A4, A4, L4) map to the closest
    uncompressed format; formats with an encoder map to themselves.
    """
    codec = lookup(data_type, pixel_format)
    key = (codec.data_type, codec.pixel_format)
    return _ENCODABLE_SUBSTITUTES.get(key, key)


def decode(data: bytes, width: int, height: int, data_type, pixel_format) -> np.ndarray:
    """
    Decode raw tiled texture data

    Returns:
        numpy array of shape (height, width, 4) with dtype uint8 (BGRA)
    """
    return lookup(data_type, pixel_format).decode(data, width, height)


def encode(pixels, width: int, height: int, data_type, pixel_format) -> bytes:
    """
    Encode a BGRA pixel buffer to raw tiled texture data

    Raises:
        UnsupportedOperation: for decode-only formats; see encodable_format()
    """
    return lookup(data_type, pixel_format).encode(pixels, width, height)
