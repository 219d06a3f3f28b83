"""Main STEX file handler"""
import numpy as np

from .enums import PicaDataType, PicaPixelFormat
from .errors import CodecNotFound
from .headers import STEX_HEADER, STEX_HEADER_SIZE
from .registry import Codec, lookup

PIXEL_DATA_ALIGNMENT = 0x100


def _enum_name(value: int, enum) -> str:
    try:
        return f"{enum(value).name} (0x{int(value):04X})"
    except ValueError:
        return f"Unknown (0x{int(value):04X})"


def bgra_to_rgba(pixels: np.ndarray) -> np.ndarray:
    """Reorder a (height, width, 4) BGRA pixel buffer to RGBA for image files"""
    return np.ascontiguousarray(pixels[..., [2, 1, 0, 3]])


def rgba_to_bgra(image: np.ndarray) -> np.ndarray:
    """
    Convert an image array to the (height, width, 4) BGRA pixel buffer

    Accepts greyscale (h, w) or (h, w, 1), grey+alpha (h, w, 2), RGB
    (h, w, 3) and RGBA (h, w, 4) arrays, as returned by imageio. 16-bit
    images are reduced to their high byte.
    """
    image = np.asarray(image)
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported image dtype: {image.dtype}")

    if image.ndim == 2:
        image = image[:, :, None]
    if image.ndim != 3:
        raise ValueError(f"Unsupported image shape: {image.shape}")

    height, width, channels = image.shape
    output = np.full((height, width, 4), 0xFF, dtype=np.uint8)

    if channels in (1, 2):
        output[:, :, 0:3] = image[:, :, 0:1]
        if channels == 2:
            output[:, :, 3] = image[:, :, 1]
    elif channels in (3, 4):
        output[:, :, 0] = image[:, :, 2]
        output[:, :, 1] = image[:, :, 1]
        output[:, :, 2] = image[:, :, 0]
        if channels == 4:
            output[:, :, 3] = image[:, :, 3]
    else:
        raise ValueError(f"Unsupported channel count: {channels}")

    return output


class STEX:
    """STEX texture container"""
    def __init__(self) -> None:
        self.header: STEX_HEADER = STEX_HEADER()
        self.data: bytes = b''  # Raw tiled texel data

    def __str__(self) -> str:
        """Return debug string representation of STEX file"""
        lines = ["STEX File Information:"]
        lines.append(f"  Magic: {self.header.magic}")
        lines.append(f"  Dimensions: {self.header.width}x{self.header.height}")
        lines.append(f"  Data Type: {_enum_name(self.header.data_type, PicaDataType)}")
        lines.append(f"  Pixel Format: {_enum_name(self.header.pixel_format, PicaPixelFormat)}")

        try:
            codec = self.codec
            lines.append(f"  Codec: {codec.name}{'' if codec.can_encode else ' (decode only)'}")
            lines.append(f"  Expected Data Size: {codec.data_size(self.header.width, self.header.height)} bytes")
        except CodecNotFound:
            lines.append("  Codec: not supported")

        lines.append(f"  Data Size: {len(self.data)} bytes")

        return "\n".join(lines)

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def codec(self) -> Codec:
        """Registered codec for this texture's data type and pixel format"""
        return lookup(self.header.data_type, self.header.pixel_format)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'STEX':
        """Read STEX from bytes"""
        stex = cls()
        stex.header = STEX_HEADER.from_bytes(data)
        stex.data = bytes(data[stex._locate_pixel_data(data):])
        return stex

    def _locate_pixel_data(self, data: bytes) -> int:
        """
        Find where texel data starts.

        Files place texel data at ``len(file) % 0x100``. When that does not
        leave exactly the amount of data the format needs, the header's data
        offset field is used if it points inside the file. A file whose
        header is padded to a multiple of 0x100 keeps its texel data at the
        end. Otherwise ``len(file) % 0x100`` stands, with any extra trailing
        data ignored.

        Args:
            data: Whole file contents

        Returns:
            Offset of the first texel byte
        """
        offset = len(data) % PIXEL_DATA_ALIGNMENT

        try:
            expected = self.codec.data_size(self.header.width, self.header.height)
        except CodecNotFound:
            return offset

        if len(data) - offset == expected:
            return offset

        if (self.header.data_offset >= STEX_HEADER_SIZE
                and self.header.data_offset + expected <= len(data)):
            return self.header.data_offset

        padding = len(data) - expected
        if padding >= PIXEL_DATA_ALIGNMENT and padding % PIXEL_DATA_ALIGNMENT == 0:
            return padding

        if len(data) - offset > expected or padding < STEX_HEADER_SIZE:
            return offset

        return padding

    def decode(self) -> np.ndarray:
        """
        Decode texel data

        Returns:
            numpy array of shape (height, width, 4) with dtype uint8 (BGRA)
        """
        return self.codec.decode(self.data, self.header.width, self.header.height)

    def to_image(self) -> np.ndarray:
        """
        Decode texel data for writing to an image file

        Returns:
            numpy array of shape (height, width, 4) with dtype uint8 (RGBA)
        """
        return bgra_to_rgba(self.decode())

    @classmethod
    def from_pixels(cls, pixels, width: int, height: int, data_type, pixel_format) -> 'STEX':
        """Build an STEX by encoding a BGRA pixel buffer"""
        codec = lookup(data_type, pixel_format)

        stex = cls()
        stex.header.width = width
        stex.header.height = height
        stex.header.data_type = codec.data_type
        stex.header.pixel_format = codec.pixel_format
        stex.data = codec.encode(pixels, width, height)
        stex.header.data_size = len(stex.data)
        return stex

    @classmethod
    def from_image(cls, image: np.ndarray, data_type, pixel_format) -> 'STEX':
        """Build an STEX by encoding an image array (greyscale, RGB or RGBA)"""
        pixels = rgba_to_bgra(image)
        height, width = pixels.shape[:2]
        return cls.from_pixels(pixels, width, height, data_type, pixel_format)

    def to_bytes(self) -> bytes:
        """Write STEX to bytes: 0x80-byte header immediately followed by texel data"""
        self.header.data_size = len(self.data)
        return self.header.to_bytes() + self.data
