"""STEX header structure"""
import struct

from .errors import MagicMismatch, TruncatedData

STEX_MAGIC = b'STEX'
STEX_HEADER_SIZE = 0x80
STEX_TARGET_TEXTURE_2D = 3553  # GL_TEXTURE_2D

_HEADER_FORMAT = '<4sIIiiIIII'
_HEADER_FIELDS_SIZE = struct.calcsize(_HEADER_FORMAT)  # 0x24


class STEX_HEADER:
    """STEX Header structure (128 bytes)"""
    def __init__(self) -> None:
        self.magic: bytes = STEX_MAGIC  # Magic number (always "STEX")
        self.reserved: int = 0  # Usually zero
        self.target: int = STEX_TARGET_TEXTURE_2D  # Texture target
        self.width: int = 0  # Width of texture in pixels
        self.height: int = 0  # Height of texture in pixels
        self.data_type: int = 0  # PicaDataType code
        self.pixel_format: int = 0  # PicaPixelFormat code
        self.data_size: int = 0  # Size of texel data in bytes
        self.data_offset: int = STEX_HEADER_SIZE  # Offset of texel data

    @classmethod
    def from_bytes(cls, data: bytes) -> 'STEX_HEADER':
        """Read STEX_HEADER from the start of a file"""
        if data[:4] != STEX_MAGIC:
            raise MagicMismatch(f"Magic number mismatch; not an STEX file? (got {bytes(data[:4])!r})")
        if len(data) < _HEADER_FIELDS_SIZE:
            raise TruncatedData(f"Data too small for STEX header: {len(data)} bytes")

        header = cls()
        values = struct.unpack_from(_HEADER_FORMAT, data, 0)
        header.magic = values[0]
        header.reserved = values[1]
        header.target = values[2]
        header.width = values[3]
        header.height = values[4]
        header.data_type = values[5]
        header.pixel_format = values[6]
        header.data_size = values[7]
        header.data_offset = values[8]

        return header

    def to_bytes(self) -> bytes:
        """Write STEX_HEADER as 128 bytes; texel data is expected right after it"""
        fields = struct.pack(
            _HEADER_FORMAT,
            STEX_MAGIC,
            0,
            STEX_TARGET_TEXTURE_2D,
            self.width,
            self.height,
            int(self.data_type),
            int(self.pixel_format),
            self.data_size,
            STEX_HEADER_SIZE,
        )
        return fields + bytes(STEX_HEADER_SIZE - len(fields))
