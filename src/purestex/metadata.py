"""JSON sidecar describing an extracted STEX texture"""
import json
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict

from .enums import PicaDataType, PicaPixelFormat

# Names used in sidecar files, shared with existing translation projects
DATA_TYPE_NAMES = {
    PicaDataType.BYTE: 'Byte',
    PicaDataType.UNSIGNED_BYTE: 'UnsignedByte',
    PicaDataType.SHORT: 'Short',
    PicaDataType.UNSIGNED_SHORT: 'UnsignedShort',
    PicaDataType.INT: 'Int',
    PicaDataType.UNSIGNED_INT: 'UnsignedInt',
    PicaDataType.FLOAT: 'Float',
    PicaDataType.UNSIGNED_BYTE_44_DMP: 'UnsignedByte44DMP',
    PicaDataType.UNSIGNED_4BITS_DMP: 'Unsigned4BitsDMP',
    PicaDataType.UNSIGNED_SHORT_4444: 'UnsignedShort4444',
    PicaDataType.UNSIGNED_SHORT_5551: 'UnsignedShort5551',
    PicaDataType.UNSIGNED_SHORT_565: 'UnsignedShort565',
}

PIXEL_FORMAT_NAMES = {
    PicaPixelFormat.RGBA_NATIVE_DMP: 'RGBANativeDMP',
    PicaPixelFormat.RGB_NATIVE_DMP: 'RGBNativeDMP',
    PicaPixelFormat.ALPHA_NATIVE_DMP: 'AlphaNativeDMP',
    PicaPixelFormat.LUMINANCE_NATIVE_DMP: 'LuminanceNativeDMP',
    PicaPixelFormat.LUMINANCE_ALPHA_NATIVE_DMP: 'LuminanceAlphaNativeDMP',
    PicaPixelFormat.ETC1_RGB8_NATIVE_DMP: 'ETC1RGB8NativeDMP',
    PicaPixelFormat.ETC1_ALPHA_RGB8_A4_NATIVE_DMP: 'ETC1AlphaRGB8A4NativeDMP',
}


def parse_enum(value, enum, names: Dict) -> Any:
    """
    Resolve a sidecar or command-line value to an enum member

    Accepts sidecar names ('UnsignedByte'), member names ('UNSIGNED_BYTE')
    and integer codes, either as int or as decimal/hex string.
    """
    if isinstance(value, enum):
        return value
    if isinstance(value, int):
        return enum(value)

    text = str(value).strip()
    for member, name in names.items():
        if text == name or text.upper() == member.name:
            return member
    try:
        return enum(int(text, 0))
    except ValueError:
        raise ValueError(f"Unknown {enum.__name__}: {value!r}") from None


@dataclass
class ImageMetadata:
    """Metadata needed to rebuild an STEX file from an edited image"""
    relative_path: str
    width: int = 0
    height: int = 0
    data_type: PicaDataType = PicaDataType.UNSIGNED_BYTE
    pixel_format: PicaPixelFormat = PicaPixelFormat.RGBA_NATIVE_DMP

    def to_dict(self) -> Dict[str, Any]:
        return {
            'RelativePath': self.relative_path,
            'Width': self.width,
            'Height': self.height,
            'DataType': DATA_TYPE_NAMES[self.data_type],
            'PixelFormat': PIXEL_FORMAT_NAMES[self.pixel_format],
        }

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'ImageMetadata':
        try:
            return cls(
                relative_path=str(PurePosixPath(values['RelativePath'].replace('\\', '/'))),
                width=int(values['Width']),
                height=int(values['Height']),
                data_type=parse_enum(values['DataType'], PicaDataType, DATA_TYPE_NAMES),
                pixel_format=parse_enum(values['PixelFormat'], PicaPixelFormat, PIXEL_FORMAT_NAMES),
            )
        except KeyError as e:
            raise ValueError(f"Missing metadata field: {e.args[0]}") from None

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> 'ImageMetadata':
        values = json.loads(text)
        if not isinstance(values, dict):
            raise ValueError("Metadata must be a JSON object")
        return cls.from_dict(values)

    def save(self, path) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, path) -> 'ImageMetadata':
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_json(f.read())
