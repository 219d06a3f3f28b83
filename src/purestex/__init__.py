"""purestex - PICA200 tiled texture (STEX) reader, writer and converter"""

__version__ = "0.1.0"

# Main STEX class
from .stex import STEX, bgra_to_rgba, rgba_to_bgra

# Header structure
from .headers import STEX_HEADER

# Enumerations
from .enums import PicaDataType, PicaPixelFormat

# Errors
from .errors import MagicMismatch, CodecNotFound, UnsupportedOperation, TruncatedData

# Codec registry
from .registry import Codec, CODECS, lookup, decode, encode, encodable_format

# Sidecar metadata
from .metadata import ImageMetadata

# CLI entry point
from .cli import main

__all__ = [
    '__version__',
    'STEX',
    'bgra_to_rgba',
    'rgba_to_bgra',
    'STEX_HEADER',
    'PicaDataType',
    'PicaPixelFormat',
    'MagicMismatch',
    'CodecNotFound',
    'UnsupportedOperation',
    'TruncatedData',
    'Codec',
    'CODECS',
    'lookup',
    'decode',
    'encode',
    'encodable_format',
    'ImageMetadata',
    'main',
]
