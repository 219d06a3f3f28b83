"""Exceptions raised by purestex"""


class MagicMismatch(ValueError):
    """Container does not start with the STEX magic number"""


class CodecNotFound(ValueError):
    """No codec is registered for a (data type, pixel format) pair"""


class UnsupportedOperation(NotImplementedError):
    """Codec exists but has no routine for the requested direction"""


class TruncatedData(ValueError):
    """Raw texture data is shorter than the format requires"""
