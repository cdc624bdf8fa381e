from . import ffi, lib
from .ffi import FfiGenerator
from .lib import LibGenerator

__all__ = [
    'FfiGenerator',
    'LibGenerator',
    'ffi',
    'lib',
]
