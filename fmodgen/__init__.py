from .fmodgen import FmodGen

__all__ = [
    'FmodGen',
]
