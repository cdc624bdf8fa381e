from .fmod_docs import DOC_PAGES, parse_fragment, parse_parameter_modifiers
from .headers import HEADER_DIALECTS, parse

__all__ = [
    'DOC_PAGES',
    'HEADER_DIALECTS',
    'parse',
    'parse_fragment',
    'parse_parameter_modifiers',
]
