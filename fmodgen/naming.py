"""Rust identifiers for FMOD's C names."""

import re

from fmodgen.dictionary import ENUMERATOR_RENAMES, KEYWORDS, RENAMES

_SEPARATORS = re.compile(r"[_\s-]+")
_BOUNDARIES = re.compile(
    r"(?<=[a-z])(?=[A-Z])"          # lower -> upper
    r"|(?<=[A-Z])(?=[A-Z][a-z])"    # acronym -> word
    r"|(?<=[A-Za-z])(?=[0-9])"      # letter -> digit
    r"|(?<=[0-9])(?=[A-Z])"         # digit -> upper
)


def split_words(name: str) -> list[str]:
    words = []
    for chunk in _SEPARATORS.split(name):
        words.extend(word for word in _BOUNDARIES.split(chunk) if word)
    return words


def to_pascal_case(name: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def to_snake_case(name: str) -> str:
    return "_".join(word.lower() for word in split_words(name))


def _rename(name: str) -> str:
    return RENAMES.get(name, name)


def format_struct_ident(key: str) -> str:
    """Name of the wrapper type for a C handle, structure or enumeration."""
    key = key.replace("FMOD_RESULT", "FMOD_FMODRESULT")
    key = key.replace("FMOD_", "")
    key = key.replace("STUDIO_SYSTEM", "STUDIOSYSTEM")
    key = key.replace("STUDIO_ADVANCEDSETTINGS", "STUDIOADVANCEDSETTINGS")
    key = key.replace("STUDIO_CPU_USAGE", "STUDIOCPUUSAGE")
    key = key.replace("STUDIO_", "")
    return _rename(to_pascal_case(key))


def format_variant(enumeration: str, enumerator: str) -> str:
    if enumerator in ENUMERATOR_RENAMES:
        return ENUMERATOR_RENAMES[enumerator]

    prefix = enumeration.split("_")
    words = enumerator.split("_")
    shared = 0
    while shared < min(len(prefix), len(words)) and prefix[shared] == words[shared]:
        shared += 1
    rest = words[shared:] or words[-1:]

    variant = to_pascal_case("_".join(rest))
    if variant[:1].isdigit():
        variant = f"_{variant}"
    return _rename(variant)


def extract_struct_key(function: str) -> str:
    """Handle key a function belongs to: `FMOD_System_Init` -> `FMOD_SYSTEM`."""
    index = function.rfind("_")
    if index < 0:
        return function
    return function[:index].upper()


def extract_method_name(function: str) -> str:
    name = function.replace("3D", "3d")
    index = name.rfind("_")
    if index >= 0:
        name = name[index + 1:]
    return to_snake_case(name)


def format_argument_ident(name: str) -> str:
    name = to_snake_case(name)
    if name in KEYWORDS:
        return f"{name}_"
    return name


def format_rust_ident(name: str) -> str:
    """Raw FFI spelling of a C name, escaped when it collides with a keyword."""
    if name.lower() in KEYWORDS:
        return f"{name}_"
    return name
