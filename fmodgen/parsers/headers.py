from fmodgen.lowering import parse_header
from fmodgen.models import Header

_TYPE_DECLARATIONS = ("opaque_type", "constant", "bit_flags", "type_alias", "structure", "callback")

# Declarations each header dialect contributes to the model.
HEADER_DIALECTS: dict[str, tuple[str, ...]] = {
    "fmod": ("function",),
    "fmod_studio": ("function",),
    "fmod_common": _TYPE_DECLARATIONS + ("enumeration", "preset"),
    "fmod_studio_common": ("opaque_type", "constant", "bit_flags", "enumeration", "structure", "callback"),
    "fmod_codec": _TYPE_DECLARATIONS,
    "fmod_output": _TYPE_DECLARATIONS,
    "fmod_dsp": _TYPE_DECLARATIONS + ("enumeration",),
    "fmod_dsp_effects": ("constant", "enumeration", "structure"),
    "fmod_errors": ("error_table",),
}


def parse(dialect: str, source: str) -> Header:
    """Parse the text of one FMOD header written in `dialect`.

    A header without any meaningful declaration yields an empty `Header`.
    """
    try:
        declarations = HEADER_DIALECTS[dialect]
    except KeyError:
        raise ValueError(f"Unknown header dialect: {dialect}") from None
    return parse_header(dialect, source, declarations)
