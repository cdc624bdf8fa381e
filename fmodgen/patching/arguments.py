from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ArgumentOverride:
    """Replaces the generic treatment of one C argument.

    `param` is the Rust parameter it becomes, or None when the caller does not
    supply it. `prep` lines run before the call and `input` is the expression
    passed to the C function.
    """

    input: str
    param: Optional[str] = None
    prep: tuple[str, ...] = ()


_HEADER_VERSION = ArgumentOverride(input="ffi::FMOD_VERSION")

ARGUMENT_OVERRIDES: dict[tuple[str, str], ArgumentOverride] = {
    ("FMOD_System_Create", "headerversion"): _HEADER_VERSION,
    ("FMOD_Studio_System_Create", "headerversion"): _HEADER_VERSION,
    ("FMOD_Sound_SetSubSoundSentence", "subsoundlist"): ArgumentOverride(
        param="subsoundlist: &[i32]",
        input="subsoundlist.as_ptr() as *mut i32",
    ),
    ("FMOD_Sound_SetSubSoundSentence", "numsubsounds"): ArgumentOverride(
        input="subsoundlist.len() as i32",
    ),
    ("FMOD_Geometry_AddPolygon", "vertices"): ArgumentOverride(
        param="vertices: &[Vector]",
        prep=("let vertices = vertices.iter().map(|vertex| vertex.clone().into()).collect::<Vec<ffi::FMOD_VECTOR>>();",),
        input="vertices.as_ptr()",
    ),
    ("FMOD_Geometry_AddPolygon", "numvertices"): ArgumentOverride(
        input="vertices.len() as i32",
    ),
}
