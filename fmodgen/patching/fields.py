from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FieldPatch:
    """Hand-written parts of a wrapper structure field.

    An empty `definition` drops the field from the wrapper; its value then
    only comes from `into_expression` when the C structure is rebuilt.
    """

    definition: Optional[str] = None
    from_expression: Optional[str] = None
    into_expression: Optional[str] = None

    @property
    def excluded(self) -> bool:
        return self.definition == ""


def _slice_of(field: str, length: str) -> FieldPatch:
    return FieldPatch(
        from_expression=f"to_vec!(value.{field}, value.{length})",
        into_expression=f"self.{field}.as_ptr() as *mut _",
    )


FIELD_PATCHES: dict[tuple[str, str], FieldPatch] = {
    ("FMOD_ADVANCEDSETTINGS", "cbSize"): FieldPatch(
        definition="",
        into_expression="size_of::<ffi::FMOD_ADVANCEDSETTINGS>() as i32",
    ),
    ("FMOD_STUDIO_ADVANCEDSETTINGS", "cbsize"): FieldPatch(
        definition="",
        into_expression="size_of::<ffi::FMOD_STUDIO_ADVANCEDSETTINGS>() as i32",
    ),
    ("FMOD_CREATESOUNDEXINFO", "cbsize"): FieldPatch(
        definition="",
        into_expression="size_of::<ffi::FMOD_CREATESOUNDEXINFO>() as i32",
    ),
    ("FMOD_DSP_DESCRIPTION", "numparameters"): FieldPatch(
        definition="",
        into_expression="self.paramdesc.len() as i32",
    ),
    ("FMOD_DSP_DESCRIPTION", "paramdesc"): FieldPatch(
        definition="pub paramdesc: Vec<DspParameterDesc>",
        from_expression="to_vec!(*value.paramdesc, value.numparameters, DspParameterDesc::from)?",
        into_expression="&mut vec_as_mut_ptr(self.paramdesc, |param| param.into())",
    ),
    ("FMOD_DSP_PARAMETER_FFT", "numchannels"): FieldPatch(
        definition="",
        into_expression="self.spectrum.len() as i32",
    ),
    ("FMOD_DSP_PARAMETER_FFT", "spectrum"): FieldPatch(
        definition="pub spectrum: Vec<Vec<f32>>",
        from_expression="to_vec!(value.spectrum.as_ptr(), value.numchannels, |ptr| Ok(to_vec!(ptr, value.length)))?",
        into_expression="[null_mut(); 32]",
    ),
    ("FMOD_DSP_PARAMETER_3DATTRIBUTES_MULTI", "relative"): FieldPatch(
        from_expression=(
            "attr3d_array8(value.relative.map(Attributes3d::from).into_iter()"
            ".collect::<Result<Vec<Attributes3d>, Error>>()?)"
        ),
        into_expression="self.relative.map(Attributes3d::into)",
    ),
    ("FMOD_CREATESOUNDEXINFO", "inclusionlist"): _slice_of("inclusionlist", "inclusionlistnum"),
    ("FMOD_ADVANCEDSETTINGS", "ASIOChannelList"): FieldPatch(
        from_expression="to_vec!(value.ASIOChannelList, value.ASIONumChannels, |ptr| to_string!(ptr))?",
        into_expression=(
            "self.asio_channel_list.into_iter().map(|val| move_string_to_c!(val))"
            ".collect::<Vec<_>>().as_mut_ptr().cast()"
        ),
    ),
    ("FMOD_ADVANCEDSETTINGS", "ASIOSpeakerList"): FieldPatch(
        from_expression="to_vec!(value.ASIOSpeakerList, value.ASIONumChannels, Speaker::from)?",
        into_expression="self.asio_speaker_list.into_iter().map(|val| val.into()).collect::<Vec<_>>().as_mut_ptr()",
    ),
    ("FMOD_OUTPUT_OBJECT3DINFO", "buffer"): _slice_of("buffer", "bufferlength"),
    ("FMOD_DSP_BUFFER_ARRAY", "buffernumchannels"): _slice_of("buffernumchannels", "numbuffers"),
    ("FMOD_DSP_BUFFER_ARRAY", "bufferchannelmask"): _slice_of("bufferchannelmask", "numbuffers"),
    ("FMOD_DSP_BUFFER_ARRAY", "buffers"): FieldPatch(
        definition="pub buffers: Vec<*mut f32>",
        from_expression="to_vec!(value.buffers, value.numbuffers, |ptr| Ok(ptr))?",
        into_expression="self.buffers.as_ptr() as *mut _",
    ),
    ("FMOD_DSP_PARAMETER_FLOAT_MAPPING_PIECEWISE_LINEAR", "pointparamvalues"): _slice_of("pointparamvalues", "numpoints"),
    ("FMOD_DSP_PARAMETER_FLOAT_MAPPING_PIECEWISE_LINEAR", "pointpositions"): _slice_of("pointpositions", "numpoints"),
    # TODO: read the value names once the parameter range (max - min + 1) is threaded through.
    ("FMOD_DSP_PARAMETER_DESC_INT", "valuenames"): FieldPatch(
        from_expression="vec![]",
        into_expression="self.valuenames.as_ptr() as *mut _",
    ),
    ("FMOD_DSP_PARAMETER_DESC_BOOL", "valuenames"): FieldPatch(
        from_expression="vec![]",
        into_expression="self.valuenames.as_ptr() as *mut _",
    ),
    ("FMOD_DSP_STATE", "sidechaindata"): _slice_of("sidechaindata", "sidechainchannels"),
}