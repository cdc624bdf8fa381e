import pytest

from fmodgen.naming import (extract_method_name, extract_struct_key,
                            format_argument_ident, format_rust_ident,
                            format_struct_ident, format_variant, split_words,
                            to_snake_case)


@pytest.mark.parametrize("key, expected", [
    ("FMOD_SYSTEM", "System"),
    ("FMOD_VECTOR", "Vector"),
    ("FMOD_RESULT", "FmodResult"),
    ("FMOD_STUDIO_SYSTEM", "Studio"),
    ("FMOD_STUDIO_EVENTINSTANCE", "EventInstance"),
    ("FMOD_STUDIO_ADVANCEDSETTINGS", "StudioAdvancedSettings"),
    ("FMOD_ADVANCEDSETTINGS", "AdvancedSettings"),
    ("FMOD_3D_ATTRIBUTES", "Attributes3d"),
    ("FMOD_DSP_PARAMETER_3DATTRIBUTES_MULTI", "DspParameter3DAttributesMulti"),
    ("FMOD_DSP_PARAMETER_FFT", "DspParameterFft"),
    ("FMOD_OUTPUTTYPE", "OutputType"),
])
def test_format_struct_ident(key, expected):
    assert format_struct_ident(key) == expected


def test_format_variant_strips_shared_prefix():
    assert format_variant("FMOD_OUTPUTTYPE", "FMOD_OUTPUTTYPE_AUTODETECT") == "Autodetect"
    assert format_variant("FMOD_DSP_TYPE", "FMOD_DSP_TYPE_FFT") == "Fft"
    assert format_variant("FMOD_STUDIO_PLAYBACK_STATE", "FMOD_STUDIO_PLAYBACK_SUSTAINING") == "Sustaining"
    assert format_variant("FMOD_STUDIO_LOADING_STATE", "FMOD_STUDIO_LOADING_STATE_LOADING") == "Loading"


def test_format_variant_escapes_leading_digit():
    assert format_variant("FMOD_SPEAKERMODE", "FMOD_SPEAKERMODE_5POINT1") == "_5Point1"


def test_format_variant_uses_enumerator_renames():
    assert format_variant("FMOD_STUDIO_LOAD_MEMORY_MODE", "FMOD_STUDIO_LOAD_MEMORY") == "Memory"
    assert format_variant("FMOD_STUDIO_LOAD_MEMORY_MODE", "FMOD_STUDIO_LOAD_MEMORY_POINT") == "MemoryPoint"


def test_format_variant_falls_back_to_last_word():
    assert format_variant("FMOD_OUTPUTTYPE", "FMOD_OUTPUTTYPE") == "OutputType"


def test_extract_struct_key():
    assert extract_struct_key("FMOD_System_Init") == "FMOD_SYSTEM"
    assert extract_struct_key("FMOD_Studio_EventInstance_Start") == "FMOD_STUDIO_EVENTINSTANCE"
    assert extract_struct_key("Memory") == "Memory"


def test_extract_method_name():
    assert extract_method_name("FMOD_System_SetDSPBufferSize") == "set_dsp_buffer_size"
    assert extract_method_name("FMOD_Studio_EventDescription_Is3D") == "is_3d"
    assert extract_method_name("FMOD_Sound_GetName") == "get_name"


def test_split_words_and_snake_case():
    assert split_words("numChannels") == ["num", "Channels"]
    assert to_snake_case("cbSize") == "cb_size"
    assert to_snake_case("inchannel_hop") == "inchannel_hop"


def test_argument_and_ffi_idents_escape_keywords():
    assert format_argument_ident("type") == "type_"
    assert format_argument_ident("numChannels") == "num_channels"
    assert format_rust_ident("type") == "type_"
    assert format_rust_ident("cbSize") == "cbSize"
