import pytest

from fmodgen.api import STUDIO_SYSTEM, Api, ApiBuilder, TypeCategory
from fmodgen.models import (Argument, Constant, Enumeration, Field, Flags,
                            Function, FundamentalType, Header, NormalPointer,
                            OpaqueType, ParameterModifier, Structure,
                            TypeAlias, UserType)
from fmodgen.patching import apply_all
from fmodgen.patching.functions import function_overrides
from fmodgen.patching.structures import structure_patches

RESULT = UserType("FMOD_RESULT")


def _function(name, owner="FMOD_SYSTEM"):
    return Function(RESULT, name, (Argument(UserType(owner), "system", pointer=NormalPointer()),))


def test_build_merges_headers_in_order():
    common = Header(
        opaque_types=(OpaqueType("FMOD_SYSTEM"),),
        constants=(Constant("FMOD_MAX_CHANNEL_WIDTH", "32"),),
    )
    studio_common = Header(constants=(Constant("FMOD_STUDIO_LOAD_MEMORY_ALIGNMENT", "32"),))

    api = ApiBuilder().add_header(common).add_header(studio_common).build()

    assert [constant.name for constant in api.constants] == [
        "FMOD_MAX_CHANNEL_WIDTH",
        "FMOD_STUDIO_LOAD_MEMORY_ALIGNMENT",
    ]
    assert api.opaque_types == (OpaqueType("FMOD_SYSTEM"),)


def test_build_groups_functions_by_link():
    builder = ApiBuilder()
    builder.add_header(Header(functions=(_function("FMOD_Studio_System_Release"),)), link="fmodstudio")
    builder.add_header(Header(functions=(_function("FMOD_System_Release"),)), link="fmod")
    builder.add_header(Header(functions=(_function("FMOD_System_Close"),)), link="fmod")

    api = builder.build()

    assert [group.link for group in api.functions] == ["fmodstudio", "fmod"]
    assert [function.name for function in api.functions[1].functions] == [
        "FMOD_System_Release",
        "FMOD_System_Close",
    ]
    assert len(api.all_functions()) == 3


def test_add_header_with_functions_needs_link():
    with pytest.raises(ValueError):
        ApiBuilder().add_header(Header(functions=(_function("FMOD_System_Release"),)))


def test_build_deduplicates_opaque_types_and_drops_forward_declarations():
    header = Header(
        opaque_types=(OpaqueType("FMOD_SOUND"), OpaqueType("FMOD_ASYNCREADINFO"), OpaqueType("FMOD_SOUND")),
        structures=(Structure("FMOD_ASYNCREADINFO", (Field(FundamentalType("int"), "offset"),)),),
    )

    api = ApiBuilder().add_header(header).build()

    assert api.opaque_types == (OpaqueType("FMOD_SOUND"),)
    assert api.classify("FMOD_ASYNCREADINFO") is TypeCategory.STRUCTURE


def test_build_inserts_required_opaque_type_once():
    builder = ApiBuilder().require_opaque_type(STUDIO_SYSTEM)
    assert builder.build().opaque_types == (OpaqueType(STUDIO_SYSTEM),)

    builder = ApiBuilder().add_header(Header(opaque_types=(OpaqueType(STUDIO_SYSTEM),)))
    builder.require_opaque_type(STUDIO_SYSTEM)
    assert builder.build().opaque_types == (OpaqueType(STUDIO_SYSTEM),)


def test_classify_categories():
    api = Api(
        opaque_types=(OpaqueType("FMOD_SOUND"),),
        constants=(Constant("FMOD_MAX_LISTENERS", "8"),),
        flags=(Flags(FundamentalType("unsigned int"), "FMOD_MODE"),),
        enumerations=(Enumeration("FMOD_SPEAKER"),),
        structures=(Structure("FMOD_VECTOR"),),
        type_aliases=(TypeAlias(FundamentalType("int"), "FMOD_BOOL"),),
    )

    assert api.classify("FMOD_SOUND") is TypeCategory.OPAQUE_TYPE
    assert api.classify("FMOD_MAX_LISTENERS") is TypeCategory.CONSTANT
    assert api.classify("FMOD_MODE") is TypeCategory.FLAGS
    assert api.classify("FMOD_SPEAKER") is TypeCategory.ENUMERATION
    assert api.classify("FMOD_VECTOR") is TypeCategory.STRUCTURE
    assert api.classify("FMOD_BOOL") is TypeCategory.TYPE_ALIAS
    assert api.classify("FMOD_UNKNOWN") is TypeCategory.UNKNOWN


def test_classify_prefers_structure_over_later_tables():
    api = Api(
        structures=(Structure("FMOD_GUID"),),
        type_aliases=(TypeAlias(FundamentalType("int"), "FMOD_GUID"),),
    )

    assert api.classify("FMOD_GUID") is TypeCategory.STRUCTURE


def test_modifiers_insert_and_remove():
    builder = ApiBuilder().add_modifiers({
        "FMOD_System_GetVersion+version": ParameterModifier.OUTPUT,
        "FMOD_System_Set3DNumListeners+numlisteners": ParameterModifier.OUTPUT,
    })
    builder.insert_modifier("FMOD_System_CreateSound", "exinfo", ParameterModifier.OPTIONAL)
    builder.remove_modifier("FMOD_System_Set3DNumListeners", "numlisteners")
    builder.remove_modifier("FMOD_System_Unknown", "value")

    api = builder.build()

    assert api.get_modifier("FMOD_System_GetVersion", "version") is ParameterModifier.OUTPUT
    assert api.get_modifier("FMOD_System_CreateSound", "exinfo") is ParameterModifier.OPTIONAL
    assert api.get_modifier("FMOD_System_Set3DNumListeners", "numlisteners") is ParameterModifier.NONE


def test_api_is_read_only():
    api = ApiBuilder().add_modifiers({"FMOD_A+b": ParameterModifier.OUTPUT}).build()

    with pytest.raises(AttributeError):
        api.constants = ()
    with pytest.raises(TypeError):
        api.modifiers["FMOD_A+c"] = ParameterModifier.OPTIONAL


def test_census_counts_every_collection():
    api = Api(
        constants=(Constant("A", "1"), Constant("B", "2")),
        structures=(Structure("FMOD_VECTOR"),),
    )

    census = api.census()

    assert census["constants"] == 2
    assert census["structures"] == 1
    assert census["functions"] == 0
    assert census["errors"] == 0


def test_apply_all_patches_the_builder():
    builder = ApiBuilder().add_modifiers({
        "FMOD_System_Set3DNumListeners+numlisteners": ParameterModifier.OUTPUT,
        "FMOD_Channel_GetMixMatrix+inchannel_hop": ParameterModifier.OUTPUT,
    })

    api = apply_all(builder).build()

    assert api.get_modifier("FMOD_Studio_CommandReplay_GetSystem", "system") is ParameterModifier.OUTPUT
    assert api.get_modifier("FMOD_Studio_EventDescription_Is3D", "is3D") is ParameterModifier.OUTPUT
    assert api.get_modifier("FMOD_System_Set3DNumListeners", "numlisteners") is ParameterModifier.NONE
    assert api.get_modifier("FMOD_Channel_GetMixMatrix", "inchannel_hop") is ParameterModifier.NONE
    assert OpaqueType(STUDIO_SYSTEM) in api.opaque_types
    assert dict(api.function_overrides) == function_overrides()
    assert dict(api.structure_patches) == structure_patches()


def test_function_overrides_cover_path_getters_and_validity():
    overrides = function_overrides()

    assert "FMOD_Studio_System_LoadBankMemory" in overrides
    assert "FMOD_Studio_System_LookupPath" in overrides
    for owner in ("Bank", "Bus", "VCA", "EventDescription"):
        assert f"FMOD_Studio_{owner}_GetPath" in overrides
    assert "pub fn is_valid(&self) -> bool" in overrides["FMOD_Studio_Bank_IsValid"]
