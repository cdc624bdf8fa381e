"""Corrections layered over the parsed model before it is frozen."""

from fmodgen import logging as fmodgen_logging
from fmodgen.api import STUDIO_SYSTEM, ApiBuilder
from fmodgen.models import ParameterModifier
from fmodgen.patching.arguments import ARGUMENT_OVERRIDES, ArgumentOverride
from fmodgen.patching.fields import FIELD_PATCHES, FieldPatch
from fmodgen.patching.functions import function_overrides
from fmodgen.patching.modifiers import OUTPUT_INSERTS, REMOVALS
from fmodgen.patching.structures import structure_patches

logger = fmodgen_logging.get_logger(__name__)

__all__ = [
    "ARGUMENT_OVERRIDES",
    "ArgumentOverride",
    "FIELD_PATCHES",
    "FieldPatch",
    "apply_all",
]


def apply_all(builder: ApiBuilder) -> ApiBuilder:
    for function, argument in OUTPUT_INSERTS:
        builder.insert_modifier(function, argument, ParameterModifier.OUTPUT)
    for function, argument in REMOVALS:
        builder.remove_modifier(function, argument)

    # The studio headers only ever use the system handle through pointers.
    builder.require_opaque_type(STUDIO_SYSTEM)

    overrides = function_overrides()
    for name, code in overrides.items():
        builder.override_function(name, code)
    patches = structure_patches()
    for name, code in patches.items():
        builder.patch_structure(name, code)

    logger.debug(
        "Patched %d modifiers, %d functions, %d structures",
        len(OUTPUT_INSERTS) + len(REMOVALS), len(overrides), len(patches),
    )
    return builder
