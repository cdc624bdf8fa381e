from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Optional

from fmodgen import logging as fmodgen_logging
from fmodgen.models import (Callback, Constant, Enumeration, ErrorString, Flags,
                            Function, FunctionGroup, Header, OpaqueType,
                            ParameterModifier, Preset, Structure, TypeAlias,
                            modifier_key)

logger = fmodgen_logging.get_logger(__name__)

STUDIO_SYSTEM = "FMOD_STUDIO_SYSTEM"


class TypeCategory(Enum):
    OPAQUE_TYPE = auto()
    STRUCTURE = auto()
    ENUMERATION = auto()
    FLAGS = auto()
    CONSTANT = auto()
    TYPE_ALIAS = auto()
    CALLBACK = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class Api:
    """The merged, read-only model both emitters consume."""

    opaque_types: tuple[OpaqueType, ...] = ()
    constants: tuple[Constant, ...] = ()
    flags: tuple[Flags, ...] = ()
    enumerations: tuple[Enumeration, ...] = ()
    structures: tuple[Structure, ...] = ()
    callbacks: tuple[Callback, ...] = ()
    type_aliases: tuple[TypeAlias, ...] = ()
    presets: tuple[Preset, ...] = ()
    errors: tuple[ErrorString, ...] = ()
    functions: tuple[FunctionGroup, ...] = ()
    modifiers: Mapping[str, ParameterModifier] = field(default_factory=lambda: MappingProxyType({}))
    function_overrides: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    structure_patches: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Ordered membership tables; the first hit wins.
        categories = (
            (TypeCategory.STRUCTURE, self.structures),
            (TypeCategory.ENUMERATION, self.enumerations),
            (TypeCategory.FLAGS, self.flags),
            (TypeCategory.OPAQUE_TYPE, self.opaque_types),
            (TypeCategory.CONSTANT, self.constants),
            (TypeCategory.TYPE_ALIAS, self.type_aliases),
            (TypeCategory.CALLBACK, self.callbacks),
        )
        object.__setattr__(
            self,
            "_members",
            tuple((category, frozenset(entity.name for entity in entities)) for category, entities in categories),
        )

    def classify(self, name: str) -> TypeCategory:
        for category, names in self._members:
            if name in names:
                return category
        return TypeCategory.UNKNOWN

    def get_modifier(self, function: str, argument: str) -> ParameterModifier:
        return self.modifiers.get(modifier_key(function, argument), ParameterModifier.NONE)

    def all_functions(self) -> list[Function]:
        return [function for group in self.functions for function in group.functions]

    def structure(self, name: str) -> Optional[Structure]:
        for structure in self.structures:
            if structure.name == name:
                return structure
        return None

    def census(self) -> dict[str, int]:
        return {
            "opaque types": len(self.opaque_types),
            "type aliases": len(self.type_aliases),
            "structures": len(self.structures),
            "constants": len(self.constants),
            "flags": len(self.flags),
            "enumerations": len(self.enumerations),
            "callbacks": len(self.callbacks),
            "functions": len(self.all_functions()),
            "presets": len(self.presets),
            "parameter modifiers": len(self.modifiers),
            "errors": len(self.errors),
        }


class ApiBuilder:
    """Accumulates per-header sub-models and merges them in one pass."""

    def __init__(self) -> None:
        self._headers: list[tuple[Header, Optional[str]]] = []
        self._modifiers: dict[str, ParameterModifier] = {}
        self._required_opaque_types: list[str] = []
        self._function_overrides: dict[str, str] = {}
        self._structure_patches: dict[str, str] = {}

    def add_header(self, header: Header, *, link: Optional[str] = None) -> "ApiBuilder":
        if header.functions and link is None:
            raise ValueError("a header declaring functions needs a link name")
        self._headers.append((header, link))
        return self

    def add_modifiers(self, modifiers: Mapping[str, ParameterModifier]) -> "ApiBuilder":
        self._modifiers.update(modifiers)
        return self

    def insert_modifier(self, function: str, argument: str, modifier: ParameterModifier) -> "ApiBuilder":
        self._modifiers[modifier_key(function, argument)] = modifier
        return self

    def remove_modifier(self, function: str, argument: str) -> "ApiBuilder":
        self._modifiers.pop(modifier_key(function, argument), None)
        return self

    def require_opaque_type(self, name: str) -> "ApiBuilder":
        self._required_opaque_types.append(name)
        return self

    def override_function(self, name: str, code: str) -> "ApiBuilder":
        self._function_overrides[name] = code
        return self

    def patch_structure(self, name: str, code: str) -> "ApiBuilder":
        self._structure_patches[name] = code
        return self

    def build(self) -> Api:
        collected: dict[str, list] = {
            "opaque_types": [],
            "constants": [],
            "flags": [],
            "enumerations": [],
            "structures": [],
            "callbacks": [],
            "type_aliases": [],
            "presets": [],
            "errors": [],
        }
        groups: dict[str, list[Function]] = {}
        for header, link in self._headers:
            for name, entities in collected.items():
                entities.extend(getattr(header, name))
            if header.functions:
                groups.setdefault(link, []).extend(header.functions)

        structure_names = {structure.name for structure in collected["structures"]}
        opaque_types: list[OpaqueType] = []
        seen: set[str] = set()
        for opaque_type in collected["opaque_types"]:
            if opaque_type.name in seen:
                continue
            if opaque_type.name in structure_names:
                logger.debug("Dropping forward declaration of structure %s", opaque_type.name)
                continue
            seen.add(opaque_type.name)
            opaque_types.append(opaque_type)

        for name in self._required_opaque_types:
            if name not in seen:
                logger.debug("Inserting missing opaque type %s", name)
                seen.add(name)
                opaque_types.append(OpaqueType(name))

        return Api(
            opaque_types=tuple(opaque_types),
            constants=tuple(collected["constants"]),
            flags=tuple(collected["flags"]),
            enumerations=tuple(collected["enumerations"]),
            structures=tuple(collected["structures"]),
            callbacks=tuple(collected["callbacks"]),
            type_aliases=tuple(collected["type_aliases"]),
            presets=tuple(collected["presets"]),
            errors=tuple(collected["errors"]),
            functions=tuple(FunctionGroup(link, tuple(functions)) for link, functions in groups.items()),
            modifiers=MappingProxyType(dict(self._modifiers)),
            function_overrides=MappingProxyType(dict(self._function_overrides)),
            structure_patches=MappingProxyType(dict(self._structure_patches)),
        )

