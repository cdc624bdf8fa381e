from enum import Enum
from typing import Optional

from fmodgen import logging as fmodgen_logging
from fmodgen.api import Api, TypeCategory
from fmodgen.errors import NumericConversionError, UnimplementedShape
from fmodgen.generators.templates import FfiContext, render_ffi
from fmodgen.models import (Argument, Callback, Constant, DoublePointer,
                            Enumeration, Field, Flags, FunctionGroup,
                            FundamentalType, NormalPointer, OpaqueType,
                            Pointer, Preset, Structure, Type, TypeAlias)
from fmodgen.naming import format_rust_ident

logger = fmodgen_logging.get_logger(__name__)

FUNDAMENTAL_TYPES = {
    "char": "c_char",
    "signed char": "c_char",
    "unsigned char": "c_uchar",
    "int": "c_int",
    "unsigned int": "c_uint",
    "short": "c_short",
    "unsigned short": "c_ushort",
    "long long": "c_longlong",
    "long": "c_long",
    "unsigned long long": "c_ulonglong",
    "unsigned long": "c_ulong",
    "float": "c_float",
    "void": "c_void",
}

# Structures whose first field must hold their own size.
SELF_SIZE_FIELDS = frozenset({
    ("FMOD_ADVANCEDSETTINGS", "cbSize"),
    ("FMOD_STUDIO_ADVANCEDSETTINGS", "cbsize"),
    ("FMOD_CREATESOUNDEXINFO", "cbsize"),
})

PRESET_STRUCTURE = "FMOD_REVERB_PROPERTIES"

_U32_MAX = 0xFFFFFFFF
_I32_MIN = -0x80000000
_I32_MAX = 0x7FFFFFFF


class PointerShape(Enum):
    VALUE = ""
    MUT = "*mut"
    MUT_MUT = "*mut *mut"
    CONST = "*const"
    CONST_CONST = "*const *const"


def describe_pointer(as_const: Optional[str], pointer: Optional[Pointer]) -> PointerShape:
    match (as_const is not None, pointer):
        case (_, None):
            return PointerShape.VALUE
        case (False, NormalPointer()):
            return PointerShape.MUT
        case (False, DoublePointer()):
            return PointerShape.MUT_MUT
        case (True, NormalPointer()):
            return PointerShape.CONST
        case (True, DoublePointer()):
            return PointerShape.CONST_CONST
    raise UnimplementedShape(f"pointer {pointer!r}")


def _is_void(c_type: Type, pointer: Optional[Pointer] = None) -> bool:
    return c_type == FundamentalType("void") and pointer is None


def split_dimension(as_array: str) -> str:
    return as_array.strip()[1:-1].strip()


def parse_enumerator_value(text: str) -> int:
    try:
        if text.lstrip("-").lower().startswith("0x"):
            value = int(text, 16)
        else:
            value = int(text, 10)
    except ValueError:
        raise NumericConversionError(text, "i32") from None
    if not _I32_MIN <= value <= _I32_MAX:
        raise NumericConversionError(text, "i32")
    return value


def parse_preset_value(text: str) -> float:
    try:
        return float(text.removesuffix("f"))
    except ValueError:
        raise NumericConversionError(text, "f32") from None


class FfiGenerator:
    """Renders the raw `ffi.rs` layer: a one-to-one image of the C headers."""

    def __init__(self, api: Api):
        self.api = api

    def format_rust_type(
        self,
        c_type: Type,
        as_const: Optional[str] = None,
        pointer: Optional[Pointer] = None,
        as_array: Optional[str] = None,
    ) -> str:
        if isinstance(c_type, FundamentalType):
            try:
                name = FUNDAMENTAL_TYPES[c_type.name]
            except KeyError:
                raise UnimplementedShape(f"fundamental type {c_type.name!r}") from None
        elif self.api.classify(c_type.name) is TypeCategory.UNKNOWN:
            raise UnimplementedShape(f"user type {c_type.name!r} is not declared by any header")
        else:
            name = c_type.name

        shape = describe_pointer(as_const, pointer)
        rust_type = f"{shape.value} {name}" if shape is not PointerShape.VALUE else name
        if as_array is None:
            return rust_type
        return f"[{rust_type}; {self.format_dimension(as_array)} as usize]"

    def format_dimension(self, as_array: str) -> str:
        dimension = split_dimension(as_array)
        if dimension.isdigit():
            return dimension
        if self.api.classify(dimension) is not TypeCategory.CONSTANT:
            raise UnimplementedShape(f"array dimension {dimension!r} is not a known constant")
        return dimension

    def generate_opaque_type(self, opaque_type: OpaqueType) -> str:
        return (
            "#[repr(C)]\n"
            "#[derive(Debug, Copy, Clone)]\n"
            f"pub struct {opaque_type.name} {{\n"
            "    _unused: [u8; 0],\n"
            "}"
        )

    def generate_type_alias(self, type_alias: TypeAlias) -> str:
        return f"pub type {type_alias.name} = {self.format_rust_type(type_alias.base_type)};"

    def generate_constant(self, constant: Constant) -> str:
        value = constant.value
        if value.startswith("0x") and len(value) == len("0xFFFFFFFFFFFFFFFF"):
            rust_type = "c_ulonglong"
        elif value.startswith("0x") and len(value) == len("0xaaaabbcc"):
            rust_type = "c_uint"
        else:
            try:
                number = int(value, 10)
            except ValueError:
                raise NumericConversionError(value, "u32") from None
            if not 0 <= number <= _U32_MAX:
                raise NumericConversionError(value, "u32")
            rust_type = "c_uint"
            value = str(number)
        return f"pub const {constant.name}: {rust_type} = {value};"

    def generate_enumeration(self, enumeration: Enumeration) -> str:
        lines = [f"pub type {enumeration.name} = c_int;"]
        value = -1
        for enumerator in enumeration.enumerators:
            if enumerator.value is None:
                value += 1
            else:
                value = parse_enumerator_value(enumerator.value)
            lines.append(f"pub const {enumerator.name}: {enumeration.name} = {value};")
        return "\n".join(lines)

    def generate_flags(self, flags: Flags) -> str:
        lines = [f"pub type {flags.name} = {self.format_rust_type(flags.flags_type)};"]
        for flag in flags.flags:
            lines.append(f"pub const {flag.name}: {flags.name} = {flag.value};")
        return "\n".join(lines)

    def generate_field(self, field: Field) -> str:
        field_type = self.format_rust_type(field.field_type, field.as_const, field.pointer, field.as_array)
        return f"pub {format_rust_ident(field.name)}: {field_type},"

    def _default_value(self, structure: Structure, field: Field) -> str:
        if (structure.name, field.name) in SELF_SIZE_FIELDS:
            return f"size_of::<{structure.name}>() as c_int"
        match describe_pointer(field.as_const, field.pointer):
            case PointerShape.MUT | PointerShape.MUT_MUT:
                element = "null_mut()"
            case PointerShape.CONST | PointerShape.CONST_CONST:
                element = "null()"
            case PointerShape.VALUE:
                element = "Default::default()"
        if field.as_array is not None:
            return f"[{element}; {self.format_dimension(field.as_array)} as usize]"
        return element

    def generate_structure(self, structure: Structure) -> str:
        name = structure.name
        fields = [self.generate_field(field) for field in structure.fields]
        defaults = [f"{format_rust_ident(field.name)}: {self._default_value(structure, field)},"
                    for field in structure.fields]
        if structure.union is not None:
            fields.append(f"pub __union: {name}__union,")
            defaults.append("__union: unsafe { std::mem::zeroed() },")

        derive = "Copy, Clone" if structure.union is not None else "Debug, Copy, Clone"
        blocks = [
            "#[repr(C)]\n"
            f"#[derive({derive})]\n"
            f"pub struct {name} {{\n"
            + "".join(f"    {line}\n" for line in fields)
            + "}",
        ]
        if structure.union is not None:
            union_fields = [self.generate_field(field) for field in structure.union.fields]
            blocks.append(
                "#[repr(C)]\n"
                "#[derive(Copy, Clone)]\n"
                f"pub union {name}__union {{\n"
                + "".join(f"    {line}\n" for line in union_fields)
                + "}"
            )
        blocks.append(
            f"impl Default for {name} {{\n"
            "    fn default() -> Self {\n"
            "        Self {\n"
            + "".join(f"            {line}\n" for line in defaults)
            + "        }\n"
            "    }\n"
            "}"
        )
        return "\n\n".join(blocks)

    def generate_preset(self, preset: Preset) -> str:
        structure = self.api.structure(PRESET_STRUCTURE)
        if structure is None:
            raise UnimplementedShape(f"preset {preset.name} needs {PRESET_STRUCTURE}")
        if len(structure.fields) != len(preset.values):
            raise UnimplementedShape(
                f"preset {preset.name} has {len(preset.values)} values for {len(structure.fields)} fields")
        lines = [
            f"    {format_rust_ident(field.name)}: {parse_preset_value(value)!r},"
            for field, value in zip(structure.fields, preset.values)
        ]
        return (
            f"pub const {preset.name}: {PRESET_STRUCTURE} = {PRESET_STRUCTURE} {{\n"
            + "\n".join(lines)
            + "\n};"
        )

    def generate_argument(self, argument: Argument) -> str:
        argument_type = self.format_rust_type(argument.argument_type, argument.as_const, argument.pointer)
        return f"{format_rust_ident(argument.name)}: {argument_type}"

    def generate_callback(self, callback: Callback) -> str:
        arguments = ", ".join(self.generate_argument(argument) for argument in callback.arguments)
        if callback.varargs is not None:
            arguments = f"{arguments}, ..." if arguments else "..."
        signature = f'unsafe extern "C" fn({arguments})'
        if not _is_void(callback.return_type, callback.pointer):
            signature += f" -> {self.format_rust_type(callback.return_type, None, callback.pointer)}"
        return f"pub type {callback.name} = Option<{signature}>;"

    def generate_library(self, group: FunctionGroup) -> str:
        lines = []
        for function in group.functions:
            arguments = ", ".join(self.generate_argument(argument) for argument in function.arguments)
            line = f"    pub fn {function.name}({arguments})"
            if not _is_void(function.return_type):
                line += f" -> {self.format_rust_type(function.return_type)}"
            lines.append(f"{line};")
        return (
            f'#[link(name = "{group.link}")]\n'
            'extern "C" {\n'
            + "\n".join(lines)
            + "\n}"
        )

    def generate(self) -> str:
        api = self.api
        sections = [
            [self.generate_opaque_type(opaque_type) for opaque_type in api.opaque_types],
            [self.generate_type_alias(type_alias) for type_alias in api.type_aliases],
            [self.generate_constant(constant) for constant in api.constants],
            [self.generate_enumeration(enumeration) for enumeration in api.enumerations],
            [self.generate_flags(flags) for flags in api.flags],
            [self.generate_structure(structure) for structure in api.structures],
            [self.generate_preset(preset) for preset in api.presets],
            [self.generate_callback(callback) for callback in api.callbacks],
            [self.generate_library(group) for group in api.functions],
        ]
        errors = [(error.name, f'"{error.string}"') for error in api.errors]
        logger.debug("Rendering ffi layer with %d error strings", len(errors))
        return render_ffi(FfiContext.create(sections=sections, errors=errors))


def generate(api: Api) -> str:
    return FfiGenerator(api).generate()
