"""Renders the safe `lib.rs` layer on top of the raw FFI declarations.

Every C entity is mapped by an explicit `match` over its pointer shape and
either its fundamental type name or its user type category. A combination no
rule covers raises `UnimplementedShape` instead of producing a guess; the
patch tables in `fmodgen.patching` are consulted first and cover the shapes
that cannot be derived mechanically.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from fmodgen import logging as fmodgen_logging
from fmodgen.api import Api, TypeCategory
from fmodgen.errors import UnimplementedShape
from fmodgen.generators.ffi import PointerShape, describe_pointer, split_dimension
from fmodgen.generators.templates import (EnumWrapperContext, HandleContext,
                                          LibContext, MethodContext,
                                          StructWrapperContext,
                                          render_enum_wrapper, render_handle,
                                          render_lib, render_method,
                                          render_struct_wrapper)
from fmodgen.models import (Argument, Enumeration, Field, Function,
                            FundamentalType, ParameterModifier, Structure,
                            UserType)
from fmodgen.naming import (extract_method_name, extract_struct_key,
                            format_argument_ident, format_rust_ident,
                            format_struct_ident, format_variant)
from fmodgen.patching import (ARGUMENT_OVERRIDES, FIELD_PATCHES,
                              ArgumentOverride, FieldPatch)

logger = fmodgen_logging.get_logger(__name__)

RESULT_TYPE = UserType("FMOD_RESULT")

# Structures whose wrapper cannot derive Debug even without a union.
NO_DEBUG_STRUCTURES = frozenset({"FMOD_DSP_DESCRIPTION"})


@dataclass(frozen=True)
class InArgument:
    param: Optional[str]
    input: str
    prep: tuple[str, ...] = ()


@dataclass(frozen=True)
class OutArgument:
    target: str
    source: str
    output: str
    retype: str


def _fundamental_key(shape: PointerShape, name: str) -> str:
    return f"{shape.value}:{name}"


class LibGenerator:
    def __init__(
        self,
        api: Api,
        field_patches: Mapping[tuple[str, str], FieldPatch] = FIELD_PATCHES,
        argument_overrides: Mapping[tuple[str, str], ArgumentOverride] = ARGUMENT_OVERRIDES,
    ):
        self.api = api
        self.field_patches = field_patches
        self.argument_overrides = argument_overrides

    # -- shared type mapping --

    def classify_declared(self, name: str, context: str) -> TypeCategory:
        category = self.api.classify(name)
        if category is TypeCategory.UNKNOWN:
            raise UnimplementedShape(f"{context}: user type {name!r} is not declared by any header")
        return category

    def format_dimension(self, as_array: str) -> str:
        dimension = split_dimension(as_array)
        if dimension.isdigit():
            return dimension
        if self.api.classify(dimension) is TypeCategory.CONSTANT:
            return f"ffi::{dimension}"
        raise UnimplementedShape(f"array dimension {dimension!r} is not a known constant")

    def format_field_type(self, field: Field) -> str:
        shape = describe_pointer(field.as_const, field.pointer)
        c_type = field.field_type
        if isinstance(c_type, FundamentalType):
            match _fundamental_key(shape, c_type.name):
                case "*const:char" | "*mut:char":
                    rust_type = "String"
                case "*const *const:char" | "*mut *mut:char":
                    rust_type = "Vec<String>"
                case "*mut:void":
                    rust_type = "*mut c_void"
                case "*mut:int":
                    rust_type = "Vec<i32>"
                case "*mut:float" | "*mut *mut:float":
                    rust_type = "Vec<f32>"
                case ":unsigned char":
                    rust_type = "u8"
                case ":char":
                    rust_type = "i8"
                case ":int":
                    rust_type = "i32"
                case ":unsigned int":
                    rust_type = "u32"
                case ":short":
                    rust_type = "i16"
                case ":unsigned short":
                    rust_type = "u16"
                case ":long long" | ":long":
                    rust_type = "i64"
                case ":unsigned long long" | ":unsigned long":
                    rust_type = "u64"
                case ":float":
                    rust_type = "f32"
                case key:
                    raise UnimplementedShape(f"field {field.name}: {key}")
        else:
            name = c_type.name
            match (shape, self.api.classify(name)):
                case (PointerShape.MUT, TypeCategory.OPAQUE_TYPE | TypeCategory.STRUCTURE):
                    rust_type = format_struct_ident(name)
                case (PointerShape.MUT_MUT, TypeCategory.STRUCTURE):
                    rust_type = f"Vec<ffi::{name}>"
                case (PointerShape.MUT, TypeCategory.FLAGS):
                    rust_type = f"Vec<ffi::{name}>"
                case (PointerShape.MUT, TypeCategory.ENUMERATION):
                    rust_type = f"Vec<{format_struct_ident(name)}>"
                case (PointerShape.VALUE, TypeCategory.STRUCTURE | TypeCategory.ENUMERATION):
                    rust_type = format_struct_ident(name)
                case (PointerShape.VALUE, TypeCategory.FLAGS | TypeCategory.CALLBACK
                      | TypeCategory.OPAQUE_TYPE | TypeCategory.TYPE_ALIAS):
                    rust_type = f"ffi::{name}"
                case (shape, category):
                    raise UnimplementedShape(f"field {field.name}: {shape.value} {name} ({category.name})")

        if field.as_array is None:
            return rust_type
        return f"[{rust_type}; {self.format_dimension(field.as_array)} as usize]"

    # -- enumerations --

    def generate_enumeration(self, enumeration: Enumeration) -> str:
        variants = [
            (format_variant(enumeration.name, enumerator.name), enumerator.name)
            for enumerator in enumeration.enumerators
            if not enumerator.name.endswith("FORCEINT")
        ]
        return render_enum_wrapper(EnumWrapperContext.create(
            name=format_struct_ident(enumeration.name),
            ffi_name=enumeration.name,
            variants=variants,
        ))

    # -- structures --

    def generate_field_from(self, field: Field) -> str:
        value = f"value.{format_rust_ident(field.name)}"
        shape = describe_pointer(field.as_const, field.pointer)
        c_type = field.field_type
        if isinstance(c_type, FundamentalType):
            if c_type.name == "char" and shape in (PointerShape.CONST, PointerShape.MUT):
                return f"to_string!({value})?"
            return value
        name = format_struct_ident(c_type.name)
        match (shape, self.classify_declared(c_type.name, f"field {field.name}")):
            case (PointerShape.MUT, TypeCategory.OPAQUE_TYPE):
                return f"{name}::from({value})"
            case (PointerShape.MUT, TypeCategory.STRUCTURE):
                return f"{name}::from(*{value})?"
            case (PointerShape.VALUE, TypeCategory.STRUCTURE | TypeCategory.ENUMERATION):
                return f"{name}::from({value})?"
        return value

    def generate_field_into(self, field: Field) -> str:
        value = f"self.{format_argument_ident(field.name)}"
        shape = describe_pointer(field.as_const, field.pointer)
        c_type = field.field_type
        if isinstance(c_type, FundamentalType):
            if c_type.name == "char" and shape in (PointerShape.CONST, PointerShape.MUT):
                return f"move_string_to_c!({value})"
            return value
        match (shape, self.classify_declared(c_type.name, f"field {field.name}")):
            case (PointerShape.MUT, TypeCategory.OPAQUE_TYPE):
                return f"{value}.as_mut_ptr()"
            case (PointerShape.MUT, TypeCategory.STRUCTURE):
                return f"&mut {value}.into()"
            case (PointerShape.VALUE, TypeCategory.STRUCTURE | TypeCategory.ENUMERATION):
                return f"{value}.into()"
        return value

    def generate_structure(self, structure: Structure) -> str:
        fields = []
        from_fields = []
        into_fields = []
        for field in structure.fields:
            wrapper_name = format_argument_ident(field.name)
            ffi_name = format_rust_ident(field.name)
            patch = self.field_patches.get((structure.name, field.name), FieldPatch())

            if patch.excluded:
                if patch.into_expression is None:
                    raise UnimplementedShape(f"excluded field {structure.name}.{field.name} has no value")
                into_fields.append(f"{ffi_name}: {patch.into_expression}")
                continue

            if patch.definition is not None:
                fields.append(patch.definition)
            else:
                fields.append(f"pub {wrapper_name}: {self.format_field_type(field)}")
            from_expression = patch.from_expression or self.generate_field_from(field)
            into_expression = patch.into_expression or self.generate_field_into(field)
            from_fields.append(f"{wrapper_name}: {from_expression}")
            into_fields.append(f"{ffi_name}: {into_expression}")

        if structure.union is not None:
            fields.append(f"pub __union: ffi::{structure.name}__union")
            from_fields.append("__union: value.__union")
            into_fields.append("__union: self.__union")

        if structure.union is not None or structure.name in NO_DEBUG_STRUCTURES:
            derives = ("Clone",)
        else:
            derives = ("Debug", "Clone")
        return render_struct_wrapper(StructWrapperContext.create(
            name=format_struct_ident(structure.name),
            ffi_name=structure.name,
            derives=derives,
            fields=fields,
            from_fields=from_fields,
            into_fields=into_fields,
        ))

    # -- methods --

    def plain_input(self, function: Function, argument: Argument) -> InArgument:
        name = format_argument_ident(argument.name)
        shape = describe_pointer(argument.as_const, argument.pointer)
        c_type = argument.argument_type
        if isinstance(c_type, FundamentalType):
            match _fundamental_key(shape, c_type.name):
                case ":float":
                    return InArgument(f"{name}: f32", name)
                case ":int":
                    return InArgument(f"{name}: i32", name)
                case ":unsigned int":
                    return InArgument(f"{name}: u32", name)
                case ":unsigned long long":
                    return InArgument(f"{name}: u64", name)
                case "*const:char":
                    return InArgument(f"{name}: &str", f"{name}.as_ptr()", (f"let {name} = CString::new({name})?;",))
                case "*mut:void":
                    return InArgument(f"{name}: *mut c_void", name)
                case "*const:void":
                    return InArgument(f"{name}: *const c_void", name)
                case "*mut:float":
                    return InArgument(f"{name}: *mut f32", name)
                case key:
                    raise UnimplementedShape(f"in {function.name}, {argument.name}: {key}")

        user_type = c_type.name
        wrapper = format_struct_ident(user_type)
        match (shape, self.api.classify(user_type)):
            case (PointerShape.MUT, TypeCategory.OPAQUE_TYPE):
                return InArgument(f"{name}: {wrapper}", f"{name}.as_mut_ptr()")
            case (PointerShape.CONST, TypeCategory.STRUCTURE):
                return InArgument(f"{name}: {wrapper}", f"&{name}.into()")
            case (PointerShape.MUT, TypeCategory.STRUCTURE):
                return InArgument(f"{name}: {wrapper}", f"&mut {name}.into()")
            case (PointerShape.VALUE, TypeCategory.STRUCTURE | TypeCategory.ENUMERATION):
                return InArgument(f"{name}: {wrapper}", f"{name}.into()")
            case (PointerShape.VALUE, TypeCategory.TYPE_ALIAS) if user_type == "FMOD_BOOL":
                return InArgument(f"{name}: bool", f"from_bool!({name})")
            case (PointerShape.VALUE, TypeCategory.TYPE_ALIAS) if user_type == "FMOD_PORT_INDEX":
                return InArgument(f"{name}: u64", name)
            case (PointerShape.VALUE, TypeCategory.FLAGS | TypeCategory.CALLBACK):
                return InArgument(f"{name}: ffi::{user_type}", name)
            case (shape, category):
                raise UnimplementedShape(f"in {function.name}, {argument.name}: {shape.value} {user_type} ({category.name})")

    def optional_input(self, function: Function, argument: Argument) -> InArgument:
        name = format_argument_ident(argument.name)
        shape = describe_pointer(argument.as_const, argument.pointer)
        c_type = argument.argument_type
        if isinstance(c_type, FundamentalType):
            match _fundamental_key(shape, c_type.name):
                case ":int":
                    return InArgument(f"{name}: Option<i32>", f"{name}.unwrap_or(0)")
                case ":float":
                    return InArgument(f"{name}: Option<f32>", f"{name}.unwrap_or(0.0)")
                case ":unsigned long long":
                    return InArgument(f"{name}: Option<u64>", f"{name}.unwrap_or(0)")
                case ":unsigned int":
                    return InArgument(f"{name}: Option<u32>", f"{name}.unwrap_or(0)")
                case "*mut:float":
                    return InArgument(f"{name}: Option<*mut f32>", f"{name}.unwrap_or(null_mut())")
                case "*mut:void":
                    return InArgument(f"{name}: Option<*mut c_void>", f"{name}.unwrap_or(null_mut())")
                case "*const:char":
                    return InArgument(
                        f"{name}: Option<String>",
                        f"{name}.as_ref().map_or(null(), |value| value.as_ptr())",
                        (f"let {name} = {name}.map(CString::new).transpose()?;",),
                    )
                case key:
                    raise UnimplementedShape(f"opt {function.name}, {argument.name}: {key}")

        user_type = c_type.name
        wrapper = format_struct_ident(user_type)
        match (shape, self.api.classify(user_type)):
            case (PointerShape.MUT, TypeCategory.STRUCTURE):
                return InArgument(
                    f"{name}: Option<{wrapper}>",
                    f"{name}.as_mut().map_or(null_mut(), |value| value as *mut _)",
                    (f"let mut {name} = {name}.map(|value| value.into());",),
                )
            case (PointerShape.CONST, TypeCategory.STRUCTURE):
                return InArgument(
                    f"{name}: Option<{wrapper}>",
                    f"{name}.as_ref().map_or(null(), |value| value as *const _)",
                    (f"let {name} = {name}.map(|value| value.into());",),
                )
            case (PointerShape.MUT, TypeCategory.OPAQUE_TYPE):
                return InArgument(
                    f"{name}: Option<{wrapper}>",
                    f"{name}.map(|value| value.as_mut_ptr()).unwrap_or(null_mut())",
                )
            case (PointerShape.VALUE, TypeCategory.ENUMERATION):
                return InArgument(f"{name}: Option<{wrapper}>", f"{name}.map(|value| value.into()).unwrap_or(0)")
            case (PointerShape.VALUE, TypeCategory.CALLBACK):
                return InArgument(f"{name}: ffi::{user_type}", name)
            case (shape, category):
                raise UnimplementedShape(f"opt {function.name}, {argument.name}: {shape.value} {user_type} ({category.name})")

    def output(self, function: Function, argument: Argument) -> OutArgument:
        name = format_argument_ident(argument.name)
        shape = describe_pointer(argument.as_const, argument.pointer)
        c_type = argument.argument_type
        if isinstance(c_type, FundamentalType):
            match _fundamental_key(shape, c_type.name):
                case ":int":
                    return OutArgument(f"let mut {name} = i32::default();", name, name, "i32")
                case "*mut:char":
                    return OutArgument(
                        f'let {name} = CString::from_vec_unchecked(b"".to_vec()).into_raw();',
                        name,
                        f"CString::from_raw({name}).into_string().map_err(Error::String)?",
                        "String",
                    )
                case "*mut:float":
                    return OutArgument(f"let mut {name} = f32::default();", f"&mut {name}", name, "f32")
                case "*mut:unsigned long long":
                    return OutArgument(f"let mut {name} = u64::default();", f"&mut {name}", name, "u64")
                case "*mut:long long":
                    return OutArgument(f"let mut {name} = i64::default();", f"&mut {name}", name, "i64")
                case "*mut:unsigned int":
                    return OutArgument(f"let mut {name} = u32::default();", f"&mut {name}", name, "u32")
                case "*mut:int":
                    return OutArgument(f"let mut {name} = i32::default();", f"&mut {name}", name, "i32")
                case "*mut *mut:void":
                    return OutArgument(f"let mut {name} = null_mut();", f"&mut {name}", name, "*mut c_void")
                case "*mut:void":
                    return OutArgument(f"let mut {name} = null_mut();", name, name, "*mut c_void")
                case key:
                    raise UnimplementedShape(f"out {function.name}, {argument.name}: {key}")

        user_type = c_type.name
        wrapper = format_struct_ident(user_type)
        match (shape, self.api.classify(user_type)):
            case (PointerShape.MUT, TypeCategory.TYPE_ALIAS) if user_type == "FMOD_BOOL":
                return OutArgument(
                    f"let mut {name} = ffi::FMOD_BOOL::default();", f"&mut {name}", f"to_bool!({name})", "bool")
            case (PointerShape.MUT, TypeCategory.TYPE_ALIAS) if user_type == "FMOD_PORT_INDEX":
                return OutArgument(f"let mut {name} = u64::default();", f"&mut {name}", name, "u64")
            case (PointerShape.MUT_MUT, TypeCategory.OPAQUE_TYPE):
                return OutArgument(f"let mut {name} = null_mut();", f"&mut {name}", f"{wrapper}::from({name})", wrapper)
            case (PointerShape.MUT, TypeCategory.FLAGS):
                return OutArgument(
                    f"let mut {name} = ffi::{user_type}::default();", f"&mut {name}", name, f"ffi::{user_type}")
            case (PointerShape.MUT, TypeCategory.STRUCTURE | TypeCategory.ENUMERATION):
                return OutArgument(
                    f"let mut {name} = ffi::{user_type}::default();",
                    f"&mut {name}",
                    f"{wrapper}::from({name})?",
                    wrapper,
                )
            case (PointerShape.MUT_MUT, TypeCategory.STRUCTURE):
                return OutArgument(
                    f"let mut {name} = null_mut();", f"&mut {name}", f"to_vec!({name}, 1, {wrapper}::from)?", f"Vec<{wrapper}>")
            case (PointerShape.CONST_CONST, TypeCategory.STRUCTURE):
                return OutArgument(
                    f"let mut {name} = null();", f"&mut {name}", f"to_vec!({name}, 1, {wrapper}::from)?", f"Vec<{wrapper}>")
            case (shape, category):
                raise UnimplementedShape(f"out {function.name}, {argument.name}: {shape.value} {user_type} ({category.name})")

    def is_receiver(self, owner: str, index: int, argument: Argument) -> bool:
        return (
            index == 0
            and argument.argument_type == UserType(owner)
            and describe_pointer(argument.as_const, argument.pointer) is PointerShape.MUT
        )

    def generate_method(self, owner: str, function: Function) -> str:
        if function.name in self.api.function_overrides:
            return self.api.function_overrides[function.name]
        if function.return_type != RESULT_TYPE:
            raise UnimplementedShape(f"{function.name} does not return FMOD_RESULT and has no override")

        params: list[str] = []
        inits: list[str] = []
        inputs: list[str] = []
        outputs: list[str] = []
        return_types: list[str] = []
        for index, argument in enumerate(function.arguments):
            if self.is_receiver(owner, index, argument):
                params.append("&self")
                inputs.append("self.pointer")
                continue

            override = self.argument_overrides.get((function.name, argument.name))
            if override is not None:
                in_argument = InArgument(override.param, override.input, override.prep)
            else:
                match self.api.get_modifier(function.name, argument.name):
                    case ParameterModifier.OUTPUT:
                        out_argument = self.output(function, argument)
                        inits.append(out_argument.target)
                        inputs.append(out_argument.source)
                        outputs.append(out_argument.output)
                        return_types.append(out_argument.retype)
                        continue
                    case ParameterModifier.OPTIONAL:
                        in_argument = self.optional_input(function, argument)
                    case ParameterModifier.NONE:
                        in_argument = self.plain_input(function, argument)

            if in_argument.param is not None:
                params.append(in_argument.param)
            inits.extend(in_argument.prep)
            inputs.append(in_argument.input)

        return render_method(MethodContext.create(
            method=extract_method_name(function.name),
            function=function.name,
            params=params,
            return_type=_pack(return_types),
            inits=inits,
            inputs=inputs,
            output=_pack(outputs),
        ))

    # -- handles --

    def collect_handles(self) -> dict[str, list[Function]]:
        handles: dict[str, list[Function]] = {name: [] for name in sorted({t.name for t in self.api.opaque_types})}
        for function in self.api.all_functions():
            key = extract_struct_key(function.name)
            if key in handles:
                handles[key].append(function)
            else:
                logger.info("Global function: %s", function.name)
        return handles

    def generate_handle(self, key: str, functions: list[Function]) -> str:
        return render_handle(HandleContext.create(
            name=format_struct_ident(key),
            ffi_name=key,
            methods=[self.generate_method(key, function) for function in functions],
        ))

    def generate(self) -> str:
        api = self.api
        handles = self.collect_handles()
        blocks = [
            *(self.generate_enumeration(enumeration) for enumeration in api.enumerations),
            *(self.generate_structure(structure) for structure in api.structures),
            *api.structure_patches.values(),
            *(self.generate_handle(key, functions) for key, functions in handles.items()),
        ]
        logger.debug("Rendering wrapper layer: %d handles, %d blocks", len(handles), len(blocks))
        return render_lib(LibContext.create(blocks=blocks))


def _pack(values: list[str]) -> str:
    if not values:
        return "()"
    if len(values) == 1:
        return values[0]
    return f"({', '.join(values)})"


def generate(api: Api) -> str:
    return LibGenerator(api).generate()
