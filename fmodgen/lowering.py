"""Turn lark parse trees into model entities.

Lowering happens in two steps. `convert` walks a tree generically, using only
the rule kinds attached by the grammar loader: leaves become text, LIST rules
become Python lists and RECORD rules become dicts keyed by child rule name.
The `decode_*` functions then build the frozen model records out of those
plain values. An empty LIST or RECORD comes through `convert` as the text
leaf ``""``, so every decoder accepts a string where it expects a list or dict.
"""

from typing import Any, Callable, Iterable

from lark import Tree
from lark.exceptions import UnexpectedInput

from fmodgen import logging as fmodgen_logging
from fmodgen.errors import HeaderMalformed, HeaderSyntaxError
from fmodgen.grammars import Grammar, RuleKind, load_grammar
from fmodgen.models import (Argument, Callback, Constant, DoublePointer,
                            Enumeration, Enumerator, ErrorString, Field, Flag,
                            Flags, Function, FundamentalType, Header,
                            NormalPointer, OpaqueType, Pointer, Preset,
                            Structure, Type, TypeAlias, Union, UserType)

logger = fmodgen_logging.get_logger(__name__)

Lowered = str | list | dict


def convert(tree: Tree, grammar: Grammar) -> Lowered:
    subtrees = [child for child in tree.children if isinstance(child, Tree)]
    if not subtrees:
        return " ".join(str(token) for token in tree.children)
    if grammar.kind_of(str(tree.data)) is RuleKind.LIST:
        return [convert(child, grammar) for child in subtrees]
    return {str(child.data): convert(child, grammar) for child in subtrees}


def _as_list(value: Lowered) -> list:
    return value if isinstance(value, list) else []


def _as_record(value: Lowered) -> dict:
    return value if isinstance(value, dict) else {}


def _text(record: dict, key: str) -> str | None:
    value = record.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected text for {key}, got {type(value).__name__}")
    return value


def _normalise(text: str) -> str:
    return " ".join(text.split())


def decode_type(record: dict) -> Type:
    if "fundamental_type" in record:
        return FundamentalType(_normalise(record["fundamental_type"]))
    if "user_type" in record:
        return UserType(record["user_type"])
    raise KeyError("neither fundamental_type nor user_type present")


def decode_pointer(value: Lowered | None) -> Pointer | None:
    record = _as_record(value) if value is not None else {}
    if "double_pointer" in record:
        return DoublePointer(_normalise(record["double_pointer"]))
    if "normal_pointer" in record:
        return NormalPointer(record["normal_pointer"])
    return None


def decode_opaque_type(record: dict) -> OpaqueType:
    return OpaqueType(record["name"])


def decode_constant(record: dict) -> Constant:
    return Constant(record["name"], record["value"])


def decode_type_alias(record: dict) -> TypeAlias:
    return TypeAlias(decode_type(record), record["name"])


def decode_flags(record: dict) -> Flags:
    flags = tuple(
        Flag(flag["name"], _normalise(flag["flag_value"]))
        for flag in map(_as_record, _as_list(record.get("flags", "")))
    )
    return Flags(decode_type(record), record["name"], flags)


def decode_enumeration(record: dict) -> Enumeration:
    enumerators = tuple(
        Enumerator(enumerator["name"], _text(enumerator, "enumerator_value"))
        for enumerator in map(_as_record, _as_list(record.get("enumerators", "")))
    )
    return Enumeration(record["name"], enumerators)


def decode_field(record: dict) -> Field:
    as_array = _text(record, "as_array")
    return Field(
        field_type=decode_type(record),
        name=record["name"],
        as_const=_text(record, "as_const"),
        as_array="".join(as_array.split()) if as_array else None,
        pointer=decode_pointer(record.get("pointer")),
    )


def _decode_fields(value: Lowered) -> tuple[Field, ...]:
    return tuple(decode_field(_as_record(field)) for field in _as_list(value))


def decode_structure(record: dict) -> Structure:
    union = None
    if "union" in record:
        union = Union(_decode_fields(_as_record(record["union"]).get("fields", "")))
    return Structure(record["name"], _decode_fields(record.get("fields", "")), union)


def decode_argument(record: dict) -> Argument:
    return Argument(
        argument_type=decode_type(record),
        name=record["name"],
        as_const=_text(record, "as_const"),
        pointer=decode_pointer(record.get("pointer")),
    )


def _decode_arguments(value: Lowered) -> tuple[Argument, ...]:
    return tuple(decode_argument(_as_record(argument)) for argument in _as_list(value))


def decode_callback(record: dict) -> Callback:
    varargs = _text(record, "varargs")
    return Callback(
        return_type=decode_type(_as_record(record["return_type"])),
        name=record["name"],
        arguments=_decode_arguments(record.get("arguments", "")),
        pointer=decode_pointer(record.get("pointer")),
        varargs="..." if varargs else None,
    )


def decode_function(record: dict) -> Function:
    return Function(
        return_type=decode_type(_as_record(record["return_type"])),
        name=record["name"],
        arguments=_decode_arguments(record.get("arguments", "")),
    )


def decode_preset(record: dict) -> Preset:
    return Preset(record["name"], tuple(_as_list(record.get("values", ""))))


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def decode_error_table(record: dict) -> list[ErrorString]:
    return [
        ErrorString(entry["name"], _unquote(entry["string"]))
        for entry in map(_as_record, _as_list(record.get("error_strings", "")))
    ]


# Declaration rule -> (Header collection, decoder).
_DECODERS: dict[str, tuple[str, Callable[[dict], Any]]] = {
    "opaque_type": ("opaque_types", decode_opaque_type),
    "constant": ("constants", decode_constant),
    "bit_flags": ("flags", decode_flags),
    "type_alias": ("type_aliases", decode_type_alias),
    "enumeration": ("enumerations", decode_enumeration),
    "structure": ("structures", decode_structure),
    "callback": ("callbacks", decode_callback),
    "function": ("functions", decode_function),
    "preset": ("presets", decode_preset),
    "error_table": ("errors", decode_error_table),
}


def lower(tree: Tree, grammar: Grammar, declarations: Iterable[str]) -> Header:
    if str(tree.data) != "api":
        raise HeaderMalformed(grammar.dialect, f"expected an api node at the root, found {tree.data}")

    accepted = frozenset(declarations)
    collected: dict[str, list] = {}
    for child in tree.children:
        if not isinstance(child, Tree):
            continue
        rule = str(child.data)
        if rule not in _DECODERS:
            # noise, prototypes and other recognised-but-empty shapes
            continue
        if rule not in accepted:
            raise HeaderMalformed(grammar.dialect, f"unexpected {rule} declaration")
        collection, decoder = _DECODERS[rule]
        decoded = decoder(_as_record(convert(child, grammar)))
        if isinstance(decoded, list):
            collected.setdefault(collection, []).extend(decoded)
        else:
            collected.setdefault(collection, []).append(decoded)

    return Header(**{collection: tuple(entities) for collection, entities in collected.items()})


def _position(value: Any) -> int | None:
    # lark reports -1 at end of input and "?" for tokens without a position
    return value if isinstance(value, int) and value > 0 else None


def _summary(error: UnexpectedInput) -> str:
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__


def parse_header(dialect: str, source: str, declarations: Iterable[str]) -> Header:
    """Parse one header's text with its dialect grammar and lower the result."""
    grammar = load_grammar(dialect)
    if not source.endswith("\n"):
        source += "\n"
    try:
        tree = grammar.parser.parse(source)
    except UnexpectedInput as e:
        raise HeaderSyntaxError(dialect, _position(e.line), _position(e.column), _summary(e)) from e

    header = lower(tree, grammar, declarations)
    logger.debug("Parsed %s: %s", dialect, {name: len(getattr(header, name)) for name in header.__dataclass_fields__})
    return header
