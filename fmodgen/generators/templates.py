from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Sequence

from jinja2 import Environment, FileSystemLoader

_TEMPLATE_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=None)
def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(_TEMPLATE_DIR),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _normalize_lines(lines: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    for entry in lines:
        if entry is None:
            continue
        parts = str(entry).splitlines()
        if not parts:
            normalized.append("")
            continue
        normalized.extend(parts)
    return tuple(normalized)


def _normalize_blocks(blocks: Iterable[str]) -> tuple[str, ...]:
    return tuple(str(block).strip("\n") for block in blocks if block)


@dataclass(frozen=True)
class FfiContext:
    """Template inputs for the raw FFI artifact."""

    sections: tuple[tuple[str, ...], ...]
    errors: tuple[dict[str, str], ...]

    @classmethod
    def create(
        cls,
        *,
        sections: Sequence[Iterable[str]],
        errors: Iterable[tuple[str, str]],
    ) -> "FfiContext":
        return cls(
            sections=tuple(_normalize_blocks(section) for section in sections),
            errors=tuple({"name": name, "string": string} for name, string in errors),
        )

    def as_template_args(self) -> dict[str, Any]:
        return {
            "sections": self.sections,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class LibContext:
    """Template inputs for the wrapper artifact."""

    blocks: tuple[str, ...]

    @classmethod
    def create(cls, *, blocks: Iterable[str]) -> "LibContext":
        return cls(blocks=_normalize_blocks(blocks))

    def as_template_args(self) -> dict[str, Any]:
        return {"blocks": self.blocks}


@dataclass(frozen=True)
class EnumWrapperContext:
    """Template inputs for a checked wrapper enum."""

    name: str
    ffi_name: str
    variants: tuple[dict[str, str], ...]

    @classmethod
    def create(
        cls,
        *,
        name: str,
        ffi_name: str,
        variants: Iterable[tuple[str, str]],
    ) -> "EnumWrapperContext":
        return cls(
            name=name,
            ffi_name=ffi_name,
            variants=tuple({"name": variant, "enumerator": enumerator} for variant, enumerator in variants),
        )

    def as_template_args(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ffi_name": self.ffi_name,
            "variants": self.variants,
        }


@dataclass(frozen=True)
class StructWrapperContext:
    """Template inputs for an owned wrapper structure and its conversions."""

    name: str
    ffi_name: str
    derives: tuple[str, ...]
    fields: tuple[str, ...]
    from_fields: tuple[str, ...]
    into_fields: tuple[str, ...]

    @classmethod
    def create(
        cls,
        *,
        name: str,
        ffi_name: str,
        derives: Iterable[str],
        fields: Iterable[str],
        from_fields: Iterable[str],
        into_fields: Iterable[str],
    ) -> "StructWrapperContext":
        return cls(
            name=name,
            ffi_name=ffi_name,
            derives=tuple(derives),
            fields=_normalize_lines(fields),
            from_fields=_normalize_lines(from_fields),
            into_fields=_normalize_lines(into_fields),
        )

    def as_template_args(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ffi_name": self.ffi_name,
            "derives": self.derives,
            "fields": self.fields,
            "from_fields": self.from_fields,
            "into_fields": self.into_fields,
        }


@dataclass(frozen=True)
class MethodContext:
    """Template inputs for one generated handle method."""

    method: str
    function: str
    params: tuple[str, ...]
    return_type: str
    inits: tuple[str, ...]
    inputs: tuple[str, ...]
    output: str

    @classmethod
    def create(
        cls,
        *,
        method: str,
        function: str,
        params: Iterable[str],
        return_type: str,
        inits: Iterable[str],
        inputs: Iterable[str],
        output: str,
    ) -> "MethodContext":
        return cls(
            method=method,
            function=function,
            params=tuple(params),
            return_type=return_type,
            inits=_normalize_lines(inits),
            inputs=tuple(inputs),
            output=output,
        )

    def as_template_args(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "function": self.function,
            "params": self.params,
            "return_type": self.return_type,
            "inits": self.inits,
            "inputs": self.inputs,
            "output": self.output,
        }


@dataclass(frozen=True)
class HandleContext:
    """Template inputs for an opaque handle wrapper."""

    name: str
    ffi_name: str
    methods: tuple[str, ...]

    @classmethod
    def create(cls, *, name: str, ffi_name: str, methods: Iterable[str]) -> "HandleContext":
        return cls(name=name, ffi_name=ffi_name, methods=_normalize_blocks(methods))

    def as_template_args(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ffi_name": self.ffi_name,
            "methods": self.methods,
        }


def _render(template_name: str, args: dict[str, Any]) -> str:
    return _get_env().get_template(template_name).render(args)


def render_ffi(context: FfiContext) -> str:
    return _render("ffi.rs.j2", context.as_template_args())


def render_lib(context: LibContext) -> str:
    return _render("lib.rs.j2", context.as_template_args())


def render_enum_wrapper(context: EnumWrapperContext) -> str:
    return _render("enum_wrapper.rs.j2", context.as_template_args()).rstrip("\n")


def render_struct_wrapper(context: StructWrapperContext) -> str:
    return _render("struct_wrapper.rs.j2", context.as_template_args()).rstrip("\n")


def render_method(context: MethodContext) -> str:
    return _render("method.rs.j2", context.as_template_args()).rstrip("\n")


def render_handle(context: HandleContext) -> str:
    return _render("handle.rs.j2", context.as_template_args()).rstrip("\n")
