import re
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from lark import Lark

_GRAMMAR_DIR = Path(__file__).resolve().parent
_SHARED_GRAMMAR = "declarations.lark"

DIALECTS = (
    "fmod",
    "fmod_studio",
    "fmod_common",
    "fmod_studio_common",
    "fmod_codec",
    "fmod_output",
    "fmod_dsp",
    "fmod_dsp_effects",
    "fmod_errors",
)

LIST_MARKER = "//@list"
_MARKED_RULE = re.compile(rf"^{LIST_MARKER}[ \t]*\r?\n[?!]?(\w+)[ \t]*:", re.MULTILINE)


class RuleKind(Enum):
    LIST = auto()
    RECORD = auto()


@dataclass(frozen=True)
class Grammar:
    dialect: str
    parser: Lark
    kinds: Mapping[str, RuleKind]

    def kind_of(self, rule: str) -> RuleKind:
        return self.kinds.get(rule, RuleKind.RECORD)


def grammar_source(dialect: str) -> str:
    if dialect not in DIALECTS:
        raise ValueError(f"Unknown header dialect: {dialect}")
    shared = (_GRAMMAR_DIR / _SHARED_GRAMMAR).read_text(encoding="utf-8")
    own = (_GRAMMAR_DIR / f"{dialect}.lark").read_text(encoding="utf-8")
    return f"{shared}\n{own}"


def declared_list_rules(source: str) -> frozenset[str]:
    """Names of the rules marked with `//@list` in a grammar source."""
    marked = _MARKED_RULE.findall(source)
    if len(marked) != source.count(LIST_MARKER):
        raise ValueError(f"every {LIST_MARKER} marker must sit on the line above a rule definition")
    return frozenset(marked)


@lru_cache(maxsize=None)
def load_grammar(dialect: str) -> Grammar:
    source = grammar_source(dialect)
    list_rules = declared_list_rules(source)
    parser = Lark(source, start="api", parser="lalr", lexer="contextual")
    kinds = {}
    for rule in parser.rules:
        name = str(rule.origin.name)
        kinds[name] = RuleKind.LIST if name in list_rules else RuleKind.RECORD
    return Grammar(dialect, parser, MappingProxyType(kinds))
