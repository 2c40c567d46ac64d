# propprov/grammar.py
#
# Input line -> command variant. Parsing only; nothing here touches the
# dataset or the session. Handlers live in topics/ and are looked up by the
# variant's `name`.
#
# Main:
#   exit | help | outfile | classes | relations | load <path>
#   <key> OP <val> SCOPE <element>
#   <key> OP <val>
#   <className>
# TableView:
#   exit | help | break | display | save | p(p|n|f|l|<N>)
#
# Rules are tried in order; the first match wins. Anything else parses to
# Unrecognized.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional, Tuple

from propprov.model.schema import JOIN_OPS, SCOPE_MODES, State


@dataclass(frozen=True)
class Command:
    name: ClassVar[str] = ""


@dataclass(frozen=True)
class Exit(Command):
    name: ClassVar[str] = "exit"


@dataclass(frozen=True)
class Help(Command):
    name: ClassVar[str] = "help"


@dataclass(frozen=True)
class Unrecognized(Command):
    name: ClassVar[str] = "unrecognized"
    text: str = ""


# ---- Main ----

@dataclass(frozen=True)
class Outfile(Command):
    name: ClassVar[str] = "outfile"


@dataclass(frozen=True)
class ListClasses(Command):
    name: ClassVar[str] = "classes"


@dataclass(frozen=True)
class ListRelations(Command):
    name: ClassVar[str] = "relations"


@dataclass(frozen=True)
class Load(Command):
    name: ClassVar[str] = "load"
    path: str = ""


@dataclass(frozen=True)
class ShowClass(Command):
    name: ClassVar[str] = "class"
    class_name: str = ""


@dataclass(frozen=True)
class Relate(Command):
    name: ClassVar[str] = "relate"
    key: str = ""
    op: str = ""
    val: str = ""
    text: str = ""


@dataclass(frozen=True)
class Score(Command):
    name: ClassVar[str] = "score"
    key: str = ""
    op: str = ""
    val: str = ""
    scope: str = ""
    element: str = ""
    text: str = ""

    @property
    def dissimilarity(self) -> bool:
        return SCOPE_MODES[self.scope][0]

    @property
    def display_equality(self) -> bool:
        return SCOPE_MODES[self.scope][1]


# ---- TableView ----

@dataclass(frozen=True)
class Break(Command):
    name: ClassVar[str] = "break"


@dataclass(frozen=True)
class Display(Command):
    name: ClassVar[str] = "display"


@dataclass(frozen=True)
class Save(Command):
    name: ClassVar[str] = "save"


@dataclass(frozen=True)
class Page(Command):
    name: ClassVar[str] = "page"
    # "p" | "n" | "f" | "l" | decimal page number
    target: str = ""


# ---- rules ----

# Names are free text (the loader accepts any class or element name); the
# separating tokens must stand alone between whitespace.
_NAME = r"(.+?)"
_OP = "(" + "|".join(re.escape(op) for op in sorted(JOIN_OPS, key=len, reverse=True)) + ")"
_SCOPE = "(" + "|".join(re.escape(s) for s in sorted(SCOPE_MODES, key=len, reverse=True)) + ")"

Rule = Tuple[re.Pattern, Callable[[re.Match, str], Command]]

MAIN_RULES: List[Rule] = [
    (re.compile(r"^exit$"), lambda m, s: Exit()),
    (re.compile(r"^help$"), lambda m, s: Help()),
    (re.compile(r"^outfile$"), lambda m, s: Outfile()),
    (re.compile(r"^classes$"), lambda m, s: ListClasses()),
    (re.compile(r"^relations$"), lambda m, s: ListRelations()),
    (re.compile(r"^load\s+(.+)$"), lambda m, s: Load(m.group(1).strip())),
    (
        re.compile(rf"^{_NAME}\s+{_OP}\s+{_NAME}\s+{_SCOPE}\s+{_NAME}$"),
        lambda m, s: Score(m.group(1), m.group(2), m.group(3), m.group(4), m.group(5), s),
    ),
    (
        re.compile(rf"^{_NAME}\s+{_OP}\s+{_NAME}$"),
        lambda m, s: Relate(m.group(1), m.group(2), m.group(3), s),
    ),
    (re.compile(r"^(.+)$"), lambda m, s: ShowClass(m.group(1))),
]

TABLE_RULES: List[Rule] = [
    (re.compile(r"^exit$"), lambda m, s: Exit()),
    (re.compile(r"^help$"), lambda m, s: Help()),
    (re.compile(r"^break$"), lambda m, s: Break()),
    (re.compile(r"^display$"), lambda m, s: Display()),
    (re.compile(r"^save$"), lambda m, s: Save()),
    (re.compile(r"^p([0-9]+|p|n|f|l)$"), lambda m, s: Page(m.group(1))),
]

RULES = {
    State.MAIN: MAIN_RULES,
    State.TABLE_VIEW: TABLE_RULES,
}


def parse(state: State, line: str) -> Optional[Command]:
    """Parse one (alias-expanded) line. None for a blank line."""
    s = line.strip()
    if not s:
        return None
    for rx, build in RULES[state]:
        m = rx.match(s)
        if m:
            return build(m, s)
    return Unrecognized(s)


def parse_main(line: str) -> Optional[Command]:
    return parse(State.MAIN, line)


def parse_table(line: str) -> Optional[Command]:
    return parse(State.TABLE_VIEW, line)
