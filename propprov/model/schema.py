# propprov/model/schema.py
#
# Data shapes shared by lib/ (stores, engine, renderer) and topics/ (handlers).
#
#   Symbol     (class_name, name)    identity of one class element
#   ScoredKey  (symbol, score)       row key of a scoring view
#   Group      (key, cells)          one view row; cells = [(Symbol, flag), ...]
#   Selection                        TableView session state (owned by Core)

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Tuple


class State(Enum):
    MAIN = "main"
    TABLE_VIEW = "table_view"


# -----------------------------
# grammar tokens
# -----------------------------

JOIN_OPS = ("#", "x", "v", "vs", "vs.")

# token -> (dissimilarity, display_equality)
SCOPE_MODES = {
    ".":  (False, False),
    "..": (False, True),
    ",":  (True, False),
    ",,": (True, True),
}


@dataclass(frozen=True)
class Symbol:
    class_name: str
    name: str
    # Debug-only per-class marker (1, 2, 4, ...). Not part of identity.
    seq: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.class_name}.{self.name}"


class ScoredKey(NamedTuple):
    symbol: Symbol
    score: int


class Group(NamedTuple):
    key: Any                          # Symbol | ScoredKey
    cells: List[Tuple[Symbol, bool]]


@dataclass(frozen=True)
class Selection:
    key_class: str
    val_class: str
    command: str                      # originating input line (save header)
    reference: Optional[Symbol] = None
    dissimilarity: bool = False
    display_equality: bool = False
    page: int = 1

    @property
    def is_scoring(self) -> bool:
        return self.reference is not None

    def at_page(self, page: int) -> "Selection":
        return replace(self, page=page)
