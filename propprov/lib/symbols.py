# propprov/lib/symbols.py
# Store-based primitive (no Core dependency).
#
# Store shape:
#   classes[class_name] = [Symbol, ...]   (insertion order)
#   _by_key[(class_name, name)] = Symbol  (at most one per pair)
#   _seq[class_name] = last marker handed out

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from propprov.model.errors import DuplicateSymbol
from propprov.model.schema import Symbol

logger = logging.getLogger(__name__)


class SymbolTable:
    def __init__(self):
        self.classes: Dict[str, List[Symbol]] = {}
        self._by_key: Dict[Tuple[str, str], Symbol] = {}
        self._seq: Dict[str, int] = {}

    def reset(self) -> None:
        self.classes.clear()
        self._by_key.clear()
        self._seq.clear()

    def declare_class(self, class_name: str) -> bool:
        if class_name in self.classes:
            return False
        self.classes[class_name] = []
        return True

    def has_class(self, class_name: str) -> bool:
        return class_name in self.classes

    def members(self, class_name: str) -> List[Symbol]:
        return self.classes[class_name]

    def lookup(self, class_name: str, name: str) -> Optional[Symbol]:
        return self._by_key.get((class_name, name))

    def intern(self, class_name: str, name: str, declare: bool = False) -> Symbol:
        """Return the canonical symbol for (class_name, name).

        With declare=True the pair must be new (DuplicateSymbol otherwise).
        New symbols are appended to their class, creating it if needed.
        """
        existing = self._by_key.get((class_name, name))
        if existing is not None:
            if declare:
                raise DuplicateSymbol(f"Class '{class_name}' already contains symbol '{name}'")
            return existing

        # 1, 2, 4, ... (informational only; unbounded in Python)
        seq = self._seq[class_name] << 1 if class_name in self._seq else 1
        self._seq[class_name] = seq

        symb = Symbol(class_name, name, seq)
        self._by_key[(class_name, name)] = symb
        self.declare_class(class_name)
        self.classes[class_name].append(symb)
        logger.debug("Symbols: %s is %d", symb, seq)
        return symb
