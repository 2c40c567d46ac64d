# propprov/lib/dataset.py
# Loaded dataset = symbol table (classes) + relation store.

from __future__ import annotations

from propprov.lib.relations import RelationStore
from propprov.lib.symbols import SymbolTable


class Dataset:
    def __init__(self):
        self.symbols = SymbolTable()
        self.relations = RelationStore()

    @property
    def classes(self):
        return self.symbols.classes

    def reset(self) -> None:
        self.symbols.reset()
        self.relations.clear()
