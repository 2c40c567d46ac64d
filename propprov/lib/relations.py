# propprov/lib/relations.py
# Store-based primitive (no Core dependency).
#
# Store shape:
#   _pairs[(key_class, val_class)] = [(a, b), ...]   ordered, no duplicates
#   _index[(key_class, val_class)] = {(a, b), ...}   membership shadow
#
# Every declared direction has its inverse declared alongside it.

from __future__ import annotations

import logging
from typing import Dict, List, Set, Tuple

from propprov.model.errors import DuplicateRelationElement, SelfRelation
from propprov.model.schema import Symbol

logger = logging.getLogger(__name__)

Pair = Tuple[Symbol, Symbol]
RelKey = Tuple[str, str]


class RelationStore:
    def __init__(self):
        self._pairs: Dict[RelKey, List[Pair]] = {}
        self._index: Dict[RelKey, Set[Pair]] = {}

    def clear(self) -> None:
        self._pairs.clear()
        self._index.clear()

    def declare(self, class_a: str, class_b: str) -> bool:
        """Create (A,B) and (B,A) if absent. True if they were created."""
        if class_a == class_b:
            raise SelfRelation("A class is not allowed to relate to itself")
        if (class_a, class_b) in self._pairs:
            return False
        for key in ((class_a, class_b), (class_b, class_a)):
            self._pairs[key] = []
            self._index[key] = set()
        logger.debug("Relations: declared (%s, %s) and inverse", class_a, class_b)
        return True

    def has(self, class_a: str, class_b: str) -> bool:
        return (class_a, class_b) in self._pairs

    def keys(self) -> List[RelKey]:
        return list(self._pairs.keys())

    def pairs_of(self, class_a: str, class_b: str) -> List[Pair]:
        return list(self._pairs[(class_a, class_b)])

    def contains(self, class_a: str, class_b: str, a: Symbol, b: Symbol) -> bool:
        return (a, b) in self._index.get((class_a, class_b), ())

    def add_pair(self, key_class: str, val_class: str, a: Symbol, b: Symbol) -> None:
        key = (key_class, val_class)
        if key not in self._pairs:
            raise KeyError(f"Relation not declared: {key_class}, {val_class}")
        if (a, b) in self._index[key]:
            raise DuplicateRelationElement(
                f"relation '{key_class}, {val_class}' already contains an element '{a.name}, {b.name}'"
            )
        self._pairs[key].append((a, b))
        self._index[key].add((a, b))

    def relate(self, a: Symbol, b: Symbol) -> bool:
        """Insert (a, b) and its mirror (b, a) together.

        Returns True if the relation directions were newly declared.
        """
        created = self.declare(a.class_name, b.class_name)
        # both checks before any mutation so the two directions stay mirrored
        if self.contains(a.class_name, b.class_name, a, b) or self.contains(b.class_name, a.class_name, b, a):
            raise DuplicateRelationElement(
                f"relation '{a.class_name}, {b.class_name}' already contains an element '{a.name}, {b.name}'"
            )
        self.add_pair(a.class_name, b.class_name, a, b)
        self.add_pair(b.class_name, a.class_name, b, a)
        return created
