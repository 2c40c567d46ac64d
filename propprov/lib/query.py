# propprov/lib/query.py
# Pure view builders over class members and relation pairs (no Core dependency).
#
# Both views are the cartesian product key_class x val_class left-joined
# against the relation:
#   cross_tab  row key = Symbol,                cell flag = a has b
#   score      row key = ScoredKey(a, total),   cell flag = membership or
#                                               agreement with the reference
#
# Callers validate inputs (reference must belong to key_class).

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Set, Tuple

from propprov.model.schema import Group, ScoredKey, Symbol


@dataclass(frozen=True)
class ScoreCell:
    a: Symbol
    b: Symbol
    a_has_b: bool
    reference_has_b: bool
    equal: bool
    point: int


def _pair_set(relation: Iterable[Tuple[Symbol, Symbol]]) -> Set[Tuple[Symbol, Symbol]]:
    return relation if isinstance(relation, (set, frozenset)) else set(relation)


def cross_tab(
    key_class: Sequence[Symbol],
    val_class: Sequence[Symbol],
    relation: Iterable[Tuple[Symbol, Symbol]],
) -> List[Group]:
    rel = _pair_set(relation)
    return [Group(a, [(b, (a, b) in rel) for b in val_class]) for a in key_class]


def score_cells(
    key_class: Sequence[Symbol],
    val_class: Sequence[Symbol],
    relation: Iterable[Tuple[Symbol, Symbol]],
    reference: Symbol,
    dissimilarity: bool = False,
) -> List[List[ScoreCell]]:
    """Per-pair scoring records, one inner list per key_class element."""
    rel = _pair_set(relation)
    reference_has = {b: (reference, b) in rel for b in val_class}

    rows = []
    for a in key_class:
        row = []
        for b in val_class:
            a_has_b = (a, b) in rel
            equal = a_has_b == reference_has[b]
            point = 1 if equal == (not dissimilarity) else 0
            row.append(ScoreCell(a, b, a_has_b, reference_has[b], equal, point))
        rows.append(row)
    return rows


def score(
    key_class: Sequence[Symbol],
    val_class: Sequence[Symbol],
    relation: Iterable[Tuple[Symbol, Symbol]],
    reference: Symbol,
    dissimilarity: bool = False,
    display_equality: bool = False,
) -> List[Group]:
    """Rank key_class rows by agreement (or disagreement) with `reference`.

    Rows are ordered by descending total; ties keep key_class order.
    Cell flags show raw membership, or, with display_equality, whether the
    row matches the reference (inverted under dissimilarity, so True reads
    as "differs from reference").
    """
    groups = []
    for a, row in zip(key_class, score_cells(key_class, val_class, relation, reference, dissimilarity)):
        total = sum(c.point for c in row)
        if display_equality:
            cells = [(c.b, c.equal != dissimilarity) for c in row]
        else:
            cells = [(c.b, c.a_has_b) for c in row]
        groups.append(Group(ScoredKey(a, total), cells))

    # sorted() is stable
    return sorted(groups, key=lambda g: g.key.score, reverse=True)
