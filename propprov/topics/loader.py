# propprov/topics/loader.py
#
# Dataset file -> Dataset (filesystem boundary).
#
# File format (UTF-8, one declaration per line):
#   # comment            // comment           (blank lines ignored)
#   Fruit, Apple         class element        (unqualified terms)
#   Fruit.Apple, Color.Red                    relation element (qualified terms)
#
# Classes must be declared before a relation line names them. Every relation
# line populates both directions (Fruit,Color) and (Color,Fruit).

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from propprov.lib.dataset import Dataset
from propprov.model.errors import (
    DuplicateRelationElement,
    DuplicateSymbol,
    ParseError,
    SelfRelation,
)
from propprov.model.schema import Symbol

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("//", "#")


@dataclass
class LoadStats:
    classes_constructed: int = 0
    class_elements_added: int = 0
    relations_defined: int = 0
    relation_elements_defined: int = 0

    def summary_lines(self):
        return [
            f"{self.classes_constructed} classes constructed",
            f"{self.class_elements_added} class elements added",
            f"{self.relations_defined} relations defined",
            f"{self.relation_elements_defined} relation elements defined",
        ]


def _read_utf8_strict(p: Path) -> str:
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"UTF-8 decode error in file: {p} :: {e}") from e
    except OSError as e:
        raise ParseError(f"Cannot read file: {p} :: {e}") from e


def _eval_term(ds: Dataset, term: str, lineno: int, tno: int) -> Symbol:
    sp = term.split(".")
    if len(sp) != 2:
        raise ParseError(f"term {tno}: two components expected, but {len(sp)} found", lineno)
    clss, el = sp[0].strip(), sp[1].strip()
    if not ds.symbols.has_class(clss):
        raise ParseError(f"term {tno}: undeclared class '{clss}'", lineno)
    symb = ds.symbols.lookup(clss, el)
    if symb is None:
        raise ParseError(f"term {tno}: undeclared element '{clss}.{el}'", lineno)
    return symb


def parse_lines(ds: Dataset, lines) -> LoadStats:
    """Populate `ds` from an iterable of text lines (not reset here)."""
    stats = LoadStats()

    for i, raw in enumerate(lines):
        lineno = i + 1
        ln = raw.strip()
        if not ln or ln.startswith(COMMENT_PREFIXES):
            continue

        spl = ln.split(",")
        if len(spl) != 2:
            raise ParseError(f"2 terms expected, but {len(spl)} found", lineno)
        a, b = spl[0].strip(), spl[1].strip()
        if not a or not b:
            raise ParseError("empty term", lineno)

        a_qualified = "." in a
        b_qualified = "." in b
        if a_qualified != b_qualified:
            raise ParseError(f"term {'2' if a_qualified else '1'}: missing qualification", lineno)

        if not a_qualified:
            # class element
            if ds.symbols.declare_class(a):
                stats.classes_constructed += 1
            try:
                ds.symbols.intern(a, b, declare=True)
            except DuplicateSymbol as e:
                raise ParseError(str(e), lineno) from e
            stats.class_elements_added += 1
            continue

        # relation element
        ra = _eval_term(ds, a, lineno, 1)
        rb = _eval_term(ds, b, lineno, 2)
        try:
            if ds.relations.relate(ra, rb):
                stats.relations_defined += 2
        except (SelfRelation, DuplicateRelationElement) as e:
            raise ParseError(str(e), lineno) from e
        stats.relation_elements_defined += 2

    return stats


def load_file(ds: Dataset, path: Path) -> LoadStats:
    """Reset `ds`, then load `path` into it.

    The reset happens first: a failed load leaves an empty dataset.
    """
    ds.reset()
    text = _read_utf8_strict(Path(path))
    logger.debug("Loading %s", path)
    try:
        stats = parse_lines(ds, text.splitlines())
    except ParseError:
        ds.reset()
        raise
    logger.debug("Loaded %s: %s", path, stats)
    return stats
