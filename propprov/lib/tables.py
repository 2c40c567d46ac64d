# propprov/lib/tables.py
# Fixed-width bordered table drawing (no Core dependency).
#
# Input shape (see lib/query.py):
#   table = [Group(key, [(value, flag), ...]), ...]
#   every row carries the same values in the same order
#
# Layout (ASCII glyphs, page mode, page 2 of 3):
#   +--------+-----+
#   | header | 2/3 |
#   +--------+-----+
#   | row    | val |
#   | row    |     |
#   +--------+-----+
#             < >
#
# A page is one value column (1-based). Full mode (page=None) draws them all.
# All columns share one width: the widest value label or column label.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from propprov.model.errors import ConsistencyError
from propprov.model.schema import Group

logger = logging.getLogger(__name__)


class Glyphs(NamedTuple):
    h: str
    v: str
    tl: str
    tm: str
    tr: str
    ml: str
    mm: str
    mr: str
    bl: str
    bm: str
    br: str


ASCII = Glyphs("-", "|", "+", "+", "+", "+", "+", "+", "+", "+", "+")
UNICODE = Glyphs("─", "│", "┌", "┬", "┐", "├", "┼", "┤", "└", "┴", "┘")

PAGER = "< >"


@dataclass(frozen=True)
class TableData:
    total_cols: int
    rows: int
    key_col_width: int
    page: Optional[int]       # clamped; None in full mode
    initial_col: int          # 1-based, inclusive
    final_col: int            # 1-based, exclusive
    val_col_width: int
    total_width: int
    total_height: int         # includes the pager line in page mode

    @property
    def is_empty(self) -> bool:
        return self.rows == 0 or self.total_cols == 0

    @property
    def visible(self) -> range:
        """0-based indices of the drawn value columns."""
        return range(self.initial_col - 1, self.final_col - 1)


def clamp_page(page: int, total_cols: int) -> int:
    if page > total_cols:
        page = total_cols
    if page < 1:
        page = 1
    return page


def column_label(i: int, total_cols: int) -> str:
    return f"{i + 1}/{total_cols}"


def table_data(
    table: Sequence[Group],
    key_header: str,
    key_label: Callable[[Any], str],
    value_label: Callable[[Any], str],
    page: Optional[int] = None,
) -> TableData:
    """Size the table without drawing it."""
    rows = len(table)
    total_cols = max((len(g.cells) for g in table), default=0)
    key_w = max([len(key_label(g.key)) for g in table] + [len(key_header)])

    if page is not None:
        page = clamp_page(page, total_cols)
        initial, final = page, min(page + 1, total_cols + 1)
    else:
        initial, final = 1, total_cols + 1
    ncols = max(final - initial, 0)

    val_w = max(
        [len(value_label(v)) for g in table for v, _ in g.cells]
        + ([len(column_label(total_cols - 1, total_cols))] if total_cols else [0])
    )

    total_width = key_w + 4 + (val_w + 3) * ncols
    total_height = 4 + rows + (1 if page is not None else 0)
    logger.debug(
        "table_data: cols=%d page=%s [%d, %d) key_w=%d val_w=%d size=%dx%d",
        total_cols, page, initial, final, key_w, val_w, total_width, total_height,
    )
    return TableData(
        total_cols=total_cols,
        rows=rows,
        key_col_width=key_w,
        page=page,
        initial_col=initial,
        final_col=final,
        val_col_width=val_w,
        total_width=total_width,
        total_height=total_height,
    )


def check_columns(table: Sequence[Group]) -> None:
    """Every row must carry the same values in the same order."""
    expected = None
    for g in table:
        names = [v for v, _ in g.cells]
        if expected is None:
            expected = names
        elif names != expected:
            raise ConsistencyError(
                "Inconsistent columns: expected "
                + ", ".join(f"'{v}'" for v in expected)
                + " but got "
                + ", ".join(f"'{v}'" for v in names)
            )


def _rule(data: TableData, left: str, mid: str, right: str, h: str) -> str:
    parts = [left, h * (data.key_col_width + 2)]
    for _ in data.visible:
        parts.append(mid)
        parts.append(h * (data.val_col_width + 2))
    parts.append(right)
    return "".join(parts)


def _line(data: TableData, v: str, key_text: str, cells: List[str]) -> str:
    parts = [v, " ", key_text.ljust(data.key_col_width), " ", v]
    for text in cells:
        parts.append(" " + text.ljust(data.val_col_width) + " " + v)
    return "".join(parts)


def draw_table(
    table: Sequence[Group],
    key_header: str,
    key_label: Callable[[Any], str],
    value_label: Callable[[Any], str],
    data: Optional[TableData] = None,
    page: Optional[int] = None,
    glyphs: Glyphs = ASCII,
) -> List[str]:
    """Return the table as a list of lines ([] for an empty view).

    `data` may be passed in when the caller already sized the table.
    """
    if data is None:
        data = table_data(table, key_header, key_label, value_label, page)
    if data.is_empty:
        return []
    check_columns(table)

    g = glyphs
    lines = [
        _rule(data, g.tl, g.tm, g.tr, g.h),
        _line(data, g.v, key_header, [column_label(i, data.total_cols) for i in data.visible]),
        _rule(data, g.ml, g.mm, g.mr, g.h),
    ]
    for row in table:
        cells = []
        for i in data.visible:
            value, marked = row.cells[i]
            cells.append(value_label(value) if marked else "")
        lines.append(_line(data, g.v, key_label(row.key), cells))
    lines.append(_rule(data, g.bl, g.bm, g.br, g.h))

    if data.page is not None:
        lines.append(" " * (data.key_col_width + 2) + PAGER)
    return lines


def render_full(
    table: Sequence[Group],
    key_header: str,
    key_label: Callable[[Any], str],
    value_label: Callable[[Any], str],
    glyphs: Glyphs = ASCII,
) -> List[str]:
    """Unpaginated rendering (every column), used for file export."""
    return draw_table(table, key_header, key_label, value_label, page=None, glyphs=glyphs)
