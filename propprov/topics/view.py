# propprov/topics/view.py
#
# TableView commands. The current Selection (core.selection) names the
# relation, the optional scoring reference and the page; every command here
# recomputes the view from it.
#
#   display          page 1
#   p<p|n|f|l|N>     previous / next / first / last / explicit page (clamped)
#   save             append the full table to the output file
#   break            back to Main
#
# Tables are built completely as lists of lines before anything is shown or
# written, and the selection is only replaced after a successful render.

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from propprov.lib import query
from propprov.lib import tables as tbl
from propprov.model.errors import CommandError
from propprov.model.schema import Selection

logger = logging.getLogger(__name__)

EMPTY_TABLE = "Empty table"


def build_view(core, sel: Selection):
    ds = core.dataset
    core._require_relation(sel.key_class, sel.val_class)
    key_members = ds.symbols.members(sel.key_class)
    val_members = ds.symbols.members(sel.val_class)
    rel = ds.relations.pairs_of(sel.key_class, sel.val_class)

    if not sel.is_scoring:
        return query.cross_tab(key_members, val_members, rel)
    return query.score(
        key_members,
        val_members,
        rel,
        sel.reference,
        dissimilarity=sel.dissimilarity,
        display_equality=sel.display_equality,
    )


def key_header(sel: Selection) -> str:
    return f"({sel.key_class}, {sel.val_class})"


def key_label(sel: Selection):
    if not sel.is_scoring:
        return lambda k: k.name
    return lambda k: f"({k.score}) {k.symbol.name}"


def value_label(v) -> str:
    return v.name


def render(core, sel: Selection, page=None) -> List[str]:
    """Lines for `sel` at `page` (None = every column). [] when empty."""
    view = build_view(core, sel)
    header, klabel = key_header(sel), key_label(sel)
    data = tbl.table_data(view, header, klabel, value_label, page=page)
    if data.is_empty:
        return []
    return tbl.draw_table(view, header, klabel, value_label, data=data, page=page, glyphs=core.glyphs)


def render_export(core, sel: Selection) -> List[str]:
    """Every column, no pager line. [] when empty."""
    view = build_view(core, sel)
    return tbl.render_full(view, key_header(sel), key_label(sel), value_label, glyphs=core.glyphs)


def show_page(core, sel: Selection):
    """Render `sel` at its page and make it the current selection."""
    lines = render(core, sel, page=sel.page)
    core.enter_view(sel)
    if not lines:
        return EMPTY_TABLE
    return "\n".join(lines)


def page_count(core, sel: Selection) -> int:
    return len(core.dataset.symbols.members(sel.val_class))


def _require_selection(core) -> Selection:
    if core.selection is None:
        raise CommandError("No table selected")
    return core.selection


def _append_output(path: Path, header: str, lines: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(header + "\n\n")
        for ln in lines:
            f.write(ln + "\n")
        f.write("\n")


# ----------------- commands -----------------

def display(core, cmd):
    sel = _require_selection(core)
    return show_page(core, sel.at_page(1))


def page(core, cmd):
    sel = _require_selection(core)
    num_pages = page_count(core, sel)
    cur = sel.page

    if cmd.target == "p":
        if cur > 1:
            cur -= 1
    elif cmd.target == "n":
        if cur < num_pages:
            cur += 1
    elif cmd.target == "f":
        cur = 1
    elif cmd.target == "l":
        cur = num_pages
    else:
        cur = int(cmd.target)

    cur = tbl.clamp_page(cur, num_pages)
    logger.debug("page %s: %d -> %d of %d", cmd.target, sel.page, cur, num_pages)
    return show_page(core, sel.at_page(cur))


def save(core, cmd):
    sel = _require_selection(core)
    lines = render_export(core, sel)
    if not lines:
        return EMPTY_TABLE
    try:
        _append_output(core.out_path, sel.command, lines)
    except OSError as e:
        raise CommandError(f"Cannot write '{core.out_path}': {e}") from e
    return f"Saved to {core.out_path}"


def break_(core, cmd):
    core.leave_view()
    return None


COMMANDS = {
    "display": (display, "Show the table from page 1",                  "display"),
    "page":    (page,    "Previous / next / first / last / page number", "pp | pn | pf | pl | p<N>"),
    "save":    (save,    "Append the full table to the output file",     "save"),
    "break":   (break_,  "Leave the table view",                         "break"),
}
