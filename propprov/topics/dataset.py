# propprov/topics/dataset.py
#
# Main-state commands: dataset loading, browsing, and opening a table view.
#
#   load <path>                         replace the dataset with a file
#   classes | relations | <className>   browse (any other line is unrecognized)
#   outfile                             where `save` appends
#   <key> OP <val>                      relation table
#   <key> OP <val> SCOPE <element>      scoring table against <element>

from __future__ import annotations

from pathlib import Path

from propprov.model.errors import CommandError
from propprov.model.schema import Selection
from propprov.topics.loader import load_file
from propprov.topics.view import show_page


def _resolve_path(raw: str) -> Path:
    p = Path(raw).expanduser()
    if not p.is_absolute():
        # qualify with the current directory
        p = Path.cwd() / p
    return p


def load(core, cmd):
    p = _resolve_path(cmd.path)
    if not p.is_file():
        raise CommandError(f"The file '{p}' was not found")
    stats = load_file(core.dataset, p)
    return "\n".join(stats.summary_lines())


def classes_ls(core, cmd):
    names = list(core.dataset.classes.keys())
    return ", ".join(names) if names else "No loaded classes"


def relations_ls(core, cmd):
    keys = core.dataset.relations.keys()
    return ", ".join(f"({a}, {b})" for a, b in keys) if keys else "No loaded relations"


def class_show(core, cmd):
    # last Main rule: any line that names no class is not a command
    if not core.dataset.symbols.has_class(cmd.class_name):
        raise CommandError("Unrecognized command")
    return ", ".join(str(s) for s in core.dataset.symbols.members(cmd.class_name))


def outfile(core, cmd):
    return str(core.out_path)


def relate(core, cmd):
    core._require_relation(cmd.key, cmd.val)
    sel = Selection(key_class=cmd.key, val_class=cmd.val, command=cmd.text)
    return show_page(core, sel)


def score(core, cmd):
    core._require_relation(cmd.key, cmd.val)
    reference = core.dataset.symbols.lookup(cmd.key, cmd.element)
    if reference is None:
        raise CommandError(f"Element not found: {cmd.key}.{cmd.element}")
    sel = Selection(
        key_class=cmd.key,
        val_class=cmd.val,
        command=cmd.text,
        reference=reference,
        dissimilarity=cmd.dissimilarity,
        display_equality=cmd.display_equality,
    )
    return show_page(core, sel)


COMMANDS = {
    "load":      (load,         "Load a dataset file (replaces the current one)", "load <path>"),
    "classes":   (classes_ls,   "List loaded classes",                          "classes"),
    "relations": (relations_ls, "List loaded relations",                        "relations"),
    "class":     (class_show,   "List the elements of a class",                 "<className>"),
    "outfile":   (outfile,      "Show the output file path",                    "outfile"),
    "relate":    (relate,       "Relation table",                               "<key> (#|x|v|vs|vs.) <val>"),
    "score":     (score,        "Scoring table against an element of <key>",    "<key> OP <val> (.|..|,|,,) <element>"),
}
