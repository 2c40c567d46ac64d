import json

import pytest

from propprov.core import init_core
from propprov.model.schema import State

from setups import fruit

TASTE_TEXT = fruit.FRUIT_TEXT + "Taste, Sweet\n"


@pytest.fixture
def core(tmp_path):
    c = init_core(config_path=tmp_path / "missing.json", out_path=str(tmp_path / "out" / "pp.txt"))
    c.execute(f"load {fruit.write(tmp_path, TASTE_TEXT)}")
    return c


def test_load_reports_stats(tmp_path):
    c = init_core(config_path=tmp_path / "missing.json")
    out = c.execute(f"load {fruit.write(tmp_path)}")
    assert out.splitlines() == [
        "2 classes constructed",
        "4 class elements added",
        "2 relations defined",
        "2 relation elements defined",
    ]
    assert c.state is State.MAIN


def test_browse(core):
    assert core.execute("classes") == "Fruit, Color, Taste"
    assert core.execute("relations") == "(Fruit, Color), (Color, Fruit)"
    assert core.execute("Fruit") == "Fruit.Apple, Fruit.Pear"
    assert core.execute("Dog") == "Unrecognized command"


def test_relate_enters_view_and_displays(core):
    out = core.execute("Fruit v Color")
    assert core.state is State.TABLE_VIEW
    assert core.prompt == "> "
    lines = out.splitlines()
    assert lines[1] == "| (Fruit, Color) | 1/2   |"
    assert lines[3] == "| Apple          | Red   |"
    assert lines[-1].strip() == "< >"
    assert core.selection.page == 1
    assert core.selection.reference is None


def test_page_navigation(core):
    core.execute("Fruit v Color")

    def page_after(cmd):
        core.execute(cmd)
        return core.selection.page

    assert page_after("pn") == 2
    assert page_after("pn") == 2
    assert page_after("pp") == 1
    assert page_after("pp") == 1
    assert page_after("pl") == 2
    assert page_after("pf") == 1
    assert page_after("p0") == 1
    assert page_after("p7") == 2
    assert page_after("d") == 1
    assert "2/2" in core.execute("p2")


def test_save_is_unpaginated_and_appends(core, tmp_path):
    core.execute("Fruit v Color")
    core.execute("pn")
    out_path = tmp_path / "out" / "pp.txt"
    assert core.execute("save") == f"Saved to {out_path}"
    assert core.selection.page == 2

    lines = out_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Fruit v Color"
    assert lines[1] == ""
    assert lines[3] == "| (Fruit, Color) | 1/2   | 2/2   |"
    assert "< >" not in "\n".join(lines)

    core.execute("save")
    text = out_path.read_text(encoding="utf-8")
    assert text.count("Fruit v Color\n") == 2


def test_break_returns_to_main(core):
    core.execute("Fruit v Color")
    assert core.execute("b") is None
    assert core.state is State.MAIN
    assert core.selection is None
    assert core.execute("classes") == "Fruit, Color, Taste"


def test_scoring_view(core):
    out = core.execute("Fruit v Color . Apple")
    assert core.state is State.TABLE_VIEW
    assert core.selection.reference.name == "Apple"
    lines = out.splitlines()
    assert lines[3].startswith("| (2) Apple ")
    assert lines[4].startswith("| (1) Pear ")

    core.execute("b")
    out = core.execute("Fruit v Color ,, Apple")
    lines = out.splitlines()
    assert lines[3].startswith("| (1) Pear ")
    assert lines[4].startswith("| (0) Apple ")


@pytest.mark.parametrize(
    "line, message",
    [
        ("Fruit v Fruit", "A class is not allowed to relate to itself"),
        ("Fruit v Dog", "Class not found: Dog"),
        ("Fruit v Taste", "Relation not found: Fruit, Taste"),
        ("Fruit v Color . Kiwi", "Element not found: Fruit.Kiwi"),
        ("Fruit v Color . Red", "Element not found: Fruit.Red"),
        ("Fruit v Fruit . Apple", "A class is not allowed to relate to itself"),
        ("what is this", "Unrecognized command"),
    ],
)
def test_main_errors_keep_state(core, line, message):
    assert core.execute(line) == message
    assert core.state is State.MAIN
    assert core.selection is None


def test_table_view_unrecognized(core):
    core.execute("Fruit v Color")
    core.execute("pn")
    before = core.selection
    assert core.execute("classes") == "Unrecognized command"
    assert core.selection == before


def test_load_missing_file(core, tmp_path):
    out = core.execute(f"load {tmp_path / 'nope.txt'}")
    assert out == f"The file '{tmp_path / 'nope.txt'}' was not found"
    assert core.execute("classes") == "Fruit, Color, Taste"


def test_failed_load_clears_dataset(core, tmp_path):
    bad = fruit.write(tmp_path, "A, x\nA, x\n", name="bad.txt")
    assert core.execute(f"load {bad}") == "Line 2: Class 'A' already contains symbol 'x'"
    assert core.execute("classes") == "No loaded classes"
    assert core.execute("relations") == "No loaded relations"


def test_empty_table(core):
    core.dataset.symbols.declare_class("Empty")
    core.dataset.relations.declare("Fruit", "Empty")
    assert core.execute("Fruit v Empty") == "Empty table"
    assert core.state is State.TABLE_VIEW
    assert core.execute("pn") == "Empty table"
    assert core.execute("save") == "Empty table"


def test_cancel(core):
    core.execute("Fruit v Color")
    assert core.cancel() is True
    assert core.state is State.MAIN
    assert core.running is True
    assert core.cancel() is False
    assert core.running is False


def test_exit_from_table_view(core):
    core.execute("Fruit v Color")
    assert core.execute("exit") is None
    assert core.running is False


def test_help_per_state(core):
    assert "load <path>" in core.execute("help")
    core.execute("Fruit v Color")
    out = core.execute("h")
    assert "save" in out
    assert "load <path>" not in out


def test_outfile(core, tmp_path):
    assert core.execute("outfile") == str(tmp_path / "out" / "pp.txt")


def test_log_transcript(core):
    core.execute("classes")
    assert core.log[-2:] == [{"in": "classes"}, {"out": "Fruit, Color, Taste"}]


def test_unicode_override(tmp_path):
    c = init_core(config_path=tmp_path / "missing.json", unicode=True)
    c.execute(f"load {fruit.write(tmp_path)}")
    assert c.execute("Fruit v Color").startswith("┌")


def test_config_file(tmp_path):
    cfg = tmp_path / "core.json"
    cfg.write_text(json.dumps({"unicode": True, "prompt_main": ">> ", "out_path": str(tmp_path / "o.txt")}))
    c = init_core(config_path=cfg)
    assert c.prompt == ">> "
    assert c.out_path == tmp_path / "o.txt"
    assert c.glyphs.tl == "┌"

    c = init_core(config_path=cfg, unicode=False)
    assert c.glyphs.tl == "+"


def test_invalid_config_uses_defaults(tmp_path):
    cfg = tmp_path / "core.json"
    cfg.write_text("{not json")
    c = init_core(config_path=cfg)
    assert c.prompt == "PP> "
    assert c.glyphs.tl == "+"


def test_save_write_failure_is_reported(tmp_path):
    blocker = tmp_path / "afile"
    blocker.write_text("")
    c = init_core(config_path=tmp_path / "missing.json", out_path=str(blocker / "out.txt"))
    c.execute(f"load {fruit.write(tmp_path)}")
    c.execute("Fruit v Color")

    out = c.execute("save")
    assert out.startswith(f"Cannot write '{blocker / 'out.txt'}': ")
    assert c.state is State.TABLE_VIEW
    assert c.execute("b") is None
    assert c.execute("classes") == "Fruit, Color"


def test_load_read_failure_is_reported(core, tmp_path, monkeypatch):
    p = fruit.write(tmp_path, name="unreadable.txt")

    def broken(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(type(p), "read_text", broken)
    out = core.execute(f"load {p}")
    assert out.startswith(f"Cannot read file: {p} :: ")
    assert core.state is State.MAIN
    assert core.execute("classes") == "No loaded classes"


MULTI_WORD_TEXT = """\
Ice Cream, Vanilla Bean
Ice Cream, Mint
Flavor Note, Sweet
Flavor Note, Fresh
Ice Cream.Vanilla Bean, Flavor Note.Sweet
Ice Cream.Mint, Flavor Note.Fresh
"""


def test_multi_word_names_can_be_queried(tmp_path):
    c = init_core(config_path=tmp_path / "missing.json")
    c.execute(f"load {fruit.write(tmp_path, MULTI_WORD_TEXT)}")
    assert c.execute("classes") == "Ice Cream, Flavor Note"
    assert c.execute("Ice Cream") == "Ice Cream.Vanilla Bean, Ice Cream.Mint"

    out = c.execute("Ice Cream v Flavor Note")
    assert c.state is State.TABLE_VIEW
    assert "| Vanilla Bean " in out
    c.execute("b")

    out = c.execute("Ice Cream v Flavor Note . Vanilla Bean")
    assert c.selection.reference.name == "Vanilla Bean"
    assert out.splitlines()[3].startswith("| (2) Vanilla Bean ")


def test_class_named_like_an_alias(tmp_path):
    text = "quit, a\nh, b\nquit.a, h.b\n"
    c = init_core(config_path=tmp_path / "missing.json")
    c.execute(f"load {fruit.write(tmp_path, text)}")
    assert c.execute("quit v h").splitlines()[3] == "| a         | b   |"
    assert c.state is State.TABLE_VIEW
    c.execute("b")
    assert c.execute("quit") is None
    assert c.running is False
