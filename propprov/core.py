"""propprov/core.py

Core runtime + init_core() wiring.

Core is the session context: the loaded dataset, the TableView selection and
the per-state command registry. Exactly one line is executed at a time.

Important: avoid importing propprov.topics (ALL_COMMANDS) at module import time,
to prevent circular-import issues while building the command surface.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from propprov import APP_NAME, grammar
from propprov.lib.dataset import Dataset
from propprov.lib.tables import ASCII, UNICODE
from propprov.model.errors import CommandError, ParseError
from propprov.model.schema import Selection, State

logger = logging.getLogger(__name__)

OUT_FILE_NAME = "PropertyProviderOutput.txt"
CONFIG_PATH = Path("config/core.json")

DEFAULT_PROMPTS = {
    State.MAIN: "PP> ",
    State.TABLE_VIEW: "> ",
}


def default_out_path() -> Path:
    """Per-user application data location for the append-only output file."""
    base = os.environ.get("LOCALAPPDATA") or os.environ.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_NAME / OUT_FILE_NAME


class Core:
    def __init__(self):
        self.dataset = Dataset()
        # None <=> State.MAIN
        self.selection: Selection | None = None

        self.commands = {state: {} for state in State}   # state -> cmd -> {handler, help, usage}
        self.log = []
        self.alias_mgr = None  # set in init_core()
        self.running = True

        self.glyphs = ASCII
        self.out_path = default_out_path()
        self.prompts = dict(DEFAULT_PROMPTS)

        # ---- runtime gates ----
        # Serialize execute() against cancel() from the interrupt path
        self.exec_lock = threading.RLock()

    @property
    def state(self) -> State:
        return State.MAIN if self.selection is None else State.TABLE_VIEW

    @property
    def prompt(self) -> str:
        return self.prompts[self.state]

    def register(self, state, name, handler, help_text="", usage=""):
        self.commands[state][name] = {"handler": handler, "help": help_text, "usage": usage}

    # ---- session selection ----
    def enter_view(self, selection: Selection) -> None:
        self.selection = selection

    def leave_view(self) -> None:
        self.selection = None

    def cancel(self) -> bool:
        """Interrupt at the read boundary.

        TableView -> Main (returns True); Main -> stop running (returns False).
        """
        with self.exec_lock:
            if self.selection is not None:
                self.leave_view()
                return True
            self.running = False
            return False

    # ---- schema guards ----
    def _require_class(self, name):
        if not self.dataset.symbols.has_class(name):
            raise CommandError(f"Class not found: {name}")

    def _require_relation(self, key, val):
        if key == val:
            raise CommandError("A class is not allowed to relate to itself")
        self._require_class(key)
        self._require_class(val)
        if not self.dataset.relations.has(key, val):
            raise CommandError(f"Relation not found: {key}, {val}")
    # --------------------------------------

    def parse(self, raw):
        state = self.state
        line = self.alias_mgr.expand(state, raw) if self.alias_mgr else raw.strip()
        return grammar.parse(state, line)

    def execute(self, raw):
        with self.exec_lock:
            self.log.append({"in": raw})

            cmd = self.parse(raw)
            if cmd is None:
                return None

            entry = self.commands[self.state].get(cmd.name)
            if not entry:
                out = "Unrecognized command"
                self.log.append({"out": out})
                return out

            try:
                out = entry["handler"](self, cmd)
            except (CommandError, ParseError) as e:
                out = str(e)

            self.log.append({"out": out})
            return out


# ---------- core-level commands (both states) ----------
def help_cmd(core, cmd):
    lines = []
    title = "Commands" if core.state is State.MAIN else "Table view commands"
    lines.append(title)
    lines.append("----------------------------------------")
    for name, entry in core.commands[core.state].items():
        if not entry["usage"]:
            continue
        lines.append(f"  {entry['usage']:<40} {entry['help']}")
    if core.alias_mgr:
        aliases = core.alias_mgr.list_aliases(core.state)
        if aliases:
            lines.append("")
            lines.append("Aliases: " + ", ".join(f"{a} = {e}" for a, e in aliases))
    return "\n".join(lines)


def exit_cmd(core, cmd):
    core.running = False
    return None


def unrecognized_cmd(core, cmd):
    raise CommandError("Unrecognized command")


def _load_core_config(path: Path):
    if not path.exists():
        return {}
    try:
        cfg = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring config %s: %s", path, e)
        return {}
    if not isinstance(cfg, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return cfg


def init_core(config_path: Path | None = None, **overrides):
    """Build a Core with its command surface.

    Settings come from config/core.json (if present), then `overrides`
    (unicode, out_path, prompt_main, prompt_view) for values that are not None.
    """
    # Late imports to avoid circular-import issues.
    from propprov.aliases import AliasManager, ALIASES
    from propprov.topics import ALL_COMMANDS

    core = Core()

    cfg = _load_core_config(CONFIG_PATH if config_path is None else Path(config_path))
    cfg.update({k: v for k, v in overrides.items() if v is not None})

    if cfg.get("unicode"):
        core.glyphs = UNICODE
    if cfg.get("out_path"):
        core.out_path = Path(cfg["out_path"]).expanduser()
    if cfg.get("prompt_main"):
        core.prompts[State.MAIN] = str(cfg["prompt_main"])
    if cfg.get("prompt_view"):
        core.prompts[State.TABLE_VIEW] = str(cfg["prompt_view"])

    # register state commands
    for state, commands in ALL_COMMANDS.items():
        for name, (handler, help_text, usage) in commands.items():
            core.register(state, name, handler, help_text, usage)

    for state in State:
        core.register(state, "help", help_cmd, "Show available commands", "help")
        core.register(state, "exit", exit_cmd, "Leave the program", "exit")
        core.register(state, "unrecognized", unrecognized_cmd)

    core.alias_mgr = AliasManager(ALIASES)
    return core
