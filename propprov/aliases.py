# propprov/aliases.py
#
# Keyword synonyms, per REPL state.
# Every alias is a complete command: a line is replaced only when the whole
# line is the alias, so class names like `h` or `quit` inside a query are
# left alone.

from propprov.model.schema import State

ALIASES = {
    State.MAIN: {
        "h":    "help",
        "quit": "exit",
    },
    State.TABLE_VIEW: {
        "h":     "help",
        "b":     "break",
        "clear": "break",
        "d":     "display",
        "show":  "display",
        "quit":  "exit",
    },
}


class AliasManager:
    def __init__(self, aliases):
        self.aliases = {state: dict(table) for state, table in aliases.items()}

    def expand(self, state: State, line: str) -> str:
        s = line.strip()
        return self.aliases.get(state, {}).get(s, s)

    def list_aliases(self, state: State):
        return sorted(self.aliases.get(state, {}).items())
