# pp.py
import argparse
import logging
import readline  # noqa: F401  (line editing + history for input())

from propprov import APP_NAME, __version__
from propprov.core import init_core


def build_parser():
    p = argparse.ArgumentParser(prog="pp", description=f"{APP_NAME} interactive relation browser")
    p.add_argument("-f", "--file", help="dataset file to load on start")
    p.add_argument("--dbg", action="store_true", help="debug logging")
    p.add_argument("--unicode", action="store_true", default=None, help="box-drawing table borders")
    p.add_argument("--config", help="config file (default: config/core.json)")
    return p


def run(core, read=input, write=print):
    """Read-execute loop. Returns when `exit` runs or input is cancelled in Main.

    Ctrl+C / EOF at the prompt (or Ctrl+C during a command) leaves the table
    view if one is open, otherwise ends the session.
    """
    while core.running:
        try:
            line = read(core.prompt)
        except (EOFError, KeyboardInterrupt):
            write("")
            if core.cancel():
                write("")
                continue
            break

        try:
            res = core.execute(line)
        except KeyboardInterrupt:
            write("")
            if core.cancel():
                continue
            break

        if res is not None:
            write(res)
        write("")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.dbg else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    core = init_core(config_path=args.config, unicode=args.unicode)
    print(f"{APP_NAME} v{__version__}")
    print("Commands: help")
    print()

    if args.file:
        res = core.execute(f"load {args.file}")
        if res is not None:
            print(res)
        print()

    return run(core)


if __name__ == "__main__":
    raise SystemExit(main())
