import sys
from pathlib import Path

import fncli

from . import db
from .core.errors import RitualError
from .lib import ansi

_discovered = False


def _discover() -> None:
    global _discovered
    if not _discovered:
        fncli.autodiscover(Path(__file__).parent, "ritual")
        _discovered = True


def main():
    db.init()
    _discover()
    if not sys.stdout.isatty():
        ansi.use(ansi.PLAIN)

    user_args = sys.argv[1:]
    if not user_args:
        user_args = ["ls"]
    argv = ["ritual", *user_args]
    try:
        code = fncli.dispatch(argv)
    except RitualError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
