import logging
import os
import sys
from pathlib import Path

import fncli

from . import config, db
from .core.errors import DuoError

_discovered = False


def _discover() -> None:
    global _discovered
    if not _discovered:
        fncli.autodiscover(Path(__file__).parent, "duo")
        _discovered = True


def configure_logging() -> None:
    level = os.environ.get("DUO_LOG") or config.get_log_level()
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(args: list[str]) -> int:
    """Dispatch `duo <args>`; domain errors become a message and exit status 1."""
    _discover()
    try:
        return fncli.dispatch(["duo", *args]) or 0
    except DuoError as e:
        sys.stderr.write(f"{e}\n")
        return 1


def main():
    configure_logging()
    db.init()
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
