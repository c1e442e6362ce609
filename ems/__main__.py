"""
Module entrypoint for the ems CLI.

This file exists so that `python -m ems ...` works when the console-script
wrapper is not installed. It contains no business logic.
"""

from __future__ import annotations

from ems.cli import main


def _run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    _run()
