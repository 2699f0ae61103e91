from __future__ import annotations

import sys
from typing import Protocol


class ConsoleLike(Protocol):
    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


class StderrConsole:
    """Plain-text console fallback.

    Lets the loader, renderer and dispatcher report progress without
    importing the rich CLI console.
    """

    def info(self, msg: str) -> None:
        print(msg, file=sys.stderr)

    def warn(self, msg: str) -> None:
        print(f"Warning: {msg}", file=sys.stderr)

    def error(self, msg: str) -> None:
        print(f"Error: {msg}", file=sys.stderr)


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else StderrConsole()
