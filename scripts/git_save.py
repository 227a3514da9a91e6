#!/usr/bin/env python3
from __future__ import annotations

import subprocess
import sys
from typing import Callable

DEFAULT_MESSAGE = "auto save"


def _commit_message(argv: list[str]) -> str:
    return " ".join(argv[1:]).strip() or DEFAULT_MESSAGE


def _run(cmd: list[str]) -> None:
    subprocess.run(cmd, check=True)


def save(message: str, runner: Callable[[list[str]], None] = _run) -> bool:
    steps = (
        ("Staging files...", ["git", "add", "."]),
        (f'Committing: "{message}"', ["git", "commit", "-m", message]),
        ("Pushing...", ["git", "push"]),
    )
    try:
        for label, cmd in steps:
            print(label)
            runner(cmd)
    except (subprocess.CalledProcessError, OSError):
        print("Nothing to commit or push.")
        return False
    print("Save complete!")
    return True


def main(argv: list[str] | None = None) -> int:
    save(_commit_message(argv if argv is not None else sys.argv))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
