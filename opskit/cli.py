"""Command that prints a few facts about the running host."""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Sequence

from opskit import files, runner, slices


def _format_list(items: Iterable[object]) -> str:
    return "[" + " ".join(str(item) for item in items) + "]"


def main(argv: Sequence[str] | None = None) -> int:
    """Print a list difference, the host name, the program directory and its files."""
    parser = argparse.ArgumentParser(prog="opskit", description=main.__doc__)
    parser.parse_args(argv)

    a = [1, 3, 5, 56, 67, 7]
    b = [3, 5, 6, 7]
    print(_format_list(slices.subtract(a, b)))

    info = runner.init()
    print(info.hostname)
    print(info.cwd)

    try:
        print(_format_list(files.files_under(info.cwd)))
    except OSError as exc:
        print(f"[] {exc}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())