"""A small grep supporting only the ``^ . * $`` operators."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Optional, Sequence

# Lines (with their newline) longer than this stop the scan.
_MAX_LINE = 1023


def _match_here(re: str, ri: int, text: str, ti: int) -> bool:
    """Search for ``re[ri:]`` at the start of ``text[ti:]``."""
    while True:
        if ri >= len(re):
            return True
        if ri + 1 < len(re) and re[ri + 1] == "*":
            return _match_star(re[ri], re, ri + 2, text, ti)
        if re[ri] == "$" and ri + 1 == len(re):
            return ti == len(text)
        if ti < len(text) and (re[ri] == "." or re[ri] == text[ti]):
            ri += 1
            ti += 1
            continue
        return False


def _match_star(c: str, re: str, ri: int, text: str, ti: int) -> bool:
    """Search for ``c*`` followed by ``re[ri:]`` at the start of ``text[ti:]``."""
    while True:
        if _match_here(re, ri, text, ti):
            return True
        if ti >= len(text):
            return False
        ch = text[ti]
        ti += 1
        if not (ch == c or c == "."):
            return False


def match(pattern: str, text: str) -> bool:
    """Return whether ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _match_here(pattern, 1, text, 0)
    return any(_match_here(pattern, 0, text, ti) for ti in range(len(text) + 1))


def grep_lines(pattern: str, stream: Iterable[str]) -> Iterator[str]:
    """Yield the newline-terminated lines of ``stream`` that match ``pattern``.

    A final line without a newline is ignored, and a line too long for the
    read buffer ends the scan.
    """
    for line in stream:
        if not line.endswith("\n") or len(line) > _MAX_LINE:
            return
        if match(pattern, line[:-1]):
            yield line


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run grep over files named in ``argv``, or standard input."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    out = sys.stdout
    if not files:
        out.writelines(grep_lines(pattern, sys.stdin))
        return 0
    for name in files:
        try:
            handle = open(name, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            out.write(f"grep: cannot open {name}\n")
            return 1
        with handle:
            out.writelines(grep_lines(pattern, handle))
    return 0


if __name__ == "__main__":
    sys.exit(main())