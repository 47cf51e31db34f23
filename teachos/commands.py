"""Small file utilities: cat, echo, wc, ln, rm and mkdir, plus ls name formatting."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional, Sequence, Union

DIRSIZ = 14

_CHUNK = 512
# A NUL byte also ends a word: the separator set is searched as a C string.
_WC_SPACE = frozenset(b" \r\t\n\v\0")


@dataclass(frozen=True)
class Counts:
    """Line, word and byte counts of some data."""

    lines: int = 0
    words: int = 0
    chars: int = 0


def word_count(data: Union[bytes, bytearray, str]) -> Counts:
    """Count lines, words and bytes in ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    lines = words = 0
    inword = False
    for byte in data:
        if byte == 0x0A:
            lines += 1
        if byte in _WC_SPACE:
            inword = False
        elif not inword:
            words += 1
            inword = True
    return Counts(lines, words, len(data))


def echo_line(args: Iterable[str]) -> str:
    """The text echo prints for ``args``: nothing at all when there are none."""
    args = list(args)
    if not args:
        return ""
    return " ".join(args) + "\n"


def fmtname(path: str) -> str:
    """The last component of ``path``, blank-padded to DIRSIZ characters."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _args(argv: Optional[Sequence[str]]) -> list:
    return list(sys.argv[1:] if argv is None else argv)


def _copy(src: BinaryIO, out: BinaryIO) -> None:
    for chunk in iter(lambda: src.read(_CHUNK), b""):
        try:
            out.write(chunk)
        except OSError as err:
            raise _WriteError from err


class _WriteError(Exception):
    pass


def _cat_stream(src: BinaryIO, out: BinaryIO) -> bool:
    try:
        _copy(src, out)
    except _WriteError:
        sys.stderr.write("cat: write error\n")
        return False
    except OSError:
        sys.stderr.write("cat: read error\n")
        return False
    return True


def cat_main(argv: Optional[Sequence[str]] = None) -> int:
    """Copy the named files, or standard input, to standard output."""
    args = _args(argv)
    sys.stdout.flush()
    out = sys.stdout.buffer
    try:
        if not args:
            return 0 if _cat_stream(sys.stdin.buffer, out) else 1
        for name in args:
            try:
                handle = open(name, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {name}\n")
                return 1
            with handle:
                if not _cat_stream(handle, out):
                    return 1
        return 0
    finally:
        out.flush()


def echo_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the arguments separated by spaces."""
    sys.stdout.write(echo_line(_args(argv)))
    return 0


def _wc_report(counts: Counts, name: str) -> None:
    sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")


def wc_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print line, word and byte counts of the named files or standard input."""
    args = _args(argv)
    if not args:
        try:
            data = sys.stdin.buffer.read()
        except OSError:
            sys.stdout.write("wc: read error\n")
            return 1
        _wc_report(word_count(data), "")
        return 0
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        with handle:
            try:
                data = handle.read()
            except OSError:
                sys.stdout.write("wc: read error\n")
                return 1
        _wc_report(word_count(data), name)
    return 0


def ln_main(argv: Optional[Sequence[str]] = None) -> int:
    """Make a hard link ``new`` to ``old``."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def _unlink(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def rm_main(argv: Optional[Sequence[str]] = None) -> int:
    """Remove files and empty directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for name in args:
        try:
            _unlink(name)
        except OSError:
            sys.stderr.write(f"rm: {name} failed to delete\n")
            break
    return 0


def mkdir_main(argv: Optional[Sequence[str]] = None) -> int:
    """Create directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for name in args:
        try:
            os.mkdir(name)
        except OSError:
            sys.stderr.write(f"mkdir: {name} failed to create\n")
            break
    return 0