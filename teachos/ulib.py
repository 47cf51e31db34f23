"""String helpers from the user library: integer parsing and line reading."""

from __future__ import annotations

from typing import TextIO

_U32 = (1 << 32) - 1


def atoi(s: str) -> int:
    """Parse the leading decimal digits of ``s`` as a 32-bit int.

    No sign or leading whitespace is accepted; anything else gives 0.
    """
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = (n * 10 + ord(ch) - ord("0")) & _U32
    return n - (1 << 32) if n & (1 << 31) else n


def gets(stream: TextIO, limit: int) -> str:
    """Read at most ``limit - 1`` characters, stopping after a newline or CR.

    Returns an empty string at end of input.
    """
    out = []
    while len(out) + 1 < limit:
        c = stream.read(1)
        if not c:
            break
        out.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(out)