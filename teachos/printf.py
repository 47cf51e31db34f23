"""Formatted output understanding %d, %l, %x, %p, %s, %c and %%."""

from __future__ import annotations

from typing import Any, Iterator, Sequence, TextIO

_U32 = (1 << 32) - 1
_U64 = (1 << 64) - 1


def _int32(value: int) -> int:
    value &= _U32
    return value - (1 << 32) if value & (1 << 31) else value


def _next(args: Iterator[Any], conv: str) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError(f"not enough arguments for %{conv}") from None


def _convert(conv: str, args: Iterator[Any]) -> str:
    if conv == "d":
        value = _int32(int(_next(args, conv)))
        return f"-{-value}" if value < 0 else str(value)
    if conv == "l":
        # The value passes through a 32-bit int, so only the low word prints.
        return str(int(_next(args, conv)) & _U32)
    if conv == "x":
        return format(int(_next(args, conv)) & _U32, "X")
    if conv == "p":
        return "0x" + format(int(_next(args, conv)) & _U64, "016X")
    if conv == "s":
        value = _next(args, conv)
        return "(null)" if value is None else str(value)
    if conv == "c":
        value = _next(args, conv)
        return value[:1] if isinstance(value, str) else chr(int(value) & 0xFF)
    if conv == "%":
        return "%"
    return "%" + conv


def vformat(fmt: str, args: Sequence[Any]) -> str:
    """Render ``fmt`` with ``args`` and return the text.

    Unknown conversions are printed as they stand; a lone trailing ``%``
    prints nothing.
    """
    it = iter(args)
    out = []
    pending = False
    for c in fmt:
        if pending:
            out.append(_convert(c, it))
            pending = False
        elif c == "%":
            pending = True
        else:
            out.append(c)
    return "".join(out)


def fprintf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Write ``fmt`` rendered with ``args`` to ``stream``."""
    stream.write(vformat(fmt, args))