"""The Park-Miller "minimal standard" generator used to pick random operations."""

from __future__ import annotations

_U64 = (1 << 64) - 1


def do_rand(ctx: int) -> int:
    """Advance the state ``ctx`` once; the result is both the value and new state.

    Results lie in ``[0, 0x7ffffffd]``.
    """
    x = (ctx & _U64) % 0x7FFFFFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


class ParkMiller:
    """A seeded stream of do_rand values."""

    def __init__(self, seed: int = 1):
        self.state = seed & _U64

    def next(self) -> int:
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next()