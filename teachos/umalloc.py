"""A first-fit free-list allocator over a simulated program break."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Set

HEADER_SIZE = 16
_MIN_UNITS = 4096
_HEAP_START = 4096
_BASE = 0  # address of the list sentinel, below the heap


@dataclass
class _Header:
    ptr: int
    size: int


class Heap:
    """malloc and free with a circular, address-ordered free list.

    Addresses are byte offsets; the break starts at a fixed address and may
    grow by at most ``limit`` bytes.
    """

    def __init__(self, limit: int = 128 * 1024 * 1024):
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self.brk = _HEAP_START
        self._hdr: Dict[int, _Header] = {}
        self._freep: Optional[int] = None
        self._allocated: Set[int] = set()

    def sbrk(self, n: int) -> int:
        """Move the break by ``n`` bytes and return its previous value."""
        old = self.brk
        new = old + n
        if new < _HEAP_START or new > _HEAP_START + self.limit:
            raise MemoryError("sbrk: out of memory")
        self.brk = new
        return old

    def _morecore(self, nu: int) -> int:
        nu = max(nu, _MIN_UNITS)
        hp = self.sbrk(nu * HEADER_SIZE)
        self._hdr[hp] = _Header(0, nu)
        self._release(hp)
        assert self._freep is not None
        return self._freep

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` bytes and return the block's address."""
        if nbytes < 0:
            raise ValueError("negative allocation size")
        hdr = self._hdr
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            hdr[_BASE] = _Header(_BASE, 0)
            self._freep = _BASE
        prevp = self._freep
        p = hdr[prevp].ptr
        while True:
            block = hdr[p]
            if block.size >= nunits:
                if block.size == nunits:
                    hdr[prevp].ptr = block.ptr
                else:
                    block.size -= nunits
                    p += block.size * HEADER_SIZE
                    hdr[p] = _Header(0, nunits)
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
            prevp = p
            p = hdr[p].ptr

    def free(self, ap: int) -> None:
        """Return a block obtained from malloc to the free list."""
        bp = ap - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"free of unallocated address {ap:#x}")
        self._allocated.remove(bp)
        self._release(bp)

    def _release(self, bp: int) -> None:
        hdr = self._hdr
        p = self._freep
        if p is None:
            hdr[_BASE] = _Header(_BASE, 0)
            p = self._freep = _BASE
        while not (p < bp < hdr[p].ptr):
            if p >= hdr[p].ptr and (bp > p or bp < hdr[p].ptr):
                break
            p = hdr[p].ptr
        block = hdr[bp]
        nxt = hdr[p].ptr
        if bp + block.size * HEADER_SIZE == nxt:
            block.size += hdr[nxt].size
            block.ptr = hdr[nxt].ptr
            del hdr[nxt]
        else:
            block.ptr = nxt
        prev = hdr[p]
        if p + prev.size * HEADER_SIZE == bp:
            prev.size += block.size
            prev.ptr = block.ptr
            del hdr[bp]
        else:
            prev.ptr = bp
        self._freep = p

    def free_units(self) -> int:
        """Total size, in header units, of the blocks on the free list."""
        if self._freep is None:
            return 0
        total = 0
        p = self._hdr[_BASE].ptr
        while p != _BASE:
            total += self._hdr[p].size
            p = self._hdr[p].ptr
        return total