"""Sv39 page tables and user address spaces over simulated physical memory."""

from __future__ import annotations

from typing import Optional

from .riscv import (
    KERNBASE,
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    PTE_R,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    TRAMPOLINE,
    UART0,
    VIRTIO0,
    make_satp,
    pa2pte,
    pg_round_down,
    pg_round_up,
    pte2pa,
    pte_flags,
    px,
)

_PTE_SIZE = 8
_PTES_PER_PAGE = PGSIZE // _PTE_SIZE
_U64 = (1 << 64) - 1
_ZERO_PAGE = bytes(PGSIZE)


class KernelPanic(RuntimeError):
    """An unrecoverable kernel invariant was violated."""


class OutOfMemoryError(MemoryError):
    """No physical page was available."""


class BadAddressError(ValueError):
    """A user virtual address is not mapped for user access."""


class PhysicalMemory:
    """A range of page-granular RAM with a free-page allocator."""

    def __init__(self, npages=1024, base=KERNBASE):
        if npages < 1:
            raise ValueError("physical memory needs at least one page")
        if base % PGSIZE:
            raise ValueError("physical memory base must be page aligned")
        self.base = base
        self.end = base + npages * PGSIZE
        self._ram = bytearray(npages * PGSIZE)
        # Popped from the end, so the lowest page is handed out first.
        self._free = list(range(self.end - PGSIZE, base - 1, -PGSIZE))
        self._in_use: set[int] = set()

    def kalloc(self) -> int:
        """Allocate one page and return its physical address."""
        if not self._free:
            raise OutOfMemoryError("out of physical pages")
        pa = self._free.pop()
        self._in_use.add(pa)
        return pa

    def kfree(self, pa: int) -> None:
        """Return an allocated page to the free list."""
        if pa % PGSIZE or pa not in self._in_use:
            raise KernelPanic("kfree")
        self._in_use.remove(pa)
        self._free.append(pa)

    def _offset(self, pa: int, n: int) -> int:
        if pa < self.base or pa + n > self.end:
            raise KernelPanic(f"physical address {pa:#x} out of range")
        return pa - self.base

    def read(self, pa: int, n: int) -> bytes:
        off = self._offset(pa, n)
        return bytes(self._ram[off:off + n])

    def write(self, pa: int, data: bytes) -> None:
        off = self._offset(pa, len(data))
        self._ram[off:off + len(data)] = data

    def read_pte(self, addr: int) -> int:
        return int.from_bytes(self.read(addr, _PTE_SIZE), "little")

    def write_pte(self, addr: int, value: int) -> None:
        self.write(addr, (value & _U64).to_bytes(_PTE_SIZE, "little"))

    def free_count(self) -> int:
        return len(self._free)


class PageTable:
    """A three-level Sv39 page table rooted at a physical page."""

    def __init__(self, memory: PhysicalMemory, root: int):
        self.memory = memory
        self.root = root

    @classmethod
    def create(cls, memory: PhysicalMemory) -> "PageTable":
        """Allocate an empty page table."""
        root = memory.kalloc()
        memory.write(root, _ZERO_PAGE)
        return cls(memory, root)

    @classmethod
    def kernel(cls, memory: PhysicalMemory, etext: int, trampoline: int) -> "PageTable":
        """Build the kernel's direct-mapped page table.

        ``etext`` is the end of kernel text and ``trampoline`` the physical
        address of the trampoline page. Per-process kernel stacks are not mapped.
        """
        kpt = cls.create(memory)
        kpt._kvmmap(UART0, UART0, PGSIZE, PTE_R | PTE_W)
        kpt._kvmmap(VIRTIO0, VIRTIO0, PGSIZE, PTE_R | PTE_W)
        kpt._kvmmap(PLIC, PLIC, 0x400000, PTE_R | PTE_W)
        kpt._kvmmap(KERNBASE, KERNBASE, etext - KERNBASE, PTE_R | PTE_X)
        kpt._kvmmap(etext, etext, PHYSTOP - etext, PTE_R | PTE_W)
        kpt._kvmmap(TRAMPOLINE, trampoline, PGSIZE, PTE_R | PTE_X)
        return kpt

    def _kvmmap(self, va: int, pa: int, sz: int, perm: int) -> None:
        try:
            self.map_pages(va, sz, pa, perm)
        except OutOfMemoryError as err:
            raise KernelPanic("kvmmap") from err

    def satp(self) -> int:
        return make_satp(self.root)

    def walk(self, va: int, alloc: bool = False) -> Optional[int]:
        """Return the physical address of the level-0 PTE for ``va``.

        Returns None when an intermediate table is missing and ``alloc`` is
        false; raises OutOfMemoryError when a needed table cannot be allocated.
        """
        if va >= MAXVA:
            raise KernelPanic("walk")
        mem = self.memory
        table = self.root
        for level in (2, 1):
            addr = table + _PTE_SIZE * px(level, va)
            pte = mem.read_pte(addr)
            if pte & PTE_V:
                table = pte2pa(pte)
            else:
                if not alloc:
                    return None
                table = mem.kalloc()
                mem.write(table, _ZERO_PAGE)
                mem.write_pte(addr, pa2pte(table) | PTE_V)
        return table + _PTE_SIZE * px(0, va)

    def walkaddr(self, va: int) -> Optional[int]:
        """Physical address of the user page holding ``va``, or None."""
        if va >= MAXVA:
            return None
        addr = self.walk(va)
        if addr is None:
            return None
        pte = self.memory.read_pte(addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte2pa(pte)

    def map_pages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``size`` bytes at ``va`` to physical memory starting at ``pa``."""
        if size == 0:
            raise KernelPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            addr = self.walk(a, alloc=True)
            if self.memory.read_pte(addr) & PTE_V:
                raise KernelPanic("mappages: remap")
            self.memory.write_pte(addr, pa2pte(pa) | perm | PTE_V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from ``va``, optionally freeing them."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        mem = self.memory
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a)
            if addr is None:
                raise KernelPanic("uvmunmap: walk")
            pte = mem.read_pte(addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                mem.kfree(pte2pa(pte))
            mem.write_pte(addr, 0)

    def load_first(self, src: bytes) -> None:
        """Place the first process's code at address 0; it must fit in a page."""
        if len(src) >= PGSIZE:
            raise KernelPanic("uvmfirst: more than a page")
        mem = self.memory.kalloc()
        self.memory.write(mem, _ZERO_PAGE)
        self.map_pages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, bytes(src))

    def grow(self, oldsz: int, newsz: int, xperm: int = 0) -> int:
        """Grow a user address space from ``oldsz`` to ``newsz`` bytes."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.kalloc()
            except OutOfMemoryError:
                self.shrink(a, oldsz)
                raise
            self.memory.write(mem, _ZERO_PAGE)
            try:
                self.map_pages(a, PGSIZE, mem, PTE_R | PTE_U | xperm)
            except OutOfMemoryError:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Release user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _free_walk(self, table: int) -> None:
        mem = self.memory
        for i in range(_PTES_PER_PAGE):
            addr = table + _PTE_SIZE * i
            pte = mem.read_pte(addr)
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._free_walk(pte2pa(pte))
                mem.write_pte(addr, 0)
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        mem.kfree(table)

    def free_walk(self) -> None:
        """Free every page-table page; all leaf mappings must be gone."""
        self._free_walk(self.root)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then the page table itself."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self.free_walk()

    def copy_to(self, other: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of this address space into ``other``."""
        mem = self.memory
        for i in range(0, sz, PGSIZE):
            addr = self.walk(i)
            if addr is None:
                raise KernelPanic("uvmcopy: pte should exist")
            pte = mem.read_pte(addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmcopy: page not present")
            try:
                page = mem.kalloc()
            except OutOfMemoryError:
                other.unmap(0, i // PGSIZE, True)
                raise
            mem.write(page, mem.read(pte2pa(pte), PGSIZE))
            try:
                other.map_pages(i, PGSIZE, page, pte_flags(pte))
            except OutOfMemoryError:
                mem.kfree(page)
                other.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user mode."""
        addr = self.walk(va)
        if addr is None:
            raise KernelPanic("uvmclear")
        self.memory.write_pte(addr, self.memory.read_pte(addr) & ~PTE_U)

    def _user_page(self, va0: int) -> int:
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise BadAddressError(f"user address {va0:#x} not mapped")
        return pa0

    def copyout(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` into user memory at ``dstva``."""
        view = memoryview(bytes(data))
        while view:
            va0 = pg_round_down(dstva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copyin(self, srcva: int, length: int) -> bytes:
        """Copy ``length`` bytes of user memory starting at ``srcva``."""
        out = bytearray()
        while length > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), length)
            out += self.memory.read(pa0 + (srcva - va0), n)
            length -= n
            srcva = va0 + PGSIZE
        return bytes(out)

    def copyinstr(self, srcva: int, limit: int) -> bytes:
        """Copy a NUL-terminated user string of at most ``limit`` bytes.

        The terminator is not included in the result.
        """
        out = bytearray()
        while limit > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), limit)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            limit -= n
            srcva = va0 + PGSIZE
        raise BadAddressError("string not terminated within limit")