import pytest

from teachos.umalloc import HEADER_SIZE, Heap


def _heap_units(heap):
    return (heap.brk - Heap().brk) // HEADER_SIZE


def test_fresh_heap_has_nothing_free():
    heap = Heap()
    assert heap.free_units() == 0


def test_malloc_free_round_trip_restores_free_space():
    heap = Heap()
    a = heap.malloc(100)
    assert a % HEADER_SIZE == 0
    heap.free(a)
    assert heap.free_units() == _heap_units(heap)


def test_blocks_do_not_overlap():
    heap = Heap()
    sizes = [1, 17, 100, 4000, 33]
    addrs = [heap.malloc(n) for n in sizes]
    spans = sorted((a, a + n) for a, n in zip(addrs, sizes))
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start


def test_accounting_invariant():
    heap = Heap()
    sizes = [10, 200, 3000]
    for n in sizes:
        heap.malloc(n)
    used = sum((n + HEADER_SIZE - 1) // HEADER_SIZE + 1 for n in sizes)
    assert heap.free_units() + used == _heap_units(heap)


def test_exhaust_free_all_then_allocate_again():
    heap = Heap(limit=1024 * 1024)
    blocks = []
    with pytest.raises(MemoryError):
        while True:
            blocks.append(heap.malloc(10001))
    assert blocks
    for b in blocks:
        heap.free(b)
    assert heap.free_units() == _heap_units(heap)
    big = heap.malloc(1024 * 20)
    assert big >= Heap().brk


def test_freed_memory_is_reused():
    heap = Heap()
    a = heap.malloc(64)
    brk = heap.brk
    heap.free(a)
    heap.malloc(64)
    assert heap.brk == brk


def test_free_in_any_order_coalesces():
    heap = Heap()
    addrs = [heap.malloc(50) for _ in range(6)]
    for a in addrs[::2] + addrs[1::2]:
        heap.free(a)
    assert heap.free_units() == _heap_units(heap)


def test_too_large_request_raises():
    heap = Heap(limit=4096 * HEADER_SIZE)
    with pytest.raises(MemoryError):
        heap.malloc(4096 * HEADER_SIZE)


def test_double_free_rejected():
    heap = Heap()
    a = heap.malloc(8)
    heap.free(a)
    with pytest.raises(ValueError):
        heap.free(a)


def test_sbrk_returns_old_break_and_limits():
    heap = Heap(limit=8192)
    start = heap.brk
    assert heap.sbrk(100) == start
    assert heap.sbrk(0) == start + 100
    assert heap.sbrk(-100) == start + 100
    assert heap.brk == start
    with pytest.raises(MemoryError):
        heap.sbrk(8193)
    with pytest.raises(MemoryError):
        heap.sbrk(-1)