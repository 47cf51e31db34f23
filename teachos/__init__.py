"""A small teaching operating system in Python: Sv39 page tables, ELF headers, a shell parser, a heap allocator and user utilities."""

__version__ = "0.1.0"