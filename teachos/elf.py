"""ELF64 file and program header records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word
ELF_PROG_LOAD = 1


class ElfFormatError(ValueError):
    """Raised when bytes cannot hold an ELF header."""


class ProgFlag(enum.IntFlag):
    EXEC = 1
    WRITE = 2
    READ = 4


def _unpack(fmt: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) < fmt.size:
        raise ElfFormatError(f"{what} needs {fmt.size} bytes, got {len(data)}")
    return fmt.unpack_from(data)


@dataclass
class ElfHeader:
    """The header at the start of an ELF executable."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _STRUCT = struct.Struct("<I12sHHIQQQIHHHHHH")
    SIZE = _STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "ElfHeader":
        return cls(*_unpack(cls._STRUCT, bytes(data), "ELF header"))

    def pack(self) -> bytes:
        return self._STRUCT.pack(
            self.magic,
            bytes(self.elf),
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )

    def is_valid(self) -> bool:
        return self.magic == ELF_MAGIC


@dataclass
class ProgramHeader:
    """One program section header."""

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    _STRUCT = struct.Struct("<IIQQQQQQ")
    SIZE = _STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProgramHeader":
        return cls(*_unpack(cls._STRUCT, bytes(data), "program header"))

    def pack(self) -> bytes:
        return self._STRUCT.pack(
            self.type,
            int(self.flags),
            self.off,
            self.vaddr,
            self.paddr,
            self.filesz,
            self.memsz,
            self.align,
        )

    def is_loadable(self) -> bool:
        return self.type == ELF_PROG_LOAD