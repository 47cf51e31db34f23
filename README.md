# teachos

`teachos` models the pieces of a small teaching operating system in plain
Python. Nothing in it touches real hardware. The package contains these
modules:

- **`teachos.riscv`** holds the RISC-V Sv39 constants and address helpers,
  the physical memory layout of the qemu "virt" machine and the system
  parameters (`NPROC`, `MAXPATH`, `FSSIZE`, ...). The helpers are
  `pg_round_up`, `pg_round_down`, `pa2pte`, `pte2pa`, `pte_flags`, `px`,
  `make_satp` and `kstack`. It also gives the CLINT and PLIC register
  addresses: `clint_mtimecmp`, `plic_menable`, `plic_senable`,
  `plic_mpriority`, `plic_spriority`, `plic_mclaim` and `plic_sclaim`.
- **`teachos.elf`** has the `ElfHeader` and `ProgramHeader` dataclasses.
  Each one reads with `from_bytes` and writes back with `pack`.
  `ElfHeader.is_valid` checks the magic number. `ProgramHeader.is_loadable`
  checks for a loadable segment. `ProgFlag` holds the segment permission
  flags. If the input is too short to hold a header, `ElfFormatError` is
  raised.
- **`teachos.vm`** builds three-level page tables on a simulated
  `PhysicalMemory`, which is a page allocator with `kalloc`, `kfree` and
  `free_count`. `PageTable` supports these operations:
  - building an empty table or the kernel's direct-mapped table: `create`, `kernel`
  - walking the table and reading the `satp` value: `walk`, `walkaddr`, `satp`
  - mapping and unmapping pages: `map_pages`, `unmap`
  - loading the first program: `load_first`
  - growing and shrinking a user address space: `grow`, `shrink`
  - copying one address space into another: `copy_to`
  - clearing user access to a page: `clear_user`
  - freeing the table and its pages: `free_walk`, `free`
  - moving data between kernel and user memory: `copyout`, `copyin`, `copyinstr`

  These errors can be raised:
  - `KernelPanic` when an invariant is broken, for example a remap or an unaligned unmap.
  - `OutOfMemoryError` when no physical page is left.
  - `BadAddressError` when a user address is not mapped for user access, or when a string has no terminator within its limit.
- **`teachos.sh`** is the shell's command-line parser. It has two parts:
  - `Lexer` splits a line into tokens. `>>` comes back as the kind `'+'` and a word as `'a'`.
  - `parse_command` builds a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd`. Redirections carry their `OpenFlag` mode.

  `ShellSyntaxError` is raised for malformed input, including a missing `)`, a missing redirection file and more than nine arguments.
- **`teachos.grep`** is a small matcher. It supports only `^ . * $`, through
  `match` and `grep_lines`.
- **`teachos.printf`** is a minimal formatter for `%d %l %x %p %s %c %%`,
  through `vformat` and `fprintf`. Any unknown conversion is printed as it
  stands.
- **`teachos.commands`** has `cat`, `echo`, `wc`, `ln`, `rm` and `mkdir`, and
  these helpers:
  - `word_count`, which returns a `Counts` of lines, words and bytes
  - `echo_line`
  - `fmtname`, which pads a path's last component to 14 characters
- **`teachos.ulib`** has `atoi`, which reads leading digits only and wraps to
  32 bits, and `gets`.
- **`teachos.umalloc`** is `Heap`, a first-fit free-list allocator that grows
  itself through its own `sbrk`. It offers `malloc`, `free` and
  `free_units`.
- **`teachos.grind`** has the Park–Miller pseudo-random generator: `do_rand`,
  and `ParkMiller`, an iterator over its values.

## Installing

Install the package:

```
pip install .
```

Install the test dependencies and run the test suite:

```
pip install ".[test]"
pytest
```

## Using the library

Parse a shell command line:

```python
from teachos.sh import parse_command, PipeCmd

cmd = parse_command("cat README | grep the > out")
assert isinstance(cmd, PipeCmd)
```

Match text against a pattern:

```python
from teachos.grep import match

match("^ab*c$", "abbbc")   # True
match("x.z", "wxyz")       # True
```

Format output:

```python
from teachos.printf import vformat

vformat("%d %x %s\n", [-5, 255, "ok"])   # "-5 FF ok\n"
```

Build a user address space and copy data in and out of it:

```python
from teachos.vm import PhysicalMemory, PageTable

memory = PhysicalMemory(64, 0x80000000)
table = PageTable.create(memory)
size = table.grow(0, 8192, 0)
table.copyout(100, b"hello\0")
table.copyinstr(100, 64)        # b"hello"
table.free(size)
```

Allocate from the simulated heap:

```python
from teachos.umalloc import Heap

heap = Heap(1 << 20)
block = heap.malloc(100)
heap.free(block)
```

## Commands

Installing the package also installs these utilities. They work on the
host's files and standard streams:

```
teachos-cat [file ...]
teachos-echo words ...
teachos-wc [file ...]
teachos-grep pattern [file ...]
teachos-ln old new
teachos-rm file ...
teachos-mkdir dir ...
```

Each utility behaves as follows:

- **`teachos-cat`** copies its input to standard output. With no file arguments it reads standard input.
- **`teachos-echo`** prints its arguments separated by spaces.
- **`teachos-wc`** prints lines, words, bytes and the file name for each file. With no file arguments it reads standard input.
- **`teachos-grep`** prints each newline-terminated line that matches the pattern. A final line with no newline is not printed. With no file arguments it reads standard input.
- **`teachos-ln`** reports a failed link on standard error and still exits with 0.
- **`teachos-rm`** removes files and empty directories. It stops at the first failure.
- **`teachos-mkdir`** creates directories. It stops at the first failure.

## What it does not do

- There is no kernel to boot. There is no scheduler, no process table and no
  on-disk file system. The modules model address spaces, headers and user
  utilities on their own.
- `PageTable.kernel` maps the devices, kernel text and data and the
  trampoline. It does not map per-process kernel stacks.
- The shell module only parses command lines. It does not run them, and no
  interactive shell command is installed.
- There is no `ls` command. Only its name formatting, `fmtname`, is provided.