"""Command-line parser for the shell: tokens, command trees and redirections."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Tuple, Union

MAXARGS = 10

_WHITESPACE = " \t\r\n\v"
_SYMBOLS = "<|>&;()"
_SINGLE = "|();&<"


class OpenFlag(enum.IntFlag):
    """Flags accepted by open()."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


@dataclass
class ExecCmd:
    """Run a program with its argument vector."""

    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with file descriptor ``fd`` reopened on ``file``."""

    cmd: "Command"
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run ``cmd`` in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class Lexer:
    """Splits a command line into shell tokens.

    Token kinds are the symbol itself for ``| ( ) ; & < >``, ``'+'`` for
    ``>>``, ``'a'`` for a word and ``''`` at the end of the input.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    @property
    def rest(self) -> str:
        """The unconsumed remainder of the input."""
        return self.text[self.pos:]

    def peek(self, toks: str) -> bool:
        """Skip whitespace and report whether the next character is in ``toks``."""
        self._skip_space()
        return self.pos < len(self.text) and self.text[self.pos] in toks

    def next_token(self) -> Tuple[str, str]:
        """Consume one token and return its kind and its text."""
        text = self.text
        n = len(text)
        self._skip_space()
        start = self.pos
        if self.pos >= n:
            kind = ""
        else:
            c = text[self.pos]
            if c in _SINGLE:
                self.pos += 1
                kind = c
            elif c == ">":
                self.pos += 1
                if self.pos < n and text[self.pos] == ">":
                    self.pos += 1
                    kind = "+"
                else:
                    kind = ">"
            else:
                kind = "a"
                while (
                    self.pos < n
                    and text[self.pos] not in _WHITESPACE
                    and text[self.pos] not in _SYMBOLS
                ):
                    self.pos += 1
        word = text[start:self.pos]
        self._skip_space()
        return kind, word


def parse_command(text: str) -> Command:
    """Parse a whole command line into a command tree."""
    lexer = Lexer(text)
    cmd = _parse_line(lexer)
    lexer.peek("")
    if lexer.rest:
        raise ShellSyntaxError(f"leftovers: {lexer.rest}")
    return cmd


def _parse_line(lexer: Lexer) -> Command:
    cmd = _parse_pipe(lexer)
    while lexer.peek("&"):
        lexer.next_token()
        cmd = BackCmd(cmd)
    if lexer.peek(";"):
        lexer.next_token()
        cmd = ListCmd(cmd, _parse_line(lexer))
    return cmd


def _parse_pipe(lexer: Lexer) -> Command:
    cmd = _parse_exec(lexer)
    if lexer.peek("|"):
        lexer.next_token()
        cmd = PipeCmd(cmd, _parse_pipe(lexer))
    return cmd


def _parse_redirs(cmd: Command, lexer: Lexer) -> Command:
    while lexer.peek("<>"):
        tok, _ = lexer.next_token()
        kind, name = lexer.next_token()
        if kind != "a":
            raise ShellSyntaxError("missing file for redirection")
        if tok == "<":
            cmd = RedirCmd(cmd, name, OpenFlag.RDONLY, 0)
        elif tok == ">":
            cmd = RedirCmd(cmd, name, OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1)
        else:
            cmd = RedirCmd(cmd, name, OpenFlag.WRONLY | OpenFlag.CREATE, 1)
    return cmd


def _parse_block(lexer: Lexer) -> Command:
    if not lexer.peek("("):
        raise ShellSyntaxError("parseblock")
    lexer.next_token()
    cmd = _parse_line(lexer)
    if not lexer.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    lexer.next_token()
    return _parse_redirs(cmd, lexer)


def _parse_exec(lexer: Lexer) -> Command:
    if lexer.peek("("):
        return _parse_block(lexer)
    exec_cmd = ExecCmd()
    ret: Command = _parse_redirs(exec_cmd, lexer)
    while not lexer.peek("|)&;"):
        kind, word = lexer.next_token()
        if kind == "":
            break
        if kind != "a":
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(word)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parse_redirs(ret, lexer)
    return ret