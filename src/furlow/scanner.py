## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Segments a character stream into statements for the language mode, and into plain lines
# for the raw mode and for meta-commands.
#

import io
from typing import TextIO


COMMAND_MARKER = '?'
OPENERS = {'(': 0, '[': 1, '{': 2}
CLOSERS = {')': 0, ']': 1, '}': 2}


class InputStream:
    """Reads one character at a time from a text stream, with push-back like `ungetc`.

    `line` is the input line the next character comes from, and `lines` holds the input line of
    each line of the last statement read, since comment lines never reach its text.
    """

    def __init__(self, source: TextIO | str):
        self.source = io.StringIO(source) if isinstance(source, str) else source
        self.pending: list[str] = []
        self.line = 1
        self.lines: tuple[int, ...] = ()

    def getc(self) -> str:
        """Next character, or the empty string at end of input."""
        c = self.pending.pop() if self.pending else self.source.read(1)
        if c == '\n': self.line += 1
        return c

    def ungetc(self, c: str) -> None:
        if c == '\n': self.line -= 1
        if c: self.pending.append(c)


def _prompt(text: str) -> None:
    print(f"{text} ", end='', flush=True)


def read_line(stream: InputStream) -> str | None:
    """Read one logical line: runs of spaces collapse to one, backslash-newline joins lines.

    Spaces that run into the end of the line are dropped. Returns None only when the input
    ended before any character was read.
    """
    res = []
    while (c := stream.getc()) != '\n':
        if c == '':
            if not res: return None
            break
        if c == '\\':
            if (n := stream.getc()) == '\n':
                continue
            res.append(c)
            c = n
            if c == '': break
        elif c == ' ':
            while (n := stream.getc()) == ' ':
                pass
            stream.ungetc(n)
            if n in ('\n', ''):
                continue
        res.append(c)
    return ''.join(res)


def read_statement(stream: InputStream, ps1: str, ps2: str) -> str | None:
    """Read characters until brackets balance and a `;` or a closing `}` ends the statement.

    Line breaks are held back and only enter the buffer when more content follows, so the
    statement never ends on a newline; the held ones go back to the stream once it is complete.
    A `?` before any content hands the rest of the line over to `read_line` as a meta-command.
    """
    res = []
    depth = [0, 0, 0]
    held: list[int] = []
    lines: list[int] = []

    _prompt(ps1)
    while (c := stream.getc()) != '':
        if c in OPENERS:
            depth[OPENERS[c]] += 1
        elif c in CLOSERS:
            depth[CLOSERS[c]] -= 1
            if c == '}' and not any(depth):
                lines = lines or [stream.line]
                res.append(c)
                break
        elif c == ';':
            if not any(depth):
                lines = lines or [stream.line]
                res.append(c)
                break
        elif c == '#':
            while (c := stream.getc()) not in ('', '\n'):
                pass
            if c == '': break
            if res: _prompt(ps2)
            continue
        elif c == '\n':
            held.append(stream.line)
            if res: _prompt(ps2)
            continue
        elif c == COMMAND_MARKER and not res:
            stream.ungetc(c)
            return read_line(stream)

        if not res:
            lines.append(held[0] - 1 if held else stream.line)
        if held:
            lines.extend(held[:-1])
            lines.append(stream.line)
            res.extend('\n' * len(held))
            held = []
        res.append(c)

    for _ in held:
        stream.ungetc('\n')
    stream.lines = tuple(lines)
    return ''.join(res) if res else None
