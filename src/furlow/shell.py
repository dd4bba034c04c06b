## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# The interactive loop: read a statement or a raw line, dispatch meta-commands, compile or
# assemble, run, and print whatever the statement left in the result register.
#

import sys
import enum
import traceback
from typing import Sequence

from .types import unset
from .errors import FurlowParseError, FurlowIncompleteParse, FurlowAssemblyError, FurlowCommandError, FurlowRuntimeError
from .parser import format_parse_error_context
from .scanner import COMMAND_MARKER, InputStream, read_statement, read_line
from .formatting import format_value
from .runtime import Runtime


FURLOW_VERSION = '0.4'

PS1 = 'FACT:'
PS2 = '    |'


class OnFatal(enum.Enum):
    ABORT_SESSION = 'abort-session'
    ABORT_STATEMENT = 'abort-statement'


HELP_TEXT = (
    "?help      Show a list of available commands.\n"
    "?mode      Switch interpreter mode.\n"
    "?registers Print the values of the VM's registers.\n"
    "?state     Print the VM's current state.\n"
)


class FurlowShell:
    def __init__(self, stream: InputStream, runtime: Runtime | None = None,
                 on_fatal: OnFatal = OnFatal.ABORT_SESSION, language_mode: bool = True,
                 filename: str = '<stdin>'):
        self.stream = stream
        self.runtime = runtime or Runtime()
        self.on_fatal = on_fatal
        self.language_mode = language_mode
        self.filename = filename
        self.commands = {
            'help': self.sh_help,
            'registers': self.runtime.machine.print_registers,
            'state': self.runtime.machine.print_state,
        }

    def sh_help(self) -> None:
        print(HELP_TEXT, end='')

    def read_input(self) -> str | None:
        if self.language_mode:
            return read_statement(self.stream, PS1, PS2)
        print(f"BAS {self.runtime.ip}> ", end='', flush=True)
        return read_line(self.stream)

    def dispatch(self, command: str) -> None:
        if command == 'mode':
            self.language_mode = not self.language_mode
            return
        if (func := self.commands.get(command)) is None:
            raise FurlowCommandError(f"No command of name {command}, try {COMMAND_MARKER}help.", furlow_token=command)
        func()

    def _report_parse_error(self, exc: FurlowParseError, source: str, first_line: int | Sequence[int]) -> None:
        context = format_parse_error_context(self.filename, exc.line, exc.column, exc.token, source=source, first_line=first_line)
        print(f'\033[30;43m SYNTAX ERROR. \033[0m Parsing `\033[97m{self.filename}\033[0m` caused a problem!{context}', file=sys.stderr)

    def _report_fatal(self, exc: Exception) -> None:
        message = str(exc).replace('\n', ' ') or type(exc).__name__
        print(f'\033[30;43m RUNTIME ERROR. \033[0m There was an error: {message}', file=sys.stderr)
        if not isinstance(exc, FurlowRuntimeError):
            traceback.print_exc()

    def load(self, source: str) -> bool:
        """Hand the input to the parser and compiler, or to the assembler; False skips this round."""
        if not self.language_mode:
            try:
                self.runtime.assemble(source)
            except FurlowAssemblyError as exc:
                print(f'\033[30;43m ASSEMBLY ERROR. \033[0m {exc}', file=sys.stderr)
                return False
            return True

        lines = self.stream.lines or self.stream.line
        try:
            self.runtime.compile(source, filename=self.filename, line=lines)
        except FurlowIncompleteParse:
            return False
        except FurlowParseError as exc:
            self._report_parse_error(exc, source, lines)
            return False
        return True

    def print_result(self) -> None:
        if (result := self.runtime.take_result()) is not unset:
            print(f"    $ {format_value(result)}")

    def run(self) -> int:
        while (source := self.read_input()) is not None:
            if source.startswith(COMMAND_MARKER):
                try:
                    self.dispatch(source[len(COMMAND_MARKER):])
                except FurlowCommandError as exc:
                    print(exc, file=sys.stderr)
                continue

            if not self.load(source):
                continue
            try:
                self.runtime.run()
            except Exception as exc:
                self._report_fatal(exc)
                if self.on_fatal is OnFatal.ABORT_SESSION:
                    break
                self.runtime.abandon()
                self.runtime.take_result()
                continue

            if self.language_mode:
                self.print_result()
        return 0


def banner() -> str:
    return f"Furlow VM version {FURLOW_VERSION}"
