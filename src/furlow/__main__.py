## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# furlow — Interactive shell for the Furlow VM, with its native built-in functions.
#

import sys
from dataclasses import dataclass

import click

from .formatting import write_without_ansi
from .runtime import Runtime
from .scanner import InputStream
from .shell import FurlowShell, OnFatal, banner


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    plain: bool
    raw: bool
    quiet: bool
    on_fatal: OnFatal


def start_shell(config: RuntimeConfig, script) -> int:
    if config.plain:
        writer = write_without_ansi(sys.stdout.write)
        sys.stdout.write, sys.stderr.write = writer, writer

    if not config.quiet:
        print(banner())
    shell = FurlowShell(InputStream(script), Runtime(verbosity=config.verbose), on_fatal=config.on_fatal,
                        language_mode=not config.raw, filename=getattr(script, 'name', None) or '<stdin>')
    return shell.run()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('script', type=click.File('r', encoding='utf-8'), default='-', required=False)
@click.option('--verbose', '-v', default=0, count=True, help='Trace native calls (-v) or every operation (-vv).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--raw', is_flag=True, help='Start in raw assembly mode instead of statement mode.')
@click.option('--quiet', '-q', is_flag=True, help='Do not print the version banner.')
@click.option('--on-fatal', type=click.Choice([p.value for p in OnFatal]), default=OnFatal.ABORT_SESSION.value,
              show_default=True, help='What a fatal runtime error aborts: the whole session or just the statement.')
@click.pass_context
def cli(ctx: click.Context, script, verbose: int, plain: bool, raw: bool, quiet: bool, on_fatal: str) -> None:
    config = RuntimeConfig(verbose=verbose, plain=plain, raw=raw, quiet=quiet, on_fatal=OnFatal(on_fatal))
    ctx.exit(start_shell(config, script))


def main(argv: list[str] | None = None) -> None:
    cli.main(args=argv, prog_name='furlow')


if __name__ == "__main__":
    main()
