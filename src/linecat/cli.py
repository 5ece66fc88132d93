"""Linecat CLI — entry point.

    linecat [OPTIONS] [FILES]...

Concatenate FILES (or stdin) to stdout, optionally numbering, marking,
searching, Base64-coding and paging the lines on the way.
"""
from __future__ import annotations

import logging
import os
import sys
from contextlib import ExitStack
from typing import BinaryIO

import click
from rich.console import Console
from rich.logging import RichHandler

from .config import config_path, load_settings, write_default_config
from .errors import FileOpenError, LinecatError
from .output.pager import PaginationController
from .output.raw_copy import copy_mapped, copy_stream, is_mappable
from .pipeline.builder import Features, build_chain
from .pipeline.processor import LineProcessor

logger = logging.getLogger(__name__)
err_console = Console(stderr=True)

STDIN_NAME = "-"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=verbose)],
        force=True,
    )


def _open_source(name: str, stack: ExitStack) -> BinaryIO:
    if name == STDIN_NAME:
        return sys.stdin.buffer
    try:
        return stack.enter_context(open(name, "rb"))
    except OSError as exc:
        raise FileOpenError(f"{name}: {exc.strerror or exc}") from exc


def run(
    files: list[str],
    features: Features,
    paginate: bool,
    use_mmap: bool = False,
    sink: BinaryIO | None = None,
) -> None:
    """Process every source in order and write the result to sink.

    Raises a LinecatError subclass on any failure.
    """
    out = sink if sink is not None else sys.stdout.buffer
    sources = files or [STDIN_NAME]
    chain = build_chain(features)

    with ExitStack() as stack:
        if not chain and not paginate:
            for name in sources:
                if use_mmap and name != STDIN_NAME and is_mappable(name):
                    copy_mapped(name, out)
                else:
                    copy_stream(_open_source(name, stack), out)
            out.flush()
            return

        processor = LineProcessor(chain)
        if not paginate:
            for name in sources:
                processor.process(_open_source(name, stack), out)
            out.flush()
            return

        collected: list[str] = []
        for name in sources:
            processor.collect(_open_source(name, stack), collected)

    PaginationController(out).paginate(collected)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version="0.4.5", prog_name="linecat")
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--number", "-n", is_flag=True, help="Number output lines.")
@click.option("--dollar", "-d", is_flag=True, help="Display $ at the end of each line.")
@click.option("--tabs", "-t", is_flag=True, help="Display TAB characters as ^I.")
@click.option("--squeeze-blank", "-s", is_flag=True, help="Squeeze repeated empty lines.")
@click.option(
    "--search", "search", default=None, metavar="TEXT",
    help="Only show lines containing TEXT (prefix with 'reg:' for a regex).",
)
@click.option("--ignore-case", "-i", is_flag=True, help="Case-insensitive --search.")
@click.option("--encode-base64", is_flag=True, help="Base64-encode each line.")
@click.option(
    "--decode-base64", is_flag=True,
    help="Base64-decode each line. Lines that do not decode are dropped.",
)
@click.option("--pages", "-p", is_flag=True, help="Page output one screen at a time.")
@click.option(
    "--mmap", "use_mmap", is_flag=True,
    help="Copy regular files via memory mapping when no transform is set.",
)
@click.option("--init-config", is_flag=True, help="Write the default config file and exit.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug information to stderr.")
def main(
    files: tuple[str, ...],
    number: bool,
    dollar: bool,
    tabs: bool,
    squeeze_blank: bool,
    search: str | None,
    ignore_case: bool,
    encode_base64: bool,
    decode_base64: bool,
    pages: bool,
    use_mmap: bool,
    init_config: bool,
    verbose: bool,
) -> None:
    """Concatenate FILES to standard output.

    With no FILES, or when FILE is -, read standard input. Defaults for
    -n, -d, -t, -s and -p can be switched on in the config file.

    \b
    Examples:
      linecat notes.txt
      linecat -n -s chapter1.txt chapter2.txt
      linecat --search "reg:\\d+" -n data.txt
      linecat --search error -i -p app.log
      printf 'aGVsbG8=\\n' | linecat --decode-base64
    """
    _configure_logging(verbose)

    try:
        if init_config:
            path = write_default_config()
            click.echo(f"Config file: {path}")
            return

        settings = load_settings()
        logger.debug("Using config %s: %r", config_path(), settings)
        features = Features(
            number=number or settings.number_feature,
            dollar=dollar or settings.dollar_sign_feature,
            tabs=tabs or settings.tabs_feature,
            squeeze_blank=squeeze_blank or settings.compress_empty_line_feature,
            search=search,
            ignore_case=ignore_case,
            encode_base64=encode_base64,
            decode_base64=decode_base64,
        )
        run(
            list(files),
            features,
            paginate=pages or settings.pagination_feature,
            use_mmap=use_mmap,
        )
    except BrokenPipeError:
        # Downstream closed early (e.g. `| head`); keep the exit-time flush quiet.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(1)
    except LinecatError as exc:
        err_console.print(f"[red]linecat:[/red] {type(exc).__name__}: {exc}", highlight=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
