"""Command line interface: ``cniutil``.

Subcommands:
    lint    comments on validity and style of CNI files
    dump    reads CNI files and shows the combined result in another layout
    format  (alias fmt) prints a strictly formatted version of a CNI file

Usage:
    cniutil lint config.cni
    cniutil --ini dump --csv a.cni b.cni
    cniutil fmt -n 3 - < config.cni

File name ``-`` reads standard input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from cni_format import __version__
from cni_format.config import Dialect
from cni_format.errors import ParseError
from cni_format.format import dump, dump_csv, dump_null, format_cni
from cni_format.linter import lint
from cni_format.parser import CniParser, parse
from cni_format.utils.logger import get_logger

logger = get_logger(__name__)

STDIN = "-"


class InputError(Exception):
    """An input file could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot process {path}: {reason}")


def _read(path: str) -> str:
    if path == STDIN:
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as err:
        raise InputError(path, err.strerror or str(err)) from err
    except UnicodeDecodeError as err:
        raise InputError(path, "stream did not contain valid UTF-8") from err


def _source_name(path: str) -> str | None:
    return None if path == STDIN else path


def _dialect(args: argparse.Namespace) -> Dialect:
    # flags left unset on the command line are absent from the namespace
    return Dialect(ini=getattr(args, "ini", False), more_keys=getattr(args, "more_keys", False))


def _cmd_lint(args: argparse.Namespace) -> int:
    dialect = _dialect(args)
    status = 0
    show_names = len(args.files) > 1
    for path in args.files:
        if show_names:
            # don't show the file name if there is only one file
            print(path)
        try:
            source = _read(path)
        except InputError as err:
            logger.debug("Skipping %s: %s", path, err.reason)
            print(err, file=sys.stderr)
            status = 1
            continue
        lint(source, dialect=dialect, out=sys.stdout)
    return status


def _cmd_dump(args: argparse.Namespace) -> int:
    dialect = _dialect(args)
    merged: dict[str, str] = {}
    for path in args.files:
        source = _read(path)
        # later files overwrite earlier ones
        merged.update(CniParser(source, dialect=dialect, source_file=_source_name(path)))

    if args.csv:
        text = dump_csv(merged)
    elif args.null:
        text = dump_null(merged)
    elif any(
        option is not None
        for option in (args.prefix, args.infix, args.postfix, args.postfix_no_newline)
    ):
        if args.postfix is not None:
            postfix = f"{args.postfix}\n"
        elif args.postfix_no_newline is not None:
            postfix = args.postfix_no_newline
        else:
            postfix = "\n"
        text = dump(
            merged,
            prefix=args.prefix or "",
            infix=args.infix if args.infix is not None else " ",
            postfix=postfix,
        )
    else:
        text = format_cni(merged, section_threshold=0)
    sys.stdout.write(text)
    return 0


def _cmd_format(args: argparse.Namespace) -> int:
    source = _read(args.file)
    data = parse(source, dialect=_dialect(args), source_file=_source_name(args.file))
    sys.stdout.write(format_cni(data, section_threshold=args.section_threshold))
    return 0


def _threshold(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid threshold: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"threshold must not be negative: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``cniutil``."""
    # dialect flags are accepted before and after the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--ini",
        action=argparse.BooleanOptionalAction,
        default=argparse.SUPPRESS,
        help="Enable the ini compatibility extension (';' comments).",
    )
    common.add_argument(
        "--more-keys",
        action=argparse.BooleanOptionalAction,
        default=argparse.SUPPRESS,
        help="Enable the more-keys extension.",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log debug output to stderr.",
    )

    parser = argparse.ArgumentParser(
        prog="cniutil",
        description="Tools for CNI configuration files.",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    lint_parser = commands.add_parser(
        "lint", parents=[common], help="comments on validity and style of CNI files"
    )
    lint_parser.add_argument(
        "files", nargs="*", default=[STDIN], metavar="FILES", help="input files, '-' for stdin"
    )
    lint_parser.set_defaults(handler=_cmd_lint)

    dump_parser = commands.add_parser(
        "dump",
        parents=[common],
        help="reads CNI files and shows the combined result in the specified format",
    )
    layout = dump_parser.add_mutually_exclusive_group()
    layout.add_argument("--cni", action="store_true", help="output CNI [default]")
    layout.add_argument(
        "-c", "--csv", action="store_true", help="output comma separated values"
    )
    layout.add_argument(
        "-0",
        "--null",
        action="store_true",
        help="terminate records with a NUL character instead of a line feed",
    )
    dump_parser.add_argument("--prefix", help="custom record prefix")
    dump_parser.add_argument("--infix", help="custom separator between key and value")
    postfix = dump_parser.add_mutually_exclusive_group()
    postfix.add_argument("--postfix", help="custom record postfix, a line feed is appended")
    postfix.add_argument(
        "--postfixx",
        dest="postfix_no_newline",
        metavar="POSTFIX",
        help="custom record postfix, no line feed is appended",
    )
    dump_parser.add_argument(
        "files", nargs="*", default=[STDIN], metavar="FILES", help="input files, '-' for stdin"
    )
    dump_parser.set_defaults(handler=_cmd_dump)

    format_parser = commands.add_parser(
        "format",
        aliases=["fmt"],
        parents=[common],
        help="prints a strictly formatted representation of a CNI file",
    )
    format_parser.add_argument(
        "-n",
        "--section-threshold",
        type=_threshold,
        default=10,
        help="entries a section needs to get a section heading, 0 disables headings",
    )
    format_parser.add_argument(
        "file", nargs="?", default=STDIN, metavar="FILE", help="input file, '-' for stdin"
    )
    format_parser.set_defaults(handler=_cmd_format)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run ``cniutil`` and return the exit status."""
    args = build_parser().parse_args(argv)
    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        return args.handler(args)
    except InputError as err:
        print(err, file=sys.stderr)
        return 1
    except ParseError as err:
        print(err, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
