from __future__ import annotations

import argparse
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import sys
from typing import Sequence, TextIO

from .config import ORDER_ENV_VAR, GroupOrder, order_from_environment, parse_order_specs
from .discovery import discover_go_files
from .errors import GoGroupError, OrderSpecError
from .file_writer import FilePreview, apply_preview, generate_preview, read_source
from .formatter import FormatOptions
from .grouper import ConfiguredGrouper
from .models import ValidationError
from .processor import Processor

LOG_LEVEL_ENV_VAR = "GOGROUP_LOG_LEVEL"

logger = logging.getLogger(__name__)

STATUS_OK = 0
STATUS_ERROR = 1
STATUS_USAGE = 2
STATUS_INVALID_FILE = 3

_DESCRIPTION = """\
Enforce import grouping in Go source files.

Exits with status 3 if import grouping is violated.
"""

_ORDER_HELP = f"""\
Modify the import grouping strategy by listing the desired groups in order.
Group specifications are 'std' (standard library imports), 'prefix=PREFIX'
(imports whose path starts with PREFIX) and 'other' (imports that match no
other specification). Groups can be given in one comma-separated argument or
in several arguments. Default: ${ORDER_ENV_VAR} or std,other.
"""


@dataclass(frozen=True, slots=True)
class RunOptions:
    rewrite: bool
    diff: bool
    reformat: bool
    backup: bool


@dataclass(frozen=True, slots=True)
class FileOutcome:
    path: Path
    violation: ValidationError | None = None
    preview: FilePreview | None = None
    error: str | None = None


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gogroup",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    p.add_argument("paths", nargs="+", type=Path, metavar="PATH", help="Go files or directories to check.")
    p.add_argument(
        "-rewrite",
        "--rewrite",
        action="store_true",
        help="Rewrite the source files with the correct grouping instead of checking it.",
    )
    p.add_argument(
        "-order",
        "--order",
        action="append",
        metavar="SPEC[,SPEC...]",
        help=_ORDER_HELP,
    )
    p.add_argument(
        "--diff",
        action="store_true",
        help="Print a unified diff of the fixes. Without --rewrite nothing is written.",
    )
    p.add_argument(
        "--reformat",
        action="store_true",
        help="Run goimports before regrouping (with --rewrite or --diff).",
    )
    p.add_argument("--local", action="append", default=[], metavar="PREFIX", help="Passed to goimports -local.")
    p.add_argument("--backup", action="store_true", help="Keep a .bak copy of every rewritten file.")
    p.add_argument("--skip-tests", action="store_true", help="Ignore *_test.go files found in directories.")
    p.add_argument("-j", "--jobs", type=int, default=1, help="Number of files to process in parallel.")
    p.add_argument("-v", "--verbose", action="count", default=0)
    p.add_argument("-q", "--quiet", action="store_true")
    return p


def _build_logger(level: int) -> logging.Logger:
    logger = logging.getLogger("gogroup")
    logger.setLevel(level)
    if logger.handlers:
        return logger

    logger.propagate = False
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)
    return logger


def _resolve_log_level(verbose: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    configured = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(configured) if configured else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def _resolve_order(specs: Sequence[str] | None) -> GroupOrder:
    if specs:
        return parse_order_specs(specs)
    return order_from_environment()


def _go_quote(path: str) -> str:
    return json.dumps(path, ensure_ascii=False)


def _process_file(processor: Processor, path: Path, options: RunOptions) -> FileOutcome:
    name = str(path)
    try:
        source = read_source(path)
        if not (options.rewrite or options.diff):
            return FileOutcome(path=path, violation=processor.validate(name, source))

        if options.reformat:
            updated = processor.reformat(name, source)
        else:
            updated = processor.repair(name, source)
        if updated is None:
            return FileOutcome(path=path)

        preview = generate_preview(path, source, updated)
        if options.rewrite:
            backup_path = apply_preview(preview, backup=options.backup)
            logger.info("Rewrote %s%s", path, f" (backup at {backup_path})" if backup_path else "")
        return FileOutcome(path=path, preview=preview)
    except (GoGroupError, OSError, UnicodeDecodeError) as exc:
        return FileOutcome(path=path, error=str(exc))


def run(
    paths: Sequence[Path],
    processor: Processor,
    options: RunOptions,
    jobs: int = 1,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    out = stdout or sys.stdout
    err = stderr or sys.stderr

    if jobs > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(lambda path: _process_file(processor, path, options), paths))
    else:
        outcomes = [_process_file(processor, path, options) for path in paths]

    failed = False
    invalid = False
    for outcome in outcomes:
        if outcome.error is not None:
            failed = True
            print(outcome.error, file=err)
            continue
        if outcome.violation is not None:
            invalid = True
            violation = outcome.violation
            print(
                f"{outcome.path}:{violation.line + 1}: {violation.message} at {_go_quote(violation.import_path)}",
                file=out,
            )
        if outcome.preview is not None and options.diff:
            out.write(outcome.preview.diff_text)
            if not options.rewrite:
                invalid = True

    if failed:
        return STATUS_ERROR
    if invalid:
        return STATUS_INVALID_FILE
    return STATUS_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        order = _resolve_order(args.order)
    except OrderSpecError as exc:
        parser.error(str(exc))
    if args.reformat and not (args.rewrite or args.diff):
        parser.error("--reformat requires --rewrite or --diff")
    if args.jobs < 1:
        parser.error("--jobs must be a positive integer")

    root_logger = _build_logger(_resolve_log_level(args.verbose, args.quiet))
    root_logger.debug("Using import order %s", order.describe())

    try:
        paths = discover_go_files(args.paths, include_tests=not args.skip_tests)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return STATUS_ERROR

    processor = Processor(
        ConfiguredGrouper(order),
        format_options=FormatOptions(local_prefixes=tuple(args.local)),
    )
    options = RunOptions(rewrite=args.rewrite, diff=args.diff, reformat=args.reformat, backup=args.backup)
    return run(paths, processor, options, jobs=args.jobs)
