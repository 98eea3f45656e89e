from __future__ import annotations

import logging
from typing import Sequence

from .models import GroupedImport

logger = logging.getLogger(__name__)


def split_lines(source: str) -> list[str]:
    # Only "\n" ends a line in Go source, unlike str.splitlines.
    pieces = source.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def detect_line_ending(source: str) -> str:
    return "\r\n" if "\r\n" in source else "\n"


def sorted_import_lines(
    imports: Sequence[GroupedImport],
    lines: Sequence[str],
    line_ending: str = "\n",
) -> list[str]:
    ordered = sorted(imports, key=GroupedImport.sort_key)

    out: list[str] = []
    prev: GroupedImport | None = None
    for grouped in ordered:
        if prev is not None and grouped.group != prev.group:
            out.append(line_ending)
        for line in lines[grouped.start_line : grouped.end_line + 1]:
            out.append(_with_line_ending(line, line_ending))
        prev = grouped
    return out


def write_fixed(lines: Sequence[str], imports: Sequence[GroupedImport]) -> list[str]:
    """Rebuild ``lines`` with the import block sorted and spaced by group.

    ``lines`` keep their terminators, as produced by :func:`split_lines`.
    Only the span from the first import's first line to the last import's
    last line is replaced; everything before and after is returned as is.
    """
    if not imports:
        raise ValueError("write_fixed requires at least one import")

    first = min(grouped.start_line for grouped in imports)
    last = max(grouped.end_line for grouped in imports)
    if last >= len(lines):
        raise ValueError(f"import ends on line {last} but source has {len(lines)} line(s)")

    stray = find_stray_line(lines, imports)
    if stray is not None:
        raise ValueError(f"line {stray} inside the import block belongs to no import")

    line_ending = detect_line_ending("".join(lines))
    block = sorted_import_lines(imports, lines, line_ending)
    if block and not _has_line_ending(lines[last]):
        block[-1] = _strip_line_ending(block[-1])

    logger.debug("Rewriting import block on lines %d-%d (%d import(s))", first, last, len(imports))
    # Build a new list so the caller's lines stay untouched.
    return [*lines[:first], *block, *lines[last + 1 :]]


def find_stray_line(lines: Sequence[str], imports: Sequence[GroupedImport]) -> int | None:
    """Return the first non-blank line of the import span that no import covers.

    Such a line (a floating comment, or the ``import (`` and ``)`` of another
    declaration) would be dropped by the rewrite.
    """
    first = min(grouped.start_line for grouped in imports)
    last = max(grouped.end_line for grouped in imports)
    covered: set[int] = set()
    for grouped in imports:
        covered.update(range(grouped.start_line, grouped.end_line + 1))
    for index in range(first, min(last, len(lines) - 1) + 1):
        if index not in covered and lines[index].strip():
            return index
    return None


def _has_line_ending(line: str) -> bool:
    return line.endswith("\n")


def _strip_line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    return line.removesuffix("\n")


def _with_line_ending(line: str, line_ending: str) -> str:
    if _has_line_ending(line):
        return line
    return line + line_ending
