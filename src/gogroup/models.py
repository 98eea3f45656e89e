from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ViolationKind = Literal[
    "StatementOrder",
    "StatementExtraLine",
    "StatementGroup",
    "GroupOrder",
    "GroupExtraLine",
]

VIOLATION_MESSAGES: dict[ViolationKind, str] = {
    "StatementOrder": "Import out of order within import group",
    "StatementExtraLine": "Extra empty line inside import group",
    "StatementGroup": "Import in incorrect group",
    "GroupOrder": "Import groups out of order",
    "GroupExtraLine": "Extra empty line between import groups",
}


@dataclass(frozen=True, slots=True)
class ImportSpec:
    """One import statement as reported by a parser, with 1-based lines."""

    path: str
    start_line: int
    end_line: int
    doc_start_line: int | None = None


@dataclass(frozen=True, slots=True)
class GroupedImport:
    path: str
    # Zero-based and inclusive. start_line covers an attached doc comment.
    start_line: int
    end_line: int
    group: int

    def sort_key(self) -> tuple[int, str]:
        return self.group, self.path


@dataclass(frozen=True, slots=True)
class ValidationError:
    """First grouping violation found in a file.

    This is a result value, not an exception: a file with bad import grouping
    is an expected outcome and is reported by returning one of these.
    """

    kind: ViolationKind
    message: str
    import_path: str
    line: int

    def __str__(self) -> str:
        return f"{self.message}: {self.import_path} (line {self.line})"
