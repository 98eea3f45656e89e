from __future__ import annotations

from typing import Sequence

from .models import VIOLATION_MESSAGES, GroupedImport, ValidationError, ViolationKind


def validate_imports(imports: Sequence[GroupedImport]) -> ValidationError | None:
    """Return the first grouping violation in source order, or ``None``.

    Each statement is compared with the one before it. Checks run in a fixed
    priority: spacing within a group before ordering within a group, and for a
    group change a missing blank line before group order before extra blank
    lines. Changing that order changes which diagnosis ambiguous input gets.
    """
    if len(imports) < 2:
        return None

    prev = imports[0]
    for current in imports[1:]:
        blank_lines = current.start_line - prev.end_line - 1
        if current.group == prev.group:
            if blank_lines > 0:
                return _violation(current, "StatementExtraLine")
            if current.path < prev.path:
                return _violation(current, "StatementOrder")
        elif blank_lines == 0:
            # Could also be a missing blank line between two groups.
            return _violation(current, "StatementGroup")
        elif current.group < prev.group:
            return _violation(current, "GroupOrder")
        elif blank_lines > 1:
            return _violation(current, "GroupExtraLine")
        prev = current
    return None


def _violation(grouped: GroupedImport, kind: ViolationKind) -> ValidationError:
    return ValidationError(
        kind=kind,
        message=VIOLATION_MESSAGES[kind],
        import_path=grouped.path,
        line=grouped.start_line,
    )
