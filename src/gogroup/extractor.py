from __future__ import annotations

import logging
from typing import Callable

from .errors import ParseError
from .go_parser import parse_go_imports
from .grouper import Grouper
from .models import GroupedImport, ImportSpec

ImportParser = Callable[[str, str], list[ImportSpec]]

logger = logging.getLogger(__name__)


def read_imports(
    file_name: str,
    source: str,
    grouper: Grouper,
    parser: ImportParser = parse_go_imports,
) -> list[GroupedImport]:
    """Read the import statements of ``source`` and assign each a group.

    Line numbers in the result are zero-based; a statement's range starts at
    its doc comment when it has one, so the comment travels with it.
    """
    imports: list[GroupedImport] = []
    for spec in parser(file_name, source):
        start = spec.doc_start_line if spec.doc_start_line is not None else spec.start_line
        grouped = GroupedImport(
            path=spec.path,
            start_line=start - 1,
            end_line=spec.end_line - 1,
            group=grouper.group(spec.path),
        )
        if imports and grouped.start_line <= imports[-1].end_line:
            raise ParseError(
                file_name,
                spec.start_line,
                f"import {spec.path!r} shares a line with {imports[-1].path!r}; run gofmt first",
            )
        imports.append(grouped)

    logger.debug("Read %d import(s) from %s", len(imports), file_name or "<input>")
    return imports
