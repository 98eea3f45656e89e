from __future__ import annotations

import logging
from typing import Protocol

from .config import GroupOrder
from .errors import ParseError
from .extractor import ImportParser, read_imports
from .formatter import FormatOptions, Formatter, GoimportsFormatter
from .go_parser import parse_go_imports
from .grouper import ConfiguredGrouper, Grouper
from .models import GroupedImport, ValidationError
from .rewriter import find_stray_line, split_lines, write_fixed
from .validator import validate_imports

logger = logging.getLogger(__name__)


class Reader(Protocol):
    def read(self) -> str: ...


class Processor:
    """Validate and repair import grouping of Go source files.

    A processor keeps no per-call state, so one instance can serve many files
    and many threads. Grouping violations are returned as
    :class:`ValidationError` values; only operational failures (unparsable
    source, I/O errors, a failing formatter) are raised.
    """

    def __init__(
        self,
        grouper: Grouper | None = None,
        *,
        parser: ImportParser = parse_go_imports,
        formatter: Formatter | None = None,
        format_options: FormatOptions | None = None,
    ) -> None:
        self.grouper = grouper or ConfiguredGrouper(GroupOrder())
        self.parser = parser
        self.formatter = formatter
        self.format_options = format_options

    def read_imports(self, file_name: str, source: str) -> list[GroupedImport]:
        return read_imports(file_name, source, self.grouper, self.parser)

    def validate(self, file_name: str, reader: Reader | str) -> ValidationError | None:
        source = _read_all(reader)
        return validate_imports(self.read_imports(file_name, source))

    def repair(self, file_name: str, reader: Reader | str) -> str | None:
        # Reordering needs the whole file, so read it all up front.
        source = _read_all(reader)
        imports = self.read_imports(file_name, source)
        violation = validate_imports(imports)
        if violation is None:
            return None

        lines = split_lines(source)
        stray = find_stray_line(lines, imports)
        if stray is not None:
            raise ParseError(
                file_name,
                stray + 1,
                "import block has content outside import statements; merge import declarations first",
            )

        logger.debug("Repairing %s: %s", file_name or "<input>", violation)
        return "".join(write_fixed(lines, imports))

    def reformat(self, file_name: str, reader: Reader | str) -> str | None:
        source = _read_all(reader)
        formatter = self.formatter or GoimportsFormatter()
        formatted = formatter.process(file_name, source, self.format_options)

        repaired = self.repair(file_name, formatted)
        if repaired is not None:
            return repaired
        if formatted == source:
            # Neither the formatter nor grouping changed anything.
            return None
        return formatted


def _read_all(reader: Reader | str) -> str:
    if isinstance(reader, str):
        return reader
    return reader.read()
