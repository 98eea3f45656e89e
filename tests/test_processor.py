from __future__ import annotations

import io

import pytest

from gogroup.errors import FormatterError, ParseError
from gogroup.formatter import FormatOptions
from gogroup.grouper import ConfiguredGrouper, StdOtherGrouper
from gogroup.processor import Processor

MESSY = """package main

import (
	"github.com/pkg/errors"
	"os"


	"golang.org/x/net/context"
	"fmt"
)

func main() {}
"""

TIDY = """package main

import (
	"fmt"
	"os"

	"github.com/pkg/errors"
	"golang.org/x/net/context"
)

func main() {}
"""


class FakeFormatter:
    def __init__(self, output: str | None = None, error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[tuple[str, str, FormatOptions | None]] = []

    def process(self, file_name: str, source: str, options: FormatOptions | None = None) -> str:
        self.calls.append((file_name, source, options))
        if self.error is not None:
            raise self.error
        return source if self.output is None else self.output


def test_default_grouper_is_std_then_other() -> None:
    processor = Processor()
    assert isinstance(processor.grouper, ConfiguredGrouper)
    assert processor.grouper.group("os") == 0
    assert processor.grouper.group("github.com/a/b") == 1


def test_repair_sorts_and_regroups() -> None:
    assert Processor(StdOtherGrouper()).repair("main.go", MESSY) == TIDY


def test_repair_returns_none_for_valid_source() -> None:
    assert Processor(StdOtherGrouper()).repair("main.go", TIDY) is None


def test_repair_output_is_valid_and_stable() -> None:
    processor = Processor(StdOtherGrouper())
    repaired = processor.repair("main.go", MESSY)
    assert repaired is not None
    assert processor.validate("main.go", repaired) is None
    assert processor.repair("main.go", repaired) is None


def test_validate_accepts_a_reader() -> None:
    violation = Processor(StdOtherGrouper()).validate("main.go", io.StringIO(MESSY))
    assert violation is not None
    assert violation.kind == "StatementGroup"
    assert violation.import_path == "os"
    assert violation.line == 4


def test_repair_moves_doc_comments_with_their_import() -> None:
    source = """package main

import (
	// errors doc
	"github.com/pkg/errors"
	"os" // for Exit
)
"""
    expected = """package main

import (
	"os" // for Exit

	// errors doc
	"github.com/pkg/errors"
)
"""
    assert Processor(StdOtherGrouper()).repair("", source) == expected


def test_repair_single_line_declarations() -> None:
    source = 'package main\n\nimport "strings"\nimport "os"\n\nfunc main() {}\n'
    expected = 'package main\n\nimport "os"\nimport "strings"\n\nfunc main() {}\n'
    assert Processor(StdOtherGrouper()).repair("", source) == expected


def test_repair_preserves_crlf() -> None:
    source = MESSY.replace("\n", "\r\n")
    assert Processor(StdOtherGrouper()).repair("", source) == TIDY.replace("\n", "\r\n")


def test_repair_without_trailing_newline() -> None:
    source = 'package main\nimport "b"\nimport "a"'
    assert Processor(StdOtherGrouper()).repair("", source) == 'package main\nimport "a"\nimport "b"'


def test_interleaved_groups_are_collected() -> None:
    source = """package main

import (
	"a.com/x"

	"os"


	"b.com/y"

	"fmt"
)
"""
    processor = Processor(StdOtherGrouper())
    repaired = processor.repair("", source)
    assert repaired == 'package main\n\nimport (\n\t"fmt"\n\t"os"\n\n\t"a.com/x"\n\t"b.com/y"\n)\n'
    imports = processor.read_imports("", repaired)
    assert [grouped.path for grouped in imports] == ["fmt", "os", "a.com/x", "b.com/y"]
    assert [grouped.group for grouped in imports] == [0, 0, 1, 1]
    gaps = [current.start_line - prev.end_line - 1 for prev, current in zip(imports, imports[1:])]
    assert gaps == [0, 1, 0]


def test_repair_refuses_to_merge_separate_declarations() -> None:
    source = 'package main\n\nimport "os"\n\nimport (\n\t"fmt"\n)\n\nfunc main() {}\n'
    with pytest.raises(ParseError, match="outside import statements") as info:
        Processor(StdOtherGrouper()).repair("main.go", source)
    assert info.value.line == 5


def test_repair_refuses_to_drop_floating_comments() -> None:
    source = 'package main\n\nimport (\n\t"strings"\n\n\t// keep me\n\n\t"os"\n)\n'
    with pytest.raises(ParseError) as info:
        Processor(StdOtherGrouper()).repair("main.go", source)
    assert info.value.line == 6


def test_repair_propagates_parse_errors() -> None:
    with pytest.raises(ParseError):
        Processor().repair("bad.go", 'package main\nimport "os\n')


def test_reformat_runs_formatter_before_repair() -> None:
    formatter = FakeFormatter(output=MESSY)
    options = FormatOptions(local_prefixes=("github.com/me",))
    processor = Processor(StdOtherGrouper(), formatter=formatter, format_options=options)
    assert processor.reformat("main.go", "unformatted") == TIDY
    assert formatter.calls == [("main.go", "unformatted", options)]


def test_reformat_returns_none_when_nothing_changes() -> None:
    processor = Processor(StdOtherGrouper(), formatter=FakeFormatter())
    assert processor.reformat("main.go", TIDY) is None


def test_reformat_returns_formatter_output_when_grouping_is_already_valid() -> None:
    processor = Processor(StdOtherGrouper(), formatter=FakeFormatter(output=TIDY))
    assert processor.reformat("main.go", TIDY.replace("\t", "    ")) == TIDY


def test_reformat_propagates_formatter_errors() -> None:
    processor = Processor(formatter=FakeFormatter(error=FormatterError("goimports failed")))
    with pytest.raises(FormatterError, match="goimports failed"):
        processor.reformat("main.go", TIDY)
