from __future__ import annotations

import pytest

from gogroup.errors import ParseError
from gogroup.extractor import read_imports
from gogroup.grouper import DepthGrouper, StdOtherGrouper
from gogroup.models import GroupedImport, ImportSpec


def test_lines_become_zero_based_and_include_doc_comments() -> None:
    source = """package main

import (
	"os"
	// errors is vendored.
	"github.com/pkg/errors"
)
"""
    imports = read_imports("main.go", source, StdOtherGrouper())
    assert imports == [
        GroupedImport(path="os", start_line=3, end_line=3, group=0),
        GroupedImport(path="github.com/pkg/errors", start_line=4, end_line=5, group=1),
    ]


def test_custom_parser_collaborator() -> None:
    calls: list[tuple[str, str]] = []

    def fake_parser(file_name: str, source: str) -> list[ImportSpec]:
        calls.append((file_name, source))
        return [
            ImportSpec(path="a/b/c", start_line=2, end_line=3, doc_start_line=1),
            ImportSpec(path="d", start_line=4, end_line=4),
        ]

    imports = read_imports("x.go", "ignored", DepthGrouper(), parser=fake_parser)
    assert calls == [("x.go", "ignored")]
    assert imports == [
        GroupedImport(path="a/b/c", start_line=0, end_line=2, group=2),
        GroupedImport(path="d", start_line=3, end_line=3, group=0),
    ]


def test_statements_sharing_a_line_are_rejected() -> None:
    with pytest.raises(ParseError, match="shares a line"):
        read_imports("x.go", 'package main\nimport ("os"; "fmt")\n', StdOtherGrouper())


def test_parse_errors_propagate() -> None:
    with pytest.raises(ParseError):
        read_imports("x.go", "not go at all", StdOtherGrouper())
