from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Literal, NoReturn

from .errors import ParseError
from .models import ImportSpec

TokenKind = Literal["ident", "string", "punct", "comment", "eof"]

_WHITESPACE_PATTERN = re.compile(r"[ \t\r\n]+")
_LINE_COMMENT_PATTERN = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
_INTERPRETED_STRING_PATTERN = re.compile(r'"(?:[^"\\\n]|\\[^\n])*"')
_RAW_STRING_PATTERN = re.compile(r"`[^`]*`")
_IDENT_PATTERN = re.compile(r"[^\W\d]\w*")
_ESCAPE_PATTERN = re.compile(
    r"""\\(?:(?P<simple>[abfnrtv\\"])|(?P<oct>[0-7]{3})|x(?P<hex>[0-9A-Fa-f]{2})"""
    r"""|u(?P<u4>[0-9A-Fa-f]{4})|U(?P<u8>[0-9A-Fa-f]{8}))"""
)
_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}
_ILLEGAL_IMPORT_CHARS = frozenset("!\"#$%&'()*,:;<=>?[\\]^`{|}\ufffd")


@dataclass(frozen=True, slots=True)
class _Token:
    kind: TokenKind
    value: str
    line: int
    end_line: int

    def describe(self) -> str:
        if self.kind == "eof":
            return "EOF"
        return self.value


class _Scanner:
    def __init__(self, file_name: str, source: str) -> None:
        self._file_name = file_name
        self._source = source[1:] if source.startswith("\ufeff") else source
        self._pos = 0
        self._line = 1

    def scan(self) -> _Token:
        whitespace = _WHITESPACE_PATTERN.match(self._source, self._pos)
        if whitespace:
            self._consume(whitespace.group())

        if self._pos >= len(self._source):
            return _Token("eof", "", self._line, self._line)

        head = self._source[self._pos]
        if self._source.startswith("//", self._pos):
            return self._take("comment", _LINE_COMMENT_PATTERN, "comment not terminated")
        if self._source.startswith("/*", self._pos):
            return self._take("comment", _BLOCK_COMMENT_PATTERN, "comment not terminated")
        if head == '"':
            return self._take("string", _INTERPRETED_STRING_PATTERN, "string literal not terminated")
        if head == "`":
            return self._take("string", _RAW_STRING_PATTERN, "raw string literal not terminated")
        ident = _IDENT_PATTERN.match(self._source, self._pos)
        if ident:
            return self._emit("ident", ident.group())
        return self._emit("punct", head)

    def _take(self, kind: TokenKind, pattern: re.Pattern[str], error: str) -> _Token:
        match = pattern.match(self._source, self._pos)
        if match is None:
            raise ParseError(self._file_name, self._line, error)
        return self._emit(kind, match.group())

    def _emit(self, kind: TokenKind, text: str) -> _Token:
        start_line = self._line
        self._consume(text)
        return _Token(kind, text, start_line, self._line)

    def _consume(self, text: str) -> None:
        self._pos += len(text)
        self._line += text.count("\n")


class _ImportsOnlyParser:
    def __init__(self, file_name: str, source: str) -> None:
        self._file_name = file_name
        self._scanner = _Scanner(file_name, source)
        self._prev_line = 0
        self._tok = _Token("eof", "", 0, 0)
        self._lead_start: int | None = None
        self._advance()

    def parse(self) -> list[ImportSpec]:
        if not self._is_ident("package"):
            self._fail("expected 'package'")
        self._advance()
        if self._tok.kind != "ident":
            self._fail("expected 'IDENT'")
        self._advance()
        self._skip_semicolons()

        specs: list[ImportSpec] = []
        while self._is_ident("import"):
            self._advance()
            if self._is_punct("("):
                self._advance()
                while not self._is_punct(")"):
                    if self._tok.kind == "eof":
                        self._fail("expected ')'")
                    if self._is_punct(";"):
                        self._advance()
                        continue
                    specs.append(self._parse_spec(doc_start_line=self._lead_start))
                self._advance()
            else:
                # Comments above a single-line declaration belong to the
                # declaration, not to the spec.
                specs.append(self._parse_spec(doc_start_line=None))
            self._skip_semicolons()
        return specs

    def _parse_spec(self, doc_start_line: int | None) -> ImportSpec:
        start_line = self._tok.line
        if self._tok.kind == "ident" or self._is_punct("."):
            self._advance()
        path_token = self._tok
        if path_token.kind != "string":
            self._fail("missing import path")
        path = _unquote(path_token, self._file_name)
        if not _is_valid_import(path):
            raise ParseError(self._file_name, path_token.line, f"invalid import path: {path_token.value}")
        self._advance()
        return ImportSpec(
            path=path,
            start_line=start_line,
            end_line=path_token.end_line,
            doc_start_line=doc_start_line,
        )

    def _advance(self) -> None:
        self._prev_line = self._tok.end_line
        comments: list[_Token] = []
        tok = self._scanner.scan()
        while tok.kind == "comment":
            comments.append(tok)
            tok = self._scanner.scan()
        self._lead_start = _lead_comment_start(comments, self._prev_line, tok.line)
        self._tok = tok

    def _skip_semicolons(self) -> None:
        while self._is_punct(";"):
            self._advance()

    def _is_ident(self, value: str) -> bool:
        return self._tok.kind == "ident" and self._tok.value == value

    def _is_punct(self, value: str) -> bool:
        return self._tok.kind == "punct" and self._tok.value == value

    def _fail(self, expected: str) -> NoReturn:
        raise ParseError(self._file_name, self._tok.line, f"{expected}, found '{self._tok.describe()}'")


def parse_go_imports(file_name: str, source: str) -> list[ImportSpec]:
    """Parse the package clause and import declarations of a Go file.

    Parsing stops at the first top-level declaration that is not an import,
    so the body of the file is never scanned. Returned line numbers are
    1-based. A comment group ending on the line directly above a spec inside
    a parenthesised declaration is reported as that spec's doc comment.
    """
    return _ImportsOnlyParser(file_name, source).parse()


def _lead_comment_start(comments: list[_Token], prev_line: int, next_line: int) -> int | None:
    index = 0
    if comments and comments[0].line == prev_line:
        # Trailing comments on the previous token's line are line comments.
        end_line = comments[0].end_line
        index = 1
        while index < len(comments) and comments[index].line <= end_line:
            end_line = comments[index].end_line
            index += 1

    group_start: int | None = None
    group_end = -1
    for comment in comments[index:]:
        if group_start is None or comment.line > group_end + 1:
            group_start = comment.line
        group_end = comment.end_line

    if group_start is not None and group_end + 1 == next_line:
        return group_start
    return None


def _unquote(token: _Token, file_name: str) -> str:
    literal = token.value
    if literal.startswith("`"):
        return literal[1:-1].replace("\r", "")

    body = literal[1:-1]
    out = bytearray()
    pos = 0
    while pos < len(body):
        backslash = body.find("\\", pos)
        if backslash < 0:
            out += body[pos:].encode("utf-8")
            break
        out += body[pos:backslash].encode("utf-8")
        match = _ESCAPE_PATTERN.match(body, backslash)
        if match is None:
            raise ParseError(file_name, token.line, f"unknown escape sequence in {literal}")
        if match.group("simple"):
            out += _SIMPLE_ESCAPES[match.group("simple")].encode("utf-8")
        elif match.group("oct"):
            value = int(match.group("oct"), 8)
            if value > 255:
                raise ParseError(file_name, token.line, f"octal escape value > 255 in {literal}")
            out.append(value)
        elif match.group("hex"):
            out.append(int(match.group("hex"), 16))
        else:
            code_point = int(match.group("u4") or match.group("u8"), 16)
            if code_point > 0x10FFFF or 0xD800 <= code_point < 0xE000:
                raise ParseError(file_name, token.line, f"escape sequence is invalid Unicode code point in {literal}")
            out += chr(code_point).encode("utf-8")
        pos = match.end()
    return out.decode("utf-8", errors="replace")


def _is_valid_import(path: str) -> bool:
    if not path:
        return False
    for char in path:
        if not char.isprintable() or char.isspace() or char in _ILLEGAL_IMPORT_CHARS:
            return False
    return True
