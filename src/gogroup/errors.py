from __future__ import annotations


class GoGroupError(Exception):
    pass


class ParseError(GoGroupError):
    def __init__(self, file_name: str, line: int, message: str) -> None:
        self.file_name = file_name
        self.line = line
        self.message = message
        location = f"{file_name}:{line}" if file_name else f"line {line}"
        super().__init__(f"{location}: {message}")


class OrderSpecError(GoGroupError, ValueError):
    def __init__(self, spec: str, reason: str = "Unknown order specification") -> None:
        self.spec = spec
        super().__init__(f"{reason} '{spec}'")


class FormatterError(GoGroupError):
    pass


class StaleFileError(GoGroupError):
    pass
