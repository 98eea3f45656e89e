from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
from typing import Protocol, Sequence

from .errors import FormatterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FormatOptions:
    format_only: bool = False
    local_prefixes: tuple[str, ...] = ()


class Formatter(Protocol):
    def process(self, file_name: str, source: str, options: FormatOptions | None = None) -> str: ...


class GoimportsFormatter:
    """Run ``goimports`` over a source text.

    The source is passed on stdin, and ``-srcdir`` points goimports at the
    file's directory so it resolves sibling packages the same way it would
    for the file on disk.
    """

    def __init__(self, command: Sequence[str] = ("goimports",), timeout_s: float = 30.0) -> None:
        self.command = tuple(command)
        self.timeout_s = timeout_s

    def build_command(self, file_name: str, options: FormatOptions | None = None) -> list[str]:
        opts = options or FormatOptions()
        cmd = list(self.command)
        if opts.format_only:
            cmd.append("-format-only")
        if opts.local_prefixes:
            cmd.extend(["-local", ",".join(opts.local_prefixes)])
        if file_name:
            cmd.extend(["-srcdir", str(Path(file_name).resolve().parent)])
        return cmd

    def process(self, file_name: str, source: str, options: FormatOptions | None = None) -> str:
        cmd = self.build_command(file_name, options)
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                input=source,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as exc:
            raise FormatterError(f"{self.command[0]} binary not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise FormatterError(f"{self.command[0]} timed out after {self.timeout_s}s") from exc

        if proc.returncode != 0:
            detail = proc.stderr.strip() or f"exit status {proc.returncode}"
            raise FormatterError(f"{self.command[0]} failed for {file_name or '<input>'}: {detail}")
        return proc.stdout
