from __future__ import annotations

from pathlib import Path
from typing import Iterable

SKIPPED_DIR_NAMES = frozenset({"vendor", "testdata", "node_modules"})


def discover_go_files(paths: Iterable[Path | str], include_tests: bool = True) -> list[Path]:
    """Expand command-line paths into Go source files.

    Files are kept as given, in order. Directories are searched recursively,
    skipping vendored code, test fixtures and hidden or underscore-prefixed
    directories the Go tool ignores as well.
    """
    found: list[Path] = []
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = _go_files_under(path, include_tests)
        elif path.exists():
            candidates = [path]
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")

        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(candidate)
    return found


def _go_files_under(root: Path, include_tests: bool) -> list[Path]:
    files: list[Path] = []
    for go_file in sorted(root.rglob("*.go")):
        if not go_file.is_file():
            continue
        relative_parts = go_file.relative_to(root).parts[:-1]
        if any(_is_skipped_dir(part) for part in relative_parts):
            continue
        if not include_tests and go_file.name.endswith("_test.go"):
            continue
        files.append(go_file)
    return files


def _is_skipped_dir(name: str) -> bool:
    return name in SKIPPED_DIR_NAMES or name.startswith((".", "_"))
