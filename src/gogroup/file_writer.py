from __future__ import annotations

from dataclasses import dataclass
from difflib import unified_diff
import os
from pathlib import Path
import tempfile

from .errors import StaleFileError


@dataclass(frozen=True, slots=True)
class FilePreview:
    target_file: Path
    original_source: str
    updated_source: str
    diff_text: str

    @property
    def changed(self) -> bool:
        return self.original_source != self.updated_source


def generate_preview(target_file: Path, original_source: str, updated_source: str) -> FilePreview:
    diff = "".join(
        unified_diff(
            original_source.splitlines(keepends=True),
            updated_source.splitlines(keepends=True),
            fromfile=f"a/{target_file.as_posix()}",
            tofile=f"b/{target_file.as_posix()}",
        )
    )
    return FilePreview(
        target_file=target_file,
        original_source=original_source,
        updated_source=updated_source,
        diff_text=diff,
    )


def read_source(path: Path) -> str:
    # newline="" keeps "\r\n" intact so rewrites stay byte-identical elsewhere.
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def apply_preview(preview: FilePreview, backup: bool = False) -> Path | None:
    """Write ``preview`` to disk and return the backup path, if one was made.

    The file is re-read first; if it no longer matches the previewed original
    nothing is written and :class:`StaleFileError` is raised.
    """
    target_file = preview.target_file
    current_source = read_source(target_file)
    if current_source != preview.original_source:
        raise StaleFileError(f"Target file changed after preview: {target_file}")

    backup_path: Path | None = None
    if backup:
        backup_path = Path(f"{target_file}.bak")
        with backup_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(current_source)

    _write_atomic(target_file, preview.updated_source)
    return backup_path


def _write_atomic(target_file: Path, updated_source: str) -> None:
    fd, temp_name = tempfile.mkstemp(prefix=f".{target_file.name}.", suffix=".tmp", dir=str(target_file.parent))
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as temp_file:
            temp_file.write(updated_source)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        mode = target_file.stat().st_mode & 0o777
        os.chmod(temp_path, mode)
        temp_path.replace(target_file)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
