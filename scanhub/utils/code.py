"""Report discovery helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Generator


def iter_report_files(root: Path, extension: str = ".sarif") -> Generator[Path, None, None]:
    """Yield report files beneath ``root`` in lexical walk order.

    Files and subdirectories are interleaved by name, so ``a_dir/x.sarif``
    comes before ``b.sarif``. A missing ``root`` raises ``FileNotFoundError``
    instead of yielding nothing, since an engine that wrote no report folder
    did not finish.
    """

    if not root.is_dir():
        raise FileNotFoundError(f"report directory does not exist: {root}")

    for entry in sorted(root.iterdir(), key=lambda path: path.name):
        if entry.is_dir():
            yield from iter_report_files(entry, extension)
        elif entry.suffix == extension and entry.is_file():
            yield entry
