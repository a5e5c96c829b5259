"""Per-invocation scratch directories."""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@contextmanager
def scratch_dir(prefix: str, root: Optional[str] = None) -> Iterator[Path]:
    """Create a uniquely named directory and remove it on every exit path."""

    path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
    logger.debug("Created scratch directory %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed scratch directory %s", path)
