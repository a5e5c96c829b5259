"""Composite scanner that falls through an ordered list of scanners."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .engines import Scanner
from .errors import AllScannersFailedError, ChainEmptyError, ScanError
from .result import Result

logger = logging.getLogger(__name__)


class ChainScanner:
    """Try each scanner in order and return the first successful result.

    Later scanners are never invoked once one succeeds. When every scanner
    fails, the raised error names the last failure only.
    """

    def __init__(self, *scanners: Scanner) -> None:
        if not scanners:
            raise ChainEmptyError()
        self.scanners: Tuple[Scanner, ...] = tuple(scanners)

    def scan(self, id: str, workspace: str, rule: str) -> Result:
        last_error: Optional[ScanError] = None
        for index, scanner in enumerate(self.scanners):
            try:
                return scanner.scan(id, workspace, rule)
            except ScanError as exc:
                logger.warning(
                    "[%s] scanner %d/%d (%s) failed: %s",
                    id,
                    index + 1,
                    len(self.scanners),
                    type(scanner).__name__,
                    exc,
                )
                last_error = exc

        if last_error is None:
            raise ChainEmptyError()
        raise AllScannersFailedError(last_error) from last_error
