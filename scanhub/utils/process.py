"""Blocking process invocation behind a narrow, replaceable interface."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Exit status and combined stdout/stderr of a finished process."""

    command: List[str] = field(default_factory=list)
    returncode: int = 0
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    """Run a command to completion.

    Implementations raise ``OSError`` when the command cannot be started and
    ``subprocess.TimeoutExpired`` when ``timeout`` elapses.
    """

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        ...


class SubprocessRunner:
    """Default runner backed by :func:`subprocess.run`."""

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        logger.debug("Running %s (cwd=%s, timeout=%s)", " ".join(command), cwd, timeout)
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
            check=False,
        )
        output = completed.stdout.decode("utf-8", errors="replace") if completed.stdout else ""
        logger.debug("%s exited with code %s", command[0], completed.returncode)
        return ProcessResult(command=list(command), returncode=completed.returncode, output=output)
