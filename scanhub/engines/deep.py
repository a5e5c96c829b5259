"""Build-aware deep analysis engine.

The engine builds the project with its native build tool, runs the external
analysis script against the built workspace and normalizes the SARIF reports
it leaves under ``<scratch>/sarif``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from scanhub.errors import BuildFailedError, ToolInvocationFailedError, WorkspaceNotFoundError
from scanhub.result import Result
from scanhub.sarif import load_sarif_reports
from scanhub.utils import ProcessRunner, SubprocessRunner, detect_build_system, scratch_dir

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "/app/assets/Canary"
DEFAULT_SCRIPT = "corax_cmd.sh"
DEFAULT_PREFIX = "corax"
REPORT_SUBDIR = "sarif"


class BuildAwareScanner:
    """Deep-mode scanner that builds the project before analysing it."""

    def __init__(
        self,
        root: str = DEFAULT_ROOT,
        script: str = DEFAULT_SCRIPT,
        prefix: str = DEFAULT_PREFIX,
        runner: Optional[ProcessRunner] = None,
        scratch_root: Optional[str] = None,
        build_timeout: Optional[float] = None,
        scan_timeout: Optional[float] = None,
    ) -> None:
        self.root = root
        self.script = script
        self.prefix = prefix
        self.runner = runner or SubprocessRunner()
        self.scratch_root = scratch_root
        self.build_timeout = build_timeout
        self.scan_timeout = scan_timeout

    def scan(self, id: str, workspace: str, rule: str) -> Result:
        if not os.path.exists(workspace):
            raise WorkspaceNotFoundError(workspace)

        self.build(workspace)

        with scratch_dir(prefix=self.prefix, root=self.scratch_root) as output_dir:
            output = self._invoke(workspace, output_dir)
            result = load_sarif_reports(output_dir / REPORT_SUBDIR)

        dropped = result.drop_unidentified()
        if dropped:
            logger.debug("Dropped %d findings without a rule id", dropped)
        result.id = id
        result.prefix = self.prefix
        result.output = output
        logger.info("[%s] %s scan finished with %d findings", id, self.prefix, len(result.items))
        return result

    def build(self, workspace: str) -> None:
        """Run the workspace's build tool; a workspace without one is left as is."""

        build_system = detect_build_system(Path(workspace))
        if build_system is None:
            logger.debug("No build descriptor in %s, skipping build", workspace)
            return

        command = list(build_system.command)
        logger.info("Building %s project with: %s", build_system.name, " ".join(command))
        try:
            completed = self.runner.run(command, cwd=workspace, timeout=self.build_timeout)
        except subprocess.TimeoutExpired as exc:
            raise BuildFailedError(command, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise BuildFailedError(command, str(exc)) from exc
        if not completed.ok:
            raise BuildFailedError(
                command,
                f"failed to build {build_system.name} project: exit status {completed.returncode}",
                completed.output,
            )
        logger.debug("%s build successful", build_system.name)

    def _invoke(self, workspace: str, output_dir: Path) -> str:
        command = [
            "sh",
            os.path.join(self.root, self.script),
            self.root,
            workspace,
            str(output_dir),
        ]
        logger.info("Executing command: %s", " ".join(command))
        try:
            completed = self.runner.run(command, timeout=self.scan_timeout)
        except subprocess.TimeoutExpired as exc:
            raise ToolInvocationFailedError(command, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise ToolInvocationFailedError(command, str(exc)) from exc
        if not completed.ok:
            raise ToolInvocationFailedError(
                command, f"exit status {completed.returncode}", completed.output
            )
        return completed.output
