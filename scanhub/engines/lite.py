"""Fast, build-free scan engine driven by a per-language rule pack."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, Dict, Optional, Union

from scanhub.errors import (
    ReportParseFailedError,
    ReportUnreadableError,
    ToolInvocationFailedError,
    WorkspaceNotFoundError,
)
from scanhub.result import Extra, Metadata, Position, Result, ResultItem
from scanhub.severity import DEFAULT_SEVERITY
from scanhub.utils import ProcessRunner, SubprocessRunner, read_bytes_file, scratch_dir

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "sgp"
DEFAULT_RULES_DIR = "/app/assets/rules"
DEFAULT_PREFIX = "sgp"
REPORT_NAME = "results.json"


class LiteScanner:
    """Lite-mode scanner; ``rule`` names a rule pack under ``rules_dir``."""

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        rules_dir: str = DEFAULT_RULES_DIR,
        prefix: str = DEFAULT_PREFIX,
        runner: Optional[ProcessRunner] = None,
        scratch_root: Optional[str] = None,
        scan_timeout: Optional[float] = None,
    ) -> None:
        self.binary = binary
        self.rules_dir = rules_dir
        self.prefix = prefix
        self.runner = runner or SubprocessRunner()
        self.scratch_root = scratch_root
        self.scan_timeout = scan_timeout

    def scan(self, id: str, workspace: str, rule: str) -> Result:
        if not os.path.exists(workspace):
            raise WorkspaceNotFoundError(workspace)

        with scratch_dir(prefix=self.prefix, root=self.scratch_root) as output_dir:
            report_path = output_dir / REPORT_NAME
            command = [
                self.binary,
                "scan",
                "--config",
                os.path.join(self.rules_dir, rule),
                "--json",
                "--quiet",
                "--output",
                str(report_path),
                workspace,
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

            try:
                data = read_bytes_file(report_path)
            except OSError as exc:
                raise ReportUnreadableError(str(report_path), str(exc)) from exc
            result = parse_lite_report(data, path=str(report_path))

        dropped = result.drop_unidentified()
        if dropped:
            logger.debug("Dropped %d findings without a rule id", dropped)
        result.id = id
        result.prefix = self.prefix
        result.output = completed.output
        logger.info("[%s] %s scan finished with %d findings", id, self.prefix, len(result.items))
        return result


def parse_lite_report(data: Union[bytes, str], path: Optional[str] = None) -> Result:
    """Normalize the lite engine's native JSON report."""

    try:
        document = json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ReportParseFailedError(f"failed to unmarshal report: {exc}", path) from exc
    if not isinstance(document, dict) or not isinstance(document.get("results") or [], list):
        raise ReportParseFailedError("failed to unmarshal report: unexpected document shape", path)

    for error in document.get("errors") or []:
        logger.debug("Engine reported error: %s", error)

    result = Result()
    for raw in document.get("results") or []:
        if not isinstance(raw, dict):
            raise ReportParseFailedError("failed to unmarshal report: result is not an object", path)
        result.items.append(_to_item(raw))
    return result


def _position(raw: Any) -> Position:
    if not isinstance(raw, dict):
        return Position()
    return Position(line=raw.get("line") or 0, col=raw.get("col") or 0)


def _metadata(raw: Dict[str, Any], message: str) -> Metadata:
    metadata = Metadata.from_message(message)
    if raw.get("messageZh"):
        metadata.message_zh = raw["messageZh"]
    locales = raw.get("abstractFeysh")
    if isinstance(locales, dict):
        metadata.abstract_feysh.update({k: v for k, v in locales.items() if isinstance(v, str)})
    return metadata


def _to_item(raw: Dict[str, Any]) -> ResultItem:
    extra = raw.get("extra") if isinstance(raw.get("extra"), dict) else {}
    metadata = extra.get("metadata")
    message = extra.get("message") or ""
    start = _position(raw.get("start"))
    end = _position(raw.get("end"))
    if not end.line:
        end.line = start.line
    return ResultItem(
        check_id=raw.get("check_id") or raw.get("checkId") or "",
        path=raw.get("path") or "",
        start=start,
        end=end,
        extra=Extra(
            message=message,
            severity=extra.get("severity") or DEFAULT_SEVERITY,
            metadata=_metadata(metadata if isinstance(metadata, dict) else {}, message),
        ),
    )
