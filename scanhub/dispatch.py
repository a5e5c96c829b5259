"""Resolve a scan request to a scanner and run it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import NoScannerRegisteredError, ScanError
from .registry import Language, ScanMode, ScannerRegistry
from .result import Result

logger = logging.getLogger(__name__)


@dataclass
class ScanRequest:
    task_id: str
    language: str
    mode: str
    workspace: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanRequest":
        return cls(
            task_id=str(data.get("task_id") or data.get("taskId") or ""),
            language=str(data.get("language") or ""),
            mode=str(data.get("mode") or ""),
            workspace=str(data.get("workspace") or ""),
        )


def rule_for(language: str) -> str:
    try:
        return Language(language).rule
    except ValueError:
        return language


def mode_for(mode: str) -> str:
    try:
        return ScanMode.parse(mode).value
    except ValueError:
        return mode


def run_scan(registry: ScannerRegistry, request: ScanRequest) -> Result:
    scanner = registry.resolve(request.language, mode_for(request.mode))
    if scanner is None:
        raise NoScannerRegisteredError(request.language, request.mode)

    try:
        result = scanner.scan(request.task_id, request.workspace, rule_for(request.language))
    except ScanError as exc:
        logger.error("[%s] failed to scan: %s", request.task_id, exc)
        raise
    logger.info("[%s] task done", request.task_id)
    return result
