"""Error taxonomy for scan dispatch and engine failures."""

from __future__ import annotations

from typing import Optional, Sequence


class ScanError(Exception):
    """Base class for every failure a scan request can surface."""


class WorkspaceNotFoundError(ScanError):
    def __init__(self, workspace: str) -> None:
        super().__init__(f"failed to stat workspace: {workspace}")
        self.workspace = workspace


class _ProcessError(ScanError):
    stage = "process"

    def __init__(self, command: Sequence[str], reason: str, output: str = "") -> None:
        message = f"{self.stage}: {reason}"
        if output:
            message = f"{message} out: {output}"
        super().__init__(message)
        self.command = list(command)
        self.reason = reason
        self.output = output


class BuildFailedError(_ProcessError):
    stage = "failed to build project"


class ToolInvocationFailedError(_ProcessError):
    stage = "failed to run command"


class ReportUnreadableError(ScanError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to read report {path}: {reason}")
        self.path = path


class ReportParseFailedError(ScanError):
    def __init__(self, reason: str, path: Optional[str] = None) -> None:
        if path:
            message = f"failed to parse report {path}: {reason}"
        else:
            message = f"failed to parse report: {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason


class NoScannerRegisteredError(ScanError):
    def __init__(self, language: str, mode: str) -> None:
        super().__init__(f"unknown scanner for language: {language} and mode: {mode}")
        self.language = language
        self.mode = mode


class AllScannersFailedError(ScanError):
    def __init__(self, last_error: Exception) -> None:
        super().__init__(f"all scanners failed: {last_error}")
        self.last_error = last_error


class ChainEmptyError(ScanError):
    def __init__(self) -> None:
        super().__init__("scanner chain has no scanners")
