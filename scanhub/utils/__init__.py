"""Utility helpers for the scan engines."""

from .build import BuildSystem, detect_build_system
from .code import iter_report_files
from .fileio import read_bytes_file, read_yaml_file
from .process import ProcessResult, ProcessRunner, SubprocessRunner
from .workdir import scratch_dir

__all__ = [
    "BuildSystem",
    "detect_build_system",
    "iter_report_files",
    "read_bytes_file",
    "read_yaml_file",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "scratch_dir",
]
