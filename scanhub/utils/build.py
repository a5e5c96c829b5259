"""Project build detection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class BuildSystem:
    name: str
    descriptor: str
    command: Tuple[str, ...]


MAVEN_COMMAND = ("mvn", "package", "-Dmaven.test.skip.exec=true")
GRADLE_COMMAND = ("gradle", "build", "-x", "test")

# Checked in order; the first descriptor present at the workspace root wins.
BUILD_SYSTEMS: Tuple[BuildSystem, ...] = (
    BuildSystem(name="maven", descriptor="pom.xml", command=MAVEN_COMMAND),
    BuildSystem(name="gradle", descriptor="build.gradle", command=GRADLE_COMMAND),
    BuildSystem(name="gradle", descriptor="build.gradle.kts", command=GRADLE_COMMAND),
)


def detect_build_system(
    workspace: Path, candidates: Tuple[BuildSystem, ...] = BUILD_SYSTEMS
) -> Optional[BuildSystem]:
    """Return the build system for ``workspace`` or ``None`` when it has none."""

    for candidate in candidates:
        if (workspace / candidate.descriptor).exists():
            return candidate
    return None
