"""Canonical result data structures shared by every scan engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .severity import DEFAULT_SEVERITY, severity_rank

DEFAULT_LOCALES: Tuple[str, ...] = ("en-US", "zh-CN")


@dataclass
class Position:
    """1-based line/column; 0 means the engine did not report it."""

    line: int = 0
    col: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "col": self.col}


@dataclass
class Metadata:
    """Localized message bag attached to each finding."""

    message_zh: str = ""
    abstract_feysh: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_message(cls, message: str, locales: Iterable[str] = DEFAULT_LOCALES) -> "Metadata":
        # No translation source exists, so every locale carries the same text.
        return cls(message_zh=message, abstract_feysh={locale: message for locale in locales})

    def to_dict(self) -> Dict[str, object]:
        return {"messageZh": self.message_zh, "abstractFeysh": dict(self.abstract_feysh)}


@dataclass
class Extra:
    message: str = ""
    severity: str = DEFAULT_SEVERITY
    metadata: Metadata = field(default_factory=Metadata)

    def to_dict(self) -> Dict[str, object]:
        return {
            "message": self.message,
            "severity": self.severity,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class ResultItem:
    """Capture a single finding."""

    check_id: str
    path: str = ""
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)
    extra: Extra = field(default_factory=Extra)

    def to_dict(self) -> Dict[str, object]:
        return {
            "checkId": self.check_id,
            "path": self.path,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "extra": self.extra.to_dict(),
        }


@dataclass
class Result:
    """Output of one scan invocation."""

    id: str = ""
    prefix: str = ""
    output: str = ""
    items: List[ResultItem] = field(default_factory=list)

    def extend(self, other: "Result") -> None:
        self.items.extend(other.items)

    def drop_unidentified(self) -> int:
        """Remove findings without a rule identifier and return how many went."""

        kept = [item for item in self.items if item.check_id]
        dropped = len(self.items) - len(kept)
        self.items = kept
        return dropped

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "prefix": self.prefix,
            "output": self.output,
            "results": [item.to_dict() for item in self.items],
        }


@dataclass
class Summary:
    """Aggregate finding counts by severity label."""

    counts: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_result(cls, result: Result) -> "Summary":
        summary = cls()
        for item in result.items:
            summary.increment(item.extra.severity)
        return summary

    def increment(self, severity: str) -> None:
        self.counts[severity] = self.counts.get(severity, 0) + 1

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return sorted(self.counts.items(), key=lambda row: (severity_rank(row[0]), row[0]))

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def format_summary_table(result: Result, max_findings: int = 5) -> str:
    """Create a human-readable summary table for console output."""

    summary = Summary.from_result(result)
    lines: List[str] = []
    lines.append("Scan Summary")
    lines.append("=" * 40)
    lines.append(f"Task      : {result.id}")
    lines.append(f"Engine    : {result.prefix}")
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Findings  : {summary.total}")

    ordered = sorted(result.items, key=lambda item: severity_rank(item.extra.severity))[:max_findings]
    if ordered:
        lines.append("")
        lines.append("Top Findings")
        lines.append("-" * 40)
        for item in ordered:
            lines.append(f"[{item.extra.severity}] {item.check_id} {item.extra.message}")
            lines.append(f"  Location: {item.path}:{item.start.line}")
    return "\n".join(lines)
