"""Severity labels reported by the bundled scan engines."""

from __future__ import annotations

from enum import Enum

# Used whenever an engine reports no severity for a finding.
DEFAULT_SEVERITY = "WARNING"


class Severity(str, Enum):
    """Enumerate the labels the bundled engines are known to emit.

    Labels are passed through from each engine unchanged; this enumeration
    only drives the ordering of console summaries.
    """

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    SARIF_ERROR = "error"
    SARIF_WARNING = "warning"
    SARIF_NOTE = "note"
    SARIF_NONE = "none"

    @property
    def rank(self) -> int:
        """Return an integer ranking, highest first."""

        ordering = {
            Severity.ERROR: 0,
            Severity.SARIF_ERROR: 0,
            Severity.WARNING: 1,
            Severity.SARIF_WARNING: 1,
            Severity.INFO: 2,
            Severity.SARIF_NOTE: 2,
            Severity.SARIF_NONE: 3,
        }
        return ordering[self]


def severity_rank(label: str) -> int:
    """Rank any label; unknown vocabularies sort after the known ones."""

    try:
        return Severity(label).rank
    except ValueError:
        return len(Severity)
