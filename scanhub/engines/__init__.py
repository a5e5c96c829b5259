"""Scanner capability shared by leaf engines and composite chains."""

from __future__ import annotations

from typing import Protocol

from scanhub.result import Result


class Scanner(Protocol):
    """Protocol implemented by everything that can scan a workspace."""

    def scan(self, id: str, workspace: str, rule: str) -> Result:
        """Scan ``workspace`` with the engine-specific ``rule`` selector.

        Returns a fully populated :class:`Result` whose ``id`` is ``id``;
        raises a :class:`scanhub.errors.ScanError` subclass on failure.
        """
