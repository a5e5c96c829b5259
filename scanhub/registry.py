"""Map (language, mode) pairs to scanners."""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Union

from .chain import ChainScanner
from .engines import Scanner
from .engines.deep import BuildAwareScanner
from .engines.lite import LiteScanner

if TYPE_CHECKING:
    from .config import ScanhubConfig


class Language(str, Enum):
    """Languages a scan request may name."""

    CPP = "cpp"
    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    GO = "go"
    PHP = "php"
    CS = "cs"
    SWIFT = "swift"
    RUBY = "ruby"
    RUST = "rust"
    HTML = "html"
    OBJECTIVE_C = "objectivec"
    OCAML = "ocaml"
    KOTLIN = "kotlin"
    SCALA = "scala"
    SOLIDITY = "solidity"
    COBOL = "cobol"
    SHELL = "shell"
    SQL = "sql"
    FORTRAN = "fortran"
    DART = "dart"
    GROOVY = "groovy"
    LUA = "lua"
    SECRETS = "secrets"
    IAC = "iac"

    @property
    def rule(self) -> str:
        """Rule-pack key handed to scanners for this language."""

        return self.value


class ScanMode(str, Enum):
    LITE = "lite"
    DEEP = "max"

    @classmethod
    def parse(cls, value: str) -> "ScanMode":
        if value == "deep":
            return cls.DEEP
        return cls(value)


Key = Union[str, Enum]


def _key(value: Key) -> str:
    return value.value if isinstance(value, Enum) else value


class ScannerRegistry:
    """Two-level lookup with a single deep-to-lite fallback."""

    def __init__(self) -> None:
        self._scanners: Dict[str, Dict[str, Optional[Scanner]]] = {}
        self._lock = threading.Lock()

    def register(self, language: Key, mode: Key, scanner: Optional[Scanner]) -> None:
        with self._lock:
            self._scanners.setdefault(_key(language), {})[_key(mode)] = scanner

    def resolve(self, language: Key, mode: Key) -> Optional[Scanner]:
        modes = self._scanners.get(_key(language))
        if modes is None:
            return None
        scanner = modes.get(_key(mode))
        if scanner is None and _key(mode) == ScanMode.DEEP.value:
            scanner = modes.get(ScanMode.LITE.value)
        return scanner


def default_registry(config: "ScanhubConfig") -> ScannerRegistry:
    """Wire the bundled engines: lite for every language, deep for Java."""

    registry = ScannerRegistry()
    lite = LiteScanner(
        binary=config.lite_binary,
        rules_dir=config.lite_rules_dir,
        prefix=config.lite_prefix,
        scratch_root=config.scratch_root,
        scan_timeout=config.scan_timeout,
    )
    for language in Language:
        registry.register(language, ScanMode.LITE, lite)

    deep = BuildAwareScanner(
        root=config.deep_root,
        script=config.deep_script,
        prefix=config.deep_prefix,
        scratch_root=config.scratch_root,
        build_timeout=config.build_timeout,
        scan_timeout=config.scan_timeout,
    )
    registry.register(Language.JAVA, ScanMode.DEEP, ChainScanner(deep, lite))
    return registry
