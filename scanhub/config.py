"""Engine configuration loaded from YAML with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .engines import deep, lite
from .utils import read_yaml_file

CONFIG_ENV = "SCANHUB_CONFIG"
ENV_PREFIX = "SCANHUB_"


@dataclass(frozen=True)
class ScanhubConfig:
    deep_root: str = deep.DEFAULT_ROOT
    deep_script: str = deep.DEFAULT_SCRIPT
    deep_prefix: str = deep.DEFAULT_PREFIX
    lite_binary: str = lite.DEFAULT_BINARY
    lite_rules_dir: str = lite.DEFAULT_RULES_DIR
    lite_prefix: str = lite.DEFAULT_PREFIX
    scratch_root: Optional[str] = None
    build_timeout: Optional[float] = None  # seconds
    scan_timeout: Optional[float] = None


_TIMEOUT_FIELDS = ("build_timeout", "scan_timeout")
_OPTIONAL_FIELDS = _TIMEOUT_FIELDS + ("scratch_root",)


def _coerce(name: str, value: Any) -> Any:
    if value is None or value == "":
        if name in _OPTIONAL_FIELDS:
            return None
        raise ValueError(f"{name} must not be empty")
    if name in _TIMEOUT_FIELDS:
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be a number of seconds, got {value!r}") from exc
    return str(value)


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ScanhubConfig:
    """Build the configuration from defaults, a YAML file and the environment.

    ``path`` falls back to ``$SCANHUB_CONFIG``; a missing file leaves the
    defaults in place. ``SCANHUB_<FIELD>`` variables win over file values.
    """

    env = os.environ if environ is None else environ
    path = path or env.get(CONFIG_ENV)
    known = {f.name for f in fields(ScanhubConfig)}
    values: Dict[str, Any] = {}

    if path:
        data = read_yaml_file(Path(path))
        if data is not None:
            if not isinstance(data, dict):
                raise ValueError(f"Config at {path} is not a mapping")
            unknown = sorted(set(data) - known)
            if unknown:
                raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
            values.update(data)

    for name in known:
        env_value = env.get(ENV_PREFIX + name.upper())
        if env_value is not None:
            values[name] = env_value

    return replace(ScanhubConfig(), **{name: _coerce(name, value) for name, value in values.items()})
