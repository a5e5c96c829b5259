"""Normalize SARIF 2.1.0 documents into the canonical result shape.

Each SARIF ``result`` becomes exactly one :class:`ResultItem`. Only the first
location of a finding is kept, severities are passed through from the
engine's own vocabulary, and findings without a location are still emitted
with an empty path and zeroed positions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .errors import ReportParseFailedError, ReportUnreadableError
from .result import Extra, Metadata, Position, Result, ResultItem
from .severity import DEFAULT_SEVERITY
from .utils import iter_report_files, read_bytes_file

logger = logging.getLogger(__name__)

SARIF_EXTENSION = ".sarif"
FILE_SCHEME = "file://"


def parse_sarif(data: Union[bytes, str], path: Optional[str] = None) -> Result:
    """Convert one SARIF document into a :class:`Result`.

    ``path`` is only used to label errors. The returned result carries no
    ``id``, ``prefix`` or ``output``; the engine that ran the tool sets them.
    """

    try:
        document = json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ReportParseFailedError(f"failed to unmarshal SARIF data: {exc}", path) from exc
    if not isinstance(document, dict):
        raise ReportParseFailedError("failed to unmarshal SARIF data: document is not an object", path)

    try:
        return _fold(document)
    except (AttributeError, TypeError, KeyError) as exc:
        raise ReportParseFailedError(f"failed to unmarshal SARIF data: {exc}", path) from exc


def merge_results(results: Iterable[Result]) -> Result:
    """Concatenate finding lists in order; no deduplication."""

    merged = Result()
    for result in results:
        merged.extend(result)
    return merged


def load_sarif_reports(directory: Path) -> Result:
    """Parse every SARIF file beneath ``directory`` and merge the findings.

    A single unreadable or malformed file fails the whole collection.
    """

    merged = Result()
    try:
        for report in iter_report_files(directory, SARIF_EXTENSION):
            try:
                data = read_bytes_file(report)
            except OSError as exc:
                raise ReportUnreadableError(str(report), str(exc)) from exc
            parsed = parse_sarif(data, path=str(report))
            logger.debug("Parsed %d findings from %s", len(parsed.items), report)
            merged.extend(parsed)
    except OSError as exc:
        raise ReportUnreadableError(str(directory), str(exc)) from exc
    return merged


def _fold(document: Dict[str, Any]) -> Result:
    result = Result()
    for run in _array(document.get("runs"), "runs"):
        run = _object(run, "run")
        rules = _index_rules(run)
        for finding in _array(run.get("results"), "results"):
            result.items.append(_to_item(_object(finding, "result"), rules))
    return result


def _object(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"'{name}' is not an object")
    return value


def _array(value: Any, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"'{name}' is not a list")
    return value


def _text(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"'{name}' is not a string")
    return value


def _integer(value: Any, name: str) -> Optional[int]:
    # bool is an int subclass but never a valid position.
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{name}' is not an integer")
    return value


def _index_rules(run: Dict[str, Any]) -> Dict[str, Dict[str, str]]:
    rules: Dict[str, Dict[str, str]] = {}
    driver = _object(_object(run.get("tool"), "tool").get("driver"), "driver")
    for rule in _array(driver.get("rules"), "rules"):
        rule = _object(rule, "rule")
        rule_id = _text(rule.get("id"), "rule.id")
        if not rule_id:
            continue
        configuration = _object(rule.get("defaultConfiguration"), "defaultConfiguration")
        rules[rule_id] = {
            "message": _rule_message(rule),
            "level": _text(configuration.get("level"), "level"),
        }
    return rules


def _rule_message(rule: Dict[str, Any]) -> str:
    strings = _object(rule.get("messageStrings"), "messageStrings")
    default = _text(_object(strings.get("default"), "messageStrings.default").get("text"), "text")
    if default:
        return default
    for key in ("shortDescription", "fullDescription"):
        text = _text(_object(rule.get(key), key).get("text"), "text")
        if text:
            return text
    return ""


def _to_item(finding: Dict[str, Any], rules: Dict[str, Dict[str, str]]) -> ResultItem:
    check_id = _text(finding.get("ruleId"), "ruleId")
    rule = rules.get(check_id, {})

    message_obj = _object(finding.get("message"), "message")
    message = (
        _text(message_obj.get("text"), "message.text")
        or _text(message_obj.get("markdown"), "message.markdown")
        or rule.get("message")
        or ""
    )
    severity = _text(finding.get("level"), "level") or rule.get("level") or DEFAULT_SEVERITY

    item = ResultItem(
        check_id=check_id,
        extra=Extra(message=message, severity=severity, metadata=Metadata.from_message(message)),
    )

    locations = _array(finding.get("locations"), "locations")
    if locations:
        physical = _object(_object(locations[0], "location").get("physicalLocation"), "physicalLocation")
        artifact = _object(physical.get("artifactLocation"), "artifactLocation")
        uri = _text(artifact.get("uri"), "uri")
        if uri:
            item.path = uri[len(FILE_SCHEME):] if uri.startswith(FILE_SCHEME) else uri
        region = _object(physical.get("region"), "region")
        if region:
            start_line = _integer(region.get("startLine"), "startLine") or 0
            start_col = _integer(region.get("startColumn"), "startColumn") or 0
            end_line = _integer(region.get("endLine"), "endLine")
            end_col = _integer(region.get("endColumn"), "endColumn") or 0
            item.start = Position(line=start_line, col=start_col)
            item.end = Position(line=start_line if end_line is None else end_line, col=end_col)
    return item
