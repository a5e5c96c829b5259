import json

import pytest

from scanhub.errors import ReportParseFailedError, ReportUnreadableError
from scanhub.result import Result, ResultItem
from scanhub.sarif import load_sarif_reports, merge_results, parse_sarif
from scanhub.severity import DEFAULT_SEVERITY


def _sarif(*runs):
    return json.dumps({"version": "2.1.0", "runs": list(runs)})


def _run(results, rules=()):
    return {"tool": {"driver": {"name": "engine", "rules": list(rules)}}, "results": list(results)}


def _finding(rule_id="java/sqli", text="SQL injection", uri="src/App.java", region=None, **extra):
    finding = {"ruleId": rule_id, "message": {"text": text}}
    if uri is not None:
        location = {"physicalLocation": {"artifactLocation": {"uri": uri}}}
        if region is not None:
            location["physicalLocation"]["region"] = region
        finding["locations"] = [location]
    finding.update(extra)
    return finding


def test_end_line_defaults_to_start_line():
    data = _sarif(_run([_finding(region={"startLine": 12, "startColumn": 5})]))

    item = parse_sarif(data).items[0]

    assert item.start.line == 12
    assert item.start.col == 5
    assert item.end.line == 12
    assert item.end.col == 0


def test_explicit_end_position_is_copied():
    region = {"startLine": 3, "startColumn": 1, "endLine": 7, "endColumn": 20}

    item = parse_sarif(_sarif(_run([_finding(region=region)]))).items[0]

    assert (item.end.line, item.end.col) == (7, 20)


def test_finding_without_locations_has_empty_path_and_zero_positions():
    data = _sarif(_run([_finding(uri=None)]))

    item = parse_sarif(data).items[0]

    assert item.path == ""
    assert (item.start.line, item.start.col, item.end.line, item.end.col) == (0, 0, 0, 0)


def test_only_first_location_is_used_and_file_scheme_stripped():
    finding = _finding(uri="file:///work/src/A.java", region={"startLine": 1})
    finding["locations"].append(
        {"physicalLocation": {"artifactLocation": {"uri": "src/B.java"}, "region": {"startLine": 9}}}
    )

    result = parse_sarif(_sarif(_run([finding])))

    assert len(result.items) == 1
    assert result.items[0].path == "/work/src/A.java"


def test_multi_run_findings_are_flattened_in_document_order():
    data = _sarif(
        _run([_finding(rule_id="a"), _finding(rule_id="b")]),
        _run([]),
        _run([_finding(rule_id="c"), _finding(rule_id="d"), _finding(rule_id="e")]),
    )

    result = parse_sarif(data)

    assert [item.check_id for item in result.items] == ["a", "b", "c", "d", "e"]


def test_rule_default_message_used_when_finding_has_none():
    rules = [{"id": "java/xss", "messageStrings": {"default": {"text": "Cross-site scripting"}}}]
    finding = _finding(rule_id="java/xss")
    del finding["message"]

    item = parse_sarif(_sarif(_run([finding], rules))).items[0]

    assert item.extra.message == "Cross-site scripting"
    assert item.extra.metadata.message_zh == "Cross-site scripting"
    assert item.extra.metadata.abstract_feysh == {
        "en-US": "Cross-site scripting",
        "zh-CN": "Cross-site scripting",
    }


def test_finding_message_wins_over_rule_message():
    rules = [{"id": "java/xss", "shortDescription": {"text": "Rule text"}}]

    item = parse_sarif(_sarif(_run([_finding(rule_id="java/xss", text="Own text")], rules))).items[0]

    assert item.extra.message == "Own text"


def test_unknown_rule_without_message_yields_empty_message():
    finding = {"ruleId": "x"}

    item = parse_sarif(_sarif(_run([finding]))).items[0]

    assert item.extra.message == ""
    assert item.extra.metadata.message_zh == ""


def test_severity_passed_through_or_defaulted():
    rules = [{"id": "r2", "defaultConfiguration": {"level": "note"}}]
    data = _sarif(
        _run(
            [
                _finding(rule_id="r1", level="error"),
                _finding(rule_id="r2"),
                _finding(rule_id="r3"),
            ],
            rules,
        )
    )

    severities = [item.extra.severity for item in parse_sarif(data).items]

    assert severities == ["error", "note", DEFAULT_SEVERITY]


def test_missing_rule_id_is_kept_with_empty_check_id():
    finding = _finding()
    del finding["ruleId"]

    result = parse_sarif(_sarif(_run([finding])))

    assert result.items[0].check_id == ""


def test_parse_leaves_identity_fields_empty():
    result = parse_sarif(_sarif(_run([_finding()])))

    assert result.id == ""
    assert result.prefix == ""
    assert result.output == ""


def test_document_without_runs_gives_empty_items():
    result = parse_sarif(b'{"version": "2.1.0"}')

    assert result.items == []


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"[1, 2]",
        b'{"runs": {"a": 1}}',
        b'{"runs": ["x"]}',
        b'{"runs": [{"results": {"a": 1}}]}',
        b'{"runs": [{"results": ["x"]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "message": "plain string"}]}]}',
        b'{"runs": [{"results": [{"ruleId": 7}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": "src/A.java"}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": ["x"]}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": [{"physicalLocation": []}]}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": [{"physicalLocation": {"artifactLocation": "a"}}]}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": [{"physicalLocation": {"region": [1]}}]}]}]}',
        b'{"runs": [{"results": [{"ruleId": "r", "locations": [{"physicalLocation": {"region": {"startLine": "4"}}}]}]}]}',
        b'{"runs": [{"tool": "engine"}]}',
        b'{"runs": [{"tool": {"driver": []}}]}',
        b'{"runs": [{"tool": {"driver": {"rules": ["x"]}}}]}',
        b'{"runs": [{"tool": {"driver": {"rules": [{"id": "r", "messageStrings": "m"}]}}}]}',
    ],
)
def test_malformed_documents_fail_to_unmarshal(payload):
    with pytest.raises(ReportParseFailedError) as excinfo:
        parse_sarif(payload, path="broken.sarif")

    assert "failed to unmarshal SARIF data" in str(excinfo.value)
    assert excinfo.value.path == "broken.sarif"


def test_merge_results_concatenates_without_dedup():
    first = Result(items=[ResultItem(check_id="a")])
    second = Result(items=[ResultItem(check_id="a"), ResultItem(check_id="b")])

    merged = merge_results([first, second])

    assert [item.check_id for item in merged.items] == ["a", "a", "b"]


def test_load_sarif_reports_walks_nested_files_in_order(tmp_path):
    report_dir = tmp_path / "sarif"
    (report_dir / "nested").mkdir(parents=True)
    (report_dir / "b.sarif").write_text(_sarif(_run([_finding(rule_id="b")])), encoding="utf-8")
    (report_dir / "a.sarif").write_text(_sarif(_run([_finding(rule_id="a")])), encoding="utf-8")
    (report_dir / "nested" / "c.sarif").write_text(_sarif(_run([_finding(rule_id="c")])), encoding="utf-8")
    (report_dir / "notes.txt").write_text("ignored", encoding="utf-8")

    result = load_sarif_reports(report_dir)

    assert [item.check_id for item in result.items] == ["a", "b", "c"]


def test_load_sarif_reports_interleaves_directories_by_name(tmp_path):
    report_dir = tmp_path / "sarif"
    (report_dir / "a_dir").mkdir(parents=True)
    (report_dir / "a_dir" / "x.sarif").write_text(_sarif(_run([_finding(rule_id="a_dir/x")])), encoding="utf-8")
    (report_dir / "b.sarif").write_text(_sarif(_run([_finding(rule_id="b")])), encoding="utf-8")
    (report_dir / "c_dir").mkdir()
    (report_dir / "c_dir" / "y.sarif").write_text(_sarif(_run([_finding(rule_id="c_dir/y")])), encoding="utf-8")

    result = load_sarif_reports(report_dir)

    assert [item.check_id for item in result.items] == ["a_dir/x", "b", "c_dir/y"]


def test_load_sarif_reports_fails_on_any_bad_file(tmp_path):
    report_dir = tmp_path / "sarif"
    report_dir.mkdir()
    (report_dir / "a.sarif").write_text(_sarif(_run([_finding()])), encoding="utf-8")
    (report_dir / "b.sarif").write_text("{oops", encoding="utf-8")

    with pytest.raises(ReportParseFailedError) as excinfo:
        load_sarif_reports(report_dir)

    assert excinfo.value.path == str(report_dir / "b.sarif")


def test_load_sarif_reports_requires_report_directory(tmp_path):
    with pytest.raises(ReportUnreadableError):
        load_sarif_reports(tmp_path / "missing")
