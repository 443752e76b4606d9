# tests/test_main.py
"""
CLI tests: run main() against the bundled samples and malformed inputs.
"""

import json
import os

import pytest

import main

SAMPLES = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "samples")


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_run_sample_file(tmp_path):
    decisions = main.run(os.path.join(SAMPLES, "verdicts.json"), report_dir=str(tmp_path))
    by_subject = {d.header.subject: d.header for d in decisions}
    assert by_subject["arn:aws:s3:::my-bucket"].type == "deny"
    assert by_subject["arn:aws:s3:::my-bucket"].severity == "low"
    assert by_subject["arn:aws:s3:::legacy-logs"].type == "allow"
    assert by_subject["arn:aws:iam::123456789012:root"].severity == "critical"
    assert by_subject["arn:aws:iam::123456789012:user/deploy"].severity == "high"
    assert by_subject["github/repository/example/app"].locator == "branch:main"
    assert len(os.listdir(tmp_path)) == 3


def test_exceptions_file_replaces_params(tmp_path):
    decisions = main.run(
        os.path.join(SAMPLES, "verdicts.json"),
        exceptions_path=os.path.join(SAMPLES, "exceptions.json"),
        report_dir=str(tmp_path),
    )
    by_subject = {d.header.subject: d.header for d in decisions}
    assert by_subject["arn:aws:iam::123456789012:root"].type == "allow"
    assert by_subject["arn:aws:iam::123456789012:root"].severity == "info"
    assert by_subject["arn:aws:s3:::legacy-logs"].type == "deny"


def test_main_writes_raw(tmp_path):
    main.main(["--file", os.path.join(SAMPLES, "verdicts.json"), "--report-dir", str(tmp_path), "--raw"])
    assert any(name.endswith(".raw.json") for name in os.listdir(tmp_path))


def test_main_bad_exceptions_aborts(tmp_path):
    verdicts = _write(tmp_path, "v.json", {"verdicts": [{"kind": "version_control", "allowed": True, "subject": "s"}]})
    exceptions = _write(tmp_path, "e.json", {"resource_exceptions": [1]})
    out_dir = tmp_path / "reports"
    with pytest.raises(SystemExit) as exc:
        main.main(["--file", verdicts, "--exceptions", exceptions, "--report-dir", str(out_dir)])
    assert "resource_exceptions must be string[]" in str(exc.value.code)
    assert not out_dir.exists()


def test_main_bad_params_in_document_aborts(tmp_path):
    verdicts = _write(tmp_path, "v.json", {
        "params": {"resource_exceptions": [None]},
        "verdicts": [{"kind": "version_control", "allowed": False, "subject": "s"}],
    })
    with pytest.raises(SystemExit):
        main.main(["--file", verdicts, "--report-dir", str(tmp_path / "reports")])


def test_main_unknown_kind(tmp_path):
    verdicts = _write(tmp_path, "v.json", {"verdicts": [{"kind": "nope", "allowed": True, "subject": "s"}]})
    with pytest.raises(SystemExit) as exc:
        main.main(["--file", verdicts, "--report-dir", str(tmp_path / "reports")])
    assert "nope" in str(exc.value.code)


def test_main_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        main.main(["--file", str(tmp_path / "missing.json")])


def test_main_requires_file():
    with pytest.raises(SystemExit):
        main.parse_args([])


@pytest.mark.parametrize("document", [
    {"params": ["arn:aws:s3:::legacy"], "verdicts": [{"kind": "version_control", "allowed": False, "subject": "s"}]},
    {"verdicts": None},
    {"verdicts": 5},
    {"verdicts": [{"kind": "version_control", "allowed": False, "subject": "s", "locator": 5}]},
    ["verdicts"],
])
def test_main_malformed_document_exits_cleanly(tmp_path, document):
    verdicts = _write(tmp_path, "v.json", document)
    out_dir = tmp_path / "reports"
    with pytest.raises(SystemExit) as exc:
        main.main(["--file", verdicts, "--report-dir", str(out_dir)])
    assert exc.value.code
    assert not out_dir.exists()
