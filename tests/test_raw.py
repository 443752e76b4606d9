# tests/test_raw.py
"""
Tests for the integer-coded raw decision encoding.
"""

import json

import pytest

from decisions.checks import get_check
from decisions.raw import RAW_SEVERITY_CRITICAL, RAW_SEVERITY_INFO, RAW_TYPE_ALLOW, RAW_TYPE_DENY, to_raw_decision, to_raw_decisions
from models import Decision, DecisionHeader


def test_denied_root_key():
    d = get_check("aws_iam_root_user_key").decide(False, "arn:aws:iam::1:root", payload={"root_has_access_keys": True})
    raw = to_raw_decision(d)
    assert raw["header"]["type"] == RAW_TYPE_DENY == 2
    assert raw["header"]["severity"] == RAW_SEVERITY_CRITICAL == 4
    assert raw["header"]["locator"] == ""
    assert raw["header"]["labels"] == {}
    assert raw["header"]["annotations"] == d.header.annotations
    assert json.loads(raw["payload"]) == {"root_has_access_keys": True}


def test_allowed_decision():
    d = get_check("version_control").decide(True, "repo")
    raw = to_raw_decision(d)
    assert raw["header"]["type"] == RAW_TYPE_ALLOW == 1
    assert raw["header"]["severity"] == RAW_SEVERITY_INFO == 0
    assert raw["payload"] == "null"


def test_undetermined_and_severity_values():
    header = DecisionHeader("v", "k", "s", "undetermined", "medium")
    raw = to_raw_decision(Decision(header=header, payload=[1, 2]))
    assert raw["header"]["type"] == 0
    assert raw["header"]["severity"] == 2
    assert raw["payload"] == "[1, 2]"


def test_unknown_type_rejected():
    header = DecisionHeader("v", "k", "s", "maybe", "medium")
    with pytest.raises(ValueError):
        to_raw_decision(Decision(header=header))


def test_to_raw_decisions():
    check = get_check("aws_s3_bucket_encryption")
    raws = to_raw_decisions([check.decide(False, "a"), check.decide(True, "b")])
    assert [r["header"]["severity"] for r in raws] == [1, 0]
