# decisions/raw.py
"""
Low-level (raw) encoding of decisions as consumed by the evaluation engine.

Types and severities become small integers and the payload is a JSON string.
"""

import json
from typing import Any, Dict, Iterable, List

from models import (
    Decision,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_INFO,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    TYPE_ALLOW,
    TYPE_DENY,
    TYPE_UNDETERMINED,
)

RAW_TYPE_UNDETERMINED = 0
RAW_TYPE_ALLOW = 1
RAW_TYPE_DENY = 2

RAW_SEVERITY_INFO = 0
RAW_SEVERITY_LOW = 1
RAW_SEVERITY_MEDIUM = 2
RAW_SEVERITY_HIGH = 3
RAW_SEVERITY_CRITICAL = 4

RAW_TYPES = {
    TYPE_UNDETERMINED: RAW_TYPE_UNDETERMINED,
    TYPE_ALLOW: RAW_TYPE_ALLOW,
    TYPE_DENY: RAW_TYPE_DENY,
}

RAW_SEVERITIES = {
    SEVERITY_INFO: RAW_SEVERITY_INFO,
    SEVERITY_LOW: RAW_SEVERITY_LOW,
    SEVERITY_MEDIUM: RAW_SEVERITY_MEDIUM,
    SEVERITY_HIGH: RAW_SEVERITY_HIGH,
    SEVERITY_CRITICAL: RAW_SEVERITY_CRITICAL,
}


def to_raw_decision(decision: Decision) -> Dict[str, Any]:
    """
    Encode one decision. Raises ValueError on an unknown type or severity.
    """
    h = decision.header
    try:
        raw_type = RAW_TYPES[h.type]
        raw_severity = RAW_SEVERITIES[h.severity]
    except KeyError as e:
        raise ValueError(f"Cannot encode decision for {h.subject}: unknown value {e.args[0]!r}") from e
    return {
        "header": {
            "api_version": h.api_version,
            "kind": h.kind,
            "subject": h.subject,
            "type": raw_type,
            "labels": dict(h.labels),
            "annotations": dict(h.annotations),
            "locator": h.locator or "",
            "severity": raw_severity,
        },
        "payload": json.dumps(decision.payload),
    }


def to_raw_decisions(decisions: Iterable[Decision]) -> List[Dict[str, Any]]:
    return [to_raw_decision(d) for d in decisions]
