# models.py
"""
Data models shared by every policy check.

- Keep simple, serializable dataclasses for decisions.
- Severity and decision-type values are plain strings so records dump to JSON as-is.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict

SEVERITY_INFO = "info"
SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_CRITICAL = "critical"

# Ordered from least to most urgent.
SEVERITIES = (SEVERITY_INFO, SEVERITY_LOW, SEVERITY_MEDIUM, SEVERITY_HIGH, SEVERITY_CRITICAL)

TYPE_UNDETERMINED = "undetermined"
TYPE_ALLOW = "allow"
TYPE_DENY = "deny"

DECISION_TYPES = (TYPE_UNDETERMINED, TYPE_ALLOW, TYPE_DENY)


@dataclass(frozen=True)
class Verdict:
    """
    The compliance outcome for one subject, before exceptions are applied.
    """
    allowed: bool
    subject: str


@dataclass(frozen=True)
class DecisionHeader:
    """
    Metadata envelope for one policy evaluation result.

    Fields:
    - api_version: schema version of the decision
    - kind: identifier of the check that produced it (e.g. "aws_iam_root_user_key")
    - subject: resource identifier the decision is about
    - type: "undetermined", "allow" or "deny"
    - severity: "info", "low", "medium", "high" or "critical"
    - labels: free-form labels, left empty here for downstream enrichment
    - annotations: static check metadata (benchmark references, review flag, category)
    - locator: where inside the subject the issue sits (e.g. file:line), "" if unknown
    """
    api_version: str
    kind: str
    subject: str
    type: str
    severity: str
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    locator: str = ""


@dataclass(frozen=True)
class Decision:
    """
    A single decision: header plus the check-specific evidence payload.
    """
    header: DecisionHeader
    payload: Any = None

    @property
    def allowed(self) -> bool:
        return self.header.type == TYPE_ALLOW

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
