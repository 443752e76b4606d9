# decisions/checks.py
"""
Check catalog and decision assembly.

- Each Check carries the static metadata of one policy check: its kind, a
  short title, the severity used when it denies, and benchmark annotations.
- CATALOG is a read-only table keyed by kind; Check.decide builds decisions.
- decide_all_from_json runs a whole document of verdicts through the catalog.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from config import API_VERSION, ANNOTATION_PREFIX
from models import (
    Decision,
    DecisionHeader,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_INFO,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    Verdict,
)
from decisions.core import as_decision_type, check_severity, is_allowed, resolve_severity


class UnknownCheckError(KeyError):
    """
    Raised when a kind has no entry in the catalog.
    """


@dataclass(frozen=True)
class Check:
    """
    Static definition of one policy check.

    Fields:
    - kind: stable identifier copied into every decision header
    - title: one-line description of what compliance means
    - default_severity: severity emitted on deny when the caller gives none
    - annotations: benchmark cross-references, review flag and category
    """
    kind: str
    title: str
    default_severity: str
    annotations: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        check_severity(self.default_severity)

    def decide(
        self,
        allowed: bool,
        subject: str,
        payload: Any = None,
        locator: Optional[str] = None,
        severity: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Decision:
        return assemble_decision(
            self,
            allowed,
            subject,
            payload=payload,
            locator=locator,
            severity=severity,
            params=params,
        )


def assemble_decision(
    check: Check,
    allowed: bool,
    subject: str,
    payload: Any = None,
    locator: Optional[str] = None,
    severity: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> Decision:
    """
    Build a decision for subject under check.

    An excepted subject is treated as allowed, and an allowed decision is
    always reported at "info" whatever severity override was passed.
    Raises ResourceExceptionsError if params carries a malformed exception list.
    """
    folded = is_allowed(Verdict(allowed=allowed, subject=subject), params)
    header = DecisionHeader(
        api_version=API_VERSION,
        kind=check.kind,
        subject=subject,
        type=as_decision_type(folded),
        severity=resolve_severity(folded, check.default_severity, severity),
        labels={},
        annotations=dict(check.annotations),
        locator=locator if locator is not None else "",
    )
    return Decision(header=header, payload=payload)


AWS_CIS = "aws/cis-benchmark/v1.5.0"
AWS_FSBP = "aws/fsbp/latest"
GOOGLECLOUD_CIS = "googlecloud/cis-benchmark/v1.3.0"
SSC_CIS = "ssc/cis-benchmark/v1.0"


def _annotations(category: str, refs: Dict[str, str], manual_review: Optional[bool] = None) -> Dict[str, str]:
    """
    Build an annotation map from benchmark references, the manual-review flag and a category.
    """
    out = {ANNOTATION_PREFIX + key: value for key, value in refs.items()}
    if manual_review is not None:
        out[ANNOTATION_PREFIX + "needs-manual-review"] = "true" if manual_review else "false"
    out[ANNOTATION_PREFIX + "ssc/category"] = category
    return out


def _aws(cis: str, fsbp: Optional[str] = None, manual_review: bool = False) -> Dict[str, str]:
    refs = {AWS_CIS: cis}
    if fsbp:
        refs[AWS_FSBP] = fsbp
    return _annotations("infrastructure", refs, manual_review)


def _googlecloud(cis: str, manual_review: bool = False) -> Dict[str, str]:
    return _annotations("infrastructure", {GOOGLECLOUD_CIS: cis}, manual_review)


def _ssc(category: str, cis: str) -> Dict[str, str]:
    return _annotations(category, {SSC_CIS: cis})


_CHECKS = [
    # AWS
    Check("aws_s3_bucket_access_logging", "Ensure access logging is enabled for important S3 buckets",
          SEVERITY_LOW, _aws("3.6", "S3.9", manual_review=True)),
    Check("aws_s3_bucket_encryption", "Ensure all S3 buckets are encrypted",
          SEVERITY_LOW, _aws("2.1.1", "S3.4")),
    Check("aws_s3_bucket_mfa_delete", "Ensure MFA Delete is enabled on S3 buckets",
          SEVERITY_MEDIUM, _aws("2.1.3")),
    Check("aws_s3_bucket_public_access_block", "Ensure S3 buckets enabled block public access feature",
          SEVERITY_MEDIUM, _aws("2.1.5", "S3.8")),
    Check("aws_s3_bucket_transport", "Ensure S3 buckets deny HTTP requests",
          SEVERITY_MEDIUM, _aws("2.1.2")),
    Check("aws_s3_bucket_read_trail", "Ensure CloudTrail trails are logging S3 bucket read events",
          SEVERITY_LOW, _aws("3.11", manual_review=True)),
    Check("aws_s3_bucket_write_trail", "Ensure CloudTrail trails are logging S3 bucket data write events",
          SEVERITY_LOW, _aws("3.10", manual_review=True)),
    Check("aws_iam_root_user_key", "Ensure the AWS root user does not have access keys",
          SEVERITY_CRITICAL, _aws("1.4", "IAM.4", manual_review=True)),
    Check("aws_iam_key_rotation", "Ensure AWS IAM access keys are rotated per pre-defined time window",
          SEVERITY_MEDIUM, _aws("1.14", "IAM.3")),
    Check("aws_cloudtrail_log_file_validation", "Ensure CloudTrail log file validation is enabled",
          SEVERITY_MEDIUM, _aws("3.2")),
    Check("aws_networking_sg_ingress_v4",
          "Ensure no security groups allow ingress from 0.0.0.0/0 to remote server administration ports",
          SEVERITY_HIGH, _aws("5.2", "EC2.14")),
    Check("aws_rds_instance_encryption", "Ensure encryption is enabled for RDS instances",
          SEVERITY_MEDIUM, _aws("2.3.1", "RDS.3")),
    # Google Cloud
    Check("googlecloud_storage_bucket_accessibility", "Ensure Cloud Storage buckets are public only if intended",
          SEVERITY_CRITICAL, _googlecloud("5.1", manual_review=True)),
    Check("googlecloud_sql_instance_public_ip", "Ensure Cloud SQL instances have public IPs only if they need",
          SEVERITY_MEDIUM, _googlecloud("6.6")),
    Check("googlecloud_compute_instance_serial_port",
          "Ensure connections to serial ports are disabled for Compute Engine instances",
          SEVERITY_LOW, _googlecloud("4.5")),
    # GitHub
    Check("github_branch_deletion_policy", "Ensure the deletion of protected branches is limited",
          SEVERITY_MEDIUM, _ssc("source", "1.1.17")),
    Check("github_code_owners_review_policy",
          "Ensure code owner's review is required when a change affects owned code",
          SEVERITY_LOW, _ssc("source", "1.1.7")),
    Check("github_commit_signature_policy", "Ensure verification of signed commits for new changes before merging",
          SEVERITY_INFO, _ssc("source", "1.1.12")),
    Check("github_default_branch_protection", "Keep a default branch protected by branch protection rule(s)",
          SEVERITY_MEDIUM, _ssc("source", "1.1.14")),
    Check("github_force_push_policy", "Ensure force push code to branches is denied",
          SEVERITY_LOW, _ssc("source", "1.1.16")),
    # Dependencies and sources
    Check("package_known_vulnerability", "Update packages with known vulnerabilities",
          SEVERITY_INFO, _ssc("dependency", "3.2.2")),
    Check("version_control", "Manage sources with a version control system",
          SEVERITY_INFO, _ssc("source", "1.1.1")),
]

CATALOG: Mapping[str, Check] = MappingProxyType({c.kind: c for c in _CHECKS})


def get_check(kind: str) -> Check:
    try:
        return CATALOG[kind]
    except KeyError:
        raise UnknownCheckError(kind) from None


def decide_all_from_json(data: Dict[str, Any], params: Optional[Mapping[str, Any]] = None) -> List[Decision]:
    """
    Offline mode: build decisions from a JSON-like dict of verdicts.
    Expected shape:
    {
      "params": { "resource_exceptions": ["arn:aws:s3:::legacy-bucket"] },
      "verdicts": [
        { "kind": "aws_s3_bucket_access_logging", "allowed": false,
          "subject": "arn:aws:s3:::my-bucket", "payload": { "enabled": false } },
        ...
      ]
    }
    params, when given, replaces the document's own "params".
    Raises ValueError on a malformed verdict and UnknownCheckError on an unknown kind.
    """
    if not isinstance(data, Mapping):
        raise ValueError("verdicts document must be an object")
    if params is None:
        params = data.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, Mapping):
            raise ValueError("params must be an object")
    verdicts = data.get("verdicts", [])
    if not isinstance(verdicts, list):
        raise ValueError("verdicts must be a list")
    decisions: List[Decision] = []
    for i, v in enumerate(verdicts):
        if not isinstance(v, dict):
            raise ValueError(f"verdicts[{i}] must be an object")
        missing = [k for k in ("kind", "allowed", "subject") if k not in v]
        if missing:
            raise ValueError(f"verdicts[{i}] is missing {', '.join(missing)}")
        if not isinstance(v["allowed"], bool):
            raise ValueError(f"verdicts[{i}].allowed must be a boolean")
        if not isinstance(v["subject"], str):
            raise ValueError(f"verdicts[{i}].subject must be a string")
        if v.get("locator") is not None and not isinstance(v["locator"], str):
            raise ValueError(f"verdicts[{i}].locator must be a string")
        check = get_check(v["kind"])
        decisions.append(check.decide(
            v["allowed"],
            v["subject"],
            payload=v.get("payload"),
            locator=v.get("locator"),
            severity=v.get("severity"),
            params=params,
        ))
    return decisions
