# decisions/core.py
"""
Decision-assembly core shared by every check.

- Pure functions only: no I/O, no logging, no module state.
- Exception lists come from loosely typed policy configuration, so they are
  validated here instead of trusted.
"""

from typing import Any, Mapping, Optional, Tuple

from config import WILDCARD_EXCEPTION
from models import SEVERITIES, SEVERITY_INFO, TYPE_ALLOW, TYPE_DENY, Verdict


class ResourceExceptionsError(ValueError):
    """
    Raised when resource_exceptions is not a list of strings.
    """


def as_decision_type(allowed: bool) -> str:
    """
    Map a compliance verdict to a decision type. Never returns "undetermined".
    """
    return TYPE_ALLOW if allowed else TYPE_DENY


def validate_resource_exceptions(value: Any) -> Tuple[str, ...]:
    """
    Check the shape of a resource_exceptions value and return it as a tuple.

    None is treated as "no exceptions configured".
    """
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ResourceExceptionsError("resource_exceptions must be string[]")
    if any(not isinstance(x, str) for x in value):
        raise ResourceExceptionsError("resource_exceptions must be string[]")
    return tuple(value)


def is_excepted(subject: str, params: Optional[Mapping[str, Any]] = None) -> bool:
    """
    Return True if enforcement is skipped for subject.

    A subject is excepted when resource_exceptions contains it verbatim or
    contains the "*" wildcard. Matching is exact string equality.
    """
    if params is None:
        return False
    if not isinstance(params, Mapping):
        raise ResourceExceptionsError("exception params must be an object with resource_exceptions")
    exceptions = params.get("resource_exceptions")
    if not exceptions:
        return False

    exceptions = validate_resource_exceptions(exceptions)
    return any(x == WILDCARD_EXCEPTION or x == subject for x in exceptions)


def is_allowed(verdict: Verdict, params: Optional[Mapping[str, Any]] = None) -> bool:
    """
    Fold the exception list into a verdict.
    """
    return is_excepted(verdict.subject, params) or verdict.allowed


def check_severity(value: str) -> str:
    if value not in SEVERITIES:
        raise ValueError(f"Unknown severity {value!r}; expected one of {', '.join(SEVERITIES)}")
    return value


def resolve_severity(allowed: bool, default: str, override: Optional[str] = None) -> str:
    """
    Pick the severity to emit.

    - allowed (compliant or excepted): always "info", override is ignored
    - denied: the caller override if given, otherwise the check default
    """
    if allowed:
        return SEVERITY_INFO
    if override is not None:
        return check_severity(override)
    return check_severity(default)
