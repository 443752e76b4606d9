"""
Policy decision helpers: the shared assembly core, the check catalog and the raw encoding.
"""

from decisions.core import (
    ResourceExceptionsError,
    as_decision_type,
    is_allowed,
    is_excepted,
    resolve_severity,
    validate_resource_exceptions,
)
from decisions.checks import CATALOG, Check, UnknownCheckError, assemble_decision, decide_all_from_json, get_check
from decisions.raw import to_raw_decision, to_raw_decisions

__all__ = [
    "CATALOG",
    "Check",
    "ResourceExceptionsError",
    "UnknownCheckError",
    "as_decision_type",
    "assemble_decision",
    "decide_all_from_json",
    "get_check",
    "is_allowed",
    "is_excepted",
    "resolve_severity",
    "to_raw_decision",
    "to_raw_decisions",
    "validate_resource_exceptions",
]
