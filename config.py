"""
Central configuration and tunable constants.

- Schema version and annotation namespace shared by every decision.
- Report output defaults can be overridden by CLI args.
"""

# Decision schema
API_VERSION = "decision.api.shisho.dev/v1beta"
ANNOTATION_PREFIX = "decision.api.shisho.dev:"

# The only reserved token in resource_exceptions; matches every subject.
WILDCARD_EXCEPTION = "*"

# Reports
DEFAULT_REPORT_DIR = "reports"
DEFAULT_SHOW_TOP = 5

# Console colouring: severities at or above these ranks get red / yellow.
SEVERITY_RANK_ALERT = 3    # high
SEVERITY_RANK_WARNING = 2  # medium
