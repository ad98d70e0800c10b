"""Single source of truth for shared constants and configuration defaults.

Every magic string or default that appears in more than one module is
defined here.  Values that are truly local to one module (e.g. a log
message) stay in that module.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Remediation fields
# ---------------------------------------------------------------------------

FIELD_CODE_SIGNATURE = "process.Ext.code_signature"
FIELD_CODE_SIGNATURE_MACOS = "process.code_signature"
FIELD_EXECUTABLE_CASELESS = "process.executable.caseless"

ENTRY_OPERATOR = "included"
ENTRY_TYPE = "match"

# ---------------------------------------------------------------------------
# Endpoint artifact lists
# ---------------------------------------------------------------------------

TRUSTED_APPS_LIST_ID = "endpoint_trusted_apps"
EVENT_FILTERS_LIST_ID = "endpoint_event_filters"

# ---------------------------------------------------------------------------
# Record defaults (overridable via GenerationSettings)
# ---------------------------------------------------------------------------

DEFAULT_DATA_RANGE_HOURS = 24
DEFAULT_POLICY_TAGS: tuple[str, ...] = ("policy:all",)
DEFAULT_DESCRIPTION = "Suggested by Security Workflow Insights"
DEFAULT_ACTION_TYPE = "refreshed"

# ---------------------------------------------------------------------------
# OS name normalization (directory service spelling -> OSType value)
# ---------------------------------------------------------------------------

OS_ALIASES: dict[str, str] = {
    "windows": "windows",
    "macos": "macos",
    "mac os x": "macos",
    "darwin": "macos",
    "linux": "linux",
}

# ---------------------------------------------------------------------------
# Persistence / HTTP
# ---------------------------------------------------------------------------

QUERY_LIMIT_SMALL = 200
QUERY_LIMIT_MAX = 1000
DEFAULT_DB_PATH = ".workflow_insights/insights.db"
DIRECTORY_TIMEOUT_SECONDS = 30.0
DIRECTORY_MAX_ATTEMPTS = 3
