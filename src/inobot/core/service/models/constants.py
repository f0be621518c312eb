"""Role, outcome-reason and status constants."""

# ---------------------------------------------------------------------------
# Message roles: import these instead of duplicating strings.
# ---------------------------------------------------------------------------

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

VALID_ROLES = frozenset({ROLE_USER, ROLE_ASSISTANT})

# Relevance guardrail reasons
GUARDRAIL_MATCHED = "matched"
GUARDRAIL_NO_MATCH = "no_match"
GUARDRAIL_FAIL_OPEN = "fail_open"
GUARDRAIL_DISABLED = "disabled"
GUARDRAIL_EMPTY = "empty"

VALID_GUARDRAIL_REASONS = frozenset(
    {
        GUARDRAIL_MATCHED,
        GUARDRAIL_NO_MATCH,
        GUARDRAIL_FAIL_OPEN,
        GUARDRAIL_DISABLED,
        GUARDRAIL_EMPTY,
    }
)

# Live-data fetch statuses
LIVE_DATA_OK = "ok"
LIVE_DATA_EMPTY = "empty"
LIVE_DATA_FAILED = "failed"
LIVE_DATA_NOT_CONFIGURED = "not_configured"

VALID_LIVE_DATA_STATUSES = frozenset(
    {
        LIVE_DATA_OK,
        LIVE_DATA_EMPTY,
        LIVE_DATA_FAILED,
        LIVE_DATA_NOT_CONFIGURED,
    }
)

# Prompt query types
QUERY_TYPE_INITIAL = "initial"
QUERY_TYPE_FOLLOW_UP = "follow_up"
