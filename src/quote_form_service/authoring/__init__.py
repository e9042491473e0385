from .checks import (  # noqa: F401
    NOT_EARLIER_STEP,
    UNKNOWN_QUESTION,
    ConditionIssue,
    condition_schema,
    find_condition_issues,
    validate_condition_payload,
)
