"""Shared limits and defaults for Dayflow."""

SESSION_KEY = "dayflow_user"
DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6
RECENT_LEAVES_LIMIT = 5
RECENT_PAYROLL_LIMIT = 50
DEFAULT_EMPLOYMENT_TYPE = "full-time"
TRUTHY_FLAGS = frozenset({"1", "true", "on", "yes"})
