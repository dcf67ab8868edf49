"""Tuning constants for the change-safety layer.

These are the knobs the validator and orchestration loop read. They are
plain module constants so tests and callers can reference the same values.
"""

# =============================================================================
# ORCHESTRATION
# =============================================================================

# Model-planning iterations allowed per session
DEFAULT_MAX_STEPS = 15


# =============================================================================
# CHANGE VALIDATION
# =============================================================================

# Single-file changes larger than this (in characters) should be split
MAX_CHANGE_CONTENT_CHARS = 100_000

# Above this line-set change ratio a modification is flagged as a rewrite
MAJOR_REWRITE_RATIO = 0.8


# =============================================================================
# REFERENCE FILE CAPABILITIES
# =============================================================================

LIST_FILES_MAX_RESULTS = 100
SEARCH_CODE_DEFAULT_MAX_RESULTS = 50
READ_FILE_MAX_CHARS = 200_000
