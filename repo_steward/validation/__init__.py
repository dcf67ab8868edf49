"""Pre-apply validation of proposed changes."""

from .brackets import BracketCheck, check_brackets
from .change_validator import ChangeValidator, calculate_change_ratio
from .content import validate_content_for_extension
from .gate import ChangeGate, validate_context

__all__ = [
    "BracketCheck",
    "ChangeGate",
    "ChangeValidator",
    "calculate_change_ratio",
    "check_brackets",
    "validate_content_for_extension",
    "validate_context",
]
