"""Pattern-based safety classification of capability calls and changes."""

from .classifier import SafetyClassifier
from .rules import (
    HARMFUL_CONTENT_RULES,
    HARMFUL_REQUEST_RULES,
    PROTECTED_FILES,
    PROTECTED_PATH_PATTERNS,
    SECURITY_KEYWORDS,
    SENSITIVE_CAPABILITIES,
    KeywordRule,
    PatternRule,
)

__all__ = [
    "HARMFUL_CONTENT_RULES",
    "HARMFUL_REQUEST_RULES",
    "KeywordRule",
    "PROTECTED_FILES",
    "PROTECTED_PATH_PATTERNS",
    "PatternRule",
    "SECURITY_KEYWORDS",
    "SENSITIVE_CAPABILITIES",
    "SafetyClassifier",
]
