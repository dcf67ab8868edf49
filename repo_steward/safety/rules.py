"""
Safety rule tables.

Each table is an ordered tuple of tagged rules evaluated with first-match
semantics. Order is part of the contract: when two rules could match the
same text, the earlier one decides the verdict.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Pattern, Tuple

from repo_steward.models.types import Severity


@dataclass(frozen=True)
class PatternRule:
    """A regex predicate with the verdict it produces."""
    pattern: Pattern[str]
    description: str
    severity: Severity

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class KeywordRule:
    """A security-relevant keyword counted by the regression heuristic."""
    pattern: Pattern[str]
    name: str

    def count(self, text: str) -> int:
        return len(self.pattern.findall(text))


def _rule(regex: str, description: str, severity: Severity, flags: int = 0) -> PatternRule:
    return PatternRule(re.compile(regex, flags), description, severity)


# ═══════════════════════════════════════════════════════════════════════════════
# HARMFUL CONTENT
# ═══════════════════════════════════════════════════════════════════════════════

HARMFUL_CONTENT_RULES: Tuple[PatternRule, ...] = (
    # ─── Code execution ───
    _rule(r"eval\s*\(", "eval() can execute arbitrary code", Severity.CRITICAL),
    _rule(r"new\s+Function\s*\(", "new Function() can execute arbitrary code", Severity.CRITICAL),
    _rule(r"child_process\.exec\s*\(", "exec() with unsanitized input", Severity.ERROR),

    # ─── File system attacks ───
    _rule(r"\.\./\.\./\.\./", "Path traversal attack pattern", Severity.CRITICAL),
    _rule(r"/etc/passwd", "Sensitive system file access", Severity.CRITICAL),
    _rule(r"/etc/shadow", "Sensitive system file access", Severity.CRITICAL),

    # ─── Credential exposure ───
    _rule(r"password\s*[:=]\s*['\"][^'\"]{8,}['\"]", "Hardcoded password detected", Severity.CRITICAL),
    _rule(r"api[_-]?key\s*[:=]\s*['\"][^'\"]{16,}['\"]", "Hardcoded API key detected", Severity.CRITICAL),
    _rule(r"secret\s*[:=]\s*['\"][^'\"]{16,}['\"]", "Hardcoded secret detected", Severity.CRITICAL),
    _rule(r"private[_-]?key\s*[:=]\s*['\"]-----BEGIN", "Private key in code", Severity.CRITICAL),

    # ─── Network exposure ───
    _rule(r"0\.0\.0\.0.*listen", "Listening on all interfaces", Severity.WARNING),

    # ─── SQL injection ───
    _rule(r"`\s*SELECT.*\$\{", "Potential SQL injection in template literal", Severity.ERROR),
    _rule(
        r"'\s*\+\s*.*\+\s*'.*(?:SELECT|INSERT|UPDATE|DELETE)",
        "Potential SQL injection via concatenation",
        Severity.ERROR,
        re.IGNORECASE,
    ),

    # ─── XSS ───
    _rule(r"innerHTML\s*=\s*[^'\"]+(?:req|user|input|param)", "Potential XSS via innerHTML", Severity.ERROR),
    _rule(r"dangerouslySetInnerHTML", "Using dangerouslySetInnerHTML", Severity.WARNING),
)


# ═══════════════════════════════════════════════════════════════════════════════
# PROTECTED FILES AND PATHS
# ═══════════════════════════════════════════════════════════════════════════════

# Matched as the whole repo-relative path or as a "/<name>" suffix
PROTECTED_FILES: Tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.production",
    ".env.development",
    "credentials.json",
    "secrets.json",
    "service-account.json",
    ".git/config",
    ".npmrc",
    ".yarnrc",
)

PROTECTED_PATH_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"^\.ssh/"),
    re.compile(r"^\.aws/"),
    re.compile(r"^\.gcloud/"),
    re.compile(r"(?:^|/)secrets?/", re.IGNORECASE),
    re.compile(r"(?:^|/)credentials?/", re.IGNORECASE),
    re.compile(r"(?:^|/)private[_-]?keys?/", re.IGNORECASE),
)


# ═══════════════════════════════════════════════════════════════════════════════
# SENSITIVE CAPABILITIES
# ═══════════════════════════════════════════════════════════════════════════════

# Capabilities that mutate files, version control, packages or remote state
SENSITIVE_CAPABILITIES: FrozenSet[str] = frozenset({
    "write_file",
    "git_commit",
    "git_push",
    "create_pull_request",
    "npm_audit_fix",
    "npm_update",
})


# ═══════════════════════════════════════════════════════════════════════════════
# SECURITY REGRESSION KEYWORDS
# ═══════════════════════════════════════════════════════════════════════════════

SECURITY_KEYWORDS: Tuple[KeywordRule, ...] = (
    KeywordRule(re.compile(r"validate", re.IGNORECASE), "validation"),
    KeywordRule(re.compile(r"sanitize", re.IGNORECASE), "sanitization"),
    KeywordRule(re.compile(r"escape", re.IGNORECASE), "escaping"),
    KeywordRule(re.compile(r"authenticate", re.IGNORECASE), "authentication"),
    KeywordRule(re.compile(r"authorize", re.IGNORECASE), "authorization"),
    KeywordRule(re.compile(r"csrf", re.IGNORECASE), "CSRF protection"),
    KeywordRule(re.compile(r"xss", re.IGNORECASE), "XSS protection"),
    KeywordRule(re.compile(r"helmet", re.IGNORECASE), "security headers"),
    KeywordRule(re.compile(r"rate[_-]?limit", re.IGNORECASE), "rate limiting"),
)


# ═══════════════════════════════════════════════════════════════════════════════
# ISSUE ELIGIBILITY
# ═══════════════════════════════════════════════════════════════════════════════

HARMFUL_REQUEST_RULES: Tuple[PatternRule, ...] = tuple(
    _rule(regex, description, Severity.CRITICAL, re.IGNORECASE)
    for regex, description in (
        (r"bypass.*auth", "Request to bypass authentication"),
        (r"disable.*security", "Request to disable security"),
        (r"remove.*validation", "Request to remove validation"),
        (r"add.*backdoor", "Request to add backdoor"),
        (r"expose.*secret", "Request to expose secrets"),
        (r"skip.*check", "Request to skip checks"),
        (r"hardcode.*password", "Request to hardcode passwords"),
        (r"remove.*auth", "Request to remove authentication"),
        (r"disable.*csrf", "Request to disable CSRF protection"),
        (r"ignore.*(?:ssl|tls)", "Request to ignore SSL/TLS"),
    )
)

CODE_INDICATORS: Tuple[Pattern[str], ...] = tuple(
    re.compile(regex, re.IGNORECASE)
    for regex in (
        # Failure vocabulary
        r"error", r"bug", r"crash", r"exception", r"traceback",
        r"fix", r"broken", r"doesn'?t work", r"fails",
        # Failure-mode values
        r"undefined", r"\bnull\b", r"\bnan\b",
        # Source references
        r"line \d+", r"\.tsx?\b", r"\.jsx?\b", r"\.py\b",
        # Language keywords
        r"function", r"\bdef\b", r"return", r"import", r"export",
    )
)


def first_match(rules: Tuple[PatternRule, ...], text: str) -> Optional[PatternRule]:
    """Return the first rule whose pattern matches, or None."""
    for rule in rules:
        if rule.matches(text):
            return rule
    return None
