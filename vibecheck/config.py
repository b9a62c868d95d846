"""Configuration for the vibecheck analyzers and MCP server."""

from __future__ import annotations

# ── Server Config ────────────────────────────────────────────────────────────
SERVER_NAME = "vibecheck-mcp"
SERVER_VERSION = "0.3.0"
SERVER_HOST = "127.0.0.1"
SERVER_PORT = 8089

# ── Checks ───────────────────────────────────────────────────────────────────
# Check name -> MCP tool name. Order is the registration order.
CHECK_TOOLS = {
    "security": "security_scan",
    "ai-detection": "ai_slop_detector",
    "tests": "test_coverage_check",
    "complexity": "complexity_analyzer",
}

DEFAULT_CHECKS = list(CHECK_TOOLS)

# ── Security Patterns ────────────────────────────────────────────────────────
# Evaluated in order; findings are deduplicated by (type, line) so earlier
# entries win when two patterns of the same type hit the same line.
SECURITY_PATTERNS = [
    # Hardcoded secrets
    {
        "pattern": r"""(['"])[A-Za-z0-9_]*(?:api[_-]?key|secret|password|token|credential)[A-Za-z0-9_]*\1\s*[:=]\s*(['"])[^'"]{8,}\2""",
        "flags": "i",
        "type": "hardcoded-secret",
        "severity": "high",
        "message": "Possible hardcoded secret detected",
    },
    {
        "pattern": r"(?:sk|pk)_(?:live|test)_[A-Za-z0-9]{24,}",
        "type": "stripe-key",
        "severity": "high",
        "message": "Stripe API key detected",
    },
    {
        "pattern": r"ghp_[A-Za-z0-9]{36}",
        "type": "github-token",
        "severity": "high",
        "message": "GitHub personal access token detected",
    },
    {
        "pattern": r"AKIA[0-9A-Z]{16}",
        "type": "aws-key",
        "severity": "high",
        "message": "AWS access key detected",
    },
    # SQL injection
    {
        "pattern": r"`SELECT.*\$\{.*\}`",
        "flags": "i",
        "type": "sql-injection",
        "severity": "high",
        "message": "Potential SQL injection - string interpolation in query",
    },
    {
        "pattern": r"""['"]SELECT.*['"].*\+.*(?:req|params|query|body)""",
        "flags": "i",
        "type": "sql-injection",
        "severity": "high",
        "message": "Potential SQL injection - concatenating user input",
    },
    {
        "pattern": r"""\.query\s*\(\s*['"`].*\$\{""",
        "flags": "i",
        "type": "sql-injection",
        "severity": "high",
        "message": "Potential SQL injection in query method",
    },
    {
        "pattern": r"""\bexecute\s*\(\s*f['"]|\.format\s*\(.*(?:SELECT|INSERT|UPDATE|DELETE)""",
        "type": "sql-injection",
        "severity": "high",
        "message": "Potential SQL injection - query built with string formatting",
    },
    # XSS
    {
        "pattern": r"""innerHTML\s*=\s*(?!['"]<)""",
        "type": "xss",
        "severity": "high",
        "message": "Potential XSS - setting innerHTML with dynamic content",
    },
    {
        "pattern": r"dangerouslySetInnerHTML",
        "type": "xss",
        "severity": "medium",
        "message": "Using dangerouslySetInnerHTML - ensure content is sanitized",
    },
    {
        "pattern": r"document\.write\s*\(",
        "type": "xss",
        "severity": "high",
        "message": "document.write can enable XSS attacks",
    },
    # Command injection
    {
        "pattern": r"(?:exec|spawn|execSync|spawnSync)\s*\([^)]*\$\{",
        "type": "command-injection",
        "severity": "high",
        "message": "Potential command injection - interpolating into shell command",
    },
    {
        "pattern": r"(?:exec|spawn)\s*\([^)]*\+",
        "type": "command-injection",
        "severity": "high",
        "message": "Potential command injection - concatenating into shell command",
    },
    {
        "pattern": r"""subprocess\.\w+\s*\([^)]*shell\s*=\s*True|os\.system\s*\(\s*f['"]""",
        "type": "command-injection",
        "severity": "high",
        "message": "Potential command injection - shell invocation with dynamic input",
    },
    # Insecure practices
    {
        "pattern": r"\beval\s*\(",
        "type": "eval",
        "severity": "medium",
        "message": "eval() is dangerous - consider alternatives",
    },
    {
        "pattern": r"new Function\s*\(",
        "type": "eval",
        "severity": "medium",
        "message": "new Function() can execute arbitrary code",
    },
    {
        "pattern": r"""crypto\.createHash\s*\(\s*['"](?:md5|sha1)['"]\s*\)""",
        "flags": "i",
        "type": "weak-crypto",
        "severity": "medium",
        "message": "Weak hash algorithm - use SHA-256 or better",
    },
    {
        "pattern": r"hashlib\.(?:md5|sha1)\s*\(",
        "type": "weak-crypto",
        "severity": "medium",
        "message": "Weak hash algorithm - use SHA-256 or better",
    },
    {
        "pattern": r"Math\.random\s*\(\s*\)",
        "type": "insecure-random",
        "severity": "low",
        "message": "Math.random() is not cryptographically secure",
    },
    # Auth issues
    {
        "pattern": r"(?:verify|check).*(?:password|token|auth).*(?:===?|!==?)\s*(?:true|false)",
        "flags": "i",
        "type": "auth-bypass",
        "severity": "high",
        "message": "Suspicious authentication check pattern",
    },
    {
        "pattern": r"""jwt\.verify.*\{\s*algorithms\s*:\s*\[\s*['"]none['"]""",
        "flags": "i",
        "type": "jwt-none",
        "severity": "high",
        "message": 'JWT allowing "none" algorithm is insecure',
    },
]

SNIPPET_MAX_CHARS = 100

# ── AI Detection ─────────────────────────────────────────────────────────────
# Weights are summed for every signal that fires; the total is capped at 1.0.
AI_SIGNAL_WEIGHTS = {
    "addition_ratio": 0.25,
    "single_commit": 0.20,
    "verbose_comments": 0.15,
    "step_comments": 0.15,
    "generic_names": 0.10,
    "todo_placeholders": 0.10,
    "flagged_blocks": 0.15,
}

# Ratio signal: (adds / dels > MIN_RATIO, or no deletions and adds > NO_DELETION_ADDS)
# and adds > MIN_ADDS
ADDITION_RATIO_MIN_RATIO = 5
ADDITION_RATIO_MIN_ADDS = 100
ADDITION_RATIO_NO_DELETION_ADDS = 50
ADDITION_RATIO_NO_DELETION_VALUE = 10

SINGLE_COMMIT_MIN_ADDS = 200

# Count signals fire when the count is strictly greater than the threshold
VERBOSE_COMMENT_THRESHOLD = 5
STEP_COMMENT_THRESHOLD = 2
GENERIC_NAME_THRESHOLD = 5
TODO_PLACEHOLDER_THRESHOLD = 2

# Addition runs longer than this are inspected block by block
ADDITION_BLOCK_MIN_LINES = 30
BLOCK_FUNCTION_THRESHOLD = 3

# (lower bound, level), checked top-down with a strict comparison
AI_RISK_LEVELS = [
    (0.7, "high"),
    (0.4, "medium"),
    (0.2, "low"),
]

AI_VERBOSE_COMMENT_PATTERN = r"\s*(?:This|The|We|First|Next|Finally|Here|Now)\s+\w+"
AI_STEP_COMMENT_PATTERN = r"\s*(?:Step \d|First,|Second,|Then,|Finally,|Next,)"
AI_GENERIC_NAME_PATTERN = (
    r"(?:function|const|let|var)\s+"
    r"(?:handle|process|validate|check|get|set|update|create|delete|fetch|render)[A-Z]\w+"
    r"|def\s+(?:handle|process|validate|check|get|set|update|create|delete|fetch|render)_\w+"
)
AI_TODO_PLACEHOLDER_PATTERN = r"TODO:\s*(?:implement|add|fix|handle|update)"

# Comment patterns above follow a "//" marker; files with these extensions
# also accept "#"
HASH_COMMENT_EXTENSIONS = frozenset({".py", ".pyi", ".rb", ".sh"})

# ── Complexity ───────────────────────────────────────────────────────────────
# (severity, max cyclomatic, max nesting, max length); exceeding any limit
# assigns the severity. Checked top-down, first match wins.
HOTSPOT_THRESHOLDS = [
    ("high", 15, 5, 100),
    ("medium", 10, 4, 50),
    ("low", 7, 3, 30),
]

# Identifiers that look like method declarations but are control flow
METHOD_KEYWORD_EXCLUSIONS = frozenset({"if", "for", "while", "switch", "catch"})

# ── Test Coverage ────────────────────────────────────────────────────────────
SOURCE_EXTENSIONS = r"(?:[jt]sx?|py|go|rs|rb|java|cs|cpp|c)"

TEST_FILE_PATTERNS = [
    rf"\.(?:test|spec)\.{SOURCE_EXTENSIONS}$",
    rf"_test\.{SOURCE_EXTENSIONS}$",
    r"(?:^|/)__tests__/",
    r"(?:^|/)test_[^/]*\.py$",
]

SOURCE_EXCLUDE_PATTERNS = [
    r"\.config\.[jt]s$",
    r"\.d\.ts$",
    r"(?:^|/)types?\.[jt]s$",
    r"(?:^|/)index\.[jt]sx?$",  # usually re-exports
    r"package\.json$",
    r"tsconfig\.json$",
    r"\.lock$",
    r"\.md$",
    r"\.ya?ml$",
]

UNCOVERED_ALARM_THRESHOLD = 5
