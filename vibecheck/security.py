"""Security pattern scanning over a code or diff snippet."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from vibecheck.config import SECURITY_PATTERNS, SNIPPET_MAX_CHARS
from vibecheck.models import SecurityFinding, SecurityReport, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecurityPattern:
    regex: re.Pattern
    type: str
    severity: Severity
    message: str


def _compile_patterns(pattern_defs: list[dict]) -> list[SecurityPattern]:
    compiled = []
    for pattern_def in pattern_defs:
        flags = re.IGNORECASE if "i" in pattern_def.get("flags", "") else 0
        compiled.append(
            SecurityPattern(
                regex=re.compile(pattern_def["pattern"], flags),
                type=pattern_def["type"],
                severity=Severity(pattern_def["severity"]),
                message=pattern_def["message"],
            )
        )
    return compiled


PATTERNS = _compile_patterns(SECURITY_PATTERNS)


def scan_security(
    code: str,
    filename: Optional[str] = None,
    language: Optional[str] = None,
) -> SecurityReport:
    """Run every security pattern over ``code`` and collect deduplicated findings.

    The whole text is scanned, so callers pass only the new content they want
    checked. Findings are keyed by (type, line): a second match of the same
    type on the same line is dropped even if it is a distinct occurrence.
    """
    lines = code.split("\n")
    findings: list[SecurityFinding] = []
    seen: set[tuple[str, int]] = set()

    for pattern in PATTERNS:
        for match in pattern.regex.finditer(code):
            line_no = code.count("\n", 0, match.start()) + 1
            key = (pattern.type, line_no)
            if key in seen:
                continue
            seen.add(key)
            findings.append(
                SecurityFinding(
                    severity=pattern.severity,
                    type=pattern.type,
                    message=pattern.message,
                    file=filename,
                    line=line_no,
                    snippet=lines[line_no - 1].strip()[:SNIPPET_MAX_CHARS],
                )
            )

    report = SecurityReport(findings=findings)
    logger.debug(
        "Security scan of %s (%s): %d findings, overall %s",
        filename or "<snippet>",
        language or "any language",
        len(findings),
        report.overall,
    )
    return report
