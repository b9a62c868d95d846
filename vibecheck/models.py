"""Result models for the vibecheck analyzers.

Every report serializes to the camelCase JSON shape the MCP tools return.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    """Severity levels shared by security findings and complexity hotspots."""

    HIGH = "high"  # Must look at before merge
    MEDIUM = "medium"
    LOW = "low"

    def __str__(self) -> str:
        return self.value


class RiskLevel(str, Enum):
    """Discrete bucket for the AI-generated-code confidence score."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value


class _JsonReport(ABC):
    @abstractmethod
    def to_dict(self) -> dict:
        ...

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ── Security ─────────────────────────────────────────────────────────────────


@dataclass
class SecurityFinding:
    """A single match of a security pattern."""

    severity: Severity
    type: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None
    snippet: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "severity": str(self.severity),
            "type": self.type,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "snippet": self.snippet,
        }
        # Drop None values for cleaner output
        return {k: v for k, v in d.items() if v is not None}


@dataclass
class SecurityReport(_JsonReport):
    """Deduplicated findings of one security scan."""

    findings: list[SecurityFinding] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def high_count(self) -> int:
        return self.count(Severity.HIGH)

    @property
    def medium_count(self) -> int:
        return self.count(Severity.MEDIUM)

    @property
    def low_count(self) -> int:
        return self.count(Severity.LOW)

    @property
    def overall(self) -> str:
        """Worst severity present, or ``clean``."""
        for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
            if self.count(severity) > 0:
                return str(severity)
        return "clean"

    @property
    def vibe_translation(self) -> str:
        high, medium = self.high_count, self.medium_count
        if high > 0:
            return f"🔴 {high} critical issue{'s' if high > 1 else ''} found - needs attention before merge"
        if medium > 0:
            return f"🟡 {medium} thing{'s' if medium > 1 else ''} to review"
        if self.low_count > 0:
            return "🟢 Minor observations only"
        return "✨ Looking clean!"

    def to_dict(self) -> dict:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "summary": {
                "high": self.high_count,
                "medium": self.medium_count,
                "low": self.low_count,
                "total": len(self.findings),
            },
            "vibeTranslation": self.vibe_translation,
        }


# ── AI Detection ─────────────────────────────────────────────────────────────


@dataclass
class FlaggedSection:
    """A long run of added lines that looks machine-written."""

    file: str
    start_line: int
    end_line: int
    reason: str

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "reason": self.reason,
        }


@dataclass
class AIDetectionReport(_JsonReport):
    confidence: float = 0.0
    risk_level: RiskLevel = RiskLevel.NONE
    signals: list[str] = field(default_factory=list)
    sections: list[FlaggedSection] = field(default_factory=list)

    @property
    def vibe_translation(self) -> str:
        return {
            RiskLevel.HIGH: "giving 'let Claude cook unsupervised' energy 🤖",
            RiskLevel.MEDIUM: "AI ghostwriter detected - might want to double-check 👀",
            RiskLevel.LOW: "some AI vibes but mostly human",
            RiskLevel.NONE: "looks hand-crafted ✋",
        }[self.risk_level]

    def to_dict(self) -> dict:
        return {
            "confidence": self.confidence,
            "riskLevel": str(self.risk_level),
            "signals": list(self.signals),
            "sections": [s.to_dict() for s in self.sections],
            "vibeTranslation": self.vibe_translation,
        }


# ── Complexity ───────────────────────────────────────────────────────────────


@dataclass
class FunctionInfo:
    """A function-like block extracted from raw code."""

    name: str
    body: str
    start_line: int

    @property
    def length(self) -> int:
        return len(self.body.split("\n"))


@dataclass
class Hotspot:
    file: str
    function: str
    complexity: int
    severity: Severity
    line: Optional[int] = None

    def to_dict(self) -> dict:
        d = {
            "file": self.file,
            "function": self.function,
            "complexity": self.complexity,
            "severity": str(self.severity),
        }
        if self.line is not None:
            d["line"] = self.line
        return d


@dataclass
class ComplexityMetrics:
    avg_cyclomatic: float = 0.0
    max_nesting: int = 0
    avg_function_length: int = 0

    def to_dict(self) -> dict:
        return {
            "avgCyclomatic": self.avg_cyclomatic,
            "maxNesting": self.max_nesting,
            "avgFunctionLength": self.avg_function_length,
        }


@dataclass
class ComplexityReport(_JsonReport):
    """Aggregate metrics and hotspots for one code snippet."""

    metrics: ComplexityMetrics = field(default_factory=ComplexityMetrics)
    hotspots: list[Hotspot] = field(default_factory=list)
    function_count: int = 0

    @property
    def vibe_translation(self) -> str:
        if self.function_count == 0:
            return "no functions to analyze"
        high = sum(1 for h in self.hotspots if h.severity == Severity.HIGH)
        medium = sum(1 for h in self.hotspots if h.severity == Severity.MEDIUM)
        if high > 0:
            return f"🌶️ getting spicy - {high} complex function{'s' if high > 1 else ''} detected"
        if medium > 0:
            return "couple of tangled bits, but manageable"
        if self.hotspots:
            return "minor complexity - nothing scary"
        return "clean and readable 📖"

    def to_dict(self) -> dict:
        return {
            "metrics": self.metrics.to_dict(),
            "hotspots": [h.to_dict() for h in self.hotspots],
            "functionCount": self.function_count,
            "vibeTranslation": self.vibe_translation,
        }


# ── Test Coverage ────────────────────────────────────────────────────────────


@dataclass
class CoverageReport(_JsonReport):
    source_files: list[str] = field(default_factory=list)
    covered: list[str] = field(default_factory=list)
    uncovered: list[str] = field(default_factory=list)
    new_tests: list[str] = field(default_factory=list)
    uncovered_alarm_threshold: int = 5

    @property
    def vibe_translation(self) -> str:
        uncovered = len(self.uncovered)
        plural = "s" if uncovered > 1 else ""
        if uncovered == 0 and self.source_files:
            return "tests looking solid 💪"
        if self.new_tests and uncovered > 0:
            return f"tests added, but {uncovered} file{plural} still uncovered"
        if uncovered > self.uncovered_alarm_threshold:
            return f"we need to talk about tests... {uncovered} files with no coverage 😅"
        if uncovered > 0:
            return f"{uncovered} file{plural} could use tests"
        return "no source files to test"

    def to_dict(self) -> dict:
        return {
            "covered": list(self.covered),
            "uncovered": list(self.uncovered),
            "newTests": list(self.new_tests),
            "summary": {
                "sourceFiles": len(self.source_files),
                "coveredCount": len(self.covered),
                "uncoveredCount": len(self.uncovered),
                "newTestCount": len(self.new_tests),
            },
            "vibeTranslation": self.vibe_translation,
        }
