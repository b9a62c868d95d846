"""Complexity metrics for function-like blocks in raw code.

Extraction is textual. ``BraceProfile`` counts braces line by line and does
not know about strings or comments, so a brace inside a literal shifts the
body boundary. ``PythonProfile`` uses indentation instead. Both implement
``LanguageProfile`` so callers only ever go through ``analyze_complexity``.
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Optional

from vibecheck.config import HOTSPOT_THRESHOLDS, METHOD_KEYWORD_EXCLUSIONS
from vibecheck.models import (
    ComplexityMetrics,
    ComplexityReport,
    FunctionInfo,
    Hotspot,
    Severity,
)

logger = logging.getLogger(__name__)


class LanguageProfile(ABC):
    """Function extraction and per-function metrics for one family of languages."""

    name = "generic"

    @abstractmethod
    def extract_functions(self, code: str) -> list[FunctionInfo]:
        """Return every function-like block found in ``code``."""

    @abstractmethod
    def cyclomatic_complexity(self, body: str) -> int:
        """Return 1 plus the number of decision points in ``body``."""

    @abstractmethod
    def max_nesting(self, body: str) -> int:
        """Return the deepest control-block nesting observed in ``body``."""


# ── Brace Languages (JS/TS/Java/C-like) ──────────────────────────────────────


class BraceProfile(LanguageProfile):
    name = "brace"

    _FUNCTION_DECL = re.compile(r"(?:async\s+)?function\s+(\w+)\s*\(")
    _ARROW_DECL = re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>")
    _METHOD_DECL = re.compile(r"^\s*(?:async\s+)?(\w+)\s*\([^)]*\)\s*\{")

    _DECISION_POINTS = [
        re.compile(r"\bif\s*\("),
        re.compile(r"\belse\s+if\s*\("),
        re.compile(r"\bfor\s*\("),
        re.compile(r"\bwhile\s*\("),
        re.compile(r"\bcase\s+"),
        re.compile(r"\bcatch\s*\("),
        re.compile(r"\?\s*[^:]"),  # ternary
        re.compile(r"&&"),
        re.compile(r"\|\|"),
        re.compile(r"\?\?"),  # nullish coalescing
    ]

    _BLOCK_OPEN = re.compile(r"\b(?:if|for|while|switch|try)\s*\(")
    _ELSE_OPEN = re.compile(r"\belse\s*\{")

    def declaration_name(self, line: str) -> Optional[str]:
        func_match = self._FUNCTION_DECL.search(line)
        if func_match:
            return func_match.group(1)
        arrow_match = self._ARROW_DECL.search(line)
        if arrow_match:
            return arrow_match.group(1)
        method_match = self._METHOD_DECL.search(line)
        if method_match and method_match.group(1) not in METHOD_KEYWORD_EXCLUSIONS:
            return method_match.group(1)
        return None

    def extract_functions(self, code: str) -> list[FunctionInfo]:
        functions: list[FunctionInfo] = []
        lines = code.split("\n")

        for i, line in enumerate(lines):
            func_name = self.declaration_name(line)
            if not func_name or "{" not in line:
                continue

            depth = 0
            started = False
            body_lines: list[str] = []
            for current in lines[i:]:
                body_lines.append(current)
                for char in current:
                    if char == "{":
                        depth += 1
                        started = True
                    elif char == "}":
                        depth -= 1
                if started and depth == 0:
                    break

            functions.append(
                FunctionInfo(name=func_name, body="\n".join(body_lines), start_line=i + 1)
            )

        return functions

    def cyclomatic_complexity(self, body: str) -> int:
        return 1 + sum(len(p.findall(body)) for p in self._DECISION_POINTS)

    def max_nesting(self, body: str) -> int:
        max_depth = 0
        depth = 0
        for line in body.split("\n"):
            if self._BLOCK_OPEN.search(line) and "{" in line:
                depth += 1
                max_depth = max(max_depth, depth)
            elif self._ELSE_OPEN.search(line):
                pass  # else stays at the same level
            elif line.strip() == "}":
                depth = max(0, depth - 1)
        return max_depth


# ── Python ───────────────────────────────────────────────────────────────────


class PythonProfile(LanguageProfile):
    name = "python"

    _DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\(")
    _DECISION_POINTS = re.compile(r"\b(?:if|elif|for|while|except|and|or)\b|^\s*case\b", re.MULTILINE)
    _BLOCK_OPEN = re.compile(
        r"^\s*(?:async\s+)?(?:if|elif|else|for|while|with|try|except|finally|match)\b.*:\s*(?:#.*)?$"
    )

    @staticmethod
    def _indent(line: str) -> int:
        return len(line) - len(line.lstrip())

    def extract_functions(self, code: str) -> list[FunctionInfo]:
        functions: list[FunctionInfo] = []
        lines = code.split("\n")

        for i, line in enumerate(lines):
            def_match = self._DEF.match(line)
            if not def_match:
                continue
            def_indent = len(def_match.group(1))

            # Signature may span lines; the body starts after the parens close
            sig_end = i
            balance = 0
            for j in range(i, len(lines)):
                balance += lines[j].count("(") - lines[j].count(")")
                sig_end = j
                if balance <= 0:
                    break

            last = sig_end
            for j in range(sig_end + 1, len(lines)):
                if not lines[j].strip():
                    continue
                if self._indent(lines[j]) <= def_indent:
                    break
                last = j

            functions.append(
                FunctionInfo(
                    name=def_match.group(2),
                    body="\n".join(lines[i : last + 1]),
                    start_line=i + 1,
                )
            )

        return functions

    def cyclomatic_complexity(self, body: str) -> int:
        return 1 + len(self._DECISION_POINTS.findall(body))

    def max_nesting(self, body: str) -> int:
        max_depth = 0
        open_blocks: list[int] = []
        for line in body.split("\n"):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            indent = self._indent(line)
            while open_blocks and open_blocks[-1] >= indent:
                open_blocks.pop()
            if self._BLOCK_OPEN.match(line):
                open_blocks.append(indent)
                max_depth = max(max_depth, len(open_blocks))
        return max_depth


PROFILES: dict[str, LanguageProfile] = {
    ".py": PythonProfile(),
    ".pyi": PythonProfile(),
}
DEFAULT_PROFILE: LanguageProfile = BraceProfile()


def profile_for(filename: Optional[str]) -> LanguageProfile:
    """Pick the extraction profile from the file extension."""
    if filename:
        for suffix, profile in PROFILES.items():
            if filename.lower().endswith(suffix):
                return profile
    return DEFAULT_PROFILE


# ── Scoring ──────────────────────────────────────────────────────────────────


def hotspot_severity(cyclomatic: int, nesting: int, length: int) -> Optional[Severity]:
    for severity, max_cyclomatic, max_nesting, max_length in HOTSPOT_THRESHOLDS:
        if cyclomatic > max_cyclomatic or nesting > max_nesting or length > max_length:
            return Severity(severity)
    return None


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def analyze_complexity(
    code: str,
    filename: Optional[str] = None,
    profile: Optional[LanguageProfile] = None,
) -> ComplexityReport:
    """Extract functions from ``code`` and compute metrics and hotspots."""
    profile = profile or profile_for(filename)
    functions = profile.extract_functions(code)
    if not functions:
        logger.debug("No functions found in %s", filename or "<snippet>")
        return ComplexityReport()

    total_cyclomatic = 0
    total_length = 0
    max_nesting = 0
    hotspots: list[Hotspot] = []

    for func in functions:
        cyclomatic = profile.cyclomatic_complexity(func.body)
        nesting = profile.max_nesting(func.body)
        length = func.length

        total_cyclomatic += cyclomatic
        total_length += length
        max_nesting = max(max_nesting, nesting)

        severity = hotspot_severity(cyclomatic, nesting, length)
        if severity:
            hotspots.append(
                Hotspot(
                    file=filename or "unknown",
                    function=func.name,
                    complexity=cyclomatic,
                    severity=severity,
                    line=func.start_line,
                )
            )

    count = len(functions)
    logger.debug(
        "Complexity of %s (%s profile): %d functions, %d hotspots",
        filename or "<snippet>",
        profile.name,
        count,
        len(hotspots),
    )
    return ComplexityReport(
        metrics=ComplexityMetrics(
            avg_cyclomatic=_round_half_up(total_cyclomatic / count, 1),
            max_nesting=max_nesting,
            avg_function_length=int(_round_half_up(total_length / count)),
        ),
        hotspots=hotspots,
        function_count=count,
    )
