"""MCP tool definitions for the vibecheck analyzers."""

from __future__ import annotations

import json
import logging
import traceback
from typing import Annotated, Optional

from fastmcp import FastMCP
from pydantic import Field

from vibecheck.ai_detector import detect_ai_generated
from vibecheck.complexity import analyze_complexity
from vibecheck.config import CHECK_TOOLS, DEFAULT_CHECKS
from vibecheck.coverage import map_test_coverage
from vibecheck.security import scan_security

logger = logging.getLogger(__name__)


def _error_response(tool_name: str, error: Exception) -> str:
    """Build a structured JSON error response for MCP tool failures."""
    logger.error("Tool %s failed: %s\n%s", tool_name, error, traceback.format_exc())
    return json.dumps(
        {
            "tool": tool_name,
            "summary": f"Tool '{tool_name}' failed: {error}",
            "error": str(error),
        },
        indent=2,
    )


def normalize_checks(checks: Optional[list[str]]) -> list[str]:
    """Lower-case and trim check names, dropping unknown ones."""
    if checks is None:
        return list(DEFAULT_CHECKS)
    enabled: list[str] = []
    for check in checks:
        name = check.strip().lower()
        if name not in CHECK_TOOLS:
            logger.warning("Ignoring unknown check %r", check)
            continue
        if name not in enabled:
            enabled.append(name)
    return enabled


def _register_security(mcp: FastMCP) -> None:
    @mcp.tool()
    def security_scan(
        code: str,
        filename: Optional[str] = None,
        language: Optional[str] = None,
    ) -> str:
        """Scan code for security vulnerabilities.

        Covers hardcoded secrets and API keys (AWS, Stripe, GitHub tokens),
        SQL injection patterns, XSS sinks (innerHTML, dangerouslySetInnerHTML),
        command injection, unsafe eval, weak cryptography, weak randomness and
        authentication bypass patterns.

        Returns findings with severity (high/medium/low), type, line and code
        snippet, plus a severity summary.

        Args:
            code: Code snippet or added diff content to analyze
            filename: Optional file path for context
            language: Optional programming language
        """
        try:
            report = scan_security(code, filename=filename, language=language)
            logger.info("security_scan: %d findings", len(report.findings))
            return report.to_json()
        except Exception as e:
            return _error_response("security_scan", e)


def _register_ai_detection(mcp: FastMCP) -> None:
    @mcp.tool()
    def ai_slop_detector(
        diff: str,
        commit_count: Annotated[int, Field(ge=1, description="Number of commits in the PR")] = 1,
    ) -> str:
        """Analyze a diff for signs it may be AI-generated and accepted without review.

        Looks for large code blocks added in a single commit, verbose
        explanatory comments ("This function...", "First, we..."), numbered
        step comments, generic function names (handleX, processY), placeholder
        TODOs and unusually consistent documentation.

        Returns a confidence score (0-1), risk level, the signals found and
        flagged code sections. Meant to point at code that deserves a closer
        look, not to judge AI-assisted coding.

        Args:
            diff: Unified diff to analyze
            commit_count: Number of commits in the pull request
        """
        try:
            report = detect_ai_generated(diff, commit_count=commit_count)
            logger.info(
                "ai_slop_detector: confidence %.2f (%s)", report.confidence, report.risk_level
            )
            return report.to_json()
        except Exception as e:
            return _error_response("ai_slop_detector", e)


def _register_tests(mcp: FastMCP) -> None:
    @mcp.tool()
    def test_coverage_check(changed_files: list[str], diff: str) -> str:
        """Analyze which changed source files have corresponding tests.

        Checks for test files matching source file names (*.test.ts,
        *.spec.ts, *_test.py, test_*.py, __tests__/), newly added test files,
        and references to source files inside test file diffs.

        Returns lists of covered files, uncovered files and newly added tests.

        Args:
            changed_files: Changed file paths in the pull request
            diff: The pull request diff
        """
        try:
            report = map_test_coverage(changed_files, diff)
            logger.info(
                "test_coverage_check: %d covered, %d uncovered",
                len(report.covered),
                len(report.uncovered),
            )
            return report.to_json()
        except Exception as e:
            return _error_response("test_coverage_check", e)


def _register_complexity(mcp: FastMCP) -> None:
    @mcp.tool()
    def complexity_analyzer(code: str, filename: Optional[str] = None) -> str:
        """Measure complexity metrics for the functions in the provided code.

        Computes cyclomatic complexity (if, for, while, case, &&, ||, ?:),
        maximum nesting depth and function length, and flags hotspots:
        - High: cyclomatic > 15, nesting > 5, or length > 100 lines
        - Medium: cyclomatic > 10, nesting > 4, or length > 50 lines
        - Low: cyclomatic > 7, nesting > 3, or length > 30 lines

        Args:
            code: Code to analyze
            filename: Optional file path; ``.py`` files are read by indentation
        """
        try:
            report = analyze_complexity(code, filename=filename)
            logger.info(
                "complexity_analyzer: %d functions, %d hotspots",
                report.function_count,
                len(report.hotspots),
            )
            return report.to_json()
        except Exception as e:
            return _error_response("complexity_analyzer", e)


_REGISTRARS = {
    "security": _register_security,
    "ai-detection": _register_ai_detection,
    "tests": _register_tests,
    "complexity": _register_complexity,
}


def register_tools(mcp: FastMCP, checks: Optional[list[str]] = None) -> list[str]:
    """Register the tools for every enabled check; return the tool names."""
    enabled = normalize_checks(checks)
    for check in enabled:
        _REGISTRARS[check](mcp)
    tool_names = [CHECK_TOOLS[check] for check in enabled]
    logger.info("Enabled tools: %s", ", ".join(tool_names) or "none")
    return tool_names
