"""Heuristic pull-request analyzers: security, AI-generated code, complexity, test coverage."""

from vibecheck.ai_detector import detect_ai_generated
from vibecheck.complexity import analyze_complexity
from vibecheck.coverage import map_test_coverage
from vibecheck.diff_parser import parse_diff
from vibecheck.security import scan_security

__all__ = [
    "analyze_complexity",
    "detect_ai_generated",
    "map_test_coverage",
    "parse_diff",
    "scan_security",
]
