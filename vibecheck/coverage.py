"""Test coverage mapping: which changed source files have tests alongside them."""

from __future__ import annotations

import logging
import posixpath
import re

from vibecheck.config import (
    SOURCE_EXCLUDE_PATTERNS,
    SOURCE_EXTENSIONS,
    TEST_FILE_PATTERNS,
    UNCOVERED_ALARM_THRESHOLD,
)
from vibecheck.diff_parser import parse_diff
from vibecheck.models import CoverageReport

logger = logging.getLogger(__name__)

_TEST_FILE = [re.compile(p) for p in TEST_FILE_PATTERNS]
_SOURCE_EXTENSION = re.compile(rf"\.{SOURCE_EXTENSIONS}$")
_SOURCE_EXCLUDE = [re.compile(p) for p in SOURCE_EXCLUDE_PATTERNS]


# ── Classification ───────────────────────────────────────────────────────────


def is_test_file(path: str) -> bool:
    """Check if a file path follows a test naming convention."""
    return any(p.search(path) for p in _TEST_FILE)


def is_source_file(path: str) -> bool:
    """Check if a path is a source file worth having tests for."""
    if is_test_file(path) or not _SOURCE_EXTENSION.search(path):
        return False
    return not any(p.search(path) for p in _SOURCE_EXCLUDE)


def base_name(path: str) -> str:
    """File name without directory and last extension: ``src/foo.ts`` -> ``foo``."""
    return posixpath.splitext(posixpath.basename(path))[0]


def _same_name_test_patterns(name: str) -> list[re.Pattern]:
    name = re.escape(name)
    return [
        re.compile(rf"(?:^|/){name}(?:\.test|\.spec|_test)\.{SOURCE_EXTENSIONS}$"),
        re.compile(rf"(?:^|/)test_{name}\.{SOURCE_EXTENSIONS}$"),
        re.compile(rf"(?:^|/)__tests__/(?:.*/)?{name}\.{SOURCE_EXTENSIONS}$"),
    ]


# ── Mapping ──────────────────────────────────────────────────────────────────


def collect_test_diff_text(diff_text: str) -> str:
    """Concatenate the raw text of every diff chunk that touches a test file."""
    chunks = [
        diff_file.text
        for diff_file in parse_diff(diff_text)
        if any(is_test_file(p) for p in (diff_file.old_path, diff_file.new_path) if p)
    ]
    return "\n".join(chunks)


def has_corresponding_test(source_file: str, changed_files: list[str], test_content: str) -> bool:
    """Check for a same-name test among the changed files, then for a mention in test diffs.

    The mention check is a plain substring search of the lower-cased base
    name, so short names like ``a`` match almost anything.
    """
    name = base_name(source_file)
    patterns = _same_name_test_patterns(name)
    if any(p.search(f) for f in changed_files for p in patterns):
        return True
    return bool(name) and name.lower() in test_content.lower()


def map_test_coverage(changed_files: list[str], diff_text: str) -> CoverageReport:
    """Classify changed files into covered, uncovered and new test files."""
    # Keep input order, drop duplicates
    files = list(dict.fromkeys(changed_files))
    test_files = [f for f in files if is_test_file(f)]
    source_files = [f for f in files if is_source_file(f)]
    test_content = collect_test_diff_text(diff_text)

    report = CoverageReport(
        source_files=source_files,
        new_tests=test_files,
        uncovered_alarm_threshold=UNCOVERED_ALARM_THRESHOLD,
    )
    for source_file in source_files:
        if has_corresponding_test(source_file, files, test_content):
            report.covered.append(source_file)
        else:
            report.uncovered.append(source_file)

    logger.debug(
        "Coverage: %d source files, %d covered, %d uncovered, %d test files",
        len(source_files),
        len(report.covered),
        len(report.uncovered),
        len(test_files),
    )
    return report
