"""Heuristic detection of AI-generated code in a diff.

The score is an explainable linear model: each whole-diff signal that fires
adds a fixed weight from ``config.AI_SIGNAL_WEIGHTS`` and the total is capped
at 1.0. Long runs of added lines are also inspected on their own; any flagged
run adds the ``flagged_blocks`` weight once.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Optional

from vibecheck.config import (
    ADDITION_BLOCK_MIN_LINES,
    ADDITION_RATIO_MIN_ADDS,
    ADDITION_RATIO_MIN_RATIO,
    ADDITION_RATIO_NO_DELETION_ADDS,
    ADDITION_RATIO_NO_DELETION_VALUE,
    AI_GENERIC_NAME_PATTERN,
    AI_RISK_LEVELS,
    AI_SIGNAL_WEIGHTS,
    AI_STEP_COMMENT_PATTERN,
    AI_TODO_PLACEHOLDER_PATTERN,
    AI_VERBOSE_COMMENT_PATTERN,
    BLOCK_FUNCTION_THRESHOLD,
    GENERIC_NAME_THRESHOLD,
    HASH_COMMENT_EXTENSIONS,
    SINGLE_COMMIT_MIN_ADDS,
    STEP_COMMENT_THRESHOLD,
    TODO_PLACEHOLDER_THRESHOLD,
    VERBOSE_COMMENT_THRESHOLD,
)
from vibecheck.diff_parser import ChangeKind, DiffDocument, FileDiff, diff_stats, parse_diff
from vibecheck.models import AIDetectionReport, FlaggedSection, RiskLevel

logger = logging.getLogger(__name__)

_GENERIC_NAME = re.compile(AI_GENERIC_NAME_PATTERN)
_TODO_PLACEHOLDER = re.compile(AI_TODO_PLACEHOLDER_PATTERN, re.IGNORECASE)


def _comment_patterns(body: str, flags: int = 0) -> dict[bool, re.Pattern]:
    """Compile ``body`` behind a comment marker, keyed by whether ``#`` counts."""
    return {
        False: re.compile(r"//" + body, flags),
        True: re.compile(r"(?://|#)" + body, flags),
    }


_VERBOSE_COMMENT = _comment_patterns(AI_VERBOSE_COMMENT_PATTERN)
_STEP_COMMENT = _comment_patterns(AI_STEP_COMMENT_PATTERN, re.IGNORECASE)

# Block-level patterns
_BLOCK_EXPLANATORY_COMMENT = _comment_patterns(r"\s*(?:This|The|We)\s+\w+")
_BLOCK_NUMBERED_STEP = _comment_patterns(r"\s*Step \d", re.IGNORECASE)
_BLOCK_FUNCTION_LIKE = re.compile(r"function|const\s+\w+\s*=\s*(?:async\s*)?\(|=>\s*\{")
_BLOCK_DOC_COMMENT = re.compile(r"/\*\*[\s\S]*?\*/")


def hash_comments(path: str) -> bool:
    """Check if ``#`` starts a comment in files like ``path``."""
    return posixpath.splitext(path)[1].lower() in HASH_COMMENT_EXTENSIONS


def _count_comments(document: DiffDocument, patterns: dict[bool, re.Pattern]) -> int:
    return sum(len(patterns[hash_comments(f.path)].findall(f.text)) for f in document)


# ── Block Analysis ───────────────────────────────────────────────────────────


def analyze_block(lines: list[str], filename: str, start_line: int) -> Optional[FlaggedSection]:
    """Inspect one long run of added lines; return a section if it looks generated."""
    content = "\n".join(lines)
    hashes = hash_comments(filename)
    reasons: list[str] = []

    if _BLOCK_EXPLANATORY_COMMENT[hashes].search(content):
        reasons.append("verbose explanatory comments")
    if _BLOCK_NUMBERED_STEP[hashes].search(content):
        reasons.append("numbered step comments")

    # Every function carrying the same doc block is a tell
    func_count = len(_BLOCK_FUNCTION_LIKE.findall(content))
    if func_count > BLOCK_FUNCTION_THRESHOLD:
        if len(_BLOCK_DOC_COMMENT.findall(content)) >= func_count - 1:
            reasons.append("unusually consistent documentation style")

    if not reasons:
        return None
    return FlaggedSection(
        file=filename,
        start_line=start_line,
        end_line=start_line + len(lines),
        reason=", ".join(reasons),
    )


def find_flagged_sections(diff_file: FileDiff) -> list[FlaggedSection]:
    """Walk a file's changes and analyze every addition run longer than the block minimum."""
    sections: list[FlaggedSection] = []
    block: list[str] = []
    block_start = 0

    def close_block() -> None:
        if len(block) > ADDITION_BLOCK_MIN_LINES:
            section = analyze_block(block, diff_file.path, block_start)
            if section:
                sections.append(section)
        block.clear()

    # Hunk boundaries do not end a run; only a non-addition line does
    for change in diff_file.changes:
        if change.kind == ChangeKind.ADDITION:
            if not block:
                block_start = change.line_number
            block.append(change.text)
        else:
            close_block()
    close_block()

    return sections


# ── Whole-Diff Signals ───────────────────────────────────────────────────────


def addition_ratio(additions: int, deletions: int) -> float:
    if deletions > 0:
        return additions / deletions
    if additions > ADDITION_RATIO_NO_DELETION_ADDS:
        return float(ADDITION_RATIO_NO_DELETION_VALUE)
    return 1.0


def risk_level_for(confidence: float) -> RiskLevel:
    for lower_bound, level in AI_RISK_LEVELS:
        if confidence > lower_bound:
            return RiskLevel(level)
    return RiskLevel.NONE


def detect_ai_generated(diff_text: str, commit_count: int = 1) -> AIDetectionReport:
    """Score a diff for stylistic signals correlated with machine-generated code."""
    document = parse_diff(diff_text)
    stats = diff_stats(document)
    additions = stats["lines_added"]
    deletions = stats["lines_removed"]

    sections: list[FlaggedSection] = []
    for diff_file in document:
        sections.extend(find_flagged_sections(diff_file))

    signals: list[str] = []
    fired: list[str] = []

    ratio = addition_ratio(additions, deletions)
    if ratio > ADDITION_RATIO_MIN_RATIO and additions > ADDITION_RATIO_MIN_ADDS:
        signals.append(
            f"High addition ratio ({int(ratio + 0.5)}:1) - typical of AI-generated code"
        )
        fired.append("addition_ratio")

    if commit_count == 1 and additions > SINGLE_COMMIT_MIN_ADDS:
        signals.append(f"{additions} lines added in single commit")
        fired.append("single_commit")

    verbose_comments = _count_comments(document, _VERBOSE_COMMENT)
    if verbose_comments > VERBOSE_COMMENT_THRESHOLD:
        signals.append(f"{verbose_comments} verbose explanatory comments")
        fired.append("verbose_comments")

    step_comments = _count_comments(document, _STEP_COMMENT)
    if step_comments > STEP_COMMENT_THRESHOLD:
        signals.append(f"{step_comments} step-by-step comments")
        fired.append("step_comments")

    generic_names = len(_GENERIC_NAME.findall(diff_text))
    if generic_names > GENERIC_NAME_THRESHOLD:
        signals.append(f"{generic_names} generic function names (handle*, process*, etc.)")
        fired.append("generic_names")

    todo_placeholders = len(_TODO_PLACEHOLDER.findall(diff_text))
    if todo_placeholders > TODO_PLACEHOLDER_THRESHOLD:
        signals.append(f"{todo_placeholders} placeholder TODOs")
        fired.append("todo_placeholders")

    if sections:
        fired.append("flagged_blocks")

    # Buckets compare the two-decimal score
    confidence = min(round(sum((AI_SIGNAL_WEIGHTS[name] for name in fired), 0.0), 2), 1.0)
    report = AIDetectionReport(
        confidence=confidence,
        risk_level=risk_level_for(confidence),
        signals=signals,
        sections=sections,
    )
    logger.debug(
        "AI detection over %d files (+%d/-%d, %d commits): %s -> %.2f (%s)",
        stats["files_changed"],
        additions,
        deletions,
        commit_count,
        ",".join(fired) or "no signals",
        confidence,
        report.risk_level,
    )
    return report
