import pytest

from vibecheck.ai_detector import addition_ratio, detect_ai_generated, risk_level_for
from vibecheck.models import RiskLevel


def make_diff(added, path="src/feature.ts", removed=(), start=1):
    """Build a one-hunk git diff adding ``added`` lines after removing ``removed``."""
    lines = [
        f"diff --git a/{path} b/{path}",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -{start},{len(removed)} +{start},{len(added)} @@",
    ]
    lines += [f"-{line}" for line in removed]
    lines += [f"+{line}" for line in added]
    return "\n".join(lines) + "\n"


def plain_lines(count):
    return [f"const value{i} = {i};" for i in range(count)]


def test_large_single_commit_addition():
    """Test a big pure-addition diff in one commit trips ratio and single-commit signals."""
    report = detect_ai_generated(make_diff(plain_lines(250)), commit_count=1)

    assert report.signals == [
        "High addition ratio (10:1) - typical of AI-generated code",
        "250 lines added in single commit",
    ]
    assert report.confidence == pytest.approx(0.45)
    assert report.confidence >= 0.45
    assert report.risk_level in (RiskLevel.MEDIUM, RiskLevel.HIGH)


def test_single_commit_signal_needs_more_than_200_additions():
    """Test 150 added lines only trip the ratio signal."""
    report = detect_ai_generated(make_diff(plain_lines(150)))

    assert report.signals == ["High addition ratio (10:1) - typical of AI-generated code"]
    assert report.confidence == pytest.approx(0.25)
    assert report.risk_level == RiskLevel.LOW


def test_multiple_commits_drop_single_commit_signal():
    """Test the single-commit signal only applies to one-commit PRs."""
    report = detect_ai_generated(make_diff(plain_lines(250)), commit_count=3)

    assert report.confidence == pytest.approx(0.25)
    assert not any("single commit" in s for s in report.signals)


def test_balanced_diff_has_no_ratio_signal():
    """Test a rewrite with many deletions is not a pure-addition pattern."""
    report = detect_ai_generated(make_diff(plain_lines(120), removed=plain_lines(100)))

    assert report.signals == []
    assert report.confidence == 0.0
    assert report.risk_level == RiskLevel.NONE


def test_empty_diff():
    """Test an empty diff scores zero."""
    report = detect_ai_generated("")

    assert report.to_dict() == {
        "confidence": 0.0,
        "riskLevel": "none",
        "signals": [],
        "sections": [],
        "vibeTranslation": "looks hand-crafted ✋",
    }


def test_block_with_step_comments_is_flagged():
    """Test a long addition run with numbered steps becomes a flagged section."""
    added = ["// Step 1: load the data"] + plain_lines(38) + ["// Step 2: save it"]

    report = detect_ai_generated(make_diff(added, start=5))

    assert [s.to_dict() for s in report.sections] == [
        {
            "file": "src/feature.ts",
            "startLine": 5,
            "endLine": 45,
            "reason": "numbered step comments",
        }
    ]
    assert report.confidence == pytest.approx(0.15)
    assert report.risk_level == RiskLevel.NONE


def test_block_with_explanatory_comments_is_flagged():
    """Test explanatory comments flag a block."""
    comments = [f"// This helper does thing {i}" for i in range(4)]
    report = detect_ai_generated(make_diff(comments + plain_lines(30)))

    assert len(report.sections) == 1
    assert report.sections[0].reason == "verbose explanatory comments"


def test_single_explanatory_comment_flags_block():
    report = detect_ai_generated(make_diff(["// This helper loads the config"] + plain_lines(34)))

    assert [s.to_dict() for s in report.sections] == [
        {
            "file": "src/feature.ts",
            "startLine": 1,
            "endLine": 36,
            "reason": "verbose explanatory comments",
        }
    ]
    assert report.confidence == pytest.approx(0.15)


def test_form_feed_does_not_split_addition_run():
    """Test a form feed inside an added line keeps the run intact."""
    added = ["// Step 1: load"] + plain_lines(18) + ["\x0c"] + plain_lines(20)

    sections = detect_ai_generated(make_diff(added)).sections

    assert len(sections) == 1
    assert sections[0].start_line == 1
    assert sections[0].end_line == 41


def test_hash_comments_count_in_python_files():
    """Test ``#`` comments feed the comment signals for Python sources."""
    added = [f"# The value {i} is cached" for i in range(6)]

    report = detect_ai_generated(make_diff(added, path="src/cache.py"))

    assert report.signals == ["6 verbose explanatory comments"]
    assert report.confidence == pytest.approx(0.15)


def test_markdown_headings_are_not_comments():
    """Test ``#`` headings in Markdown do not count as comments."""
    added = [f"# The API part {i}" for i in range(6)] + [f"## Step {i}, install" for i in range(3)]

    report = detect_ai_generated(make_diff(added, path="README.md"))

    assert report.signals == []
    assert report.confidence == 0.0


def test_hash_comment_block_in_python_file():
    added = ["# We retry until the queue drains"] + plain_lines(34)

    report = detect_ai_generated(make_diff(added, path="worker.py"))

    assert len(report.sections) == 1
    assert report.sections[0].reason == "verbose explanatory comments"

    ts_report = detect_ai_generated(make_diff(added, path="worker.ts"))
    assert ts_report.sections == []


def test_block_with_consistent_docs_is_flagged():
    """Test every function carrying a doc block flags the run."""
    added = []
    for i in range(4):
        added += [
            "/**",
            f" * Does step number {i}.",
            " */",
            f"function helper{i}(x) {{",
            "  return x;",
            "}",
        ]
    added += plain_lines(10)

    report = detect_ai_generated(make_diff(added))

    assert len(report.sections) == 1
    assert report.sections[0].reason == "unusually consistent documentation style"


def test_short_runs_are_not_flagged():
    """Test a context line splits additions into runs too short to inspect."""
    first = ["// Step 1: start"] + plain_lines(19)
    second = ["// Step 2: finish"] + plain_lines(19)
    diff = "\n".join(
        [
            "diff --git a/src/a.ts b/src/a.ts",
            "--- a/src/a.ts",
            "+++ b/src/a.ts",
            "@@ -1,1 +1,41 @@",
            *[f"+{line}" for line in first],
            " unchanged",
            *[f"+{line}" for line in second],
        ]
    )

    assert detect_ai_generated(diff).sections == []


def test_run_continues_across_hunks():
    """Test a hunk header alone does not end an addition run."""
    first = ["// Step 1: start"] + plain_lines(19)
    second = plain_lines(20)
    diff = "\n".join(
        [
            "diff --git a/src/a.ts b/src/a.ts",
            "--- a/src/a.ts",
            "+++ b/src/a.ts",
            "@@ -1,0 +1,20 @@",
            *[f"+{line}" for line in first],
            "@@ -40,0 +60,20 @@",
            *[f"+{line}" for line in second],
        ]
    )

    sections = detect_ai_generated(diff).sections
    assert len(sections) == 1
    assert sections[0].start_line == 1
    assert sections[0].end_line == 41


def test_confidence_is_monotonic_and_bounded():
    """Test adding qualifying signals never lowers the score and it stays within [0, 1]."""
    stages = [plain_lines(250)]
    stages.append(stages[-1] + [f"// Here we go {i}" for i in range(6)])
    stages.append(stages[-1] + [f"// Then, move on {i}" for i in range(3)])
    stages.append(stages[-1] + [f"function handleClick{i}() {{}}" for i in range(6)])
    stages.append(stages[-1] + [f"// TODO: implement part {i}" for i in range(3)])
    stages.append(stages[-1] + ["// Step 1 of the plan"])

    scores = [detect_ai_generated(make_diff(lines)).confidence for lines in stages]

    assert scores == sorted(scores)
    assert all(0.0 <= score <= 1.0 for score in scores)
    assert scores[0] == pytest.approx(0.45)
    assert scores[-1] == 1.0


def test_all_signals_reach_high_risk():
    """Test a diff hitting every signal is high risk with every signal listed."""
    added = (
        plain_lines(250)
        + [f"// Here we go {i}" for i in range(6)]
        + [f"// Step {i}, do work" for i in range(3)]
        + [f"def handle_event_{i}(payload):" for i in range(6)]
        + [f"# TODO: add case {i}" for i in range(3)]
    )

    report = detect_ai_generated(make_diff(added))

    assert report.risk_level == RiskLevel.HIGH
    assert len(report.signals) == 6
    assert report.vibe_translation == "giving 'let Claude cook unsupervised' energy 🤖"


def test_detection_is_deterministic():
    """Test identical input yields identical output."""
    diff = make_diff(plain_lines(240) + ["// Step 1: go"])

    assert detect_ai_generated(diff).to_json() == detect_ai_generated(diff).to_json()


@pytest.mark.parametrize(
    "additions,deletions,expected",
    [(60, 0, 10.0), (10, 0, 1.0), (120, 20, 6.0), (0, 0, 1.0)],
)
def test_addition_ratio(additions, deletions, expected):
    assert addition_ratio(additions, deletions) == expected


@pytest.mark.parametrize(
    "confidence,expected",
    [
        (1.0, RiskLevel.HIGH),
        (0.71, RiskLevel.HIGH),
        (0.7, RiskLevel.MEDIUM),
        (0.45, RiskLevel.MEDIUM),
        (0.4, RiskLevel.LOW),
        (0.25, RiskLevel.LOW),
        (0.2, RiskLevel.NONE),
        (0.0, RiskLevel.NONE),
    ],
)
def test_risk_buckets(confidence, expected):
    assert risk_level_for(confidence) == expected
