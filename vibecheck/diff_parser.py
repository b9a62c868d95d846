"""Diff parsing: unified diff to structured FileDiff/Hunk/LineChange objects."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

_HUNK_HEADER = re.compile(r"^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@(.*)")
_FILE_BOUNDARY = "diff --git"


class ChangeKind(str, Enum):
    """Kind of a single line inside a hunk."""

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"
    MARKER = "marker"  # "\ No newline at end of file"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LineChange:
    """One diff line with its post-change line number."""

    kind: ChangeKind
    text: str
    line_number: int


@dataclass
class Hunk:
    """A single hunk from a unified diff."""

    new_start: int
    old_start: int = 0
    old_count: int = 0
    new_count: int = 0
    header: str = ""
    changes: list[LineChange] = field(default_factory=list)

    @property
    def added_lines(self) -> list[tuple[int, str]]:
        return [
            (c.line_number, c.text) for c in self.changes if c.kind == ChangeKind.ADDITION
        ]

    @property
    def removed_lines(self) -> list[str]:
        return [c.text for c in self.changes if c.kind == ChangeKind.DELETION]


@dataclass
class FileDiff:
    """Parsed diff for a single file."""

    old_path: Optional[str] = None
    new_path: Optional[str] = None
    hunks: list[Hunk] = field(default_factory=list)
    text: str = ""
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False

    @property
    def path(self) -> str:
        return self.new_path or self.old_path or "unknown"

    @property
    def changes(self) -> Iterator[LineChange]:
        for hunk in self.hunks:
            yield from hunk.changes

    @property
    def added_line_count(self) -> int:
        return sum(len(h.added_lines) for h in self.hunks)

    @property
    def removed_line_count(self) -> int:
        return sum(len(h.removed_lines) for h in self.hunks)


@dataclass
class DiffDocument:
    """Ordered collection of parsed file diffs."""

    files: list[FileDiff] = field(default_factory=list)

    def __iter__(self) -> Iterator[FileDiff]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def added_line_count(self) -> int:
        return sum(f.added_line_count for f in self.files)

    @property
    def removed_line_count(self) -> int:
        return sum(f.removed_line_count for f in self.files)


def split_file_chunks(diff_text: str) -> list[str]:
    """Split raw diff text into one chunk of text per file.

    Git diffs are split at each ``diff --git`` line. Plain unified diffs
    without that marker are split at every ``---`` line directly followed
    by a ``+++`` line.
    """
    lines = _split_lines(diff_text)
    if any(line.startswith(_FILE_BOUNDARY) for line in lines):
        starts = [i for i, line in enumerate(lines) if line.startswith(_FILE_BOUNDARY)]
    else:
        starts = [
            i
            for i, line in enumerate(lines[:-1])
            if line.startswith("---") and lines[i + 1].startswith("+++")
        ]

    if not starts:
        return [diff_text] if _has_diff_lines(lines) else []

    chunks: list[str] = []
    # Anything before the first boundary only counts if it carries changes
    if starts[0] > 0 and _has_diff_lines(lines[: starts[0]]):
        chunks.append("\n".join(lines[: starts[0]]))
    for idx, start in enumerate(starts):
        end = starts[idx + 1] if idx + 1 < len(starts) else len(lines)
        chunks.append("\n".join(lines[start:end]))
    return chunks


def _split_lines(text: str) -> list[str]:
    # Only "\n" ends a line; form feeds and Unicode separators are content
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _has_diff_lines(lines: list[str]) -> bool:
    return any(
        line.startswith(("@@", "+", "-")) and not line.startswith(("+++", "---"))
        for line in lines
    )


def _strip_prefix(path: str) -> Optional[str]:
    path = path.split("\t")[0].strip()
    if path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def parse_file_chunk(chunk: str) -> FileDiff:
    """Parse the text of a single file section into a FileDiff."""
    current_file = FileDiff(text=chunk)
    current_hunk: Optional[Hunk] = None
    new_line_no = 0
    lines = _split_lines(chunk)

    for idx, line in enumerate(lines):
        # File header
        if line.startswith(_FILE_BOUNDARY):
            parts = line.split()
            if len(parts) >= 4:
                current_file.old_path = _strip_prefix(parts[2])
                current_file.new_path = _strip_prefix(parts[3])
            continue

        if current_hunk is None:
            # File metadata only appears before the first hunk
            if line.startswith("new file"):
                current_file.is_new = True
                continue
            if line.startswith("deleted file"):
                current_file.is_deleted = True
                continue
            if line.startswith(("rename from", "rename to")):
                current_file.is_renamed = True
                continue
            if line.startswith(("index ", "similarity index", "Binary files", "old mode", "new mode")):
                continue
            if line.startswith("---"):
                if idx + 1 < len(lines) and lines[idx + 1].startswith("+++"):
                    current_file.old_path = _strip_prefix(line[3:])
                    if current_file.old_path is None:
                        current_file.is_new = True
                continue
            if line.startswith("+++"):
                if idx > 0 and lines[idx - 1].startswith("---"):
                    current_file.new_path = _strip_prefix(line[3:])
                    if current_file.new_path is None:
                        current_file.is_deleted = True
                continue

        # Hunk header
        if line.startswith("@@"):
            hunk_match = _HUNK_HEADER.match(line)
            if hunk_match:
                current_hunk = Hunk(
                    new_start=int(hunk_match.group(3)),
                    old_start=int(hunk_match.group(1)),
                    old_count=int(hunk_match.group(2) or 1),
                    new_count=int(hunk_match.group(4) or 1),
                    header=hunk_match.group(5).strip(),
                )
            else:
                current_hunk = Hunk(new_start=0, header=line)
            current_file.hunks.append(current_hunk)
            new_line_no = current_hunk.new_start
            continue

        if current_hunk is None:
            if not line.startswith(("+", "-")):
                continue
            # Changes without a hunk header get a placeholder start line
            current_hunk = Hunk(new_start=0)
            current_file.hunks.append(current_hunk)
            new_line_no = 0

        # Diff content lines; "+++"/"---" inside a hunk count as context
        if line.startswith("+") and not line.startswith("+++"):
            current_hunk.changes.append(LineChange(ChangeKind.ADDITION, line[1:], new_line_no))
            new_line_no += 1
        elif line.startswith("-") and not line.startswith("---"):
            current_hunk.changes.append(LineChange(ChangeKind.DELETION, line[1:], new_line_no))
        elif line.startswith("\\"):
            current_hunk.changes.append(LineChange(ChangeKind.MARKER, line, new_line_no))
        else:
            text = line[1:] if line.startswith(" ") else line
            current_hunk.changes.append(LineChange(ChangeKind.CONTEXT, text, new_line_no))
            new_line_no += 1

    return current_file


def parse_diff(diff_text: str) -> DiffDocument:
    """Parse a unified diff into a DiffDocument. Never raises."""
    return DiffDocument(files=[parse_file_chunk(chunk) for chunk in split_file_chunks(diff_text)])


def diff_stats(document: DiffDocument) -> dict:
    """Generate summary statistics for a parsed diff."""
    return {
        "files_changed": len(document),
        "lines_added": document.added_line_count,
        "lines_removed": document.removed_line_count,
        "new_files": [f.path for f in document if f.is_new],
        "deleted_files": [f.path for f in document if f.is_deleted],
        "renamed_files": [f.path for f in document if f.is_renamed],
    }
