"""Size-bounding and line statistics for unified diffs.

Both functions are pure and tolerate malformed input: truncation looks at
line boundaries only, statistics at line prefixes and hunk headers.
"""

from __future__ import annotations

import re

from gitty.models.diff import DiffStatistics

DEFAULT_MAX_LENGTH = 3000

# A newline at or beyond this fraction of the limit is close enough to cut on
GOOD_CUT_RATIO = 0.8

TRUNCATION_MARKER = "\n\n... (diff truncated)"

DEV_NULL = "/dev/null"

# "@@ -12,5 +12,7 @@"; a missing count means 1
HUNK_HEADER_PATTERN = re.compile(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@")


def truncate_diff(diff: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Bound a diff to roughly ``max_length`` characters for prompt inclusion.

    The cut is made on a line boundary when one exists in the last fifth of
    the allowed window, otherwise at exactly ``max_length`` characters. A
    marker is appended so the model knows content is missing.

    Args:
        diff: Unified diff text.
        max_length: Character budget, must be positive.

    Returns:
        The diff unchanged when it fits, otherwise the shortened diff plus
        the truncation marker.

    Raises:
        ValueError: If ``max_length`` is not positive.
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    if len(diff) <= max_length:
        return diff

    last_newline = diff.rfind("\n", 0, max_length + 1)
    if last_newline >= GOOD_CUT_RATIO * max_length:
        truncated = diff[:last_newline] + TRUNCATION_MARKER
    else:
        truncated = diff[:max_length] + TRUNCATION_MARKER

    # Barely-over-budget input would grow once the marker is added
    if len(truncated) >= len(diff):
        return diff
    return truncated


def _header_path(header: str) -> str | None:
    """Extract the file path named by a ``---``/``+++`` header line."""
    path = header[3:]
    # git appends a tab and timestamp for some diff formats
    path = path.split("\t", 1)[0].strip()
    if not path or path == DEV_NULL:
        return None
    if path.startswith(("a/", "b/")):
        path = path[2:].strip()
    return path or None


def is_file_header(line: str) -> bool:
    """``---``/``+++`` followed by nothing, a space or a tab.

    Only meaningful outside a hunk: inside one, ``--- x`` is the deletion
    of a line that itself starts with ``--``.
    """
    return line[:3] in ("---", "+++") and line[3:4] in ("", " ", "\t")


class _Hunk:
    """Lines still expected in the current ``@@`` hunk."""

    def __init__(self, header: str) -> None:
        match = HUNK_HEADER_PATTERN.match(header)
        # Unparseable counts keep the hunk open until the next file or hunk
        self.open_ended = match is None
        self.old_left = int(match.group(1) or 1) if match else 0
        self.new_left = int(match.group(2) or 1) if match else 0

    @property
    def active(self) -> bool:
        return self.open_ended or self.old_left > 0 or self.new_left > 0

    def consume(self, line: str) -> None:
        if line.startswith("-"):
            self.old_left -= 1
        elif line.startswith("+"):
            self.new_left -= 1
        elif not line.startswith("\\"):
            self.old_left -= 1
            self.new_left -= 1


def diff_stats(diff: str) -> DiffStatistics:
    """Count added lines, deleted lines and distinct files in a diff.

    ``+++``/``---`` lines outside a hunk are file headers and never count
    as additions or deletions; inside a hunk they are ordinary changed
    lines (``--- old comment`` deletes ``-- old comment``). A header that
    names no real path (``--- a/``, ``+++ /dev/null``) contributes no file.

    Args:
        diff: Unified diff text.

    Returns:
        DiffStatistics for the diff; all zeros for empty input.
    """
    additions = 0
    deletions = 0
    files: set[str] = set()
    hunk: _Hunk | None = None

    for line in diff.split("\n"):
        if line.startswith("@@"):
            hunk = _Hunk(line)
            continue
        if line.startswith("diff "):
            hunk = None
            continue

        if hunk is not None and hunk.active:
            hunk.consume(line)
        elif is_file_header(line):
            path = _header_path(line)
            if path:
                files.add(path)
            continue

        if line.startswith("+"):
            additions += 1
        elif line.startswith("-"):
            deletions += 1

    return DiffStatistics(additions=additions, deletions=deletions, files=len(files))
