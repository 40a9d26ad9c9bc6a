"""
Line-numbered text helpers.

Every line-aware operation uses the same wire convention: ``"N:content"``,
with ``N`` counted from 1. Content is split on ``"\\n"`` only, so a trailing
``"\\r"`` stays part of its line and survives a round trip unchanged.
"""

import re
from typing import Iterable, Iterator

LINE_NUMBER_PREFIX = re.compile(r"^\d+:")
LINE_EDIT = re.compile(r"(\d+):(.*)", re.DOTALL)


def add_line_numbers(content: str) -> str:
    """Prefix every line with its 1-based index."""
    return "\n".join(
        f"{index}:{line}" for index, line in enumerate(content.split("\n"), start=1)
    )


def strip_line_numbers(content: str) -> str:
    """
    Remove a leading ``N:`` from every line that has one.

    Lines without the prefix are kept verbatim, which makes this the inverse
    of :func:`add_line_numbers`.
    """
    return "\n".join(
        LINE_NUMBER_PREFIX.sub("", line, count=1) for line in content.split("\n")
    )


def parse_line_edits(text: str) -> Iterator[tuple[int, str]]:
    """
    Parse newline-separated ``N:content`` entries.

    Entries that don't match the pattern, and line number 0, are skipped.
    """
    for entry in text.split("\n"):
        match = LINE_EDIT.fullmatch(entry)
        if not match:
            continue
        line_number = int(match.group(1))
        if line_number < 1:
            continue
        yield line_number, match.group(2)


class LineMap:
    """
    A file's content as an ordered list of lines, addressed from 1.

    Setting a line past the end pads the gap with empty lines.
    """

    def __init__(self, lines: Iterable[str] = ()):
        self._lines = list(lines)

    @classmethod
    def from_text(cls, content: str) -> "LineMap":
        """Split text into lines. An empty string is an empty map."""
        if content == "":
            return cls()
        return cls(content.split("\n"))

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, line_number: int) -> str:
        if line_number < 1:
            raise IndexError(f"Line numbers start at 1, got {line_number}")
        return self._lines[line_number - 1]

    def set(self, line_number: int, content: str) -> None:
        """Replace line ``line_number``, padding with empty lines as needed."""
        if line_number < 1:
            raise IndexError(f"Line numbers start at 1, got {line_number}")
        index = line_number - 1
        if index >= len(self._lines):
            self._lines.extend([""] * (index + 1 - len(self._lines)))
        self._lines[index] = content

    def apply(self, edits: Iterable[tuple[int, str]]) -> int:
        """Apply edits in order; later edits to the same line win."""
        count = 0
        for line_number, content in edits:
            self.set(line_number, content)
            count += 1
        return count

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def render(self) -> str:
        return "\n".join(self._lines)

    def __repr__(self) -> str:
        return f"LineMap(lines={len(self._lines)})"
