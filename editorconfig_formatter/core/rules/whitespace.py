"""
Whitespace Rules

trim_trailing_whitespace works line by line; insert_final_newline looks at
the end of the whole document.
"""

import re
from typing import List, Optional, Sequence
from dataclasses import replace

from ..document import Document, Line, LineEnding
from ..settings import Settings
from .base import DocumentRule, FixPhase, LineRule, Violation, first_most_common
from .end_of_line import EndOfLineRule

_TRAILING_PATTERN = re.compile(r"[ \t]+$")


class TrimTrailingWhitespaceRule(LineRule):
    """Lines must not end in spaces or tabs."""

    name = "trim_trailing_whitespace"

    def resolve(self, settings: Settings) -> Optional[bool]:
        return settings.trim_trailing_whitespace

    def infer(self, line: Line) -> Optional[bool]:
        if not line.text:
            return None
        return _TRAILING_PATTERN.search(line.text) is None

    def reduce(self, values: Sequence[bool]) -> Optional[bool]:
        if not values:
            return None
        return all(values)

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        if not self.resolve(settings):
            return []
        match = _TRAILING_PATTERN.search(line.text)
        if match is None:
            return []
        return [self.violation("unexpected trailing whitespace", line, match.start() + 1)]

    def fix(self, settings: Settings, line: Line) -> Line:
        if not self.resolve(settings):
            return line
        stripped = line.text.rstrip(" \t")
        if stripped == line.text:
            return line
        return replace(line, text=stripped)


class InsertFinalNewlineRule(DocumentRule):
    """The document must (or must not) end with a line ending."""

    name = "insert_final_newline"
    phase = FixPhase.FINAL

    def resolve(self, settings: Settings) -> Optional[bool]:
        return settings.insert_final_newline

    def infer(self, document: Document) -> Optional[bool]:
        if document.is_empty:
            return None
        return document.has_trailing_newline

    def check(self, settings: Settings, document: Document) -> List[Violation]:
        expected = self.resolve(settings)
        if expected is None or expected == document.has_trailing_newline:
            return []
        message = "expected final newline" if expected else "unexpected final newline"
        return [self.violation(message, source=document.text)]

    def fix(self, settings: Settings, document: Document) -> Document:
        expected = self.resolve(settings)
        if expected is None or expected == document.has_trailing_newline:
            return document
        lines = list(document.lines)
        if expected:
            lines[-1] = replace(lines[-1], ending=self._final_ending(settings, document))
        else:
            # Blank lines at the end cannot exist without a final newline
            while len(lines) > 1 and not lines[-1].text:
                lines.pop()
            lines[-1] = replace(lines[-1], ending=LineEnding.NONE)
        return document.with_lines(lines)

    def _final_ending(self, settings: Settings, document: Document) -> LineEnding:
        rule = EndOfLineRule()
        configured = rule.resolve(settings)
        if configured is not None:
            return configured
        observed = first_most_common([line.ending for line in document.lines
                                      if line.ending is not LineEnding.NONE])
        return observed or LineEnding.LF


class MaxLineLengthRule(LineRule):
    """
    Lines must not exceed max_line_length characters.

    Overlong lines cannot be shortened mechanically, so this is a
    partial-fix rule: ``fix`` leaves lines untouched and its violations
    survive a fix run.
    """

    name = "max_line_length"
    phase = FixPhase.FINAL
    fixable = False

    def resolve(self, settings: Settings) -> int:
        return settings.max_line_length

    def infer(self, line: Line) -> int:
        return len(line.text)

    def reduce(self, values: Sequence[int]) -> int:
        return max(values, default=0)

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        limit = self.resolve(settings)
        if not limit or len(line.text) <= limit:
            return []
        return [self.violation(
            f"invalid line length: {len(line.text)}, exceeds: {limit}",
            line, limit + 1,
        )]

    def fix(self, settings: Settings, line: Line) -> Line:
        return line
