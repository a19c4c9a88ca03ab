"""
Indentation Rules

This module provides the three rules governing leading whitespace:
indent_style (tabs or spaces), indent_size (space indentation depth) and
tab_width (alignment spaces that span a whole tab stop).
"""

import re
from math import gcd
from typing import List, Optional, Sequence, Tuple
from dataclasses import replace
from enum import Enum

from ..document import Document, Line
from ..settings import IndentStyle, Settings
from .base import FixPhase, LineRule, Violation, first_most_common

_INDENT_PATTERN = re.compile(r"[ \t]*")
# Tabs first, then alignment spaces
_TABS_THEN_SPACES = re.compile(r"\t* *")
_TAB_INDENT = re.compile(r"\t+ *")


class IndentKind(Enum):
    """Classification of a line's leading whitespace."""
    TAB = "tab"
    SPACE = "space"
    MIXED = "mixed"


def split_indent(text: str) -> Tuple[str, str]:
    """Split a line into its leading whitespace run and the rest."""
    run = _INDENT_PATTERN.match(text).group(0)
    return run, text[len(run):]


def classify_indent(run: str) -> Optional[IndentKind]:
    if not run:
        return None
    if "\t" not in run:
        return IndentKind.SPACE
    if " " not in run:
        return IndentKind.TAB
    return IndentKind.MIXED


def visual_width(run: str, tab_width: int) -> int:
    """Column reached after ``run`` with tab stops every ``tab_width``."""
    column = 0
    for character in run:
        if character == "\t":
            column = (column // tab_width + 1) * tab_width
        else:
            column += 1
    return column


def render_indent(width: int, style: IndentStyle, tab_width: int) -> str:
    """
    Render ``width`` columns of indentation.

    Tab indentation narrower than one tab stop is rounded up to a single tab.
    """
    if style is IndentStyle.SPACE:
        return " " * width
    tabs, spaces = divmod(width, tab_width)
    if width and not tabs:
        return "\t"
    return "\t" * tabs + " " * spaces


def is_blank(line: Line) -> bool:
    return not line.text.strip(" \t")


def is_comment_continuation(run: str, rest: str) -> bool:
    """True for a `` * text`` block comment line: an odd run of spaces before ``*``."""
    return rest.startswith("*") and "\t" not in run and len(run) % 2 == 1


class IndentStyleRule(LineRule):
    """Leading whitespace must use the configured character."""

    name = "indent_style"

    def resolve(self, settings: Settings) -> Optional[IndentStyle]:
        return settings.indent_style

    def infer(self, line: Line) -> Optional[IndentStyle]:
        if is_blank(line):
            return None
        run, rest = split_indent(line.text)
        if run == " " and rest.startswith("*"):
            return None
        kind = classify_indent(run)
        if kind is IndentKind.TAB:
            return IndentStyle.TAB
        if kind is IndentKind.SPACE:
            return IndentStyle.SPACE
        return None

    def reduce(self, values: Sequence[IndentStyle]) -> Optional[IndentStyle]:
        return first_most_common(values)

    def _is_valid(self, style: IndentStyle, run: str, rest: str) -> bool:
        if not run:
            return True
        if style is IndentStyle.SPACE:
            return "\t" not in run
        # A top-level block comment keeps its single alignment space
        if run == " " and rest.startswith("*"):
            return True
        return _TAB_INDENT.fullmatch(run) is not None

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        style = self.resolve(settings)
        if style is None or is_blank(line):
            return []
        run, rest = split_indent(line.text)
        if self._is_valid(style, run, rest):
            return []
        if style is IndentStyle.SPACE:
            message = "invalid indentation: found a leading tab, expected: space"
        else:
            message = "invalid indentation: found a leading space, expected: tab"
        return [self.violation(message, line, 1)]

    def fix(self, settings: Settings, line: Line) -> Line:
        style = self.resolve(settings)
        if style is None or is_blank(line):
            return line
        run, rest = split_indent(line.text)
        if self._is_valid(style, run, rest):
            return line
        tab_width = settings.rendering_tab_width
        indent = render_indent(visual_width(run, tab_width), style, tab_width)
        return replace(line, text=indent + rest)


class IndentSizeRule(LineRule):
    """Space indentation must be a multiple of indent_size."""

    name = "indent_size"

    def resolve(self, settings: Settings) -> int:
        return settings.indent_size

    def _applies(self, settings: Settings, line: Line) -> Optional[int]:
        """Return the size to enforce on ``line``, or None when exempt."""
        size = self.resolve(settings)
        if not size or settings.indent_style is IndentStyle.TAB or is_blank(line):
            return None
        run, rest = split_indent(line.text)
        if classify_indent(run) is not IndentKind.SPACE:
            return None
        # Block comment continuation: " * text" one space past the indent
        if len(run) % size == 1 and rest.startswith("*"):
            return None
        return size

    def infer(self, line: Line) -> Optional[int]:
        if is_blank(line):
            return None
        run, rest = split_indent(line.text)
        if classify_indent(run) is not IndentKind.SPACE or is_comment_continuation(run, rest):
            return None
        return len(run)

    def reduce(self, values: Sequence[int]) -> int:
        size = 0
        for value in values:
            size = gcd(size, value)
        return size

    def infer_document(self, document: Document) -> int:
        if IndentStyleRule().infer_document(document) is IndentStyle.TAB:
            return 0
        return super().infer_document(document)

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        size = self._applies(settings, line)
        if size is None:
            return []
        run, _ = split_indent(line.text)
        if len(run) % size == 0:
            return []
        return [self.violation(
            f"invalid indent size: {len(run)}, expected a multiple of {size}",
            line, 1,
        )]

    def fix(self, settings: Settings, line: Line) -> Line:
        size = self._applies(settings, line)
        if size is None:
            return line
        run, rest = split_indent(line.text)
        if len(run) % size == 0:
            return line
        depth = -(-len(run) // size)
        return replace(line, text=" " * (depth * size) + rest)


class TabWidthRule(LineRule):
    """
    Alignment spaces after tabs must be narrower than one tab stop.

    Applies to tab-indented files, and to tab-bearing lines when no
    indent_style is configured. The width of a tab cannot be observed from
    content, so inference never yields a value.
    """

    name = "tab_width"

    def resolve(self, settings: Settings) -> int:
        return settings.effective_tab_width

    def _alignment(self, settings: Settings, line: Line) -> Optional[Tuple[str, str, int]]:
        width = self.resolve(settings)
        if not width or is_blank(line) or settings.indent_style is IndentStyle.SPACE:
            return None
        run, rest = split_indent(line.text)
        if settings.indent_style is None and "\t" not in run:
            return None
        if _TABS_THEN_SPACES.fullmatch(run) is None:
            return None
        return run, rest, width

    def infer(self, line: Line) -> Optional[int]:
        return None

    def reduce(self, values: Sequence[int]) -> int:
        return 0

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        alignment = self._alignment(settings, line)
        if alignment is None:
            return []
        run, _, width = alignment
        spaces = len(run) - run.count("\t")
        if spaces < width:
            return []
        return [self.violation(
            f"invalid alignment: {spaces} spaces span a tab stop of width {width}",
            line, 1,
        )]

    def fix(self, settings: Settings, line: Line) -> Line:
        alignment = self._alignment(settings, line)
        if alignment is None:
            return line
        run, rest, width = alignment
        if len(run) - run.count("\t") < width:
            return line
        indent = render_indent(visual_width(run, width), IndentStyle.TAB, width)
        return replace(line, text=indent + rest)
