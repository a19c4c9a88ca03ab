"""End-of-line rule."""

from typing import List, Optional, Sequence
from dataclasses import replace

from ..document import Line, LineEnding
from ..settings import EndOfLine, Settings
from .base import FixPhase, LineRule, Violation, first_most_common

ENDINGS = {
    EndOfLine.LF: LineEnding.LF,
    EndOfLine.CRLF: LineEnding.CRLF,
    EndOfLine.CR: LineEnding.CR,
}
NAMES = {ending: eol for eol, ending in ENDINGS.items()}


class EndOfLineRule(LineRule):
    """Every terminated line must end with the configured marker."""

    name = "end_of_line"
    phase = FixPhase.STRUCTURAL

    def resolve(self, settings: Settings) -> Optional[LineEnding]:
        if settings.end_of_line is None:
            return None
        return ENDINGS[settings.end_of_line]

    def infer(self, line: Line) -> Optional[EndOfLine]:
        return NAMES.get(line.ending)

    def reduce(self, values: Sequence[EndOfLine]) -> Optional[EndOfLine]:
        return first_most_common(values)

    def check(self, settings: Settings, line: Line) -> List[Violation]:
        expected = self.resolve(settings)
        # An unterminated last line is insert_final_newline's concern
        if expected is None or line.ending is LineEnding.NONE or line.ending is expected:
            return []
        return [self.violation(
            f"invalid newline: {line.ending.name.lower()}, expected: {expected.name.lower()}",
            line,
        )]

    def fix(self, settings: Settings, line: Line) -> Line:
        expected = self.resolve(settings)
        if expected is None or line.ending is LineEnding.NONE or line.ending is expected:
            return line
        return replace(line, ending=expected)
