"""
Rule Abstraction

Every style dimension is a rule with four operations: resolve the expected
value from Settings, infer the observed value from content, check content
against Settings, and fix content to satisfy Settings. Rules come in two
shapes: document rules see the whole document once, line rules see one
line at a time and fold their per-line observations into a document value.
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, List, Optional, Sequence
from dataclasses import dataclass
from enum import IntEnum

from ..document import Document, Line
from ..settings import Settings


class FixPhase(IntEnum):
    """Order in which fixers run: structure, then content, then the file end."""
    STRUCTURAL = 1
    CONTENT = 2
    FINAL = 3


@dataclass(frozen=True)
class Violation:
    """A single mismatch between content and configuration."""
    rule: str
    message: str
    line_number: int = 0
    column_number: int = 0
    source: str = ""

    @property
    def is_document_level(self) -> bool:
        return self.line_number == 0

    def __str__(self) -> str:
        if self.is_document_level:
            return f"{self.rule}: {self.message}"
        return f"{self.line_number}:{self.column_number} {self.rule}: {self.message}"


class Rule(ABC):
    """Base class for all rules."""

    name: str = ""
    kind: str = ""
    phase: FixPhase = FixPhase.CONTENT
    fixable: bool = True

    @abstractmethod
    def resolve(self, settings: Settings) -> Any:
        """Return the configured value for this rule, or the unset sentinel."""

    @abstractmethod
    def infer_document(self, document: Document) -> Any:
        """Observe the value this rule would expect for ``document``."""

    @abstractmethod
    def check_document(self, settings: Settings, document: Document) -> List[Violation]:
        """Return the violations of this rule in ``document``."""

    @abstractmethod
    def fix_document(self, settings: Settings, document: Document) -> Document:
        """Return a document satisfying this rule."""

    def can_fix(self, violation: Violation) -> bool:
        return self.fixable

    def violation(self, message: str, line: Optional[Line] = None, column: int = 0,
                  source: str = "") -> Violation:
        if line is None:
            return Violation(self.name, message, 0, column, source)
        return Violation(self.name, message, line.number, column, source or line.text)

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}')"


class DocumentRule(Rule):
    """A rule evaluated once per document."""

    kind = "DocumentRule"

    @abstractmethod
    def infer(self, document: Document) -> Any:
        pass

    @abstractmethod
    def check(self, settings: Settings, document: Document) -> List[Violation]:
        pass

    @abstractmethod
    def fix(self, settings: Settings, document: Document) -> Document:
        pass

    def infer_document(self, document: Document) -> Any:
        return self.infer(document)

    def check_document(self, settings: Settings, document: Document) -> List[Violation]:
        return self.check(settings, document)

    def fix_document(self, settings: Settings, document: Document) -> Document:
        return self.fix(settings, document)


class LineRule(Rule):
    """A rule evaluated once per line."""

    kind = "LineRule"

    @abstractmethod
    def infer(self, line: Line) -> Any:
        pass

    @abstractmethod
    def reduce(self, values: Sequence[Any]) -> Any:
        """Fold per-line observations (unset ones removed) into one value."""

    @abstractmethod
    def check(self, settings: Settings, line: Line) -> List[Violation]:
        pass

    @abstractmethod
    def fix(self, settings: Settings, line: Line) -> Line:
        pass

    def infer_document(self, document: Document) -> Any:
        values = [self.infer(line) for line in document.lines]
        return self.reduce([value for value in values if value is not None])

    def check_document(self, settings: Settings, document: Document) -> List[Violation]:
        violations = []
        for line in document.lines:
            violations.extend(self.check(settings, line))
        return violations

    def fix_document(self, settings: Settings, document: Document) -> Document:
        lines = [self.fix(settings, line) for line in document.lines]
        if all(new is old for new, old in zip(lines, document.lines)):
            return document
        return document.with_lines(lines)


def first_most_common(values: Sequence[Any]) -> Any:
    """Most frequent value, ties broken by first appearance; None if empty."""
    if not values:
        return None
    counts = Counter(values)
    best = max(counts.values())
    for value in values:
        if counts[value] == best:
            return value
