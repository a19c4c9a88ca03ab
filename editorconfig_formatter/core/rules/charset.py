"""Charset rule: byte-order marks and the latin1 character range."""

from typing import List, Optional

from ..document import BOMS, Charset, Document, Line
from ..settings import Settings
from .base import DocumentRule, FixPhase, Violation

LATIN1_LIMIT = 0x80


class CharsetRule(DocumentRule):
    """
    Checks the charset a document declares through its byte-order mark.

    BOM-less content carries no observable charset, so for it only two
    things can be verified: a BOM-bearing charset is missing, or a latin1
    file contains characters at or above 0x80.
    """

    name = "charset"
    phase = FixPhase.STRUCTURAL

    def resolve(self, settings: Settings) -> Optional[Charset]:
        return settings.charset

    def infer(self, document: Document) -> Optional[Charset]:
        if document.charset in BOMS:
            return document.charset
        return None

    def check(self, settings: Settings, document: Document) -> List[Violation]:
        expected = self.resolve(settings)
        if expected is None:
            return []

        inferred = self.infer(document)
        if inferred is not None:
            if inferred is not expected:
                return [self.violation(
                    f"invalid charset: {inferred.value}, expected: {expected.value}",
                    source=document.text,
                )]
            return []

        if expected is Charset.LATIN1:
            violations = []
            for line in document.lines:
                violations.extend(self._check_latin1_range(line))
            return violations

        if expected in BOMS:
            return [self.violation(f"expected charset: {expected.value}", source=document.text)]

        return []

    def fix(self, settings: Settings, document: Document) -> Document:
        """
        Retag the document with the configured charset.

        Characters outside latin1 or lone surrogates have no encoding under the
        new tag. They are left in place, still reported by check, and written
        as ``?`` when the document is serialized.
        """
        expected = self.resolve(settings)
        if expected is None or document.charset is expected:
            return document
        # Re-encoding happens when the document is serialized
        return document.with_charset(expected)

    def can_fix(self, violation: Violation) -> bool:
        return violation.is_document_level

    def _check_latin1_range(self, line: Line) -> List[Violation]:
        return [
            self.violation(f"character out of latin1 range: {character!r}", line, column, line.text)
            for column, character in enumerate(line.text, start=1)
            if ord(character) >= LATIN1_LIMIT
        ]
