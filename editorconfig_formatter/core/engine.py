"""
Rule Engine Module

This module runs the rule set against documents: check collects violations,
fix produces a corrected document, and infer observes a partial
configuration. Byte-level wrappers parse and serialize around them.
"""

from typing import Dict, List, Optional, Sequence
import logging

from .document import Document, parse, serialize
from .settings import Settings
from .rules import RULES, Rule, Violation

logger = logging.getLogger(__name__)


class RuleEngine:
    """
    Orchestrator for a fixed, ordered set of rules.

    All operations are pure: documents are never modified, and results depend
    only on the arguments, so one engine can serve many threads.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        """
        Initialize the engine.

        Args:
            rules: Rules in registration order (defaults to the full rule set)
        """
        self.rules = tuple(rules) if rules is not None else RULES
        self._rules_by_name: Dict[str, Rule] = {rule.name: rule for rule in self.rules}
        # sorted() is stable, so registration order holds within a phase
        self._fix_order = tuple(sorted(self.rules, key=lambda rule: rule.phase))

    def check(self, settings: Settings, document: Document) -> List[Violation]:
        """
        Check a document against settings.

        Returns:
            Violations in rule registration order, then line order; empty
            when the document is compliant
        """
        violations = []
        for rule in self.rules:
            found = rule.check_document(settings, document)
            if found:
                logger.debug(f"{rule.name}: {len(found)} violation(s)")
            violations.extend(found)
        return violations

    def fix(self, settings: Settings, document: Document) -> Document:
        """
        Return a corrected copy of ``document``.

        Structural rules run first, then content rules, then the final
        newline. Violations that ``unfixable`` reports survive the result.
        """
        for rule in self._fix_order:
            document = rule.fix_document(settings, document)
        return document

    def infer(self, document: Document) -> Settings:
        """Observe the settings a document follows; unobservable fields stay unset."""
        values = {}
        for rule in self.rules:
            value = rule.infer_document(document)
            if value is not None:
                values[rule.name] = value
        return Settings(**values)

    def unfixable(self, violations: Sequence[Violation]) -> List[Violation]:
        """Filter the violations no fixer can repair."""
        return [
            violation for violation in violations
            if violation.rule not in self._rules_by_name
            or not self._rules_by_name[violation.rule].can_fix(violation)
        ]

    def check_bytes(self, settings: Settings, data: bytes) -> List[Violation]:
        return self.check(settings, parse(data, settings.charset))

    def fix_bytes(self, settings: Settings, data: bytes) -> bytes:
        document = parse(data, settings.charset)
        fixed = self.fix(settings, document)
        if fixed is document:
            return bytes(data)
        return serialize(fixed)

    def infer_bytes(self, data: bytes) -> Settings:
        return self.infer(parse(data))


default_engine = RuleEngine()


def check(settings: Settings, data: bytes) -> List[Violation]:
    """Check raw bytes against settings."""
    return default_engine.check_bytes(settings, data)


def fix(settings: Settings, data: bytes) -> bytes:
    """Return fixed bytes for raw content."""
    return default_engine.fix_bytes(settings, data)


def infer(data: bytes) -> Settings:
    """Infer the partial settings raw content follows."""
    return default_engine.infer_bytes(data)
