"""
Rule set, in registration order.

Violations are reported in this order, and fixers run in this order within
each fix phase.
"""

from .base import Rule, DocumentRule, LineRule, Violation, FixPhase
from .charset import CharsetRule
from .end_of_line import EndOfLineRule
from .indentation import IndentStyleRule, IndentSizeRule, TabWidthRule
from .whitespace import TrimTrailingWhitespaceRule, InsertFinalNewlineRule, MaxLineLengthRule

RULES = (
    CharsetRule(),
    EndOfLineRule(),
    IndentStyleRule(),
    IndentSizeRule(),
    TabWidthRule(),
    TrimTrailingWhitespaceRule(),
    InsertFinalNewlineRule(),
    MaxLineLengthRule(),
)

RULES_BY_NAME = {rule.name: rule for rule in RULES}

__all__ = [
    'Rule',
    'DocumentRule',
    'LineRule',
    'Violation',
    'FixPhase',
    'CharsetRule',
    'EndOfLineRule',
    'IndentStyleRule',
    'IndentSizeRule',
    'TabWidthRule',
    'TrimTrailingWhitespaceRule',
    'InsertFinalNewlineRule',
    'MaxLineLengthRule',
    'RULES',
    'RULES_BY_NAME',
]
