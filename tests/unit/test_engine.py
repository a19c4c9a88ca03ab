"""
Unit tests for the rule engine.

These tests cover:
- Violation ordering across rules
- Fix phase ordering
- Unfixable violations
- Byte-level wrappers
"""

from unittest.mock import MagicMock

import pytest

from editorconfig_formatter.core import engine as engine_module
from editorconfig_formatter.core.document import Charset, ParseError, parse, serialize
from editorconfig_formatter.core.engine import RuleEngine
from editorconfig_formatter.core.rules import FixPhase, RULES, Violation
from editorconfig_formatter.core.settings import EndOfLine, IndentStyle, Settings


class TestRuleEngine:
    """Test cases for RuleEngine."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = RuleEngine()

    def test_default_rule_set(self):
        """Test the engine runs every registered rule."""
        assert self.engine.rules == RULES

    def test_unset_settings_never_violate(self):
        """Test nothing is reported without configuration."""
        assert self.engine.check(Settings(), parse(b"\t  mixed   \r\nno newline")) == []

    def test_violations_follow_registration_order(self):
        """Test violations are grouped by rule, then ordered by line."""
        settings = Settings(
            end_of_line=EndOfLine.LF,
            trim_trailing_whitespace=True,
            insert_final_newline=True,
        )
        document = parse(b"a \r\nb\r\nc ")
        rules = [v.rule for v in self.engine.check(settings, document)]

        assert rules == [
            'end_of_line', 'end_of_line',
            'trim_trailing_whitespace', 'trim_trailing_whitespace',
            'insert_final_newline',
        ]

    def test_fix_phase_order(self):
        """Test fixers run sorted by phase, keeping registration order within a phase."""
        phases = [rule.phase for rule in self.engine._fix_order]

        assert phases == sorted(phases)
        assert self.engine._fix_order[0].name == 'charset'
        assert self.engine._fix_order[-1].name == 'max_line_length'

    def test_fix_resolves_everything_fixable(self):
        """Test a fixed document checks clean."""
        settings = Settings(
            indent_style=IndentStyle.SPACE,
            indent_size=2,
            end_of_line=EndOfLine.LF,
            trim_trailing_whitespace=True,
            insert_final_newline=True,
        )
        document = parse(b"def f():\r\n\treturn 1   \r\n   \r\n")
        fixed = self.engine.fix(settings, document)

        assert self.engine.check(settings, fixed) == []
        assert serialize(fixed) == b"def f():\n  return 1\n\n"

    def test_fix_does_not_mutate(self):
        """Test the input document is left as it was."""
        document = parse(b"a  \r\n")
        before = serialize(document)
        self.engine.fix(Settings(end_of_line=EndOfLine.LF, trim_trailing_whitespace=True), document)

        assert serialize(document) == before

    def test_overlong_lines_survive_fix(self):
        """Test max_line_length violations are reported as unfixable."""
        settings = Settings(max_line_length=3, trim_trailing_whitespace=True)
        fixed = self.engine.fix(settings, parse(b"abcdef \n"))
        remaining = self.engine.check(settings, fixed)

        assert [v.rule for v in remaining] == ['max_line_length']
        assert self.engine.unfixable(remaining) == remaining

    def test_unfixable_filters(self):
        """Test fixable violations are filtered out."""
        violations = [
            Violation('trim_trailing_whitespace', 'x', 1, 2),
            Violation('max_line_length', 'x', 1, 4),
            Violation('charset', 'x', 2, 1),
            Violation('charset', 'x'),
        ]
        assert self.engine.unfixable(violations) == [violations[1], violations[2]]

    def test_infer(self):
        """Test inference yields a partial configuration."""
        inferred = self.engine.infer(parse(b"if x:\n    y = 1\n"))

        assert inferred.indent_style is IndentStyle.SPACE
        assert inferred.indent_size == 4
        assert inferred.end_of_line is EndOfLine.LF
        assert inferred.trim_trailing_whitespace is True
        assert inferred.insert_final_newline is True
        assert inferred.max_line_length == 9
        assert inferred.charset is None
        assert inferred.tab_width == 0

    def test_custom_rules(self):
        """Test an engine built from a subset of rules."""
        engine = RuleEngine([rule for rule in RULES if rule.name == 'insert_final_newline'])
        settings = Settings(insert_final_newline=True, trim_trailing_whitespace=True)

        assert [v.rule for v in engine.check(settings, parse(b"a  "))] == ['insert_final_newline']

    def test_fix_calls_rules_in_phase_order(self):
        """Test each rule's fixer is called once, in phase order."""
        calls = []
        rules = []
        for name, phase in [('last', FixPhase.FINAL), ('first', FixPhase.STRUCTURAL), ('middle', FixPhase.CONTENT)]:
            rule = MagicMock()
            rule.name = name
            rule.phase = phase
            rule.fix_document.side_effect = lambda s, d, name=name: calls.append(name) or d
            rules.append(rule)

        RuleEngine(rules).fix(Settings(), parse(b""))
        assert calls == ['first', 'middle', 'last']


class TestByteWrappers:
    """Test the byte-level operations."""

    def test_fix_bytes_unchanged_returns_input(self):
        """Test compliant content comes back byte-identical."""
        data = b"\xef\xbb\xbfok\r\n"
        assert engine_module.fix(Settings(end_of_line=EndOfLine.CRLF), data) == data

    def test_fix_bytes_adds_bom(self):
        """Test charset fixes show up in the output bytes."""
        assert engine_module.fix(Settings(charset=Charset.UTF_8_BOM), b"a\n") == b"\xef\xbb\xbfa\n"

    def test_check_bytes_latin1(self):
        """Test 7-bit content satisfies latin1."""
        assert engine_module.check(Settings(charset=Charset.LATIN1), b"cafe\n") == []

    def test_check_bytes_latin1_high_byte(self):
        """Test a byte at or above 0x80 is reported at its column."""
        violations = engine_module.check(Settings(charset=Charset.LATIN1), b"caf\xe9\n")

        assert len(violations) == 1
        assert violations[0].column_number == 4

    def test_check_bytes_latin1_multibyte(self):
        """Test multi-byte sequences are read byte by byte under latin1."""
        violations = engine_module.check(Settings(charset=Charset.LATIN1), "€\n".encode("utf-8"))
        assert [v.column_number for v in violations] == [1, 2, 3]

    def test_infer_bytes(self):
        """Test inference from raw bytes."""
        assert engine_module.infer(b"\xef\xbb\xbf\tx\r\n").charset is Charset.UTF_8_BOM

    def test_non_bytes_raise(self):
        """Test ParseError propagates from the wrappers."""
        with pytest.raises(ParseError):
            engine_module.check(Settings(), "text")
