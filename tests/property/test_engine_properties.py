"""
Property-based tests for the rule engine using Hypothesis.

These tests generate arbitrary file contents and settings and verify that
parsing, fixing and inference behave consistently for all of them.
"""

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st
from hypothesis.stateful import RuleBasedStateMachine, rule, invariant

from editorconfig_formatter.core.aggregator import InferAggregator, aggregate
from editorconfig_formatter.core.document import Charset, parse, serialize
from editorconfig_formatter.core.engine import RuleEngine
from editorconfig_formatter.core.settings import EndOfLine, IndentStyle, Settings


# Strategies for generating test data
line_texts = st.text(alphabet=st.sampled_from(list("ab *\té€")), max_size=12)
endings = st.sampled_from(["\n", "\r\n", "\r"])


@st.composite
def source_text(draw):
    """Generate text made of indented lines with mixed endings."""
    lines = draw(st.lists(st.tuples(line_texts, endings), max_size=8))
    text = "".join(line + ending for line, ending in lines)
    if draw(st.booleans()):
        text += draw(line_texts)
    return text


@st.composite
def source_bytes(draw):
    """Generate file contents, with and without a byte-order mark."""
    text = draw(source_text())
    charset = draw(st.sampled_from([Charset.UTF_8, Charset.UTF_8_BOM, Charset.UTF_16LE, Charset.UTF_32BE]))
    return charset.bom + text.encode(charset.codec)


@st.composite
def style_settings(draw):
    """Generate settings, leaving each field unset some of the time."""
    return Settings(
        charset=draw(st.sampled_from([None, Charset.UTF_8, Charset.UTF_8_BOM, Charset.UTF_16BE])),
        indent_style=draw(st.sampled_from([None, IndentStyle.TAB, IndentStyle.SPACE])),
        indent_size=draw(st.sampled_from([0, 2, 4])),
        tab_width=draw(st.sampled_from([0, 4, 8])),
        end_of_line=draw(st.sampled_from([None, EndOfLine.LF, EndOfLine.CRLF, EndOfLine.CR])),
        trim_trailing_whitespace=draw(st.sampled_from([None, True, False])),
        insert_final_newline=draw(st.sampled_from([None, True, False])),
        max_line_length=draw(st.sampled_from([0, 6, 40])),
    )


class TestEngineProperties:
    """Property-based tests for the RuleEngine."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = RuleEngine()

    @given(st.binary(max_size=64))
    def test_round_trip_arbitrary_bytes(self, data):
        """Property: serializing a parsed document reproduces the input."""
        assert serialize(parse(data)) == data

    @given(source_bytes())
    def test_round_trip_with_bom(self, data):
        """Property: round trip holds for every supported encoding."""
        assert serialize(parse(data)) == data

    @given(style_settings(), source_bytes())
    def test_fix_is_idempotent(self, settings, data):
        """Property: fixing a fixed document changes nothing."""
        document = parse(data)
        once = self.engine.fix(settings, document)
        twice = self.engine.fix(settings, once)

        assert serialize(twice) == serialize(once)

    @given(style_settings(), source_bytes())
    def test_fix_leaves_only_unfixable_violations(self, settings, data):
        """Property: after a fix, every remaining violation is unfixable."""
        fixed = self.engine.fix(settings, parse(data))
        remaining = self.engine.check(settings, fixed)

        assert self.engine.unfixable(remaining) == remaining

    @given(style_settings(), source_bytes())
    def test_operations_do_not_mutate(self, settings, data):
        """Property: check and fix leave their input as it was."""
        document = parse(data)
        snapshot = (document.lines, document.charset)

        self.engine.check(settings, document)
        self.engine.fix(settings, document)

        assert (document.lines, document.charset) == snapshot

    @given(source_bytes())
    def test_inferred_settings_are_satisfied(self, data):
        """Property: a document satisfies the whole-document settings inferred from it."""
        document = parse(data)
        inferred = self.engine.infer(document)
        violations = self.engine.check(inferred, document)

        assert [v for v in violations if v.rule in (
            'charset', 'trim_trailing_whitespace', 'insert_final_newline', 'max_line_length'
        )] == []

    @given(st.lists(st.tuples(st.text(min_size=1, max_size=8), style_settings()), max_size=6),
           st.randoms())
    def test_aggregate_is_order_independent(self, pairs, random):
        """Property: aggregation depends only on the set of (id, settings) pairs."""
        shuffled = list(pairs)
        random.shuffle(shuffled)

        expected = aggregate([s for _, s in pairs], [f for f, _ in pairs])
        actual = aggregate([s for _, s in shuffled], [f for f, _ in shuffled])

        assert actual == expected


class EngineStateMachine(RuleBasedStateMachine):
    """Stateful testing of repeated fixes and inference."""

    def __init__(self):
        super().__init__()
        self.engine = RuleEngine()
        self.aggregator = InferAggregator()
        self.file_ids = set()

    @rule(file_id=st.sampled_from(["a", "b", "c", "d"]), data=source_bytes(), settings=style_settings())
    def fix_and_infer(self, file_id, data, settings):
        """Fix a file, then record what its fixed contents look like."""
        fixed = self.engine.fix_bytes(settings, data)
        assert self.engine.fix_bytes(settings, fixed) == fixed

        self.aggregator.add_result(file_id, self.engine.infer_bytes(fixed))
        self.file_ids.add(file_id)

    @rule()
    def aggregate_results(self):
        """Aggregate what has been seen so far."""
        result = self.aggregator.aggregate()
        assert result.file_count == len(self.file_ids)

    @invariant()
    def counts_match(self):
        """Invariant: one result per distinct file id."""
        assert self.aggregator.file_count == len(self.file_ids)


TestEngineStateMachine = EngineStateMachine.TestCase
TestEngineStateMachine.settings = hypothesis_settings(max_examples=25, stateful_step_count=10)


if __name__ == '__main__':
    pytest.main([__file__])
