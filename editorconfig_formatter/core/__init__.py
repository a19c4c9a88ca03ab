"""
Core modules for parsing documents, evaluating style rules, and inferring settings.
"""

from .document import Document, Line, Charset, LineEnding, ParseError, parse, serialize
from .settings import Settings, AggregateSettings, IndentStyle, EndOfLine, InvalidSettingError
from .rules import Violation, RULES
from .engine import RuleEngine, check, fix, infer
from .aggregator import InferAggregator, aggregate
from .scanner import StyleScanner, ScanResult
from .formatter import AutoFormatter, FormatResult

__all__ = [
    'Document',
    'Line',
    'Charset',
    'LineEnding',
    'ParseError',
    'parse',
    'serialize',
    'Settings',
    'AggregateSettings',
    'IndentStyle',
    'EndOfLine',
    'InvalidSettingError',
    'Violation',
    'RULES',
    'RuleEngine',
    'check',
    'fix',
    'infer',
    'InferAggregator',
    'aggregate',
    'StyleScanner',
    'ScanResult',
    'AutoFormatter',
    'FormatResult'
]
