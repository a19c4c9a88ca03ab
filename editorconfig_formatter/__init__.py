"""
editorconfig-formatter

Checks, fixes and infers editorconfig style settings (charset, indentation,
line endings, whitespace and line length) for source files.
"""

__version__ = "1.0.0"

from .core.document import Document, Charset, ParseError, parse, serialize
from .core.settings import Settings, AggregateSettings
from .core.rules import Violation
from .core.engine import RuleEngine, check, fix, infer
from .core.aggregator import InferAggregator, aggregate
from .core.scanner import StyleScanner
from .core.formatter import AutoFormatter

__all__ = [
    'Document',
    'Charset',
    'ParseError',
    'parse',
    'serialize',
    'Settings',
    'AggregateSettings',
    'Violation',
    'RuleEngine',
    'check',
    'fix',
    'infer',
    'InferAggregator',
    'aggregate',
    'StyleScanner',
    'AutoFormatter'
]
