"""
Test package for editorconfig-formatter.

This package contains tests including:
- Unit tests for the document model, settings, rules and engine
- Integration tests for the command line
- Property-based tests using Hypothesis
"""
