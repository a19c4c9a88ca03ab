"""
Command-line interface for editorconfig-formatter.
"""
