"""
Main entry point for the editorconfig-formatter package.

This allows the package to be run as a module:
python -m editorconfig_formatter
"""

from .cli.commands import main

if __name__ == '__main__':
    main()
