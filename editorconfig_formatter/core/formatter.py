"""
Auto Formatter Module

This module applies the rule engine's fixes to files on disk, either in
place or into a separate destination tree, and can preview the result
without writing anything.
"""

import os
from typing import List, Dict, Optional
from pathlib import Path
import logging

from .document import ParseError
from .engine import RuleEngine, default_engine
from .settings import Settings
from .rules import Violation

logger = logging.getLogger(__name__)


class FormatResult:
    """Result of a formatting operation."""

    def __init__(self, success: bool, message: str, changes_made: int = 0, original_content: bytes = b"",
                 formatted_content: bytes = b"", remaining: List[Violation] = None):
        self.success = success
        self.message = message
        self.changes_made = changes_made
        self.original_content = original_content
        self.formatted_content = formatted_content
        self.remaining = remaining or []

    def __repr__(self):
        return f"FormatResult(success={self.success}, changes={self.changes_made}, message='{self.message}')"


class AutoFormatter:
    """
    Automatic formatter for style violations.

    This class provides:
    - Fixing of every fixable violation in a file
    - Writing in place or into a destination directory
    - Dry-run previews
    - Reporting of violations no fixer can repair (e.g. overlong lines)
    """

    def __init__(self, engine: Optional[RuleEngine] = None):
        """
        Initialize the auto formatter.

        Args:
            engine: Rule engine to run (defaults to the full rule set)
        """
        self.engine = engine or default_engine

    def _read_file(self, filepath: str) -> Optional[bytes]:
        """Read file content safely."""
        try:
            with open(filepath, 'rb') as f:
                return f.read()
        except OSError as e:
            logger.error(f"Failed to read file {filepath}: {e}")
            return None

    def _write_file(self, filepath: str, content: bytes) -> bool:
        """Write file content safely."""
        try:
            Path(filepath).parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, 'wb') as f:
                f.write(content)
            return True
        except OSError as e:
            logger.error(f"Failed to write file {filepath}: {e}")
            return False

    def _target_path(self, filepath: str, dest: Optional[str], base: Optional[str]) -> str:
        if dest is None:
            return filepath
        if base is not None and Path(base).is_dir():
            relative = os.path.relpath(filepath, base)
        else:
            relative = Path(filepath).name
        return str(Path(dest) / relative)

    def format_file(self, filepath: str, settings: Settings, dest: Optional[str] = None,
                    base: Optional[str] = None, dry_run: bool = False) -> FormatResult:
        """
        Fix a file according to settings.

        Args:
            filepath: Path to the file to format
            settings: Settings resolved for that file
            dest: Directory to write fixed files into instead of in place
            base: Directory ``filepath`` is relative to inside ``dest``
            dry_run: Compute the result without writing it

        Returns:
            FormatResult object
        """
        if not os.path.exists(filepath):
            return FormatResult(False, f"File not found: {filepath}")

        original_content = self._read_file(filepath)
        if original_content is None:
            return FormatResult(False, f"Failed to read file: {filepath}")

        try:
            violations = self.engine.check_bytes(settings, original_content)
            content = self.engine.fix_bytes(settings, original_content)
            remaining = self.engine.check_bytes(settings, content)
        except ParseError as e:
            logger.error(f"Failed to parse {filepath}: {e}")
            return FormatResult(False, f"Failed to parse file: {filepath}")

        changes = len(violations) - len(remaining)
        target = self._target_path(filepath, dest, base)

        if content == original_content and target == filepath:
            return FormatResult(True, "No changes needed", 0, original_content, content, remaining)

        if dry_run:
            return FormatResult(True, f"Would fix {changes} violations", changes,
                                original_content, content, remaining)

        if self._write_file(target, content):
            return FormatResult(True, f"Successfully formatted file with {changes} changes",
                                changes, original_content, content, remaining)
        return FormatResult(False, f"Failed to write formatted content to: {target}")

    def format_multiple_files(self, filepaths: List[str], settings: Settings, dest: Optional[str] = None,
                              base: Optional[str] = None, dry_run: bool = False) -> Dict[str, FormatResult]:
        """
        Format multiple files.

        Args:
            filepaths: Files to format
            settings: Settings applied to every file
            dest: Optional destination directory
            base: Directory the file paths are relative to inside ``dest``
            dry_run: Compute results without writing them

        Returns:
            Dictionary mapping filepaths to their FormatResult objects
        """
        results = {}

        for filepath in filepaths:
            logger.info(f"Formatting file: {filepath}")
            result = self.format_file(filepath, settings, dest=dest, base=base, dry_run=dry_run)
            results[filepath] = result

            if result.success:
                logger.info(f"Formatted {filepath}: {result.message}")
            else:
                logger.error(f"Failed to format {filepath}: {result.message}")

        return results

    def get_format_preview(self, filepath: str, settings: Settings) -> Optional[str]:
        """
        Get a preview of what the formatted file would look like without changing it.

        Args:
            filepath: Path to the file
            settings: Settings resolved for that file

        Returns:
            Preview of formatted content or None if failed
        """
        result = self.format_file(filepath, settings, dry_run=True)
        if not result.success:
            return None
        return result.formatted_content.decode('utf-8', errors='replace')
