"""
Style Scanner Module

This module reads files from disk and runs the rule engine over them in
check or infer mode, collecting one result per file. A file that cannot be
read or parsed is recorded as failed without stopping the rest of the batch.
"""

import os
from typing import List, Dict, Iterable, Optional
from pathlib import Path
import logging

from .document import ParseError
from .engine import RuleEngine, default_engine
from .aggregator import InferAggregator
from .settings import AggregateSettings, Settings
from .rules import Violation

logger = logging.getLogger(__name__)


class ScanResult:
    """Represents the result of checking a single file."""

    def __init__(self, filepath: str, status: str, violations: List[Violation] = None, error: str = ""):
        self.filepath = filepath
        self.status = status  # 'OK', 'Error' or 'Failed'
        self.violations = violations or []
        self.error = error
        self.violation_count = len(self.violations)

    def __repr__(self):
        return f"ScanResult(filepath='{self.filepath}', status='{self.status}', violations={self.violation_count})"


class StyleScanner:
    """
    Scanner class for checking files against style settings.

    This class provides methods to:
    - Collect files from individual paths or entire directories
    - Check each file and collect structured violations
    - Infer a consensus configuration from a set of files
    - Generate summary statistics
    """

    def __init__(self, engine: Optional[RuleEngine] = None):
        """
        Initialize the scanner.

        Args:
            engine: Rule engine to run (defaults to the full rule set)
        """
        self.engine = engine or default_engine
        self.results: List[ScanResult] = []

    def collect_files(self, path: str, recursive: bool = True) -> List[str]:
        """
        Expand a path into the files it denotes.

        Hidden files and directories below ``path`` are skipped.

        Args:
            path: File or directory path
            recursive: Whether to descend into subdirectories

        Returns:
            Sorted list of file paths
        """
        root = Path(path)
        if root.is_file():
            return [str(root)]
        if not root.is_dir():
            logger.error(f"Path not found: {path}")
            return []

        files = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith('.')) if recursive else []
            files.extend(
                os.path.join(dirpath, name) for name in filenames if not name.startswith('.')
            )

        logger.info(f"Found {len(files)} files under {path}")
        return sorted(files)

    def _read_file(self, filepath: str) -> bytes:
        with open(filepath, 'rb') as f:
            return f.read()

    def scan_file(self, filepath: str, settings: Settings) -> ScanResult:
        """
        Check a single file.

        Args:
            filepath: Path to the file
            settings: Settings resolved for that file

        Returns:
            ScanResult object
        """
        try:
            data = self._read_file(filepath)
            violations = self.engine.check_bytes(settings, data)
        except (OSError, ParseError) as e:
            logger.error(f"Failed to check {filepath}: {e}")
            return ScanResult(filepath, "Failed", error=str(e))

        status = "Error" if violations else "OK"
        return ScanResult(filepath, status, violations)

    def scan_paths(self, paths: Iterable[str], settings: Settings, recursive: bool = True) -> List[ScanResult]:
        """
        Check every file under the given paths.

        Args:
            paths: Files or directories
            settings: Settings applied to every file
            recursive: Whether to scan subdirectories

        Returns:
            List of ScanResult objects
        """
        results = []
        for path in paths:
            for filepath in self.collect_files(path, recursive):
                results.append(self.scan_file(filepath, settings))

        self.results = results
        return results

    def infer_paths(self, paths: Iterable[str], recursive: bool = True) -> AggregateSettings:
        """
        Infer the consensus settings followed by the files under ``paths``.

        Unreadable files are logged and left out of the consensus.
        """
        aggregator = InferAggregator()
        for path in paths:
            for filepath in self.collect_files(path, recursive):
                try:
                    inferred = self.engine.infer_bytes(self._read_file(filepath))
                except (OSError, ParseError) as e:
                    logger.error(f"Failed to infer settings from {filepath}: {e}")
                    continue
                aggregator.add_result(filepath, inferred)

        logger.info(f"Inferred settings from {aggregator.file_count} files")
        return aggregator.aggregate()

    def get_summary(self) -> Dict:
        """
        Get summary statistics of scan results.

        Returns:
            Dictionary with summary statistics
        """
        if not self.results:
            return {}

        total_files = len(self.results)
        ok_files = len([r for r in self.results if r.status == "OK"])
        failed_files = len([r for r in self.results if r.status == "Failed"])
        error_files = total_files - ok_files - failed_files
        total_violations = sum(r.violation_count for r in self.results)

        # Violation breakdown per rule
        rules = {}
        for result in self.results:
            for violation in result.violations:
                rules[violation.rule] = rules.get(violation.rule, 0) + 1

        return {
            'total_files': total_files,
            'ok_files': ok_files,
            'error_files': error_files,
            'failed_files': failed_files,
            'total_violations': total_violations,
            'unfixable_violations': sum(len(self.engine.unfixable(r.violations)) for r in self.results),
            'rules': rules,
            'success_rate': (ok_files / total_files * 100) if total_files > 0 else 0
        }

    def filter_results(self, status: Optional[str] = None, rule: Optional[str] = None) -> List[ScanResult]:
        """
        Filter scan results by status or rule.

        Args:
            status: Filter by status ('OK', 'Error' or 'Failed')
            rule: Filter by the name of a violated rule

        Returns:
            Filtered list of ScanResult objects
        """
        filtered = self.results

        if status:
            filtered = [r for r in filtered if r.status == status]

        if rule:
            filtered = [r for r in filtered if any(v.rule == rule for v in r.violations)]

        return filtered
