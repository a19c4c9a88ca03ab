"""
Infer Aggregator Module

This module reduces the settings inferred from many files into a single
consensus configuration. Results are sorted by file identifier before they
are folded, so the outcome does not depend on the order in which files were
processed.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from .rules.base import first_most_common
from .settings import AggregateSettings, IndentStyle, Settings, is_unset_value

logger = logging.getLogger(__name__)

CATEGORICAL_FIELDS = ('charset', 'indent_style', 'end_of_line')
BOOLEAN_FIELDS = ('trim_trailing_whitespace', 'insert_final_newline')
SIZE_FIELDS = ('indent_size', 'tab_width')


def _strict_majority(values: Sequence[bool]) -> Optional[bool]:
    """The value held by more than half of ``values``, else None."""
    for candidate in (True, False):
        if sum(1 for value in values if value is candidate) * 2 > len(values):
            return candidate
    return None


def _sort_key(file_id: str, settings: Settings) -> Tuple:
    # Secondary key keeps duplicate identifiers deterministic
    return (file_id, sorted((k, str(v)) for k, v in settings.to_dict().items()))


def aggregate(results: Sequence[Settings], file_ids: Sequence[str]) -> AggregateSettings:
    """
    Reduce per-file inferred settings into one consensus configuration.

    Args:
        results: Inferred (partial) settings, one per file
        file_ids: Stable identifier of each file, parallel to ``results``

    Returns:
        AggregateSettings; fields without consensus are unset
    """
    if len(results) != len(file_ids):
        raise ValueError(f"got {len(results)} results for {len(file_ids)} file ids")

    ordered = [settings for _, settings in sorted(
        zip(file_ids, results), key=lambda pair: _sort_key(*pair)
    )]
    if not ordered:
        return AggregateSettings()

    values: Dict[str, Any] = {}

    for name in CATEGORICAL_FIELDS:
        values[name] = first_most_common([
            getattr(s, name) for s in ordered if getattr(s, name) is not None
        ])

    for name in BOOLEAN_FIELDS:
        values[name] = _strict_majority([
            getattr(s, name) for s in ordered if getattr(s, name) is not None
        ])

    for name in SIZE_FIELDS:
        values[name] = first_most_common([
            getattr(s, name) for s in ordered if not is_unset_value(getattr(s, name))
        ]) or 0

    # Size is moot for tab indentation
    if values['indent_style'] is IndentStyle.TAB:
        values['indent_size'] = 0

    values['max_line_length'] = max((s.max_line_length for s in ordered), default=0)

    logger.debug(f"Aggregated settings from {len(ordered)} files")
    return AggregateSettings(file_count=len(ordered), **values)


class InferAggregator:
    """
    Collector for per-file inference results.

    Results may be added in any order, from any producer; nothing is reduced
    until ``aggregate`` is called.
    """

    def __init__(self):
        """Initialize the aggregator."""
        self.results: Dict[str, Settings] = {}

    def add_result(self, file_id: str, settings: Settings):
        """
        Add the settings inferred from one file.

        Args:
            file_id: Stable identifier of the file (usually its path)
            settings: Settings inferred from that file
        """
        if file_id in self.results:
            logger.debug(f"Replacing inferred settings for {file_id}")
        self.results[file_id] = settings

    @property
    def file_count(self) -> int:
        return len(self.results)

    def aggregate(self) -> AggregateSettings:
        """Reduce every collected result into the consensus configuration."""
        file_ids: List[str] = list(self.results)
        return aggregate([self.results[file_id] for file_id in file_ids], file_ids)
