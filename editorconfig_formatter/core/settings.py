"""
Settings Module

This module holds the resolved per-file style configuration consumed by the
rules, the consensus configuration produced by inference, and the parsing of
editorconfig-style property values into both.
"""

from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, fields, replace
from enum import Enum
import logging

from .document import Charset

logger = logging.getLogger(__name__)

DEFAULT_TAB_WIDTH = 4

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


class InvalidSettingError(ValueError):
    """Raised when a property value cannot be interpreted."""

    def __init__(self, name: str, value: Any):
        super().__init__(f"invalid value for {name}: {value!r}")
        self.name = name
        self.value = value


class IndentStyle(Enum):
    """Indentation styles."""
    TAB = "tab"
    SPACE = "space"


class EndOfLine(Enum):
    """Configured line endings."""
    LF = "lf"
    CRLF = "crlf"
    CR = "cr"


@dataclass(frozen=True)
class Settings:
    """
    Resolved style configuration for one file.

    ``None`` and ``0`` mean "unset": the matching rule is trivially satisfied.
    """
    charset: Optional[Charset] = None
    indent_style: Optional[IndentStyle] = None
    indent_size: int = 0
    tab_width: int = 0
    end_of_line: Optional[EndOfLine] = None
    trim_trailing_whitespace: Optional[bool] = None
    insert_final_newline: Optional[bool] = None
    max_line_length: int = 0

    @property
    def effective_tab_width(self) -> int:
        """Width of a tab stop, 0 when neither tab_width nor indent_size is set."""
        return self.tab_width or self.indent_size

    @property
    def rendering_tab_width(self) -> int:
        """Width used when indentation has to be rewritten."""
        return self.effective_tab_width or DEFAULT_TAB_WIDTH

    @property
    def is_unset(self) -> bool:
        return all(is_unset_value(getattr(self, f.name)) for f in fields(Settings))

    @classmethod
    def from_dict(cls, properties: Mapping[str, Any]) -> "Settings":
        """
        Build Settings from editorconfig-style properties.

        Values may be strings as found in an ``.editorconfig`` file, or
        already-typed ints and bools. ``unset`` clears a property and unknown
        keys are ignored.

        Args:
            properties: Mapping of property name to value

        Returns:
            Settings object
        """
        values: Dict[str, Any] = {}
        indent_size_is_tab = False

        for key, value in properties.items():
            name = str(key).lower()
            parser = _PARSERS.get(name)
            if parser is None:
                logger.debug(f"Ignoring unknown property: {name}")
                continue
            if isinstance(value, str) and value.strip().lower() == "unset":
                continue
            if name == "indent_size" and isinstance(value, str) and value.strip().lower() == "tab":
                indent_size_is_tab = True
                continue
            values[name] = parser(name, value)

        # indent_size = tab defers to tab_width
        if indent_size_is_tab:
            values["indent_size"] = values.get("tab_width", 0)

        return cls(**values)

    def merge(self, other: "Settings") -> "Settings":
        """Return a copy with every field set in ``other`` overriding this one."""
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(Settings)
            if not is_unset_value(getattr(other, f.name))
        }
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Export as plain values, using '' and 0 for unset fields."""
        result = {}
        for f in fields(Settings):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif value is None:
                value = ""
            result[f.name] = value
        return result


@dataclass(frozen=True)
class AggregateSettings(Settings):
    """Consensus configuration inferred across ``file_count`` documents."""
    file_count: int = 0

    def to_ini(self, root: bool = False, section: str = "*") -> str:
        """Render the fields that reached consensus as an editorconfig section."""
        lines = []
        if root:
            lines.extend(["root = true", ""])
        lines.append(f"[{section}]")
        for name, value in self.to_dict().items():
            if value == "" or is_unset_value(value):
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            lines.append(f"{name} = {value}")
        return "\n".join(lines) + "\n"


def is_unset_value(value: Any) -> bool:
    """True for the unset sentinels: None, and 0 for integer fields."""
    if value is None:
        return True
    return isinstance(value, int) and not isinstance(value, bool) and value == 0


def _parse_enum(enum_cls):
    def parser(name: str, value: Any):
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            raise InvalidSettingError(name, value) from None
    return parser


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidSettingError(name, value)
    try:
        number = int(str(value).strip()) if not isinstance(value, int) else value
    except ValueError:
        raise InvalidSettingError(name, value) from None
    if number < 0:
        raise InvalidSettingError(name, value)
    return number


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise InvalidSettingError(name, value)


def _parse_max_line_length(name: str, value: Any) -> int:
    if isinstance(value, str) and value.strip().lower() == "off":
        return 0
    return _parse_int(name, value)


_PARSERS = {
    "charset": _parse_enum(Charset),
    "indent_style": _parse_enum(IndentStyle),
    "indent_size": _parse_int,
    "tab_width": _parse_int,
    "end_of_line": _parse_enum(EndOfLine),
    "trim_trailing_whitespace": _parse_bool,
    "insert_final_newline": _parse_bool,
    "max_line_length": _parse_max_line_length,
}
