"""
Unit tests for settings parsing and export.
"""

import pytest

from editorconfig_formatter.core.document import Charset
from editorconfig_formatter.core.settings import (
    AggregateSettings, EndOfLine, IndentStyle, InvalidSettingError, Settings, is_unset_value
)


class TestFromDict:
    """Test building settings from editorconfig properties."""

    def test_string_values(self):
        """Test values as they appear in an .editorconfig file."""
        settings = Settings.from_dict({
            'charset': 'utf-8-bom',
            'indent_style': 'Space',
            'indent_size': '2',
            'end_of_line': 'CRLF',
            'trim_trailing_whitespace': 'true',
            'insert_final_newline': 'false',
            'max_line_length': '80',
        })

        assert settings.charset is Charset.UTF_8_BOM
        assert settings.indent_style is IndentStyle.SPACE
        assert settings.indent_size == 2
        assert settings.end_of_line is EndOfLine.CRLF
        assert settings.trim_trailing_whitespace is True
        assert settings.insert_final_newline is False
        assert settings.max_line_length == 80

    def test_typed_values(self):
        """Test already-typed values, as loaded from JSON."""
        settings = Settings.from_dict({'tab_width': 8, 'insert_final_newline': True})

        assert settings.tab_width == 8
        assert settings.insert_final_newline is True

    def test_unset_and_unknown_keys(self):
        """Test 'unset' values and unknown properties are skipped."""
        settings = Settings.from_dict({'indent_style': 'unset', 'quote_type': 'single'})
        assert settings.is_unset

    def test_indent_size_tab(self):
        """Test indent_size = tab takes the tab width."""
        assert Settings.from_dict({'indent_size': 'tab', 'tab_width': '8'}).indent_size == 8
        assert Settings.from_dict({'indent_size': 'tab'}).indent_size == 0

    def test_max_line_length_off(self):
        """Test 'off' disables the line length limit."""
        assert Settings.from_dict({'max_line_length': 'off'}).max_line_length == 0

    @pytest.mark.parametrize("properties", [
        {'indent_style': 'tabs'},
        {'indent_size': 'four'},
        {'indent_size': -2},
        {'indent_size': True},
        {'trim_trailing_whitespace': 'maybe'},
        {'charset': 'ebcdic'},
    ])
    def test_invalid_values(self, properties):
        """Test malformed values raise InvalidSettingError."""
        with pytest.raises(InvalidSettingError) as excinfo:
            Settings.from_dict(properties)
        assert excinfo.value.name in properties


class TestSettings:
    """Test Settings helpers."""

    def test_defaults_are_unset(self):
        """Test a default Settings has nothing configured."""
        assert Settings().is_unset
        assert not Settings(insert_final_newline=False).is_unset

    def test_tab_width_fallbacks(self):
        """Test tab width falls back to indent_size, then the default."""
        assert Settings(tab_width=8, indent_size=2).effective_tab_width == 8
        assert Settings(indent_size=2).effective_tab_width == 2
        assert Settings().effective_tab_width == 0
        assert Settings().rendering_tab_width == 4

    def test_merge(self):
        """Test set fields override, unset fields do not."""
        base = Settings(indent_size=4, trim_trailing_whitespace=True)
        merged = base.merge(Settings(trim_trailing_whitespace=False, max_line_length=100))

        assert merged.indent_size == 4
        assert merged.trim_trailing_whitespace is False
        assert merged.max_line_length == 100

    def test_to_dict(self):
        """Test the plain export of a partially set configuration."""
        exported = Settings(indent_style=IndentStyle.TAB, insert_final_newline=True).to_dict()

        assert exported == {
            'charset': '',
            'indent_style': 'tab',
            'indent_size': 0,
            'tab_width': 0,
            'end_of_line': '',
            'trim_trailing_whitespace': '',
            'insert_final_newline': True,
            'max_line_length': 0,
        }

    def test_is_unset_value(self):
        """Test the unset sentinels."""
        assert is_unset_value(None)
        assert is_unset_value(0)
        assert not is_unset_value(False)
        assert not is_unset_value(4)


class TestAggregateSettings:
    """Test .editorconfig rendering."""

    def test_to_ini(self):
        """Test unset fields are omitted and booleans are lowercase."""
        aggregated = AggregateSettings(
            indent_style=IndentStyle.SPACE,
            indent_size=2,
            trim_trailing_whitespace=False,
            file_count=3,
        )

        assert aggregated.to_ini() == (
            "[*]\n"
            "indent_style = space\n"
            "indent_size = 2\n"
            "trim_trailing_whitespace = false\n"
        )

    def test_to_ini_root(self):
        """Test the root marker precedes the section."""
        assert AggregateSettings().to_ini(root=True) == "root = true\n\n[*]\n"

    def test_file_count_is_not_exported(self):
        """Test to_dict only carries editorconfig properties."""
        assert 'file_count' not in AggregateSettings(file_count=2).to_dict()
