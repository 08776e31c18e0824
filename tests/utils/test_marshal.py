"""
Tests for script data marshalling.
"""

import json
import pytest

from omnifocus_kiwi.utils.marshal import bind_data, encode_data, escape_jxa


class TestEscapeJxa:
    """Tests for escape_jxa"""

    def test_plain_text_unchanged(self):
        assert escape_jxa("Call Bob") == "Call Bob"

    def test_single_quote(self):
        assert escape_jxa("Bob's task") == "Bob\\'s task"

    def test_backslash_escaped_before_quote(self):
        """Test a trailing backslash cannot swallow the closing quote"""
        assert escape_jxa("C:\\") == "C:\\\\"
        assert escape_jxa("\\'") == "\\\\\\'"

    def test_line_terminators_escaped(self):
        escaped = escape_jxa("a\nb\r\u2028c\u2029")
        assert escaped == "a\\nb\\r\\u2028c\\u2029"
        assert "\n" not in escaped
        assert "\r" not in escaped

    def test_rejects_non_strings(self):
        with pytest.raises(TypeError):
            escape_jxa(None)


class TestBindData:
    """Tests for structured injection"""

    def test_declares_data_before_script(self):
        """Test __DATA__ is declared on the first line"""
        script = bind_data("function run() {}", {"name": "x"})
        assert script == 'const __DATA__ = {"name":"x"};\nfunction run() {}'

    def test_round_trips_hostile_text(self):
        """Test arbitrary text decodes back unchanged"""
        nasty = "'\"`${x}`\\\n\u2028\u2029</script>"
        encoded = encode_data({"note": nasty})
        assert json.loads(encoded) == {"note": nasty}

    def test_line_separators_escaped(self):
        """Test U+2028/U+2029 never appear raw in the literal"""
        encoded = encode_data({"note": "a\u2028b\u2029c"})
        assert "\u2028" not in encoded
        assert "\u2029" not in encoded
        assert "\\u2028" in encoded

    def test_newlines_do_not_split_declaration(self):
        """Test the declaration stays on one line"""
        script = bind_data("function run() {}", {"note": "line1\nline2"})
        assert script.count("\n") == 1

    def test_null_and_booleans(self):
        assert encode_data({"a": None, "b": True, "c": False}) == '{"a":null,"b":true,"c":false}'

    def test_rejects_non_dict(self):
        with pytest.raises(TypeError):
            bind_data("x", ["not", "a", "dict"])
