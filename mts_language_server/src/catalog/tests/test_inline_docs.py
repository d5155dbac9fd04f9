"""
Tests for catalog/inline_docs.py - inline UDF documentation.
"""

from mts_language_server.src.catalog.inline_docs import (
    DocStatus,
    extract_documentation,
)
from mts_language_server.src.catalog.registry import ArityRange


class TestExtractDocumentation:
    """Tests for extract_documentation."""

    def test_absent(self):
        result = extract_documentation("Just some text [r: 1]")
        assert result.status == DocStatus.ABSENT
        assert result.definition is None
        assert not result.found

    def test_found_in_comment(self):
        text = """<!--
        {"name": "heal",
         "description": "Heals a token.",
         "usages": [{"parameters": {"amount": {"type": "number"}}}]}
        -->
        [h: x = 1]"""
        result = extract_documentation(text)
        assert result.found
        assert result.definition.name == "heal"
        assert result.definition.description == "Heals a token."
        assert result.definition.arity == ArityRange(1, 1)

    def test_found_on_single_line(self):
        result = extract_documentation('{"description": "Adds things."}', name="addAll")
        assert result.status == DocStatus.FOUND
        assert result.definition.name == "addAll"
        assert result.definition.usages == ()

    def test_malformed_json(self):
        result = extract_documentation("<!-- {not json} -->")
        assert result.status == DocStatus.MALFORMED
        assert result.definition is None
        assert result.error

    def test_malformed_usages(self):
        result = extract_documentation('<!-- {"name": "f", "usages": "oops"} -->')
        assert result.status == DocStatus.MALFORMED

    def test_empty_text(self):
        assert extract_documentation("").status == DocStatus.ABSENT
