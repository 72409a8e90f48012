"""
Unit Tests for Query Expansion
==============================
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from mobiya.services.query_expander import QueryExpander, expand_query, single_drop_variants


class TestSingleDropVariants:

    def test_variants(self):
        """Every one-character deletion is generated"""
        variants = single_drop_variants("abc")
        assert variants == {"bc", "ac", "ab"}

    def test_brand_variants_include_common_typo(self):
        assert "mobiloite" in single_drop_variants("Mobiloitte")


class TestQueryExpander:
    """Tests for brand expansion"""

    def test_official_name_unchanged(self):
        """Messages that already name the brand are untouched"""
        assert expand_query("Mobiloitte services") == "Mobiloitte services"
        assert expand_query("what does MOBILOITTE do") == "what does MOBILOITTE do"

    def test_typo_expanded(self):
        """A misspelled brand gets the canonical name appended"""
        assert expand_query("mobiloite services") == "mobiloite services (Mobiloitte)"

    def test_extra_typo_expanded(self):
        """Configured typos outside the single-drop set are recognised"""
        assert expand_query("mobiloittee careers") == "mobiloittee careers (Mobiloitte)"

    def test_generic_reference_expanded(self):
        """Generic company referents get the canonical name appended"""
        assert expand_query("this company hq") == "this company hq (Mobiloitte)"
        assert expand_query("Tell me about your organization") == "Tell me about your organization (Mobiloitte)"

    def test_unrelated_message_unchanged(self):
        assert expand_query("what are the office hours") == "what are the office hours"

    def test_idempotent(self):
        """Expanding an expanded query changes nothing"""
        once = expand_query("mobiloite services")
        assert expand_query(once) == once

    def test_expanded_result_fields(self):
        """expand() reports what happened"""
        result = QueryExpander().expand("the company address")

        assert result.was_expanded is True
        assert result.original == "the company address"
        assert result.expanded.startswith(result.original)

    def test_custom_brand(self):
        """Brand and typos come from the constructor when given"""
        expander = QueryExpander(brand_name="Acme", extra_typos=[])
        assert expander.expand("acm pricing").expanded == "acm pricing (Acme)"
        assert expander.expand("Acme pricing").was_expanded is False
