"""
Unit Tests for Lexical Overlap
==============================
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from mobiya.services.overlap_scorer import (
    OverlapScorer,
    has_meaningful_overlap,
    has_strong_lexical_overlap,
    normalize_text,
    score_overlap,
)


class TestNormalization:

    def test_normalize_text(self):
        assert normalize_text("  What   IS\tthis? ") == "what is this?"
        assert normalize_text(None) == ""
        assert normalize_text("What\u2019s new") == "what's new"

    def test_tokenize_drops_stopwords_and_possessives(self):
        """Possessive 's, punctuation and stopwords are removed"""
        tokens = OverlapScorer().tokenize("What is Mobiloitte's contact information?")
        assert tokens == ["mobiloitte", "contact", "information"]

    def test_curly_apostrophes_are_possessives(self):
        """Typographic apostrophes leave no stray 's' token"""
        tokens = OverlapScorer().tokenize("What\u2019s Mobiloitte\u2019s annual turnover?")
        assert tokens == ["mobiloitte", "annual", "turnover"]

    def test_brand_spellings_share_a_concept(self):
        scorer = OverlapScorer()
        assert scorer.concepts("mobiloite") == scorer.concepts("Mobiloitte's")
        assert scorer.concepts("mobilo") == scorer.concepts("mobiloitte")


class TestStrongOverlap:
    """Tests for has_strong_lexical_overlap"""

    def test_typo_and_synonym_match(self):
        """Misspelled brand plus 'information' matches the contact question"""
        assert has_strong_lexical_overlap(
            "give me some information of mobiloite private limited??",
            "What is Mobiloitte's contact information?"
        ) is True

    def test_expanded_generic_reference_matches(self):
        """'hq' and 'headquarters' are the same concept"""
        assert has_strong_lexical_overlap(
            "this company hq (Mobiloitte)",
            "Where is Mobiloitte's headquarters located?"
        ) is True

    def test_services_synonyms(self):
        assert has_strong_lexical_overlap(
            "Mobiloite services for clients",
            "What services does Mobiloitte provide to its clients?"
        ) is True

    def test_core_keyword_must_be_shared(self):
        """A query about founders never matches a services question"""
        assert has_strong_lexical_overlap(
            "who is the founder of mobiloitte company",
            "What services does Mobiloitte provide?"
        ) is False

    def test_brand_alone_is_not_enough(self):
        """One shared concept is below the threshold"""
        assert has_strong_lexical_overlap(
            "mobiloitte",
            "What services does Mobiloitte provide?"
        ) is False

    def test_empty_inputs(self):
        assert has_strong_lexical_overlap("", "What services does Mobiloitte provide?") is False
        assert has_strong_lexical_overlap("services", None) is False
        assert has_strong_lexical_overlap("what is the", "the is what") is False

    def test_custom_threshold(self):
        """min_overlap is configurable"""
        scorer = OverlapScorer(min_overlap=3)
        result = scorer.score(
            "this company hq (Mobiloitte)",
            "Where is Mobiloitte's headquarters located?"
        )
        assert result.matched is False


class TestMeaningfulOverlap:

    def test_single_shared_concept(self):
        assert has_meaningful_overlap("mobiloitte", "What services does Mobiloitte provide?") is True

    def test_nothing_shared(self):
        assert has_meaningful_overlap("weather today", "What services does Mobiloitte provide?") is False


class TestCoreKeywordThreshold:
    """A core keyword in the query raises the required overlap by one"""

    def test_two_core_concepts_are_not_enough(self):
        assert has_strong_lexical_overlap("phone number", "What is the phone number for sales?") is False

    def test_three_shared_concepts_match(self):
        assert has_strong_lexical_overlap(
            "Mobiloitte sales phone number",
            "What is the phone number for sales?"
        ) is True

    def test_brand_and_service_alone_fall_through(self):
        """'services' is a core keyword, so brand plus services goes to retrieval"""
        assert has_strong_lexical_overlap(
            "Mobiloite services info",
            "What services does Mobiloitte provide?"
        ) is False

    def test_threshold_without_core_keyword(self):
        """Two shared concepts suffice when no core keyword is present"""
        assert has_strong_lexical_overlap(
            "casual leave policy",
            "How many casual leave days do employees get?"
        ) is True


class TestCurlyApostrophes:

    def test_unrelated_questions_do_not_match(self):
        """A stray 's' from a typographic apostrophe is not shared vocabulary"""
        assert has_strong_lexical_overlap(
            "what’s Mobiloitte culture like",
            "What’s Mobiloitte’s annual turnover?"
        ) is False

    def test_curly_and_straight_apostrophes_agree(self):
        assert has_strong_lexical_overlap(
            "Mobiloitte’s leadership team",
            "Who is on Mobiloitte's leadership team?"
        ) is True


class TestScoreOverlap:
    """Tests for score_overlap"""

    def test_returns_overlap_result(self):
        result = score_overlap("this company hq (Mobiloitte)", "Where is Mobiloitte's headquarters located?")

        assert result.matched is True
        assert result.query == "this company hq (Mobiloitte)"
        assert result.candidate == "Where is Mobiloitte's headquarters located?"

    def test_none_inputs_become_empty_strings(self):
        result = score_overlap(None, None)

        assert result.matched is False
        assert result.query == ""
        assert result.candidate == ""
