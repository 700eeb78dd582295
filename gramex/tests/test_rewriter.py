"""Tests for core rewriter functions."""

import pytest
from gramex.rewriter import (
    Rule, is_nonterminal, is_terminal_complete,
    find_occurrence, occurrences, replace_at, bracket,
    apply_rule, unapply_rule,
)


class TestRule:
    """Tests for the Rule class."""

    def test_fields(self):
        """Pattern and replacement are exposed."""
        rule = Rule("S", "aSb")
        assert rule.pattern == "S"
        assert rule.replacement == "aSb"
        assert not rule.is_epsilon

    def test_epsilon(self):
        """Empty replacement makes an epsilon rule."""
        assert Rule("S", "").is_epsilon
        assert Rule("S").is_epsilon

    def test_empty_pattern_rejected(self):
        """A rule must have a pattern."""
        with pytest.raises(ValueError):
            Rule("", "a")

    def test_non_string_rejected(self):
        """Pattern and replacement must be strings."""
        with pytest.raises(TypeError):
            Rule("S", None)

    def test_immutable(self):
        """Rule fields cannot be reassigned."""
        rule = Rule("S", "a")
        with pytest.raises(AttributeError):
            rule.pattern = "A"

    def test_equality_and_hash(self):
        """Rules compare by value."""
        assert Rule("S", "a") == Rule("S", "a")
        assert Rule("S", "a") != Rule("S", "b")
        assert len({Rule("S", "a"), Rule("S", "a")}) == 1

    def test_unpack(self):
        """Rules unpack as (pattern, replacement)."""
        pattern, replacement = Rule("AB", "BA")
        assert (pattern, replacement) == ("AB", "BA")
        assert Rule("AB", "BA").to_pair() == ("AB", "BA")

    def test_str(self):
        """str() uses grammar text syntax."""
        assert str(Rule("S", "aSb")) == "S->aSb"
        assert str(Rule("S", "")) == "S->~"

    def test_exported_from_package(self):
        """The package and the engine share the one Rule class."""
        import gramex
        from gramex import engine
        assert gramex.Rule is Rule
        assert engine.Rule is Rule
        assert Rule.__module__ == "gramex.rewriter"


class TestClassification:
    """Tests for nonterminal/terminal classification."""

    def test_uppercase_is_nonterminal(self):
        assert is_nonterminal("S") == True
        assert is_nonterminal("A") == True

    def test_lowercase_is_terminal(self):
        assert is_nonterminal("a") == False

    def test_non_letters_are_terminal(self):
        """Digits, punctuation and spaces have no case and are terminal."""
        for symbol in "0 +(~":
            assert is_nonterminal(symbol) == False

    def test_terminal_complete(self):
        assert is_terminal_complete("aabb") == True
        assert is_terminal_complete("aSb") == False
        assert is_terminal_complete("a+1") == True

    def test_empty_is_terminal_complete(self):
        assert is_terminal_complete("") == True


class TestFindOccurrence:
    """Tests for find_occurrence."""

    def test_found(self):
        assert find_occurrence("aSb", "S") == 1

    def test_not_found(self):
        assert find_occurrence("aSb", "A") == -1

    def test_from_offset(self):
        """Search starts at the given offset."""
        assert find_occurrence("SaS", "S", 1) == 2
        assert find_occurrence("SaS", "S", 3) == -1

    def test_overlapping_resume(self):
        """Resuming one past a match start finds the overlapping match."""
        assert find_occurrence("aaa", "aa", 0) == 0
        assert find_occurrence("aaa", "aa", 1) == 1
        assert find_occurrence("aaa", "aa", 2) == -1

    def test_start_past_end(self):
        """Past the end nothing matches, not even the empty string."""
        assert find_occurrence("ab", "", 2) == 2
        assert find_occurrence("ab", "", 3) == -1
        assert find_occurrence("ab", "b", 10) == -1


class TestOccurrences:
    """Tests for occurrences (overlap-aware scanning)."""

    def test_single(self):
        assert list(occurrences("aSb", "S")) == [1]

    def test_multiple(self):
        assert list(occurrences("AA", "A")) == [0, 1]

    def test_overlapping(self):
        """'aa' in 'aaa' occurs twice."""
        assert list(occurrences("aaa", "aa")) == [0, 1]
        assert list(occurrences("AAAA", "AA")) == [0, 1, 2]

    def test_none(self):
        assert list(occurrences("abc", "S")) == []

    def test_empty_sub(self):
        """The empty string occurs at every position, and scanning ends."""
        assert list(occurrences("ab", "")) == [0, 1, 2]
        assert list(occurrences("", "")) == [0]


class TestReplaceAt:
    """Tests for replace_at."""

    def test_replace(self):
        assert replace_at("aSb", 1, "S", "aSb") == "aaSbb"

    def test_only_that_occurrence(self):
        """Only the occurrence at offset is replaced."""
        assert replace_at("AA", 1, "A", "x") == "Ax"
        assert replace_at("AA", 0, "A", "x") == "xA"

    def test_overlapping_occurrence(self):
        assert replace_at("aaa", 1, "aa", "b") == "ab"

    def test_erase(self):
        assert replace_at("aSb", 1, "S", "") == "ab"

    def test_insert_empty(self):
        """Replacing the empty string inserts."""
        assert replace_at("ab", 1, "", "S") == "aSb"
        assert replace_at("ab", 2, "", "S") == "abS"

    def test_mismatch(self):
        with pytest.raises(ValueError):
            replace_at("aSb", 0, "S", "x")

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            replace_at("ab", 2, "b", "x")
        with pytest.raises(ValueError):
            replace_at("ab", -1, "b", "x")

    def test_original_untouched(self):
        sequence = "aSb"
        replace_at(sequence, 1, "S", "c")
        assert sequence == "aSb"


class TestBracket:
    """Tests for bracket."""

    def test_span(self):
        assert bracket("aSb", 1, 2) == "a[S]b"

    def test_whole(self):
        assert bracket("S", 0, 1) == "[S]"

    def test_empty_span(self):
        assert bracket("ab", 1, 1) == "a[]b"


class TestApplyRule:
    """Tests for apply_rule / unapply_rule."""

    def test_apply(self):
        assert apply_rule("aSb", 1, Rule("S", "aSb")) == "aaSbb"

    def test_unapply(self):
        assert unapply_rule("ab", 1, Rule("A", "b")) == "aA"

    def test_unapply_epsilon(self):
        """An epsilon rule run backward inserts its pattern."""
        assert unapply_rule("ab", 1, Rule("S", "")) == "aSb"
