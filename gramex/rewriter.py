"""
Core rewriter module for string-rewriting grammars.

GRAMEX - Grammar Exploration by String Rewriting

This module provides symbol classification, occurrence scanning and
single-occurrence rewriting over plain strings of one-character symbols.
Everything here is side-effect free: each rewrite returns a new string.
"""

from typing import Iterator, Tuple

# Type aliases
SequenceType = str

# Display markers wrapped around a matched span
OPEN_MARK = "["
CLOSE_MARK = "]"

# Spelling of the empty replacement in grammar text
EMPTY_MARKER = "~"


# ============================================================
# Rule Class
# ============================================================

class Rule:
    """
    An immutable rewrite rule: pattern -> replacement.

    The pattern is never empty. The replacement may be empty, which
    makes the rule an epsilon production.

    Rules compare and hash by value, and unpack as pairs:

        rule = Rule("S", "aSb")
        pattern, replacement = rule
        str(rule)            # => "S->aSb"
        str(Rule("S", ""))   # => "S->~"
    """

    __slots__ = ('_pattern', '_replacement')

    def __init__(self, pattern: str, replacement: str = ""):
        if not isinstance(pattern, str) or not isinstance(replacement, str):
            raise TypeError("Rule pattern and replacement must be strings")
        if not pattern:
            raise ValueError("Rule pattern must not be empty")
        self._pattern = pattern
        self._replacement = replacement

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def is_epsilon(self) -> bool:
        """True if the rule erases its pattern."""
        return self._replacement == ""

    def __iter__(self):
        return iter((self._pattern, self._replacement))

    def __eq__(self, other):
        if isinstance(other, Rule):
            return (self._pattern, self._replacement) == (other._pattern, other._replacement)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._pattern, self._replacement))

    def __str__(self) -> str:
        return f"{self._pattern}->{self._replacement or EMPTY_MARKER}"

    def __repr__(self) -> str:
        return f"Rule({self._pattern!r}, {self._replacement!r})"

    def to_pair(self) -> Tuple[str, str]:
        """Return (pattern, replacement)."""
        return (self._pattern, self._replacement)


# ============================================================
# Symbol classification
# ============================================================

def is_nonterminal(symbol: str) -> bool:
    """
    True if symbol is (or, for a longer string, contains) a nonterminal.

    Nonterminals are uppercase letters: lowercasing them changes the text.
    Digits, punctuation and lowercase letters are terminal.

    Examples:
        is_nonterminal("S")   # => True
        is_nonterminal("a")   # => False
        is_nonterminal("aSb") # => True
    """
    return symbol.lower() != symbol


def is_terminal_complete(sequence: SequenceType) -> bool:
    """True if sequence contains no nonterminal symbol. "" is terminal-complete."""
    return not is_nonterminal(sequence)


# ============================================================
# Occurrence scanning
# ============================================================

def find_occurrence(sequence: SequenceType, sub: str, start: int = 0) -> int:
    """
    Find the next occurrence of sub at or after start.

    Returns the index, or -1 if there is none. A start past the end of
    the sequence never matches, not even for an empty sub.

    Examples:
        find_occurrence("aaa", "aa")     # => 0
        find_occurrence("aaa", "aa", 1)  # => 1
        find_occurrence("aaa", "aa", 2)  # => -1
    """
    if start > len(sequence):
        return -1
    return sequence.find(sub, start)


def occurrences(sequence: SequenceType, sub: str) -> Iterator[int]:
    """
    Yield every occurrence of sub in ascending order, overlaps included.

    After a match at i the scan resumes at i + 1, not at the end of the
    match, so "aa" in "aaa" yields both 0 and 1. An empty sub occurs at
    every position from 0 to len(sequence).
    """
    pos = find_occurrence(sequence, sub, 0)
    while pos != -1:
        yield pos
        pos = find_occurrence(sequence, sub, pos + 1)


# ============================================================
# Rewriting
# ============================================================

def replace_at(sequence: SequenceType, offset: int, old: str, new: str) -> SequenceType:
    """
    Replace the single occurrence of old that starts at offset.

    Text before offset and after the matched span is preserved verbatim.

    Raises:
        ValueError: if old does not occur at offset.

    Examples:
        replace_at("aSb", 1, "S", "aSb")  # => "aaSbb"
        replace_at("AA", 1, "A", "x")     # => "Ax"
    """
    end = offset + len(old)
    if offset < 0 or end > len(sequence) or sequence[offset:end] != old:
        raise ValueError(f"'{old}' does not occur in '{sequence}' at offset {offset}")
    return sequence[:offset] + new + sequence[end:]


def bracket(sequence: SequenceType, start: int, end: int) -> str:
    """
    Wrap sequence[start:end] in bracket markers for display.

    Example:
        bracket("aSb", 1, 2)  # => "a[S]b"
        bracket("ab", 1, 1)   # => "a[]b"
    """
    return sequence[:start] + OPEN_MARK + sequence[start:end] + CLOSE_MARK + sequence[end:]


def apply_rule(sequence: SequenceType, offset: int, rule: Rule) -> SequenceType:
    """Apply rule forward at offset: its pattern becomes its replacement."""
    return replace_at(sequence, offset, rule.pattern, rule.replacement)


def unapply_rule(sequence: SequenceType, offset: int, rule: Rule) -> SequenceType:
    """Apply rule backward at offset: its replacement becomes its pattern."""
    return replace_at(sequence, offset, rule.replacement, rule.pattern)
