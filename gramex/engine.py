"""
Grammar and Rule Loader for GRAMEX

GRAMEX - Grammar Exploration by String Rewriting

This module provides facilities for loading rewriting rules from external
files, supporting both the grammar text format and JSON, and the Grammar
class that holds an ordered rule set and runs searches over it.

Text Format (gram.txt files):
    // Comment
    LHS->RHS1|RHS2|...

    Each |-separated alternative becomes one rule (LHS, alternative).
    A lone ~ alternative is the empty replacement (epsilon production).
    Lines without exactly one -> are skipped.

    Examples:
    S->aSb|~
    AB->BA

Symbols are single characters. Uppercase letters are nonterminals,
everything else (lowercase letters, digits, punctuation) is terminal.
Spaces inside a rule are symbols too.

JSON Format:
    {
        "name": "anbn",
        "description": "a^n b^n",
        "rules": [
            {"pattern": "S", "replacement": "aSb"},
            or just ["S", ""]
        ]
    }
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Union

from .rewriter import Rule, SequenceType, EMPTY_MARKER, is_nonterminal
from .search import (
    SearchBudget, SearchResult, DEFAULT_DEPTH, DEFAULT_START_SYMBOL, FORWARD,
    generate, find_path, search,
)

COMMENT_PREFIX = "//"
ARROW = "->"
ALTERNATIVE = "|"


# ============================================================
# Text format
# ============================================================

def parse_rule_line(line: str) -> Optional[List[Rule]]:
    """
    Parse a single grammar line.

    Formats:
        LHS->RHS
        LHS->RHS1|RHS2|~

    Blanks around the line are dropped before anything else, so an indented
    "//" line is a comment and "S->a " reads as S->a. Grammar files that
    need a space symbol at either end of a line cannot express it; spaces
    between other symbols are kept.

    Returns: list of rules, one per alternative, or None if the line is a
    comment or not a rule.

    Raises:
        ValueError: if the left-hand side is empty
    """
    line = line.strip()

    if not line or line.startswith(COMMENT_PREFIX):
        return None

    parts = line.split(ARROW)
    if len(parts) != 2:
        return None

    pattern, alternatives = parts
    rules = []
    for alternative in alternatives.split(ALTERNATIVE):
        if alternative == EMPTY_MARKER:
            alternative = ""
        rules.append(Rule(pattern, alternative))
    return rules


def load_rules_from_text(text: str) -> List[Rule]:
    """
    Load rules from grammar text.

    Example:
        // a^n b^n
        S->aSb|~

    Returns:
        Rules in the order they appear

    Raises:
        ValueError: naming the line of a malformed rule
    """
    rules = []
    for lineno, line in enumerate(text.splitlines(), 1):
        try:
            parsed = parse_rule_line(line)
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}: {line.strip()!r}") from e
        if parsed:
            rules.extend(parsed)
    return rules


def load_rules_from_file(path: Union[str, Path]) -> List[Rule]:
    """
    Load rules from a grammar text file or a .json file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file holds a malformed rule
    """
    path = Path(path)
    text = path.read_text()

    if path.suffix == '.json':
        return load_rules_from_json(text)
    return load_rules_from_text(text)


def load_rules_from_json(text: str) -> List[Rule]:
    """
    Load rules from JSON text.

    Expected format:
        {
            "name": "grammar-name",
            "rules": [
                {"pattern": "S", "replacement": "aSb"},
                ["S", ""]
            ]
        }

    A missing or null replacement is the empty replacement.
    """
    data = json.loads(text)
    rules = []

    for index, rule in enumerate(data.get('rules', [])):
        try:
            if isinstance(rule, dict):
                pattern = rule['pattern']
                replacement = rule.get('replacement') or ""
            else:
                pattern, replacement = rule[0], rule[1]
            rules.append(Rule(pattern, replacement))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ValueError(f"rule {index}: {e}") from e

    return rules


# ============================================================
# Grammar
# ============================================================

class Grammar:
    """
    An ordered set of rewrite rules, with forward and backward search.

    Rule order is significant: it fixes the order in which search branches
    are explored and results reported. Duplicates are kept. Searches only
    read the rules.

    Example:
        from gramex import Grammar, SearchBudget

        grammar = Grammar.from_text('''
            // a^n b^n
            S->aSb|~
        ''')

        for result in grammar.generate("S", SearchBudget(depth=4)):
            print(result.format())        # 'aaabbb', 'aabb', 'ab', ''

        for result in grammar.find_path("aabb", SearchBudget(depth=3)):
            print(result.format(verbose=True))
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self._rules: List[Rule] = list(rules) if rules else []

    def load_text(self, text: str) -> 'Grammar':
        """Load rules from grammar text."""
        self._rules.extend(load_rules_from_text(text))
        return self

    def load_file(self, path: Union[str, Path]) -> 'Grammar':
        """Load rules from a file (grammar text or .json)."""
        self._rules.extend(load_rules_from_file(path))
        return self

    def load_rules(self, rules: Iterable[Rule]) -> 'Grammar':
        """Load Rule objects or (pattern, replacement) pairs."""
        for rule in rules:
            if not isinstance(rule, Rule):
                pattern, replacement = rule
                rule = Rule(pattern, replacement)
            self._rules.append(rule)
        return self

    def add_rule(self, pattern: str, replacement: str = "") -> 'Grammar':
        """Add a single rule."""
        self._rules.append(Rule(pattern, replacement))
        return self

    def clear(self) -> 'Grammar':
        """Remove all rules."""
        self._rules = []
        return self

    @property
    def rules(self) -> List[Rule]:
        """A copy of the rules, in order."""
        return list(self._rules)

    def nonterminals(self) -> Set[str]:
        """Every nonterminal symbol mentioned by a rule."""
        found = set()
        for rule in self._rules:
            for symbol in rule.pattern + rule.replacement:
                if is_nonterminal(symbol):
                    found.add(symbol)
        return found

    def rules_for(self, pattern: str) -> List[Rule]:
        """Rules whose pattern is exactly pattern, in order."""
        return [rule for rule in self._rules if rule.pattern == pattern]

    # ============================================================
    # Search
    # ============================================================

    def generate(self, start: SequenceType = DEFAULT_START_SYMBOL,
                 budget: Optional[SearchBudget] = None) -> Iterator[SearchResult]:
        """Forward search from start. See gramex.search.generate."""
        return generate(self._rules, start, budget or SearchBudget(depth=DEFAULT_DEPTH))

    def find_path(self, target: SequenceType, budget: Optional[SearchBudget] = None,
                  start_symbol: str = DEFAULT_START_SYMBOL) -> Iterator[SearchResult]:
        """Backward search from target. See gramex.search.find_path."""
        return find_path(self._rules, target, budget or SearchBudget(depth=DEFAULT_DEPTH),
                         start_symbol=start_symbol)

    def search(self, sequence: SequenceType, budget: SearchBudget,
               mode: str = FORWARD,
               start_symbol: str = DEFAULT_START_SYMBOL) -> Iterator[SearchResult]:
        """Run a forward or backward search. See gramex.search.search."""
        return search(self._rules, sequence, budget, mode=mode, start_symbol=start_symbol)

    # ============================================================
    # Export
    # ============================================================

    def list_rules(self) -> List[str]:
        """List all rules, one pattern->replacement string each."""
        return [str(rule) for rule in self._rules]

    def to_text(self, name: Optional[str] = None) -> str:
        """
        Export rules to grammar text.

        Consecutive rules sharing a pattern are merged into one line with
        | alternatives, so the text loads back into the same ordered rules.

        Args:
            name: Optional name to include as a comment header
        """
        lines = []
        if name:
            lines.append(f"{COMMENT_PREFIX} {name}")

        current_pattern = None
        alternatives: List[str] = []
        for rule in self._rules:
            if rule.pattern != current_pattern and alternatives:
                lines.append(f"{current_pattern}{ARROW}{ALTERNATIVE.join(alternatives)}")
                alternatives = []
            current_pattern = rule.pattern
            alternatives.append(rule.replacement or EMPTY_MARKER)
        if alternatives:
            lines.append(f"{current_pattern}{ARROW}{ALTERNATIVE.join(alternatives)}")

        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """
        Export rules to a dictionary.

        Returns:
            Dictionary compatible with JSON serialization.
        """
        return {
            "rules": [
                {"pattern": rule.pattern, "replacement": rule.replacement}
                for rule in self._rules
            ]
        }

    def to_json(self, name: Optional[str] = None, description: Optional[str] = None,
                indent: Optional[int] = 2) -> str:
        """
        Export rules to JSON format string.

        Returns:
            JSON-formatted string compatible with load_rules_from_json().
        """
        result = self.to_dict()
        if name:
            result["name"] = name
        if description:
            result["description"] = description
        return json.dumps(result, indent=indent)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Grammar({len(self._rules)} rules)"

    def __iter__(self):
        """Iterate over rules in order."""
        return iter(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    def __contains__(self, rule: Rule) -> bool:
        return rule in self._rules

    # Class method constructors for fluent creation
    @classmethod
    def from_text(cls, text: str) -> 'Grammar':
        """Create grammar from grammar text."""
        return cls().load_text(text)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'Grammar':
        """Create grammar from file."""
        return cls().load_file(path)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> 'Grammar':
        """Create grammar from Rule objects or (pattern, replacement) pairs."""
        return cls().load_rules(rules)

    # Combining grammars
    def copy(self) -> 'Grammar':
        """Create a copy of this grammar."""
        return Grammar(self._rules)

    def __or__(self, other: 'Grammar') -> 'Grammar':
        """Union of two grammars: self's rules, then other's."""
        result = self.copy()
        result._rules.extend(other)
        return result

    def __ior__(self, other: 'Grammar') -> 'Grammar':
        """In-place union: grammar1 |= grammar2."""
        self._rules.extend(other)
        return self
