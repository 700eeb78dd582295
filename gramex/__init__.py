"""
GRAMEX - Grammar Exploration by String Rewriting

Explore a string-rewriting grammar: list every terminal sequence a start
sequence can derive, or find how a target sequence is derived.

Quick Start:
    from gramex import Grammar, SearchBudget

    grammar = Grammar.from_text('''
        // a^n b^n
        S->aSb|~
    ''')

    for result in grammar.generate("S", SearchBudget(depth=4)):
        print(result.format())              # 'aaabbb', 'aabb', 'ab', ''

    for result in grammar.find_path("ab", SearchBudget(depth=2)):
        print(result.format(verbose=True))  # ('[S]'=>'aSb'),('a[S]b'=>'') 'ab'

Grammar Syntax:
    // comment
    LHS->RHS1|RHS2|~    - one rule per alternative, ~ is the empty string

Symbols:
    Uppercase letters are nonterminals; everything else is terminal.
"""

__version__ = "0.1.0"

# Core rewriter components
from .rewriter import (
    Rule,
    SequenceType,
    EMPTY_MARKER,
    is_nonterminal,
    is_terminal_complete,
    find_occurrence,
    occurrences,
    replace_at,
    bracket,
    apply_rule,
    unapply_rule,
)

# Search
from .search import (
    DerivationStep,
    DerivationPath,
    SearchResult,
    SearchBudget,
    DEFAULT_DEPTH,
    DEFAULT_START_SYMBOL,
    FORWARD,
    BACKWARD,
    generate,
    find_path,
    search,
)

# Grammar and loaders
from .engine import (
    Grammar,
    parse_rule_line,
    load_rules_from_text,
    load_rules_from_file,
    load_rules_from_json,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Core
    "Rule",
    "SequenceType",
    "EMPTY_MARKER",
    "is_nonterminal",
    "is_terminal_complete",
    "find_occurrence",
    "occurrences",
    "replace_at",
    "bracket",
    "apply_rule",
    "unapply_rule",
    # Search
    "DerivationStep",
    "DerivationPath",
    "SearchResult",
    "SearchBudget",
    "DEFAULT_DEPTH",
    "DEFAULT_START_SYMBOL",
    "FORWARD",
    "BACKWARD",
    "generate",
    "find_path",
    "search",
    # Grammar
    "Grammar",
    # Loaders
    "parse_rule_line",
    "load_rules_from_text",
    "load_rules_from_file",
    "load_rules_from_json",
]
