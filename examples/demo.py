#!/usr/bin/env python3
"""
GRAMEX Feature Demonstration

This script demonstrates the major features of the GRAMEX library.
"""

from pathlib import Path
from gramex import Grammar, SearchBudget, occurrences

EXAMPLES_DIR = Path(__file__).parent


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_basic_usage():
    """Demonstrate forward generation."""
    section("Basic Usage")

    grammar = Grammar.from_text('''
        // a^n b^n
        S->aSb|~
    ''')

    for depth in range(1, 5):
        results = [r.format() for r in grammar.generate("S", SearchBudget(depth=depth))]
        print(f"  depth {depth}: {', '.join(results)}")


def demo_length_bounds():
    """Demonstrate min/max length filters."""
    section("Length Bounds")

    grammar = Grammar.from_file(EXAMPLES_DIR / "anbn.txt")

    budget = SearchBudget(depth=6, min_length=4, max_length=8)
    print(f"  {budget}")
    for result in grammar.generate("S", budget):
        print(f"    {result.format()}")


def demo_overlaps():
    """Demonstrate overlapping occurrences."""
    section("Overlapping Occurrences")

    print(f"  'AA' in 'AAAA' at: {list(occurrences('AAAA', 'AA'))}")

    grammar = Grammar.from_text("AA->b\nA->a")
    for result in grammar.generate("AAA", SearchBudget(depth=2)):
        print(f"    {result.format(verbose=True)}")


def demo_tracing():
    """Demonstrate derivation traces."""
    section("Tracing")

    grammar = Grammar.from_text("S->AA\nA->a")
    for result in grammar.generate("S", SearchBudget(depth=3)):
        print(f"  {result.format(verbose=True)}")
        for step in result.path:
            print(f"      {step.before} -> {step.after}")


def demo_find_path():
    """Demonstrate backward search."""
    section("Finding Derivations")

    grammar = Grammar.from_file(EXAMPLES_DIR / "swap.txt")
    print(f"  Rules: {', '.join(grammar.list_rules())}")

    for target in ["ab", "ba", "aab"]:
        results = list(grammar.find_path(target, SearchBudget(depth=5)))
        print(f"\n  '{target}': {len(results)} derivation(s) within 5 steps")
        for result in results[:3]:
            print(f"    {result.format(verbose=True)}")


def demo_export():
    """Demonstrate grammar export."""
    section("Export")

    grammar = Grammar.from_text("S->aA|~\nA->b")
    print("  Text:")
    for line in grammar.to_text(name="tiny").split('\n'):
        print(f"    {line}")
    print(f"\n  JSON: {grammar.to_json(indent=None)}")


def main():
    """Run all demonstrations."""
    print("GRAMEX - Grammar Exploration by String Rewriting")
    print("Feature Demonstration")

    demo_basic_usage()
    demo_length_bounds()
    demo_overlaps()
    demo_tracing()
    demo_find_path()
    demo_export()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
