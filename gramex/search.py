"""
Derivation search for GRAMEX.

Two depth-first, backtracking searches over a rule set:

    generate()   - forward: expand a start sequence by applying rules until
                   no nonterminal is left, yielding every terminal sequence
                   reached within the depth budget.
    find_path()  - backward: apply rules in reverse to a target sequence,
                   yielding every chain that reduces it to the start symbol.

Both return lazy iterators: results are produced one at a time, as the
search finds them, so an exponential result set never has to sit in memory.

Every branch carries its own DerivationPath. Paths are persistent (each
append or prepend builds a new path), so sibling branches can never see or
disturb each other's trace.

Example:
    from gramex import Grammar, SearchBudget

    grammar = Grammar.from_text("S->aSb|~")
    for result in grammar.generate("S", SearchBudget(depth=4)):
        print(result.format(verbose=True))
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .rewriter import (
    Rule, SequenceType, apply_rule, bracket, is_terminal_complete,
    occurrences, unapply_rule,
)

logger = logging.getLogger(__name__)

# Start symbol the backward search reduces to unless told otherwise
DEFAULT_START_SYMBOL = "S"

# Depth bound used when none is given
DEFAULT_DEPTH = 4

# Search modes understood by search()
FORWARD = "forward"
BACKWARD = "backward"
MODES = (FORWARD, BACKWARD)

# Flag value meaning "no limit" on the command line
UNBOUNDED_FLAG = -1


# ============================================================
# Path Recorder
# ============================================================

class DerivationStep:
    """
    One rule application: rule rewritten at offset within source.

    The step always reads in the forward direction, source -> after, even
    when the backward search discovered it.
    """

    __slots__ = ('source', 'offset', 'rule')

    def __init__(self, source: SequenceType, offset: int, rule: Rule):
        self.source = source
        self.offset = offset
        self.rule = rule

    @property
    def before(self) -> SequenceType:
        return self.source

    @property
    def after(self) -> SequenceType:
        """The sequence produced by this step."""
        return apply_rule(self.source, self.offset, self.rule)

    @property
    def marked(self) -> str:
        """Source with the rewritten span in brackets: 'a[S]b'."""
        return bracket(self.source, self.offset, self.offset + len(self.rule.pattern))

    def render(self) -> str:
        """Render as ('<marked source>'=>'<replacement>')."""
        return f"('{self.marked}'=>'{self.rule.replacement}')"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "before": self.before,
            "after": self.after,
            "offset": self.offset,
            "pattern": self.rule.pattern,
            "replacement": self.rule.replacement,
        }

    def __eq__(self, other):
        if isinstance(other, DerivationStep):
            return (self.source, self.offset, self.rule) == (other.source, other.offset, other.rule)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.source, self.offset, self.rule))

    def __repr__(self) -> str:
        return f"DerivationStep({self.render()})"


class DerivationPath:
    """
    Immutable, ordered chain of DerivationSteps for one search branch.

    append() and prepend() return new paths and leave the receiver alone:

        empty = DerivationPath()
        longer = empty.append(step)
        len(empty)   # => 0
        len(longer)  # => 1
    """

    __slots__ = ('_steps',)

    def __init__(self, steps: Iterable[DerivationStep] = ()):
        self._steps: Tuple[DerivationStep, ...] = tuple(steps)

    def append(self, step: DerivationStep) -> 'DerivationPath':
        return DerivationPath(self._steps + (step,))

    def prepend(self, step: DerivationStep) -> 'DerivationPath':
        return DerivationPath((step,) + self._steps)

    @property
    def steps(self) -> Tuple[DerivationStep, ...]:
        return self._steps

    @property
    def initial(self) -> Optional[SequenceType]:
        """Sequence the path starts from, or None for an empty path."""
        return self._steps[0].before if self._steps else None

    @property
    def final(self) -> Optional[SequenceType]:
        """Sequence the path ends with, or None for an empty path."""
        return self._steps[-1].after if self._steps else None

    def render(self) -> str:
        """Comma-joined step renderings, start to end."""
        return ",".join(step.render() for step in self._steps)

    def to_list(self) -> List[Dict]:
        return [step.to_dict() for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)

    def __getitem__(self, index):
        return self._steps[index]

    def __bool__(self) -> bool:
        """True if any step was recorded."""
        return len(self._steps) > 0

    def __eq__(self, other):
        if isinstance(other, DerivationPath):
            return self._steps == other._steps
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._steps)

    def __repr__(self) -> str:
        return f"DerivationPath({self.render()})"


class SearchResult:
    """A sequence found by a search, with the path that derives it."""

    __slots__ = ('sequence', 'path')

    def __init__(self, sequence: SequenceType, path: DerivationPath):
        self.sequence = sequence
        self.path = path

    def format(self, verbose: bool = False) -> str:
        """
        Format the result as one output line.

        Plain:   'aabb'
        Verbose: ('[S]'=>'aSb'),('a[S]b'=>'') 'ab'
        """
        quoted = f"'{self.sequence}'"
        if verbose:
            return f"{self.path.render()} {quoted}"
        return quoted

    def to_dict(self) -> Dict:
        return {"sequence": self.sequence, "path": self.path.to_list()}

    def __eq__(self, other):
        if isinstance(other, SearchResult):
            return (self.sequence, self.path) == (other.sequence, other.path)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.sequence, self.path))

    def __repr__(self) -> str:
        return f"SearchResult({self.format(verbose=True)})"


# ============================================================
# Search Budget
# ============================================================

class SearchBudget:
    """
    Immutable limits for one search run. None means unbounded.

    depth       - maximum number of rewrites along one branch
    min_length  - shortest terminal sequence to report
    max_length  - longest terminal sequence to report

    The length bounds only filter terminal sequences; they never prune an
    intermediate sequence, which a later epsilon rule may still shrink.
    """

    __slots__ = ('_depth', '_min_length', '_max_length')

    def __init__(self, depth: Optional[int] = None,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None):
        for name, value in (("depth", depth), ("min_length", min_length),
                            ("max_length", max_length)):
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative or None, got {value}")
        self._depth = depth
        self._min_length = min_length
        self._max_length = max_length

    @classmethod
    def from_flags(cls, depth: int = UNBOUNDED_FLAG, min_length: int = UNBOUNDED_FLAG,
                   max_length: int = UNBOUNDED_FLAG) -> 'SearchBudget':
        """Build a budget from command-line style values, where -1 means no limit."""
        def unflag(value: int) -> Optional[int]:
            return None if value == UNBOUNDED_FLAG else value
        return cls(depth=unflag(depth), min_length=unflag(min_length),
                   max_length=unflag(max_length))

    @property
    def depth(self) -> Optional[int]:
        return self._depth

    @property
    def min_length(self) -> Optional[int]:
        return self._min_length

    @property
    def max_length(self) -> Optional[int]:
        return self._max_length

    @property
    def is_bounded(self) -> bool:
        """True if depth or max_length limits the search."""
        return self._depth is not None or self._max_length is not None

    def validate(self) -> 'SearchBudget':
        """Raise ValueError unless depth or max_length is set."""
        if not self.is_bounded:
            raise ValueError("Search budget is unbounded: set a depth or a max_length")
        return self

    def accepts(self, sequence: SequenceType) -> bool:
        """True if sequence satisfies the min/max length bounds."""
        if self._min_length is not None and len(sequence) < self._min_length:
            return False
        if self._max_length is not None and len(sequence) > self._max_length:
            return False
        return True

    def __eq__(self, other):
        if isinstance(other, SearchBudget):
            return ((self._depth, self._min_length, self._max_length) ==
                    (other._depth, other._min_length, other._max_length))
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._depth, self._min_length, self._max_length))

    def __repr__(self) -> str:
        return (f"SearchBudget(depth={self._depth}, min_length={self._min_length}, "
                f"max_length={self._max_length})")


# ============================================================
# Result stream
# ============================================================

def _counted(label: str, results: Iterator[SearchResult],
             stats: Dict[str, int]) -> Iterator[SearchResult]:
    """Pass results through, logging a summary once the search is exhausted."""
    for result in results:
        stats["results"] += 1
        yield result
    logger.debug("%s: %d results from %d branches", label, stats["results"], stats["branches"])


# ============================================================
# Forward Search
# ============================================================

def generate(rules: Sequence[Rule], start: SequenceType,
             budget: SearchBudget) -> Iterator[SearchResult]:
    """
    Enumerate every terminal sequence derivable from start.

    Branches are explored depth first: rules in order, then each
    occurrence of the rule's pattern by ascending offset (overlapping
    occurrences included). Distinct derivations of the same string are
    distinct results; nothing is deduplicated.

    The traversal keeps its own stack, so the depth bound is not limited
    by the interpreter's recursion limit. Without a depth bound a recursive
    grammar never runs out of branches: max_length only filters terminal
    sequences, and the iterator keeps searching until the caller stops.

    Args:
        rules: Ordered rule set (read only)
        start: Sequence to expand
        budget: Search limits; must bound depth or max_length

    Returns:
        Lazy iterator of SearchResult, one per terminal sequence the
        budget accepts, in discovery order

    Raises:
        ValueError: if the budget is unbounded
    """
    budget.validate()
    # Bind eagerly so callers may pass any iterable
    rules = tuple(rules)
    logger.debug("generate: start=%r %r, %d rules", start, budget, len(rules))
    stats = {"branches": 0, "results": 0}
    results = _generate(rules, start, budget, stats)
    return _counted("generate", results, stats)


def _generate(rules: Tuple[Rule, ...], start: SequenceType, budget: SearchBudget,
              stats: Dict[str, int]) -> Iterator[SearchResult]:
    # Frames are (sequence, remaining depth, path); children are pushed in
    # reverse so they pop in rule order, then by ascending offset
    stack = [(start, budget.depth, DerivationPath())]

    while stack:
        sequence, depth, path = stack.pop()
        stats["branches"] += 1

        if is_terminal_complete(sequence):
            if budget.accepts(sequence):
                yield SearchResult(sequence, path)
            continue

        if depth == 0:
            continue
        next_depth = None if depth is None else depth - 1

        steps = [DerivationStep(sequence, offset, rule)
                 for rule in rules
                 for offset in occurrences(sequence, rule.pattern)]
        for step in reversed(steps):
            stack.append((step.after, next_depth, path.append(step)))


# ============================================================
# Backward Search
# ============================================================

def find_path(rules: Sequence[Rule], target: SequenceType, budget: SearchBudget,
              start_symbol: str = DEFAULT_START_SYMBOL) -> Iterator[SearchResult]:
    """
    Enumerate every chain of reverse rewrites reducing target to start_symbol.

    At each step an occurrence of a rule's replacement is turned back into
    the rule's pattern. Empty replacements occur at every position, so
    epsilon rules can insert their pattern anywhere. Each result carries
    target and a path that reads from start_symbol to target.

    Length bounds are not consulted here; only depth limits the search.

    Args:
        rules: Ordered rule set (read only)
        target: Sequence to reduce
        budget: Search limits; depth must be set
        start_symbol: Sequence the reduction must reach

    Raises:
        ValueError: if the budget has no depth bound
    """
    budget.validate()
    if budget.depth is None:
        raise ValueError("Backward search needs a depth bound")
    rules = tuple(rules)
    logger.debug("find_path: target=%r start=%r %r, %d rules",
                 target, start_symbol, budget, len(rules))
    stats = {"branches": 0, "results": 0}
    paths = _find_path(rules, target, start_symbol, budget.depth, stats)
    results = (SearchResult(target, path) for path in paths)
    return _counted("find_path", results, stats)


def _find_path(rules: Tuple[Rule, ...], target: SequenceType, start_symbol: str,
               depth: int, stats: Dict[str, int]) -> Iterator[DerivationPath]:
    stack = [(target, depth, DerivationPath())]

    while stack:
        sequence, depth, path = stack.pop()
        stats["branches"] += 1

        if sequence == start_symbol:
            yield path
            continue

        if depth == 0:
            continue

        steps = []
        for rule in rules:
            for offset in occurrences(sequence, rule.replacement):
                steps.append(DerivationStep(unapply_rule(sequence, offset, rule), offset, rule))
        for step in reversed(steps):
            stack.append((step.source, depth - 1, path.prepend(step)))


# ============================================================
# Dispatch
# ============================================================

def search(rules: Sequence[Rule], sequence: SequenceType, budget: SearchBudget,
           mode: str = FORWARD,
           start_symbol: str = DEFAULT_START_SYMBOL) -> Iterator[SearchResult]:
    """
    Run the search selected by mode ("forward" or "backward").

    In forward mode sequence is the start sequence; in backward mode it is
    the target and start_symbol is what it must reduce to.
    """
    if mode == FORWARD:
        return generate(rules, sequence, budget)
    elif mode == BACKWARD:
        return find_path(rules, sequence, budget, start_symbol=start_symbol)
    raise ValueError(f"Unknown search mode: {mode}. Choose from: {', '.join(MODES)}")
