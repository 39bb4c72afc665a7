#!/usr/bin/env python3
"""
Anvil Solver (cheapest merge order, branch-and-bound)

- Cost model: level <-> xp curves and the 2^n - 1 prior work penalty.
- Pieces are items or books; each carries an identity bitmask naming the
  original inputs folded into it.
- Merge rules (left slot + right slot):
    * Result is a book only if both inputs are books.
    * With books_free, book + book costs nothing and resets work count.
    * Otherwise cost = right.value + penalty(left) + penalty(right) + extra costs,
      expressed in xp when optimize_xp is set, else in levels.
- Search explores every ordered pair, prunes against the incumbent and skips
  working sets already proven dead ("null paths").
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

# ---------- Limits ----------
MASK_BITS = 16  # identity mask width
MAX_PIECES = 12  # default size guard ceiling
FIELD_MAX = 255  # value / work_count / extra_cost fit in 8 bits

TOO_MANY_PIECES_MESSAGE = "Too many pieces: {count} supplied, at most {limit} are supported."


# ---------- Cost model ----------
def xp_of(level: int) -> int:
    """Experience points needed to reach `level` from zero."""
    if level < 0:
        raise ValueError(f"level must be >= 0, got {level}")
    if level < 16:
        return level * level + 6 * level
    if level < 32:
        return int(2.5 * level * level - 40.5 * level + 360.0)
    return int(4.5 * level * level - 162.5 * level + 2220.0)


def level_of(xp: int) -> int:
    """Smallest level whose xp_of is >= xp.

    Linear search on purpose: it inverts xp_of exactly, truncation included.
    """
    if xp < 0:
        raise ValueError(f"xp must be >= 0, got {xp}")
    level = 0
    while xp_of(level) < xp:
        level += 1
    return level


def penalty_of(work_count: int) -> int:
    if work_count < 0:
        raise ValueError(f"work_count must be >= 0, got {work_count}")
    return (1 << work_count) - 1


def work_count_of(penalty: int) -> int:
    """Smallest work count whose penalty is >= `penalty`."""
    if penalty < 0:
        raise ValueError(f"penalty must be >= 0, got {penalty}")
    work_count = 0
    while penalty_of(work_count) < penalty:
        work_count += 1
    return work_count


# ---------- Models ----------
class PieceKind(enum.Enum):
    ITEM = "item"
    BOOK = "book"


@dataclass(frozen=True)
class Piece:
    identity: int
    value: int
    work_count: int = 0
    extra_cost: int = 0
    kind: PieceKind = PieceKind.ITEM

    @property
    def is_book(self) -> bool:
        return self.kind is PieceKind.BOOK

    @property
    def penalty(self) -> int:
        return penalty_of(self.work_count)

    @property
    def surcharge(self) -> int:
        """Everything this piece adds to a step's cost apart from its value."""
        return self.penalty + self.extra_cost

    def signature(self) -> Tuple[int, int, int, str]:
        # identity is left out: equally shaped pieces behave the same in the search
        return (self.value, self.work_count, self.extra_cost, self.kind.value)


@dataclass(frozen=True)
class TraceRecord:
    left: Piece
    right: Piece
    cost: int


@dataclass
class PlannerConfig:
    books_free: bool = False
    optimize_xp: bool = True
    memoize: bool = True
    book_order_cut: bool = True
    max_pieces: int = MAX_PIECES


@dataclass
class SearchStats:
    nodes: int = 0
    memo_hits: int = 0
    pruned: int = 0
    solutions: int = 0


@dataclass
class SearchResult:
    cost: int
    trace: List[TraceRecord] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)


def make_pieces(
    items: List[Tuple[int, int, int]], books: List[Tuple[int, int, int]]
) -> List[Piece]:
    """Build the initial working set: items first, then books, one identity bit each.

    Each entry is (value, work_count, extra_cost).
    """
    pieces: List[Piece] = []
    tagged = [(e, PieceKind.ITEM) for e in items] + [(e, PieceKind.BOOK) for e in books]
    for i, ((value, work_count, extra_cost), kind) in enumerate(tagged):
        pieces.append(Piece(identity=1 << i, value=value, work_count=work_count, extra_cost=extra_cost, kind=kind))
    return pieces


# ---------- Merge operator ----------
def merged_kind(left: Piece, right: Piece) -> PieceKind:
    if left.is_book and right.is_book:
        return PieceKind.BOOK
    return PieceKind.ITEM


def level_cost(config: PlannerConfig, left: Piece, right: Piece) -> int:
    """Cost of putting `right` into `left`, in levels."""
    if config.books_free and merged_kind(left, right) is PieceKind.BOOK:
        return 0
    return right.value + left.surcharge + right.surcharge


def anvil(config: PlannerConfig, left: Piece, right: Piece) -> Tuple[Piece, int]:
    """Combine two pieces; returns the result and the step cost in the search unit."""
    assert not (left.identity & right.identity), "pieces share an original input"
    kind = merged_kind(left, right)
    levels = level_cost(config, left, right)
    if config.books_free and kind is PieceKind.BOOK:
        work_count = 0
    else:
        work_count = max(left.work_count, right.work_count) + 1
    combined = Piece(
        identity=left.identity | right.identity,
        value=left.value + right.value,
        work_count=work_count,
        extra_cost=left.extra_cost + right.extra_cost,
        kind=kind,
    )
    cost = xp_of(levels) if config.optimize_xp else levels
    return combined, cost


def eligible(config: PlannerConfig, left: Piece, right: Piece) -> bool:
    # a book cannot take an item into its left slot
    if left.is_book and not right.is_book:
        return False
    if config.book_order_cut and left.is_book and right.is_book:
        # same result either way; the smaller sacrifice is never worse
        return right.value <= left.value
    return True


# ---------- Search ----------
def too_many_pieces(count: int, config: PlannerConfig) -> Optional[str]:
    """Guard message when the search would be intractable, else None."""
    limit = max(1, min(MASK_BITS, config.max_pieces))
    if count > limit:
        return TOO_MANY_PIECES_MESSAGE.format(count=count, limit=limit)
    return None


def _state_key(pieces: Tuple[Piece, ...], running: int) -> Tuple[Tuple[Tuple[int, int, int, str], ...], int]:
    return tuple(sorted(p.signature() for p in pieces)), running


def solve(pieces: List[Piece], config: PlannerConfig) -> SearchResult:
    """Exhaustive branch-and-bound over merge orders.

    Returns the cheapest total cost and the merges achieving it. On exact
    ties the first complete order found is kept.
    """
    if not pieces:
        raise ValueError("nothing to combine")
    if len(pieces) == 1:
        return SearchResult(cost=0)

    stats = SearchStats()
    null_paths: Set[Tuple] = set()
    best_cost: Optional[int] = None
    best_trace: Tuple[TraceRecord, ...] = ()

    def dfs(queue: Tuple[Piece, ...], running: int, trace: Tuple[TraceRecord, ...], memo: Optional[Set[Tuple]]) -> bool:
        nonlocal best_cost, best_trace
        stats.nodes += 1
        key = None
        if memo is not None:
            key = _state_key(queue, running)
            if key in memo:
                stats.memo_hits += 1
                return False
        improved = False
        n = len(queue)
        for o1 in range(n):
            left = queue[o1]
            for o2 in range(n):
                if o1 == o2:
                    continue
                right = queue[o2]
                if not eligible(config, left, right):
                    continue
                combined, cost = anvil(config, left, right)
                total = running + cost
                if best_cost is not None and total > best_cost:
                    stats.pruned += 1
                    continue
                rest = tuple(p for i, p in enumerate(queue) if i != o1 and i != o2) + (combined,)
                step = trace + (TraceRecord(left=left, right=right, cost=cost),)
                if len(rest) > 1:
                    if dfs(rest, total, step, memo):
                        improved = True
                else:
                    stats.solutions += 1
                    if best_cost is None or total < best_cost:
                        best_cost = total
                        best_trace = step
                        improved = True
        if memo is not None and not improved:
            memo.add(key)
        return improved

    dfs(tuple(pieces), 0, (), null_paths if config.memoize else None)
    assert best_cost is not None and best_trace, "search finished without a complete merge order"
    return SearchResult(cost=best_cost, trace=list(best_trace), stats=stats)


def naive_cost(pieces: List[Piece], config: PlannerConfig) -> Tuple[int, List[TraceRecord]]:
    """Fold every piece into the first one, in input order."""
    if not pieces:
        raise ValueError("nothing to combine")
    acc = pieces[0]
    total = 0
    trace: List[TraceRecord] = []
    for right in pieces[1:]:
        combined, cost = anvil(config, acc, right)
        trace.append(TraceRecord(left=acc, right=right, cost=cost))
        total += cost
        acc = combined
    return total, trace


def step_costs(config: PlannerConfig, record: TraceRecord) -> Tuple[int, int]:
    """(levels, xp) of one accepted step, recomputed through the merge operator."""
    levels = level_cost(config, record.left, record.right)
    return levels, xp_of(levels)


def summarize(config: PlannerConfig, trace: List[TraceRecord]) -> Dict[str, int]:
    """Per-trace totals.

    best_levels is level_of(total_xp): the xp actually spent, step by step.
    worst_xp is xp_of(total_levels): the same levels paid in one go from zero.
    """
    levels = [step_costs(config, r)[0] for r in trace]
    total_xp = sum(xp_of(lv) for lv in levels)
    total_levels = sum(levels)
    return {
        "steps": len(trace),
        "max_levels": max(levels, default=0),
        "total_levels": total_levels,
        "total_xp": total_xp,
        "best_levels": level_of(total_xp),
        "worst_xp": xp_of(total_levels),
    }
