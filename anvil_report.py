#!/usr/bin/env python3
"""
Anvil Report

Turns a solved merge order into the plain-text plan:

    1. [Sword: 1,0] + [Sharpness V: 5,0] = 5 (55xp)
    ...
    Max step cost: ...
    Final best cost: ...
    Final worst cost: ...
    Naive sequential cost: ...

Penalty figures are a piece's prior work penalty plus its flat extra cost.
Step costs are recomputed from the pieces, not read back from the search.
Final best cost is the xp spent step by step (and the level that much xp
reaches); final worst cost is the same levels paid from zero in one go.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from anvil_solver import (
    Piece,
    PlannerConfig,
    SearchResult,
    TraceRecord,
    naive_cost,
    step_costs,
    summarize,
    xp_of,
)

TRACE_COLUMNS = [
    "Step",
    "Left",
    "Left Value",
    "Left Penalty",
    "Right",
    "Right Value",
    "Right Penalty",
    "Levels",
    "XP",
]
SUMMARY_COLUMNS = ["Figure", "Levels", "XP"]


def piece_name(names: List[str], identity: int) -> str:
    return " + ".join(n for i, n in enumerate(names) if (identity >> i) & 1)


def format_step(names: List[str], index: int, record: TraceRecord, config: PlannerConfig) -> str:
    levels, xp = step_costs(config, record)
    left, right = record.left, record.right
    return (
        f"{index}. [{piece_name(names, left.identity)}: {left.value},{left.surcharge}] + "
        f"[{piece_name(names, right.identity)}: {right.value},{right.surcharge}] = {levels} ({xp}xp)"
    )


def summary_lines(
    config: PlannerConfig, trace: List[TraceRecord], naive: Optional[List[TraceRecord]] = None
) -> List[str]:
    return [f"{label}: {levels} ({xp}xp)" for label, levels, xp in summary_figures(config, trace, naive)]


def summary_figures(
    config: PlannerConfig, trace: List[TraceRecord], naive: Optional[List[TraceRecord]] = None
) -> List[Tuple[str, int, int]]:
    best = summarize(config, trace)
    figures = [
        ("Max step cost", best["max_levels"], xp_of(best["max_levels"])),
        ("Final best cost", best["best_levels"], best["total_xp"]),
        ("Final worst cost", best["total_levels"], best["worst_xp"]),
    ]
    if naive is not None:
        seq = summarize(config, naive)
        figures.append(("Naive sequential cost", seq["best_levels"], seq["total_xp"]))
    return figures


def build_report(names: List[str], pieces: List[Piece], result: SearchResult, config: PlannerConfig) -> str:
    lines = [format_step(names, i, rec, config) for i, rec in enumerate(result.trace, start=1)]
    _, naive = naive_cost(pieces, config)
    lines.extend(summary_lines(config, result.trace, naive))
    return "\n".join(lines) + "\n"


def trace_rows(names: List[str], trace: List[TraceRecord], config: PlannerConfig) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for i, rec in enumerate(trace, start=1):
        levels, xp = step_costs(config, rec)
        rows.append({
            "Step": i,
            "Left": piece_name(names, rec.left.identity),
            "Left Value": rec.left.value,
            "Left Penalty": rec.left.surcharge,
            "Right": piece_name(names, rec.right.identity),
            "Right Value": rec.right.value,
            "Right Penalty": rec.right.surcharge,
            "Levels": levels,
            "XP": xp,
        })
    return rows


def trace_frame(names: List[str], result: SearchResult, config: PlannerConfig) -> pd.DataFrame:
    return pd.DataFrame(trace_rows(names, result.trace, config), columns=TRACE_COLUMNS)


def summary_frame(pieces: List[Piece], result: SearchResult, config: PlannerConfig) -> pd.DataFrame:
    _, naive = naive_cost(pieces, config)
    return pd.DataFrame(summary_figures(config, result.trace, naive), columns=SUMMARY_COLUMNS)


def export_trace(df: pd.DataFrame, path: str, summary: Optional[pd.DataFrame] = None) -> None:
    """Write the step table; .xlsx goes through pandas' Excel writer, anything else is CSV.

    The summary lands on its own sheet for .xlsx, or next to the CSV as <stem>-summary.csv.
    """
    if path.lower().endswith(".xlsx"):
        with pd.ExcelWriter(path) as w:
            df.to_excel(w, sheet_name="Trace", index=False)
            if summary is not None:
                summary.to_excel(w, sheet_name="Summary", index=False)
    else:
        df.to_csv(path, index=False)
        if summary is not None:
            p = Path(path)
            summary.to_csv(p.with_name(f"{p.stem}-summary.csv"), index=False)
