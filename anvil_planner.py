#!/usr/bin/env python3
"""
Anvil Planner

Finds the cheapest order to combine an item and its enchanted books on an
anvil and prints the step-by-step plan.

Usage:
  python anvil_planner.py                      # reads config.yml
  python anvil_planner.py --config sword.yml --export sword-trace.csv

Environment (.env is loaded if present):
  ANVIL_CONFIG      default config path (fallback: config.yml)
  ANVIL_MAX_PIECES  refuse inputs with more pieces than this (1-16, default 12)

Progress Reporting (script-level)
---------------------------------
- Flags: `--quiet`, `--verbose`, `--progress-json <path>`.
- Phases: load config → search → report; emits final summary.

Embedding: `process_text(yaml_text)` returns the same report as a string.
"""

import argparse
import json
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from anvil_config import ConfigError, PlannerInput, load_config, load_config_file
from anvil_report import build_report, export_trace, summary_frame, trace_frame
from anvil_solver import MASK_BITS, MAX_PIECES, solve, too_many_pieces

DEFAULT_CONFIG = "config.yml"


# ---------- Progress utils (lightweight) ----------
@dataclass
class Step:
    name: str
    status: str = "pending"  # pending | in_progress | completed | failed
    started_at: Optional[float] = None
    ended_at: Optional[float] = None


class ProgressReporter:
    def __init__(self, script: str, quiet: bool = False, verbose: bool = False, json_path: Optional[str] = None):
        self.script = script
        self.quiet = quiet
        self.verbose = verbose
        self.json_path = json_path
        self.t0 = time.time()
        self.steps: List[Step] = []

    def start(self, name: str) -> Step:
        st = Step(name=name, status="in_progress", started_at=time.time())
        self.steps.append(st)
        if self.verbose and not self.quiet:
            print(f"→ {name}…")
        return st

    def end(self, st: Step, status: str = "completed") -> None:
        st.status = status
        st.ended_at = time.time()
        if self.verbose and not self.quiet:
            elapsed_ms = int(1000 * (st.ended_at - (st.started_at or st.ended_at)))
            print(f"✓ {st.name} in {elapsed_ms}ms")

    def note(self, line: str) -> None:
        if self.verbose and not self.quiet:
            print(line)

    def finalize(self, totals: Dict[str, int]) -> None:
        elapsed_ms = int(1000 * (time.time() - self.t0))
        if not self.quiet:
            print(f"Done in {elapsed_ms}ms")
        if self.json_path:
            payload = {
                "script": self.script,
                "started_at": self.t0,
                "ended_at": time.time(),
                "elapsed_ms": elapsed_ms,
                "steps": [
                    {
                        "name": s.name,
                        "status": s.status,
                        "started_at": s.started_at,
                        "ended_at": s.ended_at,
                    }
                    for s in self.steps
                ],
                "totals": totals,
            }
            Path(self.json_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")


# ---------- Settings ----------
def max_pieces_from_env() -> int:
    raw = os.getenv("ANVIL_MAX_PIECES")
    if not raw:
        return MAX_PIECES
    try:
        n = int(raw)
    except ValueError:
        raise ConfigError(f"ANVIL_MAX_PIECES must be an integer, got {raw!r}")
    return max(1, min(MASK_BITS, n))


# ---------- Pipeline ----------
def process(planner_input: PlannerInput) -> str:
    guard = too_many_pieces(len(planner_input.pieces), planner_input.config)
    if guard:
        return guard
    result = solve(planner_input.pieces, planner_input.config)
    return build_report(planner_input.names, planner_input.pieces, result, planner_input.config)


def process_text(text: str) -> str:
    """Host entry point: YAML config text in, report text out."""
    return process(load_config(text, max_pieces=max_pieces_from_env()))


# ---------- Main ----------
def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description="Cheapest anvil merge order for an item and its books")
    ap.add_argument(
        "--config",
        default=os.getenv("ANVIL_CONFIG", DEFAULT_CONFIG),
        help="Path to the YAML config (default: $ANVIL_CONFIG or config.yml)",
    )
    ap.add_argument("--export", default=None, help="Also write the step table to this .csv or .xlsx path")
    ap.add_argument("--progress-json", default=None, help="Write progress JSON to this path")
    ap.add_argument("--quiet", action="store_true", help="Only print the report")
    ap.add_argument("--verbose", action="store_true", help="Print step-by-step logs and search statistics")
    ap.add_argument("--no-memo", action="store_true", help="Disable dead-state memoization (slower, same result)")
    args = ap.parse_args(argv)

    prog = ProgressReporter(script="anvil", quiet=args.quiet, verbose=args.verbose, json_path=args.progress_json)
    if not args.quiet:
        print("Calculating...")

    st_load = prog.start("Load config")
    try:
        planner_input = load_config_file(args.config, max_pieces=max_pieces_from_env())
    except (ConfigError, FileNotFoundError) as e:
        prog.end(st_load, status="failed")
        print(f"⚠️ {e}", file=sys.stderr)
        return 2
    if args.no_memo:
        planner_input.config.memoize = False
    prog.end(st_load)

    guard = too_many_pieces(len(planner_input.pieces), planner_input.config)
    if guard:
        print(guard)
        prog.finalize(totals={"pieces": len(planner_input.pieces), "steps": 0})
        return 1

    st_search = prog.start("Search merge orders")
    result = solve(planner_input.pieces, planner_input.config)
    prog.end(st_search)
    prog.note(
        f"nodes={result.stats.nodes} memo_hits={result.stats.memo_hits} "
        f"pruned={result.stats.pruned} solutions={result.stats.solutions}"
    )

    st_report = prog.start("Report")
    report = build_report(planner_input.names, planner_input.pieces, result, planner_input.config)
    if args.export:
        export_trace(
            trace_frame(planner_input.names, result, planner_input.config),
            args.export,
            summary=summary_frame(planner_input.pieces, result, planner_input.config),
        )
    prog.end(st_report)

    print(report, end="")
    prog.finalize(totals={"pieces": len(planner_input.pieces), "steps": len(result.trace), "cost": result.cost})
    return 0


if __name__ == "__main__":
    sys.exit(main())
