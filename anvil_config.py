#!/usr/bin/env python3
"""
Anvil Config

Reads the planner input from YAML.

Expected structure:
  config:
    books_free: false
    optimize_xp: true
  input:
    items:
      - [Sword, 1, 0]                 # name, value, work_count, extra_cost (optional)
    books:
      - [Sharpness V, "5*1", 0]       # value may be a multiplier product
      - {name: Mending, value: 2, penalty: 1}

Every problem here is fatal: a ConfigError is raised before any search runs.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from anvil_solver import FIELD_MAX, Piece, PlannerConfig, make_pieces, work_count_of


class ConfigError(ValueError):
    pass


@dataclass
class PlannerInput:
    config: PlannerConfig
    names: List[str] = field(default_factory=list)
    pieces: List[Piece] = field(default_factory=list)


_FACTOR_SPLIT_RE = re.compile(r"\s*[*x×]\s*", re.IGNORECASE)


def parse_multiplier(raw: Any, what: str) -> int:
    """Accept an int or a product string such as "4*2" or "2 x 3"."""
    if isinstance(raw, bool):
        raise ConfigError(f"{what}: expected a number, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ConfigError(f"{what}: empty value")
        product = 1
        for token in _FACTOR_SPLIT_RE.split(text):
            if not (token.isascii() and token.isdigit()):
                raise ConfigError(f"{what}: cannot parse {raw!r}")
            product *= int(token)
        return product
    raise ConfigError(f"{what}: expected a number, got {raw!r}")


def _check_range(n: int, what: str) -> int:
    if not 0 <= n <= FIELD_MAX:
        raise ConfigError(f"{what}: {n} is outside 0..{FIELD_MAX}")
    return n


def parse_entry(raw: Any, where: str) -> Tuple[str, int, int, int]:
    """One items/books entry -> (name, value, work_count, extra_cost)."""
    if isinstance(raw, dict):
        unknown = set(raw) - {"name", "value", "work_count", "penalty", "extra_cost"}
        if unknown:
            raise ConfigError(f"{where}: unknown keys {sorted(unknown)}")
        if "name" not in raw or "value" not in raw:
            raise ConfigError(f"{where}: 'name' and 'value' are required")
        if "work_count" in raw and "penalty" in raw:
            raise ConfigError(f"{where}: give either 'work_count' or 'penalty', not both")
        name = raw["name"]
        value = raw["value"]
        if "penalty" in raw:
            penalty = _check_range(parse_multiplier(raw["penalty"], f"{where}.penalty"), f"{where}.penalty")
            work_count = work_count_of(penalty)
        else:
            work_count = raw.get("work_count", 0)
        extra_cost = raw.get("extra_cost", 0)
    elif isinstance(raw, (list, tuple)):
        if not 2 <= len(raw) <= 4:
            raise ConfigError(f"{where}: expected [name, value, work_count, extra_cost], got {len(raw)} fields")
        name, value = raw[0], raw[1]
        work_count = raw[2] if len(raw) > 2 else 0
        extra_cost = raw[3] if len(raw) > 3 else 0
    else:
        raise ConfigError(f"{where}: expected a list or mapping, got {type(raw).__name__}")

    if name is None or isinstance(name, (dict, list)):
        raise ConfigError(f"{where}: invalid name {name!r}")
    value = _check_range(parse_multiplier(value, f"{where}.value"), f"{where}.value")
    work_count = _check_range(parse_multiplier(work_count, f"{where}.work_count"), f"{where}.work_count")
    extra_cost = _check_range(parse_multiplier(extra_cost, f"{where}.extra_cost"), f"{where}.extra_cost")
    return str(name), value, work_count, extra_cost


def _flag(section: dict, key: str, default: bool) -> bool:
    v = section.get(key, default)
    if not isinstance(v, bool):
        raise ConfigError(f"config.{key}: expected true/false, got {v!r}")
    return v


def parse_config(data: Any, max_pieces: Optional[int] = None) -> PlannerInput:
    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping with 'config' and 'input'")
    section = data.get("config") or {}
    if not isinstance(section, dict):
        raise ConfigError("'config' must be a mapping")
    cfg = PlannerConfig(
        books_free=_flag(section, "books_free", False),
        optimize_xp=_flag(section, "optimize_xp", True),
    )
    if max_pieces is not None:
        cfg.max_pieces = max_pieces

    inp = data.get("input")
    if not isinstance(inp, dict):
        raise ConfigError("'input' must be a mapping with 'items' and/or 'books'")
    names: List[str] = []
    lists = {}
    for group in ("items", "books"):
        entries = inp.get(group) or []
        if not isinstance(entries, list):
            raise ConfigError(f"input.{group} must be a list")
        parsed = []
        for i, raw in enumerate(entries):
            name, value, work_count, extra_cost = parse_entry(raw, f"input.{group}[{i}]")
            names.append(name)
            parsed.append((value, work_count, extra_cost))
        lists[group] = parsed
    if not names:
        raise ConfigError("input has no items or books")
    return PlannerInput(config=cfg, names=names, pieces=make_pieces(lists["items"], lists["books"]))


def load_config(text: str, max_pieces: Optional[int] = None) -> PlannerInput:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"unable to parse input: {e}") from e
    return parse_config(data, max_pieces=max_pieces)


def load_config_file(path: str, max_pieces: Optional[int] = None) -> PlannerInput:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"{path} not found")
    return load_config(p.read_text(encoding="utf-8"), max_pieces=max_pieces)
