import pytest

import anvil_config as cfg
from anvil_solver import PieceKind

SWORD_YML = """
config:
  books_free: true
  optimize_xp: false
input:
  items:
    - [Sword, 1, 2]
  books:
    - [Sharpness V, "5*1", 0]
    - {name: Mending, value: "2x1", penalty: 1, extra_cost: 3}
    - [Unbreaking III, 3]
"""


def test_load_sequences_and_mappings():
    inp = cfg.load_config(SWORD_YML)
    assert inp.config.books_free is True
    assert inp.config.optimize_xp is False
    assert inp.names == ["Sword", "Sharpness V", "Mending", "Unbreaking III"]
    sword, sharp, mending, unbreaking = inp.pieces
    assert (sword.kind, sword.value, sword.work_count, sword.identity) == (PieceKind.ITEM, 1, 2, 0b0001)
    assert (sharp.kind, sharp.value, sharp.identity) == (PieceKind.BOOK, 5, 0b0010)
    assert (mending.value, mending.work_count, mending.extra_cost) == (2, 1, 3)
    assert (unbreaking.work_count, unbreaking.extra_cost, unbreaking.identity) == (0, 0, 0b1000)


def test_defaults_when_config_section_missing():
    inp = cfg.load_config("input:\n  items: [[A, 1], [B, 1]]\n")
    assert inp.config.books_free is False
    assert inp.config.optimize_xp is True
    assert inp.config.max_pieces == 12


def test_max_pieces_override():
    inp = cfg.load_config("input:\n  items: [[A, 1]]\n", max_pieces=5)
    assert inp.config.max_pieces == 5


@pytest.mark.parametrize("raw, expected", [(7, 7), ("4*2", 8), ("2 x 3", 6), ("2×2×2", 8), ("9", 9)])
def test_parse_multiplier(raw, expected):
    assert cfg.parse_multiplier(raw, "value") == expected


@pytest.mark.parametrize("raw", ["", "abc", "2**3", "-1", "1.5", "2*²", "٣", True, None, [2]])
def test_parse_multiplier_rejects(raw):
    with pytest.raises(cfg.ConfigError):
        cfg.parse_multiplier(raw, "value")


@pytest.mark.parametrize(
    "text",
    [
        "config: [",
        "- just a list",
        "config: {books_free: maybe}\ninput:\n  items: [[A, 1]]\n",
        "config: {}\n",
        "input:\n  items: []\n  books: []\n",
        "input:\n  items: [[A, 256]]\n",
        "input:\n  items: [[A, 1, 0, 0, 9]]\n",
        "input:\n  items: [[A]]\n",
        "input:\n  items: [{name: A, value: 1, colour: red}]\n",
        "input:\n  items: [{name: A, value: 1, work_count: 1, penalty: 1}]\n",
        "input:\n  items: [{value: 1}]\n",
        "input:\n  items: [Sword]\n",
        "input:\n  items: {Sword: 1}\n",
    ],
)
def test_config_errors_fail_fast(text):
    with pytest.raises(cfg.ConfigError):
        cfg.load_config(text)


def test_config_error_is_value_error():
    assert issubclass(cfg.ConfigError, ValueError)


def test_load_config_file(tmp_path):
    p = tmp_path / "config.yml"
    p.write_text(SWORD_YML, encoding="utf-8")
    assert len(cfg.load_config_file(str(p)).pieces) == 4
    with pytest.raises(FileNotFoundError):
        cfg.load_config_file(str(tmp_path / "missing.yml"))
