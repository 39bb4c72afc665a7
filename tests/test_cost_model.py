import pytest

import anvil_solver as solver


def test_xp_of_breakpoints():
    assert solver.xp_of(0) == 0
    assert solver.xp_of(1) == 7
    assert solver.xp_of(15) == 315
    assert solver.xp_of(16) == 352
    assert solver.xp_of(30) == 1395
    assert solver.xp_of(31) == 1507
    assert solver.xp_of(32) == 1628


def test_xp_of_is_monotonic():
    xs = [solver.xp_of(lv) for lv in range(0, 80)]
    assert all(a < b for a, b in zip(xs, xs[1:]))


def test_level_of_inverts_xp_of():
    for level in range(0, 120):
        assert solver.level_of(solver.xp_of(level)) == level


def test_level_of_rounds_up_between_levels():
    # 8 xp is past level 1 (7) but short of level 2 (16)
    assert solver.level_of(8) == 2
    assert solver.level_of(0) == 0


def test_penalty_recurrence():
    assert solver.penalty_of(0) == 0
    for w in range(0, 20):
        assert solver.penalty_of(w + 1) == 2 * solver.penalty_of(w) + 1


def test_work_count_of_inverts_penalty_of():
    for w in range(0, 20):
        assert solver.work_count_of(solver.penalty_of(w)) == w
    # off-curve penalties round up to the next work count
    assert solver.work_count_of(2) == 2


@pytest.mark.parametrize("fn", [solver.xp_of, solver.level_of, solver.penalty_of, solver.work_count_of])
def test_negative_arguments_rejected(fn):
    with pytest.raises(ValueError):
        fn(-1)
