import pytest
from gazewall.regions.index import Rect, Region, RegionCategory, RegionIndex
from gazewall.attention.fixation import FixationTracker

A = (50, 50); B = (250, 50)

def tracker(**kw):
    idx = RegionIndex([Region("a", "A", RegionCategory.PRIVATE, Rect(0, 0, 100, 100)),
                       Region("b", "B", RegionCategory.DOMESTIC, Rect(200, 0, 100, 100))], hit_margin=10)
    return FixationTracker(idx, **kw)

def test_totals_have_no_drift():
    tr = tracker(dt=0.12)
    n = 37
    for _ in range(n): tr.update(A)
    assert sum(tr.totals().values()) == n * 0.12
    assert tr.fixation_time("b") == 0.0

def test_hold_decays_faster_than_it_accrues():
    tr = tracker(dt=0.1, decay=2.0)
    for _ in range(5): tr.update(A)
    assert tr.states["a"].hold == pytest.approx(0.5)
    tr.update(B)
    assert tr.states["a"].hold == pytest.approx(0.3)
    assert tr.states["b"].hold == pytest.approx(0.1)
    for _ in range(3): tr.update(B)
    assert tr.states["a"].hold == 0.0
    assert tr.fixation_time("a") == pytest.approx(0.5)

def test_no_hit_is_normal_operation():
    tr = tracker(dt=0.1)
    res = tr.update(None)
    assert res.hit is None and res.focused is None and not res.scored
    res = tr.update((1000, 1000))
    assert res.hit is None
    assert sum(tr.totals().values()) == 0

def test_focus_changes_only_on_identity_change():
    tr = tracker()
    assert tr.update(A).focus_changed
    assert not tr.update(A).focus_changed
    res = tr.update(None)
    assert res.focused == "a" and not res.focus_changed
    res = tr.update(B)
    assert res.focus_changed and res.focused == "b"

def test_score_every_n_ticks_on_focused_region():
    tr = tracker(score_every=3)
    scored = [tr.update(A).scored for _ in range(7)]
    assert scored == [False, False, True, False, False, True, False]
    # focus change restarts the streak
    assert [tr.update(B).scored for _ in range(3)] == [False, False, True]

def test_decay_must_exceed_one():
    with pytest.raises(ValueError):
        tracker(decay=1.0)
