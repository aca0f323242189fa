import pytest
from gazewall.regions.index import Rect, Region, RegionCategory, RegionIndex
from gazewall.attention.fixation import FixationTracker
from gazewall.attention.profile import AttentionAggregator, Score, classify
from gazewall.runtime.events import INSUFFICIENT

def tracker(dt=1.0):
    idx = RegionIndex([Region("a", "A", RegionCategory.PRIVATE, Rect(0, 0, 10, 10)),
                       Region("b", "B", RegionCategory.DOMESTIC, Rect(100, 0, 10, 10)),
                       Region("c", "C", RegionCategory.PRIVATE, Rect(200, 0, 10, 10))])
    return FixationTracker(idx, dt=dt)

def test_dominant_category_and_share():
    tr = tracker()
    tr.states["a"].fixation_ticks = 8
    tr.states["b"].fixation_ticks = 2
    p = AttentionAggregator(tr).profile()
    assert p.dominant == "private" and p.share == 0.8 and p.label == "VOYEUR"

def test_categories_are_summed():
    tr = tracker()
    tr.states["a"].fixation_ticks = 3
    tr.states["b"].fixation_ticks = 4
    tr.states["c"].fixation_ticks = 3
    agg = AttentionAggregator(tr)
    assert agg.category_totals() == {RegionCategory.PRIVATE: 6.0, RegionCategory.DOMESTIC: 4.0}
    assert agg.profile().share == pytest.approx(0.6)

def test_tie_goes_to_first_category():
    tr = tracker()
    tr.states["b"].fixation_ticks = 5
    tr.states["c"].fixation_ticks = 5
    p = AttentionAggregator(tr).profile()
    assert p.dominant == "private" and p.share == 0.5

def test_insufficient_below_min_total():
    tr = tracker(dt=0.12)
    for _ in range(5): tr.update((5, 5))
    assert AttentionAggregator(tr, min_total=1.0).profile() == INSUFFICIENT

@pytest.mark.parametrize("share,label", [(0.41, "PATROLLER"), (0.4, "OBSERVER"), (0.38, "OBSERVER"),
                                         (0.35, "OBSERVER"), (0.3, "DIFFUSE ATTENTION")])
def test_label_table(share, label):
    assert classify(RegionCategory.TRANSIT, share) == label

def test_score_only_grows():
    s = Score()
    assert s.add() == 1.0
    assert s.add(2.5) == 3.5
    with pytest.raises(ValueError):
        s.add(-1)
    assert float(s) == 3.5

def test_zero_minimum_with_no_fixation_is_insufficient():
    assert AttentionAggregator(tracker(), min_total=0.0).profile() == INSUFFICIENT
