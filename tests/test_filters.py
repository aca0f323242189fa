import pytest
from gazewall.filters.outlier import SampleFilter
from gazewall.filters.moving_average import TemporalSmoother
from gazewall.filters.display import DisplaySmoother
from gazewall.runtime.events import RawSample

def S(x, y, t=0.0): return RawSample(x=x, y=y, t=t)

def test_first_sample_always_accepted():
    assert SampleFilter(700).accept(None, S(5000, -3000))

def test_outlier_threshold_boundary():
    f = SampleFilter(700)
    prev = S(0, 0)
    assert f.accept(prev, S(700, 0))      # at threshold
    assert f.accept(prev, S(420, 560))    # 3-4-5, exactly 700
    assert not f.accept(prev, S(700.5, 0))

def test_rejection_uses_only_last_two_points():
    f = SampleFilter(100)
    far = S(1000, 0, 1.0)
    assert f.accept(S(950, 0), far)
    assert not f.accept(S(0, 0), far)

def test_smoother_first_sample_has_no_lag():
    sm = TemporalSmoother(6)
    assert sm.push(123.456, 78.9) == (123.456, 78.9)

def test_smoother_window_evicts_oldest():
    sm = TemporalSmoother(6)
    for i in range(7):
        out = sm.push(i*6.0, 0.0)
    assert len(sm) == 6
    assert out == (pytest.approx(21.0), 0.0)

def test_smoother_rejects_empty_window():
    with pytest.raises(ValueError):
        TemporalSmoother(0)

def test_display_ema():
    d = DisplaySmoother(alpha=0.25)
    assert d.position() is None
    assert d.push(0, 0) == (0, 0)
    assert d.push(100, 40) == (pytest.approx(25.0), pytest.approx(10.0))

def test_display_disabled_publishes_nothing():
    d = DisplaySmoother(enabled=False)
    d.push(10, 10)
    assert d.position() is None
    d.enabled = True
    assert d.position() == (10, 10)

def test_display_one_euro_seeds_with_first_sample():
    d = DisplaySmoother(mode="one_euro")
    assert d.push(300, 200, t=1.0) == (300, 200)
    x, y = d.push(400, 200, t=1.033)
    assert 300 < x < 400 and y == pytest.approx(200)

def test_display_unknown_mode():
    with pytest.raises(ValueError):
        DisplaySmoother(mode="kalman")

def test_non_finite_samples_are_never_accepted():
    f = SampleFilter(700)
    nan, inf = float("nan"), float("inf")
    assert not f.accept(None, S(nan, nan))
    assert not f.accept(None, S(inf, 10))
    assert not f.accept(S(0, 0), S(10, nan))
    assert f.accept(None, S(10, 10))

def test_display_one_euro_follows_fast_motion_more_with_beta():
    slow, fast = DisplaySmoother(mode="one_euro"), DisplaySmoother(mode="one_euro", beta=0.05)
    for d in (slow, fast): d.push(0, 0, t=0.0)
    assert fast.push(300, 0, t=0.033)[0] > slow.push(300, 0, t=0.033)[0]
