import pytest
from gazewall.attention.fixation import RegionFixationState
from gazewall.attention.reaction import ReactionStateMachine, Stage

def machine():
    return ReactionStateMachine(soft=0.4, strong=0.9, logged=1.4, ghost=2.2, ghost_flash=0.22)

def test_stage_trajectory():
    sm = machine(); st = RegionFixationState()
    stages, kinds = [], []
    for i, hold in enumerate([0, 0.5, 1.0, 1.5, 2.3]):
        st.hold = hold
        kinds += [r.kind for r in sm.step("a", st, now=float(i))]
        stages.append(st.stage)
    assert stages == [0, 1, 1, 2, 3]
    assert kinds == ["soft", "strong", "logged", "ghost"]
    assert kinds.count("ghost") == 1
    assert st.markers == {"soft", "strong", "logged", "ghost"}

def test_same_hold_does_not_refire():
    sm = machine(); st = RegionFixationState(hold=2.3)
    assert len(sm.step("a", st, 0.0)) == 4
    assert sm.step("a", st, 0.1) == []

def test_stage_holds_until_below_half_soft():
    sm = machine(); st = RegionFixationState(hold=2.3)
    sm.step("a", st, 0.0)
    st.hold = 0.25
    assert sm.step("a", st, 1.0) == [] and st.stage == Stage.GHOST
    st.hold = 0.19
    out = sm.step("a", st, 2.0)
    assert [r.kind for r in out] == ["reset"]
    assert st.stage == 0 and st.markers == set()
    st.hold = 0.5
    assert [r.kind for r in sm.step("a", st, 3.0)] == ["soft"]

def test_idle_region_emits_nothing():
    assert machine().step("a", RegionFixationState(), 0.0) == []

def test_ghost_flash_clears_itself():
    sm = machine(); st = RegionFixationState(hold=2.5)
    sm.step("a", st, now=10.0)
    assert sm.transients(10.1) == ["a"]
    assert sm.transients(10.3) == []
    assert st.stage == Stage.GHOST

def test_step_all():
    sm = machine()
    states = {"a": RegionFixationState(hold=1.0), "b": RegionFixationState()}
    assert [(r.region_id, r.kind) for r in sm.step_all(states, 0.0)] == [("a", "soft"), ("a", "strong")]

@pytest.mark.parametrize("th", [(0.4, 0.4, 1.4, 2.2), (0.0, 0.9, 1.4, 2.2), (0.4, 1.5, 1.4, 2.2)])
def test_thresholds_must_increase(th):
    with pytest.raises(ValueError):
        ReactionStateMachine(*th)
