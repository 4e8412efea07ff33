from refclip.core.marks import MarkState, MarkStateMachine
from refclip.core.repository import ClipRepository
from conftest import T0


class Playhead:
    def __init__(self):
        self.t = 0.0

    def __call__(self):
        return self.t


def _machine():
    repo = ClipRepository()
    playhead = Playhead()
    ids = iter(f"id{i}" for i in range(100))
    machine = MarkStateMachine(repo, clock=playhead, now=lambda: T0, id_factory=lambda: next(ids))
    return machine, repo, playhead


def test_state_transitions():
    machine, _, _ = _machine()
    assert machine.state is MarkState.EMPTY
    machine.mark_in(5.0)
    assert machine.state is MarkState.IN_ONLY
    machine.clear_marks()
    machine.mark_out(8.0)
    assert machine.state is MarkState.OUT_ONLY
    machine.mark_in(2.0)
    assert machine.state is MarkState.BOTH


def test_marks_default_to_playhead():
    machine, _, playhead = _machine()
    playhead.t = 12.25
    machine.mark_in()
    playhead.t = 15.5
    machine.mark_out()
    assert (machine.in_mark, machine.out_mark) == (12.25, 15.5)


def test_in_past_out_drags_out_along():
    machine, _, _ = _machine()
    machine.mark_out(10.0)
    machine.mark_in(12.0)
    assert (machine.in_mark, machine.out_mark) == (12.0, 12.0)


def test_out_before_in_drags_in_along():
    machine, _, _ = _machine()
    machine.mark_in(10.0)
    machine.mark_out(4.0)
    assert (machine.in_mark, machine.out_mark) == (4.0, 4.0)


def test_negative_times_clamp_to_zero():
    machine, _, _ = _machine()
    machine.mark_in(-2.0)
    assert machine.in_mark == 0.0


def test_add_clip_from_marks_names_and_resets():
    machine, repo, _ = _machine()
    seen = []
    machine.listener = lambda i, o: seen.append((i, o))
    machine.mark_in(342.5)
    machine.mark_out(348.2)
    clip = machine.add_clip_from_marks()
    assert clip.name == "Clip 1"
    assert (clip.in_seconds, clip.out_seconds) == (342.5, 348.2)
    assert clip.created_on == clip.modified_on == T0
    assert list(repo) == [clip]
    assert machine.state is MarkState.EMPTY
    assert seen[-1] == (None, None)

    machine.mark_in(400.0)
    machine.mark_out(401.0)
    assert machine.add_clip_from_marks().name == "Clip 2"


def test_add_clip_requires_positive_interval():
    machine, repo, _ = _machine()
    assert machine.add_clip_from_marks() is None
    machine.mark_in(3.0)
    assert machine.add_clip_from_marks() is None
    machine.mark_out(3.0)
    assert machine.add_clip_from_marks() is None
    assert len(repo) == 0
    assert machine.state is MarkState.BOTH  # marks kept for adjustment


def test_add_clip_with_only_out_mark_is_noop():
    machine, repo, _ = _machine()
    machine.mark_out(7.0)
    assert machine.state is MarkState.OUT_ONLY
    assert machine.add_clip_from_marks() is None
    assert len(repo) == 0
    assert (machine.in_mark, machine.out_mark) == (None, 7.0)
