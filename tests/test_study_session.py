import asyncio
import random

import pytest

from app.modules.study.models import CardStatus, StudyAction, StudyCard, ViewerSettings
from app.modules.study.session import (
    StudySession,
    StudySessionManager,
    StudySessionNotFound,
    format_time,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _cards(n):
    return [StudyCard(id=f"card-{i}", card_number=i) for i in range(1, n + 1)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    return StudySession(
        id="s1", user_id=1, set_id=7, title="Cells", cards=_cards(4), clock=clock,
        rng=random.Random(3),
    )


def test_initial_state(session):
    state = session.to_state()
    assert state.current_index == 0
    assert not state.is_flipped
    assert state.zoom_level == 1.0
    assert set(state.card_status.values()) == {CardStatus.UNKNOWN}
    assert state.settings.is_vertical
    assert state.timer_active


def test_moving_unflips(session):
    session.flip()
    assert session.is_flipped
    session.next()
    assert session.current_index == 1
    assert not session.is_flipped


def test_reaching_last_card_opens_summary(session):
    session.go_to(3)
    assert session.show_summary
    assert not session.timer_active


def test_prev_at_start_is_noop(session):
    session.prev()
    assert session.current_index == 0


def test_mark_records_and_advances(session):
    session.mark(CardStatus.KNOWN)
    assert session.card_status["card-1"] == CardStatus.KNOWN
    assert session.current_index == 1


def test_mark_on_last_card_shows_summary(session):
    session.go_to(3)
    session.show_summary = False
    session.mark(CardStatus.DIFFICULT)
    assert session.card_status["card-4"] == CardStatus.DIFFICULT
    assert session.show_summary
    assert session.current_index == 3


def test_zoom_is_clamped(session):
    for _ in range(20):
        session.zoom_in()
    assert session.zoom_level == 3.0
    for _ in range(20):
        session.zoom_out()
    assert session.zoom_level == 0.5
    session.reset_zoom()
    assert session.zoom_level == 1.0


def test_bookmark_toggles(session):
    session.toggle_bookmark()
    assert session.bookmarks == {"card-1"}
    session.toggle_bookmark()
    assert session.bookmarks == set()


def test_shuffle_and_unshuffle(session):
    session.next()
    session.flip()
    session.shuffle()

    assert session.settings.is_randomized
    assert session.current_index == 0
    assert not session.is_flipped
    assert sorted(c.id for c in session.current_cards) == [f"card-{i}" for i in range(1, 5)]

    session.next()
    session.update_settings(is_randomized=False)
    assert [c.id for c in session.current_cards] == [f"card-{i}" for i in range(1, 5)]
    assert session.current_index == 0


def test_vertical_keys(session):
    assert session.handle_key("ArrowDown")
    assert session.current_index == 1
    assert session.handle_key("ArrowUp")
    assert session.current_index == 0
    assert not session.handle_key("ArrowRight")
    assert session.current_index == 0


def test_horizontal_keys(session):
    session.update_settings(is_vertical=False)
    session.handle_key("ArrowRight")
    assert session.current_index == 1
    session.handle_key("ArrowUp")
    assert session.card_status["card-2"] == CardStatus.KNOWN
    session.handle_key("ArrowDown")
    assert session.card_status["card-3"] == CardStatus.DIFFICULT


def test_letter_keys(session):
    session.handle_key(" ")
    assert session.is_flipped
    session.handle_key("b")
    assert "card-1" in session.bookmarks
    session.handle_key("+")
    assert session.zoom_level == 1.25
    session.handle_key("r")
    assert session.zoom_level == 1.0
    session.handle_key("k")
    assert session.card_status["card-1"] == CardStatus.DIFFICULT
    session.handle_key("d")
    assert session.card_status["card-2"] == CardStatus.KNOWN
    assert not session.handle_key("x")


def test_keys_ignored_while_summary_shows(session):
    session.go_to(3)
    assert not session.handle_key("ArrowUp")
    assert session.current_index == 3


def test_swipe_thresholds(session):
    assert session.handle_swipe(offset_x=50, velocity_x=100) is None
    assert session.handle_swipe(offset_x=150) == CardStatus.DIFFICULT
    assert session.card_status["card-1"] == CardStatus.DIFFICULT
    assert session.handle_swipe(offset_x=-10, velocity_x=-800) == CardStatus.KNOWN
    assert session.card_status["card-2"] == CardStatus.KNOWN
    # vertical drag is along the carousel in vertical mode
    assert session.handle_swipe(offset_y=400) is None


def test_swipe_uses_y_axis_when_horizontal(session):
    session.update_settings(is_vertical=False)
    assert session.handle_swipe(offset_y=-120) == CardStatus.KNOWN


def test_auto_play_advances_and_wraps(clock):
    s = StudySession(
        id="s2", user_id=1, set_id=1, title="t", cards=_cards(3), clock=clock,
        settings=ViewerSettings(auto_play=True, auto_play_speed=5),
    )
    clock.advance(4)
    assert s.tick() == 0
    clock.advance(1)
    assert s.tick() == 1
    assert s.current_index == 1


def test_auto_play_stops_at_summary(clock):
    s = StudySession(
        id="s3", user_id=1, set_id=1, title="t", cards=_cards(3), clock=clock,
        settings=ViewerSettings(auto_play=True, auto_play_speed=2),
    )
    clock.advance(10)
    s.tick()
    assert s.current_index == 2
    assert s.show_summary


def test_timer_pause_and_stats(session, clock):
    clock.advance(30)
    session.toggle_timer()
    clock.advance(100)
    session.mark(CardStatus.KNOWN)
    session.toggle_bookmark()

    stats = session.stats()
    assert stats.study_time_seconds == 30
    assert stats.study_time == "00:30"
    assert stats.total == 4
    assert stats.known == 1
    assert stats.difficult == 0
    assert stats.unknown == 3
    assert stats.bookmarked == 1
    assert stats.progress_percent == 50.0


def test_restart_resets_everything(session, clock):
    session.mark(CardStatus.KNOWN)
    session.zoom_in()
    clock.advance(60)
    session.restart()

    assert session.current_index == 0
    assert session.zoom_level == 1.0
    assert session.study_seconds() == 0
    assert set(session.card_status.values()) == {CardStatus.UNKNOWN}


def test_apply_dispatches(session):
    session.apply(StudyAction.GO_TO, 2)
    assert session.current_index == 2
    session.apply(StudyAction.FLIP)
    assert session.is_flipped


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(125) == "02:05"


def test_manager_ownership_and_sweep(clock):
    manager = StudySessionManager(clock=clock)
    s = manager.create(user_id=1, set_id=1, title="t", cards=_cards(2))

    assert manager.get(s.id, user_id=1) is s
    with pytest.raises(StudySessionNotFound):
        manager.get(s.id, user_id=2)

    manager._idle_seconds = 120
    clock.advance(121)
    assert manager.sweep() == [s.id]
    with pytest.raises(StudySessionNotFound):
        manager.get(s.id, user_id=1)


def test_manager_end(clock):
    manager = StudySessionManager(clock=clock)
    s = manager.create(user_id=1, set_id=1, title="t", cards=_cards(2))
    manager.end(s.id, user_id=1)
    assert s.id not in manager.sessions


def test_cleanup_loop_starts_and_stops(clock):
    async def run():
        manager = StudySessionManager(clock=clock)
        manager.start(idle_seconds=60, sweep_interval=5)
        assert manager._cleanup_task is not None
        await manager.stop()
        assert manager._cleanup_task is None

    asyncio.run(run())
