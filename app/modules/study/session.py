"""In-memory study sessions over a flashcard set.

A session walks one card at a time through a set, tracks a known/difficult
status per card, bookmarks, zoom and a pausable study timer, and reports an
end-of-session summary. Time is read from an injectable clock so auto-play and
the timer can be driven deterministically.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional
from uuid import uuid4

from app.core.logging import get_logger
from app.modules.study.models import (
    CardStatus,
    SessionStats,
    StudyAction,
    StudyCard,
    StudyState,
    ViewerSettings,
)


logger = get_logger(__name__)

Clock = Callable[[], float]

ZOOM_STEP = 0.25
ZOOM_MIN = 0.5
ZOOM_MAX = 3.0
SWIPE_OFFSET = 100
SWIPE_VELOCITY = 500


class StudySessionNotFound(LookupError):
    pass


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def _short_id() -> str:
    return uuid4().hex[:8]


@dataclass
class StudySession:
    id: str
    user_id: int
    set_id: int
    title: str
    cards: list[StudyCard]
    settings: ViewerSettings = field(default_factory=ViewerSettings)
    clock: Clock = field(default=time.monotonic, repr=False)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    current_index: int = 0
    is_flipped: bool = False
    zoom_level: float = 1.0
    show_summary: bool = False
    bookmarks: set[str] = field(default_factory=set)
    card_status: dict[str, CardStatus] = field(default_factory=dict)
    shuffled: list[StudyCard] = field(default_factory=list)
    last_activity: float = 0.0
    # timer
    _elapsed: float = field(default=0.0, repr=False)
    _timer_started_at: Optional[float] = field(default=None, repr=False)
    _last_moved_at: float = field(default=0.0, repr=False)

    def __post_init__(self) -> None:
        now = self.clock()
        self.shuffled = list(self.cards)
        self.card_status = {c.id: CardStatus.UNKNOWN for c in self.cards}
        self._timer_started_at = now
        self._last_moved_at = now
        self.last_activity = now
        if self.settings.is_randomized:
            self.shuffle()

    # Derived state ------------------------------------------------------
    @property
    def current_cards(self) -> list[StudyCard]:
        return self.shuffled if self.settings.is_randomized else self.cards

    @property
    def current_card(self) -> Optional[StudyCard]:
        cards = self.current_cards
        if 0 <= self.current_index < len(cards):
            return cards[self.current_index]
        return None

    @property
    def timer_active(self) -> bool:
        return self._timer_started_at is not None

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.current_cards) - 1

    def study_seconds(self) -> int:
        elapsed = self._elapsed
        if self._timer_started_at is not None:
            elapsed += self.clock() - self._timer_started_at
        return int(elapsed)

    def stats(self) -> SessionStats:
        total = len(self.current_cards)
        statuses = list(self.card_status.values())
        known = statuses.count(CardStatus.KNOWN)
        difficult = statuses.count(CardStatus.DIFFICULT)
        seconds = self.study_seconds()
        progress = ((self.current_index + 1) / total * 100.0) if total else 0.0
        return SessionStats(
            total=total,
            known=known,
            difficult=difficult,
            unknown=total - known - difficult,
            bookmarked=len(self.bookmarks),
            study_time_seconds=seconds,
            study_time=format_time(seconds),
            progress_percent=round(progress, 2),
        )

    def to_state(self) -> StudyState:
        return StudyState(
            id=self.id,
            set_id=self.set_id,
            title=self.title,
            settings=self.settings,
            current_index=self.current_index,
            current_card=self.current_card,
            is_flipped=self.is_flipped,
            zoom_level=self.zoom_level,
            timer_active=self.timer_active,
            show_summary=self.show_summary,
            order=[c.id for c in self.current_cards],
            bookmarks=sorted(self.bookmarks),
            card_status=dict(self.card_status),
            stats=self.stats(),
        )

    # Timer ---------------------------------------------------------------
    def pause_timer(self) -> None:
        if self._timer_started_at is not None:
            self._elapsed += self.clock() - self._timer_started_at
            self._timer_started_at = None

    def resume_timer(self) -> None:
        if self._timer_started_at is None:
            self._timer_started_at = self.clock()

    def toggle_timer(self) -> None:
        if self.timer_active:
            self.pause_timer()
        else:
            self.resume_timer()

    def _open_summary(self) -> None:
        self.show_summary = True
        self.pause_timer()

    # Navigation ----------------------------------------------------------
    def go_to(self, index: int, *, at: Optional[float] = None) -> None:
        cards = self.current_cards
        if not cards:
            return
        index = max(0, min(index, len(cards) - 1))
        if index == self.current_index:
            return
        self.current_index = index
        self.is_flipped = False
        self._last_moved_at = self.clock() if at is None else at
        if index == len(cards) - 1:
            self._open_summary()

    def next(self) -> None:
        if not self.is_last:
            self.go_to(self.current_index + 1)

    def prev(self) -> None:
        if self.current_index > 0:
            self.go_to(self.current_index - 1)

    def flip(self) -> None:
        self.is_flipped = not self.is_flipped
        self._last_moved_at = self.clock()

    def mark(self, status: CardStatus) -> None:
        """Record a status for the current card, then advance or finish."""
        card = self.current_card
        if card is None:
            return
        self.card_status[card.id] = status
        if self.is_last:
            self._open_summary()
        else:
            self.next()

    def toggle_bookmark(self) -> None:
        card = self.current_card
        if card is None:
            return
        if card.id in self.bookmarks:
            self.bookmarks.discard(card.id)
        else:
            self.bookmarks.add(card.id)

    # Zoom ----------------------------------------------------------------
    def zoom_in(self) -> None:
        self.zoom_level = min(self.zoom_level + ZOOM_STEP, ZOOM_MAX)

    def zoom_out(self) -> None:
        self.zoom_level = max(self.zoom_level - ZOOM_STEP, ZOOM_MIN)

    def reset_zoom(self) -> None:
        self.zoom_level = 1.0

    # Order ---------------------------------------------------------------
    def _rewind(self) -> None:
        self.current_index = 0
        self.is_flipped = False
        self.show_summary = False
        self._last_moved_at = self.clock()

    def shuffle(self) -> None:
        shuffled = list(self.current_cards)
        self.rng.shuffle(shuffled)
        self.shuffled = shuffled
        self.settings = self.settings.model_copy(update={"is_randomized": True})
        self._rewind()

    def update_settings(self, **changes) -> None:
        randomized = changes.get("is_randomized")
        self.settings = self.settings.model_copy(update=changes)
        if randomized is True:
            self.shuffle()
        elif randomized is False:
            self._rewind()
        if "auto_play" in changes or "auto_play_speed" in changes:
            self._last_moved_at = self.clock()

    def restart(self) -> None:
        self._rewind()
        self.zoom_level = 1.0
        self._elapsed = 0.0
        self._timer_started_at = self.clock()
        self.card_status = {c.id: CardStatus.UNKNOWN for c in self.current_cards}

    # Input ---------------------------------------------------------------
    def apply(self, action: StudyAction, value: Optional[int] = None) -> None:
        if action == StudyAction.FLIP:
            self.flip()
        elif action == StudyAction.NEXT:
            self.next()
        elif action == StudyAction.PREV:
            self.prev()
        elif action == StudyAction.GO_TO:
            self.go_to(int(value or 0))
        elif action == StudyAction.MARK_KNOWN:
            self.mark(CardStatus.KNOWN)
        elif action == StudyAction.MARK_DIFFICULT:
            self.mark(CardStatus.DIFFICULT)
        elif action == StudyAction.TOGGLE_BOOKMARK:
            self.toggle_bookmark()
        elif action == StudyAction.ZOOM_IN:
            self.zoom_in()
        elif action == StudyAction.ZOOM_OUT:
            self.zoom_out()
        elif action == StudyAction.RESET_ZOOM:
            self.reset_zoom()
        elif action == StudyAction.SHUFFLE:
            self.shuffle()
        elif action == StudyAction.TOGGLE_TIMER:
            self.toggle_timer()
        elif action == StudyAction.RESTART:
            self.restart()

    def handle_key(self, key: str) -> bool:
        """Apply a keyboard shortcut. Returns False when the key is ignored."""
        if self.show_summary:
            return False
        vertical = self.settings.is_vertical
        if key == "ArrowLeft":
            if vertical:
                return False
            self.prev()
        elif key == "ArrowRight":
            if vertical:
                return False
            self.next()
        elif key == "ArrowUp":
            if vertical:
                self.prev()
            else:
                self.mark(CardStatus.KNOWN)
        elif key == "ArrowDown":
            if vertical:
                self.next()
            else:
                self.mark(CardStatus.DIFFICULT)
        elif key == " ":
            self.flip()
        elif key == "b":
            self.toggle_bookmark()
        elif key == "k":
            self.mark(CardStatus.DIFFICULT)
        elif key == "d":
            self.mark(CardStatus.KNOWN)
        elif key == "r":
            self.reset_zoom()
        elif key == "+":
            self.zoom_in()
        elif key == "-":
            self.zoom_out()
        else:
            return False
        return True

    def handle_swipe(
        self,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        velocity_x: float = 0.0,
        velocity_y: float = 0.0,
    ) -> Optional[CardStatus]:
        """Mark the card from a drag on the axis across the carousel.

        In vertical mode the cards scroll up/down, so a sideways drag marks
        them; in horizontal mode an up/down drag does. Positive offsets mean
        difficult, negative offsets mean known.
        """
        if self.settings.is_vertical:
            offset, velocity = offset_x, velocity_x
        else:
            offset, velocity = offset_y, velocity_y
        if abs(offset) <= SWIPE_OFFSET and abs(velocity) <= SWIPE_VELOCITY:
            return None
        status = CardStatus.DIFFICULT if offset > 0 else CardStatus.KNOWN
        self.mark(status)
        return status

    def tick(self) -> int:
        """Advance auto-play for the time elapsed since the last move.

        Returns the number of cards advanced. Auto-play wraps to the first
        card at the end of the deck and stops once the summary is showing.
        """
        if not self.settings.auto_play or self.show_summary or not self.current_cards:
            return 0
        speed = self.settings.auto_play_speed
        now = self.clock()
        moved = 0
        while not self.show_summary and now - self._last_moved_at >= speed:
            at = self._last_moved_at + speed
            if self.is_last:
                self.current_index = 0
                self.is_flipped = False
                self._last_moved_at = at
            else:
                self.go_to(self.current_index + 1, at=at)
            moved += 1
        return moved


class StudySessionManager:
    """Owns live sessions and sweeps idle ones."""

    def __init__(self, *, clock: Clock = time.monotonic) -> None:
        self.sessions: dict[str, StudySession] = {}
        self.clock = clock
        self._cleanup_task: Optional[asyncio.Task] = None
        self._idle_seconds: int = 3600
        self._sweep_interval: int = 60

    def create(
        self,
        *,
        user_id: int,
        set_id: int,
        title: str,
        cards: list[StudyCard],
        settings: Optional[ViewerSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> StudySession:
        session = StudySession(
            id=_short_id(),
            user_id=user_id,
            set_id=set_id,
            title=title,
            cards=cards,
            settings=settings or ViewerSettings(),
            clock=self.clock,
            rng=rng or random.Random(),
        )
        self.sessions[session.id] = session
        logger.info(
            f"Study session {session.id} started for set {set_id} ({len(cards)} cards)",
            extra={"user_id": user_id, "set_id": set_id},
        )
        return session

    def get(self, session_id: str, *, user_id: int) -> StudySession:
        session = self.sessions.get(session_id)
        if session is None or session.user_id != user_id:
            raise StudySessionNotFound(session_id)
        session.last_activity = self.clock()
        session.tick()
        return session

    def end(self, session_id: str, *, user_id: int) -> StudySession:
        session = self.get(session_id, user_id=user_id)
        self.sessions.pop(session_id, None)
        session.pause_timer()
        return session

    def sweep(self) -> list[str]:
        now = self.clock()
        expired = [
            sid
            for sid, s in self.sessions.items()
            if now - s.last_activity > self._idle_seconds
        ]
        for sid in expired:
            self.sessions.pop(sid, None)
        return expired

    # Cleanup loop -------------------------------------------------------
    def start(self, *, idle_seconds: int = 3600, sweep_interval: int = 60) -> None:
        self._idle_seconds = max(60, int(idle_seconds))
        self._sweep_interval = max(5, int(sweep_interval))
        if self._cleanup_task and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
        self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._sweep_interval)
                expired = self.sweep()
                if expired:
                    logger.info(f"Swept {len(expired)} idle study sessions")
        except asyncio.CancelledError:
            return


# Singleton manager used by the API layer
study_manager = StudySessionManager()
