"""
UI state machine.

The page state is a frozen ``UIState`` changed only through ``reduce``.
Every generation gets a request id when it is issued; completion events
for any other id are dropped, so a slow stale reply can never overwrite
the result of a newer request.

    IDLE -> GENERATING -> SUCCESS | ERROR -> GENERATING -> ...
"""

import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple, Union

from renderer import render_lesson
from schemas import GroundingSource, ParsedLesson, displayable_sources


class Phase(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"


class Tab(str, Enum):
    LESSON = "lesson"
    PROMPTS = "prompts"


@dataclass(frozen=True)
class UIState:
    phase: Phase = Phase.IDLE
    request_id: int = 0
    word: str = ""
    active_tab: Tab = Tab.LESSON
    lesson: str = ""
    prompts: Tuple[str, ...] = ()
    sources: Tuple[GroundingSource, ...] = ()
    error: str = ""
    error_code: str = ""


# =========================================================
# EVENTS
# =========================================================
@dataclass(frozen=True)
class Started:
    request_id: int
    word: str


@dataclass(frozen=True)
class Succeeded:
    request_id: int
    result: ParsedLesson


@dataclass(frozen=True)
class Failed:
    request_id: int
    message: str
    code: str = "unknown"


@dataclass(frozen=True)
class Rejected:
    """Input refused before any request was sent."""
    request_id: int
    message: str


@dataclass(frozen=True)
class TabSelected:
    tab: Tab


Event = Union[Started, Succeeded, Failed, Rejected, TabSelected]


# =========================================================
# REDUCER
# =========================================================
def reduce(state: UIState, event: Event) -> UIState:
    if isinstance(event, TabSelected):
        return replace(state, active_tab=event.tab)

    if isinstance(event, (Started, Rejected)):
        if event.request_id <= state.request_id:
            return state
        if isinstance(event, Rejected):
            # nothing was sent, so what is on screen stays
            return replace(
                state,
                phase=Phase.ERROR,
                request_id=event.request_id,
                error=event.message,
                error_code="validation",
            )
        # previous results are cleared, never merged
        return UIState(
            phase=Phase.GENERATING,
            request_id=event.request_id,
            word=event.word,
            active_tab=Tab.LESSON,
        )

    if not isinstance(event, (Succeeded, Failed)):
        raise TypeError(f"Unknown event: {event!r}")

    if event.request_id != state.request_id or state.phase != Phase.GENERATING:
        return state

    if isinstance(event, Succeeded):
        return replace(
            state,
            phase=Phase.SUCCESS,
            lesson=event.result.lesson,
            prompts=tuple(event.result.prompts),
            sources=tuple(event.result.sources),
        )

    return replace(
        state,
        phase=Phase.ERROR,
        error=event.message,
        error_code=event.code,
    )


def _shows_results(state: UIState) -> bool:
    # a rejected blank word keeps the tabs only if a lesson is still shown
    if state.phase == Phase.IDLE:
        return False
    if state.error_code == "validation":
        return bool(state.lesson)
    return True


def to_view(state: UIState) -> dict:
    """Projection handed to templates and the JSON API."""
    return {
        "state": state.phase.value,
        "request_id": state.request_id,
        "word": state.word,
        "active_tab": state.active_tab.value,
        "show_tabs": _shows_results(state),
        "error": state.error,
        "lesson": state.lesson,
        "lesson_html": render_lesson(state.lesson) if state.lesson else "",
        "prompts": list(state.prompts),
        "sources": [
            {"uri": s.uri, "title": s.title, "label": s.label}
            for s in displayable_sources(list(state.sources))
        ],
    }


# =========================================================
# STATE CONTAINER
# Flask serves requests from several threads
# =========================================================
class LessonSession:
    def __init__(self):
        self._state = UIState()
        self._last_request_id = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> UIState:
        return self._state

    def issue_request_id(self) -> int:
        with self._lock:
            self._last_request_id += 1
            return self._last_request_id

    def dispatch(self, event: Event) -> UIState:
        with self._lock:
            self._state = reduce(self._state, event)
            return self._state
