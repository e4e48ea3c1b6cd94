"""
Turn-serialised controller around ``GameState``.

The controller owns the only game, accepts input for the seat whose turn it
is, and paces actions through a ``Scheduler``:

    request -> reveal top card (ACTION_RESOLVING) -> reveal delay -> apply

Computer seats get an extra think delay before their decision. Every pending
callback is tied to the current game epoch; ``request_reset`` bumps the epoch
and cancels outstanding handles, so a stale timer never touches a new game.

Headless callers use ``ImmediateScheduler`` (delays ignored). The GUI plugs in
a Qt timer based scheduler.
"""
from __future__ import annotations

import itertools
import random
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Protocol

from .agents import ComputerPolicy
from .game import Action, ActionResult, GameConfig, GameSnapshot, GameState, new_game, reset_game

EVENT_STATE = "state"
EVENT_MESSAGE = "message"
EVENT_WINNER = "winner"


class Handle(Protocol):
    def cancel(self) -> None:
        """Prevent the scheduled callback from running if it has not run yet."""


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Handle:
        """Run ``callback`` once after roughly ``delay_ms`` milliseconds."""


class _QueuedCall:
    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled or self.done:
            return
        self.done = True
        self._callback()


class ImmediateScheduler:
    """
    Runs callbacks right away, ignoring the delay.

    Calls scheduled from inside a running callback are queued and drained in
    order, so a whole computer-only game runs as a loop rather than recursion.
    """

    def __init__(self) -> None:
        self._queue: Deque[_QueuedCall] = deque()
        self._draining = False

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Handle:
        call = _QueuedCall(callback)
        self._queue.append(call)
        if not self._draining:
            self._draining = True
            try:
                while self._queue:
                    self._queue.popleft().fire()
            finally:
                self._draining = False
        return call


@dataclass(frozen=True)
class GameEvent:
    kind: str  # EVENT_STATE | EVENT_MESSAGE | EVENT_WINNER
    snapshot: GameSnapshot
    message: str = ""


Observer = Callable[[GameEvent], None]


class GameController:
    """Single owner of the game. All mutation goes through the request_* methods."""

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        policy: ComputerPolicy | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.scheduler: Scheduler = scheduler or ImmediateScheduler()
        self.policy = policy or ComputerPolicy(score_probability=self.config.score_probability, rng=self.rng)
        self.state: GameState = new_game(self.config, self.rng)

        self._observers: List[Observer] = []
        self._handles: Dict[int, Optional[Handle]] = {}
        self._keys = itertools.count()
        self._epoch = 0
        self._in_flight = False
        self._steal_selection = False

    # ---- Observers ----

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot(steal_selection=self._steal_selection)

    def _emit(self, kind: str, message: str = "") -> None:
        event = GameEvent(kind=kind, snapshot=self.snapshot(), message=message)
        for observer in list(self._observers):
            observer(event)

    # ---- Queries ----

    @property
    def busy(self) -> bool:
        """True while a think or reveal delay is pending."""
        return self._in_flight

    @property
    def epoch(self) -> int:
        return self._epoch

    def is_human_turn(self) -> bool:
        return not self.state.is_over() and not self.state.current_player.is_computer

    def pending_count(self) -> int:
        return len(self._handles)

    # ---- Input events ----

    def start(self) -> None:
        """Publish the opening state and kick off a computer turn if seat 0 is a CPU."""
        self._emit(EVENT_STATE)
        self._maybe_schedule_computer()

    def request_score(self, player_index: int) -> bool:
        if self._in_flight or not self.state.can_act(player_index):
            return False
        self._begin(lambda: self.state.score(player_index))
        return True

    def request_steal(self, actor_index: int, target_index: int) -> bool:
        if self._in_flight or not self.state.can_act(actor_index):
            return False
        if not self.state.is_valid_target(actor_index, target_index):
            return False
        self._begin(lambda: self.state.steal(actor_index, target_index))
        return True

    def request_reset(self) -> None:
        """Always accepted: cancel anything pending and deal a fresh game."""
        self._epoch += 1
        for handle in self._handles.values():
            if handle is not None:
                handle.cancel()
        self._handles.clear()
        self._in_flight = False
        self._steal_selection = False
        self.state = reset_game(self.state, self.rng)
        self._emit(EVENT_STATE)
        self._maybe_schedule_computer()

    def begin_steal_selection(self) -> bool:
        """Human pressed STEAL: wait for a target seat to be picked."""
        if self._in_flight or not self.is_human_turn() or not self.state.can_act(self.state.current_index):
            return False
        self._steal_selection = True
        self._emit(EVENT_STATE)
        return True

    def cancel_steal_selection(self) -> None:
        if self._steal_selection:
            self._steal_selection = False
            self._emit(EVENT_STATE)

    def select_steal_target(self, target_index: int) -> bool:
        if not self._steal_selection:
            return False
        return self.request_steal(self.state.current_index, target_index)

    # ---- Resolution ----

    def _schedule(self, delay_ms: int, fn: Callable[[], None]) -> None:
        epoch = self._epoch
        key = next(self._keys)
        self._handles[key] = None

        def fire() -> None:
            self._handles.pop(key, None)
            if epoch != self._epoch:
                return
            fn()

        handle = self.scheduler.call_later(delay_ms, fire)
        if key in self._handles:
            self._handles[key] = handle

    def _begin(self, apply: Callable[[], Optional[ActionResult]]) -> None:
        self.state.begin_resolving()
        self._in_flight = True
        self._steal_selection = False
        self._emit(EVENT_STATE)
        self._schedule(self.config.reveal_delay_ms, lambda: self._apply(apply))

    def _apply(self, apply: Callable[[], Optional[ActionResult]]) -> None:
        self._in_flight = False
        result = apply()
        self._emit(EVENT_STATE)
        if result is not None:
            self._emit(EVENT_MESSAGE, result.message)
            if self.state.winner is not None:
                self._emit(EVENT_WINNER, self.state.winner)
        self._maybe_schedule_computer()

    def _maybe_schedule_computer(self) -> None:
        state = self.state
        if self._in_flight or state.is_over() or not state.deck:
            return
        if not state.current_player.is_computer:
            return
        self._in_flight = True
        self._schedule(self.config.think_delay_ms, self._run_computer)

    def _run_computer(self) -> None:
        self._in_flight = False
        index = self.state.current_index
        decision = self.policy.decide(self.state, index)
        if decision is None:
            return
        if decision.action == Action.SCORE:
            self.request_score(index)
        else:
            self.request_steal(index, decision.target)


__all__ = [
    "EVENT_STATE",
    "EVENT_MESSAGE",
    "EVENT_WINNER",
    "GameController",
    "GameEvent",
    "Handle",
    "ImmediateScheduler",
    "Scheduler",
]
