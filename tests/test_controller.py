"""Tests for GameController: turn serialisation, pacing and cancellation."""
import random

from mantis.agents import ComputerPolicy
from mantis.controller import (
    EVENT_MESSAGE,
    EVENT_STATE,
    EVENT_WINNER,
    GameController,
    ImmediateScheduler,
)
from mantis.deck import COLORS, Card, Color
from mantis.game import GameConfig, TurnPhase


class _Call:
    def __init__(self, delay_ms, callback):
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Queues callbacks; tests fire them one at a time with run_next()."""

    def __init__(self):
        self.calls = []

    def call_later(self, delay_ms, callback):
        call = _Call(delay_ms, callback)
        self.calls.append(call)
        return call

    def pending(self):
        return [c for c in self.calls if not c.cancelled]

    def run_next(self):
        call = self.calls.pop(0)
        if not call.cancelled:
            call.callback()
        return call


def _card(card_id, front):
    others = [c for c in COLORS if c != front]
    return Card(id=card_id, front=front, back=(front, others[0], others[1]))


def _controller(scheduler=None, seed=0, config=None):
    return GameController(config, rng=random.Random(seed), scheduler=scheduler or ManualScheduler())


def _rig(controller, deck_fronts, tanks=None):
    """Replace the dealt game with a known deck (bottom -> top) and tanks."""
    state = controller.state
    state.deck[:] = [_card(200 + i, c) for i, c in enumerate(deck_fronts)]
    for p, tank in zip(state.players, tanks or [{}, {}, {}, {}]):
        p.tank = dict(tank)


def test_human_score_reveals_then_applies_after_delay():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.RED], [{Color.RED: 2}, {}, {}, {}])
    events = []
    ctl.subscribe(events.append)

    assert ctl.request_score(0)
    assert ctl.busy
    assert ctl.state.phase == TurnPhase.ACTION_RESOLVING
    assert ctl.snapshot().revealed.front == Color.RED
    assert ctl.state.current_index == 0  # unchanged while pending
    assert len(ctl.state.deck) == 2
    assert sched.pending()[0].delay_ms == ctl.config.reveal_delay_ms

    sched.run_next()
    assert ctl.state.players[0].score == 3
    assert ctl.state.current_index == 1
    kinds = [e.kind for e in events]
    assert kinds[:2] == [EVENT_STATE, EVENT_STATE]
    assert EVENT_MESSAGE in kinds
    msg = next(e for e in events if e.kind == EVENT_MESSAGE)
    assert msg.message == "Player 1 scored 3 red cards!"


def test_second_request_rejected_while_pending():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.RED])
    assert ctl.request_score(0)
    assert not ctl.request_score(0)
    assert not ctl.request_steal(0, 1)
    assert len(sched.pending()) == 1


def test_requests_for_wrong_seat_rejected():
    ctl = _controller()
    assert not ctl.request_score(1)
    assert not ctl.request_steal(2, 0)
    assert not ctl.request_steal(0, 0)
    assert not ctl.request_steal(0, 9)
    assert not ctl.busy


def test_computer_turn_is_scheduled_after_human_action():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.GREEN, Color.RED])
    ctl.request_score(0)
    sched.run_next()  # apply human action
    assert ctl.state.current_index == 1
    think = sched.pending()
    assert len(think) == 1
    assert think[0].delay_ms == ctl.config.think_delay_ms
    assert ctl.busy
    # a human request during the CPU's think delay is refused
    assert not ctl.request_score(0)

    sched.run_next()  # CPU decides -> reveal
    assert ctl.state.phase == TurnPhase.ACTION_RESOLVING
    sched.run_next()  # apply CPU action
    assert ctl.state.current_index == 2
    assert len(ctl.state.deck) == 1


def test_reset_cancels_pending_resolution():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.RED], [{Color.RED: 2}, {}, {}, {}])
    ctl.request_score(0)
    stale = sched.pending()[0]
    old_epoch = ctl.epoch

    ctl.request_reset()
    assert stale.cancelled
    assert ctl.epoch == old_epoch + 1
    assert not ctl.busy
    assert ctl.pending_count() == 0

    fresh = ctl.state
    # even if the stale timer fires anyway, the new game is untouched
    stale.callback()
    assert ctl.state is fresh
    assert len(fresh.deck) == 89
    assert all(p.score == 0 for p in fresh.players)
    assert fresh.current_index == 0


def test_reset_cancels_pending_computer_think():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.GREEN, Color.RED])
    ctl.request_score(0)
    sched.run_next()
    think = sched.pending()[0]
    ctl.request_reset()
    assert think.cancelled
    think.callback()
    assert ctl.state.current_index == 0
    assert ctl.state.phase == TurnPhase.AWAITING_ACTION


def test_reset_reinitialises_game_and_notifies():
    ctl = _controller()
    events = []
    ctl.subscribe(events.append)
    ctl.state.players[0].score = 9
    ctl.state.winner = "Player 1"
    ctl.request_reset()
    snap = events[-1].snapshot
    assert events[-1].kind == EVENT_STATE
    assert snap.winner is None
    assert snap.current_index == 0
    assert snap.deck_size == 89
    assert snap.message == ""
    assert all(sum(n for _, n in p.tank) == 4 for p in snap.players)
    assert all(p.score == 0 for p in snap.players)


def test_winner_event_and_no_further_actions():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.PINK], [{Color.PINK: 1}, {}, {}, {}])
    ctl.state.players[0].score = 8
    events = []
    ctl.subscribe(events.append)
    ctl.request_score(0)
    sched.run_next()

    assert ctl.state.winner == "Player 1"
    winner_events = [e for e in events if e.kind == EVENT_WINNER]
    assert len(winner_events) == 1
    assert winner_events[0].message == "Player 1"
    assert sched.pending() == []  # no CPU turn scheduled after game over
    assert not ctl.request_score(0)
    assert not ctl.begin_steal_selection()


def test_steal_selection_flow():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [Color.BLUE, Color.GREEN], [{}, {}, {Color.GREEN: 4}, {}])

    assert not ctl.select_steal_target(2)  # not in selection mode yet
    assert ctl.begin_steal_selection()
    assert ctl.snapshot().steal_selection
    ctl.cancel_steal_selection()
    assert not ctl.snapshot().steal_selection

    ctl.begin_steal_selection()
    assert ctl.select_steal_target(2)
    assert not ctl.snapshot().steal_selection
    sched.run_next()
    assert ctl.state.players[0].tank == {Color.GREEN: 5}
    assert Color.GREEN not in ctl.state.players[2].tank


def test_steal_selection_cleared_by_reset():
    ctl = _controller()
    ctl.begin_steal_selection()
    ctl.request_reset()
    assert not ctl.snapshot().steal_selection


def test_empty_deck_request_is_noop():
    sched = ManualScheduler()
    ctl = _controller(sched)
    _rig(ctl, [])
    assert not ctl.request_score(0)
    assert not ctl.request_steal(0, 1)
    assert sched.pending() == []
    assert ctl.snapshot().stalled


def test_unsubscribe_stops_events():
    ctl = _controller()
    events = []
    unsubscribe = ctl.subscribe(events.append)
    ctl.start()
    unsubscribe()
    ctl.request_reset()
    assert len(events) == 1


def test_immediate_scheduler_plays_cpu_turns_until_human():
    ctl = GameController(rng=random.Random(11), scheduler=ImmediateScheduler())
    ctl.start()
    assert ctl.request_score(0)
    state = ctl.state
    # three CPU turns resolved synchronously, back to the human (unless the game ended)
    if state.winner is None and state.deck:
        assert state.current_index == 0
        assert len(state.history) == 4
    assert not ctl.busy


def test_immediate_scheduler_runs_full_cpu_game():
    cfg = GameConfig(player_names=("A", "B", "C", "D"), computer_seats=(0, 1, 2, 3))
    ctl = GameController(cfg, rng=random.Random(3), scheduler=ImmediateScheduler())
    ctl.start()
    state = ctl.state
    assert state.winner is not None or not state.deck
    assert not ctl.busy
    if state.winner is not None:
        assert state.phase == TurnPhase.GAME_OVER
        assert max(p.score for p in state.players) >= 10


def test_custom_policy_is_used():
    class AlwaysStealFromZero(ComputerPolicy):
        def decide(self, state, player_index):
            from mantis.agents import Decision
            from mantis.game import Action
            return Decision(Action.STEAL, 0 if player_index != 0 else 1)

    sched = ManualScheduler()
    ctl = GameController(rng=random.Random(0), scheduler=sched, policy=AlwaysStealFromZero())
    _rig(ctl, [Color.RED, Color.RED, Color.RED], [{}, {}, {}, {}])
    ctl.request_score(0)
    sched.run_next()  # human miss: Player 1 gets a red
    sched.run_next()  # CPU 1 decides
    sched.run_next()  # CPU 1 steals red from Player 1
    assert ctl.state.players[1].tank == {Color.RED: 2}
    assert ctl.state.players[0].tank == {}
