"""
Observation / action encoding and a single-seat environment for Mantis.

Flat observations (all relative to the acting seat, so seat 0 is always "me"):
  - my tank counts per color                              7
  - the three other tanks, in seat order after me        21
  - all four scores, rotated, divided by winning score    4
  - top card back colors as a multi-hot                   7
  - fraction of the full deck still to draw               1
                                                         --
                                                         40

Actions: 0 = SCORE, 1 + k = STEAL from absolute seat k.

The module stays free of RL library dependencies, like a Gym env without Gym.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from .agents import ComputerPolicy
from .deck import COLORS, DECK_SIZE
from .game import ActionResult, GameConfig, GameState, new_game

NUM_COLORS: int = len(COLORS)
NUM_SEATS: int = 4
ACTION_SCORE: int = 0
NUM_ACTIONS: int = 1 + NUM_SEATS
OBS_SIZE: int = NUM_COLORS * NUM_SEATS + NUM_SEATS + NUM_COLORS + 1  # 40


def steal_action(target_index: int) -> int:
    return 1 + target_index


def action_target(action: int) -> Optional[int]:
    """Seat index a STEAL action points at; None for SCORE."""
    if action == ACTION_SCORE:
        return None
    return action - 1


def _tank_vector(tank) -> List[float]:
    return [float(tank.get(c, 0)) for c in COLORS]


def encode_observation(state: GameState, player_index: int) -> List[float]:
    """Flat 40-dim observation of ``state`` from ``player_index``'s seat."""
    n = state.num_players
    order = [(player_index + k) % n for k in range(n)]

    obs: List[float] = []
    for seat in order:
        obs.extend(_tank_vector(state.players[seat].tank))
    threshold = float(state.config.winning_score)
    obs.extend(state.players[seat].score / threshold for seat in order)

    top = state.top_card()
    back = set(top.back) if top is not None else set()
    obs.extend(1.0 if c in back else 0.0 for c in COLORS)
    obs.append(len(state.deck) / float(DECK_SIZE))
    return obs


def legal_action_mask(state: GameState, player_index: int) -> List[bool]:
    """SCORE and every steal on another seat are legal exactly when the seat may act."""
    if not state.can_act(player_index):
        return [False] * NUM_ACTIONS
    mask = [True] + [False] * NUM_SEATS
    for seat in range(state.num_players):
        if state.is_valid_target(player_index, seat):
            mask[steal_action(seat)] = True
    return mask


@dataclass
class StepResult:
    """Container returned by MantisEnv.step/reset for clarity."""

    obs: List[float]
    reward: float
    done: bool
    info: dict
    legal_actions_mask: List[bool]


@dataclass
class MantisEnv:
    """
    One learning seat against rule-based CPUs; one episode = one game.

    Reward is 0 until the end: +1 if the learning seat wins, -1 if another
    seat wins, 0 if the deck runs out first.
    """

    learning_player: int = 0
    rng: random.Random = field(default_factory=random.Random)
    opponent: Optional[ComputerPolicy] = None
    config: GameConfig = field(default_factory=GameConfig)

    def __post_init__(self) -> None:
        assert 0 <= self.learning_player < NUM_SEATS
        if self.opponent is None:
            self.opponent = ComputerPolicy(score_probability=self.config.score_probability, rng=self.rng)
        self.state: Optional[GameState] = None

    # ---- Public API ----

    def reset(self) -> StepResult:
        """Start a new game and return the first decision for the learning seat."""
        self.state = new_game(self.config, self.rng)
        messages = self._play_opponents()
        return self._result(messages)

    def step(self, action: int) -> StepResult:
        if self.state is None:
            raise RuntimeError("Call reset() before step()")
        if self._is_done():
            return self._result([])
        mask = legal_action_mask(self.state, self.learning_player)
        if not (0 <= action < NUM_ACTIONS) or not mask[action]:
            raise ValueError(f"Illegal action {action} for seat {self.learning_player}")

        target = action_target(action)
        if target is None:
            result = self.state.score(self.learning_player)
        else:
            result = self.state.steal(self.learning_player, target)
        messages = [result.message] if result is not None else []
        messages.extend(self._play_opponents())
        return self._result(messages)

    # ---- Internal helpers ----

    def _is_done(self) -> bool:
        assert self.state is not None
        return self.state.is_over() or not self.state.deck

    def _play_opponents(self) -> List[str]:
        """Advance CPU seats until it is the learning seat's turn or the game ends."""
        assert self.state is not None and self.opponent is not None
        messages: List[str] = []
        while not self._is_done() and self.state.current_index != self.learning_player:
            result: Optional[ActionResult] = self.opponent.play(self.state, self.state.current_index)
            if result is None:
                break
            messages.append(result.message)
        return messages

    def _reward(self) -> float:
        assert self.state is not None
        if self.state.winner is None:
            return 0.0
        me = self.state.players[self.learning_player]
        return 1.0 if self.state.winner == me.name else -1.0

    def _result(self, messages: List[str]) -> StepResult:
        assert self.state is not None
        done = self._is_done()
        return StepResult(
            obs=encode_observation(self.state, self.learning_player),
            reward=self._reward() if done else 0.0,
            done=done,
            info={
                "messages": messages,
                "winner": self.state.winner,
                "stalled": self.state.winner is None and not self.state.deck,
                "scores": [p.score for p in self.state.players],
            },
            legal_actions_mask=[False] * NUM_ACTIONS if done else legal_action_mask(self.state, self.learning_player),
        )


__all__ = [
    "ACTION_SCORE",
    "NUM_ACTIONS",
    "OBS_SIZE",
    "MantisEnv",
    "StepResult",
    "action_target",
    "encode_observation",
    "legal_action_mask",
    "steal_action",
]
