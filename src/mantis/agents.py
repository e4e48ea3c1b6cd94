"""
Decision makers for Mantis seats.

- ``ComputerPolicy``: the rule-based CPU. It peeks at the top card and either
  scores (80% of the time when its tank matches a back color) or steals from
  whoever holds the most of the card's front color.
- ``Policy`` / ``RandomAgent``: the generic ``act(obs, legal_actions_mask)``
  contract used by ``MantisEnv`` for a learning seat.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence

from .deck import Card, Color
from .game import Action, GameState
from .player import Player


class Policy(Protocol):
    """Stateless or stateful decision policy working on flat observations."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """
        Choose an action index given an observation and a boolean legal-action mask.

        Implementations must only return indices where ``legal_actions_mask[i]`` is
        true.
        """


@dataclass
class RandomAgent:
    """
    Baseline policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(obs, legal_actions_mask)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        legal_indices: List[int] = [i for i, ok in enumerate(legal_actions_mask) if ok]
        if not legal_indices:
            raise ValueError("No legal actions available for RandomAgent")
        return self._rng.choice(legal_indices)


@dataclass(frozen=True)
class Decision:
    action: Action
    target: Optional[int] = None


def can_score(player: Player, card: Card) -> bool:
    """True if any color on the card's back is already in the player's tank."""
    return any(player.holds(c) > 0 for c in card.back)


@dataclass
class ComputerPolicy:
    """
    Rule-based CPU player.

    The score roll is drawn on every decision, even when scoring is not
    possible, so a seeded ``rng`` yields the same sequence regardless of tanks.
    """

    score_probability: float = 0.80
    rng: random.Random = field(default_factory=random.Random)

    def choose_target(self, state: GameState, player_index: int, color: Color) -> int:
        """
        Seat holding strictly the most ``color`` among the others; the first
        seat reaching the maximum wins ties. Random other seat if nobody holds it.
        """
        targets = [i for i in range(state.num_players) if i != player_index]
        best_target: Optional[int] = None
        max_count = 0
        for i in targets:
            count = state.players[i].holds(color)
            if count > max_count:
                best_target = i
                max_count = count
        if best_target is None:
            best_target = self.rng.choice(targets)
        return best_target

    def decide(self, state: GameState, player_index: int) -> Decision | None:
        """Pick SCORE or STEAL for ``player_index``; None if nothing can be drawn."""
        card = state.top_card()
        if card is None or state.is_over():
            return None
        player = state.players[player_index]
        scorable = can_score(player, card)
        will_score = self.rng.random() < self.score_probability

        if scorable and will_score:
            return Decision(Action.SCORE)
        return Decision(Action.STEAL, self.choose_target(state, player_index, card.front))

    def play(self, state: GameState, player_index: int):
        """Decide and resolve immediately on ``state``. Returns the ActionResult or None."""
        decision = self.decide(state, player_index)
        if decision is None:
            return None
        if decision.action == Action.SCORE:
            return state.score(player_index)
        return state.steal(player_index, decision.target)


__all__ = ["Policy", "RandomAgent", "Decision", "ComputerPolicy", "can_score"]
