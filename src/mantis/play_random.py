"""
Tiny CLI to run computer-only Mantis games and summarise the outcomes.

Usage (from project root, after installing in editable mode):
    python -m mantis.play_random --games 200 --seed 42
"""
from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .controller import EVENT_MESSAGE, GameController, GameEvent, ImmediateScheduler
from .game import GameConfig, GameState

CPU_NAMES = ("CPU 1", "CPU 2", "CPU 3", "CPU 4")


@dataclass
class SimulationSummary:
    """Aggregated outcome of ``games`` computer-only games."""

    games: int
    wins: np.ndarray        # (num_seats,) number of wins per seat
    turns: np.ndarray       # (games,) resolved actions per game
    stalled: int            # games that ran out of cards with no winner

    @property
    def win_rate(self) -> np.ndarray:
        if self.games == 0:
            return np.zeros_like(self.wins, dtype=float)
        return self.wins / float(self.games)

    @property
    def mean_turns(self) -> float:
        return float(np.mean(self.turns)) if self.turns.size else 0.0

    @property
    def median_turns(self) -> float:
        return float(np.median(self.turns)) if self.turns.size else 0.0


def all_computer_config(score_probability: float = 0.80) -> GameConfig:
    return GameConfig(
        player_names=CPU_NAMES,
        computer_seats=(0, 1, 2, 3),
        score_probability=score_probability,
        think_delay_ms=0,
        reveal_delay_ms=0,
    )


def game_outcome(state: GameState) -> tuple[Optional[int], int]:
    """(winning seat or None if the deck ran out, number of resolved actions)."""
    winner_seat = None
    if state.winner is not None:
        winner_seat = next(i for i, p in enumerate(state.players) if p.name == state.winner)
    return winner_seat, len(state.history)


def simulate(
    games: int,
    seed: int = 0,
    score_probability: float = 0.80,
    on_message: Optional[Callable[[str], None]] = None,
) -> SimulationSummary:
    """
    Play ``games`` games on one controller. With an ImmediateScheduler and no
    human seat, ``start()`` and every ``request_reset()`` run a whole game.
    """
    cfg = all_computer_config(score_probability)
    controller = GameController(cfg, rng=random.Random(seed), scheduler=ImmediateScheduler())

    def _listen(event: GameEvent) -> None:
        if event.kind == EVENT_MESSAGE and on_message is not None:
            on_message(event.message)

    unsubscribe = controller.subscribe(_listen)
    wins = np.zeros(len(cfg.player_names), dtype=int)
    turns = np.zeros(games, dtype=int)
    stalled = 0
    try:
        for g in range(games):
            if g == 0:
                controller.start()
            else:
                controller.request_reset()
            winner_seat, turns[g] = game_outcome(controller.state)
            if winner_seat is None:
                stalled += 1
            else:
                wins[winner_seat] += 1
    finally:
        unsubscribe()

    return SimulationSummary(games=games, wins=wins, turns=turns, stalled=stalled)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run computer-only Mantis games.")
    parser.add_argument(
        "--games",
        type=int,
        default=100,
        help="Number of games to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--score-probability",
        type=float,
        default=0.80,
        help="Chance a CPU attempts to score when its tank matches the top card's back.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every game log line.",
    )
    args = parser.parse_args()

    on_message = (lambda m: print(m, flush=True)) if args.verbose else None
    summary = simulate(args.games, seed=args.seed, score_probability=args.score_probability, on_message=on_message)

    for seat, (name, w) in enumerate(zip(CPU_NAMES, summary.wins)):
        print(f"seat {seat} ({name}): wins={int(w)} rate={summary.win_rate[seat]:.3f}")
    print(
        f"games={summary.games} stalled={summary.stalled} "
        f"mean_turns={summary.mean_turns:.1f} median_turns={summary.median_turns:.1f}"
    )


if __name__ == "__main__":
    main()
