"""
Mantis deck: 105 cards, 15 per front color over a palette of 7.

Each card shows a 3-color back while face-down (its front plus two other
colors) and a single front color once drawn.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


class Color(str, Enum):
    """Card palette. Declaration order is the order fronts are assigned in."""
    PINK = "pink"
    ORANGE = "orange"
    BLUE = "blue"
    PURPLE = "purple"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"

    def __str__(self) -> str:
        return self.value


COLORS: tuple[Color, ...] = tuple(Color)

DECK_SIZE = 105
BACK_SIZE = 3
CARDS_PER_COLOR = DECK_SIZE // len(COLORS)  # 15


@dataclass(frozen=True)
class Card:
    """
    A single Mantis card.

    - id: unique within one deck
    - front: the color revealed when the card is drawn
    - back: ordered 3-color set shown face-down; always contains ``front``
    """

    id: int
    front: Color
    back: tuple[Color, ...]

    def __post_init__(self) -> None:
        if len(self.back) != BACK_SIZE:
            raise ValueError(f"Card {self.id}: back must have {BACK_SIZE} colors, got {self.back}")
        if len(set(self.back)) != BACK_SIZE:
            raise ValueError(f"Card {self.id}: duplicate colors on back {self.back}")
        if self.front not in self.back:
            raise ValueError(f"Card {self.id}: front {self.front} missing from back {self.back}")

    def __str__(self) -> str:
        return f"#{self.id}:{self.front}[{'/'.join(c.value for c in self.back)}]"

    def __repr__(self) -> str:
        return str(self)


def make_card(card_id: int, front: Color, rng: random.Random) -> Card:
    """Build one card whose back is ``front`` plus two other colors, in random order."""
    others = [c for c in COLORS if c != front]
    back = [front, *rng.sample(others, BACK_SIZE - 1)]
    rng.shuffle(back)
    return Card(id=card_id, front=front, back=tuple(back))


def build_deck(rng: random.Random | None = None) -> list[Card]:
    """
    Build and shuffle a full 105-card deck.

    Fronts cycle through the palette so every color appears exactly 15 times.
    The top of the deck is the END of the returned list (draw with ``pop()``).
    """
    if rng is None:
        rng = random.Random()
    deck = [make_card(i, COLORS[i % len(COLORS)], rng) for i in range(DECK_SIZE)]
    rng.shuffle(deck)
    return deck


def top_card(deck: list[Card]) -> Card | None:
    """Peek at the top card without drawing it."""
    return deck[-1] if deck else None
