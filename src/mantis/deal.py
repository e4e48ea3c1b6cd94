"""
Distribution: 4 cards from the top of the deck to each player, in seat order.
"""
from __future__ import annotations

from typing import NamedTuple, Sequence

from .deck import Card
from .player import Player, tank_add

CARDS_PER_PLAYER = 4


class Deal(NamedTuple):
    """Result of a deal. ``deck`` is what remains once every tank is filled."""
    deck: list[Card]
    players: list[Player]


def deal(
    deck: Sequence[Card],
    players: Sequence[Player],
    cards_each: int = CARDS_PER_PLAYER,
) -> Deal:
    """
    Pop ``cards_each`` cards per player (seat 0 first) into their tanks.

    Inputs are not mutated: the deck and each player's tank are copied.
    Deterministic for a given deck order; consumes exactly
    ``cards_each * len(players)`` cards.
    """
    needed = cards_each * len(players)
    if len(deck) < needed:
        raise ValueError(f"Deck has {len(deck)} cards, need {needed} to deal")

    remaining = list(deck)
    dealt: list[Player] = []
    for p in players:
        tank = dict(p.tank)
        for _ in range(cards_each):
            card = remaining.pop()
            tank_add(tank, card.front)
        dealt.append(Player(id=p.id, name=p.name, is_computer=p.is_computer, tank=tank, score=p.score))

    return Deal(deck=remaining, players=dealt)


def next_seat(index: int, num_players: int) -> int:
    """Turn order is index-cyclic: 0 -> 1 -> 2 -> 3 -> 0."""
    return (index + 1) % num_players
