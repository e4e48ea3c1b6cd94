"""
Players and their tanks.

A tank maps color -> number of cards of that color currently held. Counts are
always >= 1: an entry that would reach zero is deleted instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .deck import Color

Tank = Dict[Color, int]


def tank_add(tank: Tank, color: Color, count: int = 1) -> None:
    """Add ``count`` cards of ``color``, creating the entry if absent."""
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    tank[color] = tank.get(color, 0) + count


def tank_take(tank: Tank, color: Color) -> int:
    """Remove the whole ``color`` entry and return how many cards it held (0 if absent)."""
    return tank.pop(color, 0)


def tank_total(tank: Tank) -> int:
    return sum(tank.values())


@dataclass
class Player:
    """One seat at the table. ``score`` never decreases within a game."""

    id: int
    name: str
    is_computer: bool = False
    tank: Tank = field(default_factory=dict)
    score: int = 0

    def holds(self, color: Color) -> int:
        return self.tank.get(color, 0)

    def cleared(self) -> "Player":
        """Same seat with an empty tank and zero score (used on reset)."""
        return Player(id=self.id, name=self.name, is_computer=self.is_computer)
