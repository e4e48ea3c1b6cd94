"""Mantis steal/score card game engine (4 seats, 105-card deck)."""

__version__ = "0.1.0"

from .deck import Card, Color, COLORS, DECK_SIZE, build_deck, make_card, top_card
from .player import Player, tank_add, tank_take, tank_total
from .deal import Deal, deal, next_seat, CARDS_PER_PLAYER
from .game import (
    Action,
    ActionResult,
    GameConfig,
    GameSnapshot,
    GameState,
    PlayerView,
    TurnPhase,
    WINNING_SCORE,
    is_winning_score,
    new_game,
    reset_game,
)
from .agents import ComputerPolicy, Decision, Policy, RandomAgent, can_score
from .controller import GameController, GameEvent, ImmediateScheduler
