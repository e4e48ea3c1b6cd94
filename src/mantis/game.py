"""
Game state and turn engine: draw -> score / steal -> win check -> next turn.

``GameState`` is the single mutable object describing a game. Exactly one
action resolves per turn; each consumes the top card of the deck. Invalid
requests (wrong seat, game over, empty deck) are no-ops returning ``None``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .deal import CARDS_PER_PLAYER, deal, next_seat
from .deck import Card, Color, build_deck, top_card
from .player import Player, tank_add, tank_take

WINNING_SCORE = 10


class TurnPhase(str, Enum):
    AWAITING_ACTION = "awaiting_action"
    ACTION_RESOLVING = "action_resolving"  # card revealed, not yet applied
    TURN_RESOLVED = "turn_resolved"
    GAME_OVER = "game_over"


class Action(str, Enum):
    SCORE = "score"
    STEAL = "steal"


@dataclass
class GameConfig:
    """Table setup and pacing. Delays only matter to controllers with a real clock."""

    player_names: tuple[str, ...] = ("Player 1", "CPU 1", "CPU 2", "CPU 3")
    computer_seats: tuple[int, ...] = (1, 2, 3)
    cards_per_player: int = CARDS_PER_PLAYER
    winning_score: int = WINNING_SCORE
    score_probability: float = 0.80
    think_delay_ms: int = 2000
    reveal_delay_ms: int = 1000

    def make_players(self) -> list[Player]:
        return [
            Player(id=i + 1, name=name, is_computer=i in self.computer_seats)
            for i, name in enumerate(self.player_names)
        ]


def is_winning_score(score: int, threshold: int = WINNING_SCORE) -> bool:
    return score >= threshold


@dataclass(frozen=True)
class ActionResult:
    """What one resolved action did. ``count`` is the number of cards moved or scored."""

    action: Action
    actor: int
    target: Optional[int]
    card: Card
    success: bool
    count: int
    message: str


@dataclass(frozen=True)
class PlayerView:
    id: int
    name: str
    is_computer: bool
    tank: tuple[tuple[Color, int], ...]
    score: int

    def holds(self, color: Color) -> int:
        return dict(self.tank).get(color, 0)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of a game handed to observers and renderers."""

    players: tuple[PlayerView, ...]
    current_index: int
    deck_size: int
    top_back: tuple[Color, ...]
    revealed: Optional[Card]
    phase: TurnPhase
    winner: Optional[str]
    message: str
    steal_selection: bool = False

    @property
    def current_player(self) -> PlayerView:
        return self.players[self.current_index]

    @property
    def stalled(self) -> bool:
        """No winner and nothing left to draw: no further action can resolve."""
        return self.winner is None and self.deck_size == 0 and self.revealed is None


class GameState:
    """Mutable state for one game: deck, seats, whose turn, winner, last log line."""

    def __init__(
        self,
        deck: list[Card],
        players: Sequence[Player],
        config: GameConfig | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.deck: list[Card] = deck
        self.players: list[Player] = list(players)
        self.current_index: int = 0
        self.winner: Optional[str] = None
        self.phase: TurnPhase = TurnPhase.AWAITING_ACTION
        self.revealed: Optional[Card] = None
        self.last_message: str = ""
        self.history: list[ActionResult] = []

    # ---- Queries ----

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    def is_over(self) -> bool:
        return self.winner is not None

    def top_card(self) -> Card | None:
        return top_card(self.deck)

    def can_act(self, player_index: int) -> bool:
        """True if ``player_index`` may resolve an action right now."""
        if self.is_over() or not self.deck:
            return False
        if self.phase not in (TurnPhase.AWAITING_ACTION, TurnPhase.ACTION_RESOLVING):
            return False
        return player_index == self.current_index

    def is_valid_target(self, actor_index: int, target_index: int) -> bool:
        return 0 <= target_index < self.num_players and target_index != actor_index

    # ---- Turn engine ----

    def begin_resolving(self) -> Card | None:
        """Reveal the top card for the current player without drawing it."""
        if not self.can_act(self.current_index):
            return None
        self.phase = TurnPhase.ACTION_RESOLVING
        self.revealed = self.top_card()
        return self.revealed

    def score(self, player_index: int) -> ActionResult | None:
        """
        Draw the top card. If the tank holds its color, bank that whole pile
        plus the drawn card; otherwise the card joins the tank.
        """
        if not self.can_act(player_index):
            return None
        player = self.players[player_index]
        card = self.deck.pop()
        color = card.front

        held = tank_take(player.tank, color)
        if held:
            player.score += held + 1
            result = ActionResult(
                action=Action.SCORE,
                actor=player_index,
                target=None,
                card=card,
                success=True,
                count=held + 1,
                message=f"{player.name} scored {held + 1} {color} cards!",
            )
        else:
            tank_add(player.tank, color)
            result = ActionResult(
                action=Action.SCORE,
                actor=player_index,
                target=None,
                card=card,
                success=False,
                count=0,
                message=f"{player.name} missed and added a {color} card.",
            )
        return self._finish_turn(result)

    def steal(self, actor_index: int, target_index: int) -> ActionResult | None:
        """
        Draw the top card. If the target holds its color, the actor takes that
        whole pile plus the drawn card. On a miss the TARGET gets the card.
        """
        if not self.can_act(actor_index) or not self.is_valid_target(actor_index, target_index):
            return None
        actor = self.players[actor_index]
        target = self.players[target_index]
        card = self.deck.pop()
        color = card.front

        held = tank_take(target.tank, color)
        if held:
            # The actor's own pile of this color is not scored, only grown.
            tank_add(actor.tank, color, held + 1)
            result = ActionResult(
                action=Action.STEAL,
                actor=actor_index,
                target=target_index,
                card=card,
                success=True,
                count=held + 1,
                message=f"{actor.name} stole {held} {color} cards from {target.name}!",
            )
        else:
            tank_add(target.tank, color)
            result = ActionResult(
                action=Action.STEAL,
                actor=actor_index,
                target=target_index,
                card=card,
                success=False,
                count=0,
                message=f"{actor.name} failed to steal. Drew a {color} card instead.",
            )
        return self._finish_turn(result)

    def _finish_turn(self, result: ActionResult) -> ActionResult:
        self.phase = TurnPhase.TURN_RESOLVED
        self.revealed = None
        self.last_message = result.message
        self.history.append(result)

        actor = self.players[result.actor]
        if is_winning_score(actor.score, self.config.winning_score):
            self.winner = actor.name
            self.phase = TurnPhase.GAME_OVER
        else:
            self.current_index = next_seat(self.current_index, self.num_players)
            self.phase = TurnPhase.AWAITING_ACTION
        return result

    # ---- Views ----

    def snapshot(self, steal_selection: bool = False) -> GameSnapshot:
        top = self.top_card()
        return GameSnapshot(
            players=tuple(
                PlayerView(
                    id=p.id,
                    name=p.name,
                    is_computer=p.is_computer,
                    tank=tuple(p.tank.items()),
                    score=p.score,
                )
                for p in self.players
            ),
            current_index=self.current_index,
            deck_size=len(self.deck),
            top_back=top.back if top is not None else (),
            revealed=self.revealed,
            phase=self.phase,
            winner=self.winner,
            message=self.last_message,
            steal_selection=steal_selection,
        )


def new_game(config: GameConfig | None = None, rng: random.Random | None = None) -> GameState:
    """Fresh shuffled deck, empty seats, then the opening deal."""
    config = config or GameConfig()
    if rng is None:
        rng = random.Random()
    dealt = deal(build_deck(rng), config.make_players(), cards_each=config.cards_per_player)
    return GameState(dealt.deck, dealt.players, config=config)


def reset_game(state: GameState, rng: random.Random | None = None) -> GameState:
    """New game keeping the same seats and config; tanks and scores start empty."""
    if rng is None:
        rng = random.Random()
    seats = [p.cleared() for p in state.players]
    dealt = deal(build_deck(rng), seats, cards_each=state.config.cards_per_player)
    return GameState(dealt.deck, dealt.players, config=state.config)
