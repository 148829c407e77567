#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# quantumterritories.py - Main game file: turn engine, event stream, displays, CLI

from __future__ import annotations

import argparse
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import utility
from board import (
    DEFAULT_GRID_SIZE, DEFAULT_TURNS, GRID_SIZES, TURN_CHOICES,
    Board, Collapsed, Difficulty, Entangled, GamePhase, Player,
)
from bots import Bot, make_bot
from collapse import collapse_all, collapse_cell, reaches_threshold
from territory import base_score, final_scores, largest_region, territory_bonus

RULES = """\
Quantum Superposition
  Cells start in superposition: they belong to nobody until observed. Place
  influence to sway the outcome in your favour.
Placing Influence
  Pick any cell to add one point of your influence. Players alternate turns.
Entangled Cells
  Some cells are entangled in pairs (marked ~). Influencing one also influences
  its partner. When either collapses, the link is broken.
Observation
  A cell collapses as soon as it holds 3 total influence. Either player may
  OBSERVE to end placement early; every remaining cell collapses at once.
Scoring
  One point per cell you own, plus half (rounded down) of your largest connected
  region of 4 or more cells. Most points wins.
Quantum Randomness
  Tied influence? A fair coin decides, whatever the amounts."""


@dataclass
class Event:
    """One thing that happened during a command. Displays decide how to render it."""
    type: str
    player: Player | None = None
    row: int | None = None
    col: int | None = None
    value: int | None = None
    owner: Player | None = None
    message: str = ""


@dataclass(frozen=True)
class CellSnapshot:
    row: int
    col: int
    state: str                  # "collapsed" | "superposition" | "entangled"
    owner: Player
    influence_blue: int
    influence_red: int
    partner: tuple[int, int] | None = None


@dataclass
class GameState:
    """Read-only picture of the game after a command, plus the events it produced."""
    turn_number: int
    phase: GamePhase
    current_player: Player
    turns_remaining: int
    blue_score: int
    red_score: int
    is_bot_thinking: bool
    message: str
    grid_size: int
    cells: tuple[CellSnapshot, ...]
    events: list[Event] = field(default_factory=list)

    def cell(self, row: int, col: int) -> CellSnapshot:
        return self.cells[row * self.grid_size + col]


@dataclass(frozen=True)
class GameResult:
    won: bool | None    # bot games only: did the human win?
    tied: bool


def _snapshot_cell(cell) -> CellSnapshot:
    if isinstance(cell.state, Collapsed):
        state, partner = "collapsed", None
    elif isinstance(cell.state, Entangled):
        state, partner = "entangled", (cell.state.row, cell.state.col)
    else:
        state, partner = "superposition", None
    return CellSnapshot(cell.row, cell.col, state, cell.owner,
                        cell.influence_blue, cell.influence_red, partner)


def _turn_message(player: Player) -> str:
    return "{}'s turn - Tap a cell to influence".format(player.label)


# ==== Displays ====

class Display(ABC):
    """Where the game sends its events and asks the human for moves."""

    @abstractmethod
    def show_events(self, events: list[Event]) -> None: ...

    @abstractmethod
    def show_state(self, game: Game) -> None: ...

    @abstractmethod
    def pick_cell(self, game: Game) -> tuple[int, int] | None:
        """Return (row, col) to influence, or None to start observation."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool: ...

    @abstractmethod
    def show_info(self, content: str) -> None: ...

    def pause_for_bot(self, game: Game) -> None:
        """Hook called while a bot move is pending. Interactive displays may wait here."""


class NullDisplay(Display):
    """Discards everything; the human always chooses to observe."""

    def show_events(self, events: list[Event]) -> None:
        pass

    def show_state(self, game: Game) -> None:
        pass

    def pick_cell(self, game: Game) -> tuple[int, int] | None:
        return None

    def confirm(self, prompt: str) -> bool:
        return False

    def show_info(self, content: str) -> None:
        pass


class RecordingDisplay(Display):
    """Keeps every event and state it is shown; plays scripted human moves in order."""

    def __init__(self, moves: list[tuple[int, int]] | None = None) -> None:
        self.events: list[Event] = []
        self.states: list[GameState] = []
        self.info: list[str] = []
        self.moves = list(moves or [])

    def show_events(self, events: list[Event]) -> None:
        self.events.extend(events)

    def show_state(self, game: Game) -> None:
        self.states.append(game.snapshot())

    def pick_cell(self, game: Game) -> tuple[int, int] | None:
        if self.moves:
            return self.moves.pop(0)
        return None

    def confirm(self, prompt: str) -> bool:
        return False

    def show_info(self, content: str) -> None:
        self.info.append(content)


def event_text(event: Event) -> str | None:
    """Plain-text line for an event, or None when the event is silent."""
    t = event.type
    who = event.player.label if event.player else ""
    if t == "game_start":
        return "New game: {}x{} board, {}.".format(event.value, event.value, event.message)
    if t == "turn_start":
        return None
    if t == "influence":
        return "{} influences ({}, {}).".format(who, event.row, event.col)
    if t == "entangled_influence":
        return "Entanglement carries {}'s influence to ({}, {}).".format(who, event.row, event.col)
    if t == "collapse":
        return "({}, {}) collapses to {}!".format(event.row, event.col, event.owner.label)
    if t == "entanglement_broken":
        return "The link to ({}, {}) is broken.".format(event.row, event.col)
    if t == "move_rejected":
        return event.message or None
    if t == "bot_thinking":
        return None
    if t == "bot_move":
        return "Bot picks ({}, {}).".format(event.row, event.col)
    if t == "bot_no_move":
        return "Bot has no legal move."
    if t == "observation":
        return "Observation phase - collapsing quantum states..."
    if t == "mass_collapse":
        return "({}, {}) is observed as {}.".format(event.row, event.col, event.owner.label)
    if t == "score":
        return "{} scores {} ({}).".format(who, event.value, event.message)
    if t == "game_over":
        return event.message
    return None


def render_board(game: Game) -> str:
    """Text grid: B/R for collapsed cells, blue·red influence for undecided ones.

    Entangled cells show '~' between the two numbers instead of '.'.
    """
    size = game.board.size
    lines = ["    " + " ".join("{:^5}".format(c) for c in range(size))]
    for row in range(size):
        parts = []
        for col in range(size):
            cell = game.board.cell(row, col)
            if cell.is_collapsed:
                parts.append("{:^5}".format("[" + cell.owner.label[0] + "]"))
            else:
                link = "~" if cell.is_entangled else "."
                parts.append("{:^5}".format("{}{}{}".format(cell.influence_blue, link, cell.influence_red)))
        lines.append("{:>3} ".format(row) + " ".join(parts))
    return "\n".join(lines)


class TerminalDisplay(Display):
    """Plain print()/input() front end."""

    def show_events(self, events: list[Event]) -> None:
        for event in events:
            text = event_text(event)
            if text is not None:
                print(text)

    def show_state(self, game: Game) -> None:
        print(render_board(game))
        print("Blue {} - Red {} | {} turns left | {}".format(
            game.blue_score, game.red_score, game.turns_remaining, game.message))

    def pick_cell(self, game: Game) -> tuple[int, int] | None:
        return utility.readCell(game.board.size, "{} - row col (or 'o' to observe): ".format(
            game.current_player.label))

    def confirm(self, prompt: str) -> bool:
        return utility.readYesNo(prompt)

    def show_info(self, content: str) -> None:
        print(content)


# ==== Turn engine ====

class Game(object):
    """The single writer of board and turn state.

    Every command returns the events it produced and records a GameState in
    self.history. With defer_bot off (the default) the bot answers inline the
    moment its turn starts; drivers that want to pace the bot set defer_bot and
    call play_bot_turn() themselves.
    """

    def __init__(self, grid_size: int = DEFAULT_GRID_SIZE, turns: int = DEFAULT_TURNS,
                 bot: Difficulty | str | Bot | None = None, human_color: Player = Player.BLUE,
                 rng=None, display: Display | None = None) -> None:
        self.rng = rng if rng is not None else random
        self.display = display
        self.defer_bot = False
        self.history: list[GameState] = []
        self._events: list[Event] = []
        self.setup_game(grid_size, turns, bot, human_color)

    # ---- configuration ----

    def setup_game(self, grid_size: int = DEFAULT_GRID_SIZE, turns: int = DEFAULT_TURNS,
                   bot_difficulty: Difficulty | str | Bot | None = None,
                   human_color: Player = Player.BLUE) -> list[Event]:
        """Fix the session parameters, then start a fresh game."""
        if grid_size not in GRID_SIZES:
            raise ValueError("Grid size must be one of {}, not {}".format(GRID_SIZES, grid_size))
        if turns < 1:
            raise ValueError("Turn budget must be at least 1, not {}".format(turns))
        if human_color is Player.NONE:
            raise ValueError("The human must play Blue or Red")
        self.grid_size = grid_size
        self.turn_budget = turns
        self.human_player = human_color
        if bot_difficulty is None:
            self.bot = None
        elif isinstance(bot_difficulty, Bot):
            if bot_difficulty.player is not human_color.opposite:
                raise ValueError("The bot must play {}".format(human_color.opposite.label))
            self.bot = bot_difficulty
        else:
            self.bot = make_bot(bot_difficulty, human_color.opposite, self.rng)
        return self.reset()

    @property
    def is_vs_bot(self) -> bool:
        return self.bot is not None

    def is_bot_turn(self) -> bool:
        return self.bot is not None and self.current_player is self.bot.player

    # ---- commands ----

    def reset(self) -> list[Event]:
        """Throw away the current game (and any pending bot move) and deal a new board."""
        self._events = []
        self.board = Board(self.grid_size)
        self.turn_number = 0
        # The human always opens against a bot; Blue opens a two-player game.
        self.current_player = self.human_player if self.is_vs_bot else Player.BLUE
        self.turns_remaining = self.turn_budget
        self.blue_score = 0
        self.red_score = 0
        self.phase = GamePhase.PLACEMENT
        self.is_bot_thinking = False
        if self.bot is not None:
            self.bot.resetMemory()
        self._create_entangled_pairs()
        self.message = _turn_message(self.current_player)
        self._emit("game_start", value=self.grid_size, message="{} turns".format(self.turn_budget))
        self._emit("turn_start", player=self.current_player)
        if self.is_bot_turn():
            self._begin_bot_turn()
        return self._finish()

    def apply_move(self, row: int, col: int) -> list[Event]:
        """Influence (row, col) for the player whose turn it is.

        Ignored (with a move_rejected event) outside placement, while the bot is
        thinking or on the bot's turn, off the board, or on the opponent's
        collapsed territory.
        """
        self._events = []
        if self.phase is not GamePhase.PLACEMENT or self.turns_remaining <= 0:
            self._emit("move_rejected", row=row, col=col, message="")
        elif self.is_bot_thinking or self.is_bot_turn():
            self._emit("move_rejected", row=row, col=col, message="")
        elif not self.board.in_bounds(row, col):
            self._emit("move_rejected", row=row, col=col,
                       message="({}, {}) is not on the board.".format(row, col))
        else:
            self._process_move(row, col)
        return self._finish()

    def play_bot_turn(self) -> list[Event]:
        """Apply the bot's pending move. Does nothing unless it is the bot's turn."""
        self._events = []
        if self.phase is GamePhase.PLACEMENT and self.is_bot_turn():
            self._bot_move()
        return self._finish()

    def start_observation_phase(self) -> list[Event]:
        """End placement now: collapse everything and score."""
        self._events = []
        if self.phase is not GamePhase.PLACEMENT or self.is_bot_thinking:
            self._emit("move_rejected", message="")
        else:
            self._observe()
        return self._finish()

    # ---- queries ----

    def snapshot(self, events: list[Event] | None = None) -> GameState:
        return GameState(
            turn_number=self.turn_number,
            phase=self.phase,
            current_player=self.current_player,
            turns_remaining=self.turns_remaining,
            blue_score=self.blue_score,
            red_score=self.red_score,
            is_bot_thinking=self.is_bot_thinking,
            message=self.message,
            grid_size=self.grid_size,
            cells=tuple(_snapshot_cell(cell) for cell in self.board),
            events=list(events or []),
        )

    def score_for(self, player: Player) -> int:
        if player is Player.BLUE:
            return self.blue_score
        if player is Player.RED:
            return self.red_score
        return 0

    @property
    def winner(self) -> Player:
        """Higher final score, or NONE before game over and on a tie."""
        if self.phase is not GamePhase.GAME_OVER or self.blue_score == self.red_score:
            return Player.NONE
        return Player.BLUE if self.blue_score > self.red_score else Player.RED

    def get_game_result(self) -> GameResult:
        if self.blue_score == self.red_score:
            return GameResult(won=None, tied=True)
        if self.bot is not None:
            human = self.score_for(self.human_player)
            machine = self.score_for(self.bot.player)
            return GameResult(won=human > machine, tied=False)
        # Two humans share the device: nobody's record to update
        return GameResult(won=None, tied=False)

    # ---- driver ----

    def run(self, display: Display | None = None) -> GameResult:
        """Play the rest of the game through a display, pacing bot moves via its hook."""
        previous_display, previous_defer = self.display, self.defer_bot
        self.display = display or previous_display or NullDisplay()
        self.defer_bot = True
        try:
            self.display.show_state(self)
            while self.phase is GamePhase.PLACEMENT:
                if self.is_bot_thinking:
                    self.display.pause_for_bot(self)
                    self.play_bot_turn()
                elif self.is_bot_turn():
                    # Bot had nothing legal to play; end placement rather than stall
                    self.start_observation_phase()
                else:
                    move = self.display.pick_cell(self)
                    if move is None:
                        self.start_observation_phase()
                    else:
                        self.apply_move(*move)
        finally:
            self.display = previous_display
            self.defer_bot = previous_defer
        return self.get_game_result()

    # ---- internals ----

    def _emit(self, kind: str, **kwargs) -> None:
        self._events.append(Event(type=kind, **kwargs))

    def _finish(self) -> list[Event]:
        events = self._events
        self._events = []
        self.history.append(self.snapshot(events))
        if self.display is not None:
            self.display.show_events(events)
            self.display.show_state(self)
        return events

    def _create_entangled_pairs(self) -> None:
        pair_count = max(2, self.grid_size // 2)
        ids = self.rng.sample(range(len(self.board)), 2 * pair_count)
        for i in range(0, len(ids), 2):
            self.board.entangle(self.board.by_id(ids[i]), self.board.by_id(ids[i + 1]))

    def _process_move(self, row: int, col: int) -> None:
        mover = self.current_player
        cell = self.board.cell(row, col)
        if cell.is_collapsed and cell.owner is not mover:
            text = "Cannot influence opponent's collapsed territory!"
            if self.bot is None or mover is self.human_player:
                self.message = text
            self._emit("move_rejected", player=mover, row=row, col=col, message=text)
            return

        cell.add_influence(mover)
        self._emit("influence", player=mover, row=row, col=col, value=cell.influence(mover))
        if reaches_threshold(cell):
            self._collapse(cell)

        # A cell that just collapsed has already dropped its partner
        partner = self.board.partner(cell)
        if partner is not None:
            partner.add_influence(mover)
            self._emit("entangled_influence", player=mover, row=partner.row, col=partner.col,
                       value=partner.influence(mover))
            if reaches_threshold(partner):
                self._collapse(partner)

        self.turns_remaining -= 1
        self.turn_number += 1
        if self.turns_remaining == 0:
            self._observe()
        else:
            self._switch_player()

    def _collapse(self, cell) -> None:
        winner, released = collapse_cell(self.board, cell, self.rng)
        self._emit("collapse", row=cell.row, col=cell.col, owner=winner,
                   value=cell.total_influence)
        if released is not None:
            self._emit("entanglement_broken", row=released.row, col=released.col)

    def _switch_player(self) -> None:
        self.current_player = self.current_player.opposite
        self._emit("turn_start", player=self.current_player)
        if self.is_bot_turn():
            self._begin_bot_turn()
        else:
            self.message = _turn_message(self.current_player)

    def _begin_bot_turn(self) -> None:
        self.is_bot_thinking = True
        self.message = "Bot is thinking..."
        self._emit("bot_thinking", player=self.bot.player)
        if not self.defer_bot:
            self._bot_move()

    def _bot_move(self) -> None:
        move = self.bot.chooseMove(self.board)
        self.is_bot_thinking = False
        if move is None:
            self.message = "Bot has no legal move - press observe to finish"
            self._emit("bot_no_move", player=self.bot.player)
            return
        self._emit("bot_move", player=self.bot.player, row=move[0], col=move[1])
        self._process_move(*move)

    def _observe(self) -> None:
        self.phase = GamePhase.OBSERVATION
        self.message = "Observation Phase - Collapsing quantum states..."
        self._emit("observation")
        for cell, winner in collapse_all(self.board, self.rng):
            self._emit("mass_collapse", row=cell.row, col=cell.col, owner=winner)
        self._score()

    def _score(self) -> None:
        self.phase = GamePhase.SCORING
        scores = final_scores(self.board)
        self.blue_score = scores[Player.BLUE]
        self.red_score = scores[Player.RED]
        for player in (Player.BLUE, Player.RED):
            base = base_score(self.board, player)
            bonus = territory_bonus(largest_region(self.board, player))
            self._emit("score", player=player, value=scores[player],
                       message="{} cells + {} territory bonus".format(base, bonus))
        self.phase = GamePhase.GAME_OVER
        if self.blue_score > self.red_score:
            self.message = "Blue Wins! {} - {}".format(self.blue_score, self.red_score)
        elif self.red_score > self.blue_score:
            self.message = "Red Wins! {} - {}".format(self.red_score, self.blue_score)
        else:
            self.message = "It's a Tie! {} - {}".format(self.blue_score, self.red_score)
        self._emit("game_over", player=self.winner, message=self.message)


def main():
    parser = argparse.ArgumentParser(description='Quantum Territories: influence, entangle, observe')
    parser.add_argument('--grid', type=int, choices=GRID_SIZES, default=DEFAULT_GRID_SIZE,
                        help='board width and height (default: {})'.format(DEFAULT_GRID_SIZE))
    parser.add_argument('--turns', type=int, default=DEFAULT_TURNS, metavar='N',
                        help='placement turns per game, e.g. {} (default: {})'.format(
                            ", ".join(str(t) for t in TURN_CHOICES), DEFAULT_TURNS))
    parser.add_argument('--bot', choices=[d.value.lower() for d in Difficulty], default=None,
                        help='play against a bot of this difficulty (omit for two players)')
    parser.add_argument('--color', choices=['blue', 'red'], default='blue',
                        help='your color when playing a bot (default: blue)')
    parser.add_argument('--tui', action='store_true', help='use the full-screen Textual interface')
    parser.add_argument('--rules', action='store_true', help='print the rules and exit')
    parser.add_argument('--seed', type=int, default=None, help='seed the random source')
    args = parser.parse_args()

    if args.rules:
        print(RULES)
        return
    if args.turns < 1:
        parser.error("--turns must be at least 1")
    rng = random.Random(args.seed) if args.seed is not None else None
    game = Game(grid_size=args.grid, turns=args.turns, bot=args.bot,
                human_color=Player(args.color), rng=rng)

    if args.tui:
        from color_tui import ColorTUIDisplay, QuantumTerritoriesApp  # noqa: PLC0415
        QuantumTerritoriesApp(game=game, display=ColorTUIDisplay()).run()
        return

    display = TerminalDisplay()
    playing = True
    while playing:
        game.run(display=display)
        playing = display.confirm("Play again?")
        if playing:
            game.reset()


if __name__ == "__main__":
    main()
