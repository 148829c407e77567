#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# color_tui.py — ColorTUIDisplay: full-screen Textual TUI for Quantum Territories.
#
# Requires: pip install textual
# The game runs in a worker thread; the Textual event loop owns the widgets.

from __future__ import annotations

import asyncio
import threading
import time

from textual.app import App, ComposeResult
from textual.events import Key
from textual.widgets import RichLog, Static

from board import Difficulty, GamePhase, Player
from quantumterritories import RULES, Display, Event, Game, event_text

# Pacing for the human's benefit only; the engine never waits.
THINKING_DELAY: dict[Difficulty, float] = {
    Difficulty.EASY: 0.5,
    Difficulty.MEDIUM: 0.8,
    Difficulty.HARD: 1.0,
    Difficulty.EXPERT: 1.2,
}
COLLAPSE_STAGGER: float = 0.15

_COLORS = {Player.BLUE: "dodger_blue1", Player.RED: "indian_red1"}


# ── Widgets ───────────────────────────────────────────────────────────────────

class ScorePanel(Static):
    """Top strip: scores, turns left, phase and the status message."""

    DEFAULT_CSS = """
    ScorePanel {
        height: auto;
        border: solid $success-darken-1;
        padding: 0 1;
    }
    """


class BoardPanel(Static):
    """The grid itself."""

    DEFAULT_CSS = """
    BoardPanel {
        height: 1fr;
        border: solid grey;
        padding: 1 2;
    }
    """


class EventLog(RichLog):
    """Scrolling log of game events."""

    DEFAULT_CSS = """
    EventLog {
        height: 8;
        border: solid $primary-darken-1;
        padding: 0 1;
    }
    """


class IOPanel(Static):
    """Current prompt and the digits typed so far."""

    DEFAULT_CSS = """
    IOPanel {
        height: auto;
        border: solid $warning-darken-1;
        padding: 0 1;
    }
    """


# ── Helpers ───────────────────────────────────────────────────────────────────

def _cell_markup(cell, hidden: bool = False) -> str:
    """Five visible characters per cell.

    Collapsed cells are a solid colored block; undecided cells show blue and red
    influence separated by '·', or by a magenta '~' when entangled. A hidden
    cell is drawn as undecided even if it has already collapsed.
    """
    if cell.is_collapsed and not hidden:
        color = _COLORS[cell.owner]
        return f"[bold {color}]█{cell.owner.label[0]}█[/bold {color}]  "
    if cell.is_entangled:
        link = "[magenta]~[/magenta]"
    else:
        link = "[dim]·[/dim]"
    blue = f"[{_COLORS[Player.BLUE]}]{cell.influence_blue}[/{_COLORS[Player.BLUE]}]"
    red = f"[{_COLORS[Player.RED]}]{cell.influence_red}[/{_COLORS[Player.RED]}]"
    return f"{blue}{link}{red}  "


def _board_markup(game: Game, hidden: frozenset = frozenset()) -> str:
    size = game.board.size
    header = "   " + "".join(f"{c:<5}" for c in range(size))
    rows = [header]
    for row in range(size):
        cells = "".join(_cell_markup(game.board.cell(row, col), (row, col) in hidden)
                        for col in range(size))
        rows.append(f"{row:>2} {cells}")
    return "\n".join(rows)


def _score_markup(game: Game) -> str:
    blue, red = _COLORS[Player.BLUE], _COLORS[Player.RED]
    marker_blue = "▶" if game.current_player is Player.BLUE and game.phase is GamePhase.PLACEMENT else " "
    marker_red = "▶" if game.current_player is Player.RED and game.phase is GamePhase.PLACEMENT else " "
    mode = f"vs {game.bot.difficulty.value} bot" if game.bot is not None and game.bot.difficulty else "two players"
    return (
        f"{marker_blue} [{blue}]Blue {game.blue_score}[/{blue}]   "
        f"{marker_red} [{red}]Red {game.red_score}[/{red}]   "
        f"Turns: {game.turns_remaining}   ({mode})\n"
        f"{game.message}"
    )


def _event_to_str(event: Event) -> str | None:
    """Log line for an event, colored by the player or owner it concerns."""
    text = event_text(event)
    if text is None:
        return None
    who = event.owner or event.player
    if who in _COLORS:
        return f"[{_COLORS[who]}]{text}[/{_COLORS[who]}]"
    return text


# ── App ───────────────────────────────────────────────────────────────────────

class QuantumTerritoriesApp(App):
    """Full-screen Quantum Territories TUI."""

    TITLE = "Quantum Territories"
    BINDINGS = [("q", "quit", "Quit"), ("question_mark", "rules", "Rules")]

    def __init__(self, game: Game | None = None,
                 display: ColorTUIDisplay | None = None) -> None:
        super().__init__()
        self.game = game if game is not None else Game()
        self._game_display = display
        self._bridge_event = threading.Event()
        self._bridge_result: object = None
        self._bridge_mode: str | None = None   # "pick_cell" | "confirm" | None
        self._key_buffer: str = ""
        self._last_prompt: str = ""
        if display is not None:
            display.app = self

    def compose(self) -> ComposeResult:
        yield ScorePanel("", id="scores")
        yield BoardPanel("", id="board")
        yield EventLog(id="event-log", markup=True)
        yield IOPanel("", id="io-panel")

    def on_mount(self) -> None:
        self.update_state(self.game)
        if self._game_display is not None:
            threading.Thread(target=self._game_worker, daemon=True).start()

    def action_rules(self) -> None:
        self.show_info_text(RULES)

    def add_events(self, events: list[Event]) -> None:
        """Write renderable events to the EventLog; silent events are dropped."""
        log = self.query_one(EventLog)
        for event in events:
            text = _event_to_str(event)
            if text is not None:
                log.write(text)

    def update_state(self, game: Game) -> None:
        """Repopulate the score and board panels from the game."""
        self.query_one(ScorePanel).update(_score_markup(game))
        self.query_one(BoardPanel).update(_board_markup(game))

    def update_board(self, hidden: frozenset) -> None:
        """Redraw only the board, showing the cells in hidden as still undecided."""
        self.query_one(BoardPanel).update(_board_markup(self.game, hidden))

    def _game_worker(self) -> None:
        """Run games in a background thread until the player declines a rematch.

        Exceptions are swallowed silently: the app may exit (e.g., test teardown)
        while a turn is in progress, causing call_from_thread() to re-raise a
        widget-not-found error.
        """
        display = self._game_display
        try:
            playing = True
            while playing:
                self.game.run(display=display)  # type: ignore[arg-type]
                playing = display.confirm("Play again?")  # type: ignore[union-attr]
                if playing:
                    self.game.reset()
                    display.show_state(self.game)  # type: ignore[union-attr]
        except Exception:  # noqa: BLE001
            pass

    def show_cell_prompt(self, prompt: str) -> None:
        """Ask for a cell: two digits (row, col) then Enter, or 'o' to observe."""
        self._bridge_mode = "pick_cell"
        self._key_buffer = ""
        self._last_prompt = prompt
        self._refresh_io_panel()

    def show_confirm_prompt(self, prompt: str) -> None:
        """Update IOPanel with a yes/no prompt and enter confirm mode."""
        self._bridge_mode = "confirm"
        self.query_one(IOPanel).update(f"{prompt} [y/n]")

    def show_info_text(self, content: str) -> None:
        """Write informational content to the EventLog."""
        self.query_one(EventLog).write(content)

    def _refresh_io_panel(self) -> None:
        self.query_one(IOPanel).update(f"{self._last_prompt}\n> {self._key_buffer}_")

    def resolve_bridge(self, value: object) -> None:
        """Resolve the current blocking bridge request and clear the IOPanel."""
        self._bridge_mode = None
        self._key_buffer = ""
        self.query_one(IOPanel).update("")
        self._bridge_result = value
        self._bridge_event.set()

    def on_key(self, event: Key) -> None:
        """Route keypresses to the active bridge request."""
        if self._bridge_mode == "confirm":
            if event.character in ("y", "Y"):
                event.stop()
                self.resolve_bridge(True)
            elif event.character in ("n", "N"):
                event.stop()
                self.resolve_bridge(False)
        elif self._bridge_mode == "pick_cell":
            size = self.game.board.size
            if event.key == "backspace":
                self._key_buffer = self._key_buffer[:-1]
                self._refresh_io_panel()
                event.stop()
            elif event.character in ("o", "O"):
                event.stop()
                self.resolve_bridge(None)
            elif event.key == "enter":
                if len(self._key_buffer) == 2:
                    event.stop()
                    row, col = int(self._key_buffer[0]), int(self._key_buffer[1])
                    self.resolve_bridge((row, col))
            elif event.character is not None and event.character.isdigit():
                # One digit for the row, one for the column; the board is at most 8x8
                if len(self._key_buffer) < 2 and int(event.character) < size:
                    self._key_buffer += event.character
                    self._refresh_io_panel()
                event.stop()


# ── ColorTUIDisplay ───────────────────────────────────────────────────────────

class ColorTUIDisplay(Display):
    """Full-screen TUI display powered by Textual.

    Wire up via QuantumTerritoriesApp(game=..., display=...) so the app starts the
    game worker thread automatically. pick_cell() and confirm() MUST be called from
    a background thread — calling them from the Textual event loop will deadlock.
    With pacing on, bot moves wait THINKING_DELAY and end-of-game collapses are
    replayed one at a time.
    """

    def __init__(self, app: QuantumTerritoriesApp | None = None, pacing: bool = True) -> None:
        self.app = app
        self.pacing = pacing

    def _require_app(self, method: str) -> None:
        if self.app is None:
            raise RuntimeError(
                f"ColorTUIDisplay.{method}() requires an app — "
                "pass app=QuantumTerritoriesApp() to the constructor"
            )

    @staticmethod
    def _on_ui_thread() -> bool:
        try:
            asyncio.get_running_loop()
            return True
        except RuntimeError:
            return False

    def _call_on_ui(self, fn: callable, /, *args: object) -> None:
        """Call fn(*args) directly on the Textual loop, or via call_from_thread() elsewhere."""
        if self._on_ui_thread():
            fn(*args)
        else:
            self.app.call_from_thread(fn, *args)  # type: ignore[union-attr]

    def show_events(self, events: list[Event]) -> None:
        self._require_app("show_events")
        if not self.pacing or self._on_ui_thread():
            self._call_on_ui(self.app.add_events, events)
            return
        # The board has already collapsed; reveal it one cell per mass_collapse event
        hidden = {(e.row, e.col) for e in events if e.type == "mass_collapse"}
        batch: list[Event] = []
        for event in events:
            batch.append(event)
            if event.type == "mass_collapse":
                hidden.discard((event.row, event.col))
                self._call_on_ui(self.app.add_events, batch)
                self._call_on_ui(self.app.update_board, frozenset(hidden))
                batch = []
                time.sleep(COLLAPSE_STAGGER)
        if batch:
            self._call_on_ui(self.app.add_events, batch)

    def show_state(self, game: Game) -> None:
        self._require_app("show_state")
        self._call_on_ui(self.app.update_state, game)

    def pick_cell(self, game: Game) -> tuple[int, int] | None:
        """Block until the player types a cell or presses 'o'.

        Must be called from a background thread, not the Textual event loop.
        """
        self._require_app("pick_cell")
        prompt = f"{game.current_player.label}: type row and column, then Enter ('o' to observe)"
        self.app._bridge_event.clear()
        self._call_on_ui(self.app.show_cell_prompt, prompt)
        self.app._bridge_event.wait()
        return self.app._bridge_result  # type: ignore[return-value]

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question and block until resolve_bridge() is called.

        Must be called from a background thread, not the Textual event loop.
        """
        self._require_app("confirm")
        self.app._bridge_event.clear()
        self._call_on_ui(self.app.show_confirm_prompt, prompt)
        self.app._bridge_event.wait()
        return bool(self.app._bridge_result)

    def show_info(self, content: str) -> None:
        self._require_app("show_info")
        self._call_on_ui(self.app.show_info_text, content)

    def pause_for_bot(self, game: Game) -> None:
        if self.pacing and game.bot is not None and game.bot.difficulty is not None:
            time.sleep(THINKING_DELAY[game.bot.difficulty])


if __name__ == "__main__":
    QuantumTerritoriesApp(game=Game(bot=Difficulty.MEDIUM), display=ColorTUIDisplay()).run()
