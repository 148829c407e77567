#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_user_interactions.py — TerminalDisplay input and text rendering tests

import random
import unittest
from unittest.mock import patch
from board import Player
from quantumterritories import Event, Game, TerminalDisplay, event_text, render_board


class TestTerminalPickCell(unittest.TestCase):
    """TerminalDisplay.pick_cell reads a cell or an observe request from stdin."""

    def setUp(self):
        self.game = Game(rng=random.Random(1))
        self.display = TerminalDisplay()

    def test_reads_row_and_column(self):
        """Verify 'row col' input becomes a cell."""
        with patch('builtins.input', return_value='3 4'):
            self.assertEqual(self.display.pick_cell(self.game), (3, 4))

    def test_observe_returns_none(self):
        """Verify 'observe' returns None."""
        with patch('builtins.input', return_value='observe'):
            self.assertIsNone(self.display.pick_cell(self.game))

    @patch('builtins.print')
    def test_retries_off_board(self, mock_print):
        """Verify an off-board cell is refused and asked for again."""
        with patch('builtins.input', side_effect=['6 6', '5 5']):
            self.assertEqual(self.display.pick_cell(self.game), (5, 5))

    def test_confirm(self):
        """Verify 'y' confirms."""
        with patch('builtins.input', return_value='y'):
            self.assertTrue(self.display.confirm("Play again?"))


class TestTerminalOutput(unittest.TestCase):

    @patch('builtins.print')
    def test_silent_events_are_not_printed(self, mock_print):
        """Verify only events with text are printed."""
        TerminalDisplay().show_events([
            Event(type="turn_start", player=Player.BLUE),
            Event(type="influence", player=Player.BLUE, row=1, col=2, value=1),
        ])
        mock_print.assert_called_once_with("Blue influences (1, 2).")

    @patch('builtins.print')
    def test_show_state_prints_scores(self, mock_print):
        """Verify show_state() prints both scores and the turns left."""
        game = Game(rng=random.Random(1))
        TerminalDisplay().show_state(game)
        printed = " ".join(str(call.args[0]) for call in mock_print.call_args_list)
        self.assertIn("Blue 0 - Red 0", printed)
        self.assertIn("18 turns left", printed)


class TestRenderBoard(unittest.TestCase):
    """render_board() shows collapsed owners, influence and entanglement marks."""

    def test_collapsed_and_entangled_cells(self):
        """Verify collapsed owners and entanglement marks appear on the board."""
        game = Game(rng=random.Random(2))
        plain = next(cell for cell in game.board if not cell.is_entangled)
        for _ in range(3):
            game.apply_move(plain.row, plain.col)
        text = render_board(game)
        self.assertIn("~", text)
        self.assertIn("[B]", text)

    def test_one_line_per_row_plus_header(self):
        """Verify render_board() prints a header plus one line per row."""
        game = Game(grid_size=7, rng=random.Random(3))
        self.assertEqual(len(render_board(game).splitlines()), 8)


class TestEventText(unittest.TestCase):

    def test_collapse_names_owner(self):
        """Verify a collapse line names the new owner."""
        text = event_text(Event(type="collapse", row=2, col=3, owner=Player.RED, value=3))
        self.assertEqual(text, "(2, 3) collapses to Red!")

    def test_rejection_without_message_is_silent(self):
        """Verify a rejection without a message produces no text."""
        self.assertIsNone(event_text(Event(type="move_rejected")))

    def test_score_line(self):
        """Verify a score line shows the total and its breakdown."""
        text = event_text(Event(type="score", player=Player.BLUE, value=20,
                                message="16 cells + 4 territory bonus"))
        self.assertEqual(text, "Blue scores 20 (16 cells + 4 territory bonus).")


if __name__ == "__main__":
    unittest.main(buffer=True)
