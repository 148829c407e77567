#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_collapse.py — Winner determination, bond severing and mass collapse

import random
import unittest
from board import Board, Collapsed, Entangled, Player, Superposition
from collapse import collapse_all, collapse_cell, reaches_threshold, resolve_winner


class FixedFlip:
    """Stand-in random source whose random() always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class TestResolveWinner(unittest.TestCase):

    def testStrictMajorityNeedsNoCoin(self):
        """Verify a strict majority wins without consulting the random source."""
        board = Board(5)
        cell = board.cell(0, 0)
        cell.influence_blue, cell.influence_red = 2, 1
        flip = FixedFlip(0.9)
        self.assertIs(resolve_winner(cell, flip), Player.BLUE)
        cell.influence_blue, cell.influence_red = 0, 1
        self.assertIs(resolve_winner(cell, flip), Player.RED)
        self.assertEqual(flip.calls, 0)

    def testTieUsesCoinFlip(self):
        """Verify a tie goes to Blue below 0.5 and to Red otherwise."""
        board = Board(5)
        cell = board.cell(0, 0)
        cell.influence_blue, cell.influence_red = 2, 2
        self.assertIs(resolve_winner(cell, FixedFlip(0.2)), Player.BLUE)
        self.assertIs(resolve_winner(cell, FixedFlip(0.8)), Player.RED)

    def testTieFlipIsFair(self):
        """An empty cell goes either way about half the time, whatever the seed."""
        board = Board(5)
        cell = board.cell(0, 0)
        rng = random.Random(1234)
        blues = sum(1 for _ in range(4000) if resolve_winner(cell, rng) is Player.BLUE)
        self.assertGreater(blues, 1800)
        self.assertLess(blues, 2200)


class TestReachesThreshold(unittest.TestCase):

    def testThresholdIsThree(self):
        """Verify a cell needs three total influence to collapse."""
        board = Board(5)
        cell = board.cell(1, 1)
        cell.influence_blue = 2
        self.assertFalse(reaches_threshold(cell))
        cell.influence_red = 1
        self.assertTrue(reaches_threshold(cell))

    def testCollapsedCellNeverReachesAgain(self):
        """Verify a collapsed cell never qualifies to collapse again."""
        board = Board(5)
        cell = board.cell(1, 1)
        cell.influence_blue = 4
        cell.state = Collapsed(Player.BLUE)
        self.assertFalse(reaches_threshold(cell))


class TestCollapseCell(unittest.TestCase):

    def setUp(self):
        self.board = Board(6)
        self.a = self.board.cell(2, 3)
        self.b = self.board.cell(4, 1)
        self.board.entangle(self.a, self.b)

    def testCollapseDemotesPartner(self):
        """Verify the partner drops back to Superposition and keeps its influence."""
        self.a.influence_blue, self.a.influence_red = 2, 1
        self.b.influence_blue, self.b.influence_red = 1, 1
        winner, released = collapse_cell(self.board, self.a, FixedFlip(0.5))
        self.assertIs(winner, Player.BLUE)
        self.assertEqual(self.a.state, Collapsed(Player.BLUE))
        self.assertIs(released, self.b)
        self.assertEqual(self.b.state, Superposition())
        self.assertEqual((self.b.influence_blue, self.b.influence_red), (1, 1))

    def testPartnerCollapseDemotesFirstCell(self):
        """Verify collapsing the second cell of a pair demotes the first."""
        self.b.influence_red = 3
        winner, released = collapse_cell(self.board, self.b)
        self.assertIs(winner, Player.RED)
        self.assertIs(released, self.a)
        self.assertEqual(self.a.state, Superposition())

    def testPlainCellReleasesNothing(self):
        """Verify an unentangled cell releases no partner."""
        cell = self.board.cell(0, 0)
        cell.influence_red = 3
        winner, released = collapse_cell(self.board, cell)
        self.assertIs(winner, Player.RED)
        self.assertIsNone(released)


class TestCollapseAll(unittest.TestCase):

    def testEveryUndecidedCellResolves(self):
        """Verify mass collapse leaves no undecided cell and skips collapsed ones."""
        board = Board(5)
        board.entangle(board.cell(0, 0), board.cell(4, 4))
        board.cell(1, 1).state = Collapsed(Player.RED)
        board.cell(2, 2).influence_blue = 2
        board.cell(3, 3).influence_red = 1
        resolved = collapse_all(board, random.Random(7))
        self.assertTrue(board.all_collapsed())
        self.assertEqual(len(resolved), 24)
        self.assertNotIn(board.cell(1, 1), [cell for cell, _ in resolved])
        self.assertIs(board.cell(1, 1).owner, Player.RED)
        self.assertIs(board.cell(2, 2).owner, Player.BLUE)
        self.assertIs(board.cell(3, 3).owner, Player.RED)

    def testRowMajorOrder(self):
        """Verify cells resolve in row-major order."""
        board = Board(5)
        resolved = collapse_all(board, random.Random(7))
        self.assertEqual([cell.id for cell, _ in resolved], list(range(25)))

    def testReportedWinnerMatchesCell(self):
        """Verify each reported winner owns its cell."""
        board = Board(6)
        for cell, winner in collapse_all(board, random.Random(3)):
            self.assertIs(cell.owner, winner)


if __name__ == "__main__":
    unittest.main(buffer=True)
