#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_territory.py — Base counts, flood fill and territory bonus

import unittest
from board import Board, Collapsed, Player
from territory import (
    base_score, final_scores, largest_region, region_sizes, territory_bonus,
)


def _paint(rows: list[str]) -> Board:
    """Board from strings: 'B' and 'R' are collapsed cells, anything else stays undecided."""
    board = Board(len(rows))
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == "B":
                board.cell(r, c).state = Collapsed(Player.BLUE)
            elif ch == "R":
                board.cell(r, c).state = Collapsed(Player.RED)
    return board


class TestTerritoryBonus(unittest.TestCase):

    def testBelowFourIsZero(self):
        """Verify regions smaller than four earn no bonus."""
        for size in (0, 1, 2, 3):
            with self.subTest(size=size):
                self.assertEqual(territory_bonus(size), 0)

    def testHalfRoundedDown(self):
        """Verify the bonus is half the region size, rounded down."""
        self.assertEqual(territory_bonus(4), 2)
        self.assertEqual(territory_bonus(5), 2)
        self.assertEqual(territory_bonus(9), 4)
        self.assertEqual(territory_bonus(25), 12)


class TestRegions(unittest.TestCase):

    def testDiagonalsDoNotConnect(self):
        """Verify diagonal cells do not join a region."""
        board = _paint([
            "BRBRB",
            "RBRBR",
            "BRBRB",
            "RBRBR",
            "BRBRB",
        ])
        self.assertEqual(largest_region(board, Player.BLUE), 1)
        self.assertEqual(largest_region(board, Player.RED), 1)
        self.assertEqual(len(region_sizes(board, Player.BLUE)), 13)

    def testOnlyLargestRegionCounts(self):
        """Two separate Blue regions of 4 and 6: the bonus comes from the 6 alone."""
        board = _paint([
            "BBRBB",
            "BBRBB",
            "RRRBB",
            "RRRRR",
            "RRRRR",
        ])
        self.assertEqual(region_sizes(board, Player.BLUE), [6, 4])
        scores = final_scores(board)
        self.assertEqual(scores[Player.BLUE], 10 + 3)
        self.assertEqual(scores[Player.RED], 15 + 7)

    def testUndecidedCellsBreakRegions(self):
        """Verify an undecided cell splits a row into separate regions."""
        board = _paint([
            "BB.BB",
            ".....",
            ".....",
            ".....",
            ".....",
        ])
        self.assertEqual(largest_region(board, Player.BLUE), 2)
        self.assertEqual(largest_region(board, Player.RED), 0)

    def testLShapedRegion(self):
        """Verify an L-shaped run counts as one region."""
        board = _paint([
            "B....",
            "B....",
            "BBB..",
            ".....",
            ".....",
        ])
        self.assertEqual(largest_region(board, Player.BLUE), 5)


class TestFinalScores(unittest.TestCase):

    def testWholeBoardOneColor(self):
        """Verify one color owning the whole board scores every cell plus the bonus."""
        board = _paint(["BBBBB"] * 5)
        scores = final_scores(board)
        self.assertEqual(scores[Player.BLUE], 25 + 12)
        self.assertEqual(scores[Player.RED], 0)

    def testBaseScoresCoverEveryCell(self):
        """Verify every collapsed cell counts for exactly one player."""
        board = _paint([
            "BRBBR",
            "RRBBR",
            "BBRRR",
            "RBBRB",
            "BRRBB",
        ])
        self.assertEqual(base_score(board, Player.BLUE) + base_score(board, Player.RED), 25)

    def testSmallRegionsEarnNoBonus(self):
        """Verify regions of three or fewer add nothing to the base count."""
        board = _paint([
            "BBR..",
            "RRB..",
            ".....",
            ".....",
            ".....",
        ])
        scores = final_scores(board)
        self.assertEqual(scores[Player.BLUE], 3)
        self.assertEqual(scores[Player.RED], 3)


if __name__ == "__main__":
    unittest.main(buffer=True)
