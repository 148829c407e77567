#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_utility.py — Tests for utility.parseCell(), readCell() and readYesNo()

import unittest
from unittest.mock import patch
import utility


class TestParseCell(unittest.TestCase):
    """Tests for the accepted ways of typing a cell."""

    def testSpaceSeparated(self):
        """Verify 'row col' with a space parses."""
        self.assertEqual(utility.parseCell("2 3", 6), (2, 3))

    def testCommaSeparated(self):
        """Verify a comma separator and surrounding blanks are accepted."""
        self.assertEqual(utility.parseCell(" 4,1 ", 6), (4, 1))

    def testTwoDigits(self):
        """Verify two adjacent digits parse as row then column."""
        self.assertEqual(utility.parseCell("05", 6), (0, 5))

    def testObserveWords(self):
        """Verify 'o' and 'observe' request observation in any case."""
        self.assertEqual(utility.parseCell("o", 6), "observe")
        self.assertEqual(utility.parseCell("Observe", 6), "observe")

    def testOffBoardIsNone(self):
        """Verify coordinates at or past the board size are refused."""
        self.assertIsNone(utility.parseCell("6 0", 6))
        self.assertIsNone(utility.parseCell("0 -1", 6))
        self.assertIsNone(utility.parseCell("7 7", 7))

    def testGarbageIsNone(self):
        """Verify malformed input is refused."""
        for text in ("", "a b", "1", "123", "1 2 3"):
            with self.subTest(text=text):
                self.assertIsNone(utility.parseCell(text, 6))


class TestReadCell(unittest.TestCase):

    @patch('builtins.print')
    def testRetriesUntilValid(self, mock_print):
        """Verify readCell() keeps asking after bad input and explains why."""
        with patch('builtins.input', side_effect=['9 9', 'xyz', '2 3']):
            self.assertEqual(utility.readCell(6), (2, 3))
        self.assertEqual(mock_print.call_count, 2)

    @patch('builtins.print')
    def testObserveReturnsNone(self, mock_print):
        """Verify 'o' returns None instead of a cell."""
        with patch('builtins.input', return_value='o'):
            self.assertIsNone(utility.readCell(6))


class TestReadYesNo(unittest.TestCase):

    @patch('builtins.print')
    def testYes(self, mock_print):
        """Verify any answer starting with 'y' is yes."""
        with patch('builtins.input', return_value='Yes please'):
            self.assertTrue(utility.readYesNo("Play again?"))

    @patch('builtins.print')
    def testNoAfterGarbage(self, mock_print):
        """Verify readYesNo() asks again after an unclear answer."""
        with patch('builtins.input', side_effect=['maybe', 'n']):
            self.assertFalse(utility.readYesNo("Play again?"))
        mock_print.assert_called_once()


if __name__ == "__main__":
    unittest.main(buffer=True)
