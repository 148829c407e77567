#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# utility.py - Helper functions for terminal input

OBSERVE_WORDS = ("o", "observe")


def parseCell(text, size):
    """Turn "2 3", "2,3" or "23" into (2, 3); 'o'/'observe' into "observe"; else None."""
    text = text.strip().lower()
    if text in OBSERVE_WORDS:
        return "observe"
    pieces = text.replace(",", " ").split()
    if len(pieces) == 1 and len(pieces[0]) == 2:
        pieces = list(pieces[0])
    if len(pieces) != 2:
        return None
    try:
        row, col = int(pieces[0]), int(pieces[1])
    except ValueError:
        return None
    if 0 <= row < size and 0 <= col < size:
        return (row, col)
    return None


def readCell(size, prompt="Your move: "):
    # Return (row, col), or None when the player asks to observe
    while True:
        choice = parseCell(input(prompt), size)
        if choice == "observe":
            return None
        if choice is not None:
            return choice
        print("Sorry: enter a row and column from 0 to {}, or 'o' to observe.".format(size - 1))


def readYesNo(prompt):
    while True:
        answer = input("{} ([Y]es / [N]o) ".format(prompt)).strip().lower()
        if answer.startswith("y"):
            return True
        if answer.startswith("n"):
            return False
        print("Sorry, I couldn't find a Y or N in your answer. ")
