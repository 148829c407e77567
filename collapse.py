#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# collapse.py — Turning accumulated influence into a definitive owner
#
# Ties are settled by a fair coin flip, never weighted by how much influence was
# placed. Callers pass rng (random module or a random.Random) so tests can seed it.

from __future__ import annotations

import random

from board import CAPTURE_THRESHOLD, Board, Cell, Collapsed, Entangled, Player, Superposition


def resolve_winner(cell: Cell, rng=random) -> Player:
    """Strictly greater influence wins; an exact tie (including 0-0) is a 50/50 flip."""
    if cell.influence_blue > cell.influence_red:
        return Player.BLUE
    if cell.influence_red > cell.influence_blue:
        return Player.RED
    return Player.BLUE if rng.random() < 0.5 else Player.RED


def reaches_threshold(cell: Cell) -> bool:
    """True when an undecided cell has gathered enough influence to collapse."""
    return not cell.is_collapsed and cell.total_influence >= CAPTURE_THRESHOLD


def collapse_cell(board: Board, cell: Cell, rng=random) -> tuple[Player, Cell | None]:
    """Collapse one cell and sever its entanglement bond.

    Returns (winner, partner) where partner is the cell that was demoted from
    Entangled back to Superposition, or None. The partner keeps its influence.
    """
    winner = resolve_winner(cell, rng)
    released = None
    other = board.partner(cell)
    if other is not None and other.state == Entangled(cell.row, cell.col):
        other.state = Superposition()
        released = other
    cell.state = Collapsed(winner)
    return winner, released


def collapse_all(board: Board, rng=random) -> list[tuple[Cell, Player]]:
    """Resolve every undecided cell at the end of placement, in row-major order.

    No influence moves during this pass, so each cell is decided on its own numbers.
    """
    resolved = []
    for cell in board:
        if cell.is_collapsed:
            continue
        winner = resolve_winner(cell, rng)
        cell.state = Collapsed(winner)
        resolved.append((cell, winner))
    return resolved
