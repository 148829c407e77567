#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# territory.py — End-of-game scoring: owned cells plus a bonus for the largest region
# Pure functions only: reads the board, never changes it.

from __future__ import annotations

from board import MIN_REGION_FOR_BONUS, Board, Cell, Player


def base_score(board: Board, player: Player) -> int:
    """One point per cell collapsed in player's favour."""
    return board.count_owned(player)


def _flood_fill(board: Board, start: Cell, player: Player, visited: set[int]) -> int:
    """Size of the 4-connected region of player-owned cells containing start."""
    stack = [start]
    visited.add(start.id)
    size = 0
    while stack:
        cell = stack.pop()
        size += 1
        for neighbor in board.neighbors4(cell.row, cell.col):
            if neighbor.id not in visited and neighbor.owner is player:
                visited.add(neighbor.id)
                stack.append(neighbor)
    return size


def region_sizes(board: Board, player: Player) -> list[int]:
    """Sizes of every 4-connected region player owns, largest first."""
    visited: set[int] = set()
    sizes = []
    for cell in board:
        if cell.id not in visited and cell.owner is player:
            sizes.append(_flood_fill(board, cell, player, visited))
    return sorted(sizes, reverse=True)


def largest_region(board: Board, player: Player) -> int:
    sizes = region_sizes(board, player)
    return sizes[0] if sizes else 0


def territory_bonus(region: int) -> int:
    """Half the largest region (rounded down), but only once it reaches four cells."""
    if region >= MIN_REGION_FOR_BONUS:
        return region // 2
    return 0


def final_scores(board: Board) -> dict[Player, int]:
    """Base score plus territory bonus, computed independently for Blue and Red."""
    scores = {}
    for player in (Player.BLUE, Player.RED):
        scores[player] = base_score(board, player) + territory_bonus(largest_region(board, player))
    return scores
