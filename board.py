#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# board.py — Players, cell quantum states, cells and the square board they live on

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

CAPTURE_THRESHOLD: int = 3          # Total influence at which a cell collapses
GRID_SIZES: tuple[int, ...] = (5, 6, 7, 8)
TURN_CHOICES: tuple[int, ...] = (18, 24, 30, 36)
DEFAULT_GRID_SIZE: int = 6
DEFAULT_TURNS: int = 18
HISTORY_LENGTH: int = 5             # Bot remembers its last five moves
MIN_REGION_FOR_BONUS: int = 4


class Player(Enum):
    BLUE = "blue"
    RED = "red"
    NONE = "none"   # "no owner / no influence", never a move actor

    @property
    def opposite(self) -> Player:
        if self is Player.BLUE:
            return Player.RED
        if self is Player.RED:
            return Player.BLUE
        return Player.NONE

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Difficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"

    @property
    def description(self) -> str:
        return {
            Difficulty.EASY: "Random moves, perfect for beginners",
            Difficulty.MEDIUM: "Some strategy, moderate challenge",
            Difficulty.HARD: "Smart moves, tough opponent",
            Difficulty.EXPERT: "Optimal strategy, nearly unbeatable",
        }[self]

    @classmethod
    def from_name(cls, name: str) -> Difficulty:
        for difficulty in cls:
            if difficulty.value.lower() == name.lower():
                return difficulty
        raise ValueError("Unknown bot difficulty '{}'".format(name))


class GamePhase(Enum):
    PLACEMENT = "placement"
    OBSERVATION = "observation"
    SCORING = "scoring"
    GAME_OVER = "game_over"


# ---------------------------------------------------------------------------
# Quantum states: exactly one of these per cell
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Collapsed:
    """Definitively owned by one player. The owner is never Player.NONE."""
    owner: Player

    def __post_init__(self) -> None:
        if self.owner is Player.NONE:
            raise ValueError("A collapsed cell must belong to Blue or Red")


@dataclass(frozen=True)
class Superposition:
    """Undecided and accumulating influence."""


@dataclass(frozen=True)
class Entangled:
    """Undecided and linked to exactly one partner cell."""
    row: int
    col: int


QuantumState = Union[Collapsed, Superposition, Entangled]


@dataclass
class Cell:
    id: int
    row: int
    col: int
    state: QuantumState = field(default_factory=Superposition)
    influence_blue: int = 0
    influence_red: int = 0

    @property
    def owner(self) -> Player:
        if isinstance(self.state, Collapsed):
            return self.state.owner
        return Player.NONE

    @property
    def is_collapsed(self) -> bool:
        return isinstance(self.state, Collapsed)

    @property
    def is_entangled(self) -> bool:
        return isinstance(self.state, Entangled)

    @property
    def total_influence(self) -> int:
        return self.influence_blue + self.influence_red

    @property
    def dominant_influence(self) -> Player:
        """The player with strictly more influence here, or NONE on a tie."""
        if self.influence_blue > self.influence_red:
            return Player.BLUE
        if self.influence_red > self.influence_blue:
            return Player.RED
        return Player.NONE

    def influence(self, player: Player) -> int:
        if player is Player.BLUE:
            return self.influence_blue
        if player is Player.RED:
            return self.influence_red
        return 0

    def add_influence(self, player: Player, amount: int = 1) -> None:
        if player is Player.BLUE:
            self.influence_blue += amount
        elif player is Player.RED:
            self.influence_red += amount


class Board(object):
    """An N×N grid of cells, indexed [row][col], with id = row * N + col."""

    def __init__(self, size: int = DEFAULT_GRID_SIZE):
        if size not in GRID_SIZES:
            raise ValueError("Grid size must be one of {}, not {}".format(GRID_SIZES, size))
        self.size = size
        self.cells = [
            [Cell(id=row * size + col, row=row, col=col) for col in range(size)]
            for row in range(size)
        ]

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def __len__(self) -> int:
        return self.size * self.size

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise IndexError("({}, {}) is off a {}x{} board".format(row, col, self.size, self.size))
        return self.cells[row][col]

    def by_id(self, cell_id: int) -> Cell:
        return self.cell(cell_id // self.size, cell_id % self.size)

    def neighbors8(self, row: int, col: int) -> list[Cell]:
        """All in-bounds cells touching (row, col), diagonals included."""
        found = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                if self.in_bounds(row + dr, col + dc):
                    found.append(self.cells[row + dr][col + dc])
        return found

    def neighbors4(self, row: int, col: int) -> list[Cell]:
        found = []
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            if self.in_bounds(row + dr, col + dc):
                found.append(self.cells[row + dr][col + dc])
        return found

    def partner(self, cell: Cell) -> Cell | None:
        """The cell this one is entangled with, or None if it isn't entangled."""
        if isinstance(cell.state, Entangled):
            return self.cells[cell.state.row][cell.state.col]
        return None

    def entangle(self, first: Cell, second: Cell) -> None:
        if first is second:
            raise ValueError("A cell cannot be entangled with itself")
        first.state = Entangled(second.row, second.col)
        second.state = Entangled(first.row, first.col)

    def entangled_pairs(self) -> list[tuple[Cell, Cell]]:
        """Each live entangled pair once, lower id first."""
        pairs = []
        for cell in self:
            other = self.partner(cell)
            if other is not None and cell.id < other.id:
                pairs.append((cell, other))
        return pairs

    def count_owned(self, player: Player) -> int:
        return sum(1 for cell in self if cell.owner is player)

    def all_collapsed(self) -> bool:
        return all(cell.is_collapsed for cell in self)
