#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# bots.py — Move-selection policies for the computer opponent
#
# Every tier shares the same shape: score each legal cell, then pick from the best.
# selectMove() only reads the board; chooseMove() also records the move in the bot's
# short history so later picks drift away from the same rows and columns.

from __future__ import annotations

import random
from collections import deque

from board import HISTORY_LENGTH, Board, Cell, Collapsed, Difficulty, Player

Move = tuple[int, int]
Scored = tuple[int, int, int]   # (row, col, score)


def can_influence(cell: Cell, player: Player) -> bool:
    """Anything except a cell already collapsed in the opponent's favour."""
    if isinstance(cell.state, Collapsed):
        return cell.state.owner is player
    return True


def legal_moves(board: Board, player: Player) -> list[Cell]:
    return [cell for cell in board if can_influence(cell, player)]


def recent_penalty(row: int, col: int, history, row_weight: int = 15,
                   col_weight: int = 15, cell_weight: int = 30) -> int:
    """Penalty for lining up with recent moves.

    Each remembered move in the same row costs row_weight, in the same column
    col_weight, and an exact repeat costs cell_weight on top of both.
    """
    penalty = 0
    for r, c in history:
        if r == row:
            penalty += row_weight
        if c == col:
            penalty += col_weight
        if r == row and c == col:
            penalty += cell_weight
    return penalty


def _ranked(scored: list[Scored]) -> list[Scored]:
    return sorted(scored, key=lambda m: m[2], reverse=True)


def _owned_neighbors(board: Board, cell: Cell, player: Player) -> int:
    return sum(1 for n in board.neighbors8(cell.row, cell.col) if n.owner is player)


def _is_corner(board: Board, cell: Cell) -> bool:
    last = board.size - 1
    return cell.row in (0, last) and cell.col in (0, last)


def _is_edge(board: Board, cell: Cell) -> bool:
    last = board.size - 1
    return cell.row in (0, last) or cell.col in (0, last)


class Bot(object):
    """Baseline opponent: any legal cell, uniformly at random.

    Subclasses override selectMove(); penalty_divisor scales the shared
    repetition penalty (1 = full weight, 2 = half, 3 = a third).
    """

    difficulty: Difficulty | None = None
    penalty_divisor: int = 1

    def __init__(self, player: Player = Player.RED, rng=None, name: str | None = None) -> None:
        if player is Player.NONE:
            raise ValueError("A bot must play Blue or Red")
        self.player = player
        self.rng = rng if rng is not None else random
        self.name = name or type(self).__name__
        self.recent_moves: deque[Move] = deque(maxlen=HISTORY_LENGTH)

    @property
    def opponent(self) -> Player:
        return self.player.opposite

    def chooseMove(self, board: Board) -> Move | None:
        """Pick a move and remember it; None only when nothing is legal."""
        move = self.selectMove(board, list(self.recent_moves))
        if move is not None:
            self.recent_moves.append(move)
        return move

    def selectMove(self, board: Board, history: list[Move]) -> Move | None:
        moves = legal_moves(board, self.player)
        if not moves:
            return None
        cell = self.rng.choice(moves)
        return (cell.row, cell.col)

    def resetMemory(self) -> None:
        self.recent_moves.clear()

    def penalty(self, row: int, col: int, history: list[Move]) -> int:
        return recent_penalty(row, col, history) // self.penalty_divisor

    def _pick_among_top(self, scored: list[Scored], top_n: int) -> Move | None:
        """Uniform choice among the top_n highest-scoring moves."""
        if not scored:
            return None
        row, col, _ = self.rng.choice(_ranked(scored)[:top_n])
        return (row, col)

    def _pick_best_or_runner_up(self, scored: list[Scored], runner_up_chance: float) -> Move | None:
        """The top move, or the second with probability runner_up_chance."""
        if not scored:
            return None
        ranked = _ranked(scored)
        if len(ranked) > 1 and self.rng.random() < runner_up_chance:
            return (ranked[1][0], ranked[1][1])
        return (ranked[0][0], ranked[0][1])


class EasyBot(Bot):
    """Mostly random, with a nudge toward untouched cells."""

    difficulty = Difficulty.EASY
    RANDOM_RANGE: int = 100
    EMPTY_BONUS: int = 20
    TOP_N: int = 5

    def score(self, board: Board, cell: Cell, history: list[Move]) -> int:
        score = self.rng.randint(0, self.RANDOM_RANGE)
        score -= self.penalty(cell.row, cell.col, history)
        if cell.total_influence == 0:
            score += self.EMPTY_BONUS
        return score

    def selectMove(self, board: Board, history: list[Move]) -> Move | None:
        scored = [(c.row, c.col, self.score(board, c, history)) for c in legal_moves(board, self.player)]
        return self._pick_among_top(scored, self.TOP_N)


class MediumBot(Bot):
    """Takes captures and blocks when it sees them, otherwise builds and spreads."""

    difficulty = Difficulty.MEDIUM
    RANDOM_RANGE: int = 30
    TOP_N: int = 3
    WEIGHTS: dict[str, int] = {
        "capture": 60,      # total 2 and we lead: our move collapses it for us
        "block": 50,        # total 2 and they lead
        "build": 25,        # we already have a point and total < 2
        "empty": 15,
        "entangled": 20,
    }

    def score(self, board: Board, cell: Cell, history: list[Move]) -> int:
        w = self.WEIGHTS
        score = self.rng.randint(0, self.RANDOM_RANGE)
        score -= self.penalty(cell.row, cell.col, history)
        total = cell.total_influence
        if total == 2 and cell.dominant_influence is self.player:
            score += w["capture"]
        if total == 2 and cell.dominant_influence is self.opponent:
            score += w["block"]
        if cell.influence(self.player) > 0 and total < 2:
            score += w["build"]
        if total == 0:
            score += w["empty"]
        if cell.is_entangled:
            score += w["entangled"]
        return score

    def selectMove(self, board: Board, history: list[Move]) -> Move | None:
        scored = [(c.row, c.col, self.score(board, c, history)) for c in legal_moves(board, self.player)]
        return self._pick_among_top(scored, self.TOP_N)


class HardBot(Bot):
    """Weighs captures, blocks, setups, entanglement, board position and clustering."""

    difficulty = Difficulty.HARD
    penalty_divisor = 2
    RANDOM_RANGE: int = 15
    RUNNER_UP_CHANCE: float = 0.3
    WEIGHTS: dict[str, int] = {
        "sure_capture": 100,    # total 2 and we hold both points
        "coin_flip": 70,        # total 2, one point each: a 50/50 collapse
        "contest": 40,          # total 2 and we're behind
        "block": 90,
        "setup": 45,            # total 1 and the point is ours
        "disrupt": 35,          # total 1 and the point is theirs
        "entangled": 25,
        "partner_live": 30,     # partner sits at 1 or 2 influence
        "empty": 20,
        "corner": 15,
        "edge": 8,
        "neighbor": 6,          # per surrounding cell we own
    }

    def score(self, board: Board, cell: Cell, history: list[Move]) -> int:
        w = self.WEIGHTS
        mine = cell.influence(self.player)
        theirs = cell.influence(self.opponent)
        total = cell.total_influence
        score = self.rng.randint(0, self.RANDOM_RANGE)
        score -= self.penalty(cell.row, cell.col, history)

        if total == 2:
            if mine > theirs:
                score += w["sure_capture"]
            elif mine == theirs:
                score += w["coin_flip"]
            else:
                score += w["contest"]
            if cell.dominant_influence is self.opponent:
                score += w["block"]
        if total == 1 and mine == 1:
            score += w["setup"]
        if total == 1 and theirs == 1:
            score += w["disrupt"]

        partner = board.partner(cell)
        if partner is not None:
            score += w["entangled"]
            if partner.total_influence in (1, 2):
                score += w["partner_live"]

        if total == 0:
            score += w["empty"]
            if _is_corner(board, cell):
                score += w["corner"]
            elif _is_edge(board, cell):
                score += w["edge"]

        score += w["neighbor"] * _owned_neighbors(board, cell, self.player)
        return score

    def selectMove(self, board: Board, history: list[Move]) -> Move | None:
        scored = [(c.row, c.col, self.score(board, c, history)) for c in legal_moves(board, self.player)]
        return self._pick_best_or_runner_up(scored, self.RUNNER_UP_CHANCE)


class ExpertBot(Bot):
    """Sorts moves into buckets and works down a strict priority order.

    Captures beat blocks, blocks beat everything else; otherwise the bot usually
    (SETUP_CHANCE) plays a setup/disrupt move and otherwise expands.
    """

    difficulty = Difficulty.EXPERT
    penalty_divisor = 3
    RANDOM_RANGE: int = 5
    RUNNER_UP_CHANCE: float = 0.15
    SETUP_CHANCE: float = 0.7
    BASES: dict[str, int] = {
        "capture": 150,
        "block": 140,
        "setup": 80,
        "disrupt": 60,
        "expand": 30,
    }
    EXPANSION: dict[str, int] = {
        "entangled": 35,
        "partner_open": 20,     # partner hasn't collapsed yet
        "owned_neighbor": 10,
        "touched_neighbor": 5,  # we have any influence next door
        "center": 15,           # within Manhattan distance 1 of the middle
    }

    def _expansion_score(self, board: Board, cell: Cell, jitter: int) -> int:
        e = self.EXPANSION
        score = self.BASES["expand"] + jitter
        partner = board.partner(cell)
        if partner is not None:
            score += e["entangled"]
            if not partner.is_collapsed:
                score += e["partner_open"]
        for neighbor in board.neighbors8(cell.row, cell.col):
            if neighbor.owner is self.player:
                score += e["owned_neighbor"]
            if neighbor.influence(self.player) > 0:
                score += e["touched_neighbor"]
        center = board.size // 2
        if abs(cell.row - center) + abs(cell.col - center) <= 1:
            score += e["center"]
        return score

    def buckets(self, board: Board, history: list[Move]) -> dict[str, list[Scored]]:
        """Split legal moves into capture/block/setup/expansion lists with scores."""
        found: dict[str, list[Scored]] = {"capture": [], "block": [], "setup": [], "expansion": []}
        for cell in legal_moves(board, self.player):
            jitter = self.rng.randint(0, self.RANDOM_RANGE) - self.penalty(cell.row, cell.col, history)
            mine = cell.influence(self.player)
            total = cell.total_influence
            if total == 2:
                if mine >= cell.influence(self.opponent):
                    found["capture"].append((cell.row, cell.col, self.BASES["capture"] + jitter))
                if cell.dominant_influence is self.opponent:
                    found["block"].append((cell.row, cell.col, self.BASES["block"] + jitter))
            elif total == 1:
                base = self.BASES["setup"] if mine == 1 else self.BASES["disrupt"]
                found["setup"].append((cell.row, cell.col, base + jitter))
            else:
                # Untouched cells, plus our own collapsed cells (total >= 3)
                found["expansion"].append((cell.row, cell.col, self._expansion_score(board, cell, jitter)))
        return found

    def selectMove(self, board: Board, history: list[Move]) -> Move | None:
        found = self.buckets(board, history)
        if found["capture"]:
            chosen = found["capture"]
        elif found["block"]:
            chosen = found["block"]
        else:
            if found["setup"] and self.rng.random() < self.SETUP_CHANCE:
                chosen = found["setup"]
            else:
                chosen = found["expansion"]
            if not chosen:
                chosen = found["setup"] + found["expansion"]
        return self._pick_best_or_runner_up(chosen, self.RUNNER_UP_CHANCE)


BOT_TIERS: dict[Difficulty, type[Bot]] = {
    Difficulty.EASY: EasyBot,
    Difficulty.MEDIUM: MediumBot,
    Difficulty.HARD: HardBot,
    Difficulty.EXPERT: ExpertBot,
}


def make_bot(difficulty: Difficulty | str, player: Player = Player.RED, rng=None) -> Bot:
    """Build the bot for a difficulty (enum or case-insensitive name)."""
    if isinstance(difficulty, str):
        difficulty = Difficulty.from_name(difficulty)
    return BOT_TIERS[difficulty](player=player, rng=rng)


def choose_move(difficulty: Difficulty | str, board: Board, player: Player,
                history=(), rng=None) -> Move | None:
    """Stateless form of Bot.selectMove: board, player and history in, one move out."""
    return make_bot(difficulty, player, rng).selectMove(board, list(history))
