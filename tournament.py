#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tournament.py — Round-robin harness for comparing the bot difficulty tiers
#
# Every pair of entrants plays the same number of games, swapping colors each game
# so neither side keeps Blue's first move. Per-game records can be exported to JSONL.
#
# Usage:
#   python tournament.py                         # 20 games per pairing on a 6x6 board
#   python tournament.py --games 100 --grid 8    # longer run on the big board
#   python tournament.py --records out.jsonl     # also export per-game JSONL records

from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass, field
from itertools import combinations
from typing import Callable

from board import DEFAULT_GRID_SIZE, DEFAULT_TURNS, GRID_SIZES, GamePhase, Player
from bots import Bot, EasyBot, ExpertBot, HardBot, MediumBot
from quantumterritories import Game


@dataclass
class Entrant:
    """One bot family taking part in the round robin."""
    label: str
    bot_factory: Callable[..., Bot]
    wins: int = 0
    losses: int = 0
    ties: int = 0
    score_total: int = field(default=0)

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def points(self) -> float:
        return self.wins + 0.5 * self.ties


@dataclass
class MatchRecord:
    """Outcome of one game between two entrants."""
    blue: str
    red: str
    blue_score: int
    red_score: int
    turns_played: int

    @property
    def winner(self) -> str | None:
        if self.blue_score == self.red_score:
            return None
        return self.blue if self.blue_score > self.red_score else self.red


def play_match(blue_bot: Bot, red_bot: Bot, grid_size: int = DEFAULT_GRID_SIZE,
               turns: int = DEFAULT_TURNS, rng=None) -> Game:
    """Play one complete game between two bots on a two-player Game and return it.

    A bot with no legal move ends placement by observing.
    """
    game = Game(grid_size=grid_size, turns=turns, rng=rng)
    seats = {Player.BLUE: blue_bot, Player.RED: red_bot}
    for bot in seats.values():
        bot.resetMemory()
    while game.phase is GamePhase.PLACEMENT:
        move = seats[game.current_player].chooseMove(game.board)
        if move is None:
            game.start_observation_phase()
        else:
            game.apply_move(*move)
    return game


def _write_record(records_path: str, record: MatchRecord, grid_size: int, turns: int) -> None:
    line = {
        "grid": grid_size,
        "turns": turns,
        "turns_played": record.turns_played,
        "blue": record.blue,
        "red": record.red,
        "blue_score": record.blue_score,
        "red_score": record.red_score,
        "winner": record.winner,
    }
    with open(records_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(line, separators=(",", ":")) + "\n")


def _tally(record: MatchRecord, entrants: dict[str, Entrant]) -> None:
    blue, red = entrants[record.blue], entrants[record.red]
    blue.score_total += record.blue_score
    red.score_total += record.red_score
    winner = record.winner
    if winner is None:
        blue.ties += 1
        red.ties += 1
    elif winner == record.blue:
        blue.wins += 1
        red.losses += 1
    else:
        red.wins += 1
        blue.losses += 1


def run_round_robin(
    entrants: list[Entrant],
    games_per_pair: int = 20,
    grid_size: int = DEFAULT_GRID_SIZE,
    turns: int = DEFAULT_TURNS,
    rng=None,
    records_path: str | None = None,
) -> list[MatchRecord]:
    """Play every pairing games_per_pair times, alternating colors; update entrants in place."""
    rng = rng if rng is not None else random
    by_label = {e.label: e for e in entrants}
    records: list[MatchRecord] = []
    for first, second in combinations(entrants, 2):
        for i in range(games_per_pair):
            blue, red = (first, second) if i % 2 == 0 else (second, first)
            game = play_match(
                blue.bot_factory(player=Player.BLUE, rng=rng),
                red.bot_factory(player=Player.RED, rng=rng),
                grid_size=grid_size, turns=turns, rng=rng,
            )
            record = MatchRecord(blue=blue.label, red=red.label,
                                 blue_score=game.blue_score, red_score=game.red_score,
                                 turns_played=game.turn_number)
            _tally(record, by_label)
            records.append(record)
            if records_path is not None:
                _write_record(records_path, record, grid_size, turns)
    return records


def standings(entrants: list[Entrant]) -> list[Entrant]:
    """Most points first; average score breaks ties."""
    return sorted(
        entrants,
        key=lambda e: (-e.points, -(e.score_total / e.games if e.games else 0.0)),
    )


def print_standings(entrants: list[Entrant]) -> None:
    print("{:<8} {:>5} {:>5} {:>5} {:>7} {:>9}".format("Bot", "W", "L", "T", "Points", "Avg score"))
    for e in standings(entrants):
        avg = e.score_total / e.games if e.games else 0.0
        print("{:<8} {:>5} {:>5} {:>5} {:>7.1f} {:>9.2f}".format(
            e.label, e.wins, e.losses, e.ties, e.points, avg))


def default_field() -> list[Entrant]:
    return [
        Entrant(label="Random", bot_factory=Bot),
        Entrant(label="Easy", bot_factory=EasyBot),
        Entrant(label="Medium", bot_factory=MediumBot),
        Entrant(label="Hard", bot_factory=HardBot),
        Entrant(label="Expert", bot_factory=ExpertBot),
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Round-robin bot tournament")
    parser.add_argument("--games", type=int, default=20, metavar="N",
                        help="games per pairing (default: 20)")
    parser.add_argument("--grid", type=int, choices=GRID_SIZES, default=DEFAULT_GRID_SIZE,
                        help="board size (default: {})".format(DEFAULT_GRID_SIZE))
    parser.add_argument("--turns", type=int, default=DEFAULT_TURNS, metavar="N",
                        help="placement turns per game (default: {})".format(DEFAULT_TURNS))
    parser.add_argument("--seed", type=int, default=None, help="seed the random source")
    parser.add_argument("--records", metavar="FILE", default=None,
                        help="append per-game JSONL records to FILE")
    args = parser.parse_args()

    rng = random.Random(args.seed) if args.seed is not None else None
    entrants = default_field()
    run_round_robin(entrants, games_per_pair=args.games, grid_size=args.grid,
                    turns=args.turns, rng=rng, records_path=args.records)
    print_standings(entrants)


if __name__ == "__main__":
    main()
