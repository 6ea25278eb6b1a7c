"""CLI entrypoint for playing Bagh-Chal or Aadu Puli against the AI."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

from ai.base_ai import BaseAI
from ai.factory import build_ai
from engine.board import MOVE, PLACE, Board, Move
from engine.pieces import Difficulty, Side, TopologyKind
from engine.topology import Topology

HELP_TEXT = "Commands: place <pos> | move <from> <to> | help | quit  (grid pos: x,y  graph pos: node id)"


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play tigers and goats in the terminal.")
    parser.add_argument(
        "--board",
        type=str,
        default=TopologyKind.GRID.value,
        choices=[kind.value for kind in TopologyKind],
        help="grid: 5x5 Bagh-Chal, graph: Aadu Puli",
    )
    parser.add_argument(
        "--difficulty",
        type=str,
        default=Difficulty.MEDIUM.value,
        choices=[level.value for level in Difficulty],
        help="AI difficulty",
    )
    parser.add_argument(
        "--human-side",
        type=str,
        default=Side.GOAT.value,
        choices=[side.value for side in Side],
        help="Which side the human controls",
    )
    parser.add_argument("--seed", type=int, default=None, help="Deterministic AI seed")
    parser.add_argument("--depth", type=int, default=2, help="Search depth for the hard tiger")
    parser.add_argument("--watch", action="store_true", help="Watch the AI play both sides")
    parser.add_argument("--max-plies", type=int, default=300, help="Stop a watched game after this many plies")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args(argv)


def parse_position(token: str, topology: Topology) -> int:
    """Grid squares are written ``x,y``; graph nodes by id."""
    if topology.kind is TopologyKind.GRID:
        x, y = (int(part) for part in token.split(","))
        return topology.index_of((x, y))
    return topology.index_of(int(token))


def parse_user_move(command: str, topology: Topology) -> Optional[Move]:
    parts = command.strip().split()
    if not parts:
        return None

    op = parts[0].lower()
    if op == PLACE and len(parts) == 2:
        return Move(kind=PLACE, to_pos=parse_position(parts[1], topology))
    if op == MOVE and len(parts) == 3:
        return Move(
            kind=MOVE,
            from_pos=parse_position(parts[1], topology),
            to_pos=parse_position(parts[2], topology),
        )
    return None


def describe_move(move: Move, topology: Topology) -> str:
    if move.kind == PLACE:
        return f"place {topology.label(move.to_pos)}"
    return f"move {topology.label(move.from_pos)} -> {topology.label(move.to_pos)}"


def build_player(side: Side, difficulty: str, depth: int, seed: Optional[int]) -> BaseAI:
    if side is Side.TIGER and Difficulty(difficulty) is Difficulty.HARD:
        return build_ai(side, difficulty, seed=seed, depth=depth)
    return build_ai(side, difficulty, seed=seed)


def run_match(board: Board, players: Dict[Side, BaseAI], max_plies: int, verbose: bool = True) -> Optional[Side]:
    """Let two AIs play until someone wins or ``max_plies`` is reached."""
    logger = logging.getLogger("bagh_chal.cli")
    for ply in range(max_plies):
        winner = board.check_terminal()
        if winner is not None:
            logger.info("Game over after %d plies. Winner=%s", ply, winner.value)
            return winner
        mover = board.turn
        move = players[mover].choose_move(board)
        result = board.apply_move(move)
        if verbose:
            print(f"{mover.value}: {describe_move(move, board.topology)}")
            if result.captured is not None:
                print(f"  captured goat on {board.topology.label(result.captured)}")
            if result.skipped:
                print("  goats cannot move, turn passes back to the tigers")
    winner = board.check_terminal()
    if winner is None:
        logger.info("Stopped after %d plies without a winner.", max_plies)
    return winner


def run_cli(argv: Optional[list] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    logger = logging.getLogger("bagh_chal.cli")

    board = Board.new_game(args.board)
    topology = board.topology

    if args.watch:
        players = {
            Side.TIGER: build_player(Side.TIGER, args.difficulty, args.depth, args.seed),
            Side.GOAT: build_player(Side.GOAT, args.difficulty, args.depth, None if args.seed is None else args.seed + 97),
        }
        logger.info("Watching %s game at %s difficulty", topology.kind.value, args.difficulty)
        winner = run_match(board, players, args.max_plies)
        print(board.render_ascii())
        print(f"Winner: {winner.value if winner else 'none'}")
        return

    human_side = Side(args.human_side)
    ai = build_player(human_side.opponent(), args.difficulty, args.depth, args.seed)
    logger.info("Starting %s game. Human=%s AI=%s", topology.kind.value, human_side.value, human_side.opponent().value)
    print(HELP_TEXT)

    while True:
        winner = board.check_terminal()
        print()
        print(board.render_ascii())

        if winner is not None:
            print(f"Winner: {winner.value}")
            logger.info("Game over. Winner=%s", winner.value)
            break

        if board.turn is human_side:
            user_input = input("Your move> ").strip()
            if user_input.lower() in {"quit", "exit"}:
                print("Exiting game.")
                break
            if user_input.lower() == "help":
                print(HELP_TEXT)
                continue

            try:
                move = parse_user_move(user_input, topology)
            except ValueError:
                print("Invalid position.")
                continue
            if move is None:
                print("Invalid command format.")
                continue
            if move not in board.legal_moves():
                print("Illegal move for current state.")
                continue
            result = board.apply_move(move)
        else:
            move = ai.choose_move(board)
            result = board.apply_move(move)
            print(f"AI move: {describe_move(move, topology)}")

        if result.captured is not None:
            print(f"Goat captured on {topology.label(result.captured)}")
        if result.skipped:
            print("Goats cannot move, turn passes back to the tigers.")


if __name__ == "__main__":
    run_cli()
