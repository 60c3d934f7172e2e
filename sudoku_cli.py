# sudoku_cli.py
"""
Ligne de commande :
- generate : un puzzle (et sa solution) pour une difficulté
- solve    : complète une grille donnée en 81 caractères
- book     : livre PDF de puzzles + solutions
"""

from __future__ import annotations
import argparse
import random
import sys
from typing import List, Optional

from sudoku_core import (
    Uniqueness,
    canon_str,
    clone_grid,
    format_grid,
    parse_grid,
    solution_status,
    solve,
)
from sudoku_difficulty import PROFILES, generate_puzzle, get_profile
from sudoku_hash_db import HASH_DB_FILE


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sudoku-gen", description="Générateur de Sudoku à solution unique")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Génère un puzzle")
    gen.add_argument(
        "--difficulty",
        type=str,
        default="medium",
        choices=list(PROFILES),
        help="Profil de difficulté (default: medium)",
    )
    gen.add_argument("--seed", type=int, default=None, help="Graine aléatoire")
    gen.add_argument("--time-limit", type=float, default=None, help="Budget en secondes")
    gen.add_argument("--verbose", action="store_true", default=False, help="Affiche la progression")

    sol = sub.add_parser("solve", help="Complète une grille (81 caractères, 0 ou . = vide)")
    sol.add_argument("grid", type=str)

    book = sub.add_parser("book", help="Livre PDF puzzles + solutions")
    book.add_argument("--difficulty", type=str, default="easy", choices=list(PROFILES))
    book.add_argument("--count", type=int, default=20)
    book.add_argument("--output", type=str, default="sudoku_book.pdf")
    book.add_argument("--title", type=str, default="Sudoku")
    book.add_argument(
        "--hash-db",
        type=str,
        default=HASH_DB_FILE,
        help="Historique des puzzles déjà émis ('' pour l'ignorer)",
    )

    args = parser.parse_args(argv)
    if args.command == "solve":
        try:
            args.grid = parse_grid(args.grid)
        except ValueError as e:
            parser.error(str(e))
    return args


def _cmd_generate(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed)
    log = print if args.verbose else None
    result = generate_puzzle(args.difficulty, rng=rng, log=log, time_limit=args.time_limit)
    profile = get_profile(args.difficulty)
    if not profile.contains(result.clues):
        print(
            f"Attention : {result.clues} indices, hors de la fourchette "
            f"{profile.min_clues}–{profile.max_clues} (meilleur essai sur {result.attempts})"
        )
    print(f"Puzzle ({result.clues} indices) :")
    print(format_grid(result.puzzle))
    print()
    print("Solution :")
    print(format_grid(result.solved))
    print()
    print(canon_str(result.puzzle))
    return 0


def _cmd_solve(args: argparse.Namespace) -> int:
    grid = clone_grid(args.grid)
    status = solution_status(grid)
    if not solve(grid):
        print("Aucune solution.")
        return 1
    print(format_grid(grid))
    if status is Uniqueness.MULTIPLE:
        print("Attention : cette grille a plusieurs solutions.")
    return 0


def _cmd_book(args: argparse.Namespace) -> int:
    # matplotlib n'est importé que pour cette commande
    from sudoku_book import build_book_pdf

    _puzzles, _hashes, book_hash = build_book_pdf(
        args.difficulty,
        args.output,
        args.count,
        title=args.title,
        hash_db_path=args.hash_db or None,
    )
    print(f"PDF écrit : {args.output} (book hash {book_hash})")
    return 0


COMMANDS = {
    "generate": _cmd_generate,
    "solve": _cmd_solve,
    "book": _cmd_book,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
