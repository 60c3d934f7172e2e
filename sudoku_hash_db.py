# sudoku_hash_db.py
"""
Historique global des puzzles déjà émis (toutes difficultés confondues),
pour ne jamais redonner deux fois le même puzzle.

Format : un hash SHA256 par ligne.
"""

import os
from typing import Iterable, Set

HASH_DB_FILE = "puzzle_hashes_all.txt"


def load_global_hashes(path: str = HASH_DB_FILE) -> Set[str]:
    hashes = set()
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                h = line.strip().lower()
                if h:
                    hashes.add(h)
    return hashes


def save_global_hashes(hashes: Iterable[str], path: str = HASH_DB_FILE) -> None:
    # écriture atomique : un fichier à moitié écrit perdrait l'historique
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        for h in sorted(set(hashes)):
            f.write(h + "\n")
    os.replace(tmp_path, path)


def record_hashes(new_hashes: Iterable[str], path: str = HASH_DB_FILE) -> Set[str]:
    """Ajoute des hashes à l'historique et retourne l'ensemble mis à jour."""
    hashes = load_global_hashes(path)
    hashes.update(h.lower() for h in new_hashes)
    save_global_hashes(hashes, path)
    return hashes
