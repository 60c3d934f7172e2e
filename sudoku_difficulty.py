# sudoku_difficulty.py
"""
Profils de difficulté (fourchettes d'indices) et génération de puzzles :
- retrait des cases (passe gloutonne + balayages de nettoyage)
- orchestrateur avec budget de tentatives
- hashes et génération multi-puzzles sans doublons
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Set, Tuple, Union
import hashlib
import random
import time

from sudoku_core import (
    Grid,
    LogFn,
    Pos,
    canon_str,
    clone_grid,
    count_clues,
    count_solutions,
    generate_full_grid,
)
from sudoku_hash_db import HASH_DB_FILE, load_global_hashes, save_global_hashes

MAX_ATTEMPTS = 50


def _no_log(_msg: str) -> None:
    pass


# ---------- Utils de hash / représentation ----------

def hash_grid_sha256(grid: Grid) -> str:
    """Hash hex (64) d'une grille basée sur canon_str (exact match)."""
    return hashlib.sha256(canon_str(grid).encode("utf-8")).hexdigest().lower()


def book_hash_v1(puzzles: List[Tuple[Grid, Grid]]) -> str:
    """
    Hash d'ensemble indépendant de l'ordre :
    - hash de chaque puzzle,
    - tri,
    - payload versionné,
    - re-hash.
    """
    per = sorted(hash_grid_sha256(p) for (p, _s) in puzzles)
    payload = "sudoku-book:v1\ncount=" + str(len(per)) + "\n" + "\n".join(per) + "\n"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest().lower()


# ====================================================
#   PROFILS
# ====================================================

@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    min_clues: int
    max_clues: int

    @property
    def max_removals(self) -> int:
        return 81 - self.min_clues

    def contains(self, clues: int) -> bool:
        return self.min_clues <= clues <= self.max_clues


EASY_PROFILE = DifficultyProfile("easy", 35, 38)
MEDIUM_PROFILE = DifficultyProfile("medium", 30, 35)
HARD_PROFILE = DifficultyProfile("hard", 25, 30)
MASTER_PROFILE = DifficultyProfile("master", 20, 25)
# 17 : aucun puzzle à solution unique n'existe en dessous
EXTREME_PROFILE = DifficultyProfile("extreme", 17, 19)

PROFILES = {
    p.name: p
    for p in (EASY_PROFILE, MEDIUM_PROFILE, HARD_PROFILE, MASTER_PROFILE, EXTREME_PROFILE)
}


def get_profile(difficulty: Union[str, DifficultyProfile]) -> DifficultyProfile:
    if isinstance(difficulty, DifficultyProfile):
        return difficulty
    profile = PROFILES.get(str(difficulty).strip().lower())
    if profile is None:
        raise ValueError(
            f"Difficulté inconnue : {difficulty!r} (valeurs possibles : {', '.join(PROFILES)})"
        )
    return profile


# ====================================================
#   RETRAIT DES CASES
# ====================================================

def _try_remove(puzzle: Grid, r: int, c: int, log: LogFn) -> bool:
    """Retire (r, c) si l'unicité est conservée ; sinon remet la valeur."""
    keep = puzzle[r][c]
    puzzle[r][c] = 0
    sols = count_solutions(clone_grid(puzzle))
    if sols != 1:
        puzzle[r][c] = keep
        log(f"Reverted ({r}, {c}) — {sols} solutions detected")
        return False
    log(f"Removed {keep} from ({r}, {c}) — unique solution preserved")
    return True


def cleanup_sweep(puzzle: Grid, budget: int, log: Optional[LogFn] = None) -> int:
    """
    Un balayage complet (ordre ligne par ligne) de toutes les cases encore
    remplies, contre l'état courant du puzzle. Retourne le nombre de cases
    retirées, au plus `budget`.
    """
    log = log or _no_log
    removed = 0
    for r in range(9):
        for c in range(9):
            if removed >= budget:
                return removed
            if puzzle[r][c] != 0 and _try_remove(puzzle, r, c, log):
                removed += 1
    return removed


def remove_cells(
    solved: Grid,
    difficulty: Union[str, DifficultyProfile],
    rng: Optional[random.Random] = None,
    log: Optional[LogFn] = None,
) -> Grid:
    """
    Creuse une grille résolue en puzzle à solution unique.

    1) Passe gloutonne dans un ordre aléatoire des 81 cases, arrêtée à
       max_removals retraits.
    2) Balayages de nettoyage de toutes les cases restantes jusqu'à un
       balayage sans retrait (point fixe) ou budget épuisé. Au point fixe
       chaque indice restant vient d'être testé nécessaire contre la
       configuration finale : le puzzle est irréductible.

    `solved` n'est jamais modifiée.
    """
    profile = get_profile(difficulty)
    rng = rng or random
    log = log or _no_log

    puzzle = clone_grid(solved)
    max_removals = profile.max_removals

    cells: List[Pos] = [(r, c) for r in range(9) for c in range(9)]
    rng.shuffle(cells)

    removed = 0
    for (r, c) in cells:
        if removed >= max_removals:
            break
        if puzzle[r][c] == 0:
            continue
        log(f"Trying to remove {puzzle[r][c]} from ({r}, {c})")
        if _try_remove(puzzle, r, c, log):
            removed += 1
    log(f"Greedy pass: removed {removed} cells, {count_clues(puzzle)} clues remain")

    sweep = 0
    while removed < max_removals:
        sweep += 1
        gained = cleanup_sweep(puzzle, max_removals - removed, log)
        removed += gained
        log(f"Cleanup sweep {sweep}: removed {gained} cells")
        if gained == 0:
            break

    return puzzle


# ====================================================
#   ORCHESTRATEUR
# ====================================================

class GeneratedPuzzle(NamedTuple):
    solved: Grid
    puzzle: Grid
    clues: int
    attempts: int


def generate_puzzle(
    difficulty: Union[str, DifficultyProfile],
    rng: Optional[random.Random] = None,
    log: Optional[LogFn] = None,
    max_attempts: int = MAX_ATTEMPTS,
    time_limit: Optional[float] = None,
) -> GeneratedPuzzle:
    """
    Grille complète neuve + creusage, répété jusqu'à tomber dans la
    fourchette d'indices du profil.

    Sans succès après `max_attempts` tentatives (ou `time_limit` secondes,
    vérifié entre deux tentatives), retourne la tentative dont le nombre
    d'indices est le plus proche de min_clues. Le nombre d'indices n'est
    donc garanti qu'au mieux.
    """
    profile = get_profile(difficulty)
    rng = rng or random
    log = log or _no_log
    deadline = None if time_limit is None else time.monotonic() + time_limit

    best: Optional[GeneratedPuzzle] = None
    for attempt in range(1, max(1, max_attempts) + 1):
        log(f"--- Attempt {attempt} ---")
        solved = generate_full_grid(rng, log)
        puzzle = remove_cells(solved, profile, rng, log)
        clues = count_clues(puzzle)
        log(f"Attempt {attempt} result: {clues} clues")

        result = GeneratedPuzzle(solved, puzzle, clues, attempt)
        if profile.contains(clues):
            log(f"Puzzle accepted with {clues} clues (target {profile.min_clues}–{profile.max_clues})")
            return result

        if best is None or abs(clues - profile.min_clues) < abs(best.clues - profile.min_clues):
            best = result

        if deadline is not None and time.monotonic() >= deadline:
            log(f"Time limit reached after {attempt} attempts")
            break
        log(f"Clues {clues} not in range {profile.min_clues}–{profile.max_clues}, retrying...")

    log(f"Using best result with {best.clues} clues")
    return best._replace(attempts=attempt)


# ====================================================
#   GÉNÉRATION MULTI-PUZZLES
# ====================================================

def generate_puzzles_for_profile(
    profile: Union[str, DifficultyProfile],
    count: int,
    rng: Optional[random.Random] = None,
    hash_db_path: Optional[str] = HASH_DB_FILE,
    max_tries_factor: int = 20,
    persist: bool = True,
) -> List[Tuple[Grid, Grid]]:
    """
    Génère `count` couples (puzzle, solution) pour un profil donné, en garantissant :
      - pas de doublons dans la génération courante
      - pas de doublons vis-à-vis de l'historique global
        (fichier hash_db_path, via sudoku_hash_db ; None pour l'ignorer).

    Avec persist=False l'historique est lu mais pas réécrit : à l'appelant
    d'enregistrer les hashes une fois les puzzles réellement utilisés.
    """
    profile = get_profile(profile)
    global_hashes: Set[str] = load_global_hashes(hash_db_path) if hash_db_path else set()

    puzzles: List[Tuple[Grid, Grid]] = []
    seen_local: Set[str] = set()
    tries = 0
    max_tries = count * max_tries_factor

    while len(puzzles) < count and tries < max_tries:
        if tries and tries % 10 == 0:
            print(f"[{profile.name}] tries={tries}, ok={len(puzzles)}/{count}")
        tries += 1

        result = generate_puzzle(profile, rng=rng)
        h = hash_grid_sha256(result.puzzle)

        # doublon local ou global
        if h in seen_local or h in global_hashes:
            continue

        seen_local.add(h)
        puzzles.append((result.puzzle, result.solved))

    if len(puzzles) < count:
        raise RuntimeError(f"Seulement {len(puzzles)} puzzles générés pour le profil {profile.name}")

    if hash_db_path and persist:
        save_global_hashes(global_hashes | seen_local, hash_db_path)
    return puzzles
