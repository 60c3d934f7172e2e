# sudoku_core.py
"""
Moteur Sudoku commun :
- grille 9x9, UNITS (lignes, colonnes, blocs)
- validation d'un chiffre dans une case
- solveur backtracking (ordre croissant, déterministe)
- comptage des solutions plafonné / unicité
- génération d'une grille complète aléatoire
- conflits, candidats, format texte
"""

from __future__ import annotations
import enum
import random
from typing import Callable, Dict, List, Optional, Set, Tuple

Grid = List[List[int]]
Pos = Tuple[int, int]
LogFn = Callable[[str], None]

DIGITS = range(1, 10)

# ---------- UNITS communs ----------

UNITS: List[List[Pos]] = []

# Lignes
for r in range(9):
    UNITS.append([(r, c) for c in range(9)])
# Colonnes
for c in range(9):
    UNITS.append([(r, c) for r in range(9)])
# Blocs 3x3
for br in range(0, 9, 3):
    for bc in range(0, 9, 3):
        UNITS.append([(br + dr, bc + dc) for dr in range(3) for dc in range(3)])


def _no_log(_msg: str) -> None:
    pass


def empty_grid() -> Grid:
    return [[0] * 9 for _ in range(9)]


def clone_grid(grid: Grid) -> Grid:
    """Copie indépendante : toute recherche destructive travaille sur une copie."""
    return [row[:] for row in grid]


def count_clues(grid: Grid) -> int:
    return sum(1 for row in grid for v in row if v)


# ---------- Validation ----------

def is_valid(grid: Grid, row: int, col: int, digit: int) -> bool:
    """
    True si `digit` n'apparaît ni dans la ligne, ni dans la colonne,
    ni dans le bloc 3x3 de (row, col). Lecture seule.
    """
    if any(grid[row][x] == digit for x in range(9)):
        return False
    if any(grid[x][col] == digit for x in range(9)):
        return False
    br, bc = 3 * (row // 3), 3 * (col // 3)
    return all(
        grid[rr][cc] != digit
        for rr in range(br, br + 3)
        for cc in range(bc, bc + 3)
    )


def find_conflicts(grid: Grid, givens: Optional[Grid] = None) -> Set[Pos]:
    """
    Cases remplies qui partagent leur chiffre avec une autre case
    de leur ligne, colonne ou bloc.

    Si `givens` est fourni (le puzzle de départ), seuls les conflits
    impliquant au moins une case saisie (non donnée) sont retournés.
    """
    conflicts: Set[Pos] = set()
    for unit in UNITS:
        by_val: Dict[int, List[Pos]] = {}
        for (r, c) in unit:
            v = grid[r][c]
            if v:
                by_val.setdefault(v, []).append((r, c))
        for cells in by_val.values():
            if len(cells) < 2:
                continue
            if givens is not None and all(givens[r][c] != 0 for (r, c) in cells):
                continue
            conflicts.update(cells)
    return conflicts


def is_complete(grid: Grid) -> bool:
    """Chaque ligne, colonne et bloc est une permutation de 1..9."""
    full = set(DIGITS)
    return all({grid[r][c] for (r, c) in unit} == full for unit in UNITS)


def is_solved(grid: Grid, solution: Grid) -> bool:
    return all(grid[r][c] == solution[r][c] for r in range(9) for c in range(9))


def grid_candidates(grid: Grid) -> Dict[Pos, Set[int]]:
    """Retourne un dict {(r,c): {candidats}} pour les cellules vides."""
    cands: Dict[Pos, Set[int]] = {}
    for r in range(9):
        for c in range(9):
            if grid[r][c] == 0:
                cands[(r, c)] = {v for v in DIGITS if is_valid(grid, r, c, v)}
    return cands


# ---------- BITSETS ligne / colonne / bloc ----------

FULL_MASK = (1 << 9) - 1  # 9 bits


def _box_idx(r: int, c: int) -> int:
    return (r // 3) * 3 + (c // 3)


def _init_masks_bitset(grid: Grid):
    """
    Masques ligne/colonne/bloc + cases vides en ordre ligne par ligne.
    None si deux indices sont déjà en conflit.
    """
    row_used = [0] * 9
    col_used = [0] * 9
    box_used = [0] * 9
    empties = []
    for r in range(9):
        for c in range(9):
            v = grid[r][c]
            if v:
                b = 1 << (v - 1)
                bidx = _box_idx(r, c)
                if (row_used[r] | col_used[c] | box_used[bidx]) & b:
                    return None
                row_used[r] |= b
                col_used[c] |= b
                box_used[bidx] |= b
            else:
                empties.append((r, c))
    return row_used, col_used, box_used, empties


# ---------- Solveur backtracking ----------

def solve(grid: Grid) -> bool:
    """
    Complète `grid` en place : première case vide en ordre ligne par ligne,
    chiffres 1..9 croissants. Déterministe.

    Retourne False si aucune complétion n'existe ; dans ce cas la grille
    est laissée exactement dans son état d'appel. Des indices déjà en
    conflit donnent False sans toucher à la grille.
    """
    masks = _init_masks_bitset(grid)
    if masks is None:
        return False
    row_used, col_used, box_used, empties = masks

    def backtrack(k: int) -> bool:
        if k == len(empties):
            return True
        r, c = empties[k]
        bidx = _box_idx(r, c)
        # même test que is_valid, sur les masques
        used = row_used[r] | col_used[c] | box_used[bidx]
        for v in DIGITS:
            b = 1 << (v - 1)
            if used & b:
                continue
            grid[r][c] = v
            row_used[r] |= b
            col_used[c] |= b
            box_used[bidx] |= b
            if backtrack(k + 1):
                return True
            row_used[r] ^= b
            col_used[c] ^= b
            box_used[bidx] ^= b
            grid[r][c] = 0
        return False

    return backtrack(0)


# ---------- Comptage / unicité ----------

def count_solutions(grid: Grid, limit: int = 2) -> int:
    """
    Compte les complétions de la grille, s'arrête dès qu'on atteint `limit`.

    Le résultat est exact pour 0 et 1 ; au-delà c'est un plafond (>= 2 avec
    la limite par défaut), jamais un cardinal exact. L'appelant passe une
    copie jetable.
    """
    masks = _init_masks_bitset(grid)
    if masks is None:
        return 0
    row_used, col_used, box_used, empties = masks
    sols = 0

    def allowed(r: int, c: int) -> int:
        return FULL_MASK ^ (row_used[r] | col_used[c] | box_used[_box_idx(r, c)])

    def dfs(remaining: int) -> None:
        nonlocal sols
        if remaining == 0:
            sols += 1
            return

        # case la plus contrainte (MRV), à égalité la première en ordre ligne
        best, best_mask, best_n = 0, 0, 10
        for i in range(remaining):
            r, c = empties[i]
            m = allowed(r, c)
            n = m.bit_count()
            if n < best_n:
                best, best_mask, best_n = i, m, n
                if n == 0:
                    return
        last = remaining - 1
        empties[best], empties[last] = empties[last], empties[best]
        r, c = empties[last]
        bidx = _box_idx(r, c)

        x = best_mask
        while x:
            lsb = x & -x
            x ^= lsb
            grid[r][c] = lsb.bit_length()
            row_used[r] |= lsb
            col_used[c] |= lsb
            box_used[bidx] |= lsb
            dfs(last)
            row_used[r] ^= lsb
            col_used[c] ^= lsb
            box_used[bidx] ^= lsb
            grid[r][c] = 0
            if sols >= limit:
                break

        empties[best], empties[last] = empties[last], empties[best]

    dfs(len(empties))
    return sols


class Uniqueness(enum.Enum):
    NONE = 0
    UNIQUE = 1
    MULTIPLE = 2


def solution_status(grid: Grid) -> Uniqueness:
    """Aucune / exactement une / plusieurs solutions (travaille sur une copie)."""
    n = count_solutions(clone_grid(grid), limit=2)
    return Uniqueness(min(n, 2))


def has_unique_solution(grid: Grid) -> bool:
    return solution_status(grid) is Uniqueness.UNIQUE


# ---------- Génération d'une grille complète ----------

def generate_full_grid(
    rng: Optional[random.Random] = None,
    log: Optional[LogFn] = None,
) -> Grid:
    """Génère une grille complète valide (9x9), différente à chaque appel."""
    rng = rng or random
    log = log or _no_log
    grid: Grid = empty_grid()

    def backtrack(r=0, c=0) -> bool:
        if r == 9:
            return True
        nr, nc = (r, c + 1) if c < 8 else (r + 1, 0)
        vals = list(DIGITS)
        rng.shuffle(vals)
        for v in vals:
            if is_valid(grid, r, c, v):
                grid[r][c] = v
                log(f"Placed {v} at ({r}, {c})")
                if backtrack(nr, nc):
                    return True
                grid[r][c] = 0
                log(f"Backtracked at ({r}, {c})")
        return False

    backtrack()
    return grid


# ---------- Format texte ----------

def canon_str(grid: Grid) -> str:
    """Chaîne canonique pour une grille (ligne par ligne)."""
    return "".join("".join(str(v) for v in row) for row in grid)


def parse_grid(text: str) -> Grid:
    """
    Inverse de canon_str : 81 caractères, '0' ou '.' pour une case vide.
    Les espaces et retours à la ligne sont ignorés.
    """
    chars = [ch for ch in text if not ch.isspace()]
    if len(chars) != 81:
        raise ValueError(f"Grille invalide : 81 cases attendues, {len(chars)} reçues")
    values = []
    for ch in chars:
        if ch == ".":
            values.append(0)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise ValueError(f"Caractère invalide dans la grille : {ch!r}")
    return [values[i : i + 9] for i in range(0, 81, 9)]


def format_grid(grid: Grid) -> str:
    """Affichage 9x9 avec '.' pour les cases vides et séparateurs de blocs."""
    lines = []
    for r, row in enumerate(grid):
        if r and r % 3 == 0:
            lines.append("------+-------+------")
        parts = []
        for c, v in enumerate(row):
            if c and c % 3 == 0:
                parts.append("|")
            parts.append(str(v) if v else ".")
        lines.append(" ".join(parts))
    return "\n".join(lines)
