# sudoku_book.py
"""
Génération du PDF (puzzles + solutions) à partir des puzzles générés.

Deux modes :
- build_book_pdf(...) : un seul profil de difficulté pour tout le livre.
- build_book_pdf_with_ranges(...) : plages de numéros avec profils différents.
"""

from __future__ import annotations
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from sudoku_core import Grid
from sudoku_difficulty import (
    DifficultyProfile,
    book_hash_v1,
    generate_puzzles_for_profile,
    get_profile,
    hash_grid_sha256,
)
from sudoku_hash_db import HASH_DB_FILE, record_hashes

TRIM_W_DEFAULT = 6.0
TRIM_H_DEFAULT = 9.0

DEFAULT_GIVEN_COLOR = "black"
DEFAULT_ADDED_COLOR = "red"

BLOCK_SHADE_COLOR = "#e9e9e9"


def chunk(lst: Sequence, n: int) -> Iterator[Sequence]:
    for i in range(0, len(lst), n):
        yield lst[i : i + n]


# ---------- Dessin d'une grille ----------

def draw_grid_at(
    ax,
    grid: Grid,
    left: float,
    bottom: float,
    size: float,
    givens: Optional[Grid] = None,
    thin: bool = False,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
):
    """
    Dessine une grille 9x9. Si `givens` est fourni (puzzle d'origine), les
    chiffres absents du puzzle sont écrits en `added_color` et en gras.
    `thin` : traits fins pour les miniatures de solutions.
    """
    cell = size / 9.0
    block = size / 3.0
    frame_lw, block_lw, cell_lw = (1.25, 0.6, 0.25) if thin else (3, 2, 0.8)

    # Fond alterné par bloc 3x3
    for br in range(3):
        for bc in range(3):
            if (br + bc) % 2 == 0:
                ax.add_patch(
                    plt.Rectangle(
                        (left + bc * block, bottom + br * block),
                        block,
                        block,
                        facecolor=BLOCK_SHADE_COLOR,
                        edgecolor="none",
                        zorder=0,
                    )
                )

    ax.add_patch(
        plt.Rectangle((left, bottom), size, size, fill=False, linewidth=frame_lw, color="k", zorder=3)
    )

    for i in range(1, 9):
        lw = block_lw if i % 3 == 0 else cell_lw
        x = left + i * cell
        y = bottom + i * cell
        ax.plot([x, x], [bottom, bottom + size], linewidth=lw, color="k", zorder=2)
        ax.plot([left, left + size], [y, y], linewidth=lw, color="k", zorder=2)

    font_pts = cell * 0.5 * 72
    for r in range(9):
        for c in range(9):
            v = grid[r][c]
            if not v:
                continue
            added = givens is not None and givens[r][c] == 0
            ax.text(
                left + c * cell + cell / 2,
                bottom + (8 - r) * cell + cell * 0.47,
                str(v),
                ha="center",
                va="center",
                fontsize=font_pts,
                fontweight="bold" if added else "normal",
                color=added_color if added else given_color,
                zorder=4,
            )


def _page_figure(
    cells: List[Tuple[Grid, Optional[Grid], str]],
    trim_w: float,
    trim_h: float,
    rows: int,
    cols: int,
    title: str,
    page_num: int,
    thin: bool,
    given_color: str,
    added_color: str,
):
    """Une page : grilles disposées en rows x cols, légende sous chaque grille."""
    plt.rcParams["font.family"] = "DejaVu Sans"
    fig = plt.figure(figsize=(trim_w, trim_h))
    ax = plt.gca()
    ax.set_xlim(0, trim_w)
    ax.set_ylim(0, trim_h)
    ax.axis("off")

    margin_x, margin_y = (0.6, 0.95) if thin else (0.5, 0.8)
    cell_w = (trim_w - 2 * margin_x) / cols
    cell_h = (trim_h - 2 * margin_y) / rows
    size = min(cell_w, cell_h) * 0.90
    offset_x = (cell_w - size) / 2
    offset_y = (cell_h - size) / 2

    for idx, (grid, givens, caption) in enumerate(cells[: rows * cols]):
        r, c = divmod(idx, cols)
        left = margin_x + c * cell_w + offset_x
        bottom = margin_y + (rows - 1 - r) * cell_h + offset_y
        draw_grid_at(ax, grid, left, bottom, size, givens, thin, given_color, added_color)
        ax.text(left + size / 2, bottom - 0.1, caption, ha="center", va="top", fontsize=8)

    ax.text(trim_w / 2, trim_h - 0.3, title, ha="center", va="top", fontsize=12, fontweight="bold")
    ax.text(trim_w - 0.2, 0.2, str(page_num), ha="right", va="bottom", fontsize=10)
    return fig


def render_book(
    puzzles: List[Tuple[Grid, Grid]],
    output_path: str,
    title: str,
    puzzle_labels: Optional[List[str]] = None,
    trim_w: float = TRIM_W_DEFAULT,
    trim_h: float = TRIM_H_DEFAULT,
    puzzle_rows: int = 1,
    puzzle_cols: int = 1,
    solution_rows: int = 3,
    solution_cols: int = 3,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
) -> Tuple[List[str], str]:
    """
    Dessine les pages puzzles puis solutions dans un PDF, à partir de la
    liste (puzzle, solution). Retourne (per_puzzle_hashes, book_hash).

    La numérotation des puzzles est indépendante du numéro de page PDF.
    """
    puzzles_per_page = puzzle_rows * puzzle_cols
    solutions_per_page = solution_rows * solution_cols
    page_no = 1

    with PdfPages(output_path) as pdf:
        for page_i, page in enumerate(chunk(puzzles, puzzles_per_page)):
            start_idx = page_i * puzzles_per_page + 1
            cells = []
            for k, (puz, _sol) in enumerate(page):
                idx = start_idx + k
                label = (puzzle_labels[idx - 1] if puzzle_labels else "").strip()
                cells.append((puz, None, f"{idx} — {label}" if label else str(idx)))
            fig = _page_figure(
                cells, trim_w, trim_h, puzzle_rows, puzzle_cols, title, page_no,
                False, given_color, added_color,
            )
            pdf.savefig(fig, bbox_inches="tight", dpi=300)
            plt.close(fig)
            page_no += 1

        for page_i, page in enumerate(chunk(puzzles, solutions_per_page)):
            first = page_i * solutions_per_page + 1
            last = first + len(page) - 1
            cells = [(sol, puz, str(first + k)) for k, (puz, sol) in enumerate(page)]
            sol_title = f"Solutions {first}" if first == last else f"Solutions {first}–{last}"
            fig = _page_figure(
                cells, trim_w, trim_h, solution_rows, solution_cols, sol_title, page_no,
                True, given_color, added_color,
            )
            pdf.savefig(fig, bbox_inches="tight", dpi=300)
            plt.close(fig)
            page_no += 1

    per_puzzle_hashes = [hash_grid_sha256(p) for (p, _s) in puzzles]
    return per_puzzle_hashes, book_hash_v1(puzzles)


# ---------- Mode 1 : un seul profil sur tout le livre ----------

def build_book_pdf(
    profile: Union[str, DifficultyProfile],
    output_path: str,
    n_puzzles: int,
    title: str = "Sudoku",
    hash_db_path: Optional[str] = HASH_DB_FILE,
    **render_kwargs,
) -> Tuple[List[Tuple[Grid, Grid]], List[str], str]:
    """
    Génère puis dessine `n_puzzles` puzzles d'un même profil. Les hashes ne
    sont ajoutés à l'historique qu'une fois le PDF écrit.

    Retourne (puzzles, per_puzzle_hashes, book_hash).
    """
    profile = get_profile(profile)
    puzzles = generate_puzzles_for_profile(
        profile, n_puzzles, hash_db_path=hash_db_path, persist=False
    )
    per_puzzle_hashes, book_hash = render_book(
        puzzles,
        output_path,
        title=f"{title} — {profile.name}",
        puzzle_labels=[profile.name] * n_puzzles,
        **render_kwargs,
    )
    if hash_db_path:
        record_hashes(per_puzzle_hashes, hash_db_path)
    return puzzles, per_puzzle_hashes, book_hash


# ---------- Mode 2 : plages de numéros avec difficultés différentes ----------

def build_book_pdf_with_ranges(
    range_specs: List[Tuple[int, int, Union[str, DifficultyProfile]]],
    output_path: str,
    title: str = "Sudoku",
    hash_db_path: Optional[str] = HASH_DB_FILE,
    **render_kwargs,
) -> Tuple[List[Tuple[Grid, Grid]], List[str], str]:
    """
    Livre où des plages de numéros ont des difficultés différentes.

    range_specs = [
      (start_index, end_index, profile),   # bornes incluses, 1-based
      ...
    ]
    Les plages doivent se suivre sans trou ni chevauchement à partir de 1.
    """
    range_specs = sorted(range_specs, key=lambda x: x[0])

    puzzles: List[Tuple[Grid, Grid]] = []
    puzzle_labels: List[str] = []
    expected_start = 1

    for start_idx, end_idx, profile in range_specs:
        if end_idx < start_idx or start_idx != expected_start:
            raise ValueError(f"Plage invalide : {start_idx}–{end_idx}")
        profile = get_profile(profile)
        count = end_idx - start_idx + 1
        print(f"Génération {count} puzzle(s) pour {profile.name} (puzzles {start_idx}–{end_idx})")

        puzzles.extend(
            generate_puzzles_for_profile(profile, count, hash_db_path=hash_db_path, persist=False)
        )
        puzzle_labels.extend([profile.name] * count)
        expected_start = end_idx + 1

    per_puzzle_hashes, book_hash = render_book(
        puzzles,
        output_path,
        title=f"{title} — mix",
        puzzle_labels=puzzle_labels,
        **render_kwargs,
    )
    if hash_db_path:
        record_hashes(per_puzzle_hashes, hash_db_path)
    return puzzles, per_puzzle_hashes, book_hash
