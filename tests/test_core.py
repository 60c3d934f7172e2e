"""Tests du moteur : validation, solveur, comptage, grille complète."""

import random

import pytest

from sudoku_core import (
    Uniqueness,
    canon_str,
    clone_grid,
    count_clues,
    count_solutions,
    empty_grid,
    find_conflicts,
    format_grid,
    generate_full_grid,
    grid_candidates,
    has_unique_solution,
    is_complete,
    is_solved,
    is_valid,
    parse_grid,
    solution_status,
    solve,
)


class TestIsValid:
    def test_rejects_digit_in_row(self, puzzle):
        # 7 est déjà en (0, 4)
        assert not is_valid(puzzle, 0, 2, 7)

    def test_rejects_digit_in_column(self, puzzle):
        # 8 est déjà en (2, 2)
        assert not is_valid(puzzle, 0, 2, 8)

    def test_rejects_digit_in_box(self, puzzle):
        # 9 est déjà en (2, 1), même bloc que (0, 2)
        assert not is_valid(puzzle, 0, 2, 9)

    def test_accepts_legal_digit(self, puzzle):
        assert is_valid(puzzle, 0, 2, 4)

    def test_is_read_only(self, puzzle):
        before = clone_grid(puzzle)
        is_valid(puzzle, 0, 2, 4)
        assert puzzle == before


class TestSolve:
    def test_solves_classic_puzzle(self, puzzle, solution):
        grid = clone_grid(puzzle)
        assert solve(grid)
        assert grid == solution
        assert is_complete(grid)

    def test_empty_grid_gives_first_lexicographic_completion(self):
        grid = empty_grid()
        assert solve(grid)
        assert is_complete(grid)
        assert grid[0] == list(range(1, 10))

    def test_already_complete_grid(self, solution):
        grid = clone_grid(solution)
        assert solve(grid)
        assert grid == solution

    def test_conflicting_givens_fail_without_touching_grid(self, puzzle):
        grid = clone_grid(puzzle)
        grid[0][2] = 5  # 5 déjà dans la ligne 0
        before = clone_grid(grid)
        assert not solve(grid)
        assert grid == before

    def test_complete_grid_with_conflict_is_not_solved(self, solution):
        grid = clone_grid(solution)
        grid[0][0], grid[0][1] = grid[0][1], grid[0][1]
        assert not solve(grid)

    def test_dead_end_restores_grid(self, puzzle):
        # 1 est légal en (0, 2) mais la solution unique y place 4
        grid = clone_grid(puzzle)
        grid[0][2] = 1
        assert not find_conflicts(grid)
        before = clone_grid(grid)
        assert not solve(grid)
        assert grid == before

    def test_immediately_blocked_cell(self):
        grid = empty_grid()
        grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
        grid[1][8] = 9
        before = clone_grid(grid)
        assert not solve(grid)
        assert grid == before


class TestCountSolutions:
    def test_unique_puzzle(self, puzzle):
        assert count_solutions(clone_grid(puzzle)) == 1

    def test_complete_grid_counts_one(self, solution):
        assert count_solutions(clone_grid(solution)) == 1

    def test_empty_grid_is_capped(self):
        assert count_solutions(empty_grid()) == 2

    def test_custom_limit(self):
        assert count_solutions(empty_grid(), limit=5) == 5

    def test_no_solution(self, puzzle):
        grid = clone_grid(puzzle)
        grid[0][2] = 1
        assert count_solutions(grid) == 0

    def test_conflicting_givens(self, puzzle):
        grid = clone_grid(puzzle)
        grid[0][2] = 5
        assert count_solutions(grid) == 0

    def test_single_hole(self, solution):
        grid = clone_grid(solution)
        grid[4][4] = 0
        assert count_solutions(grid) == 1

    def test_three_valued_status(self, puzzle):
        assert solution_status(puzzle) is Uniqueness.UNIQUE
        assert solution_status(empty_grid()) is Uniqueness.MULTIPLE
        broken = clone_grid(puzzle)
        broken[0][2] = 1
        assert solution_status(broken) is Uniqueness.NONE

    def test_status_does_not_touch_input(self, puzzle):
        before = clone_grid(puzzle)
        assert has_unique_solution(puzzle)
        assert puzzle == before


class TestGenerateFullGrid:
    def test_grid_is_complete(self, rng):
        for _ in range(5):
            grid = generate_full_grid(rng)
            assert is_complete(grid)
            assert count_clues(grid) == 81

    def test_seeded_rng_is_reproducible(self):
        assert generate_full_grid(random.Random(7)) == generate_full_grid(random.Random(7))

    def test_grids_vary(self):
        assert generate_full_grid(random.Random(1)) != generate_full_grid(random.Random(2))

    def test_log_sink_receives_placements(self, rng):
        messages = []
        generate_full_grid(rng, messages.append)
        placed = [m for m in messages if m.startswith("Placed")]
        backtracked = [m for m in messages if m.startswith("Backtracked")]
        assert len(placed) - len(backtracked) == 81


class TestConflicts:
    def test_valid_grid_has_none(self, puzzle, solution):
        assert find_conflicts(puzzle) == set()
        assert find_conflicts(solution) == set()

    def test_row_conflict(self, puzzle):
        grid = clone_grid(puzzle)
        grid[0][8] = 7
        assert find_conflicts(grid) == {(0, 4), (0, 8)}

    def test_givens_only_conflicts_are_ignored(self, puzzle):
        grid = clone_grid(puzzle)
        givens = clone_grid(puzzle)
        givens[0][8] = grid[0][8] = 7
        assert find_conflicts(grid, givens) == set()
        assert find_conflicts(grid) == {(0, 4), (0, 8)}

    def test_is_solved(self, puzzle, solution):
        assert is_solved(solution, solution)
        assert not is_solved(puzzle, solution)


class TestFormat:
    def test_canon_and_parse(self, puzzle):
        text = canon_str(puzzle)
        assert len(text) == 81
        assert parse_grid(text) == puzzle
        assert parse_grid(text.replace("0", ".")) == puzzle

    def test_parse_ignores_whitespace(self, puzzle):
        assert parse_grid(format_grid(puzzle).replace("|", "").replace("-", "").replace("+", "")) == puzzle

    def test_parse_rejects_bad_length(self):
        with pytest.raises(ValueError):
            parse_grid("123")

    def test_parse_rejects_bad_char(self, puzzle):
        text = "x" + canon_str(puzzle)[1:]
        with pytest.raises(ValueError):
            parse_grid(text)

    def test_format_grid(self, puzzle):
        lines = format_grid(puzzle).splitlines()
        assert len(lines) == 11
        assert lines[0] == "5 3 . | . 7 . | . . ."
        assert lines[3] == "------+-------+------"

    def test_candidates(self, puzzle):
        cands = grid_candidates(puzzle)
        assert len(cands) == 81 - 30
        assert cands[(0, 2)] == {1, 2, 4}
