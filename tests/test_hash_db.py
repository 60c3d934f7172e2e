"""Tests de l'historique global des hashes."""

from sudoku_hash_db import load_global_hashes, record_hashes, save_global_hashes


def test_missing_file_is_empty(tmp_path):
    assert load_global_hashes(str(tmp_path / "absent.txt")) == set()


def test_save_then_load(tmp_path):
    path = str(tmp_path / "hashes.txt")
    save_global_hashes({"bb", "aa"}, path)
    assert (tmp_path / "hashes.txt").read_text(encoding="utf-8") == "aa\nbb\n"
    assert load_global_hashes(path) == {"aa", "bb"}
    assert not (tmp_path / "hashes.txt.tmp").exists()


def test_blank_lines_are_skipped(tmp_path):
    path = tmp_path / "hashes.txt"
    path.write_text("AA\n\n  \nbb\n", encoding="utf-8")
    assert load_global_hashes(str(path)) == {"aa", "bb"}


def test_record_merges(tmp_path):
    path = str(tmp_path / "hashes.txt")
    save_global_hashes({"aa"}, path)
    assert record_hashes(["BB", "aa"], path) == {"aa", "bb"}
    assert load_global_hashes(path) == {"aa", "bb"}
