import os

import pytest

from roomtrack import file_utils
from roomtrack.file_utils import generate_output_filename


def test_generate_output_filename_replaces_extension(tmp_path):
    input_file = str(tmp_path / "walk.csv")
    output = generate_output_filename(input_file, "absolute", ".txt")
    assert output == str(tmp_path / "walk_absolute.txt")
    assert os.path.exists(output)


def test_generate_output_filename_without_extension(tmp_path):
    input_file = str(tmp_path / "walk")
    output = generate_output_filename(input_file, "map", ".html")
    assert output == str(tmp_path / "walk_map.html")


def test_generate_output_filename_numbers_existing(tmp_path):
    input_file = str(tmp_path / "walk.csv")
    first = generate_output_filename(input_file, "relative", ".txt")
    second = generate_output_filename(input_file, "relative", ".txt")
    third = generate_output_filename(input_file, "relative", ".txt")
    assert first == str(tmp_path / "walk_relative.txt")
    assert second == str(tmp_path / "walk_relative (1).txt")
    assert third == str(tmp_path / "walk_relative (2).txt")


def test_generate_output_filename_exhausted(tmp_path, monkeypatch):
    monkeypatch.setattr(file_utils, "MAX_FILENAME_ATTEMPTS", 2)
    input_file = str(tmp_path / "walk.csv")
    for _ in range(3):
        generate_output_filename(input_file, "absolute", ".txt")
    with pytest.raises(RuntimeError):
        generate_output_filename(input_file, "absolute", ".txt")


def test_generate_output_filename_missing_directory(tmp_path):
    input_file = str(tmp_path / "no_such_dir" / "walk.csv")
    with pytest.raises(ValueError):
        generate_output_filename(input_file, "absolute", ".txt")
