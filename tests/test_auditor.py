import csv
import random

import pytest

from auditor import audit_ticket_file, format_table, load_tickets
from config import GenerationRequest
from ticket_engine import build_csv


def _write(path, tickets):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for ticket in tickets:
            writer.writerow([ticket])


def test_load_tickets_matches_csv_reader(tmp_path):
    path = tmp_path / "tickets.csv"
    request = GenerationRequest(alphabet="AB,\"'#0", file_path=str(path), token_count=40, token_length=3)
    build_csv(request, rng=random.Random(11))

    with open(path, newline="", encoding="utf-8") as f:
        expected = [row[0] for row in csv.reader(f)]
    assert load_tickets(str(path)) == expected


def test_load_tickets_keeps_na_like_strings(tmp_path):
    path = tmp_path / "na.csv"
    _write(path, ["NA", "null", "0012", "NaN"])
    assert load_tickets(str(path)) == ["NA", "null", "0012", "NaN"]


def test_load_tickets_empty_and_missing(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert load_tickets(str(empty)) == []
    with pytest.raises(FileNotFoundError):
        load_tickets(str(tmp_path / "missing.csv"))


def test_audit_clean_generated_file(tmp_path):
    path = tmp_path / "clean.csv"
    request = GenerationRequest(alphabet="XYZ123", file_path=str(path), token_count=25, token_length=4)
    build_csv(request, rng=random.Random(2))

    result = audit_ticket_file(str(path), alphabet="XYZ123", expected_length=4, expected_count=25)
    assert result.row_count == 25
    assert result.ok
    assert result.duplicates == []


def test_audit_flags_problems(tmp_path):
    path = tmp_path / "dirty.csv"
    _write(path, ["ABCD", "ABCD", "ABC", "AB#D", "DCBA"])

    result = audit_ticket_file(str(path), alphabet="ABCD", expected_length=4, expected_count=6)
    assert result.row_count == 5
    assert result.duplicates == ["ABCD"]
    assert result.wrong_length_rows == [3]
    assert result.foreign_char_rows == [4]
    assert not result.count_ok
    assert not result.ok


def test_audit_without_expectations_only_checks_duplicates(tmp_path):
    path = tmp_path / "plain.csv"
    _write(path, ["a", "bb", "ccc"])
    result = audit_ticket_file(str(path))
    assert result.ok
    assert result.wrong_length_rows == [] and result.foreign_char_rows == []


def test_format_table():
    table = format_table([("Tickets", "3"), ("Result", "OK")])
    lines = table.splitlines()
    assert lines[0] == lines[2] == lines[-1]
    assert "| Tickets |     3 |" in lines
    assert "| Result  |    OK |" in lines
