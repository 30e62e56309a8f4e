import csv

import cli
from config import SUCCESS_MESSAGE


def _rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return [row[0] for row in csv.reader(f)]


def test_wants_cli():
    assert not cli.wants_cli([])
    assert cli.wants_cli(["--count", "3"])


def test_generate_from_command_line(tmp_path, capsys):
    out = tmp_path / "tickets.csv"
    code = cli.main(["-C", "-n", "-x", "AEIOU0", "-c", "3", "-L", "4", "-o", str(out), "--seed", "5"])
    assert code == 0

    tickets = _rows(out)
    assert len(tickets) == 3 and len(set(tickets)) == 3
    assert all(len(t) == 4 and not set(t) & set("AEIOU0") for t in tickets)
    assert SUCCESS_MESSAGE in capsys.readouterr().out


def test_seed_makes_output_reproducible(tmp_path):
    args = ["--lowercase", "--count", "15", "--length", "6", "--seed", "99"]
    cli.main(args + ["--output", str(tmp_path / "a.csv")])
    cli.main(args + ["--output", str(tmp_path / "b.csv")])
    assert _rows(tmp_path / "a.csv") == _rows(tmp_path / "b.csv")


def test_invalid_request_is_a_silent_no_op(tmp_path, capsys):
    out = tmp_path / "never.csv"
    assert cli.main(["--capitals", "--count", "0", "--length", "4", "--output", str(out)]) == 0
    assert cli.main(["--capitals", "--count", "3", "--length", "4"]) == 0
    assert cli.main(["--count", "3", "--length", "4", "--output", str(out)]) == 0
    assert cli.main(["--numbers", "--exclude", "0123456789", "--count", "3", "--length", "4", "--output", str(out)]) == 0
    assert not out.exists()
    assert capsys.readouterr().out == ""


def test_exhausted_space_reports_failure(tmp_path, capsys):
    out = tmp_path / "small.csv"
    code = cli.main(["--numbers", "--exclude", "23456789", "--count", "3", "--length", "1", "--output", str(out)])
    assert code == 1
    assert not out.exists()
    assert "Exhausted ticket space" in capsys.readouterr().out


def test_audit_command(tmp_path, capsys):
    out = tmp_path / "audit.csv"
    cli.main(["--capitals", "--count", "20", "--length", "5", "--output", str(out)])
    capsys.readouterr()

    assert cli.main(["--audit", str(out), "--capitals", "--length", "5", "--count", "20"]) == 0
    report = capsys.readouterr().out
    assert "Auditing:" in report
    assert "OK" in report


def test_audit_detects_duplicates(tmp_path, capsys):
    path = tmp_path / "dupes.csv"
    path.write_text("AAAA\r\nBBBB\r\nAAAA\r\n", encoding="utf-8")
    assert cli.main(["--audit", str(path)]) == 1
    report = capsys.readouterr().out
    assert "duplicate: AAAA" in report
    assert "FAILED" in report


def test_audit_missing_file(tmp_path, capsys):
    assert cli.main(["--audit", str(tmp_path / "missing.csv")]) == 1
    assert "File not found" in capsys.readouterr().out
