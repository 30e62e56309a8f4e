import threading

import ticket_engine
from config import GenerationRequest, SUCCESS_MESSAGE, TicketFormState
from ticket_engine import TicketRunner


def _request(tmp_path, name="tickets.csv", **overrides):
    values = dict(alphabet="ABCDEFGH", file_path=str(tmp_path / name), token_count=10, token_length=5)
    values.update(overrides)
    return GenerationRequest(**values)


def test_run_completes_with_single_message(tmp_path):
    runner = TicketRunner(seed=1)
    assert runner.start(_request(tmp_path))
    assert runner.poll(timeout=10) == SUCCESS_MESSAGE
    assert not runner.is_processing
    assert runner.last_message == SUCCESS_MESSAGE
    assert runner.poll() is None
    assert len((tmp_path / "tickets.csv").read_text(encoding="utf-8").splitlines()) == 10


def test_invalid_request_is_refused_silently(tmp_path):
    runner = TicketRunner()
    assert not runner.start(None)
    assert not runner.submit(TicketFormState(capital_letters=True, ticket_count=5, ticket_length=0, file_path=str(tmp_path / "x.csv")))
    assert not runner.submit(TicketFormState(ticket_count=5, ticket_length=5, file_path=str(tmp_path / "x.csv")))
    assert not runner.submit(TicketFormState(numbers=True, ticket_count=5, ticket_length=5))
    assert not runner.is_processing
    assert runner.poll(timeout=0.2) is None
    assert not (tmp_path / "x.csv").exists()


def test_only_one_run_in_flight(tmp_path, monkeypatch):
    release = threading.Event()
    started = threading.Event()

    def slow_generation(request, rng=None, max_attempts=None):
        started.set()
        release.wait(10)
        return SUCCESS_MESSAGE

    monkeypatch.setattr(ticket_engine, "run_generation", slow_generation)
    runner = TicketRunner()

    assert runner.start(_request(tmp_path, "first.csv"))
    assert started.wait(10)
    assert runner.is_processing
    assert not runner.start(_request(tmp_path, "second.csv"))
    assert runner.poll() is None

    release.set()
    assert runner.poll(timeout=10) == SUCCESS_MESSAGE
    assert not runner.is_processing
    assert runner.start(_request(tmp_path, "third.csv"))
    assert runner.poll(timeout=10) == SUCCESS_MESSAGE


def test_failure_is_delivered_as_message(tmp_path):
    runner = TicketRunner()
    assert runner.start(_request(tmp_path, alphabet="AB", token_count=3, token_length=1))
    message = runner.poll(timeout=10)
    assert message.startswith("Exhausted ticket space")
    assert not runner.is_processing


def test_worker_crash_still_reports(tmp_path, monkeypatch):
    def broken(request, rng=None, max_attempts=None):
        raise ValueError("bad state")

    monkeypatch.setattr(ticket_engine, "run_generation", broken)
    runner = TicketRunner()
    assert runner.start(_request(tmp_path))
    assert runner.poll(timeout=10) == "An unexpected error occurred: bad state"


def test_seeded_runs_are_reproducible(tmp_path):
    runner = TicketRunner(seed=123)
    runner.start(_request(tmp_path, "a.csv"))
    runner.poll(timeout=10)
    runner.start(_request(tmp_path, "b.csv"))
    runner.poll(timeout=10)
    assert (tmp_path / "a.csv").read_text(encoding="utf-8") == (tmp_path / "b.csv").read_text(encoding="utf-8")


def test_submit_uses_form_state(tmp_path):
    form = TicketFormState(capital_letters=True, numbers=True, rejected_chars="AEIOU0",
                           ticket_count=3, ticket_length=4, file_path=str(tmp_path / "form.csv"))
    runner = TicketRunner()
    assert runner.submit(form)
    assert runner.poll(timeout=10) == SUCCESS_MESSAGE
    rows = (tmp_path / "form.csv").read_text(encoding="utf-8").splitlines()
    assert len(rows) == 3
    assert all(len(row) == 4 and not set(row) & set("AEIOU0") for row in rows)
