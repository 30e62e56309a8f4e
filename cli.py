"""
Headless command line for the ticket randomizer.

Examples:
  python main.py --capitals --numbers --exclude AEIOU0 --count 100 --length 8 --output tickets.csv
  python main.py --audit tickets.csv --capitals --numbers --length 8
"""

import argparse
import logging
import random
import sys
from datetime import datetime
from typing import List, Optional

from config import APP_TITLE, APP_VERSION, SUCCESS_MESSAGE, TicketFormState
from auditor import audit_ticket_file, format_table
from ticket_engine import run_generation
from ticket_utils import build_request, character_set_for


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} - GUI or Headless CLI mode")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--capitals", "-C", action="store_true", help="Include capital letters (A-Z)")
    parser.add_argument("--lowercase", "-l", action="store_true", help="Include lowercase letters (a-z)")
    parser.add_argument("--numbers", "-n", action="store_true", help="Include numbers (0-9)")
    parser.add_argument("--specials", "-s", action="store_true", help="Include special characters")
    parser.add_argument("--exclude", "-x", default="", help="Characters to remove from the character set")
    parser.add_argument("--count", "-c", type=int, default=0, help="Number of tickets to generate")
    parser.add_argument("--length", "-L", type=int, default=0, help="Length of each ticket")
    parser.add_argument("--output", "-o", help="Destination CSV path")
    parser.add_argument("--seed", type=int, default=None, help="Seed the random source for a reproducible run")
    parser.add_argument("--audit", metavar="CSV", help="Audit an existing ticket CSV instead of generating")
    return parser


def wants_cli(argv: List[str]) -> bool:
    """Any argument at all selects headless mode; none launches the GUI."""
    return len(argv) > 0


def form_from_args(args: argparse.Namespace) -> TicketFormState:
    return TicketFormState(
        capital_letters=args.capitals,
        lowercase_letters=args.lowercase,
        numbers=args.numbers,
        specials=args.specials,
        rejected_chars=args.exclude,
        ticket_count=max(args.count, 0),
        ticket_count_str=str(max(args.count, 0)),
        ticket_length=max(args.length, 0),
        ticket_length_str=str(max(args.length, 0)),
        file_path=args.output,
    )


def run_audit(args: argparse.Namespace, form: TicketFormState) -> int:
    alphabet = character_set_for(form) or None
    try:
        result = audit_ticket_file(
            args.audit,
            alphabet=alphabet,
            expected_length=form.ticket_length or None,
            expected_count=form.ticket_count or None,
        )
    except FileNotFoundError:
        print(f"File not found: {args.audit}")
        return 1

    print(f"Auditing: {args.audit}")
    print(format_table(result.summary_rows()))
    for ticket in result.duplicates[:10]:
        print(f"  duplicate: {ticket}")
    return 0 if result.ok else 1


def run_generate(args: argparse.Namespace, form: TicketFormState) -> int:
    request = build_request(form)
    if request is None:
        logging.debug("Nothing to generate: missing destination, empty character set, or zero count/length")
        return 0

    start_time = datetime.now()
    print(f"Started: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Character set: {request.alphabet}")
    message = run_generation(request, rng=random.Random(args.seed))
    duration = str(datetime.now() - start_time).split('.')[0]

    rows = [
        ("Tickets requested", str(request.token_count)),
        ("Ticket length", str(request.token_length)),
        ("Processing time", duration),
        ("Output file", request.file_path),
    ]
    print(format_table(rows))
    print(message)
    return 0 if message == SUCCESS_MESSAGE else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    form = form_from_args(args)
    if args.audit:
        return run_audit(args, form)
    return run_generate(args, form)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    sys.exit(main())
