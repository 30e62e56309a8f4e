import logging
import queue
import random
import threading
from datetime import datetime
from typing import Optional, Sequence, Set

from config import GenerationRequest, TicketFormState, MAX_DRAW_ATTEMPTS, SUCCESS_MESSAGE
from ticket_utils import (
    TicketGenerationError, TicketSpaceExhaustedError,
    build_request, close_ticket_csv, open_ticket_csv, write_ticket_row,
)

# Expected draws for one new ticket are space / free; allowing this many times
# that leaves a failure chance of about e**-50 per ticket.
DRAW_ATTEMPTS_PER_EXPECTED = 50

def token_space_size(alphabet_size: int, ticket_length: int, limit: int) -> int:
    """alphabet_size ** ticket_length, capped at `limit` so huge spaces stay cheap."""
    size = 1
    for _ in range(ticket_length):
        size *= alphabet_size
        if size >= limit:
            return limit
    return size

def has_capacity(alphabet_size: int, ticket_length: int, ticket_count: int) -> bool:
    """True if alphabet_size ** ticket_length >= ticket_count, without building huge integers."""
    return token_space_size(alphabet_size, ticket_length, ticket_count) >= ticket_count

def draw_attempts(space_size: int, already_generated: int, floor: int = MAX_DRAW_ATTEMPTS) -> int:
    """
    Attempt budget for the next ticket. It grows with how full the space is,
    so a request that fits is never abandoned for bad luck alone.
    """
    free = space_size - already_generated
    if free <= 0:
        return floor
    return max(floor, DRAW_ATTEMPTS_PER_EXPECTED * -(-space_size // free))

def generate_ticket(rng: random.Random, character_set: Sequence[str], already_generated: Set[str],
                    ticket_length: int, max_attempts: int = MAX_DRAW_ATTEMPTS) -> str:
    """
    Draw `ticket_length` characters uniformly (with replacement) until the
    result is not in `already_generated`.

    Raises TicketSpaceExhaustedError after `max_attempts` collisions in a row.
    """
    for _ in range(max_attempts):
        ticket = "".join(rng.choices(character_set, k=ticket_length))
        if ticket not in already_generated:
            return ticket

    raise TicketSpaceExhaustedError(
        f"Exhausted ticket space: no new ticket found after {max_attempts} attempts "
        f"({len(already_generated)} tickets already generated)"
    )

def build_csv(request: GenerationRequest, rng: Optional[random.Random] = None,
              max_attempts: int = MAX_DRAW_ATTEMPTS) -> int:
    """
    Generate `request.token_count` unique tickets and write each one as a
    single-field CSV row at `request.file_path`.

    The token space is checked before the file is touched. `max_attempts` is
    the smallest per-ticket budget; it is raised as the space fills up. A write
    failure, including one that only shows when the file is flushed, aborts
    the run and leaves the partially written file in place.
    """
    if not has_capacity(len(request.alphabet), request.token_length, request.token_count):
        raise TicketSpaceExhaustedError(
            f"Exhausted ticket space: {len(request.alphabet)} characters at length "
            f"{request.token_length} cannot make {request.token_count} unique tickets"
        )

    # Spaces of at least twice the count are never more than half full.
    space_size = token_space_size(len(request.alphabet), request.token_length, 2 * request.token_count)

    rng = rng or random.Random()
    character_set = list(request.alphabet)
    generated: Set[str] = set()

    handle, writer = open_ticket_csv(request.file_path)
    try:
        for _ in range(request.token_count):
            attempts = draw_attempts(space_size, len(generated), max_attempts)
            ticket = generate_ticket(rng, character_set, generated, request.token_length, attempts)
            write_ticket_row(writer, ticket)
            generated.add(ticket)
    finally:
        close_ticket_csv(handle)

    return len(generated)


def run_generation(request: GenerationRequest, rng: Optional[random.Random] = None,
                   max_attempts: int = MAX_DRAW_ATTEMPTS) -> str:
    """Run one generation and return the status line shown to the user."""
    start_time = datetime.now()
    logging.info(f"Generating {request.token_count} tickets of length {request.token_length} into {request.file_path}")
    try:
        written = build_csv(request, rng=rng, max_attempts=max_attempts)
    except TicketGenerationError as e:
        logging.error(f"Ticket generation failed: {e}")
        return str(e)
    except Exception as e:
        logging.error("Error in ticket generation", exc_info=True)
        return f"An unexpected error occurred: {e}"

    duration = str(datetime.now() - start_time).split('.')[0]
    logging.info(f"Wrote {written} tickets to {request.file_path} in {duration}")
    return SUCCESS_MESSAGE

class TicketRunner:
    """
    Runs at most one generation at a time on a dedicated daemon thread.

    The worker reports back with exactly one status string on a queue;
    poll() hands it over and marks the runner idle again.
    """

    def __init__(self, seed: Optional[int] = None, max_attempts: int = MAX_DRAW_ATTEMPTS):
        self.seed = seed
        self.max_attempts = max_attempts
        self.last_message = ""
        self._messages: "queue.Queue[str]" = queue.Queue()
        self._lock = threading.Lock()
        self._processing = False

    @property
    def is_processing(self) -> bool:
        with self._lock:
            return self._processing

    def submit(self, form: TicketFormState) -> bool:
        return self.start(build_request(form))

    def start(self, request: Optional[GenerationRequest]) -> bool:
        """Start a run. Returns False (silently) for an invalid request or while a run is active."""
        if request is None:
            return False
        with self._lock:
            if self._processing:
                return False
            self._processing = True

        threading.Thread(target=self._process_in_thread, args=(request,), daemon=True).start()
        return True

    def _process_in_thread(self, request: GenerationRequest):
        try:
            message = run_generation(request, rng=random.Random(self.seed), max_attempts=self.max_attempts)
        except Exception as e:
            logging.error("Error in _process_in_thread", exc_info=True)
            message = f"An unexpected error occurred: {e}"
        self._messages.put(message)

    def poll(self, timeout: Optional[float] = None) -> Optional[str]:
        """Return the finished run's status message, or None if nothing has arrived."""
        try:
            if timeout is None:
                message = self._messages.get_nowait()
            else:
                message = self._messages.get(timeout=timeout)
        except queue.Empty:
            return None

        with self._lock:
            self._processing = False
            self.last_message = message
        return message
