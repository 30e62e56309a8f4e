import csv
import json
import logging
from pathlib import Path
from typing import Optional

from config import (
    GenerationRequest, TicketFormState,
    PREFERENCES_DIR_NAME, PREFERENCES_FILE_NAME,
    DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT,
)

class TicketGenerationError(Exception):
    """Base class for failures that end a generation run."""
    pass

class TicketFileError(TicketGenerationError):
    pass

class TicketSpaceExhaustedError(TicketGenerationError):
    pass

def build_character_set(capitals: bool, lowercase: bool, numbers: bool, specials: bool, rejected_chars: str = "") -> str:
    """
    Concatenate the enabled classes (capitals, lowercase, numbers, specials)
    and drop every character that appears in `rejected_chars`.

    Exclusion is plain character membership. Returns an empty string when
    nothing is selected or everything is excluded.
    """
    form = TicketFormState(
        capital_letters=capitals, lowercase_letters=lowercase,
        numbers=numbers, specials=specials, rejected_chars=rejected_chars,
    )
    return character_set_for(form)

def character_set_for(form: TicketFormState) -> str:
    buf = "".join(cls.characters for cls in form.enabled_classes())
    rejected = set(form.rejected_chars or "")
    return "".join(ch for ch in buf if ch not in rejected)

def build_request(form: TicketFormState) -> Optional[GenerationRequest]:
    """
    Turn the current form state into a GenerationRequest.

    Returns None, without reporting anything, when there is no destination,
    the character set is empty, or the count or length is zero.
    """
    if not form.file_path:
        return None

    character_set = character_set_for(form)
    if not character_set:
        return None

    if form.ticket_length <= 0 or form.ticket_count <= 0:
        return None

    return GenerationRequest(
        alphabet=character_set,
        file_path=form.file_path,
        token_count=form.ticket_count,
        token_length=form.ticket_length,
    )

def open_ticket_csv(file_path: str):
    """Create (or truncate) the output file. Returns (file handle, csv writer)."""
    try:
        handle = open(file_path, "w", newline="", encoding="utf-8")
    except OSError as e:
        raise TicketFileError(f"Failed to create file {file_path}: {e}") from e
    return handle, csv.writer(handle)

def write_ticket_row(writer, ticket: str) -> None:
    try:
        writer.writerow([ticket])
    except OSError as e:
        raise TicketFileError(f"Failed to write to file: {e}") from e

def close_ticket_csv(handle) -> None:
    """Flush and close the output file. Buffered rows can still fail to reach the disk here."""
    if handle.closed:
        return
    try:
        handle.close()
    except OSError as e:
        raise TicketFileError(f"Failed to write to file: {e}") from e

class AppData:
    def __init__(self, data_dir=None):
        self.data_dir = Path(data_dir) if data_dir else Path.home() / PREFERENCES_DIR_NAME
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.preferences_path = self.data_dir / PREFERENCES_FILE_NAME

    def load_preferences(self) -> dict:
        """Load saved form settings and window geometry merged over the defaults."""
        default_prefs = {
            "form": TicketFormState().to_preferences(),
            "window": {
                "width": DEFAULT_WINDOW_WIDTH,
                "height": DEFAULT_WINDOW_HEIGHT,
                "x": None,
                "y": None,
            },
        }

        if self.preferences_path.exists():
            try:
                with open(self.preferences_path, 'r', encoding="utf-8") as f:
                    prefs = json.load(f)
                if isinstance(prefs, dict):
                    for section in default_prefs:
                        if isinstance(prefs.get(section), dict):
                            default_prefs[section] = {**default_prefs[section], **prefs[section]}
            except (ValueError, OSError) as e:
                logging.warning(f"Ignoring unreadable preferences file {self.preferences_path}: {e}")

        return default_prefs

    def load_form_state(self) -> TicketFormState:
        return TicketFormState.from_preferences(self.load_preferences()["form"])

    def save_preferences(self, form: Optional[TicketFormState] = None, window: Optional[dict] = None) -> None:
        prefs = self.load_preferences()
        if form is not None:
            prefs["form"] = form.to_preferences()
        if window is not None:
            prefs["window"] = {**prefs["window"], **window}

        try:
            with open(self.preferences_path, 'w', encoding="utf-8") as f:
                json.dump(prefs, f, indent=2)
        except OSError as e:
            logging.warning(f"Could not save preferences: {e}")
