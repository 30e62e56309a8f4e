from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

# --- Application Version (Semantic Versioning) ---
APP_VERSION = "1.0.0"
APP_TITLE = "Ticket Randomizer"

# --- Character Classes (fixed order: capitals, lowercase, numbers, specials) ---
CAPITALS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERS = "abcdefghijklmnopqrstuvwxyz"
NUMBERS = "0123456789"
SPECIALS = ",.;:\"'!%#"

# --- Enums for Type Safety ---
class CharacterClass(str, Enum):
    """Selectable character classes, in the order they are concatenated."""
    CAPITALS = "capitals"
    LOWERCASE = "lowercase"
    NUMBERS = "numbers"
    SPECIALS = "specials"

    @property
    def characters(self) -> str:
        return CHARACTER_CLASS_STRINGS[self]

    @property
    def label(self) -> str:
        return CHARACTER_CLASS_LABELS[self]

class ThemeColor(str, Enum):
    """Available theme colors for the application."""
    BLUE = "blue"
    GREEN = "green"

CHARACTER_CLASS_STRINGS: Dict[CharacterClass, str] = {
    CharacterClass.CAPITALS: CAPITALS,
    CharacterClass.LOWERCASE: LOWERS,
    CharacterClass.NUMBERS: NUMBERS,
    CharacterClass.SPECIALS: SPECIALS,
}

CHARACTER_CLASS_LABELS: Dict[CharacterClass, str] = {
    CharacterClass.CAPITALS: "Capital Letters (A-Z)",
    CharacterClass.LOWERCASE: "Lowercase Letters (a-z)",
    CharacterClass.NUMBERS: "Numbers (0-9)",
    CharacterClass.SPECIALS: f"Specials ({SPECIALS})",
}

# --- Generation Settings ---
DEFAULT_TICKET_COUNT = 0
DEFAULT_TICKET_LENGTH = 0
MAX_DRAW_ATTEMPTS = 10_000  # consecutive collisions tolerated for a single ticket

# --- Run Status Messages ---
SUCCESS_MESSAGE = "Successfully wrote to CSV"

# --- Preferences ---
PREFERENCES_DIR_NAME = ".ticket_randomizer"
PREFERENCES_FILE_NAME = "preferences.json"
DEFAULT_WINDOW_WIDTH = 480
DEFAULT_WINDOW_HEIGHT = 560

# --- Type Definitions ---
@dataclass(frozen=True)
class ThemeColors:
    """Theme color scheme configuration."""
    fg_color: List[str]
    hover_color: List[str]
    hyperlink_color: str

THEME_COLORS: Dict[ThemeColor, ThemeColors] = {
    ThemeColor.BLUE: ThemeColors(
        fg_color=["#3B8ED0", "#1F6AA5"],
        hover_color=["#36719F", "#144870"],
        hyperlink_color="#FFC107"
    ),
    ThemeColor.GREEN: ThemeColors(
        fg_color=["#2CC985", "#2FA572"],
        hover_color=["#17A76A", "#14754B"],
        hyperlink_color="#FFC107"
    ),
}

@dataclass(frozen=True)
class GenerationRequest:
    """Validated parameters for a single generation run."""
    alphabet: str
    file_path: str
    token_count: int
    token_length: int

def parse_count(text: str) -> Optional[int]:
    """
    Parse a count/length field as an unsigned integer: ASCII digits with an
    optional leading "+". Surrounding whitespace is not accepted. Returns None
    for anything else.
    """
    digits = text or ""
    if digits.startswith("+"):
        digits = digits[1:]
    if not digits or not all("0" <= ch <= "9" for ch in digits):
        return None
    return int(digits)

@dataclass
class TicketFormState:
    """
    Mutable state behind the ticket form.

    Count and length are edited as text and only committed to their integer
    fields when the text parses; see commit_count_text / commit_length_text.
    """
    capital_letters: bool = False
    lowercase_letters: bool = False
    numbers: bool = False
    specials: bool = False
    rejected_chars: str = ""
    ticket_count: int = DEFAULT_TICKET_COUNT
    ticket_count_str: str = ""
    ticket_length: int = DEFAULT_TICKET_LENGTH
    ticket_length_str: str = ""
    file_path: Optional[str] = None

    def enabled_classes(self) -> List[CharacterClass]:
        flags = [
            (CharacterClass.CAPITALS, self.capital_letters),
            (CharacterClass.LOWERCASE, self.lowercase_letters),
            (CharacterClass.NUMBERS, self.numbers),
            (CharacterClass.SPECIALS, self.specials),
        ]
        return [cls for cls, enabled in flags if enabled]

    def commit_count_text(self) -> int:
        parsed = parse_count(self.ticket_count_str)
        if parsed is None:
            self.ticket_count_str = str(self.ticket_count)
        else:
            self.ticket_count = parsed
        return self.ticket_count

    def commit_length_text(self) -> int:
        parsed = parse_count(self.ticket_length_str)
        if parsed is None:
            self.ticket_length_str = str(self.ticket_length)
        else:
            self.ticket_length = parsed
        return self.ticket_length

    def to_preferences(self) -> dict:
        return {
            "capital_letters": self.capital_letters,
            "lowercase_letters": self.lowercase_letters,
            "numbers": self.numbers,
            "specials": self.specials,
            "rejected_chars": self.rejected_chars,
            "ticket_count": self.ticket_count,
            "ticket_length": self.ticket_length,
        }

    @classmethod
    def from_preferences(cls, prefs: dict) -> "TicketFormState":
        def _int(key: str) -> int:
            value = prefs.get(key, 0)
            return value if isinstance(value, int) and not isinstance(value, bool) and value >= 0 else 0

        count, length = _int("ticket_count"), _int("ticket_length")
        return cls(
            capital_letters=bool(prefs.get("capital_letters", False)),
            lowercase_letters=bool(prefs.get("lowercase_letters", False)),
            numbers=bool(prefs.get("numbers", False)),
            specials=bool(prefs.get("specials", False)),
            rejected_chars=str(prefs.get("rejected_chars", "") or ""),
            ticket_count=count,
            ticket_count_str=str(count) if count else "",
            ticket_length=length,
            ticket_length_str=str(length) if length else "",
        )
