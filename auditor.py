import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd


@dataclass
class AuditResult:
    path: str
    row_count: int
    duplicates: List[str] = field(default_factory=list)
    wrong_length_rows: List[int] = field(default_factory=list)
    foreign_char_rows: List[int] = field(default_factory=list)
    expected_count: Optional[int] = None

    @property
    def count_ok(self) -> bool:
        return self.expected_count is None or self.row_count == self.expected_count

    @property
    def ok(self) -> bool:
        return self.count_ok and not (self.duplicates or self.wrong_length_rows or self.foreign_char_rows)

    def summary_rows(self) -> List[Tuple[str, str]]:
        rows = [("Tickets", str(self.row_count))]
        if self.expected_count is not None:
            rows.append(("Expected", str(self.expected_count)))
        rows += [
            ("Duplicated tickets", str(len(self.duplicates))),
            ("Wrong length rows", str(len(self.wrong_length_rows))),
            ("Foreign character rows", str(len(self.foreign_char_rows))),
            ("Result", "OK" if self.ok else "FAILED"),
        ]
        return rows


def load_tickets(path: str) -> List[str]:
    """Read a one-column, header-less ticket CSV back into a list, in file order."""
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    if os.path.getsize(path) == 0:
        return []
    # keep_default_na: a ticket such as "NA" or "null" must stay a string
    df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    return df[0].tolist()


def audit_ticket_file(path: str, alphabet: Optional[str] = None, expected_length: Optional[int] = None,
                      expected_count: Optional[int] = None) -> AuditResult:
    """
    Check a generated ticket file.

    Row numbers in the result are 1-based, matching what a spreadsheet shows.
    """
    tickets = pd.Series(load_tickets(path), dtype=object)
    result = AuditResult(path=path, row_count=len(tickets), expected_count=expected_count)
    if tickets.empty:
        return result

    dupes = tickets[tickets.duplicated(keep="first")]
    result.duplicates = sorted(set(dupes.tolist()))

    if expected_length is not None:
        bad = tickets.str.len() != expected_length
        result.wrong_length_rows = [int(i) + 1 for i in tickets.index[bad.to_numpy()]]

    if alphabet is not None:
        allowed = set(alphabet)
        bad = tickets.map(lambda t: any(ch not in allowed for ch in t))
        result.foreign_char_rows = [int(i) + 1 for i in tickets.index[bad.astype(bool).to_numpy()]]

    return result


def format_table(rows: List[Tuple[str, str]]) -> str:
    w1 = max(len("Metric"), *(len(label) for label, _ in rows))
    w2 = max(len("Value"), *(len(value) for _, value in rows))
    border = f"+{'-' * (w1 + 2)}+{'-' * (w2 + 2)}+"
    header = f"| {'Metric'.ljust(w1)} | {'Value'.ljust(w2)} |"
    lines = [border, header, border]
    for label, value in rows:
        lines.append(f"| {label.ljust(w1)} | {value.rjust(w2)} |")
    lines.append(border)
    return "\n".join(lines)
