"""
Free-text work-duration parsing.

Turns expressions such as ``2019-2021``, ``01/2022-``, ``2020 to Present`` or
``Jan 2023 - Dec 2024`` into a fractional number of years, relative to a fixed
current year and month. Nothing here talks to the text-generation service.
"""
import re
from datetime import date
from typing import Optional

PRESENT_TOKENS = ("present", "current", "now", "ongoing")

FRESHER_PHRASES = (
    "fresher",
    "fresh graduate",
    "new graduate",
    "entry level",
    "junior",
    "0 years",
    "0.0 years",
    "no experience",
)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_SEP = r"\s*(?:-|to)\s*"
_PRESENT = "(?:" + "|".join(PRESENT_TOKENS) + ")"
_MONTH_NAME = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"

OPEN_YEAR_RE = re.compile(r"(?<![\d/])(\d{4})\s*-\s*$")
YEAR_TO_PRESENT_RE = re.compile(r"(\d{4})" + _SEP + _PRESENT + r"\b")
YEAR_RANGE_RE = re.compile(r"(?<![\d/])(\d{4})" + _SEP + r"(\d{4})(?![\d/])")
MONTH_YEAR_RANGE_RE = re.compile(r"(\d{1,2})/(\d{4})" + _SEP + r"(\d{1,2})/(\d{4})")
NAMED_MONTH_RANGE_RE = re.compile(r"\b" + _MONTH_NAME + r"\s+(\d{4})" + _SEP + _MONTH_NAME + r"\s+(\d{4})")
OPEN_MONTH_YEAR_RE = re.compile(r"(\d{1,2})/(\d{4})\s*-\s*$")
BARE_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def _normalize(text: str) -> str:
    return text.lower().replace("–", "-").replace("—", "-").strip()


def _years(months: int) -> float:
    return max(0, months) / 12


class DurationParser:
    """Parses date/range expressions against a fixed current year and month."""

    def __init__(self, current_year: int, current_month: int):
        if not 1 <= current_month <= 12:
            raise ValueError(f"current_month must be 1-12, got {current_month}")
        self.current_year = current_year
        self.current_month = current_month

    @classmethod
    def from_date(cls, reference: date = None) -> "DurationParser":
        reference = reference or date.today()
        return cls(reference.year, reference.month)

    def parse(self, text: str) -> Optional[float]:
        """
        Return the duration in years, 0.0 when nothing is recognised, or
        None when the token is a bare "present"-like word whose length can
        only be computed from a paired start date.
        """
        if not text:
            return 0.0
        normalized = _normalize(text)

        if normalized in PRESENT_TOKENS:
            return None

        m = OPEN_YEAR_RE.search(normalized) or YEAR_TO_PRESENT_RE.search(normalized)
        if m:
            start_year = int(m.group(1))
            return _years((self.current_year - start_year) * 12 + (self.current_month - 1))

        m = YEAR_RANGE_RE.search(normalized)
        if m:
            start_year, end_year = int(m.group(1)), int(m.group(2))
            return _years((end_year - start_year) * 12)

        m = MONTH_YEAR_RANGE_RE.search(normalized)
        if m:
            start_month, start_year, end_month, end_year = (int(g) for g in m.groups())
            return _years((end_year - start_year) * 12 + (end_month - start_month))

        m = NAMED_MONTH_RANGE_RE.search(normalized)
        if m:
            start_month, end_month = MONTHS[m.group(1)], MONTHS[m.group(3)]
            start_year, end_year = int(m.group(2)), int(m.group(4))
            # whole months strictly between the two named months
            return _years((end_year - start_year) * 12 + (end_month - start_month) - 1)

        m = OPEN_MONTH_YEAR_RE.search(normalized)
        if m:
            start_month, start_year = int(m.group(1)), int(m.group(2))
            return _years((self.current_year - start_year) * 12 + (self.current_month - start_month))

        m = BARE_YEAR_RE.search(normalized)
        if m:
            return 0.5 if int(m.group(1)) == self.current_year else 1.0

        return 0.0


def parse_duration(text: str, current_year: int = None, current_month: int = None) -> Optional[float]:
    """Convenience wrapper; missing year/month default to today."""
    today = date.today()
    parser = DurationParser(
        current_year if current_year is not None else today.year,
        current_month if current_month is not None else today.month,
    )
    return parser.parse(text)


def is_fresher_phrase(text: str) -> bool:
    """True when the text is a stock phrase for a candidate with no experience."""
    normalized = _normalize(text or "")
    return any(re.search(rf"(?<![\w.]){re.escape(phrase)}(?!\w)", normalized) for phrase in FRESHER_PHRASES)
