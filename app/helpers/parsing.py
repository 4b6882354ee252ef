import json
import re
from typing import List, Optional

from pydantic import ValidationError

from app.models.schemas import FieldAssessmentSet
from app.services.duration_parser import DurationParser
from app.utils.exceptions import MalformedServiceResponse
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_KEYS = ("name", "email", "phone", "experience", "skills", "overallConfidence", "summary")

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"\+?\d[\d\s().-]{6,}\d")

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
_POINT = rf"(?:{_MONTH}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}})"
_END = rf"(?:{_POINT}|present|current|now|ongoing)"
DATE_RANGE_RE = re.compile(rf"\b{_POINT}\s*(?:-|–|—|to)\s*{_END}\b", re.IGNORECASE)


def clean_text(x: str) -> str:
    x = re.sub(r'\s+', ' ', x or '').strip()
    return x


def parse_validation_response(raw: str) -> FieldAssessmentSet:
    """Decode the service reply into a FieldAssessmentSet, all or nothing."""
    raw = raw or ""
    start = raw.find("{")
    end = raw.rfind("}")
    if start < 0 or end < start:
        raise MalformedServiceResponse("No JSON object found in service response")

    try:
        data = json.loads(raw[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedServiceResponse(f"Service response is not valid JSON: {e.msg}", cause=e) from e

    if not isinstance(data, dict):
        raise MalformedServiceResponse("Service response JSON is not an object")

    for key in REQUIRED_KEYS:
        if key not in data:
            raise MalformedServiceResponse(f"Missing required field: {key}", missing_key=key)

    try:
        return FieldAssessmentSet.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedServiceResponse(
            f"Invalid field in service response: {where}: {first.get('msg')}",
            details={"validation_errors": len(e.errors())},
            cause=e
        ) from e


def extract_emails(text: str) -> List[str]:
    return list(dict.fromkeys(m.lower() for m in EMAIL_RE.findall(text or "")))


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def extract_phones(text: str) -> List[str]:
    """Phone-like digit runs, as bare digits."""
    out = []
    for m in PHONE_RE.findall(text or ""):
        digits = digits_only(m)
        if 7 <= len(digits) <= 15 and digits not in out:
            out.append(digits)
    return out


def find_date_ranges(text: str) -> List[str]:
    return [m.group(0) for m in DATE_RANGE_RE.finditer(text or "")]


def estimate_experience_years(text: str, parser: DurationParser) -> float:
    """Sum of the durations of every date range found in the resume text."""
    total = 0.0
    for span in find_date_ranges(text):
        years: Optional[float] = parser.parse(span)
        if years:
            logger.debug(f"Date range '{span}' -> {years:.2f} years")
            total += years
    return round(total, 2)


def mentions_term(text: str, term: str) -> bool:
    """Whole-term, case-insensitive search."""
    if not term:
        return False
    return re.search(rf"(?<![a-z0-9.]){re.escape(term.lower())}(?![a-z0-9])", (text or "").lower()) is not None
