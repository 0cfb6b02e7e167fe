"""
Normalizer - Text cleanup for scraped job fields

Every string field of every record goes through the same ordered chain of
rewrites. Each rewrite is a pure str -> str function so it can be tested on
its own; clean_text() folds them left to right.

The chain is not idempotent. Leading whitespace goes before the salary
labels and parentheses do, so "Salary: $25.00 hourly" cleans to
" $25.00 hourly" and only a second pass drops the space. Province expansion
rewrites codes inside longer words (see expand_province_codes).
"""

import re
from functools import reduce
from typing import Callable, List

from models import JobRecord

# Order matters: expansion runs code by code over the already-expanded text.
PROVINCE_NAMES = [
    ("BC", "British Columbia"),
    ("ON", "Ontario"),
    ("QC", "Quebec"),
    ("SK", "Saskatchewan"),
    ("AB", "Alberta"),
    ("MB", "Manitoba"),
    ("NB", "New Brunswick"),
    ("NL", "Newfoundland and Labrador"),
    ("NS", "Nova Scotia"),
    ("PE", "Prince Edward Island"),
    ("NT", "Northwest Territories"),
    ("NU", "Nunavut"),
    ("YT", "Yukon"),
]

_TABS_AND_LABELS = re.compile(r"\t|\n|Location")


def strip_tabs_and_newlines(text: str) -> str:
    """Remove tab and newline characters along with the 'Location' label."""
    return _TABS_AND_LABELS.sub("", text)


def strip_leading_whitespace(text: str) -> str:
    return text.lstrip()


def strip_salary_labels(text: str) -> str:
    return text.replace("Salary:", "").replace("to be negotiated", "")


def strip_parentheses(text: str) -> str:
    return text.replace("(", "").replace(")", "")


def expand_province_codes(text: str) -> str:
    """
    Expand two-letter province/territory codes to full names.

    This is a plain substring replacement, not a word match: a code inside a
    longer token is rewritten too, e.g. "ABC Ltd" -> "Albertaritish Columbia Ltd".
    """
    for code, name in PROVINCE_NAMES:
        text = text.replace(code, name)
    return text


REWRITES: List[Callable[[str], str]] = [
    strip_tabs_and_newlines,
    strip_leading_whitespace,
    strip_salary_labels,
    strip_parentheses,
    expand_province_codes,
]


def clean_text(text: str) -> str:
    return reduce(lambda value, rewrite: rewrite(value), REWRITES, text)


def normalize_record(record: JobRecord) -> JobRecord:
    """Clean every string field of a record in place"""
    for name, value in list(record):
        if isinstance(value, str):
            setattr(record, name, clean_text(value))
    return record


def normalize_records(records: List[JobRecord]) -> List[JobRecord]:
    """Clean all records in place and return the same list"""
    for record in records:
        normalize_record(record)
    return records
