"""
Delimiter-aware CSV parsing.

The first non-blank line is the header; every later non-blank line is a data
row keyed by the header at the same position.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .rules import CANDIDATE_DELIMITERS

logger = logging.getLogger(__name__)


@dataclass
class ParsedTable:
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)
    delimiter: str = CANDIDATE_DELIMITERS[0]

    @property
    def has_header(self) -> bool:
        return any(self.headers)


def _first_line(text: str) -> Optional[str]:
    for line in text.splitlines():
        if line.strip():
            return line
    return None


def _is_blank(record: Sequence[str]) -> bool:
    return not any(value.strip() for value in record)


def detect_delimiter(
    header_line: str, candidates: Sequence[str] = CANDIDATE_DELIMITERS
) -> str:
    """
    Pick the candidate that splits the header line into the most fields.

    Splitting goes through csv.reader so quoted headers containing the other
    candidate are not miscounted. Ties go to the earliest candidate.
    """

    def width(delimiter: str) -> int:
        return len(next(csv.reader([header_line], delimiter=delimiter), []))

    return max(candidates, key=width)


def _build_row(headers: List[str], record: List[str], line_num: int) -> Dict[str, str]:
    if len(record) > len(headers):
        logger.debug(
            "Line %d has %d fields for %d headers; extra fields dropped",
            line_num, len(record), len(headers),
        )

    row: Dict[str, str] = {}
    for i, header in enumerate(headers):
        value = record[i] if i < len(record) else ""
        # duplicate header names: first column wins
        row.setdefault(header, value)
    return row


def parse_rows(text: str, delimiter: Optional[str] = None) -> ParsedTable:
    """
    Parse decoded CSV text into a header list and raw rows.

    Args:
        text: Decoded file content.
        delimiter: Field delimiter; auto-detected from the header line if None.

    Returns:
        ParsedTable with trimmed headers, one dict per non-blank data line,
        and the delimiter that was used.
    """
    header_line = _first_line(text)
    if header_line is None:
        return ParsedTable(headers=[], delimiter=delimiter or CANDIDATE_DELIMITERS[0])

    if delimiter is None:
        delimiter = detect_delimiter(header_line)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)

    headers: Optional[List[str]] = None
    rows: List[Dict[str, str]] = []
    for record in reader:
        if _is_blank(record):
            continue
        if headers is None:
            headers = [h.strip() for h in record]
            continue
        rows.append(_build_row(headers, record, reader.line_num))

    return ParsedTable(headers=headers or [], rows=rows, delimiter=delimiter)
