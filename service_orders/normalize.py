"""
CSV upload -> canonical JSON records.

Pipeline, single pass, everything in memory:
- decode with the first candidate encoding that yields data rows
- parse with the delimiter detected from the header line
- reconcile the header line against the canonical schema (once)
- canonicalize every data row with that one mapping

convert_csv_bytes() raises ImportFailure subclasses; process_upload() turns
every outcome into a status code + JSON-ready payload for the HTTP layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .config import EmptyResultPolicy, ImportConfig, default_config
from .encoding import detect_encoding, resolve_text
from .errors import (
    DecodeExhausted,
    EmptyResult,
    ImportFailure,
    InternalProcessingError,
    MissingInput,
)
from .headers import reconcile_headers, unmatched_headers
from .parser import ParsedTable, parse_rows
from .rows import canonicalize_row

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    rows: List[Dict[str, str]]
    encoding: str
    delimiter: str
    detected_encoding: Optional[str] = None
    header_mapping: Dict[str, Optional[str]] = field(default_factory=dict)
    unmatched_headers: List[str] = field(default_factory=list)


@dataclass
class UploadOutcome:
    status_code: int
    payload: Union[List[Dict[str, str]], Dict[str, Any]]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def _decode_and_parse(raw: bytes, config: ImportConfig) -> tuple[str, ParsedTable]:
    """
    Return the first (encoding, table) whose table has data rows.

    Raises EmptyResult when some candidate produced a header but none produced
    data rows, DecodeExhausted when no candidate produced anything at all.
    """
    header_only: Optional[tuple[str, ParsedTable]] = None

    for encoding, text in resolve_text(raw, config.encodings):
        table = parse_rows(text, config.delimiter)
        if table.rows:
            return encoding, table
        logger.info("No data rows with encoding %s, trying next candidate", encoding)
        if header_only is None and table.has_header:
            header_only = (encoding, table)

    if header_only is not None:
        encoding, table = header_only
        logger.warning(
            "CSV has a header line but no data rows (encoding=%s, headers=%s)",
            encoding, table.headers,
        )
        raise EmptyResult()

    logger.warning("No candidate encoding produced CSV rows (%d bytes)", len(raw))
    raise DecodeExhausted()


def convert_csv_bytes(raw: bytes, config: Optional[ImportConfig] = None) -> ConversionResult:
    """
    Convert an uploaded CSV buffer into canonical records.

    Raises:
        DecodeExhausted: nothing parseable in the buffer (includes zero bytes).
        EmptyResult: a header line but no data rows.
        InternalProcessingError: any unexpected failure, with the original
            exception chained.
    """
    config = config or default_config()

    try:
        encoding, table = _decode_and_parse(raw, config)
        detected = detect_encoding(raw)
        logger.info(
            "Parsed %d rows (encoding=%s, detected=%s, delimiter=%r)",
            len(table.rows), encoding, detected, table.delimiter,
        )

        mapping = reconcile_headers(table.headers, config)
        unmatched = unmatched_headers(table.headers, mapping)
        logger.info("Header mapping: %s", mapping)
        if unmatched:
            logger.debug("Headers not used by any column: %s", unmatched)

        records = [canonicalize_row(raw_row, mapping, config) for raw_row in table.rows]
    except ImportFailure:
        raise
    except Exception as e:
        logger.exception("Unexpected error while converting CSV")
        raise InternalProcessingError(details=str(e)) from e

    return ConversionResult(
        rows=records,
        encoding=encoding,
        delimiter=table.delimiter,
        detected_encoding=detected,
        header_mapping=mapping,
        unmatched_headers=unmatched,
    )


def _empty_outcome(failure: ImportFailure, config: ImportConfig) -> UploadOutcome:
    if config.empty_result_policy == EmptyResultPolicy.EMPTY_ARRAY:
        return UploadOutcome(200, [])
    return UploadOutcome(failure.status_code, failure.as_payload())


def process_upload(raw: Optional[bytes], config: Optional[ImportConfig] = None) -> UploadOutcome:
    """
    Run the whole import and package the result for the caller.

    - None (no file attached) -> 400 {"error": "no file provided"}
    - zero usable rows -> per config.empty_result_policy: 400 or 200 []
    - unexpected failure -> 500 {"error": ..., "details": ...}
    - otherwise 200 with the list of canonical records
    """
    config = config or default_config()

    if raw is None:
        failure = MissingInput()
        return UploadOutcome(failure.status_code, failure.as_payload())

    try:
        result = convert_csv_bytes(raw, config)
    except (DecodeExhausted, EmptyResult) as e:
        return _empty_outcome(e, config)
    except ImportFailure as e:
        return UploadOutcome(e.status_code, e.as_payload())

    return UploadOutcome(200, result.rows)
