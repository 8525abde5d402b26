"""
Encoding resolution for uploaded CSV bytes.

Candidates are tried in a fixed order (UTF-8 first, then the Windows/Latin
8-bit family). A candidate is skipped when decoding raises; the orchestrator
also moves on when a decoded candidate parses to zero rows.

Known limitation: bytes that are valid UTF-8 but were produced by a different
encoding (mojibake) decode "successfully" and are kept as-is. We do not guess
our way around that.
"""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple, Optional, Sequence

from charset_normalizer import from_bytes

from .rules import CANDIDATE_ENCODINGS, DETECT_SAMPLE_SIZE

logger = logging.getLogger(__name__)


class DecodedText(NamedTuple):
    encoding: str
    text: str


def resolve_text(
    raw: bytes, encodings: Sequence[str] = CANDIDATE_ENCODINGS
) -> Iterator[DecodedText]:
    """
    Yield the buffer decoded with each candidate encoding that accepts it.

    The caller stops iterating as soon as a candidate is good enough.
    """
    for encoding in encodings:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as e:
            logger.debug("Decode with %s failed at byte %d: %s", encoding, e.start, e.reason)
            continue
        yield DecodedText(encoding, text)


def detect_encoding(raw: bytes, sample_size: int = DETECT_SAMPLE_SIZE) -> Optional[str]:
    """
    Best-effort guess from charset-normalizer, for diagnostics only.

    The guess is logged next to the encoding actually used so that mis-encoded
    exports can be spotted; it never changes which candidate is chosen. Only
    the first ``sample_size`` bytes are inspected.
    """
    if not raw:
        return None
    match = from_bytes(raw[:sample_size]).best()
    if match is None:
        return None
    return match.encoding
