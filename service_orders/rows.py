"""
Row canonicalization: one raw CSV row -> one record with every canonical column.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Dict, Mapping, Optional

from .config import IdCleanupMode

if TYPE_CHECKING:
    from .config import ImportConfig

# Spreadsheet exports wrap ids as ="00123" to keep leading zeros.
_FORMULA_PREFIX = re.compile(r'^="?')
_NON_DIGIT = re.compile(r"\D+")


def clean_national_id(value: str, mode: IdCleanupMode = IdCleanupMode.DIGITS) -> str:
    """
    Strip spreadsheet formula quoting from a CPF/CNPJ value.

    >>> clean_national_id('="12345678900"')
    '12345678900'
    >>> clean_national_id("12.345.678/0001-90")
    '12345678000190'
    >>> clean_national_id("12.345.678/0001-90", IdCleanupMode.STRIP)
    '12.345.678/0001-90'
    """
    value = _FORMULA_PREFIX.sub("", value.strip())
    if value.endswith('"'):
        value = value[:-1]
    if mode == IdCleanupMode.DIGITS:
        return _NON_DIGIT.sub("", value)
    return value.strip()


def canonicalize_row(
    raw_row: Mapping[str, Optional[str]],
    mapping: Mapping[str, Optional[str]],
    config: "ImportConfig",
) -> Dict[str, str]:
    """
    Build one canonical record.

    Every canonical column is present, in schema order; a column with no
    source header, or a missing/None value, becomes "". Values are trimmed.
    """
    record: Dict[str, str] = {}
    for column in config.columns:
        source = mapping.get(column)
        value = raw_row.get(source) if source is not None else None
        value = (value or "").strip()
        if column == config.id_column and value:
            value = clean_national_id(value, config.id_mode)
        record[column] = value
    return record
