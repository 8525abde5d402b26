"""
Import configuration.

ImportConfig holds everything the pipeline reads (schema, alias table, cleanup
modes) and is built once, then passed explicitly. Settings reads the
environment for the HTTP layer and for the handful of knobs an operator may
want to flip without a code change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Mapping, Optional, Sequence, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

from .headers import HEADER_VARIANTS, build_alias_lookup
from .rules import (
    CANDIDATE_ENCODINGS,
    CANONICAL_COLUMNS,
    MIN_FUZZY_LENGTH,
    NATIONAL_ID_COLUMN,
)


class IdCleanupMode(str, Enum):
    STRIP = "strip"     # drop spreadsheet formula quoting only
    DIGITS = "digits"   # ... and keep digits only


class EmptyResultPolicy(str, Enum):
    ERROR = "error"              # 400 {"error": ...}
    EMPTY_ARRAY = "empty_array"  # 200 []


@dataclass(frozen=True)
class ImportConfig:
    columns: Tuple[str, ...]
    aliases: Mapping[str, str]
    id_column: Optional[str] = NATIONAL_ID_COLUMN
    id_mode: IdCleanupMode = IdCleanupMode.DIGITS
    delimiter: Optional[str] = None
    encodings: Tuple[str, ...] = CANDIDATE_ENCODINGS
    min_fuzzy_length: int = MIN_FUZZY_LENGTH
    empty_result_policy: EmptyResultPolicy = EmptyResultPolicy.ERROR


def build_config(
    columns: Sequence[str] = CANONICAL_COLUMNS,
    variants: Mapping[str, str] = HEADER_VARIANTS,
    *,
    id_column: Optional[str] = NATIONAL_ID_COLUMN,
    id_mode: IdCleanupMode = IdCleanupMode.DIGITS,
    delimiter: Optional[str] = None,
    encodings: Sequence[str] = CANDIDATE_ENCODINGS,
    min_fuzzy_length: int = MIN_FUZZY_LENGTH,
    empty_result_policy: EmptyResultPolicy = EmptyResultPolicy.ERROR,
) -> ImportConfig:
    """
    Build an ImportConfig, validating the alias library against the schema.

    Raises:
        ValueError: on alias conflicts, unknown variant targets, an id column
            outside the schema, or a delimiter that is not a single character.
    """
    columns = tuple(columns)
    if id_column is not None and id_column not in columns:
        raise ValueError(f"id column '{id_column}' is not part of the schema")
    if delimiter is not None and len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    if not encodings:
        raise ValueError("at least one candidate encoding is required")

    return ImportConfig(
        columns=columns,
        aliases=build_alias_lookup(columns, variants),
        id_column=id_column,
        id_mode=IdCleanupMode(id_mode),
        delimiter=delimiter,
        encodings=tuple(encodings),
        min_fuzzy_length=min_fuzzy_length,
        empty_result_policy=EmptyResultPolicy(empty_result_policy),
    )


@lru_cache(maxsize=1)
def default_config() -> ImportConfig:
    return build_config()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SERVICE_ORDERS_", env_file=".env", extra="ignore")

    # Comma-separated list of frontend origins allowed by CORS.
    cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"
    empty_result_policy: EmptyResultPolicy = EmptyResultPolicy.ERROR
    id_mode: IdCleanupMode = IdCleanupMode.DIGITS
    # Empty means auto-detect from the header line.
    delimiter: str = ""

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def import_config(self) -> ImportConfig:
        return build_config(
            id_mode=self.id_mode,
            delimiter=self.delimiter or None,
            empty_result_policy=self.empty_result_policy,
        )
