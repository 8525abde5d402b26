"""
Header reconciliation: raw CSV headers -> canonical columns.

RULES
-----
For each canonical column, in schema order, the first rule that matches wins,
and within a rule the first raw header in file order wins:

1. Exact: the raw header is character-for-character the canonical name.
2. Alias: the normalized raw header is a known variant of the column.
3. Fuzzy: the normalized raw header contains the normalized column name, or
   is contained in it. Both sides of a substring match must be at least
   ``min_fuzzy_length`` characters long. A header may feed several columns
   this way: with no "Contratante" column, "Status Contratante" supplies both
   Status (alias) and Contratante (fuzzy).
4. Otherwise the column has no source and resolves to "" in every row.

Normalization strips diacritics, drops everything that is not a letter or a
digit, and uppercases: "Nome Cliente", "NOME_CLIENTE" and "nomecliente" all
become "NOMECLIENTE".

The result depends on the header line only, never on row data.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

from unidecode import unidecode

if TYPE_CHECKING:
    from .config import ImportConfig

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")

# ---------------------------------------------------------------------------
# Header variant library
# ---------------------------------------------------------------------------
# Written in the casing the exporting systems use; normalized at build time.
# Each canonical column is also an alias of itself, so it does not need to be
# listed here.

HEADER_VARIANTS: dict[str, str] = {
    # Chamado
    "Nº Chamado":                      "Chamado",
    "Numero Chamado":                  "Chamado",
    "Número do Chamado":               "Chamado",
    "Cod Chamado":                     "Chamado",
    "Código do Chamado":               "Chamado",
    "ID Chamado":                      "Chamado",
    "OS":                              "Chamado",
    "Nº OS":                           "Chamado",
    "Numero OS":                       "Chamado",
    "Ordem de Serviço":                "Chamado",
    "Ticket":                          "Chamado",
    # Numero Referencia
    "Número de Referência":            "Numero Referencia",
    "Num Referencia":                  "Numero Referencia",
    "Nº Referência":                   "Numero Referencia",
    "Referência":                      "Numero Referencia",
    "Ref":                             "Numero Referencia",
    "Num Ref":                         "Numero Referencia",
    "Numero Ref":                      "Numero Referencia",
    "Cod Referencia":                  "Numero Referencia",
    # Contratante
    "Empresa Contratante":             "Contratante",
    "Nome Contratante":                "Contratante",
    # Serviço
    "Grupo Serviço":                   "Serviço",
    "Tipo Serviço":                    "Serviço",
    "Tipo de Serviço":                 "Serviço",
    "Descrição Serviço":               "Serviço",
    "Serviços":                        "Serviço",
    # Status
    "Status Contratante":              "Status",
    "Status Chamado":                  "Status",
    "Status OS":                       "Status",
    "Situação":                        "Status",
    # Data Limite
    "Dt Limite":                       "Data Limite",
    "Data Limite Atendimento":         "Data Limite",
    "Prazo":                           "Data Limite",
    "Data Prazo":                      "Data Limite",
    "Prazo Limite":                    "Data Limite",
    "SLA":                             "Data Limite",
    "Data SLA":                        "Data Limite",
    "Vencimento":                      "Data Limite",
    "Data Vencimento":                 "Data Limite",
    # Cliente
    "Nome Cliente":                    "Cliente",
    "Nome do Cliente":                 "Cliente",
    "Cliente Final":                   "Cliente",
    "Razão Social":                    "Cliente",
    "Nome Fantasia":                   "Cliente",
    "Estabelecimento":                 "Cliente",
    # CNPJ / CPF
    "CPF / CNPJ":                      "CNPJ / CPF",
    "CNPJ":                            "CNPJ / CPF",
    "CPF":                             "CNPJ / CPF",
    "CNPJ Cliente":                    "CNPJ / CPF",
    "CPF Cliente":                     "CNPJ / CPF",
    "Documento":                       "CNPJ / CPF",
    "Doc Cliente":                     "CNPJ / CPF",
    # Cidade
    "Município":                       "Cidade",
    "Cidade Cliente":                  "Cidade",
    "Localidade":                      "Cidade",
    # Técnico
    "Nome Técnico":                    "Técnico",
    "Técnico Responsável":             "Técnico",
    "Técnico de Campo":                "Técnico",
    "Responsável Técnico":             "Técnico",
    # Prestador
    "Prestador Responsável":           "Prestador",
    "Nome Prestador":                  "Prestador",
    "Prestadora":                      "Prestador",
    "Empresa Prestadora":              "Prestador",
    "Fornecedor":                      "Prestador",
    "Parceiro":                        "Prestador",
    # Justificativa do Abono
    "Justificativa Abono":             "Justificativa do Abono",
    "Justificativa":                   "Justificativa do Abono",
    "Motivo Abono":                    "Justificativa do Abono",
    "Motivo do Abono":                 "Justificativa do Abono",
    "Abono":                           "Justificativa do Abono",
    "Observação Abono":                "Justificativa do Abono",
}


def normalize_header(raw: str) -> str:
    """Strip diacritics and non-alphanumerics, uppercase."""
    return _NON_ALNUM.sub("", unidecode(raw)).upper()


def build_alias_lookup(
    columns: Sequence[str], variants: Mapping[str, str]
) -> Mapping[str, str]:
    """
    Merge the canonical names and their variants into a flat, read-only lookup
    keyed by normalized variant.

    Raises ValueError when a variant targets an unknown column, or when one
    normalized variant would map to two different columns.
    """
    lookup: Dict[str, str] = {}

    def add(variant: str, column: str) -> None:
        key = normalize_header(variant)
        existing = lookup.get(key)
        if existing is not None and existing != column:
            raise ValueError(
                f"Alias conflict: variant '{variant}' (normalized: '{key}') maps to "
                f"'{column}' but was already mapped to '{existing}'"
            )
        lookup[key] = column

    for column in columns:
        add(column, column)

    for variant, column in variants.items():
        if column not in columns:
            raise ValueError(f"Variant '{variant}' maps to unknown column '{column}'")
        add(variant, column)

    return MappingProxyType(lookup)


# ---------------------------------------------------------------------------
# Matching rules
# ---------------------------------------------------------------------------


def _exact_match(column: str, headers: Iterable[str]) -> Optional[str]:
    for header in headers:
        if header == column:
            return header
    return None


def _alias_match(
    column: str,
    headers: Iterable[str],
    normalized: Mapping[str, str],
    aliases: Mapping[str, str],
) -> Optional[str]:
    for header in headers:
        if aliases.get(normalized[header]) == column:
            return header
    return None


def _fuzzy_match(
    column: str,
    headers: Iterable[str],
    normalized: Mapping[str, str],
    min_length: int,
) -> Optional[str]:
    target = normalize_header(column)
    for header in headers:
        candidate = normalized[header]
        if not candidate:
            continue
        if len(target) >= min_length and target in candidate:
            return header
        if len(candidate) >= min_length and candidate in target:
            return header
    return None


def reconcile_headers(
    headers: Sequence[str], config: "ImportConfig"
) -> Dict[str, Optional[str]]:
    """
    Map every canonical column to the raw header that supplies it.

    Args:
        headers: Raw header strings in file column order.
        config: Import configuration holding the schema and alias table.

    Returns:
        {canonical_column: raw_header or None}, in schema order.
    """
    # dedupe, keep file order, ignore unnamed columns
    candidates: List[str] = [h for h in dict.fromkeys(headers) if h]
    normalized = {h: normalize_header(h) for h in candidates}

    mapping: Dict[str, Optional[str]] = {}
    for column in config.columns:
        mapping[column] = (
            _exact_match(column, candidates)
            or _alias_match(column, candidates, normalized, config.aliases)
            or _fuzzy_match(
                column, candidates, normalized, config.min_fuzzy_length
            )
        )
        if mapping[column] is None:
            logger.debug("No header found for column '%s'", column)
    return mapping


def unmatched_headers(
    headers: Sequence[str], mapping: Mapping[str, Optional[str]]
) -> List[str]:
    """Raw headers that no canonical column draws from."""
    used = {h for h in mapping.values() if h is not None}
    return [h for h in dict.fromkeys(headers) if h and h not in used]
