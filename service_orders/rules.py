"""
Fixed import rules.

The frontend table is built from CANONICAL_COLUMNS; nothing else is emitted.
"""

CANONICAL_COLUMNS = (
    "Chamado",
    "Numero Referencia",
    "Contratante",
    "Serviço",
    "Status",
    "Data Limite",
    "Cliente",
    "CNPJ / CPF",
    "Cidade",
    "Técnico",
    "Prestador",
    "Justificativa do Abono",
)

NATIONAL_ID_COLUMN = "CNPJ / CPF"

# Tried in order; latin-1 decodes any byte sequence so it always comes last.
CANDIDATE_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")

CANDIDATE_DELIMITERS = (",", ";")

# Shortest normalized header allowed to take part in a substring match.
MIN_FUZZY_LENGTH = 4

UPLOAD_FIELD = "csvFile"

# Bytes handed to charset-normalizer for the logged encoding guess.
DETECT_SAMPLE_SIZE = 64 * 1024
