"""
CSV reader/writer for unit import and export.

Reads an uploaded units CSV into ordered row dicts (header label → raw
string) and writes exported units with the fixed column contract that
the importer reads back.
"""

from io import StringIO
from typing import Optional
import structlog

import pandas as pd

from exceptions import CSVParseError

logger = structlog.get_logger(__name__)


# Export column order is part of the external contract.
UNIT_CSV_COLUMNS = (
    "SKU",
    "Nombre",
    "Tipo",
    "Estado",
    "Precio",
    "Moneda",
    "Habitaciones",
    "Baños",
    "Área M²",
    "Piso",
    "Proyecto",
)

# Latin American spreadsheets are often saved as latin-1 / cp1252
ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def decode_csv(content: bytes) -> str:
    """
    Decode uploaded bytes, trying UTF-8 first.

    Raises:
        CSVParseError: If no encoding can decode the content
    """
    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise CSVParseError(
        message="Could not decode CSV file",
        details={"tried": list(ENCODINGS)}
    )


def read_unit_csv(content: bytes) -> list[dict[str, str]]:
    """
    Parse a units CSV with a header row.

    Every cell is kept as a trimmed string; missing cells become "".
    Blank lines are skipped. Rows keep file order, so row i of the
    result is line i + 2 of the file.

    Args:
        content: Raw uploaded bytes

    Returns:
        List of {header label: cell} dicts

    Raises:
        CSVParseError: If the file is empty or not a readable table
    """
    text = decode_csv(content)

    if not text.strip():
        raise CSVParseError(message="CSV file is empty")

    try:
        df = pd.read_csv(
            StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.error("csv_read_failed", error=str(e))
        raise CSVParseError(
            message="Failed to read CSV file",
            details={"original_error": str(e)}
        )

    # Short rows leave NaN in the trailing columns
    df = df.fillna("")
    df.columns = [str(col).strip() for col in df.columns]
    if not df.empty:
        df = df.apply(lambda col: col.str.strip())

    rows = df.to_dict(orient="records")

    logger.info(
        "csv_parsed",
        rows=len(rows),
        columns=list(df.columns)
    )

    return rows


def write_unit_csv(rows: list[dict[str, Optional[str]]]) -> str:
    """
    Serialize export rows with the fixed unit column set.

    Args:
        rows: Dicts keyed by UNIT_CSV_COLUMNS labels (missing keys → "")

    Returns:
        CSV text including the header line
    """
    df = pd.DataFrame(rows, columns=list(UNIT_CSV_COLUMNS)).fillna("")
    return df.to_csv(index=False)
