"""
CSV parsers module.
"""

from parsers.csv_parser import (
    read_unit_csv,
    write_unit_csv,
    UNIT_CSV_COLUMNS,
)

__all__ = [
    "read_unit_csv",
    "write_unit_csv",
    "UNIT_CSV_COLUMNS",
]
