"""
Text utilities for handling Spanish text with accents.

Used for CSV cell cleanup and label lookups.
"""

import unicodedata
from typing import Optional


def clean_cell(value: Optional[str]) -> Optional[str]:
    """
    Clean a raw CSV cell.

    - Strips whitespace
    - Returns None for missing, empty or whitespace-only cells

    Args:
        value: Raw cell value (may be None when the column is absent)

    Returns:
        Stripped string or None
    """
    if value is None:
        return None

    value = str(value).strip()
    return value or None


def normalize_label(label: Optional[str]) -> Optional[str]:
    """
    Normalize a free-text label for table lookups.

    Handles Spanish accents, case and stray spaces:
    - "Departamento" → "DEPARTAMENTO"
    - "  no   disponible " → "NO DISPONIBLE"
    - "Oficína" → "OFICINA"

    Args:
        label: Original label (may have accents, mixed case)

    Returns:
        Normalized uppercase ASCII string, or None if input is empty
    """
    label = clean_cell(label)
    if label is None:
        return None

    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize('NFD', label)

    # Remove accent marks (combining characters in Unicode category 'Mn')
    ascii_label = ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )

    return ' '.join(ascii_label.split()).upper()
