"""
CSV Utilities

Common functions for reading and writing CSV files and in-memory CSV payloads.

Quoting follows the minimal rule: a field is wrapped in double quotes only when
it contains a comma, a double quote or a line break, and inner quotes are doubled.
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

CSV_CONTENT_TYPE = "text/csv"


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields.

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def format_csv_value(value: Any) -> str:
    """Render a Python value as CSV cell text (None -> '', bool -> TRUE/FALSE)."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    return str(value)


def rows_to_csv(
    rows: Iterable[Dict[str, Any]],
    fieldnames: List[str],
) -> str:
    """
    Serialize row dictionaries to CSV text under one header line.

    Args:
        rows: Row dictionaries keyed by column name (missing keys are blank)
        fieldnames: Column names, in output order

    Returns:
        CSV text with '\\n' line endings
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=fieldnames,
        restval='',
        lineterminator='\n',
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writeheader()

    for row in rows:
        writer.writerow({key: format_csv_value(value) for key, value in row.items()})

    return buffer.getvalue()


def read_csv(file_path: str | Path, encoding: str = 'utf-8') -> Iterator[Dict[str, str]]:
    """
    Read CSV file and yield rows as dictionaries.

    Args:
        file_path: Path to CSV file
        encoding: File encoding (default: utf-8)

    Yields:
        Dictionary for each row with column names as keys
    """
    with open(file_path, 'r', encoding=encoding, newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            yield row


def write_csv(
    file_path: str | Path,
    rows: List[Dict[str, Any]],
    fieldnames: Optional[List[str]] = None,
    encoding: str = 'utf-8'
) -> int:
    """
    Write rows to CSV file.

    Args:
        file_path: Path to output CSV file
        rows: List of dictionaries to write
        fieldnames: Column names (if None, uses keys from first row)
        encoding: File encoding (default: utf-8)

    Returns:
        Number of rows written
    """
    if fieldnames is None:
        if not rows:
            return 0
        fieldnames = list(rows[0].keys())

    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w', encoding=encoding, newline='') as f:
        f.write(rows_to_csv(rows, fieldnames))

    return len(rows)


def csv_filename(name: str, on: Optional[date] = None) -> str:
    """
    Build a dated download filename, e.g. products_export_2024-05-01.csv.

    Args:
        name: Filename stem
        on: Date to stamp (default: today)
    """
    on = on or date.today()
    return f"{name}_{on.isoformat()}.csv"


def attachment_headers(filename: str) -> Dict[str, str]:
    """Response headers for a CSV file download."""
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


# Initialize CSV configuration on module import
configure_csv()
