"""
In-memory input table.

A Table is an ordered list of column names plus rectangular rows of
string-or-None cells. It is validated once at construction so that every
stage can rely on its shape.
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .exceptions import InputValidationError


def is_blank(value: Optional[str]) -> bool:
    """Return True for None or whitespace-only values."""
    return value is None or (isinstance(value, str) and value.strip() == "")


class Table:
    """Validated, immutable columnar view of raw tabular data."""

    def __init__(self, name: str, headers: Sequence[str], rows: Sequence[Sequence[Optional[str]]]):
        """Initialize and validate a table.

        Args:
            name: Table name used for generated object names
            headers: Ordered column names
            rows: Rows with one cell per header

        Raises:
            InputValidationError: When the table is missing, empty or not rectangular
        """
        if not name or not str(name).strip():
            raise InputValidationError("Table name must not be empty")
        if not headers:
            raise InputValidationError(f"Table '{name}' has no columns")

        headers = [str(h) if h is not None else "" for h in headers]
        blank = [i for i, h in enumerate(headers) if not h.strip()]
        if blank:
            raise InputValidationError(f"Table '{name}' has blank column names at positions {blank}")

        seen = set()
        duplicates = sorted({h for h in headers if h in seen or seen.add(h)})
        if duplicates:
            raise InputValidationError(f"Table '{name}' has duplicate column names: {duplicates}")

        if rows is None or len(rows) == 0:
            raise InputValidationError(f"Table '{name}' has no rows")

        width = len(headers)
        for index, row in enumerate(rows):
            if len(row) != width:
                raise InputValidationError(
                    f"Table '{name}' row {index} has {len(row)} cells, expected {width}"
                )

        self._name = str(name)
        self._headers = tuple(headers)
        self._rows = tuple(
            tuple(None if is_blank(cell) else str(cell) for cell in row)
            for row in rows
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def headers(self) -> List[str]:
        return list(self._headers)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[List[Optional[str]]]:
        return [list(row) for row in self._rows]

    def column(self, name: str) -> List[Optional[str]]:
        """Return the cells of one column, blanks as None."""
        try:
            index = self._headers.index(name)
        except ValueError:
            raise KeyError(f"Unknown column '{name}' in table '{self._name}'")
        return [row[index] for row in self._rows]

    def columns(self) -> Dict[str, List[Optional[str]]]:
        """Return all columns keyed by name, in header order."""
        return {name: [row[i] for row in self._rows] for i, name in enumerate(self._headers)}

    def to_dataframe(self) -> pd.DataFrame:
        """Return the table as an object-dtype DataFrame with blanks as None."""
        return pd.DataFrame(list(self._rows), columns=list(self._headers), dtype=object)

    @classmethod
    def from_dataframe(cls, name: str, df: pd.DataFrame) -> "Table":
        """Build a table from a DataFrame, stringifying non-null cells."""
        rows = [
            [None if pd.isna(value) else str(value) for value in record]
            for record in df.itertuples(index=False, name=None)
        ]
        return cls(name, [str(c) for c in df.columns], rows)

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, columns={len(self._headers)}, rows={len(self._rows)})"
