"""CSV tokenisation for uploaded trade files."""
from __future__ import annotations

import io
from typing import IO, Dict, List, Union

import pandas as pd

from .errors import CsvFormatError

CsvSource = Union[bytes, str, IO[bytes], IO[str]]


def _as_text_buffer(source: CsvSource) -> io.StringIO:
    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    elif isinstance(source, str):
        return io.StringIO(source)
    else:
        raw = source.read()
        if isinstance(raw, str):
            return io.StringIO(raw)
    try:
        return io.StringIO(raw.decode("utf-8-sig"))
    except UnicodeDecodeError as exc:
        raise CsvFormatError("File is not valid UTF-8 text") from exc


def read_trade_rows(source: CsvSource) -> List[Dict[str, str]]:
    """Parse a header-first CSV into one dict per non-blank line.

    Every cell is kept as a string; empty cells become ``""`` so the validator
    sees them as missing. Extra columns are passed through untouched.
    """

    buffer = _as_text_buffer(source)
    if not buffer.getvalue().strip():
        return []
    try:
        frame = pd.read_csv(
            buffer,
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise CsvFormatError(f"Could not parse CSV: {exc}") from exc

    # Short rows are padded with NaN regardless of keep_default_na.
    frame = frame.fillna("")
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame.to_dict(orient="records")


__all__ = ["CsvSource", "read_trade_rows"]
