"""Byte decoding for uploaded exports and report output."""

import io
from pathlib import Path

import pandas as pd
from rich.console import Console

from raiseplanner.utils.types import RawRow

type FilePath = str | Path

console = Console()

DEFAULT_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1", "cp1252")


def file_extension(file_name: str) -> str:
    """Lowercased text after the last dot, or the whole lowercased name."""
    return file_name.rsplit(".", 1)[-1].strip().lower()


def _normalize_header(header) -> str:
    return str(header).strip().lower()


def _is_usable_header(header: str) -> bool:
    return header != "" and header != "nan" and not header.startswith("unnamed:")


def _frame_to_rows(frame: pd.DataFrame) -> list[RawRow]:
    """Turn a string-typed frame into trimmed header->value rows, dropping blank rows."""
    frame = frame.copy()
    frame.columns = [_normalize_header(col) for col in frame.columns]
    frame = frame.loc[:, [_is_usable_header(col) for col in frame.columns]]
    if frame.columns.empty:
        return []

    frame = frame.fillna("").astype(str).apply(lambda col: col.str.strip())
    blank = (frame == "").all(axis=1)
    return frame[~blank].to_dict(orient="records")


def read_csv_bytes(content: bytes, encodings: tuple[str, ...] = DEFAULT_ENCODINGS) -> list[RawRow]:
    """Decode delimited text, trying each encoding in turn."""
    for encoding in encodings:
        try:
            frame = pd.read_csv(
                io.BytesIO(content),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding=encoding,
            )
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError:
            return []
        except pd.errors.ParserError as exc:
            raise ValueError(f"CSV parsing error: {exc}") from exc
        return _frame_to_rows(frame)
    raise ValueError(f"CSV parsing error: could not decode text with any of {', '.join(encodings)}")


def read_excel_bytes(content: bytes, extension: str) -> list[RawRow]:
    """Decode the first worksheet of a spreadsheet.

    The header-keyed decode is preferred; when it yields nothing (for
    example a sheet whose header sits below blank rows) the sheet is read
    positionally and the first non-blank row is zipped as the header.
    """
    match extension:
        case "xlsx":
            engine = "openpyxl"
        case "xls":
            engine = "xlrd"
        case ext:
            raise ValueError(f"Unsupported Excel format: {ext}")

    keyed = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=str, engine=engine)
    rows = _frame_to_rows(keyed)
    if rows:
        return rows

    grid = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=str, engine=engine)
    grid = grid.fillna("").astype(str).apply(lambda col: col.str.strip())
    grid = grid[~(grid == "").all(axis=1)]
    if grid.empty:
        raise ValueError("Worksheet is empty")
    if len(grid) == 1:
        raise ValueError("Worksheet contains only headers, no data rows")

    headers = [_normalize_header(cell) for cell in grid.iloc[0]]
    body = grid.iloc[1:].copy()
    body.columns = headers
    return _frame_to_rows(body)


def decode_rows(
    file_name: str,
    content: bytes,
    encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
) -> list[RawRow]:
    """Decode uploaded bytes into rows keyed by lowercase header."""
    match file_extension(file_name):
        case "csv":
            return read_csv_bytes(content, encodings)
        case "xlsx" | "xls" as ext:
            return read_excel_bytes(content, ext)
        case ext:
            raise ValueError(f"Unsupported file type: {ext}. Please use CSV, XLSX, or XLS files.")


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> None:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "excel":
            df.to_excel(path, index=False)
        case "json":
            df.to_json(path, orient="records", indent=2)
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")
